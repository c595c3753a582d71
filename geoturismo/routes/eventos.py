"""
Geoturismo Backend — Event Routes
===================================

What:  HTTP handlers for /eventos. Every event is returned with its point
       embedded as `punto` (null when the event is not tied to one).

Route Inventory:
    GET    /eventos                      list
    GET    /eventos/tipo/{tipo}          by category
    GET    /eventos/nombre/{nombre}      partial name match
    GET    /eventos/fecha/{YYYY-MM-DD}   events running that day
    GET    /eventos/punto/{punto_id}     events held at a point
    GET    /eventos/{id}                 one event
    POST   /eventos                      create (201)
    PATCH  /eventos/{id}                 partial update
    DELETE /eventos/{id}                 delete
"""

from datetime import date
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from geoturismo.database import get_db_session
from geoturismo.schemas.common import ErrorResponse, MensajeResponse
from geoturismo.schemas.evento import (
    EventoCreate,
    EventoMutationResponse,
    EventoResponse,
    EventoUpdate,
)
from geoturismo.services.evento_service import evento_service

router = APIRouter(prefix="/eventos", tags=["Eventos"])

NOT_FOUND = {404: {"description": "Event or point not found", "model": ErrorResponse}}
INVALID = {400: {"description": "Missing or invalid fields", "model": ErrorResponse}}


@router.get("", response_model=List[EventoResponse], summary="List events")
async def list_eventos(db: AsyncSession = Depends(get_db_session)) -> List[EventoResponse]:
    return await evento_service.list_eventos(db)


@router.get("/tipo/{tipo}", response_model=List[EventoResponse], summary="List events by category")
async def list_eventos_by_tipo(
    tipo: str,
    db: AsyncSession = Depends(get_db_session),
) -> List[EventoResponse]:
    return await evento_service.list_by_tipo(db, tipo)


@router.get("/nombre/{nombre}", response_model=List[EventoResponse], summary="Search events by name")
async def list_eventos_by_nombre(
    nombre: str,
    db: AsyncSession = Depends(get_db_session),
) -> List[EventoResponse]:
    return await evento_service.list_by_nombre(db, nombre)


@router.get(
    "/fecha/{fecha}",
    response_model=List[EventoResponse],
    responses=INVALID,
    summary="List events running on a date",
)
async def list_eventos_by_fecha(
    fecha: date,
    db: AsyncSession = Depends(get_db_session),
) -> List[EventoResponse]:
    return await evento_service.list_by_fecha(db, fecha)


@router.get(
    "/punto/{punto_id}",
    response_model=List[EventoResponse],
    responses=NOT_FOUND,
    summary="List events held at a point",
)
async def list_eventos_by_punto(
    punto_id: int,
    db: AsyncSession = Depends(get_db_session),
) -> List[EventoResponse]:
    return await evento_service.list_by_punto(db, punto_id)


@router.get("/{evento_id}", response_model=EventoResponse, responses=NOT_FOUND, summary="Get an event")
async def get_evento(
    evento_id: int,
    db: AsyncSession = Depends(get_db_session),
) -> EventoResponse:
    return await evento_service.get_evento(db, evento_id)


@router.post(
    "",
    status_code=201,
    response_model=EventoMutationResponse,
    responses={**INVALID, **NOT_FOUND},
    summary="Create an event",
)
async def create_evento(
    data: EventoCreate,
    db: AsyncSession = Depends(get_db_session),
) -> EventoMutationResponse:
    evento = await evento_service.create_evento(db, data)
    return EventoMutationResponse(mensaje="Evento añadido correctamente", evento=evento)


@router.patch(
    "/{evento_id}",
    response_model=EventoMutationResponse,
    responses={**INVALID, **NOT_FOUND},
    summary="Update some fields of an event",
)
async def update_evento(
    evento_id: int,
    data: EventoUpdate,
    db: AsyncSession = Depends(get_db_session),
) -> EventoMutationResponse:
    evento = await evento_service.update_evento(db, evento_id, data)
    return EventoMutationResponse(mensaje="Evento actualizado correctamente", evento=evento)


@router.delete("/{evento_id}", response_model=MensajeResponse, responses=NOT_FOUND, summary="Delete an event")
async def delete_evento(
    evento_id: int,
    db: AsyncSession = Depends(get_db_session),
) -> MensajeResponse:
    await evento_service.delete_evento(db, evento_id)
    return MensajeResponse(mensaje="Evento eliminado correctamente")
