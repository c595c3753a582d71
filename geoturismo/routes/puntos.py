"""
Geoturismo Backend — Points of Interest Routes
================================================

What:  HTTP handlers for /puntos.
How:   Extract path/query/body, delegate to PuntoService, wrap mutations in
       {"mensaje": ..., "punto": ...}. Errors raised by the service are
       translated by the global handler in main.py.

Route Inventory:
    GET    /puntos                     list all points
    GET    /puntos/tipos?tipo=a&tipo=b points in any of several categories
    GET    /puntos/tipo/{tipo}         points in one category
    GET    /puntos/nombre/{nombre}     partial, case-insensitive name match
    GET    /puntos/{id}                one point
    POST   /puntos                     create (201)
    PATCH  /puntos/{id}                partial update
    DELETE /puntos/{id}                delete with referential cleanup
"""

from typing import List

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from geoturismo.database import get_db_session
from geoturismo.schemas.common import ErrorResponse, MensajeResponse
from geoturismo.schemas.punto import (
    PuntoCreate,
    PuntoMutationResponse,
    PuntoResponse,
    PuntoUpdate,
)
from geoturismo.services.punto_service import punto_service

router = APIRouter(prefix="/puntos", tags=["Puntos"])

NOT_FOUND = {404: {"description": "Point not found", "model": ErrorResponse}}
INVALID = {400: {"description": "Missing or invalid fields", "model": ErrorResponse}}


@router.get("", response_model=List[PuntoResponse], summary="List points of interest")
async def list_puntos(db: AsyncSession = Depends(get_db_session)) -> List[PuntoResponse]:
    return await punto_service.list_puntos(db)


@router.get(
    "/tipos",
    response_model=List[PuntoResponse],
    responses=INVALID,
    summary="List points in any of several categories",
)
async def list_puntos_by_tipos(
    tipo: List[str] = Query(default=[], description="Repeat the parameter for each category"),
    db: AsyncSession = Depends(get_db_session),
) -> List[PuntoResponse]:
    return await punto_service.list_by_tipos(db, tipo)


@router.get("/tipo/{tipo}", response_model=List[PuntoResponse], summary="List points by category")
async def list_puntos_by_tipo(
    tipo: str,
    db: AsyncSession = Depends(get_db_session),
) -> List[PuntoResponse]:
    return await punto_service.list_by_tipos(db, [tipo])


@router.get(
    "/nombre/{nombre}",
    response_model=List[PuntoResponse],
    summary="Search points by name",
)
async def list_puntos_by_nombre(
    nombre: str,
    db: AsyncSession = Depends(get_db_session),
) -> List[PuntoResponse]:
    return await punto_service.list_by_nombre(db, nombre)


@router.get("/{punto_id}", response_model=PuntoResponse, responses=NOT_FOUND, summary="Get a point")
async def get_punto(
    punto_id: int,
    db: AsyncSession = Depends(get_db_session),
) -> PuntoResponse:
    return await punto_service.get_punto(db, punto_id)


@router.post(
    "",
    status_code=201,
    response_model=PuntoMutationResponse,
    responses=INVALID,
    summary="Create a point of interest",
)
async def create_punto(
    data: PuntoCreate,
    db: AsyncSession = Depends(get_db_session),
) -> PuntoMutationResponse:
    punto = await punto_service.create_punto(db, data)
    return PuntoMutationResponse(mensaje="Punto de interés añadido correctamente", punto=punto)


@router.patch(
    "/{punto_id}",
    response_model=PuntoMutationResponse,
    responses={**INVALID, **NOT_FOUND},
    summary="Update some fields of a point",
    description=(
        "Only the fields present in the body are written. Moving a point "
        "recomputes the duration of every route that contains it."
    ),
)
async def update_punto(
    punto_id: int,
    data: PuntoUpdate,
    db: AsyncSession = Depends(get_db_session),
) -> PuntoMutationResponse:
    punto = await punto_service.update_punto(db, punto_id, data)
    return PuntoMutationResponse(mensaje="Punto de interés actualizado correctamente", punto=punto)


@router.delete(
    "/{punto_id}",
    response_model=MensajeResponse,
    responses=NOT_FOUND,
    summary="Delete a point",
    description=(
        "Detaches the point from its events and routes, deletes it, and "
        "recomputes the duration of the routes it belonged to."
    ),
)
async def delete_punto(
    punto_id: int,
    db: AsyncSession = Depends(get_db_session),
) -> MensajeResponse:
    await punto_service.delete_punto(db, punto_id)
    return MensajeResponse(mensaje="Punto de interés eliminado correctamente")
