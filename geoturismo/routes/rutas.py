"""
Geoturismo Backend — Route Routes
===================================

What:  HTTP handlers for /rutas and their point associations.
How:   Every mutation answers with the full route (points included) so the
       client sees the recomputed `duracion` immediately.

Route Inventory:
    GET    /rutas                           list (without points)
    GET    /rutas/nombre/{nombre}           partial name match
    GET    /rutas/{id}                      route with ordered points
    POST   /rutas                           create, optionally with points (201)
    PATCH  /rutas/{id}                      rename / describe
    DELETE /rutas/{id}                      delete with its associations
    POST   /rutas/{id}/puntos               add one point (incremental duration)
    POST   /rutas/{id}/puntos/lote          add several points (full recompute)
    DELETE /rutas/{id}/puntos/{punto_id}    remove one point (incremental duration)
    POST   /rutas/{id}/duracion             recompute duration from scratch
"""

from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from geoturismo.database import get_db_session
from geoturismo.schemas.common import ErrorResponse, MensajeResponse
from geoturismo.schemas.ruta import (
    RutaCreate,
    RutaDetalleResponse,
    RutaMutationResponse,
    RutaPuntoAdd,
    RutaPuntosLote,
    RutaResponse,
    RutaUpdate,
)
from geoturismo.services.ruta_service import ruta_service

router = APIRouter(prefix="/rutas", tags=["Rutas"])

NOT_FOUND = {404: {"description": "Route or point not found", "model": ErrorResponse}}
INVALID = {400: {"description": "Missing or invalid fields", "model": ErrorResponse}}
CONFLICT = {409: {"description": "Duplicate route name or point", "model": ErrorResponse}}


@router.get("", response_model=List[RutaResponse], summary="List routes")
async def list_rutas(db: AsyncSession = Depends(get_db_session)) -> List[RutaResponse]:
    return await ruta_service.list_rutas(db)


@router.get("/nombre/{nombre}", response_model=List[RutaResponse], summary="Search routes by name")
async def list_rutas_by_nombre(
    nombre: str,
    db: AsyncSession = Depends(get_db_session),
) -> List[RutaResponse]:
    return await ruta_service.list_by_nombre(db, nombre)


@router.get("/{ruta_id}", response_model=RutaDetalleResponse, responses=NOT_FOUND, summary="Get a route")
async def get_ruta(
    ruta_id: int,
    db: AsyncSession = Depends(get_db_session),
) -> RutaDetalleResponse:
    return await ruta_service.get_ruta(db, ruta_id)


@router.post(
    "",
    status_code=201,
    response_model=RutaMutationResponse,
    responses={**INVALID, **NOT_FOUND, **CONFLICT},
    summary="Create a route",
    description=(
        "Creates the route and its point associations in one transaction and "
        "computes the duration from the nearest-neighbour distances of its points."
    ),
)
async def create_ruta(
    data: RutaCreate,
    db: AsyncSession = Depends(get_db_session),
) -> RutaMutationResponse:
    ruta = await ruta_service.create_ruta(db, data)
    return RutaMutationResponse(mensaje="Ruta creada correctamente", ruta=ruta)


@router.patch(
    "/{ruta_id}",
    response_model=RutaMutationResponse,
    responses={**INVALID, **NOT_FOUND, **CONFLICT},
    summary="Update a route's name or description",
)
async def update_ruta(
    ruta_id: int,
    data: RutaUpdate,
    db: AsyncSession = Depends(get_db_session),
) -> RutaMutationResponse:
    ruta = await ruta_service.update_ruta(db, ruta_id, data)
    return RutaMutationResponse(mensaje="Ruta actualizada correctamente", ruta=ruta)


@router.delete("/{ruta_id}", response_model=MensajeResponse, responses=NOT_FOUND, summary="Delete a route")
async def delete_ruta(
    ruta_id: int,
    db: AsyncSession = Depends(get_db_session),
) -> MensajeResponse:
    await ruta_service.delete_ruta(db, ruta_id)
    return MensajeResponse(mensaje="Ruta eliminada correctamente")


@router.post(
    "/{ruta_id}/puntos",
    status_code=201,
    response_model=RutaMutationResponse,
    responses={**INVALID, **NOT_FOUND, **CONFLICT},
    summary="Add a point to a route",
)
async def add_punto(
    ruta_id: int,
    data: RutaPuntoAdd,
    db: AsyncSession = Depends(get_db_session),
) -> RutaMutationResponse:
    ruta = await ruta_service.add_punto(db, ruta_id, data.punto_id, data.orden)
    return RutaMutationResponse(mensaje="Punto añadido a la ruta", ruta=ruta)


@router.post(
    "/{ruta_id}/puntos/lote",
    status_code=201,
    response_model=RutaMutationResponse,
    responses={**INVALID, **NOT_FOUND, **CONFLICT},
    summary="Add several points to a route",
    description="All points are added or none is.",
)
async def add_puntos_lote(
    ruta_id: int,
    data: RutaPuntosLote,
    db: AsyncSession = Depends(get_db_session),
) -> RutaMutationResponse:
    ruta = await ruta_service.add_puntos_lote(db, ruta_id, data.puntos)
    return RutaMutationResponse(mensaje="Puntos añadidos a la ruta", ruta=ruta)


@router.delete(
    "/{ruta_id}/puntos/{punto_id}",
    response_model=RutaMutationResponse,
    responses=NOT_FOUND,
    summary="Remove a point from a route",
)
async def remove_punto(
    ruta_id: int,
    punto_id: int,
    db: AsyncSession = Depends(get_db_session),
) -> RutaMutationResponse:
    ruta = await ruta_service.remove_punto(db, ruta_id, punto_id)
    return RutaMutationResponse(mensaje="Punto eliminado de la ruta", ruta=ruta)


@router.post(
    "/{ruta_id}/duracion",
    response_model=RutaMutationResponse,
    responses=NOT_FOUND,
    summary="Recompute a route's duration",
)
async def recompute_duracion(
    ruta_id: int,
    db: AsyncSession = Depends(get_db_session),
) -> RutaMutationResponse:
    ruta = await ruta_service.recompute(db, ruta_id)
    return RutaMutationResponse(mensaje="Duración recalculada", ruta=ruta)
