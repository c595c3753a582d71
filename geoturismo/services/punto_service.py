"""
Geoturismo Backend — Point of Interest Service
================================================

What:  CRUD and lookups for /puntos.
How:   Reads are single SELECTs; writes validate the category first and,
       where coordinates or membership change, ask RutaService to recompute
       the durations of the affected routes inside the same transaction.

Deletion order (referential cleanup is done here, not by FK cascades):
    1. eventos.punto_id → NULL for events held at the point
    2. rutas_puntos rows referencing the point → deleted
    3. puntos_interes row → deleted
    4. durations of the routes that lost the point → recomputed
"""

import logging
from typing import List, Sequence

from sqlalchemy import delete, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from geoturismo.exceptions import NotFoundError, ValidationError
from geoturismo.models import Evento, PuntoInteres, RutaPunto
from geoturismo.models.categoria import AMBITO_PUNTO
from geoturismo.schemas.punto import PuntoCreate, PuntoResponse, PuntoUpdate
from geoturismo.services.categoria_service import categoria_service
from geoturismo.services.ruta_service import ruta_service
from geoturismo.services.updates import PartialUpdate, contains_pattern

logger = logging.getLogger(__name__)

PUNTO_COLUMNS = ("id", "nombre", "tipo", "latitud", "longitud", "descripcion", "imagen")

punto_update = PartialUpdate(
    PuntoInteres,
    fields=("nombre", "tipo", "latitud", "longitud", "descripcion", "imagen"),
    projection=PUNTO_COLUMNS,
    resource="punto",
)


class PuntoService:

    async def list_puntos(self, db: AsyncSession) -> List[PuntoResponse]:
        result = await db.execute(select(PuntoInteres).order_by(PuntoInteres.id))
        return [PuntoResponse.model_validate(p) for p in result.scalars().all()]

    async def get_punto(self, db: AsyncSession, punto_id: int) -> PuntoResponse:
        punto = await db.get(PuntoInteres, punto_id)
        if punto is None:
            raise NotFoundError(resource="punto", resource_id=punto_id)
        return PuntoResponse.model_validate(punto)

    async def list_by_tipos(self, db: AsyncSession, tipos: Sequence[str]) -> List[PuntoResponse]:
        """Points whose category is any of `tipos`."""
        labels = sorted({t.strip().lower() for t in tipos if t and t.strip()})
        if not labels:
            raise ValidationError("Debe indicar al menos un tipo", field="tipo")
        result = await db.execute(
            select(PuntoInteres)
            .where(PuntoInteres.tipo.in_(labels))
            .order_by(PuntoInteres.id)
        )
        return [PuntoResponse.model_validate(p) for p in result.scalars().all()]

    async def list_by_nombre(self, db: AsyncSession, nombre: str) -> List[PuntoResponse]:
        result = await db.execute(
            select(PuntoInteres)
            .where(PuntoInteres.nombre.ilike(contains_pattern(nombre), escape="\\"))
            .order_by(PuntoInteres.id)
        )
        return [PuntoResponse.model_validate(p) for p in result.scalars().all()]

    async def create_punto(self, db: AsyncSession, data: PuntoCreate) -> PuntoResponse:
        await categoria_service.ensure_categoria(db, data.tipo, AMBITO_PUNTO)

        punto = PuntoInteres(**data.model_dump())
        db.add(punto)
        await db.flush()
        logger.info("Point created: %s '%s' (%s)", punto.id, punto.nombre, punto.tipo)
        return PuntoResponse.model_validate(punto)

    async def update_punto(
        self, db: AsyncSession, punto_id: int, data: PuntoUpdate
    ) -> PuntoResponse:
        """
        Partial update; moving a point recomputes every route that holds it.

        Raises:
            ValidationError: no field supplied, null for a required column,
                             or an unregistered category
            NotFoundError:   no point with this id
        """
        changes = data.model_dump(exclude_unset=True)
        punto_update.values(changes)
        if changes.get("tipo") is not None:
            await categoria_service.ensure_categoria(db, changes["tipo"], AMBITO_PUNTO)

        row = await punto_update.execute(db, punto_id, changes)

        if "latitud" in changes or "longitud" in changes:
            await ruta_service.recompute_rutas(
                db, await ruta_service.rutas_con_punto(db, punto_id)
            )
        return PuntoResponse.model_validate(row)

    async def delete_punto(self, db: AsyncSession, punto_id: int) -> None:
        punto = await db.get(PuntoInteres, punto_id)
        if punto is None:
            raise NotFoundError(resource="punto", resource_id=punto_id)

        affected_routes = await ruta_service.rutas_con_punto(db, punto_id)

        await db.execute(
            update(Evento).where(Evento.punto_id == punto_id).values(punto_id=None)
        )
        await db.execute(delete(RutaPunto).where(RutaPunto.punto_id == punto_id))
        await db.delete(punto)
        await db.flush()

        await ruta_service.recompute_rutas(db, affected_routes)
        logger.info(
            "Point deleted: %s (detached from %d routes)", punto_id, len(affected_routes)
        )


punto_service = PuntoService()
