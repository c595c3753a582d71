"""
Geoturismo Backend — Event Service
====================================

What:  CRUD and lookups for /eventos.
How:   Every read LEFT JOINs puntos_interes so each event carries its point
       (or null) in a single round trip.

Date lookup:
    GET /eventos/fecha/{fecha} returns events running that day:
        fecha_ini <= fecha <= COALESCE(fecha_fin, fecha_ini)
    A one-day event (no fecha_fin) matches only its start date.
"""

import logging
from datetime import date
from typing import List, Optional

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql import Select

from geoturismo.exceptions import NotFoundError, ValidationError
from geoturismo.models import Evento, PuntoInteres
from geoturismo.models.categoria import AMBITO_EVENTO
from geoturismo.schemas.evento import EventoCreate, EventoResponse, EventoUpdate
from geoturismo.schemas.punto import PuntoResponse
from geoturismo.services.categoria_service import categoria_service
from geoturismo.services.updates import PartialUpdate, contains_pattern

logger = logging.getLogger(__name__)

evento_update = PartialUpdate(
    Evento,
    fields=(
        "nombre", "tipo", "descripcion", "imagen",
        "fecha_ini", "fecha_fin", "enlace", "punto_id",
    ),
    projection=("id",),
    resource="evento",
)


def _to_response(evento: Evento, punto: Optional[PuntoInteres]) -> EventoResponse:
    response = EventoResponse.model_validate(evento)
    if punto is not None:
        response.punto = PuntoResponse.model_validate(punto)
    return response


class EventoService:

    def _base_query(self) -> Select:
        return (
            select(Evento, PuntoInteres)
            .outerjoin(PuntoInteres, Evento.punto_id == PuntoInteres.id)
            .order_by(Evento.id)
        )

    async def _fetch(self, db: AsyncSession, query: Select) -> List[EventoResponse]:
        result = await db.execute(query)
        return [_to_response(evento, punto) for evento, punto in result.all()]

    async def _ensure_punto(self, db: AsyncSession, punto_id: Optional[int]) -> None:
        if punto_id is not None and await db.get(PuntoInteres, punto_id) is None:
            raise NotFoundError(resource="punto", resource_id=punto_id)

    async def list_eventos(self, db: AsyncSession) -> List[EventoResponse]:
        return await self._fetch(db, self._base_query())

    async def get_evento(self, db: AsyncSession, evento_id: int) -> EventoResponse:
        eventos = await self._fetch(db, self._base_query().where(Evento.id == evento_id))
        if not eventos:
            raise NotFoundError(resource="evento", resource_id=evento_id)
        return eventos[0]

    async def list_by_tipo(self, db: AsyncSession, tipo: str) -> List[EventoResponse]:
        return await self._fetch(
            db, self._base_query().where(Evento.tipo == tipo.strip().lower())
        )

    async def list_by_nombre(self, db: AsyncSession, nombre: str) -> List[EventoResponse]:
        return await self._fetch(
            db,
            self._base_query().where(
                Evento.nombre.ilike(contains_pattern(nombre), escape="\\")
            ),
        )

    async def list_by_fecha(self, db: AsyncSession, fecha: date) -> List[EventoResponse]:
        return await self._fetch(
            db,
            self._base_query().where(
                Evento.fecha_ini <= fecha,
                func.coalesce(Evento.fecha_fin, Evento.fecha_ini) >= fecha,
            ),
        )

    async def list_by_punto(self, db: AsyncSession, punto_id: int) -> List[EventoResponse]:
        await self._ensure_punto(db, punto_id)
        return await self._fetch(db, self._base_query().where(Evento.punto_id == punto_id))

    async def create_evento(self, db: AsyncSession, data: EventoCreate) -> EventoResponse:
        """
        Raises:
            ValidationError: unregistered category
            NotFoundError:   punto_id given but no such point
        """
        await categoria_service.ensure_categoria(db, data.tipo, AMBITO_EVENTO)
        await self._ensure_punto(db, data.punto_id)

        evento = Evento(**data.model_dump())
        db.add(evento)
        await db.flush()
        logger.info("Event created: %s '%s' on %s", evento.id, evento.nombre, evento.fecha_ini)
        return await self.get_evento(db, evento.id)

    async def update_evento(
        self, db: AsyncSession, evento_id: int, data: EventoUpdate
    ) -> EventoResponse:
        """
        Partial update. The resulting pair of dates is checked against the
        stored row, so moving only one end of the range is still validated.
        """
        changes = data.model_dump(exclude_unset=True)
        evento_update.values(changes)

        evento = await db.get(Evento, evento_id)
        if evento is None:
            raise NotFoundError(resource="evento", resource_id=evento_id)

        if changes.get("tipo") is not None:
            await categoria_service.ensure_categoria(db, changes["tipo"], AMBITO_EVENTO)
        if "punto_id" in changes:
            await self._ensure_punto(db, changes["punto_id"])

        fecha_ini = changes.get("fecha_ini", evento.fecha_ini)
        fecha_fin = changes.get("fecha_fin", evento.fecha_fin)
        if fecha_ini is not None and fecha_fin is not None and fecha_fin < fecha_ini:
            raise ValidationError(
                "fecha_fin no puede ser anterior a fecha_ini", field="fecha_fin"
            )

        await evento_update.execute(db, evento_id, changes)
        return await self.get_evento(db, evento_id)

    async def delete_evento(self, db: AsyncSession, evento_id: int) -> None:
        evento = await db.get(Evento, evento_id)
        if evento is None:
            raise NotFoundError(resource="evento", resource_id=evento_id)
        await db.delete(evento)
        await db.flush()
        logger.info("Event deleted: %s", evento_id)


evento_service = EventoService()
