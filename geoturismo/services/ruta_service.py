"""
Geoturismo Backend — Route Service
====================================

What:  CRUD for routes, their point associations, and the derived
       `duracion` estimate.
How:   Every operation runs inside the request's single transaction (see
       Database.session). Multi-statement writes (route + associations,
       bulk association inserts) therefore commit or roll back together.

Duration maintenance:
    create / bulk add / explicit recompute / point moved or deleted
        → full nearest-neighbour recomputation
    single point added   → stored value + added_minutes(new, existing)
    single point removed → apply_removal(stored, removed_minutes(old, remaining))
"""

import logging
from collections import Counter
from typing import Dict, Iterable, List, Optional, Sequence

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from geoturismo.exceptions import ConflictError, NotFoundError, ValidationError
from geoturismo.models import PuntoInteres, Ruta, RutaPunto
from geoturismo.schemas.ruta import (
    RutaCreate,
    RutaDetalleResponse,
    RutaPuntoResponse,
    RutaResponse,
    RutaUpdate,
)
from geoturismo.services import duration
from geoturismo.services.updates import PartialUpdate, contains_pattern, flush_or_conflict

logger = logging.getLogger(__name__)

ruta_update = PartialUpdate(
    Ruta,
    fields=("nombre", "descripcion"),
    projection=("id", "nombre", "descripcion", "fecha_creacion", "duracion"),
    resource="ruta",
)


def _check_no_duplicates(ids: Sequence[int]) -> None:
    repeated = sorted(i for i, count in Counter(ids).items() if count > 1)
    if repeated:
        raise ValidationError(
            "La lista de puntos contiene ids repetidos",
            field="puntos",
            context={"repetidos": repeated},
        )


class RutaService:
    """
    Business logic for /rutas.

    Responsibilities:
        - CRUD on routes with the application-level name uniqueness check
        - Point association management (single, bulk, removal)
        - Keeping `duracion` consistent with the associated points
    """

    # ── Queries ───────────────────────────────────────────────────────────

    async def _get_ruta(self, db: AsyncSession, ruta_id: int) -> Ruta:
        ruta = await db.get(Ruta, ruta_id)
        if ruta is None:
            raise NotFoundError(resource="ruta", resource_id=ruta_id)
        return ruta

    async def _puntos_de_ruta(self, db: AsyncSession, ruta_id: int) -> List[RutaPuntoResponse]:
        result = await db.execute(
            select(PuntoInteres, RutaPunto.orden)
            .join(RutaPunto, RutaPunto.punto_id == PuntoInteres.id)
            .where(RutaPunto.ruta_id == ruta_id)
            .order_by(RutaPunto.orden.is_(None), RutaPunto.orden, RutaPunto.id)
        )
        puntos = []
        for punto, orden in result.all():
            item = RutaPuntoResponse.model_validate(punto)
            item.orden = orden
            puntos.append(item)
        return puntos

    async def _coordenadas(self, db: AsyncSession, ruta_id: int) -> List[duration.Coordenada]:
        result = await db.execute(
            select(PuntoInteres.latitud, PuntoInteres.longitud)
            .join(RutaPunto, RutaPunto.punto_id == PuntoInteres.id)
            .where(RutaPunto.ruta_id == ruta_id)
        )
        return [(lat, lon) for lat, lon in result.all()]

    async def _detalle(self, db: AsyncSession, ruta: Ruta) -> RutaDetalleResponse:
        base = RutaResponse.model_validate(ruta)
        return RutaDetalleResponse(
            **base.model_dump(),
            puntos=await self._puntos_de_ruta(db, ruta.id),
        )

    async def _puntos_existentes(
        self, db: AsyncSession, punto_ids: Sequence[int]
    ) -> Dict[int, PuntoInteres]:
        """Loads the given points; raises NotFoundError for the first missing id."""
        if not punto_ids:
            return {}
        result = await db.execute(
            select(PuntoInteres).where(PuntoInteres.id.in_(punto_ids))
        )
        found = {p.id: p for p in result.scalars().all()}
        for punto_id in punto_ids:
            if punto_id not in found:
                raise NotFoundError(resource="punto", resource_id=punto_id)
        return found

    async def _check_nombre_libre(
        self, db: AsyncSession, nombre: str, exclude_id: Optional[int] = None
    ) -> None:
        query = select(Ruta.id).where(func.lower(Ruta.nombre) == nombre.lower())
        if exclude_id is not None:
            query = query.where(Ruta.id != exclude_id)
        result = await db.execute(query.limit(1))
        if result.scalar_one_or_none() is not None:
            raise ConflictError(f"Ya existe una ruta llamada '{nombre}'", field="nombre")

    async def list_rutas(self, db: AsyncSession) -> List[RutaResponse]:
        result = await db.execute(select(Ruta).order_by(Ruta.id))
        return [RutaResponse.model_validate(r) for r in result.scalars().all()]

    async def get_ruta(self, db: AsyncSession, ruta_id: int) -> RutaDetalleResponse:
        ruta = await self._get_ruta(db, ruta_id)
        return await self._detalle(db, ruta)

    async def list_by_nombre(self, db: AsyncSession, nombre: str) -> List[RutaResponse]:
        result = await db.execute(
            select(Ruta)
            .where(Ruta.nombre.ilike(contains_pattern(nombre), escape="\\"))
            .order_by(Ruta.id)
        )
        return [RutaResponse.model_validate(r) for r in result.scalars().all()]

    # ── Duration ──────────────────────────────────────────────────────────

    async def recompute(self, db: AsyncSession, ruta_id: int) -> RutaDetalleResponse:
        """Full nearest-neighbour recomputation of one route's duration."""
        ruta = await self._get_ruta(db, ruta_id)
        await self._recompute_ruta(db, ruta)
        return await self._detalle(db, ruta)

    async def _recompute_ruta(self, db: AsyncSession, ruta: Ruta) -> None:
        coordenadas = await self._coordenadas(db, ruta.id)
        ruta.duracion = duration.estimate_minutes(coordenadas)
        await db.flush()
        logger.info(
            "Route %s duration recomputed: %d min over %d points",
            ruta.id, ruta.duracion, len(coordenadas),
        )

    async def recompute_rutas(self, db: AsyncSession, ruta_ids: Iterable[int]) -> None:
        """Full recomputation for every listed route (used after point edits/deletes)."""
        for ruta_id in sorted(set(ruta_ids)):
            ruta = await db.get(Ruta, ruta_id)
            if ruta is not None:
                await self._recompute_ruta(db, ruta)

    async def rutas_con_punto(self, db: AsyncSession, punto_id: int) -> List[int]:
        result = await db.execute(
            select(RutaPunto.ruta_id).where(RutaPunto.punto_id == punto_id)
        )
        return list(result.scalars().all())

    # ── Mutations ─────────────────────────────────────────────────────────

    async def create_ruta(self, db: AsyncSession, data: RutaCreate) -> RutaDetalleResponse:
        """
        Creates a route and its initial point associations in one transaction.

        Raises:
            ValidationError: `puntos` repeats an id
            ConflictError:   another route already has this name
            NotFoundError:   a listed point does not exist
        """
        _check_no_duplicates(data.puntos)
        await self._check_nombre_libre(db, data.nombre)
        puntos = await self._puntos_existentes(db, data.puntos)

        ruta = Ruta(nombre=data.nombre, descripcion=data.descripcion, duracion=0)
        db.add(ruta)
        await db.flush()

        for orden, punto_id in enumerate(data.puntos):
            db.add(RutaPunto(ruta_id=ruta.id, punto_id=punto_id, orden=orden))

        ruta.duracion = duration.estimate_minutes(
            [(puntos[i].latitud, puntos[i].longitud) for i in data.puntos]
        )
        await flush_or_conflict(db, "La ruta contiene puntos repetidos", field="puntos")

        logger.info(
            "Route created: %s '%s' with %d points (%d min)",
            ruta.id, ruta.nombre, len(data.puntos), ruta.duracion,
        )
        return await self._detalle(db, ruta)

    async def update_ruta(
        self, db: AsyncSession, ruta_id: int, data: RutaUpdate
    ) -> RutaDetalleResponse:
        changes = data.model_dump(exclude_unset=True)
        ruta_update.values(changes)
        if changes.get("nombre"):
            await self._check_nombre_libre(db, changes["nombre"], exclude_id=ruta_id)
        await ruta_update.execute(db, ruta_id, changes)
        ruta = await self._get_ruta(db, ruta_id)
        return await self._detalle(db, ruta)

    async def delete_ruta(self, db: AsyncSession, ruta_id: int) -> None:
        """Removes the associations first, then the route row."""
        ruta = await self._get_ruta(db, ruta_id)
        await db.execute(delete(RutaPunto).where(RutaPunto.ruta_id == ruta_id))
        await db.delete(ruta)
        await db.flush()
        logger.info("Route deleted: %s", ruta_id)

    async def add_punto(
        self,
        db: AsyncSession,
        ruta_id: int,
        punto_id: int,
        orden: Optional[int] = None,
    ) -> RutaDetalleResponse:
        """
        Associates one point and adds its approximate contribution to `duracion`.

        The contribution is the point's distance to its nearest neighbour
        among the points already in the route; existing points are not
        revisited.
        """
        ruta = await self._get_ruta(db, ruta_id)
        punto = await db.get(PuntoInteres, punto_id)
        if punto is None:
            raise NotFoundError(resource="punto", resource_id=punto_id)

        existing = await db.execute(
            select(RutaPunto.id).where(
                RutaPunto.ruta_id == ruta_id,
                RutaPunto.punto_id == punto_id,
            )
        )
        if existing.scalar_one_or_none() is not None:
            raise ConflictError("El punto ya pertenece a la ruta", field="punto_id")

        coordenadas = await self._coordenadas(db, ruta_id)
        contribution = duration.added_minutes((punto.latitud, punto.longitud), coordenadas)

        db.add(RutaPunto(ruta_id=ruta_id, punto_id=punto_id, orden=orden))
        ruta.duracion = ruta.duracion + contribution
        await flush_or_conflict(db, "El punto ya pertenece a la ruta", field="punto_id")

        logger.info(
            "Point %s added to route %s: +%d min (now %d)",
            punto_id, ruta_id, contribution, ruta.duracion,
        )
        return await self._detalle(db, ruta)

    async def add_puntos_lote(
        self, db: AsyncSession, ruta_id: int, punto_ids: Sequence[int]
    ) -> RutaDetalleResponse:
        """
        Associates several points at once. Either every point is added or,
        on any failure, none is (the request transaction rolls back).
        """
        _check_no_duplicates(punto_ids)
        ruta = await self._get_ruta(db, ruta_id)
        await self._puntos_existentes(db, punto_ids)

        already = await db.execute(
            select(RutaPunto.punto_id).where(
                RutaPunto.ruta_id == ruta_id,
                RutaPunto.punto_id.in_(punto_ids),
            )
        )
        repeated = sorted(already.scalars().all())
        if repeated:
            raise ConflictError(
                "Algunos puntos ya pertenecen a la ruta",
                field="puntos",
                context={"repetidos": repeated},
            )

        max_orden = await db.execute(
            select(func.max(RutaPunto.orden)).where(RutaPunto.ruta_id == ruta_id)
        )
        current = max_orden.scalar()
        start = 0 if current is None else current + 1
        for offset, punto_id in enumerate(punto_ids):
            db.add(RutaPunto(ruta_id=ruta_id, punto_id=punto_id, orden=start + offset))
        await flush_or_conflict(db, "Algunos puntos ya pertenecen a la ruta", field="puntos")

        await self._recompute_ruta(db, ruta)
        logger.info("Bulk-added %d points to route %s", len(punto_ids), ruta_id)
        return await self._detalle(db, ruta)

    async def remove_punto(
        self, db: AsyncSession, ruta_id: int, punto_id: int
    ) -> RutaDetalleResponse:
        """
        Removes one association and subtracts the point's contribution,
        measured against the points that remain, floored at zero.
        """
        ruta = await self._get_ruta(db, ruta_id)
        result = await db.execute(
            select(RutaPunto).where(
                RutaPunto.ruta_id == ruta_id,
                RutaPunto.punto_id == punto_id,
            )
        )
        asociacion = result.scalar_one_or_none()
        if asociacion is None:
            raise NotFoundError(
                resource="el punto en la ruta",
                resource_id=punto_id,
                context={"ruta_id": ruta_id},
            )

        punto = await db.get(PuntoInteres, punto_id)
        await db.delete(asociacion)
        await db.flush()

        remaining = await self._coordenadas(db, ruta_id)
        contribution = duration.removed_minutes((punto.latitud, punto.longitud), remaining)
        ruta.duracion = duration.apply_removal(ruta.duracion, contribution)
        await db.flush()

        logger.info(
            "Point %s removed from route %s: -%d min (now %d)",
            punto_id, ruta_id, contribution, ruta.duracion,
        )
        return await self._detalle(db, ruta)


ruta_service = RutaService()
