"""
Geoturismo Backend — Route Service Tests
==========================================

What:  Route CRUD, point membership and duration bookkeeping.
How:   Uses the `puntos_ecuador` fixture: A(0,0), B(0,1), C(0,3).

Reference values (R = 6371 km, 5 km/h):
    {A, B}     → 2 × 1° = 222.39 km → 2669 min
    {A, B, C}  → 4° = 444.78 km     → 5337 min
    C joining {A, B} adds 2° → +2669 min
"""

import pytest
from sqlalchemy import func, select

from geoturismo.exceptions import ConflictError, NotFoundError, ValidationError
from geoturismo.models import Ruta, RutaPunto
from geoturismo.schemas.ruta import RutaCreate, RutaUpdate
from geoturismo.services.ruta_service import ruta_service


def _ids(puntos, *names):
    return [puntos[n].id for n in names]


class TestRutaCreate:

    @pytest.mark.asyncio
    async def test_three_point_route(self, db_session, puntos_ecuador):
        ruta = await ruta_service.create_ruta(
            db_session, RutaCreate(nombre="Ecuador", puntos=_ids(puntos_ecuador, "A", "B", "C"))
        )
        assert ruta.duracion == 5337
        assert [p.id for p in ruta.puntos] == _ids(puntos_ecuador, "A", "B", "C")
        assert [p.orden for p in ruta.puntos] == [0, 1, 2]
        assert ruta.fecha_creacion is not None

    @pytest.mark.asyncio
    async def test_empty_route_lasts_zero(self, db_session):
        ruta = await ruta_service.create_ruta(db_session, RutaCreate(nombre="Vacía"))
        assert ruta.duracion == 0
        assert ruta.puntos == []

    @pytest.mark.asyncio
    async def test_single_point_route_lasts_zero(self, db_session, puntos_ecuador):
        ruta = await ruta_service.create_ruta(
            db_session, RutaCreate(nombre="Sola", puntos=_ids(puntos_ecuador, "A"))
        )
        assert ruta.duracion == 0

    @pytest.mark.asyncio
    async def test_repeated_ids_rejected(self, db_session, puntos_ecuador):
        with pytest.raises(ValidationError) as exc_info:
            await ruta_service.create_ruta(
                db_session, RutaCreate(nombre="Doble", puntos=_ids(puntos_ecuador, "A", "A"))
            )
        assert exc_info.value.context["repetidos"] == [puntos_ecuador["A"].id]

    @pytest.mark.asyncio
    async def test_missing_point(self, db_session, puntos_ecuador):
        with pytest.raises(NotFoundError):
            await ruta_service.create_ruta(
                db_session, RutaCreate(nombre="Rota", puntos=[puntos_ecuador["A"].id, 999])
            )

    @pytest.mark.asyncio
    async def test_duplicate_name_is_case_insensitive(self, db_session):
        await ruta_service.create_ruta(db_session, RutaCreate(nombre="Ruta del Agua"))
        with pytest.raises(ConflictError):
            await ruta_service.create_ruta(db_session, RutaCreate(nombre="ruta del agua"))


class TestRutaPuntos:

    @pytest.mark.asyncio
    async def test_add_then_remove_restores_duration(self, db_session, puntos_ecuador):
        ruta = await ruta_service.create_ruta(
            db_session, RutaCreate(nombre="Ecuador", puntos=_ids(puntos_ecuador, "A", "B"))
        )
        assert ruta.duracion == 2669

        after_add = await ruta_service.add_punto(db_session, ruta.id, puntos_ecuador["C"].id)
        assert after_add.duracion == 5338
        assert puntos_ecuador["C"].id in [p.id for p in after_add.puntos]

        after_remove = await ruta_service.remove_punto(db_session, ruta.id, puntos_ecuador["C"].id)
        assert after_remove.duracion == 2669
        assert [p.id for p in after_remove.puntos] == _ids(puntos_ecuador, "A", "B")

    @pytest.mark.asyncio
    async def test_first_point_adds_nothing(self, db_session, puntos_ecuador):
        ruta = await ruta_service.create_ruta(db_session, RutaCreate(nombre="Nueva"))
        ruta = await ruta_service.add_punto(db_session, ruta.id, puntos_ecuador["A"].id)
        assert ruta.duracion == 0

    @pytest.mark.asyncio
    async def test_add_twice_conflicts(self, db_session, puntos_ecuador):
        ruta = await ruta_service.create_ruta(
            db_session, RutaCreate(nombre="Ecuador", puntos=_ids(puntos_ecuador, "A"))
        )
        with pytest.raises(ConflictError):
            await ruta_service.add_punto(db_session, ruta.id, puntos_ecuador["A"].id)

    @pytest.mark.asyncio
    async def test_add_to_missing_route(self, db_session, puntos_ecuador):
        with pytest.raises(NotFoundError):
            await ruta_service.add_punto(db_session, 999, puntos_ecuador["A"].id)

    @pytest.mark.asyncio
    async def test_add_missing_point(self, db_session):
        ruta = await ruta_service.create_ruta(db_session, RutaCreate(nombre="Nueva"))
        with pytest.raises(NotFoundError):
            await ruta_service.add_punto(db_session, ruta.id, 999)

    @pytest.mark.asyncio
    async def test_remove_point_not_in_route(self, db_session, puntos_ecuador):
        ruta = await ruta_service.create_ruta(
            db_session, RutaCreate(nombre="Ecuador", puntos=_ids(puntos_ecuador, "A"))
        )
        with pytest.raises(NotFoundError):
            await ruta_service.remove_punto(db_session, ruta.id, puntos_ecuador["B"].id)

    @pytest.mark.asyncio
    async def test_removal_never_goes_negative(self, db_session, puntos_ecuador):
        ruta = await ruta_service.create_ruta(
            db_session, RutaCreate(nombre="Ecuador", puntos=_ids(puntos_ecuador, "A", "B"))
        )
        stored = await db_session.get(Ruta, ruta.id)
        stored.duracion = 100
        await db_session.flush()

        after = await ruta_service.remove_punto(db_session, ruta.id, puntos_ecuador["B"].id)
        assert after.duracion == 0

    @pytest.mark.asyncio
    async def test_bulk_add_recomputes(self, db_session, puntos_ecuador):
        ruta = await ruta_service.create_ruta(
            db_session, RutaCreate(nombre="Ecuador", puntos=_ids(puntos_ecuador, "A"))
        )
        ruta = await ruta_service.add_puntos_lote(
            db_session, ruta.id, _ids(puntos_ecuador, "B", "C")
        )
        assert ruta.duracion == 5337
        assert [p.orden for p in ruta.puntos] == [0, 1, 2]

    @pytest.mark.asyncio
    async def test_bulk_add_continues_after_orden_zero(self, db_session, puntos_ecuador):
        ruta = await ruta_service.create_ruta(
            db_session, RutaCreate(nombre="Ecuador", puntos=_ids(puntos_ecuador, "A"))
        )
        await ruta_service.add_puntos_lote(db_session, ruta.id, _ids(puntos_ecuador, "B", "C"))

        stored = await db_session.execute(
            select(RutaPunto.punto_id, RutaPunto.orden)
            .where(RutaPunto.ruta_id == ruta.id)
            .order_by(RutaPunto.orden)
        )
        assert [tuple(row) for row in stored.all()] == list(
            zip(_ids(puntos_ecuador, "A", "B", "C"), [0, 1, 2])
        )

    @pytest.mark.asyncio
    async def test_bulk_add_on_empty_route_starts_at_zero(self, db_session, puntos_ecuador):
        ruta = await ruta_service.create_ruta(db_session, RutaCreate(nombre="Vacia"))
        ruta = await ruta_service.add_puntos_lote(
            db_session, ruta.id, _ids(puntos_ecuador, "C", "A")
        )
        assert [p.id for p in ruta.puntos] == _ids(puntos_ecuador, "C", "A")
        assert [p.orden for p in ruta.puntos] == [0, 1]

    @pytest.mark.asyncio
    async def test_bulk_add_with_member_conflicts(self, db_session, puntos_ecuador):
        ruta = await ruta_service.create_ruta(
            db_session, RutaCreate(nombre="Ecuador", puntos=_ids(puntos_ecuador, "A"))
        )
        with pytest.raises(ConflictError) as exc_info:
            await ruta_service.add_puntos_lote(
                db_session, ruta.id, _ids(puntos_ecuador, "A", "B")
            )
        assert exc_info.value.context["repetidos"] == [puntos_ecuador["A"].id]

        count = await db_session.execute(
            select(func.count()).select_from(RutaPunto).where(RutaPunto.ruta_id == ruta.id)
        )
        assert count.scalar() == 1

    @pytest.mark.asyncio
    async def test_bulk_add_repeated_ids(self, db_session, puntos_ecuador):
        ruta = await ruta_service.create_ruta(db_session, RutaCreate(nombre="Nueva"))
        with pytest.raises(ValidationError):
            await ruta_service.add_puntos_lote(
                db_session, ruta.id, _ids(puntos_ecuador, "B", "B")
            )


class TestRutaMaintenance:

    @pytest.mark.asyncio
    async def test_recompute_repairs_drift(self, db_session, puntos_ecuador):
        ruta = await ruta_service.create_ruta(
            db_session, RutaCreate(nombre="Ecuador", puntos=_ids(puntos_ecuador, "A", "B", "C"))
        )
        stored = await db_session.get(Ruta, ruta.id)
        stored.duracion = 1
        await db_session.flush()

        assert (await ruta_service.recompute(db_session, ruta.id)).duracion == 5337

    @pytest.mark.asyncio
    async def test_rename(self, db_session):
        ruta = await ruta_service.create_ruta(db_session, RutaCreate(nombre="Vieja"))
        updated = await ruta_service.update_ruta(db_session, ruta.id, RutaUpdate(nombre="Nueva"))
        assert updated.nombre == "Nueva"
        assert updated.duracion == 0

    @pytest.mark.asyncio
    async def test_rename_to_taken_name(self, db_session):
        await ruta_service.create_ruta(db_session, RutaCreate(nombre="Norte"))
        sur = await ruta_service.create_ruta(db_session, RutaCreate(nombre="Sur"))
        with pytest.raises(ConflictError):
            await ruta_service.update_ruta(db_session, sur.id, RutaUpdate(nombre="NORTE"))

    @pytest.mark.asyncio
    async def test_empty_update(self, db_session):
        ruta = await ruta_service.create_ruta(db_session, RutaCreate(nombre="Vieja"))
        with pytest.raises(ValidationError):
            await ruta_service.update_ruta(db_session, ruta.id, RutaUpdate())

    @pytest.mark.asyncio
    async def test_delete_removes_associations(self, db_session, puntos_ecuador):
        ruta = await ruta_service.create_ruta(
            db_session, RutaCreate(nombre="Ecuador", puntos=_ids(puntos_ecuador, "A", "B"))
        )
        await ruta_service.delete_ruta(db_session, ruta.id)

        with pytest.raises(NotFoundError):
            await ruta_service.get_ruta(db_session, ruta.id)
        assert await ruta_service.rutas_con_punto(db_session, puntos_ecuador["A"].id) == []

    @pytest.mark.asyncio
    async def test_list_by_nombre(self, db_session):
        await ruta_service.create_ruta(db_session, RutaCreate(nombre="Ruta de los Miradores"))
        await ruta_service.create_ruta(db_session, RutaCreate(nombre="Paseo del Río"))
        found = await ruta_service.list_by_nombre(db_session, "mirador")
        assert [r.nombre for r in found] == ["Ruta de los Miradores"]
