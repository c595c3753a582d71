"""
Geoturismo Backend — Point of Interest Service Tests
======================================================

What:  PuntoService against an in-memory SQLite database.

What we test:
    ✅ Category checks and normalization on create
    ✅ Lookups by category list and by partial name
    ✅ Partial updates write only supplied fields (falsy values included)
    ✅ Moving a point recomputes the routes that hold it
    ✅ Deleting a point detaches events and routes, then recomputes durations
"""

from datetime import date

import pytest

from geoturismo.exceptions import NotFoundError, ValidationError
from geoturismo.schemas.evento import EventoCreate
from geoturismo.schemas.punto import PuntoCreate, PuntoUpdate
from geoturismo.schemas.ruta import RutaCreate
from geoturismo.services.evento_service import evento_service
from geoturismo.services.punto_service import punto_service
from geoturismo.services.ruta_service import ruta_service


class TestPuntoCreate:

    @pytest.mark.asyncio
    async def test_create_and_get(self, db_session):
        created = await punto_service.create_punto(
            db_session,
            PuntoCreate(nombre="Museo del Prado", tipo="  Museo ", latitud=40.4138, longitud=-3.6921),
        )
        assert created.id is not None
        assert created.tipo == "museo"

        fetched = await punto_service.get_punto(db_session, created.id)
        assert fetched.nombre == "Museo del Prado"
        assert fetched.latitud == pytest.approx(40.4138)

    @pytest.mark.asyncio
    async def test_unregistered_category_rejected(self, db_session):
        with pytest.raises(ValidationError) as exc_info:
            await punto_service.create_punto(
                db_session,
                PuntoCreate(nombre="Algo", tipo="discoteca", latitud=0, longitud=0),
            )
        assert exc_info.value.field == "tipo"

    @pytest.mark.asyncio
    async def test_event_category_not_valid_for_points(self, db_session):
        with pytest.raises(ValidationError):
            await punto_service.create_punto(
                db_session,
                PuntoCreate(nombre="Algo", tipo="concierto", latitud=0, longitud=0),
            )

    @pytest.mark.asyncio
    async def test_get_missing(self, db_session):
        with pytest.raises(NotFoundError):
            await punto_service.get_punto(db_session, 999)


class TestPuntoLookups:

    @pytest.mark.asyncio
    async def test_list_by_tipos(self, db_session):
        for nombre, tipo in (("Prado", "museo"), ("Retiro", "parque"), ("Botín", "restaurante")):
            await punto_service.create_punto(
                db_session, PuntoCreate(nombre=nombre, tipo=tipo, latitud=40.4, longitud=-3.7)
            )

        puntos = await punto_service.list_by_tipos(db_session, ["museo", "PARQUE"])
        assert sorted(p.nombre for p in puntos) == ["Prado", "Retiro"]

    @pytest.mark.asyncio
    async def test_list_by_tipos_requires_one(self, db_session):
        with pytest.raises(ValidationError):
            await punto_service.list_by_tipos(db_session, ["", "  "])

    @pytest.mark.asyncio
    async def test_list_by_nombre_is_partial_and_case_insensitive(self, db_session, puntos_ecuador):
        puntos = await punto_service.list_by_nombre(db_session, "punto b")
        assert [p.id for p in puntos] == [puntos_ecuador["B"].id]

    @pytest.mark.asyncio
    async def test_list_by_nombre_treats_wildcards_literally(self, db_session, puntos_ecuador):
        assert await punto_service.list_by_nombre(db_session, "%") == []


class TestPuntoUpdate:

    @pytest.mark.asyncio
    async def test_partial_update_keeps_other_fields(self, db_session, puntos_ecuador):
        punto = puntos_ecuador["A"]
        updated = await punto_service.update_punto(
            db_session, punto.id, PuntoUpdate(descripcion="Kilómetro cero")
        )
        assert updated.descripcion == "Kilómetro cero"
        assert updated.nombre == punto.nombre
        assert updated.tipo == punto.tipo

    @pytest.mark.asyncio
    async def test_zero_is_a_real_value(self, db_session):
        punto = await punto_service.create_punto(
            db_session, PuntoCreate(nombre="Norte", tipo="mirador", latitud=10.0, longitud=10.0)
        )
        updated = await punto_service.update_punto(
            db_session, punto.id, PuntoUpdate(latitud=0.0, longitud=0)
        )
        assert updated.latitud == 0.0
        assert updated.longitud == 0.0

    @pytest.mark.asyncio
    async def test_empty_update_rejected_and_nothing_written(self, db_session, puntos_ecuador):
        punto = puntos_ecuador["A"]
        with pytest.raises(ValidationError):
            await punto_service.update_punto(db_session, punto.id, PuntoUpdate())

        unchanged = await punto_service.get_punto(db_session, punto.id)
        assert unchanged == punto

    @pytest.mark.asyncio
    async def test_update_missing(self, db_session):
        with pytest.raises(NotFoundError):
            await punto_service.update_punto(db_session, 999, PuntoUpdate(nombre="x"))

    @pytest.mark.asyncio
    async def test_update_to_unregistered_category(self, db_session, puntos_ecuador):
        with pytest.raises(ValidationError):
            await punto_service.update_punto(
                db_session, puntos_ecuador["A"].id, PuntoUpdate(tipo="discoteca")
            )

    @pytest.mark.asyncio
    async def test_moving_a_point_recomputes_its_routes(self, db_session, puntos_ecuador):
        ruta = await ruta_service.create_ruta(
            db_session,
            RutaCreate(nombre="Ecuador", puntos=[p.id for p in puntos_ecuador.values()]),
        )
        assert ruta.duracion == 5337

        # C moves from lon 3 to lon 2: every nearest distance becomes 1°
        await punto_service.update_punto(
            db_session, puntos_ecuador["C"].id, PuntoUpdate(longitud=2.0)
        )
        assert (await ruta_service.get_ruta(db_session, ruta.id)).duracion == 4003


class TestPuntoDelete:

    @pytest.mark.asyncio
    async def test_delete_cleans_up_references(self, db_session, puntos_ecuador):
        a, b, c = puntos_ecuador["A"], puntos_ecuador["B"], puntos_ecuador["C"]
        ruta = await ruta_service.create_ruta(
            db_session, RutaCreate(nombre="Ecuador", puntos=[a.id, b.id, c.id])
        )
        evento = await evento_service.create_evento(
            db_session,
            EventoCreate(nombre="Concierto", tipo="concierto", fecha_ini=date(2026, 7, 1), punto_id=b.id),
        )

        await punto_service.delete_punto(db_session, b.id)

        with pytest.raises(NotFoundError):
            await punto_service.get_punto(db_session, b.id)

        evento_after = await evento_service.get_evento(db_session, evento.id)
        assert evento_after.punto_id is None
        assert evento_after.punto is None

        ruta_after = await ruta_service.get_ruta(db_session, ruta.id)
        assert [p.id for p in ruta_after.puntos] == [a.id, c.id]
        # A and C are 3° apart: 6° in total
        assert ruta_after.duracion == 8006

    @pytest.mark.asyncio
    async def test_delete_missing(self, db_session):
        with pytest.raises(NotFoundError):
            await punto_service.delete_punto(db_session, 999)
