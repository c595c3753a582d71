"""
Geoturismo Backend — Partial Update Builder Tests
===================================================

What:  Tests for the allow-listed UPDATE builder shared by every entity.

What we test:
    ✅ Only supplied, allow-listed fields reach the SET clause
    ✅ Falsy values (0, 0.0, "") count as supplied
    ✅ Empty updates fail before any SQL is issued
    ✅ Nulls are refused for required columns
    ✅ Missing rows raise NotFoundError
    ✅ LIKE wildcards in search fragments are escaped
"""

from unittest.mock import MagicMock

import pytest
from sqlalchemy.dialects import postgresql
from sqlalchemy.exc import IntegrityError

from geoturismo.exceptions import ConflictError, NotFoundError, ValidationError
from geoturismo.models import PuntoInteres
from geoturismo.services.punto_service import punto_update
from geoturismo.services.updates import PartialUpdate, contains_pattern


class TestValues:

    def test_keeps_only_allowed_fields(self):
        values = punto_update.values({"nombre": "Prado", "id": 99, "desconocido": 1})
        assert values == {"nombre": "Prado"}

    def test_falsy_values_count_as_supplied(self):
        values = punto_update.values({"latitud": 0.0, "longitud": 0, "descripcion": ""})
        assert values == {"latitud": 0.0, "longitud": 0, "descripcion": ""}

    def test_empty_changes_rejected(self):
        with pytest.raises(ValidationError) as exc_info:
            punto_update.values({})
        assert "nombre" in exc_info.value.context["campos_permitidos"]

    def test_only_unknown_fields_rejected(self):
        with pytest.raises(ValidationError):
            punto_update.values({"id": 3})

    def test_null_for_required_column_rejected(self):
        with pytest.raises(ValidationError) as exc_info:
            punto_update.values({"nombre": None})
        assert exc_info.value.field == "nombre"

    def test_null_for_optional_column_allowed(self):
        assert punto_update.values({"imagen": None}) == {"imagen": None}

    def test_unknown_column_in_declaration(self):
        with pytest.raises(ValueError):
            PartialUpdate(PuntoInteres, fields=("color",), projection=("id",), resource="punto")


class TestStatement:

    def test_set_clause_is_parameterized(self):
        stmt = punto_update.statement(7, {"nombre": "x'; DROP TABLE puntos_interes; --"})
        sql = str(stmt.compile(dialect=postgresql.dialect()))
        assert "DROP TABLE" not in sql
        assert "nombre=" in sql.replace(" ", "")
        assert "RETURNING" in sql

    def test_set_clause_lists_only_supplied_fields(self):
        sql = str(punto_update.statement(7, {"tipo": "museo"}).compile(dialect=postgresql.dialect()))
        set_clause = sql.split("SET", 1)[1].split("WHERE", 1)[0]
        assert "tipo" in set_clause
        assert "nombre" not in set_clause


class TestExecute:

    @pytest.mark.asyncio
    async def test_empty_update_issues_no_sql(self, mock_db_session):
        with pytest.raises(ValidationError):
            await punto_update.execute(mock_db_session, 1, {})
        mock_db_session.execute.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_missing_row_raises_not_found(self, mock_db_session):
        result = MagicMock()
        result.mappings.return_value.one_or_none.return_value = None
        mock_db_session.execute.return_value = result

        with pytest.raises(NotFoundError) as exc_info:
            await punto_update.execute(mock_db_session, 42, {"nombre": "Nuevo"})
        assert exc_info.value.context["id"] == 42

    @pytest.mark.asyncio
    async def test_integrity_error_becomes_conflict(self, mock_db_session):
        mock_db_session.execute.side_effect = IntegrityError("UPDATE", {}, Exception("unique"))

        with pytest.raises(ConflictError):
            await punto_update.execute(mock_db_session, 1, {"nombre": "Duplicado"})

    @pytest.mark.asyncio
    async def test_returns_projected_row(self, mock_db_session):
        row = {"id": 1, "nombre": "Nuevo"}
        result = MagicMock()
        result.mappings.return_value.one_or_none.return_value = row
        mock_db_session.execute.return_value = result

        assert await punto_update.execute(mock_db_session, 1, {"nombre": "Nuevo"}) == row


class TestContainsPattern:

    def test_wraps_fragment(self):
        assert contains_pattern("prado") == "%prado%"

    def test_escapes_wildcards(self):
        assert contains_pattern("50%_off") == "%50\\%\\_off%"

    def test_escapes_escape_char(self):
        assert contains_pattern("a\\b") == "%a\\\\b%"
