"""
Geoturismo Backend — Field-presence Update Builder
====================================================

What:  Builds `UPDATE <table> SET ... WHERE id = :id RETURNING ...` statements
       limited to the fields a client actually supplied.
How:   Each entity declares an allow-list of updatable attribute names. The
       builder maps supplied keys through that allow-list to ORM attributes;
       values are always bound parameters. Caller-supplied names never reach
       the SQL text.

Presence rule:
    A field counts as supplied when its key is present in the request body
    (`model_dump(exclude_unset=True)`), so 0, 0.0 and "" are real values.
    An explicit null is accepted only for nullable columns.

Contract:
    - no recognized field supplied  → ValidationError (no statement built)
    - identifier matches no row     → NotFoundError (raised by `execute`)
    - success                       → mapping of the projected columns
"""

import logging
from typing import Any, Dict, Iterable, Mapping, Optional, Sequence, Type

from sqlalchemy import update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql.dml import Update

from geoturismo.database import Base
from geoturismo.exceptions import ConflictError, NotFoundError, ValidationError

logger = logging.getLogger(__name__)


def contains_pattern(fragment: str) -> str:
    """LIKE pattern matching `fragment` anywhere, with wildcards escaped (escape char '\\')."""
    escaped = fragment.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


async def flush_or_conflict(
    db: AsyncSession,
    message: str,
    field: Optional[str] = None,
) -> None:
    """
    Flushes pending writes, turning unique-constraint violations into ConflictError.

    Pre-insert existence checks can race with concurrent requests; the
    schema constraint is the last word and this keeps its failure a 409.
    """
    try:
        await db.flush()
    except IntegrityError as e:
        logger.warning("Integrity violation on flush: %s", e.orig)
        raise ConflictError(message, field=field)


class PartialUpdate:
    """
    Allow-listed partial update for one model.

    Args:
        model:      ORM class with an integer `id` primary key
        fields:     attribute names clients may change
        projection: attribute names returned after the update
        resource:   human-readable resource name for NotFoundError
    """

    def __init__(
        self,
        model: Type[Base],
        fields: Iterable[str],
        projection: Sequence[str],
        resource: str,
    ):
        self.model = model
        self.fields = tuple(fields)
        self.projection = tuple(projection)
        self.resource = resource
        table = model.__table__
        for name in self.fields + self.projection:
            if name not in table.c:
                raise ValueError(f"{model.__name__} has no column '{name}'")
        self._nullable = {name: table.c[name].nullable for name in self.fields}

    def values(self, changes: Mapping[str, Any]) -> Dict[str, Any]:
        """Filters `changes` down to allow-listed keys and checks nulls."""
        values = {name: changes[name] for name in self.fields if name in changes}
        if not values:
            raise ValidationError(
                "No se ha proporcionado ningún campo para actualizar",
                context={"campos_permitidos": list(self.fields)},
            )
        for name, value in values.items():
            if value is None and not self._nullable[name]:
                raise ValidationError(f"El campo '{name}' no puede ser nulo", field=name)
        return values

    def statement(self, record_id: int, changes: Mapping[str, Any]) -> Update:
        values = self.values(changes)
        return (
            update(self.model)
            .where(self.model.id == record_id)
            .values(**values)
            .returning(*(getattr(self.model, name) for name in self.projection))
        )

    async def execute(
        self,
        db: AsyncSession,
        record_id: int,
        changes: Mapping[str, Any],
    ) -> Dict[str, Any]:
        """Builds, runs and checks the update; returns the projected row."""
        stmt = self.statement(record_id, changes)
        try:
            result = await db.execute(stmt)
        except IntegrityError as e:
            logger.warning("Integrity violation updating %s %s: %s", self.resource, record_id, e.orig)
            raise ConflictError("El valor ya está en uso por otro registro")
        row = result.mappings().one_or_none()
        if row is None:
            raise NotFoundError(resource=self.resource, resource_id=record_id)
        logger.info(
            "Updated %s %s: %s",
            self.resource,
            record_id,
            ", ".join(name for name in self.fields if name in changes),
        )
        return dict(row)
