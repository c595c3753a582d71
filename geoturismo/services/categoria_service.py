"""
Geoturismo Backend — Category Service
=======================================

What:  Lists and extends the category enumeration, and checks that the
       `tipo` of a point or event is a registered label.
"""

import logging
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from geoturismo.exceptions import ConflictError, ValidationError
from geoturismo.models import Categoria
from geoturismo.schemas.categoria import CategoriaCreate, CategoriaResponse
from geoturismo.services.updates import flush_or_conflict

logger = logging.getLogger(__name__)


class CategoriaService:

    async def list_categorias(
        self, db: AsyncSession, ambito: Optional[str] = None
    ) -> List[CategoriaResponse]:
        query = select(Categoria).order_by(Categoria.ambito, Categoria.nombre)
        if ambito:
            query = query.where(Categoria.ambito == ambito)
        result = await db.execute(query)
        return [CategoriaResponse.model_validate(c) for c in result.scalars().all()]

    async def create_categoria(
        self, db: AsyncSession, data: CategoriaCreate
    ) -> CategoriaResponse:
        """
        Registers a new label. The label was normalized and pattern-checked
        by the schema; it is written as a bound parameter.

        Raises:
            ConflictError: the label already exists (in either scope)
        """
        existing = await db.execute(
            select(Categoria.id).where(Categoria.nombre == data.nombre)
        )
        if existing.scalar_one_or_none() is not None:
            raise ConflictError(f"La categoría '{data.nombre}' ya existe", field="nombre")

        categoria = Categoria(nombre=data.nombre, ambito=data.ambito)
        db.add(categoria)
        await flush_or_conflict(db, f"La categoría '{data.nombre}' ya existe", field="nombre")
        logger.info("Category registered: %s (%s)", categoria.nombre, categoria.ambito)
        return CategoriaResponse.model_validate(categoria)

    async def ensure_categoria(self, db: AsyncSession, nombre: str, ambito: str) -> None:
        """Raises ValidationError unless `nombre` is registered for `ambito`."""
        result = await db.execute(
            select(Categoria.id).where(
                Categoria.nombre == nombre,
                Categoria.ambito == ambito,
            )
        )
        if result.scalar_one_or_none() is None:
            raise ValidationError(
                f"La categoría '{nombre}' no está registrada para {ambito}",
                field="tipo",
            )


categoria_service = CategoriaService()
