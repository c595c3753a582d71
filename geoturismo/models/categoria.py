"""
Geoturismo Backend — Category Model
=====================================

What:  The admin-extensible enumeration of category labels (`categorias`).
How:   One row per label, scoped to points (`punto`) or events (`evento`).
       New labels are plain INSERTs with bound parameters; no DDL is issued
       at runtime.
"""

from sqlalchemy import CheckConstraint, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from geoturismo.database import Base

AMBITO_PUNTO = "punto"
AMBITO_EVENTO = "evento"

# Initial labels, seeded by the first migration
CATEGORIAS_INICIALES = {
    AMBITO_PUNTO: ("monumento", "museo", "parque", "mirador", "restaurante"),
    AMBITO_EVENTO: ("concierto", "festival", "exposicion", "deporte", "feria"),
}


class Categoria(Base):
    __tablename__ = "categorias"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    nombre: Mapped[str] = mapped_column(
        String(50),
        nullable=False,
        unique=True,
        comment="Category label, lower-case",
    )

    ambito: Mapped[str] = mapped_column(
        String(10),
        nullable=False,
        comment="Which entity the label applies to: punto or evento",
    )

    __table_args__ = (
        CheckConstraint("ambito IN ('punto', 'evento')", name="ck_categorias_ambito"),
    )

    def __repr__(self) -> str:
        return f"<Categoria(nombre='{self.nombre}', ambito='{self.ambito}')>"
