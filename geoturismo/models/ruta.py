"""
Geoturismo Backend — Route Models
===================================

What:  ORM models for `rutas` and the `rutas_puntos` association table.

Table Design:
    - duracion: derived, denormalized estimate in whole minutes. Written
      only by RutaService whenever the route's point set changes.
    - rutas_puntos: many-to-many join; (ruta_id, punto_id) is unique, so a
      point appears at most once per route. `orden` is optional.
    - nombre is expected to be unique; the check lives in RutaService.
"""

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import (
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
    text,
)
from sqlalchemy.orm import Mapped, mapped_column

from geoturismo.database import Base


class Ruta(Base):
    __tablename__ = "rutas"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    nombre: Mapped[str] = mapped_column(String(150), nullable=False)
    descripcion: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    fecha_creacion: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        server_default=text("CURRENT_TIMESTAMP"),
    )

    duracion: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=0,
        server_default=text("0"),
        comment="Estimated traversal time in minutes (derived)",
    )

    def __repr__(self) -> str:
        return f"<Ruta(id={self.id}, nombre='{self.nombre}', duracion={self.duracion})>"


class RutaPunto(Base):
    __tablename__ = "rutas_puntos"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    ruta_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("rutas.id"), nullable=False, index=True
    )
    punto_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("puntos_interes.id"), nullable=False, index=True
    )

    orden: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)

    __table_args__ = (
        UniqueConstraint("ruta_id", "punto_id", name="uq_rutas_puntos_ruta_punto"),
    )

    def __repr__(self) -> str:
        return f"<RutaPunto(ruta_id={self.ruta_id}, punto_id={self.punto_id}, orden={self.orden})>"
