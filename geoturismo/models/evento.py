"""
Geoturismo Backend — Event Model
==================================

What:  ORM model for the `eventos` table.

Table Design:
    - fecha_ini / fecha_fin: calendar dates; fecha_fin is optional and,
      when present, never earlier than fecha_ini
    - punto_id: nullable reference to puntos_interes; an event need not
      take place at a mapped point. Nulled by the application when the
      point is deleted.
"""

from datetime import date
from typing import Optional

from sqlalchemy import Date, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from geoturismo.database import Base


class Evento(Base):
    __tablename__ = "eventos"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    nombre: Mapped[str] = mapped_column(String(150), nullable=False)

    tipo: Mapped[str] = mapped_column(
        String(50),
        nullable=False,
        comment="Category label (categorias.nombre, ambito='evento')",
    )

    descripcion: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    imagen: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)

    fecha_ini: Mapped[date] = mapped_column(Date, nullable=False)
    fecha_fin: Mapped[Optional[date]] = mapped_column(Date, nullable=True)

    enlace: Mapped[Optional[str]] = mapped_column(
        String(500),
        nullable=True,
        comment="External link (tickets, official page)",
    )

    punto_id: Mapped[Optional[int]] = mapped_column(
        Integer,
        ForeignKey("puntos_interes.id"),
        nullable=True,
    )

    __table_args__ = (
        Index("idx_eventos_fecha_ini", "fecha_ini"),
        Index("idx_eventos_punto_id", "punto_id"),
    )

    def __repr__(self) -> str:
        return f"<Evento(id={self.id}, nombre='{self.nombre}', fecha_ini='{self.fecha_ini}')>"
