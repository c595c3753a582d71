"""
Geoturismo Backend — Point of Interest Model
==============================================

What:  ORM model for the `puntos_interes` table.
Who:   Used by PuntoService for CRUD, by RutaService for duration
       estimates, and by EventoService for the embedded point projection.

Table Design:
    - tipo: a label registered in `categorias` with ambito='punto'
      (checked by the service layer before every write)
    - latitud / longitud: WGS84 degrees, fed to the haversine estimator
    - imagen: optional URL or storage reference
    Referenced by eventos.punto_id and rutas_puntos.punto_id; deleting a
    point cleans both up in the application before the row is removed.
"""

from typing import Optional

from sqlalchemy import Float, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from geoturismo.database import Base


class PuntoInteres(Base):
    """A named, categorized geographic location."""

    __tablename__ = "puntos_interes"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    nombre: Mapped[str] = mapped_column(String(150), nullable=False)

    tipo: Mapped[str] = mapped_column(
        String(50),
        nullable=False,
        comment="Category label (categorias.nombre, ambito='punto')",
    )

    latitud: Mapped[float] = mapped_column(Float, nullable=False)
    longitud: Mapped[float] = mapped_column(Float, nullable=False)

    descripcion: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    imagen: Mapped[Optional[str]] = mapped_column(
        String(500),
        nullable=True,
        comment="Image URL or storage reference",
    )

    __table_args__ = (
        Index("idx_puntos_interes_tipo", "tipo"),
    )

    def __repr__(self) -> str:
        return f"<PuntoInteres(id={self.id}, nombre='{self.nombre}', tipo='{self.tipo}')>"
