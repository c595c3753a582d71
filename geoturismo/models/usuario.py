"""
Geoturismo Backend — User Model
=================================

What:  ORM model for the `usuarios` table.

Security:
    `contrasena` stores the bcrypt hash (salt embedded), never the
    plaintext. No response schema exposes this column.
"""

from typing import Optional

from sqlalchemy import Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from geoturismo.database import Base


class Usuario(Base):
    __tablename__ = "usuarios"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    nombre_usuario: Mapped[str] = mapped_column(String(50), nullable=False, unique=True)
    nombre: Mapped[str] = mapped_column(String(100), nullable=False)
    apellido: Mapped[str] = mapped_column(String(100), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)

    contrasena: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
        comment="bcrypt hash (salt embedded)",
    )

    telefono: Mapped[Optional[str]] = mapped_column(String(30), nullable=True)

    def __repr__(self) -> str:
        # contrasena deliberately left out
        return f"<Usuario(id={self.id}, nombre_usuario='{self.nombre_usuario}')>"
