"""Create geoturismo schema

Revision ID: 001
Revises: None
Create Date: 2026-10-19 00:00:00.000000+00:00

What:  Creates categorias, puntos_interes, usuarios, eventos, rutas and
       rutas_puntos, and seeds the initial category labels.

Rollback: downgrade() drops every table (destroys all data).
"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

from geoturismo.models.categoria import CATEGORIAS_INICIALES

# revision identifiers
revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    categorias = op.create_table(
        "categorias",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("nombre", sa.String(50), nullable=False, comment="Category label, lower-case"),
        sa.Column(
            "ambito",
            sa.String(10),
            nullable=False,
            comment="Which entity the label applies to: punto or evento",
        ),
        sa.PrimaryKeyConstraint("id", name="pk_categorias"),
        sa.UniqueConstraint("nombre", name="uq_categorias_nombre"),
        sa.CheckConstraint("ambito IN ('punto', 'evento')", name="ck_categorias_ambito"),
    )

    op.create_table(
        "puntos_interes",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("nombre", sa.String(150), nullable=False),
        sa.Column(
            "tipo",
            sa.String(50),
            nullable=False,
            comment="Category label (categorias.nombre, ambito='punto')",
        ),
        sa.Column("latitud", sa.Float(), nullable=False),
        sa.Column("longitud", sa.Float(), nullable=False),
        sa.Column("descripcion", sa.Text(), nullable=True),
        sa.Column("imagen", sa.String(500), nullable=True, comment="Image URL or storage reference"),
        sa.PrimaryKeyConstraint("id", name="pk_puntos_interes"),
    )
    op.create_index("idx_puntos_interes_tipo", "puntos_interes", ["tipo"])

    op.create_table(
        "usuarios",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("nombre_usuario", sa.String(50), nullable=False),
        sa.Column("nombre", sa.String(100), nullable=False),
        sa.Column("apellido", sa.String(100), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("contrasena", sa.String(100), nullable=False, comment="bcrypt hash (salt embedded)"),
        sa.Column("telefono", sa.String(30), nullable=True),
        sa.PrimaryKeyConstraint("id", name="pk_usuarios"),
        sa.UniqueConstraint("nombre_usuario", name="uq_usuarios_nombre_usuario"),
        sa.UniqueConstraint("email", name="uq_usuarios_email"),
    )

    op.create_table(
        "eventos",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("nombre", sa.String(150), nullable=False),
        sa.Column(
            "tipo",
            sa.String(50),
            nullable=False,
            comment="Category label (categorias.nombre, ambito='evento')",
        ),
        sa.Column("descripcion", sa.Text(), nullable=True),
        sa.Column("imagen", sa.String(500), nullable=True),
        sa.Column("fecha_ini", sa.Date(), nullable=False),
        sa.Column("fecha_fin", sa.Date(), nullable=True),
        sa.Column("enlace", sa.String(500), nullable=True, comment="External link (tickets, official page)"),
        sa.Column("punto_id", sa.Integer(), nullable=True),
        sa.PrimaryKeyConstraint("id", name="pk_eventos"),
        sa.ForeignKeyConstraint(["punto_id"], ["puntos_interes.id"], name="fk_eventos_punto_id"),
    )
    op.create_index("idx_eventos_fecha_ini", "eventos", ["fecha_ini"])
    op.create_index("idx_eventos_punto_id", "eventos", ["punto_id"])

    op.create_table(
        "rutas",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("nombre", sa.String(150), nullable=False),
        sa.Column("descripcion", sa.Text(), nullable=True),
        sa.Column(
            "fecha_creacion",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("CURRENT_TIMESTAMP"),
        ),
        sa.Column(
            "duracion",
            sa.Integer(),
            nullable=False,
            server_default=sa.text("0"),
            comment="Estimated traversal time in minutes (derived)",
        ),
        sa.PrimaryKeyConstraint("id", name="pk_rutas"),
    )

    op.create_table(
        "rutas_puntos",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("ruta_id", sa.Integer(), nullable=False),
        sa.Column("punto_id", sa.Integer(), nullable=False),
        sa.Column("orden", sa.Integer(), nullable=True),
        sa.PrimaryKeyConstraint("id", name="pk_rutas_puntos"),
        sa.ForeignKeyConstraint(["ruta_id"], ["rutas.id"], name="fk_rutas_puntos_ruta_id"),
        sa.ForeignKeyConstraint(["punto_id"], ["puntos_interes.id"], name="fk_rutas_puntos_punto_id"),
        sa.UniqueConstraint("ruta_id", "punto_id", name="uq_rutas_puntos_ruta_punto"),
    )
    op.create_index("ix_rutas_puntos_ruta_id", "rutas_puntos", ["ruta_id"])
    op.create_index("ix_rutas_puntos_punto_id", "rutas_puntos", ["punto_id"])

    op.bulk_insert(
        categorias,
        [
            {"nombre": nombre, "ambito": ambito}
            for ambito, nombres in CATEGORIAS_INICIALES.items()
            for nombre in nombres
        ],
    )


def downgrade() -> None:
    op.drop_index("ix_rutas_puntos_punto_id", table_name="rutas_puntos")
    op.drop_index("ix_rutas_puntos_ruta_id", table_name="rutas_puntos")
    op.drop_table("rutas_puntos")
    op.drop_table("rutas")
    op.drop_index("idx_eventos_punto_id", table_name="eventos")
    op.drop_index("idx_eventos_fecha_ini", table_name="eventos")
    op.drop_table("eventos")
    op.drop_table("usuarios")
    op.drop_index("idx_puntos_interes_tipo", table_name="puntos_interes")
    op.drop_table("puntos_interes")
    op.drop_table("categorias")
