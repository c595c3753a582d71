"""
Geoturismo Backend — Category Schemas
=======================================
"""

import re
from typing import Literal

from pydantic import BaseModel, Field, field_validator

# Lower-case letters (Spanish accents included), digits, underscore and space
CATEGORIA_PATTERN = re.compile(r"^[a-z0-9_áéíóúñü ]{1,50}$")


def normalize_label(value: str) -> str:
    """Trims, collapses inner whitespace and lower-cases a category label."""
    return " ".join(value.split()).lower()


class CategoriaCreate(BaseModel):
    """
    Body of POST /categorias.

    The label is normalized (trimmed, lower-cased) and must match
    CATEGORIA_PATTERN before it reaches the database.
    """
    nombre: str = Field(description="New category label")
    ambito: Literal["punto", "evento"] = Field(description="Entity the label applies to")

    @field_validator("nombre")
    @classmethod
    def normalize_nombre(cls, v: str) -> str:
        label = normalize_label(v)
        if not CATEGORIA_PATTERN.match(label):
            raise ValueError(
                "La categoría solo admite letras minúsculas, dígitos, '_' y espacios (máx. 50)"
            )
        return label


class CategoriaResponse(BaseModel):
    id: int
    nombre: str
    ambito: str

    model_config = {"from_attributes": True}


class CategoriaMutationResponse(BaseModel):
    mensaje: str
    categoria: CategoriaResponse
