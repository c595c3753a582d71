"""
Geoturismo Backend — Point of Interest Schemas
================================================

What:  Request/response contracts for /puntos.
How:   Create requires nombre, tipo, latitud and longitud. Update accepts
       any subset of the same fields; unknown keys are rejected so typos
       do not turn into silent no-ops.
"""

from typing import Optional

from pydantic import BaseModel, Field, field_validator

from geoturismo.schemas.categoria import normalize_label


class PuntoCreate(BaseModel):
    nombre: str = Field(min_length=1, max_length=150)
    tipo: str = Field(min_length=1, max_length=50, description="Registered point category")
    latitud: float = Field(ge=-90, le=90)
    longitud: float = Field(ge=-180, le=180)
    descripcion: Optional[str] = None
    imagen: Optional[str] = Field(default=None, max_length=500)

    @field_validator("tipo")
    @classmethod
    def normalize_tipo(cls, v: str) -> str:
        return normalize_label(v)


class PuntoUpdate(BaseModel):
    """All fields optional; only the keys present in the body are written."""
    nombre: Optional[str] = Field(default=None, min_length=1, max_length=150)
    tipo: Optional[str] = Field(default=None, min_length=1, max_length=50)
    latitud: Optional[float] = Field(default=None, ge=-90, le=90)
    longitud: Optional[float] = Field(default=None, ge=-180, le=180)
    descripcion: Optional[str] = None
    imagen: Optional[str] = Field(default=None, max_length=500)

    @field_validator("tipo")
    @classmethod
    def normalize_tipo(cls, v: Optional[str]) -> Optional[str]:
        return normalize_label(v) if v is not None else v

    model_config = {"extra": "forbid"}


class PuntoResponse(BaseModel):
    id: int
    nombre: str
    tipo: str
    latitud: float
    longitud: float
    descripcion: Optional[str] = None
    imagen: Optional[str] = None

    model_config = {"from_attributes": True}


class PuntoMutationResponse(BaseModel):
    mensaje: str
    punto: PuntoResponse
