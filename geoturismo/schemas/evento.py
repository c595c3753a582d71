"""
Geoturismo Backend — Event Schemas
====================================

What:  Request/response contracts for /eventos.
How:   Dates are ISO calendar dates (YYYY-MM-DD). When both dates are in
       the same body, fecha_fin must not precede fecha_ini; partial updates
       are checked against the stored row by EventoService.
"""

from datetime import date
from typing import Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from geoturismo.schemas.categoria import normalize_label
from geoturismo.schemas.punto import PuntoResponse


class EventoCreate(BaseModel):
    nombre: str = Field(min_length=1, max_length=150)
    tipo: str = Field(min_length=1, max_length=50, description="Registered event category")
    descripcion: Optional[str] = None
    imagen: Optional[str] = Field(default=None, max_length=500)
    fecha_ini: date
    fecha_fin: Optional[date] = None
    enlace: Optional[str] = Field(default=None, max_length=500)
    punto_id: Optional[int] = None

    @field_validator("tipo")
    @classmethod
    def normalize_tipo(cls, v: str) -> str:
        return normalize_label(v)

    @model_validator(mode="after")
    def check_fechas(self) -> "EventoCreate":
        if self.fecha_fin is not None and self.fecha_fin < self.fecha_ini:
            raise ValueError("fecha_fin no puede ser anterior a fecha_ini")
        return self


class EventoUpdate(BaseModel):
    nombre: Optional[str] = Field(default=None, min_length=1, max_length=150)
    tipo: Optional[str] = Field(default=None, min_length=1, max_length=50)
    descripcion: Optional[str] = None
    imagen: Optional[str] = Field(default=None, max_length=500)
    fecha_ini: Optional[date] = None
    fecha_fin: Optional[date] = None
    enlace: Optional[str] = Field(default=None, max_length=500)
    punto_id: Optional[int] = None

    @field_validator("tipo")
    @classmethod
    def normalize_tipo(cls, v: Optional[str]) -> Optional[str]:
        return normalize_label(v) if v is not None else v

    model_config = {"extra": "forbid"}


class EventoResponse(BaseModel):
    """Event row plus the related point (null when the event has none)."""
    id: int
    nombre: str
    tipo: str
    descripcion: Optional[str] = None
    imagen: Optional[str] = None
    fecha_ini: date
    fecha_fin: Optional[date] = None
    enlace: Optional[str] = None
    punto_id: Optional[int] = None
    punto: Optional[PuntoResponse] = None

    model_config = {"from_attributes": True}


class EventoMutationResponse(BaseModel):
    mensaje: str
    evento: EventoResponse
