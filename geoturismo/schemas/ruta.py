"""
Geoturismo Backend — Route Schemas
====================================

What:  Request/response contracts for /rutas and its point associations.
"""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from geoturismo.schemas.punto import PuntoResponse


class RutaCreate(BaseModel):
    """`puntos` lists point ids in route order; it may be empty."""
    nombre: str = Field(min_length=1, max_length=150)
    descripcion: Optional[str] = None
    puntos: List[int] = Field(default_factory=list)


class RutaUpdate(BaseModel):
    nombre: Optional[str] = Field(default=None, min_length=1, max_length=150)
    descripcion: Optional[str] = None

    model_config = {"extra": "forbid"}


class RutaPuntoAdd(BaseModel):
    punto_id: int
    orden: Optional[int] = Field(default=None, ge=0)


class RutaPuntosLote(BaseModel):
    puntos: List[int] = Field(min_length=1)


class RutaResponse(BaseModel):
    id: int
    nombre: str
    descripcion: Optional[str] = None
    fecha_creacion: datetime
    duracion: int = Field(description="Estimated traversal time in minutes")

    model_config = {"from_attributes": True}


class RutaPuntoResponse(PuntoResponse):
    orden: Optional[int] = None


class RutaDetalleResponse(RutaResponse):
    puntos: List[RutaPuntoResponse] = Field(default_factory=list)


class RutaMutationResponse(BaseModel):
    mensaje: str
    ruta: RutaDetalleResponse
