"""
Geoturismo Backend — Category Routes
======================================

What:  Lists and extends the category enumeration used by points and events.
"""

from typing import List, Literal, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from geoturismo.database import get_db_session
from geoturismo.schemas.categoria import (
    CategoriaCreate,
    CategoriaMutationResponse,
    CategoriaResponse,
)
from geoturismo.schemas.common import ErrorResponse
from geoturismo.services.categoria_service import categoria_service

router = APIRouter(prefix="/categorias", tags=["Categorias"])


@router.get("", response_model=List[CategoriaResponse], summary="List categories")
async def list_categorias(
    ambito: Optional[Literal["punto", "evento"]] = Query(default=None),
    db: AsyncSession = Depends(get_db_session),
) -> List[CategoriaResponse]:
    return await categoria_service.list_categorias(db, ambito)


@router.post(
    "",
    status_code=201,
    response_model=CategoriaMutationResponse,
    responses={
        400: {"description": "Invalid label", "model": ErrorResponse},
        409: {"description": "Label already registered", "model": ErrorResponse},
    },
    summary="Register a new category label",
)
async def create_categoria(
    data: CategoriaCreate,
    db: AsyncSession = Depends(get_db_session),
) -> CategoriaMutationResponse:
    categoria = await categoria_service.create_categoria(db, data)
    return CategoriaMutationResponse(mensaje="Categoría añadida correctamente", categoria=categoria)
