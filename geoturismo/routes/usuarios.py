"""
Geoturismo Backend — User Routes
==================================

What:  HTTP handlers for /usuarios, login and password change.

Route Inventory:
    GET    /usuarios                    list users
    GET    /usuarios/nombre/{nombre}    partial username match
    GET    /usuarios/{id}               one user
    POST   /usuarios                    register (201, 409 on duplicates)
    POST   /usuarios/login              check email + password
    PATCH  /usuarios/{id}               partial profile update
    PUT    /usuarios/{id}/contrasena    change password (401 on mismatch)
    DELETE /usuarios/{id}               delete

No handler ever returns the password hash.
"""

from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from geoturismo.database import get_db_session
from geoturismo.schemas.common import ErrorResponse, MensajeResponse
from geoturismo.schemas.usuario import (
    CambioContrasenaRequest,
    LoginRequest,
    UsuarioCreate,
    UsuarioMutationResponse,
    UsuarioResponse,
    UsuarioUpdate,
)
from geoturismo.services.usuario_service import usuario_service

router = APIRouter(prefix="/usuarios", tags=["Usuarios"])

NOT_FOUND = {404: {"description": "User not found", "model": ErrorResponse}}
INVALID = {400: {"description": "Missing or invalid fields", "model": ErrorResponse}}
CONFLICT = {409: {"description": "Username or email already registered", "model": ErrorResponse}}
UNAUTHORIZED = {401: {"description": "Wrong password", "model": ErrorResponse}}


@router.get("", response_model=List[UsuarioResponse], summary="List users")
async def list_usuarios(db: AsyncSession = Depends(get_db_session)) -> List[UsuarioResponse]:
    return await usuario_service.list_usuarios(db)


@router.get(
    "/nombre/{nombre_usuario}",
    response_model=List[UsuarioResponse],
    summary="Search users by username",
)
async def list_usuarios_by_nombre(
    nombre_usuario: str,
    db: AsyncSession = Depends(get_db_session),
) -> List[UsuarioResponse]:
    return await usuario_service.list_by_nombre_usuario(db, nombre_usuario)


@router.get("/{usuario_id}", response_model=UsuarioResponse, responses=NOT_FOUND, summary="Get a user")
async def get_usuario(
    usuario_id: int,
    db: AsyncSession = Depends(get_db_session),
) -> UsuarioResponse:
    return await usuario_service.get_usuario(db, usuario_id)


@router.post(
    "",
    status_code=201,
    response_model=UsuarioMutationResponse,
    responses={**INVALID, **CONFLICT},
    summary="Register a user",
)
async def create_usuario(
    data: UsuarioCreate,
    db: AsyncSession = Depends(get_db_session),
) -> UsuarioMutationResponse:
    usuario = await usuario_service.create_usuario(db, data)
    return UsuarioMutationResponse(mensaje="Usuario añadido correctamente", usuario=usuario)


@router.post(
    "/login",
    response_model=UsuarioMutationResponse,
    responses={**INVALID, **UNAUTHORIZED, **NOT_FOUND},
    summary="Check a user's credentials",
    description="Unknown email answers 404; a wrong password for a known email answers 401.",
)
async def login(
    data: LoginRequest,
    db: AsyncSession = Depends(get_db_session),
) -> UsuarioMutationResponse:
    usuario = await usuario_service.login(db, data)
    return UsuarioMutationResponse(mensaje="Inicio de sesión correcto", usuario=usuario)


@router.patch(
    "/{usuario_id}",
    response_model=UsuarioMutationResponse,
    responses={**INVALID, **NOT_FOUND, **CONFLICT},
    summary="Update some profile fields",
)
async def update_usuario(
    usuario_id: int,
    data: UsuarioUpdate,
    db: AsyncSession = Depends(get_db_session),
) -> UsuarioMutationResponse:
    usuario = await usuario_service.update_usuario(db, usuario_id, data)
    return UsuarioMutationResponse(mensaje="Usuario actualizado correctamente", usuario=usuario)


@router.put(
    "/{usuario_id}/contrasena",
    response_model=UsuarioMutationResponse,
    responses={**INVALID, **UNAUTHORIZED, **NOT_FOUND},
    summary="Change a user's password",
)
async def change_password(
    usuario_id: int,
    data: CambioContrasenaRequest,
    db: AsyncSession = Depends(get_db_session),
) -> UsuarioMutationResponse:
    usuario = await usuario_service.change_password(db, usuario_id, data)
    return UsuarioMutationResponse(mensaje="Contraseña actualizada correctamente", usuario=usuario)


@router.delete("/{usuario_id}", response_model=MensajeResponse, responses=NOT_FOUND, summary="Delete a user")
async def delete_usuario(
    usuario_id: int,
    db: AsyncSession = Depends(get_db_session),
) -> MensajeResponse:
    await usuario_service.delete_usuario(db, usuario_id)
    return MensajeResponse(mensaje="Usuario eliminado correctamente")
