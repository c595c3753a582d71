"""
Geoturismo Backend — User Service
===================================

What:  CRUD for /usuarios plus login and password change.
How:   Uniqueness of nombre_usuario and email is checked before writing
       (clear 409 messages) and enforced again by the schema constraints
       (flush_or_conflict turns a lost race into a 409 as well).

Security:
    - Passwords are hashed with bcrypt before they reach the session.
    - Every response goes through UsuarioResponse, which has no password field.
    - Unknown email on login → NotFoundError (404);
      known email with a wrong password → AuthenticationError (401).
"""

import logging
from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from geoturismo.exceptions import AuthenticationError, ConflictError, NotFoundError
from geoturismo.models import Usuario
from geoturismo.schemas.usuario import (
    CambioContrasenaRequest,
    LoginRequest,
    UsuarioCreate,
    UsuarioResponse,
    UsuarioUpdate,
)
from geoturismo.services.passwords import hash_password, verify_password
from geoturismo.services.updates import PartialUpdate, contains_pattern, flush_or_conflict

logger = logging.getLogger(__name__)

usuario_update = PartialUpdate(
    Usuario,
    fields=("nombre_usuario", "nombre", "apellido", "email", "telefono"),
    projection=("id", "nombre_usuario", "nombre", "apellido", "email", "telefono"),
    resource="usuario",
)


class UsuarioService:

    async def _get_usuario(self, db: AsyncSession, usuario_id: int) -> Usuario:
        usuario = await db.get(Usuario, usuario_id)
        if usuario is None:
            raise NotFoundError(resource="usuario", resource_id=usuario_id)
        return usuario

    async def _check_unique(
        self,
        db: AsyncSession,
        nombre_usuario: Optional[str] = None,
        email: Optional[str] = None,
        exclude_id: Optional[int] = None,
    ) -> None:
        """Raises ConflictError if another user already holds the username or email."""
        checks = (
            ("nombre_usuario", Usuario.nombre_usuario, nombre_usuario,
             "El nombre de usuario ya está en uso"),
            ("email", Usuario.email, email, "El email ya está registrado"),
        )
        for field, column, value, message in checks:
            if value is None:
                continue
            query = select(Usuario.id).where(column == value)
            if exclude_id is not None:
                query = query.where(Usuario.id != exclude_id)
            result = await db.execute(query.limit(1))
            if result.scalar_one_or_none() is not None:
                raise ConflictError(message, field=field)

    async def list_usuarios(self, db: AsyncSession) -> List[UsuarioResponse]:
        result = await db.execute(select(Usuario).order_by(Usuario.id))
        return [UsuarioResponse.model_validate(u) for u in result.scalars().all()]

    async def get_usuario(self, db: AsyncSession, usuario_id: int) -> UsuarioResponse:
        return UsuarioResponse.model_validate(await self._get_usuario(db, usuario_id))

    async def list_by_nombre_usuario(
        self, db: AsyncSession, nombre_usuario: str
    ) -> List[UsuarioResponse]:
        result = await db.execute(
            select(Usuario)
            .where(Usuario.nombre_usuario.ilike(contains_pattern(nombre_usuario), escape="\\"))
            .order_by(Usuario.id)
        )
        return [UsuarioResponse.model_validate(u) for u in result.scalars().all()]

    async def create_usuario(self, db: AsyncSession, data: UsuarioCreate) -> UsuarioResponse:
        """
        Raises:
            ConflictError: nombre_usuario or email already registered
        """
        await self._check_unique(db, nombre_usuario=data.nombre_usuario, email=data.email)

        usuario = Usuario(
            nombre_usuario=data.nombre_usuario,
            nombre=data.nombre,
            apellido=data.apellido,
            email=data.email,
            contrasena=hash_password(data.contrasena),
            telefono=data.telefono,
        )
        db.add(usuario)
        await flush_or_conflict(db, "El nombre de usuario o el email ya están registrados")
        logger.info("User created: %s '%s'", usuario.id, usuario.nombre_usuario)
        return UsuarioResponse.model_validate(usuario)

    async def update_usuario(
        self, db: AsyncSession, usuario_id: int, data: UsuarioUpdate
    ) -> UsuarioResponse:
        changes = data.model_dump(exclude_unset=True)
        usuario_update.values(changes)
        await self._get_usuario(db, usuario_id)
        await self._check_unique(
            db,
            nombre_usuario=changes.get("nombre_usuario"),
            email=changes.get("email"),
            exclude_id=usuario_id,
        )
        row = await usuario_update.execute(db, usuario_id, changes)
        return UsuarioResponse.model_validate(row)

    async def change_password(
        self, db: AsyncSession, usuario_id: int, data: CambioContrasenaRequest
    ) -> UsuarioResponse:
        usuario = await self._get_usuario(db, usuario_id)
        if not verify_password(data.contrasena_actual, usuario.contrasena):
            logger.warning("Password change rejected for user %s: wrong password", usuario_id)
            raise AuthenticationError("La contraseña actual no es correcta")

        usuario.contrasena = hash_password(data.contrasena_nueva)
        await db.flush()
        logger.info("Password changed for user %s", usuario_id)
        return UsuarioResponse.model_validate(usuario)

    async def login(self, db: AsyncSession, data: LoginRequest) -> UsuarioResponse:
        result = await db.execute(select(Usuario).where(Usuario.email == data.email))
        usuario = result.scalar_one_or_none()
        if usuario is None:
            raise NotFoundError(resource="usuario con ese email")
        if not verify_password(data.contrasena, usuario.contrasena):
            logger.warning("Login rejected for user %s: wrong password", usuario.id)
            raise AuthenticationError("Contraseña incorrecta")
        logger.info("User %s logged in", usuario.id)
        return UsuarioResponse.model_validate(usuario)

    async def delete_usuario(self, db: AsyncSession, usuario_id: int) -> None:
        usuario = await self._get_usuario(db, usuario_id)
        await db.delete(usuario)
        await db.flush()
        logger.info("User deleted: %s", usuario_id)


usuario_service = UsuarioService()
