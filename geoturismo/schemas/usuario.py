"""
Geoturismo Backend — User Schemas
===================================

What:  Request/response contracts for /usuarios.

Security:
    No response model declares `contrasena`, so the hash can never be
    serialized. Request models accept the password as `contrasena` or,
    for clients of the first API version, as `contraseña`.

bcrypt only reads the first 72 bytes of a password; longer values are
rejected instead of being silently truncated.
"""

from typing import Optional

from pydantic import AliasChoices, BaseModel, Field, field_validator

EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"
MAX_PASSWORD_BYTES = 72


def _check_password(value: str) -> str:
    if len(value.encode("utf-8")) > MAX_PASSWORD_BYTES:
        raise ValueError(f"La contraseña no puede superar {MAX_PASSWORD_BYTES} bytes")
    return value


class UsuarioCreate(BaseModel):
    nombre_usuario: str = Field(min_length=1, max_length=50)
    nombre: str = Field(min_length=1, max_length=100)
    apellido: str = Field(min_length=1, max_length=100)
    email: str = Field(max_length=255, pattern=EMAIL_PATTERN)
    contrasena: str = Field(
        min_length=1,
        validation_alias=AliasChoices("contrasena", "contraseña"),
    )
    telefono: Optional[str] = Field(default=None, max_length=30)

    @field_validator("contrasena")
    @classmethod
    def validate_contrasena(cls, v: str) -> str:
        return _check_password(v)


class UsuarioUpdate(BaseModel):
    """Profile fields only; passwords change through PUT /usuarios/{id}/contrasena."""
    nombre_usuario: Optional[str] = Field(default=None, min_length=1, max_length=50)
    nombre: Optional[str] = Field(default=None, min_length=1, max_length=100)
    apellido: Optional[str] = Field(default=None, min_length=1, max_length=100)
    email: Optional[str] = Field(default=None, max_length=255, pattern=EMAIL_PATTERN)
    telefono: Optional[str] = Field(default=None, max_length=30)

    model_config = {"extra": "forbid"}


class LoginRequest(BaseModel):
    email: str = Field(min_length=1)
    contrasena: str = Field(
        min_length=1,
        validation_alias=AliasChoices("contrasena", "contraseña"),
    )


class CambioContrasenaRequest(BaseModel):
    contrasena_actual: str = Field(min_length=1)
    contrasena_nueva: str = Field(min_length=1)

    @field_validator("contrasena_nueva")
    @classmethod
    def validate_contrasena_nueva(cls, v: str) -> str:
        return _check_password(v)


class UsuarioResponse(BaseModel):
    id: int
    nombre_usuario: str
    nombre: str
    apellido: str
    email: str
    telefono: Optional[str] = None

    model_config = {"from_attributes": True}


class UsuarioMutationResponse(BaseModel):
    mensaje: str
    usuario: UsuarioResponse
