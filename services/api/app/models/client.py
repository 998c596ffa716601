from __future__ import annotations

from pydantic import BaseModel, Field
from services.api.app.services.directory_base import Cliente


class ClienteIn(BaseModel):
    id: str = Field(..., min_length=1)
    nombre: str = Field(..., min_length=1)
    apellido: str = ""
    telefono: str = Field(..., min_length=1)
    direccion: str = ""
    email: str | None = None


class ClienteOut(ClienteIn):
    pass


class ClienteCreateRequest(BaseModel):
    nombre: str
    apellido: str
    telefono: str
    direccion: str = ""
    email: str | None = None


def cliente_out(c: Cliente) -> ClienteOut:
    return ClienteOut(
        id=c.id,
        nombre=c.nombre,
        apellido=c.apellido,
        telefono=c.telefono,
        direccion=c.direccion,
        email=c.email,
    )


def cliente_from_in(payload: ClienteIn) -> Cliente:
    return Cliente(
        id=payload.id,
        nombre=payload.nombre.strip(),
        apellido=payload.apellido.strip(),
        telefono=payload.telefono.strip(),
        direccion=payload.direccion.strip(),
        email=payload.email,
    )
