from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException
from services.api.app.deps import get_directory
from services.api.app.models.client import ClienteCreateRequest, ClienteOut, cliente_out
from services.api.app.services.directory_base import (
    ClienteDraft,
    ClientDirectory,
    DirectoryError,
    DirectoryUnavailableError,
)
from services.api.app.services.errors import ValidationError

router = APIRouter()


def _raise_directory_http_error(e: Exception) -> None:
    if isinstance(e, ValidationError):
        raise HTTPException(status_code=422, detail=str(e)) from e

    if isinstance(e, DirectoryUnavailableError):
        raise HTTPException(status_code=503, detail=str(e)) from e

    if isinstance(e, DirectoryError):
        raise HTTPException(status_code=502, detail=str(e)) from e

    raise HTTPException(status_code=500, detail="Internal Server Error") from e


@router.get("/v1/clients", response_model=list[ClienteOut])
def search_clients(q: str, directory: ClientDirectory = Depends(get_directory)) -> list[ClienteOut]:
    try:
        found = directory.search(q)
    except Exception as e:
        _raise_directory_http_error(e)

    return [cliente_out(c) for c in found]


@router.post("/v1/clients", response_model=ClienteOut, status_code=201)
def create_client(
    payload: ClienteCreateRequest,
    directory: ClientDirectory = Depends(get_directory),
) -> ClienteOut:
    draft = ClienteDraft(
        nombre=payload.nombre,
        apellido=payload.apellido,
        telefono=payload.telefono,
        direccion=payload.direccion,
        email=payload.email,
    )
    try:
        created = directory.create(draft)
    except Exception as e:
        _raise_directory_http_error(e)

    return cliente_out(created)
