from __future__ import annotations

from uuid import uuid4

from services.api.app.services.directory_base import Cliente, ClienteDraft
from services.api.app.services.errors import ValidationError


def _normalize(text: str) -> str:
    return "".join(ch for ch in text.lower() if ch.isalnum())


class ClientDirectoryMock:
    source = "DIRECTORY_MOCK"

    def __init__(self, clients: list[Cliente] | None = None) -> None:
        self._clients: list[Cliente] = list(
            clients
            if clients is not None
            else [
                Cliente(
                    id="cli-1",
                    nombre="Juan",
                    apellido="Pérez",
                    telefono="+591 70123456",
                    direccion="Av. Busch 1234",
                    email="juan.perez@example.com",
                ),
                Cliente(
                    id="cli-2",
                    nombre="María",
                    apellido="González",
                    telefono="+591 71234567",
                    direccion="Calle Sucre 45",
                ),
            ]
        )

    def search(self, text: str) -> list[Cliente]:
        needle = _normalize(text)
        if not needle:
            return []

        matches: list[Cliente] = []
        for c in self._clients:
            haystack = [_normalize(c.nombre_completo), _normalize(c.telefono)]
            if c.email:
                haystack.append(_normalize(c.email))
            if any(needle in h for h in haystack):
                matches.append(c)
        return matches

    def create(self, draft: ClienteDraft) -> Cliente:
        for field_name in ("nombre", "apellido", "telefono"):
            if not str(getattr(draft, field_name) or "").strip():
                raise ValidationError(f"{field_name} is required", field=field_name)

        cliente = Cliente(
            id=f"cli-{uuid4().hex[:8]}",
            nombre=draft.nombre.strip(),
            apellido=draft.apellido.strip(),
            telefono=draft.telefono.strip(),
            direccion=draft.direccion.strip(),
            email=(draft.email or "").strip() or None,
        )
        self._clients.append(cliente)
        return cliente
