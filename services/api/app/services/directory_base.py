from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol


class DirectoryError(Exception):
    """Base class for client directory errors.

    Safe to retry. The workflow does not advance to cart assembly while it is raised.
    """


class DirectoryUnavailableError(DirectoryError):
    def __init__(self, base_url: str, reason: str) -> None:
        super().__init__(f"Client directory unreachable at {base_url}: {reason}")
        self.base_url = base_url


class DirectoryResponseError(DirectoryError):
    def __init__(self, status: int | None, message: str) -> None:
        super().__init__(f"Client directory rejected the request (status={status}): {message}")
        self.status = status


@dataclass(frozen=True, slots=True)
class Cliente:
    id: str
    nombre: str
    apellido: str
    telefono: str
    direccion: str = ""
    email: str | None = None

    @property
    def nombre_completo(self) -> str:
        return f"{self.nombre} {self.apellido}".strip()


@dataclass(frozen=True, slots=True)
class ClienteDraft:
    nombre: str
    apellido: str
    telefono: str
    direccion: str = ""
    email: str | None = None


class ClientDirectory(Protocol):
    source: str

    def search(self, text: str) -> list[Cliente]: ...

    def create(self, draft: ClienteDraft) -> Cliente: ...
