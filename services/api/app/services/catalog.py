from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Protocol


@dataclass(frozen=True, slots=True)
class CatalogEntry:
    nombre: str
    precio: Decimal


class CatalogLookup(Protocol):
    def search(self, text: str) -> list[CatalogEntry]: ...


class MockCatalog:
    """Garments the counter staff pick most often.

    Prices here only pre-fill suggestions. They are never authoritative.
    """

    def __init__(self, entries: list[CatalogEntry] | None = None) -> None:
        self._entries = entries or [
            CatalogEntry("Camisa", Decimal("5")),
            CatalogEntry("Pantalón", Decimal("7")),
            CatalogEntry("Edredón", Decimal("15")),
            CatalogEntry("Vestido", Decimal("10")),
            CatalogEntry("Chaqueta", Decimal("12")),
            CatalogEntry("Falda", Decimal("8")),
            CatalogEntry("Sábanas", Decimal("12")),
            CatalogEntry("Toalla", Decimal("6")),
        ]

    def search(self, text: str) -> list[CatalogEntry]:
        needle = text.strip().lower()
        if not needle:
            return []
        return [e for e in self._entries if needle in e.nombre.lower()]
