from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from services.api.app.services.cart import CartDraft
from services.api.app.services.share import OutboxShareSink


@dataclass
class CartRecord:
    cart_id: str
    draft: CartDraft
    created_at: datetime


class InMemoryStore:
    """Carts live only in process memory; abandoning one leaves nothing persisted."""

    def __init__(self) -> None:
        self._carts: dict[str, CartRecord] = {}

    def save_cart(self, record: CartRecord) -> None:
        self._carts[record.cart_id] = record

    def get_cart(self, cart_id: str) -> CartRecord | None:
        return self._carts.get(cart_id)

    def discard_cart(self, cart_id: str) -> CartRecord | None:
        return self._carts.pop(cart_id, None)


store = InMemoryStore()
outbox = OutboxShareSink()
