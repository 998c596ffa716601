"""Shared event schema (v1).

The backend stores an append-only event log of cart and order activity. Clients can consume
these events to render an audit trail.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field


class EntityTypeV1(str, Enum):
    CART = "Cart"
    ORDER = "Order"


class EventTypeV1(str, Enum):
    CART_CREATED = "CART_CREATED"
    CART_ITEM_ADDED = "CART_ITEM_ADDED"
    CART_ITEM_EDITED = "CART_ITEM_EDITED"
    CART_ITEM_REMOVED = "CART_ITEM_REMOVED"
    CART_DISCARDED = "CART_DISCARDED"
    DELIVERY_SELECTED = "DELIVERY_SELECTED"
    FINALIZE_REJECTED = "FINALIZE_REJECTED"
    ORDER_FINALIZED = "ORDER_FINALIZED"
    ORDER_SHARED = "ORDER_SHARED"
    ORDER_SHARE_FAILED = "ORDER_SHARE_FAILED"


class EventV1(BaseModel):
    id: str

    entity_type: EntityTypeV1
    entity_id: str

    event_type: EventTypeV1
    payload: dict[str, Any] = Field(default_factory=dict)
    created_at: str
