from __future__ import annotations

import json
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from enum import Enum

import structlog
from packages.shared.schemas.order_v1 import OrderStatusV1, QrPayloadV1
from services.api.app.services.cart import CartDraft, LineItem
from services.api.app.services.delivery import DeliveryWindowCalculator, as_local_naive
from services.api.app.services.directory_base import Cliente
from services.api.app.services.errors import DeliveryWindowError
from services.api.app.services.formatting import ES_ES, LocaleFormat, format_amount
from services.api.app.services.order_codes import MonotonicCodeAllocator, OrderCodeAllocator

logger = structlog.get_logger(__name__)


@dataclass(frozen=True, slots=True)
class Order:
    codigo: str
    cliente: Cliente
    items: tuple[LineItem, ...]
    total: Decimal
    created_at: datetime
    delivery_at: datetime
    estado: OrderStatusV1
    qr_payload: str


class FinalizeFailureReason(str, Enum):
    NO_CLIENT = "NO_CLIENT"
    EMPTY_CART = "EMPTY_CART"
    UNPRICED_ITEMS = "UNPRICED_ITEMS"
    NO_DELIVERY_DATE = "NO_DELIVERY_DATE"
    DELIVERY_TOO_SOON = "DELIVERY_TOO_SOON"
    INTERNAL = "INTERNAL"


@dataclass(frozen=True, slots=True)
class FinalizeFailure:
    reason: FinalizeFailureReason
    message: str


@dataclass(frozen=True, slots=True)
class FinalizeResult:
    order: Order | None = None
    failure: FinalizeFailure | None = None

    @property
    def ok(self) -> bool:
        return self.order is not None


def build_qr_payload(
    *,
    codigo: str,
    cliente: Cliente,
    item_count: int,
    total: Decimal,
    created_at: datetime,
    delivery_at: datetime,
    locale: LocaleFormat = ES_ES,
) -> str:
    payload = QrPayloadV1(
        codigo=codigo,
        cliente=cliente.nombre_completo,
        telefono=cliente.telefono,
        fecha=locale.format_datetime(created_at),
        fechaEntrega=locale.format_datetime(delivery_at),
        articulos=item_count,
        total=format_amount(total),
        estado=OrderStatusV1.PENDIENTE,
    )
    return json.dumps(payload.model_dump(mode="json"), ensure_ascii=False)


def parse_qr_payload(text: str) -> QrPayloadV1:
    return QrPayloadV1.model_validate_json(text)


class OrderFinalizer:
    """Turns a complete cart into an immutable Order.

    Every precondition failure comes back as a `FinalizeFailure`; nothing raised inside
    `finalize` reaches the caller.
    """

    def __init__(
        self,
        *,
        calculator: DeliveryWindowCalculator | None = None,
        codes: OrderCodeAllocator | None = None,
        locale: LocaleFormat = ES_ES,
    ) -> None:
        self._calculator = calculator or DeliveryWindowCalculator()
        self._codes = codes or MonotonicCodeAllocator()
        self._locale = locale

    def resolve_delivery(self, cart: CartDraft, now: datetime) -> datetime | None:
        """A shortcut choice is re-resolved against `now`; an explicit date is used as is."""

        if cart.delivery_shortcut is not None:
            return self._calculator.shortcut(cart.delivery_shortcut, now)
        if cart.delivery_at is None:
            return None
        return as_local_naive(cart.delivery_at)

    def check(self, cart: CartDraft, now: datetime) -> FinalizeFailure | None:
        if cart.cliente is None:
            return FinalizeFailure(FinalizeFailureReason.NO_CLIENT, "Select a client first")
        if not cart.items:
            return FinalizeFailure(
                FinalizeFailureReason.EMPTY_CART, "Add at least one item to the order"
            )
        if cart.has_unpriced_items():
            names = ", ".join(item.nombre for item in cart.items if item.needs_price)
            return FinalizeFailure(
                FinalizeFailureReason.UNPRICED_ITEMS, f"Items without a price: {names}"
            )
        delivery_at = self.resolve_delivery(cart, now)
        if delivery_at is None:
            return FinalizeFailure(
                FinalizeFailureReason.NO_DELIVERY_DATE, "Choose a delivery date"
            )
        try:
            self._calculator.validate(delivery_at, now)
        except DeliveryWindowError as e:
            return FinalizeFailure(FinalizeFailureReason.DELIVERY_TOO_SOON, str(e))
        return None

    def finalize(self, cart: CartDraft, *, now: datetime | None = None) -> FinalizeResult:
        try:
            return self._finalize(cart, datetime.now() if now is None else as_local_naive(now))
        except Exception as e:
            logger.exception("finalize_failed", error=str(e))
            return FinalizeResult(
                failure=FinalizeFailure(FinalizeFailureReason.INTERNAL, "Could not finalize order")
            )

    def _finalize(self, cart: CartDraft, now: datetime) -> FinalizeResult:
        failure = self.check(cart, now)
        if failure is not None:
            logger.info("finalize_rejected", reason=failure.reason.value, detail=failure.message)
            return FinalizeResult(failure=failure)

        delivery_at = self.resolve_delivery(cart, now)
        assert cart.cliente is not None and delivery_at is not None

        codigo = self._codes.next_code()
        total = cart.total()
        qr_payload = build_qr_payload(
            codigo=codigo,
            cliente=cart.cliente,
            item_count=len(cart.items),
            total=total,
            created_at=now,
            delivery_at=delivery_at,
            locale=self._locale,
        )

        order = Order(
            codigo=codigo,
            cliente=cart.cliente,
            items=tuple(cart.items),
            total=total,
            created_at=now,
            delivery_at=delivery_at,
            estado=OrderStatusV1.PENDIENTE,
            qr_payload=qr_payload,
        )
        logger.info(
            "order_finalized",
            codigo=codigo,
            cliente_id=cart.cliente.id,
            articulos=len(order.items),
            total=format_amount(total),
            code_scheme=getattr(self._codes, "scheme", None),
        )
        return FinalizeResult(order=order)
