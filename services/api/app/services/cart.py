"""Cart drafts and the reducers that evolve them.

A `CartDraft` is immutable. Every user action goes through a reducer that returns a new draft,
so a rejected action leaves the previous draft untouched. Totals are always derived from the
current items.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field, replace
from datetime import datetime
from decimal import Decimal
from typing import Any
from uuid import uuid4

from packages.shared.schemas.order_v1 import ChargeUnitV1, ServiceTypeV1
from services.api.app.services.delivery import DeliveryShortcut
from services.api.app.services.directory_base import Cliente
from services.api.app.services.errors import (
    CartItemNotFoundError,
    ItemValidationError,
    ValidationError,
)
from services.api.app.services.pricing import (
    UNSET,
    ExplicitPrice,
    Price,
    PricingAdvisor,
    UnsetPrice,
    price_from_amount,
    to_decimal,
)

KILO_STEP = Decimal("0.5")

EDITABLE_FIELDS = frozenset({"nombre", "tipo_servicio", "unidad_cobro", "cantidad", "precio"})


@dataclass(frozen=True, slots=True)
class ItemDraft:
    nombre: str
    tipo_servicio: ServiceTypeV1 = ServiceTypeV1.LAVADO
    unidad_cobro: ChargeUnitV1 = ChargeUnitV1.UNIDAD
    cantidad: Decimal = Decimal("1")
    precio: Price = UNSET


@dataclass(frozen=True, slots=True)
class LineItem:
    id: str
    nombre: str
    tipo_servicio: ServiceTypeV1
    unidad_cobro: ChargeUnitV1
    cantidad: Decimal
    precio: Price

    @property
    def needs_price(self) -> bool:
        return not self.precio.is_set

    def subtotal(self) -> Decimal:
        return self.precio.amount_or_zero() * self.cantidad


@dataclass(frozen=True, slots=True)
class CartDraft:
    cliente: Cliente | None = None
    items: tuple[LineItem, ...] = field(default_factory=tuple)
    delivery_at: datetime | None = None
    # Set when the date came from a shortcut; finalize re-resolves it against its own clock.
    delivery_shortcut: DeliveryShortcut | None = None

    def total(self) -> Decimal:
        return sum((item.subtotal() for item in self.items), Decimal("0"))

    def has_unpriced_items(self) -> bool:
        return any(item.needs_price for item in self.items)

    def get_item(self, item_id: str) -> LineItem:
        for item in self.items:
            if item.id == item_id:
                return item
        raise CartItemNotFoundError(item_id)


def _new_item_id() -> str:
    return uuid4().hex[:12]


def _coerce_price(value: Any) -> Price:
    if isinstance(value, (UnsetPrice, ExplicitPrice)):
        return value
    return price_from_amount(value)


def _validated_fields(
    *,
    nombre: Any,
    tipo_servicio: Any,
    unidad_cobro: Any,
    cantidad: Any,
    precio: Any,
) -> dict[str, Any]:
    name = str(nombre or "").strip()
    if not name:
        raise ItemValidationError("nombre is required", field="nombre")

    try:
        service = ServiceTypeV1(tipo_servicio)
    except ValueError as e:
        raise ItemValidationError(
            f"Unknown tipoServicio: {tipo_servicio!r}", field="tipo_servicio"
        ) from e

    try:
        unit = ChargeUnitV1(unidad_cobro)
    except ValueError as e:
        raise ItemValidationError(
            f"Unknown unidadCobro: {unidad_cobro!r}", field="unidad_cobro"
        ) from e

    try:
        qty = to_decimal(cantidad, field="cantidad")
    except ValidationError as e:
        raise ItemValidationError(str(e), field="cantidad") from e

    if not qty.is_finite() or qty <= 0:
        raise ItemValidationError("cantidad must be greater than zero", field="cantidad")
    if unit is ChargeUnitV1.UNIDAD and qty != qty.to_integral_value():
        raise ItemValidationError("cantidad must be a whole number for unidad", field="cantidad")
    if unit is ChargeUnitV1.KILO and qty % KILO_STEP != 0:
        raise ItemValidationError("cantidad must be a multiple of 0.5 for kilo", field="cantidad")

    try:
        price = _coerce_price(precio)
    except ValidationError as e:
        raise ItemValidationError(str(e), field="precio") from e

    return {
        "nombre": name,
        "tipo_servicio": service,
        "unidad_cobro": unit,
        "cantidad": qty,
        "precio": price,
    }


def bind_client(cart: CartDraft, cliente: Cliente) -> CartDraft:
    return replace(cart, cliente=cliente)


def add_item(
    cart: CartDraft,
    draft: ItemDraft,
    *,
    id_factory: Callable[[], str] = _new_item_id,
) -> CartDraft:
    """Append a validated item. An unset price is allowed and blocks finalization later."""

    values = _validated_fields(
        nombre=draft.nombre,
        tipo_servicio=draft.tipo_servicio,
        unidad_cobro=draft.unidad_cobro,
        cantidad=draft.cantidad,
        precio=draft.precio,
    )

    existing = {item.id for item in cart.items}
    item_id = id_factory()
    while item_id in existing:
        item_id = id_factory()

    return replace(cart, items=cart.items + (LineItem(id=item_id, **values),))


def edit_item(
    cart: CartDraft,
    item_id: str,
    patch: Mapping[str, Any],
    *,
    advisor: PricingAdvisor | None = None,
) -> CartDraft:
    unknown = set(patch) - EDITABLE_FIELDS
    if unknown:
        raise ItemValidationError(f"Cannot edit fields: {sorted(unknown)}")

    current = cart.get_item(item_id)
    merged: dict[str, Any] = {
        "nombre": current.nombre,
        "tipo_servicio": current.tipo_servicio,
        "unidad_cobro": current.unidad_cobro,
        "cantidad": current.cantidad,
        "precio": current.precio,
    }
    merged.update(patch)

    values = _validated_fields(**merged)

    if "precio" not in patch and values["tipo_servicio"] is not current.tipo_servicio:
        values["precio"] = (advisor or PricingAdvisor()).on_service_type_change(
            current.precio, values["tipo_servicio"]
        )

    updated = LineItem(id=current.id, **values)
    return replace(
        cart,
        items=tuple(updated if item.id == item_id else item for item in cart.items),
    )


def remove_item(cart: CartDraft, item_id: str) -> CartDraft:
    return replace(cart, items=tuple(item for item in cart.items if item.id != item_id))


def set_delivery_date(
    cart: CartDraft,
    delivery_at: datetime | None,
    *,
    shortcut: DeliveryShortcut | None = None,
) -> CartDraft:
    return replace(cart, delivery_at=delivery_at, delivery_shortcut=shortcut)


class CartEngine:
    """Stateful holder over a `CartDraft` for callers that prefer methods to reducers."""

    def __init__(
        self,
        cliente: Cliente | None = None,
        *,
        advisor: PricingAdvisor | None = None,
    ) -> None:
        self._draft = CartDraft(cliente=cliente)
        self._advisor = advisor or PricingAdvisor()

    @property
    def draft(self) -> CartDraft:
        return self._draft

    @property
    def items(self) -> tuple[LineItem, ...]:
        return self._draft.items

    def add_item(self, draft: ItemDraft) -> LineItem:
        self._draft = add_item(self._draft, draft)
        return self._draft.items[-1]

    def edit_item(self, item_id: str, patch: Mapping[str, Any]) -> LineItem:
        self._draft = edit_item(self._draft, item_id, patch, advisor=self._advisor)
        return self._draft.get_item(item_id)

    def remove_item(self, item_id: str) -> None:
        self._draft = remove_item(self._draft, item_id)

    def set_delivery_date(
        self,
        delivery_at: datetime | None,
        *,
        shortcut: DeliveryShortcut | None = None,
    ) -> None:
        self._draft = set_delivery_date(self._draft, delivery_at, shortcut=shortcut)

    def total(self) -> Decimal:
        return self._draft.total()

    def has_unpriced_items(self) -> bool:
        return self._draft.has_unpriced_items()

    def reset(self) -> None:
        self._draft = CartDraft(cliente=self._draft.cliente)
