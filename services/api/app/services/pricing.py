from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import ClassVar

from packages.shared.schemas.order_v1 import ServiceTypeV1
from services.api.app.services.catalog import CatalogLookup
from services.api.app.services.errors import ValidationError


@dataclass(frozen=True, slots=True)
class UnsetPrice:
    """The item still needs an explicit price before the order can be finalized."""

    is_set: ClassVar[bool] = False

    def amount_or_zero(self) -> Decimal:
        return Decimal("0")


@dataclass(frozen=True, slots=True)
class ExplicitPrice:
    amount: Decimal

    is_set: ClassVar[bool] = True

    def __post_init__(self) -> None:
        if self.amount <= 0:
            raise ValueError("ExplicitPrice amount must be positive")

    def amount_or_zero(self) -> Decimal:
        return self.amount


Price = UnsetPrice | ExplicitPrice

UNSET = UnsetPrice()


def to_decimal(value: object, *, field: str) -> Decimal:
    if isinstance(value, Decimal):
        return value
    if isinstance(value, bool):
        raise ValidationError(f"{field} must be a number", field=field)
    try:
        # str() keeps float inputs like 1.5 exact instead of their binary expansion.
        return Decimal(str(value))
    except (InvalidOperation, ValueError) as e:
        raise ValidationError(f"{field} must be a number", field=field) from e


def price_from_amount(amount: object | None) -> Price:
    """Map a wire price to the tagged variant. 0 and None both mean unset."""

    if amount is None:
        return UNSET
    value = to_decimal(amount, field="precio")
    if not value.is_finite():
        raise ValidationError("precio must be a finite number", field="precio")
    if value < 0:
        raise ValidationError("precio cannot be negative", field="precio")
    if value != value.quantize(Decimal("0.01")):
        raise ValidationError("precio supports at most two decimals", field="precio")
    if value == 0:
        return UNSET
    return ExplicitPrice(value)


DEFAULT_PRICE_CATALOG: dict[ServiceTypeV1, tuple[Decimal, ...]] = {
    ServiceTypeV1.LAVADO: (Decimal("3"), Decimal("5"), Decimal("8"), Decimal("12")),
    ServiceTypeV1.PLANCHADO: (Decimal("2"), Decimal("4"), Decimal("6"), Decimal("10")),
    ServiceTypeV1.OTROS: (Decimal("5"), Decimal("10"), Decimal("15"), Decimal("25")),
}


class PricingAdvisor:
    def __init__(
        self,
        catalog: dict[ServiceTypeV1, tuple[Decimal, ...]] | None = None,
        lookup: CatalogLookup | None = None,
    ) -> None:
        self._catalog = catalog or DEFAULT_PRICE_CATALOG
        self._lookup = lookup

    def suggest_price(self, service_type: ServiceTypeV1) -> Decimal:
        return self._catalog[ServiceTypeV1(service_type)][0]

    def suggestions(self, service_type: ServiceTypeV1, nombre: str | None = None) -> list[Decimal]:
        fixed = list(self._catalog[ServiceTypeV1(service_type)])
        if self._lookup is None or not nombre:
            return fixed

        prefilled: list[Decimal] = []
        for entry in self._lookup.search(nombre):
            if entry.precio > 0 and entry.precio not in prefilled:
                prefilled.append(entry.precio)
        return prefilled + [p for p in fixed if p not in prefilled]

    def on_service_type_change(self, current: Price, new_type: ServiceTypeV1) -> Price:
        # Only an unset price follows the service type. An explicit choice is never overwritten.
        if current.is_set:
            return current
        return ExplicitPrice(self.suggest_price(new_type))
