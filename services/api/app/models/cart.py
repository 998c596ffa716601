from __future__ import annotations

from datetime import date, datetime, time
from decimal import Decimal

from packages.shared.schemas.order_v1 import ChargeUnitV1, ServiceTypeV1
from pydantic import BaseModel, ConfigDict, Field
from services.api.app.models.client import ClienteIn, ClienteOut
from services.api.app.services.cart import LineItem
from services.api.app.services.delivery import DeliveryShortcut
from services.api.app.services.formatting import format_amount


class _WireModel(BaseModel):
    # The mobile app speaks camelCase; Python code uses the snake_case names.
    model_config = ConfigDict(populate_by_name=True)


class CartCreateRequest(_WireModel):
    cliente: ClienteIn


class ItemAddRequest(_WireModel):
    nombre: str
    tipo_servicio: ServiceTypeV1 = Field(ServiceTypeV1.LAVADO, alias="tipoServicio")
    unidad_cobro: ChargeUnitV1 = Field(ChargeUnitV1.UNIDAD, alias="unidadCobro")
    cantidad: Decimal = Decimal("1")
    # 0 or null leaves the item waiting for an explicit price.
    precio: Decimal | None = None


class ItemPatchRequest(_WireModel):
    nombre: str | None = None
    tipo_servicio: ServiceTypeV1 | None = Field(None, alias="tipoServicio")
    unidad_cobro: ChargeUnitV1 | None = Field(None, alias="unidadCobro")
    cantidad: Decimal | None = None
    precio: Decimal | None = None


class DeliveryUpdateRequest(_WireModel):
    """Exactly one way of picking.

    A full timestamp, a shortcut, or a date (fecha) and/or a time (hora).
    """

    delivery_at: datetime | None = Field(None, alias="deliveryAt")
    shortcut: DeliveryShortcut | None = None
    fecha: date | None = None
    hora: time | None = None


class LineItemOut(_WireModel):
    id: str
    nombre: str
    tipo_servicio: ServiceTypeV1 = Field(..., alias="tipoServicio")
    unidad_cobro: ChargeUnitV1 = Field(..., alias="unidadCobro")
    cantidad: float
    precio: str | None = None
    subtotal: str
    needs_price: bool = Field(..., alias="needsPrice")


class CartOut(_WireModel):
    cart_id: str = Field(..., alias="cartId")
    cliente: ClienteOut | None = None
    items: list[LineItemOut] = Field(default_factory=list)
    total: str
    has_unpriced_items: bool = Field(..., alias="hasUnpricedItems")
    delivery_at: datetime | None = Field(None, alias="deliveryAt")
    delivery_shortcut: DeliveryShortcut | None = Field(None, alias="deliveryShortcut")


class DeliveryOptionsOut(_WireModel):
    minimum: datetime
    suggested: datetime
    express: datetime
    recomendado: datetime
    default_time: str = Field(..., alias="defaultTime")


def line_item_out(item: LineItem) -> LineItemOut:
    return LineItemOut(
        id=item.id,
        nombre=item.nombre,
        tipo_servicio=item.tipo_servicio,
        unidad_cobro=item.unidad_cobro,
        cantidad=float(item.cantidad),
        precio=format_amount(item.precio.amount_or_zero()) if item.precio.is_set else None,
        subtotal=format_amount(item.subtotal()),
        needs_price=item.needs_price,
    )
