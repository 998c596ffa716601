from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from packages.shared.schemas.order_v1 import OrderStatusV1
from pydantic import BaseModel, ConfigDict, Field
from services.api.app.models.cart import LineItemOut, line_item_out
from services.api.app.models.client import ClienteOut, cliente_from_in, cliente_out
from services.api.app.services.cart import LineItem
from services.api.app.services.finalizer import Order
from services.api.app.services.formatting import format_amount
from services.api.app.services.pricing import price_from_amount


class _WireModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class OrderOut(_WireModel):
    codigo: str
    cliente: ClienteOut
    items: list[LineItemOut]
    total: str
    created_at: datetime = Field(..., alias="createdAt")
    delivery_at: datetime = Field(..., alias="deliveryAt")
    estado: OrderStatusV1
    qr_payload: str = Field(..., alias="qrPayload")


class OrderListItem(_WireModel):
    codigo: str
    cliente: str
    articulos: int
    total: str
    estado: OrderStatusV1
    created_at: datetime = Field(..., alias="createdAt")
    delivery_at: datetime = Field(..., alias="deliveryAt")


class FinalizeErrorOut(BaseModel):
    reason: str
    message: str


class OrderMessagesOut(_WireModel):
    whatsapp: str
    share: str
    whatsapp_url: str = Field(..., alias="whatsappUrl")


class ShareOutcomeOut(_WireModel):
    codigo: str
    delivered: bool
    with_image: bool = Field(..., alias="withImage")
    error: str | None = None


def order_out(order: Order) -> OrderOut:
    return OrderOut(
        codigo=order.codigo,
        cliente=cliente_out(order.cliente),
        items=[line_item_out(item) for item in order.items],
        total=format_amount(order.total),
        created_at=order.created_at,
        delivery_at=order.delivery_at,
        estado=order.estado,
        qr_payload=order.qr_payload,
    )


def order_from_snapshot(snapshot: dict) -> Order:
    """Rebuild the immutable Order from the JSON snapshot stored at hand-off."""

    out = OrderOut.model_validate(snapshot)
    items = tuple(
        LineItem(
            id=it.id,
            nombre=it.nombre,
            tipo_servicio=it.tipo_servicio,
            unidad_cobro=it.unidad_cobro,
            cantidad=Decimal(str(it.cantidad)),
            precio=price_from_amount(it.precio),
        )
        for it in out.items
    )
    return Order(
        codigo=out.codigo,
        cliente=cliente_from_in(out.cliente),
        items=items,
        total=sum((item.subtotal() for item in items), Decimal("0")),
        created_at=out.created_at,
        delivery_at=out.delivery_at,
        estado=out.estado,
        qr_payload=out.qr_payload,
    )
