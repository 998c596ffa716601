from __future__ import annotations

from services.api.app.db.models import OrderRecord
from services.api.app.models.order import order_out
from services.api.app.services.finalizer import Order


def order_record(order: Order) -> OrderRecord:
    out = order_out(order)
    return OrderRecord(
        codigo=order.codigo,
        cliente_id=order.cliente.id,
        cliente_nombre=order.cliente.nombre_completo,
        telefono=order.cliente.telefono,
        articulos=len(order.items),
        total=out.total,
        estado=order.estado.value,
        created_at=order.created_at,
        delivery_at=order.delivery_at,
        qr_payload=order.qr_payload,
        snapshot_json=out.model_dump(mode="json", by_alias=True),
    )
