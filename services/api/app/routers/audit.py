from __future__ import annotations

from fastapi import APIRouter, Depends
from packages.shared.schemas.events import EventV1
from services.api.app.db.events import event_to_schema
from services.api.app.db.models import EventLog, OrderRecord
from services.api.app.deps import get_db
from services.api.app.models.order import OrderListItem
from sqlalchemy.orm import Session

router = APIRouter()


@router.get("/v1/orders", response_model=list[OrderListItem])
def list_orders(
    cliente_id: str | None = None,
    db: Session = Depends(get_db),
) -> list[OrderListItem]:
    query = db.query(OrderRecord)
    if cliente_id:
        query = query.filter(OrderRecord.cliente_id == cliente_id)

    rows = query.order_by(OrderRecord.created_at.desc()).limit(200).all()

    return [
        OrderListItem(
            codigo=r.codigo,
            cliente=r.cliente_nombre,
            articulos=r.articulos,
            total=r.total,
            estado=r.estado,
            created_at=r.created_at,
            delivery_at=r.delivery_at,
        )
        for r in rows
    ]


@router.get("/v1/events", response_model=list[EventV1])
def list_events(entity_id: str, db: Session = Depends(get_db)) -> list[EventV1]:
    rows = (
        db.query(EventLog)
        .filter(EventLog.entity_id == entity_id)
        .order_by(EventLog.created_at.asc())
        .limit(500)
        .all()
    )
    return [event_to_schema(r) for r in rows]
