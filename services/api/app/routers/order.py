from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Response
from packages.shared.schemas.events import EntityTypeV1, EventTypeV1
from services.api.app.db.events import log_event
from services.api.app.db.models import OrderRecord
from services.api.app.db.orders import order_record
from services.api.app.deps import (
    get_composer,
    get_db,
    get_finalizer,
    get_renderer,
    get_share_sink,
)
from services.api.app.models.order import (
    OrderMessagesOut,
    OrderOut,
    ShareOutcomeOut,
    order_from_snapshot,
    order_out,
)
from services.api.app.services.finalizer import Order, OrderFinalizer
from services.api.app.services.notifications import NotificationComposer
from services.api.app.services.render_base import QrRenderer, RenderError, ShareSink
from services.api.app.services.share import share_order
from services.api.app.services.store import store
from sqlalchemy.orm import Session

router = APIRouter()


def _load_order(db: Session, codigo: str) -> Order:
    row = db.get(OrderRecord, codigo)
    if row is None:
        raise HTTPException(status_code=404, detail="Order not found")
    return order_from_snapshot(row.snapshot_json)


@router.post("/v1/carts/{cart_id}/finalize", response_model=OrderOut, status_code=201)
def finalize_cart(
    cart_id: str,
    db: Session = Depends(get_db),
    finalizer: OrderFinalizer = Depends(get_finalizer),
) -> OrderOut:
    record = store.get_cart(cart_id)
    if record is None:
        raise HTTPException(status_code=404, detail="Cart not found")

    result = finalizer.finalize(record.draft)
    if result.order is None:
        assert result.failure is not None
        log_event(
            db,
            entity_type=EntityTypeV1.CART,
            entity_id=cart_id,
            event_type=EventTypeV1.FINALIZE_REJECTED,
            event_payload={"reason": result.failure.reason.value},
        )
        db.commit()
        raise HTTPException(
            status_code=422,
            detail={"reason": result.failure.reason.value, "message": result.failure.message},
        )

    order = result.order
    if db.get(OrderRecord, order.codigo) is not None:
        # Keep the cart so the clerk can retry; the next code will differ.
        raise HTTPException(status_code=409, detail=f"Order code collision: {order.codigo}")

    out = order_out(order)
    db.add(order_record(order))
    log_event(
        db,
        entity_type=EntityTypeV1.ORDER,
        entity_id=order.codigo,
        event_type=EventTypeV1.ORDER_FINALIZED,
        event_payload={"cart_id": cart_id, "total": out.total, "articulos": len(out.items)},
    )
    db.commit()

    store.discard_cart(cart_id)
    return out


@router.get("/v1/orders/{codigo}", response_model=OrderOut)
def get_order(codigo: str, db: Session = Depends(get_db)) -> OrderOut:
    return order_out(_load_order(db, codigo))


@router.get("/v1/orders/{codigo}/messages", response_model=OrderMessagesOut)
def get_order_messages(
    codigo: str,
    db: Session = Depends(get_db),
    composer: NotificationComposer = Depends(get_composer),
) -> OrderMessagesOut:
    order = _load_order(db, codigo)
    whatsapp = composer.build_whatsapp_message(order)
    return OrderMessagesOut(
        whatsapp=whatsapp,
        share=composer.build_share_message(order),
        whatsapp_url=composer.whatsapp_url(order, whatsapp),
    )


@router.get("/v1/orders/{codigo}/qr.png")
def get_order_qr(
    codigo: str,
    db: Session = Depends(get_db),
    renderer: QrRenderer = Depends(get_renderer),
) -> Response:
    order = _load_order(db, codigo)
    try:
        png = renderer.render_png(order.qr_payload)
    except RenderError as e:
        raise HTTPException(status_code=502, detail=str(e)) from e
    return Response(content=png, media_type="image/png")


@router.post("/v1/orders/{codigo}/share", response_model=ShareOutcomeOut)
def share(
    codigo: str,
    db: Session = Depends(get_db),
    composer: NotificationComposer = Depends(get_composer),
    renderer: QrRenderer = Depends(get_renderer),
    sink: ShareSink = Depends(get_share_sink),
) -> ShareOutcomeOut:
    order = _load_order(db, codigo)
    outcome = share_order(order, composer=composer, renderer=renderer, sink=sink)

    log_event(
        db,
        entity_type=EntityTypeV1.ORDER,
        entity_id=order.codigo,
        event_type=(
            EventTypeV1.ORDER_SHARED if outcome.delivered else EventTypeV1.ORDER_SHARE_FAILED
        ),
        event_payload={"with_image": outcome.with_image, "error": outcome.error},
    )
    db.commit()

    return ShareOutcomeOut(
        codigo=outcome.order_code,
        delivered=outcome.delivered,
        with_image=outcome.with_image,
        error=outcome.error,
    )
