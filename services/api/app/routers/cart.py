from __future__ import annotations

from datetime import datetime
from uuid import uuid4

from fastapi import APIRouter, Depends, HTTPException, Response
from packages.shared.schemas.events import EntityTypeV1, EventTypeV1
from services.api.app.db.events import log_event
from services.api.app.deps import get_advisor, get_calculator, get_db
from services.api.app.models.cart import (
    CartCreateRequest,
    CartOut,
    DeliveryOptionsOut,
    DeliveryUpdateRequest,
    ItemAddRequest,
    ItemPatchRequest,
    line_item_out,
)
from services.api.app.models.client import cliente_from_in, cliente_out
from services.api.app.services.cart import (
    CartDraft,
    ItemDraft,
    add_item,
    edit_item,
    remove_item,
    set_delivery_date,
)
from services.api.app.services.delivery import DeliveryWindowCalculator, as_local_naive
from services.api.app.services.errors import CartItemNotFoundError, ValidationError
from services.api.app.services.formatting import format_amount
from services.api.app.services.pricing import PricingAdvisor, price_from_amount
from services.api.app.services.store import CartRecord, store
from sqlalchemy.orm import Session

router = APIRouter()


def _raise_cart_http_error(e: Exception) -> None:
    if isinstance(e, ValidationError):
        detail = {"message": str(e), "field": e.field}
        raise HTTPException(status_code=422, detail=detail) from e

    if isinstance(e, CartItemNotFoundError):
        raise HTTPException(status_code=404, detail=str(e)) from e

    raise HTTPException(status_code=500, detail="Internal Server Error") from e


def _load_cart(cart_id: str) -> CartRecord:
    record = store.get_cart(cart_id)
    if record is None:
        raise HTTPException(status_code=404, detail="Cart not found")
    return record


def _cart_out(record: CartRecord) -> CartOut:
    draft = record.draft
    return CartOut(
        cart_id=record.cart_id,
        cliente=cliente_out(draft.cliente) if draft.cliente else None,
        items=[line_item_out(item) for item in draft.items],
        total=format_amount(draft.total()),
        has_unpriced_items=draft.has_unpriced_items(),
        delivery_at=draft.delivery_at,
        delivery_shortcut=draft.delivery_shortcut,
    )


def _commit(
    db: Session,
    record: CartRecord,
    updated: CartDraft,
    event_type: EventTypeV1,
    payload: dict,
) -> CartOut:
    record.draft = updated
    store.save_cart(record)

    log_event(
        db,
        entity_type=EntityTypeV1.CART,
        entity_id=record.cart_id,
        event_type=event_type,
        event_payload=payload,
    )
    db.commit()
    return _cart_out(record)


@router.post("/v1/carts", response_model=CartOut, status_code=201)
def create_cart(payload: CartCreateRequest, db: Session = Depends(get_db)) -> CartOut:
    cliente = cliente_from_in(payload.cliente)
    record = CartRecord(
        cart_id=uuid4().hex,
        draft=CartDraft(cliente=cliente),
        created_at=datetime.now(),
    )
    return _commit(db, record, record.draft, EventTypeV1.CART_CREATED, {"cliente_id": cliente.id})


@router.get("/v1/carts/{cart_id}", response_model=CartOut)
def get_cart(cart_id: str) -> CartOut:
    return _cart_out(_load_cart(cart_id))


@router.delete("/v1/carts/{cart_id}", status_code=204)
def discard_cart(cart_id: str, db: Session = Depends(get_db)) -> Response:
    record = store.discard_cart(cart_id)
    if record is None:
        raise HTTPException(status_code=404, detail="Cart not found")

    log_event(
        db,
        entity_type=EntityTypeV1.CART,
        entity_id=cart_id,
        event_type=EventTypeV1.CART_DISCARDED,
        event_payload={"items": len(record.draft.items)},
    )
    db.commit()
    return Response(status_code=204)


@router.post("/v1/carts/{cart_id}/items", response_model=CartOut, status_code=201)
def add_cart_item(
    cart_id: str,
    payload: ItemAddRequest,
    db: Session = Depends(get_db),
) -> CartOut:
    record = _load_cart(cart_id)
    try:
        draft = ItemDraft(
            nombre=payload.nombre,
            tipo_servicio=payload.tipo_servicio,
            unidad_cobro=payload.unidad_cobro,
            cantidad=payload.cantidad,
            precio=price_from_amount(payload.precio),
        )
        updated = add_item(record.draft, draft)
    except Exception as e:
        _raise_cart_http_error(e)

    item = updated.items[-1]
    return _commit(
        db,
        record,
        updated,
        EventTypeV1.CART_ITEM_ADDED,
        {"item_id": item.id, "nombre": item.nombre, "needs_price": item.needs_price},
    )


@router.patch("/v1/carts/{cart_id}/items/{item_id}", response_model=CartOut)
def edit_cart_item(
    cart_id: str,
    item_id: str,
    payload: ItemPatchRequest,
    db: Session = Depends(get_db),
    advisor: PricingAdvisor = Depends(get_advisor),
) -> CartOut:
    record = _load_cart(cart_id)
    patch = payload.model_dump(exclude_unset=True)
    try:
        updated = edit_item(record.draft, item_id, patch, advisor=advisor)
    except Exception as e:
        _raise_cart_http_error(e)

    return _commit(
        db,
        record,
        updated,
        EventTypeV1.CART_ITEM_EDITED,
        {"item_id": item_id, "fields": sorted(patch)},
    )


@router.delete("/v1/carts/{cart_id}/items/{item_id}", response_model=CartOut)
def remove_cart_item(cart_id: str, item_id: str, db: Session = Depends(get_db)) -> CartOut:
    record = _load_cart(cart_id)
    updated = remove_item(record.draft, item_id)
    return _commit(db, record, updated, EventTypeV1.CART_ITEM_REMOVED, {"item_id": item_id})


@router.get("/v1/carts/{cart_id}/delivery-options", response_model=DeliveryOptionsOut)
def delivery_options(
    cart_id: str,
    calculator: DeliveryWindowCalculator = Depends(get_calculator),
) -> DeliveryOptionsOut:
    _load_cart(cart_id)
    now = datetime.now()
    return DeliveryOptionsOut(
        minimum=calculator.minimum(now),
        suggested=calculator.suggested(now),
        express=calculator.shortcut("Express", now),
        recomendado=calculator.shortcut("Recomendado", now),
        default_time=calculator.default_time.strftime("%H:%M"),
    )


@router.put("/v1/carts/{cart_id}/delivery", response_model=CartOut)
def set_delivery(
    cart_id: str,
    payload: DeliveryUpdateRequest,
    db: Session = Depends(get_db),
    calculator: DeliveryWindowCalculator = Depends(get_calculator),
) -> CartOut:
    record = _load_cart(cart_id)
    now = datetime.now()
    previous = record.draft.delivery_at

    modes = [
        payload.delivery_at is not None,
        payload.shortcut is not None,
        payload.fecha is not None or payload.hora is not None,
    ]
    if sum(modes) != 1:
        raise HTTPException(
            status_code=422,
            detail="Provide exactly one of deliveryAt, shortcut, or fecha/hora",
        )

    if payload.delivery_at is not None:
        candidate = as_local_naive(payload.delivery_at)
    elif payload.shortcut is not None:
        candidate = calculator.shortcut(payload.shortcut, now)
    else:
        candidate = previous
        if payload.fecha is not None:
            candidate = calculator.combine_date_and_time(candidate, payload.fecha)
        if payload.hora is not None:
            candidate = calculator.replace_time(candidate, payload.hora, now)

    try:
        calculator.validate(candidate, now)
    except ValidationError as e:
        _raise_cart_http_error(e)

    updated = set_delivery_date(record.draft, candidate, shortcut=payload.shortcut)
    return _commit(
        db,
        record,
        updated,
        EventTypeV1.DELIVERY_SELECTED,
        {
            "delivery_at": candidate.isoformat(),
            "shortcut": payload.shortcut.value if payload.shortcut else None,
        },
    )
