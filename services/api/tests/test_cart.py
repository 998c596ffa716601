from __future__ import annotations

from datetime import datetime
from decimal import Decimal

import pytest
from packages.shared.schemas.order_v1 import ChargeUnitV1, ServiceTypeV1
from services.api.app.services.cart import (
    CartDraft,
    CartEngine,
    ItemDraft,
    add_item,
    bind_client,
    edit_item,
    remove_item,
    set_delivery_date,
)
from services.api.app.services.delivery import DeliveryShortcut
from services.api.app.services.directory_base import Cliente
from services.api.app.services.errors import CartItemNotFoundError, ItemValidationError
from services.api.app.services.pricing import UNSET, ExplicitPrice


def _cliente() -> Cliente:
    return Cliente(id="cli-1", nombre="Juan", apellido="Pérez", telefono="+591 70123456")


def _camisa(**overrides: object) -> ItemDraft:
    values: dict = {
        "nombre": "Camisa",
        "tipo_servicio": ServiceTypeV1.LAVADO,
        "unidad_cobro": ChargeUnitV1.UNIDAD,
        "cantidad": Decimal("2"),
        "precio": ExplicitPrice(Decimal("5")),
    }
    values.update(overrides)
    return ItemDraft(**values)


def test_empty_cart_total_is_zero() -> None:
    cart = CartDraft(cliente=_cliente())

    assert cart.total() == 0
    assert not cart.has_unpriced_items()


def test_total_is_sum_of_subtotals() -> None:
    cart = add_item(CartDraft(), _camisa())
    cart = add_item(
        cart,
        _camisa(
            nombre="Edredón matrimonial",
            unidad_cobro=ChargeUnitV1.KILO,
            cantidad=Decimal("1.5"),
            precio=ExplicitPrice(Decimal("18")),
        ),
    )

    assert [item.subtotal() for item in cart.items] == [Decimal("10"), Decimal("27")]
    assert cart.total() == Decimal("37.00")


def test_add_item_assigns_unique_ids_and_keeps_previous_draft() -> None:
    empty = CartDraft()
    one = add_item(empty, _camisa())
    two = add_item(one, _camisa())

    assert empty.items == ()
    assert len(one.items) == 1
    assert len({item.id for item in two.items}) == 2


def test_add_item_retries_colliding_ids() -> None:
    ids = iter(["a", "a", "b"])
    cart = add_item(CartDraft(), _camisa(), id_factory=lambda: next(ids))
    cart = add_item(cart, _camisa(), id_factory=lambda: next(ids))

    assert [item.id for item in cart.items] == ["a", "b"]


@pytest.mark.parametrize("qty", [Decimal("0"), Decimal("-1")])
def test_add_item_rejects_non_positive_quantity(qty: Decimal) -> None:
    cart = add_item(CartDraft(), _camisa())

    with pytest.raises(ItemValidationError) as exc:
        add_item(cart, _camisa(cantidad=qty))

    assert exc.value.field == "cantidad"
    assert len(cart.items) == 1


def test_add_item_enforces_quantity_steps() -> None:
    with pytest.raises(ItemValidationError):
        add_item(CartDraft(), _camisa(cantidad=Decimal("1.5")))
    with pytest.raises(ItemValidationError):
        add_item(CartDraft(), _camisa(unidad_cobro=ChargeUnitV1.KILO, cantidad=Decimal("1.25")))

    cart = add_item(CartDraft(), _camisa(unidad_cobro=ChargeUnitV1.KILO, cantidad=Decimal("2.5")))
    assert cart.items[0].cantidad == Decimal("2.5")


def test_add_item_rejects_blank_name() -> None:
    with pytest.raises(ItemValidationError) as exc:
        add_item(CartDraft(), _camisa(nombre="   "))

    assert exc.value.field == "nombre"


def test_unpriced_item_is_accepted_but_flagged() -> None:
    cart = add_item(CartDraft(), _camisa(precio=UNSET))

    assert cart.items[0].needs_price
    assert cart.has_unpriced_items()
    assert cart.total() == 0


def test_edit_item_merges_fields_by_id() -> None:
    cart = add_item(CartDraft(), _camisa())
    item_id = cart.items[0].id

    edited = edit_item(cart, item_id, {"cantidad": 3, "precio": Decimal("4")})

    assert edited.items[0].cantidad == Decimal("3")
    assert edited.items[0].precio == ExplicitPrice(Decimal("4"))
    assert edited.items[0].nombre == "Camisa"
    assert edited.total() == Decimal("12")
    assert cart.total() == Decimal("10")


def test_edit_item_zero_price_goes_back_to_unset() -> None:
    cart = add_item(CartDraft(), _camisa())

    edited = edit_item(cart, cart.items[0].id, {"precio": 0})

    assert edited.has_unpriced_items()


def test_edit_service_type_fills_unset_price_only() -> None:
    cart = add_item(CartDraft(), _camisa(precio=UNSET))
    cart = add_item(cart, _camisa())
    unset_id, priced_id = (item.id for item in cart.items)

    cart = edit_item(cart, unset_id, {"tipo_servicio": ServiceTypeV1.PLANCHADO})
    cart = edit_item(cart, priced_id, {"tipo_servicio": ServiceTypeV1.PLANCHADO})

    assert cart.get_item(unset_id).precio == ExplicitPrice(Decimal("2"))
    assert cart.get_item(priced_id).precio == ExplicitPrice(Decimal("5"))


def test_edit_item_rejects_invalid_patch_without_changes() -> None:
    cart = add_item(CartDraft(), _camisa())
    item_id = cart.items[0].id

    with pytest.raises(ItemValidationError):
        edit_item(cart, item_id, {"cantidad": 0})
    with pytest.raises(ItemValidationError):
        edit_item(cart, item_id, {"id": "other"})
    with pytest.raises(CartItemNotFoundError):
        edit_item(cart, "missing", {"cantidad": 1})

    assert cart.items[0].cantidad == Decimal("2")


def test_remove_item_filters_by_id() -> None:
    cart = add_item(add_item(CartDraft(), _camisa()), _camisa(nombre="Falda"))
    first_id = cart.items[0].id

    cart = remove_item(cart, first_id)

    assert [item.nombre for item in cart.items] == ["Falda"]
    assert remove_item(cart, "missing") == cart


def test_set_delivery_date_returns_new_draft() -> None:
    cart = CartDraft()
    when = datetime(2026, 10, 22, 14, 0)

    updated = set_delivery_date(cart, when)

    assert updated.delivery_at == when
    assert cart.delivery_at is None


def test_explicit_date_clears_a_previous_shortcut() -> None:
    when = datetime(2026, 10, 22, 14, 0)
    cart = set_delivery_date(CartDraft(), when, shortcut=DeliveryShortcut.RECOMENDADO)

    assert cart.delivery_shortcut is DeliveryShortcut.RECOMENDADO
    assert set_delivery_date(cart, when).delivery_shortcut is None


def test_cart_engine_wraps_reducers() -> None:
    engine = CartEngine(_cliente())

    item = engine.add_item(_camisa(precio=UNSET))
    assert engine.has_unpriced_items()

    engine.edit_item(item.id, {"precio": "5"})
    assert not engine.has_unpriced_items()
    assert engine.total() == Decimal("10")

    with pytest.raises(ItemValidationError):
        engine.add_item(_camisa(cantidad=Decimal("0")))
    assert len(engine.items) == 1

    engine.remove_item(item.id)
    assert engine.total() == 0

    engine.add_item(_camisa())
    engine.reset()
    assert engine.items == ()
    assert engine.draft.cliente == _cliente()


def test_bind_client_keeps_items() -> None:
    cart = add_item(CartDraft(), _camisa())

    bound = bind_client(cart, _cliente())

    assert bound.cliente == _cliente()
    assert bound.items == cart.items
    assert cart.cliente is None
