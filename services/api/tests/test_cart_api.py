from __future__ import annotations

from datetime import datetime, time, timedelta
from pathlib import Path

import pytest
from fastapi.testclient import TestClient
from httpx import Response

JUAN = {"id": "cli-1", "nombre": "Juan", "apellido": "Pérez", "telefono": "+591 70123456"}


@pytest.fixture()
def client(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> TestClient:
    db_path = tmp_path / "burbuja_cart.db"
    monkeypatch.setenv("DATABASE_URL", f"sqlite+pysqlite:///{db_path}")
    monkeypatch.setenv("BURBUJA_DB_AUTO_CREATE", "true")
    monkeypatch.setenv("BURBUJA_DIRECTORY_ADAPTER", "mock")

    from services.api.app.main import app

    with TestClient(app) as c:
        yield c


def _new_cart(client: TestClient) -> str:
    resp = client.post("/v1/carts", json={"cliente": JUAN})
    assert resp.status_code == 201
    return resp.json()["cartId"]


def _add(client: TestClient, cart_id: str, **item: object) -> Response:
    body = {"nombre": "Camisa", "cantidad": 2, "precio": 5}
    body.update(item)
    return client.post(f"/v1/carts/{cart_id}/items", json=body)


def test_create_cart_binds_client(client: TestClient) -> None:
    resp = client.post("/v1/carts", json={"cliente": JUAN})

    assert resp.status_code == 201
    cart = resp.json()
    assert cart["cliente"]["nombre"] == "Juan"
    assert cart["items"] == []
    assert cart["total"] == "0.00"
    assert cart["hasUnpricedItems"] is False
    assert cart["deliveryAt"] is None


def test_create_cart_requires_client_fields(client: TestClient) -> None:
    resp = client.post("/v1/carts", json={"cliente": {"id": "", "nombre": "Juan"}})

    assert resp.status_code == 422


def test_add_items_and_total(client: TestClient) -> None:
    cart_id = _new_cart(client)

    _add(client, cart_id)
    resp = _add(
        client,
        cart_id,
        nombre="Edredón matrimonial",
        unidadCobro="kilo",
        cantidad=1.5,
        precio=18,
    )

    assert resp.status_code == 201
    cart = resp.json()
    assert [i["subtotal"] for i in cart["items"]] == ["10.00", "27.00"]
    assert cart["items"][1]["unidadCobro"] == "kilo"
    assert cart["items"][1]["cantidad"] == 1.5
    assert cart["total"] == "37.00"


def test_zero_quantity_is_rejected_and_cart_unchanged(client: TestClient) -> None:
    cart_id = _new_cart(client)
    _add(client, cart_id)

    resp = _add(client, cart_id, cantidad=0)

    assert resp.status_code == 422
    assert resp.json()["detail"]["field"] == "cantidad"
    cart = client.get(f"/v1/carts/{cart_id}").json()
    assert len(cart["items"]) == 1
    assert cart["total"] == "10.00"


def test_fractional_units_are_rejected(client: TestClient) -> None:
    cart_id = _new_cart(client)

    resp = _add(client, cart_id, cantidad=1.5)

    assert resp.status_code == 422


def test_item_without_price_is_flagged(client: TestClient) -> None:
    cart_id = _new_cart(client)

    cart = _add(client, cart_id, precio=0).json()

    assert cart["items"][0]["precio"] is None
    assert cart["items"][0]["needsPrice"] is True
    assert cart["hasUnpricedItems"] is True


def test_edit_item_patch(client: TestClient) -> None:
    cart_id = _new_cart(client)
    item_id = _add(client, cart_id, precio=None).json()["items"][0]["id"]

    resp = client.patch(
        f"/v1/carts/{cart_id}/items/{item_id}", json={"tipoServicio": "planchado"}
    )

    assert resp.status_code == 200
    item = resp.json()["items"][0]
    assert item["tipoServicio"] == "planchado"
    assert item["precio"] == "2.00"

    resp = client.patch(f"/v1/carts/{cart_id}/items/{item_id}", json={"tipoServicio": "otros"})
    assert resp.json()["items"][0]["precio"] == "2.00"


def test_edit_unknown_item_is_404(client: TestClient) -> None:
    cart_id = _new_cart(client)

    resp = client.patch(f"/v1/carts/{cart_id}/items/nope", json={"cantidad": 1})

    assert resp.status_code == 404


def test_remove_item(client: TestClient) -> None:
    cart_id = _new_cart(client)
    item_id = _add(client, cart_id).json()["items"][0]["id"]

    resp = client.delete(f"/v1/carts/{cart_id}/items/{item_id}")

    assert resp.status_code == 200
    assert resp.json()["items"] == []
    assert resp.json()["total"] == "0.00"


def test_unknown_cart_is_404(client: TestClient) -> None:
    assert client.get("/v1/carts/missing").status_code == 404
    assert _add(client, "missing").status_code == 404


def test_discard_cart(client: TestClient) -> None:
    cart_id = _new_cart(client)

    assert client.delete(f"/v1/carts/{cart_id}").status_code == 204
    assert client.get(f"/v1/carts/{cart_id}").status_code == 404


def test_delivery_options(client: TestClient) -> None:
    cart_id = _new_cart(client)

    opts = client.get(f"/v1/carts/{cart_id}/delivery-options").json()

    minimum = datetime.fromisoformat(opts["minimum"])
    suggested = datetime.fromisoformat(opts["suggested"])
    assert suggested - minimum == timedelta(hours=24)
    assert opts["express"] == opts["minimum"]
    assert opts["recomendado"] == opts["suggested"]
    assert opts["defaultTime"] == "14:00"


def test_delivery_shortcut(client: TestClient) -> None:
    cart_id = _new_cart(client)
    before = datetime.now()

    resp = client.put(f"/v1/carts/{cart_id}/delivery", json={"shortcut": "Recomendado"})

    assert resp.status_code == 200
    delivery_at = datetime.fromisoformat(resp.json()["deliveryAt"])
    assert delivery_at - before >= timedelta(hours=72)
    assert delivery_at - before < timedelta(hours=72, minutes=1)


def test_delivery_too_soon_is_rejected(client: TestClient) -> None:
    cart_id = _new_cart(client)
    soon = (datetime.now() + timedelta(hours=24)).isoformat()

    resp = client.put(f"/v1/carts/{cart_id}/delivery", json={"deliveryAt": soon})

    assert resp.status_code == 422
    assert resp.json()["detail"]["field"] == "delivery_at"
    assert client.get(f"/v1/carts/{cart_id}").json()["deliveryAt"] is None


def test_delivery_just_inside_minimum_lead_is_rejected(client: TestClient) -> None:
    cart_id = _new_cart(client)
    almost = datetime.now() + timedelta(hours=48) - timedelta(minutes=4)

    resp = client.put(f"/v1/carts/{cart_id}/delivery", json={"deliveryAt": almost.isoformat()})

    assert resp.status_code == 422
    assert resp.json()["detail"]["field"] == "delivery_at"


def test_express_shortcut_still_finalizes_after_selection(client: TestClient) -> None:
    cart_id = _new_cart(client)
    assert _add(client, cart_id).status_code == 201
    picked = client.put(f"/v1/carts/{cart_id}/delivery", json={"shortcut": "Express"})
    assert picked.json()["deliveryShortcut"] == "Express"

    resp = client.post(f"/v1/carts/{cart_id}/finalize")

    assert resp.status_code == 201
    order = resp.json()
    lead = datetime.fromisoformat(order["deliveryAt"]) - datetime.fromisoformat(order["createdAt"])
    assert lead >= timedelta(hours=48)


def test_delivery_date_then_time_keeps_each_part(client: TestClient) -> None:
    cart_id = _new_cart(client)
    day = (datetime.now() + timedelta(days=5)).date()

    first = client.put(f"/v1/carts/{cart_id}/delivery", json={"fecha": day.isoformat()})
    assert first.status_code == 200
    first_at = datetime.fromisoformat(first.json()["deliveryAt"])
    assert first_at == datetime.combine(day, time(14, 0))

    second = client.put(f"/v1/carts/{cart_id}/delivery", json={"hora": "09:30"})
    assert second.status_code == 200
    picked = datetime.fromisoformat(second.json()["deliveryAt"])
    assert picked.date() == day
    assert (picked.hour, picked.minute) == (9, 30)


def test_delivery_requires_exactly_one_mode(client: TestClient) -> None:
    cart_id = _new_cart(client)

    assert client.put(f"/v1/carts/{cart_id}/delivery", json={}).status_code == 422
    resp = client.put(
        f"/v1/carts/{cart_id}/delivery",
        json={"shortcut": "Express", "hora": "10:00"},
    )
    assert resp.status_code == 422
