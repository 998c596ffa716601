from __future__ import annotations

from pathlib import Path

import pytest
from fastapi.testclient import TestClient

MARIA = {"id": "cli-2", "nombre": "María", "apellido": "González", "telefono": "+591 71234567"}


@pytest.fixture()
def client(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> TestClient:
    db_path = tmp_path / "burbuja_audit.db"
    monkeypatch.setenv("DATABASE_URL", f"sqlite+pysqlite:///{db_path}")
    monkeypatch.setenv("BURBUJA_DB_AUTO_CREATE", "true")

    from services.api.app.main import app

    with TestClient(app) as c:
        yield c


def test_audit_endpoints_return_orders_and_events(client: TestClient) -> None:
    cart_id = client.post("/v1/carts", json={"cliente": MARIA}).json()["cartId"]
    client.post(f"/v1/carts/{cart_id}/items", json={"nombre": "Vestido", "precio": 10})
    client.post(f"/v1/carts/{cart_id}/finalize")
    client.put(f"/v1/carts/{cart_id}/delivery", json={"shortcut": "Recomendado"})
    order = client.post(f"/v1/carts/{cart_id}/finalize").json()
    codigo = order["codigo"]

    lst = client.get("/v1/orders", params={"cliente_id": "cli-2"})
    assert lst.status_code == 200
    rows = lst.json()
    assert rows, "Expected the finalized order in the listing"
    assert rows[0]["codigo"] == codigo
    assert rows[0]["cliente"] == "María González"
    assert rows[0]["articulos"] == 1
    assert rows[0]["total"] == "10.00"
    assert rows[0]["estado"] == "Pendiente"

    assert client.get("/v1/orders", params={"cliente_id": "cli-1"}).json() == []

    cart_events = client.get("/v1/events", params={"entity_id": cart_id}).json()
    cart_types = {e["event_type"] for e in cart_events}
    assert {
        "CART_CREATED",
        "CART_ITEM_ADDED",
        "FINALIZE_REJECTED",
        "DELIVERY_SELECTED",
    } <= cart_types
    rejected = next(e for e in cart_events if e["event_type"] == "FINALIZE_REJECTED")
    assert rejected["payload"] == {"reason": "NO_DELIVERY_DATE"}

    order_events = client.get("/v1/events", params={"entity_id": codigo}).json()
    assert [e["event_type"] for e in order_events] == ["ORDER_FINALIZED"]
    assert order_events[0]["entity_type"] == "Order"
    assert order_events[0]["payload"]["cart_id"] == cart_id
