"""
Tests for the REST endpoints.
"""

import pytest
from fastapi.testclient import TestClient

from po_reconciliation.api import app, config, get_store
from po_reconciliation.records import build_received_item, clean_purchase_order_items
from po_reconciliation.schemas.po import PurchaseOrder
from po_reconciliation.schemas.received import ReceivedRecord
from po_reconciliation.storage import JsonReceivingStore


@pytest.fixture
def store(tmp_path):
    store = JsonReceivingStore(tmp_path / "store.json")
    store.add_purchase_order(PurchaseOrder(
        id="po-1",
        items=clean_purchase_order_items([{"item_name": "Salt", "quantity": 5, "price_per_unit": 1}]),
    ))
    store.add_received_record(ReceivedRecord(
        id="rec-1",
        variance_data={"document": {"path": "x"}},
        items=[build_received_item("salt", 5, unit_price=1)],
    ))
    return store


@pytest.fixture
def client(store):
    app.dependency_overrides[get_store] = lambda: store
    yield TestClient(app)
    app.dependency_overrides.clear()


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


def test_reconcile_endpoint(client):
    response = client.post("/reconcile", json={
        "po_items": [{"item_name": "Gin", "quantity": 5}],
        "received_items": [{"item_name": "Tonic", "quantity": 3}],
    })
    assert response.status_code == 200
    body = response.json()
    assert body["summary"] == {"matched": 0, "short": 0, "over": 0, "missing": 1, "extra": 1}
    assert [line["status"] for line in body["items"]] == ["missing", "extra"]


def test_match_endpoint_saves_report(client, store):
    response = client.post("/received-records/rec-1/match", json={"purchase_order_id": "po-1"})
    assert response.status_code == 200
    body = response.json()
    assert body["document"] == {"path": "x"}
    assert body["variance"]["summary"]["matched"] == 1
    assert store.get_received_record("rec-1").status == "matched"


def test_match_endpoint_unknown_po(client):
    response = client.post("/received-records/rec-1/match", json={"purchase_order_id": "po-9"})
    assert response.status_code == 404
    assert "po-9" in response.json()["error"]


def test_reconcile_endpoint_accepts_numeric_item_code(client):
    response = client.post("/reconcile", json={
        "po_items": [{"item_code": 1001, "item_name": "Gin", "quantity": 5}],
        "received_items": [{"item_name": "gin", "quantity": 5, "unit": 1}],
    })
    assert response.status_code == 200
    assert response.json()["items"][0]["item_code"] == "1001"


def test_debug_flag_follows_config(client):
    assert app.debug is config.API_DEBUG
    assert client.get("/config").json()["api_debug"] is config.API_DEBUG
