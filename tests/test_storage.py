"""
Tests for the JSON receiving store.
"""

import json

import pytest
from po_reconciliation.errors import RecordNotFoundError, StorageError
from po_reconciliation.records import build_received_item, clean_purchase_order_items
from po_reconciliation.schemas.po import PurchaseOrder
from po_reconciliation.schemas.received import ReceivedRecord
from po_reconciliation.storage import JsonReceivingStore


@pytest.fixture
def store(tmp_path):
    store = JsonReceivingStore(tmp_path / "store.json")
    store.add_purchase_order(PurchaseOrder(
        id="po-1",
        supplier_name="Spirits Co",
        order_number="PO-001",
        status="sent",
        items=clean_purchase_order_items([{"item_name": "Gin", "quantity": 5, "price_per_unit": 20}]),
    ))
    store.add_received_record(ReceivedRecord(
        id="rec-1",
        supplier_name="Spirits Co",
        variance_data={"document": {"path": "scans/rec-1.pdf"}},
        items=[build_received_item("Gin", 5, unit_price=20), build_received_item("Tonic", 3)],
    ))
    return store


def test_round_trip(store):
    po = store.get_purchase_order("po-1")
    assert po.items[0].item_name == "Gin"
    assert po.items[0].price_total == 100
    
    record = store.get_received_record("rec-1")
    assert len(record.items) == 2
    assert record.variance_data == {"document": {"path": "scans/rec-1.pdf"}}


def test_add_received_record_refreshes_totals(store):
    record = store.get_received_record("rec-1")
    assert record.total_items == 2
    assert record.total_quantity == 8
    assert record.total_value == 100


def test_missing_ids_raise(store):
    with pytest.raises(RecordNotFoundError):
        store.get_purchase_order("nope")
    with pytest.raises(RecordNotFoundError) as exc_info:
        store.get_received_record("nope")
    assert str(exc_info.value) == "Received record 'nope' not found"


def test_missing_file_is_empty_store(tmp_path):
    store = JsonReceivingStore(tmp_path / "absent.json")
    with pytest.raises(RecordNotFoundError):
        store.get_purchase_order("po-1")


def test_corrupt_file_raises_storage_error(tmp_path):
    path = tmp_path / "store.json"
    path.write_text("{not json")
    with pytest.raises(StorageError):
        JsonReceivingStore(path).get_purchase_order("po-1")


def test_commit_reconciliation_updates_both_records(store):
    variance_data = {"document": {"path": "scans/rec-1.pdf"}, "variance": {"items": []}}
    store.commit_reconciliation("rec-1", "po-1", variance_data)
    
    record = store.get_received_record("rec-1")
    assert record.status == "matched"
    assert record.matched_po_id == "po-1"
    assert record.variance_data == variance_data
    assert store.get_purchase_order("po-1").status == "received"


def test_commit_with_unknown_po_writes_nothing(store):
    before = json.loads(store.path.read_text())
    with pytest.raises(RecordNotFoundError):
        store.commit_reconciliation("rec-1", "po-missing", {"variance": {}})
    assert json.loads(store.path.read_text()) == before


def test_failed_write_leaves_file_intact(store, monkeypatch):
    before = store.path.read_text()
    
    def broken_replace(src, dst):
        raise OSError("disk full")
    
    monkeypatch.setattr("po_reconciliation.storage.os.replace", broken_replace)
    with pytest.raises(StorageError, match="disk full"):
        store.commit_reconciliation("rec-1", "po-1", {"variance": {}})
    
    assert store.path.read_text() == before
    assert [p.name for p in store.path.parent.iterdir()] == ["store.json"]


def test_malformed_row_raises_storage_error(store):
    data = json.loads(store.path.read_text())
    data["purchase_orders"]["po-1"]["total_amount"] = None
    data["received_records"]["rec-1"]["items"] = "not a list"
    store.path.write_text(json.dumps(data))
    
    with pytest.raises(StorageError, match="Purchase order 'po-1' is malformed"):
        store.get_purchase_order("po-1")
    with pytest.raises(StorageError, match="Received record 'rec-1' is malformed"):
        store.get_received_record("rec-1")
