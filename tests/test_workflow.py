"""
Integration tests for the reconcile-and-save workflow.
"""

import json

import pytest
from po_reconciliation.errors import ReconcileAndSaveError, StorageError
from po_reconciliation.main import reconcile_and_save, run_reconciliation
from po_reconciliation.records import build_received_item, clean_purchase_order_items, initial_variance_data
from po_reconciliation.schemas.po import PurchaseOrder
from po_reconciliation.schemas.received import ReceivedRecord
from po_reconciliation.storage import JsonReceivingStore


@pytest.fixture
def store(tmp_path):
    store = JsonReceivingStore(tmp_path / "store.json")
    store.add_purchase_order(PurchaseOrder(
        id="po-1",
        supplier_name="Bar Supply Ltd",
        order_number="PO-2026-014",
        order_date="2026-01-28",
        status="sent",
        items=clean_purchase_order_items([
            {"item_code": "LJ", "item_name": "Lime Juice", "quantity": 10, "price_per_unit": 2},
            {"item_code": "GN", "item_name": "Gin", "quantity": 5, "price_per_unit": 20},
        ]),
    ))
    store.add_received_record(ReceivedRecord(
        id="rec-1",
        supplier_name="Bar Supply Ltd",
        document_number="INV-889",
        variance_data=initial_variance_data("invoices/inv-889.pdf", "inv-889.pdf", "application/pdf"),
        items=[
            build_received_item("lime juice", 7, unit_price=2),
            build_received_item("Tonic", 3, unit_price=1),
        ],
    ))
    return store


@pytest.mark.asyncio
async def test_reconcile_and_save_commits_merged_document(store):
    document = await reconcile_and_save("rec-1", "po-1", store)
    
    assert document["document"]["path"] == "invoices/inv-889.pdf"
    assert document["matched_po"]["order_number"] == "PO-2026-014"
    assert document["variance"]["summary"] == {"matched": 0, "short": 1, "over": 0, "missing": 1, "extra": 1}
    statuses = [(line["item_name"], line["status"]) for line in document["variance"]["items"]]
    assert statuses == [("Lime Juice", "short"), ("Gin", "missing"), ("tonic", "extra")]
    
    record = store.get_received_record("rec-1")
    assert record.status == "matched"
    assert record.variance_data == document
    assert store.get_purchase_order("po-1").status == "received"


@pytest.mark.asyncio
async def test_rerun_replaces_previous_variance(store):
    first = await reconcile_and_save("rec-1", "po-1", store)
    second = await reconcile_and_save("rec-1", "po-1", store)
    
    assert first["variance"]["items"] == second["variance"]["items"]
    assert set(second) == {"document", "matched_po", "variance"}


@pytest.mark.asyncio
async def test_store_path_is_accepted(store):
    document = await reconcile_and_save("rec-1", "po-1", str(store.path))
    assert document["variance"]["summary"]["short"] == 1


@pytest.mark.asyncio
async def test_unknown_record_fails_without_writing(store):
    before = json.loads(store.path.read_text())
    
    with pytest.raises(ReconcileAndSaveError) as exc_info:
        await reconcile_and_save("rec-404", "po-1", store)
    
    assert exc_info.value.step == "load_records"
    assert exc_info.value.is_not_found
    assert json.loads(store.path.read_text()) == before


@pytest.mark.asyncio
async def test_persist_failure_is_terminal(store, monkeypatch):
    def broken_commit(*args, **kwargs):
        raise StorageError("write failed")
    
    monkeypatch.setattr(store, "commit_reconciliation", broken_commit)
    
    with pytest.raises(ReconcileAndSaveError) as exc_info:
        await reconcile_and_save("rec-1", "po-1", store)
    
    assert exc_info.value.step == "persist"
    assert not exc_info.value.is_not_found
    assert store.get_received_record("rec-1").status == "completed"


@pytest.mark.asyncio
async def test_final_state_keeps_audit_trail(store):
    state = await run_reconciliation("rec-1", "po-1", store)
    
    assert state.committed
    assert state.error is None
    assert [entry.step for entry in state.audit_log] == ["load_records", "reconcile", "persist"]
    assert state.get_summary()["reconcile_status"] == "completed"


@pytest.mark.asyncio
async def test_malformed_stored_po_fails_at_load(store):
    data = json.loads(store.path.read_text())
    data["purchase_orders"]["po-1"]["total_amount"] = None
    store.path.write_text(json.dumps(data))
    
    with pytest.raises(ReconcileAndSaveError) as exc_info:
        await reconcile_and_save("rec-1", "po-1", store)
    
    assert exc_info.value.step == "load_records"
    assert exc_info.value.error_type == "StorageError"
    assert not exc_info.value.is_not_found
    assert store.get_received_record("rec-1").status == "completed"
