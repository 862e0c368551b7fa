"""
LangGraph orchestration for the reconcile-and-save workflow.
Defines the graph structure and node routing logic.

Flow:
1. load_records - fetch the purchase order and the received record
2. reconcile    - run the engine and merge the report into variance_data
3. persist      - commit the merged document and status flags in one write

Any failing node records the error and routes straight to END, so nothing
is written unless persist itself succeeds.
"""

from typing import Any, Dict, Literal

from langgraph.graph import StateGraph, END

from po_reconciliation.engine import merge_result, reconcile
from po_reconciliation.schemas.po import MatchedPODescriptor
from po_reconciliation.state import ReceivingState
from po_reconciliation.errors import ReceivingError
from po_reconciliation.storage import JsonReceivingStore
from po_reconciliation.utils.logging import setup_logging, log_step


logger = setup_logging(__name__)


def _failure(state: ReceivingState, step: str, exc: Exception) -> Dict[str, Any]:
    return {
        "error": str(exc),
        "error_step": step,
        "error_type": type(exc).__name__,
        "audit_log": state.audit_entry(step, f"Failed: {exc}", action="failed"),
    }


def make_load_node(store: JsonReceivingStore):
    async def load_records(state: ReceivingState) -> Dict[str, Any]:
        try:
            record = store.get_received_record(state.record_id)
            po = store.get_purchase_order(state.purchase_order_id)
        except ReceivingError as e:
            logger.error(f"[load_records] {e}")
            return _failure(state, "load_records", e)
        
        log_step(logger, "load_records", "loaded", {
            "record_id": record.id,
            "purchase_order_id": po.id,
            "po_lines": len(po.items),
            "received_lines": len(record.items),
        })
        return {
            "received_record": record,
            "purchase_order": po,
            "audit_log": state.audit_entry(
                "load_records",
                f"Loaded PO {po.id} ({len(po.items)} lines) and record {record.id} ({len(record.items)} lines)",
                action="loaded",
            ),
        }
    
    return load_records


async def reconcile_records(state: ReceivingState) -> Dict[str, Any]:
    po = state.purchase_order
    record = state.received_record
    
    result = reconcile(po.items, record.items)
    merged = merge_result(
        record.variance_data,
        MatchedPODescriptor.from_purchase_order(po),
        result,
    )
    
    summary = result.summary
    log_step(logger, "reconcile", "reconciled", summary.model_dump())
    return {
        "result": result,
        "merged_document": merged,
        "audit_log": state.audit_entry(
            "reconcile",
            f"{summary.matched} matched, {summary.short} short, {summary.over} over, "
            f"{summary.missing} missing, {summary.extra} extra",
            action="reconciled",
        ),
    }


def make_persist_node(store: JsonReceivingStore):
    async def persist(state: ReceivingState) -> Dict[str, Any]:
        try:
            store.commit_reconciliation(
                state.record_id,
                state.purchase_order_id,
                state.merged_document,
            )
        except ReceivingError as e:
            logger.error(f"[persist] {e}")
            return _failure(state, "persist", e)
        
        log_step(logger, "persist", "committed", {"record_id": state.record_id})
        return {
            "committed": True,
            "audit_log": state.audit_entry("persist", "Variance report committed", action="committed"),
        }
    
    return persist


def route_after_load(state: ReceivingState) -> Literal["reconcile", "end"]:
    """Route after loading records."""
    if state.error:
        return "end"
    return "reconcile"


def build_receiving_graph(store: JsonReceivingStore):
    """Build and compile the reconcile-and-save graph bound to a store."""
    graph = StateGraph(ReceivingState)
    
    graph.add_node("load_records", make_load_node(store))
    graph.add_node("reconcile", reconcile_records)
    graph.add_node("persist", make_persist_node(store))
    
    graph.set_entry_point("load_records")
    
    graph.add_conditional_edges(
        "load_records",
        route_after_load,
        {
            "reconcile": "reconcile",
            "end": END,
        }
    )
    graph.add_edge("reconcile", "persist")
    graph.add_edge("persist", END)
    
    return graph.compile()
