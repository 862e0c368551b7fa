"""
Main entry point for reconciling received goods against purchase orders.
"""

import asyncio
from datetime import datetime, timezone
from typing import Any, Dict, Optional, Union

from po_reconciliation.state import ReceivingState
from po_reconciliation.graph import build_receiving_graph
from po_reconciliation.errors import ReconcileAndSaveError
from po_reconciliation.storage import JsonReceivingStore
from po_reconciliation.utils.logging import setup_logging
from po_reconciliation.utils import dict_to_json_string
from po_reconciliation.config import get_config


logger = setup_logging(__name__)
config = get_config()


def open_store(store: Union[JsonReceivingStore, str, None] = None) -> JsonReceivingStore:
    """Use the given store, a store at the given path, or the configured default."""
    if isinstance(store, JsonReceivingStore):
        return store
    return JsonReceivingStore(store or config.STORE_PATH)


async def run_reconciliation(
    record_id: str,
    purchase_order_id: str,
    store: Union[JsonReceivingStore, str, None] = None,
) -> ReceivingState:
    """Run the reconcile-and-save graph and return its final state."""
    state = ReceivingState(
        record_id=record_id,
        purchase_order_id=purchase_order_id,
        started_at=datetime.now(timezone.utc),
    )
    
    logger.info(f"Starting reconciliation of received record {record_id} against PO {purchase_order_id}")
    
    graph = build_receiving_graph(open_store(store))
    result = await graph.ainvoke(state, config={"recursion_limit": config.GRAPH_RECURSION_LIMIT})
    
    # LangGraph returns the channel values as a dict
    if isinstance(result, dict):
        return ReceivingState(**result)
    return result


async def reconcile_and_save(
    record_id: str,
    purchase_order_id: str,
    store: Union[JsonReceivingStore, str, None] = None,
) -> Dict[str, Any]:
    """
    Reconcile a received record against a PO and persist the report.
    
    Args:
        record_id: Received record to reconcile
        purchase_order_id: Purchase order it is matched to
        store: Store instance or path (defaults to config.STORE_PATH)
    
    Returns:
        The merged variance_data document as committed
    
    Raises:
        ReconcileAndSaveError: if any step failed; nothing was committed
    """
    try:
        final_state = await run_reconciliation(record_id, purchase_order_id, store)
    except ReconcileAndSaveError:
        raise
    except Exception as e:
        logger.exception(f"Reconciliation of {record_id} crashed: {e}")
        raise ReconcileAndSaveError("workflow", str(e), cause=e) from e
    
    if final_state.error or not final_state.committed:
        step = final_state.error_step or "workflow"
        message = final_state.error or "Reconciliation did not commit"
        raise ReconcileAndSaveError(step, message, error_type=final_state.error_type)
    
    logger.info(f"Reconciliation of {record_id} complete:\n{final_state.get_audit_trail()}")
    return final_state.merged_document


def format_output_json(document: Optional[Dict[str, Any]]) -> str:
    """Format a variance document as JSON string."""
    return dict_to_json_string(document or {})


if __name__ == "__main__":
    import sys
    
    if len(sys.argv) == 4:
        store_path, record_id, po_id = sys.argv[1:4]
        try:
            document = asyncio.run(reconcile_and_save(record_id, po_id, store_path))
        except ReconcileAndSaveError as e:
            print(f"Reconciliation failed: {e}", file=sys.stderr)
            sys.exit(1)
        print(format_output_json(document))
    else:
        print("Usage: python -m po_reconciliation.main <store.json> <record_id> <po_id>")
