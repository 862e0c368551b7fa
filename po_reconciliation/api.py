"""
Optional FastAPI REST endpoint for receiving reconciliation.
Can be run with: uvicorn po_reconciliation.api:app --reload
"""

from typing import Any, Dict, List

from fastapi import Depends, FastAPI
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from po_reconciliation.engine import reconcile
from po_reconciliation.errors import ReconcileAndSaveError
from po_reconciliation.main import reconcile_and_save
from po_reconciliation.storage import JsonReceivingStore
from po_reconciliation.config import get_config
from po_reconciliation.utils.logging import setup_logging

config = get_config()

app = FastAPI(
    title="PO Receiving Reconciliation API",
    description="Matches received goods against purchase orders and reports variances",
    version="1.0.0",
    debug=config.API_DEBUG,
)

logger = setup_logging(__name__)


class ReconcileRequest(BaseModel):
    # Raw rows; numeric fields are coerced by the engine
    po_items: List[Dict[str, Any]] = Field(default_factory=list)
    received_items: List[Dict[str, Any]] = Field(default_factory=list)


class MatchRequest(BaseModel):
    purchase_order_id: str


def get_store() -> JsonReceivingStore:
    return JsonReceivingStore(config.STORE_PATH)


@app.post("/reconcile")
async def reconcile_endpoint(request: ReconcileRequest):
    """
    Compute a variance report without touching storage.
    
    Returns:
        JSON ReconciliationResult
    """
    result = reconcile(request.po_items, request.received_items)
    return JSONResponse(content=result.model_dump(mode="json"), status_code=200)


@app.post("/received-records/{record_id}/match")
async def match_received_record_endpoint(
    record_id: str,
    request: MatchRequest,
    store: JsonReceivingStore = Depends(get_store),
):
    """
    Reconcile a stored received record against a stored PO and save the report.
    
    Returns:
        The merged variance_data document
    """
    try:
        document = await reconcile_and_save(record_id, request.purchase_order_id, store)
    except ReconcileAndSaveError as e:
        logger.error(f"Match of record {record_id} failed: {e}")
        return JSONResponse(
            content={
                "error": str(e),
                "message": "Failed to reconcile received record",
            },
            status_code=404 if e.is_not_found else 500,
        )
    
    return JSONResponse(content=document, status_code=200)


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "version": "1.0.0"}


@app.get("/config")
async def get_config_endpoint():
    """Get current configuration (sanitized)."""
    return {
        "quantity_match_tolerance": config.QUANTITY_MATCH_TOLERANCE,
        "log_level": config.LOG_LEVEL,
        "api_debug": config.API_DEBUG,
    }


if __name__ == "__main__":
    import uvicorn
    
    uvicorn.run(
        app,
        host=config.API_HOST,
        port=config.API_PORT,
        log_level=config.LOG_LEVEL.lower(),
    )
