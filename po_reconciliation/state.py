"""
Shared state object for the reconcile-and-save workflow.
Every workflow node reads from and writes to this state.
"""

from typing import Optional, List, Dict, Any
from pydantic import BaseModel, Field
from datetime import datetime, timezone
from po_reconciliation.schemas.po import PurchaseOrder
from po_reconciliation.schemas.received import ReceivedRecord
from po_reconciliation.schemas.output import ReconciliationResult


class AuditLogEntry(BaseModel):
    """A single entry in the workflow audit log."""
    timestamp: datetime
    step: str
    message: str
    action: Optional[str] = None


class ReceivingState(BaseModel):
    """
    State for reconciling one received record against one purchase order.
    
    Each node:
    1. Reads what earlier nodes loaded or computed
    2. Performs its step
    3. Records its output, or the error that stopped it
    4. Adds an audit log entry
    """
    
    # Workflow identification
    record_id: str
    purchase_order_id: str
    started_at: datetime
    
    # Load phase
    purchase_order: Optional[PurchaseOrder] = None
    received_record: Optional[ReceivedRecord] = None
    
    # Reconcile phase
    result: Optional[ReconciliationResult] = None
    merged_document: Optional[Dict[str, Any]] = None
    
    # Persist phase
    committed: bool = False
    
    # Terminal failure (first one wins)
    error: Optional[str] = None
    error_step: Optional[str] = None
    error_type: Optional[str] = None
    
    audit_log: List[AuditLogEntry] = Field(default_factory=list)
    
    def audit_entry(self, step: str, message: str, action: Optional[str] = None) -> List[AuditLogEntry]:
        """Return the audit log extended with a new entry."""
        return self.audit_log + [
            AuditLogEntry(
                timestamp=datetime.now(timezone.utc),
                step=step,
                message=message,
                action=action,
            )
        ]
    
    def get_audit_trail(self) -> str:
        """Get a human-readable summary of the workflow steps."""
        if not self.audit_log:
            return "No steps recorded."
        return "\n".join(f"[{entry.step}] {entry.message}" for entry in self.audit_log)
    
    def get_summary(self) -> Dict[str, Any]:
        """Get a summary of the current state."""
        return {
            "record_id": self.record_id,
            "purchase_order_id": self.purchase_order_id,
            "load_status": "completed" if self.received_record and self.purchase_order else "pending",
            "reconcile_status": "completed" if self.result else "pending",
            "committed": self.committed,
            "error": self.error,
        }
