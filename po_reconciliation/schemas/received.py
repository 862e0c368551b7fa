"""
Received goods schema and data models.
A received record is one delivery or invoice event with its line items.
"""

from typing import Any, Dict, Optional, List
from pydantic import BaseModel, Field, field_validator

from po_reconciliation.utils import parse_number


class ReceivedLineItem(BaseModel):
    """A single line as entered from the physical delivery document."""
    item_name: str = ""
    quantity: Optional[float] = None
    unit: Optional[str] = None
    unit_price: Optional[float] = None
    total_price: Optional[float] = None
    
    @field_validator("item_name", mode="before")
    @classmethod
    def _coerce_name(cls, value: Any) -> str:
        return "" if value is None else str(value)
    
    @field_validator("unit", mode="before")
    @classmethod
    def _coerce_unit(cls, value: Any) -> Optional[str]:
        return None if value is None else str(value)
    
    @field_validator("quantity", "unit_price", "total_price", mode="before")
    @classmethod
    def _coerce_number(cls, value: Any) -> Optional[float]:
        return parse_number(value)


class DocumentReference(BaseModel):
    """Pointer to the uploaded source document (invoice scan, delivery note)."""
    path: str
    name: Optional[str] = None
    mimeType: Optional[str] = None


class ReceivedRecord(BaseModel):
    """A received record (invoice/delivery event)."""
    id: str
    supplier_name: Optional[str] = None
    document_number: Optional[str] = None
    received_date: Optional[str] = None
    status: str = "completed"  # completed, matched
    matched_po_id: Optional[str] = None
    total_items: int = 0
    total_quantity: float = 0.0
    total_value: float = 0.0
    # Free-form JSON document: document reference, matched_po, variance, ...
    variance_data: Optional[Dict[str, Any]] = None
    items: List[ReceivedLineItem] = Field(default_factory=list)
