"""
Purchase Order schema and data models.
Represents POs and their line items as stored by the receiving store.
"""

from typing import Any, Optional, List
from pydantic import BaseModel, Field, field_validator

from po_reconciliation.utils import parse_number


class PurchaseOrderLineItem(BaseModel):
    """A single ordered line. Immutable once the PO is finalized."""
    item_code: Optional[str] = None
    item_name: str = ""
    quantity: Optional[float] = None
    price_per_unit: Optional[float] = None
    price_total: Optional[float] = None
    
    model_config = {"frozen": True}
    
    @field_validator("item_name", mode="before")
    @classmethod
    def _coerce_name(cls, value: Any) -> str:
        return "" if value is None else str(value)
    
    @field_validator("item_code", mode="before")
    @classmethod
    def _coerce_code(cls, value: Any) -> Optional[str]:
        # Numeric SKUs are common in supplier exports
        return None if value is None else str(value)
    
    @field_validator("quantity", "price_per_unit", "price_total", mode="before")
    @classmethod
    def _coerce_number(cls, value: Any) -> Optional[float]:
        return parse_number(value)


class PurchaseOrder(BaseModel):
    """A Purchase Order record."""
    id: str
    supplier_name: Optional[str] = None
    order_number: Optional[str] = None
    order_date: Optional[str] = None
    notes: Optional[str] = None
    total_amount: float = 0.0
    status: str = "draft"  # draft, sent, received, cancelled
    items: List[PurchaseOrderLineItem] = Field(default_factory=list)


class MatchedPODescriptor(BaseModel):
    """Identifies the PO a received record was reconciled against."""
    id: str
    order_number: Optional[str] = None
    supplier_name: Optional[str] = None
    order_date: Optional[str] = None
    
    @classmethod
    def from_purchase_order(cls, po: PurchaseOrder) -> "MatchedPODescriptor":
        return cls(
            id=po.id,
            order_number=po.order_number,
            supplier_name=po.supplier_name,
            order_date=po.order_date,
        )
