"""
Output schemas for the reconciliation results.
Defines the variance report persisted under a received record's variance_data.
"""

from enum import Enum
from typing import Optional, List
from pydantic import BaseModel, Field
from datetime import datetime


class VarianceStatus(str, Enum):
    MATCH = "match"
    SHORT = "short"
    OVER = "over"
    MISSING = "missing"
    EXTRA = "extra"


class VarianceLine(BaseModel):
    """Delivery status of one ordered item, or of one unordered received item."""
    item_code: Optional[str] = None
    item_name: str
    ordered_qty: float
    received_qty: float
    variance: float  # received - ordered; negative is a shortfall
    status: VarianceStatus
    ordered_price: Optional[float] = None  # None only for extra lines
    received_price: Optional[float] = None


class VarianceSummary(BaseModel):
    """Count of variance lines per status."""
    matched: int = 0
    short: int = 0
    over: int = 0
    missing: int = 0
    extra: int = 0
    
    def total(self) -> int:
        return self.matched + self.short + self.over + self.missing + self.extra


class ReconciliationResult(BaseModel):
    """Final variance report for one received record against one PO."""
    generated_at: datetime
    summary: VarianceSummary
    items: List[VarianceLine] = Field(default_factory=list)
    
    class Config:
        json_schema_extra = {
            "example": {
                "generated_at": "2026-01-30T10:30:00Z",
                "summary": {"matched": 1, "short": 0, "over": 0, "missing": 1, "extra": 1},
                "items": [
                    {
                        "item_code": "LJ-01",
                        "item_name": "Lime Juice",
                        "ordered_qty": 10,
                        "received_qty": 10,
                        "variance": 0,
                        "status": "match",
                        "ordered_price": 2.0,
                        "received_price": 2.0,
                    }
                ],
            }
        }
