"""
Purchase-Order Receiving Reconciliation
"""

__version__ = "1.0.0"
__description__ = "Matches received goods against purchase orders and reports delivery variances"

from po_reconciliation.engine import normalize, aggregate, reconcile, tabulate, merge_result
from po_reconciliation.main import reconcile_and_save
from po_reconciliation.schemas.output import (
    ReconciliationResult,
    VarianceLine,
    VarianceStatus,
    VarianceSummary,
)

__all__ = [
    "normalize",
    "aggregate",
    "reconcile",
    "tabulate",
    "merge_result",
    "reconcile_and_save",
    "ReconciliationResult",
    "VarianceLine",
    "VarianceStatus",
    "VarianceSummary",
]
