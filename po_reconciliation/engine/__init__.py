"""
Purchase-order receiving reconciliation engine.
Pure computation: no I/O, no shared state.
"""

from po_reconciliation.engine.normalize import normalize
from po_reconciliation.engine.aggregate import aggregate, AggregatedReceipt
from po_reconciliation.engine.matcher import reconcile, classify
from po_reconciliation.engine.summary import tabulate
from po_reconciliation.engine.assemble import merge_result

__all__ = [
    "normalize",
    "aggregate",
    "AggregatedReceipt",
    "reconcile",
    "classify",
    "tabulate",
    "merge_result",
]
