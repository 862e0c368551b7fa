"""
Reconciliation Matcher
Compares a received record's lines against a purchase order's lines and
classifies the delivery status of every item.

MATCHING RULES:
1. Join key is the normalized item name, exact equality only
2. Received lines sharing a name are summed before matching
3. Each receipt bucket is claimed by the first PO line that asks for it;
   later PO lines with the same name see it as missing
4. Receipt buckets nobody claimed are reported as extra
"""

from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Union

from po_reconciliation.config import get_config
from po_reconciliation.engine.aggregate import aggregate, as_received_item
from po_reconciliation.engine.normalize import normalize
from po_reconciliation.engine.summary import tabulate
from po_reconciliation.schemas.output import (
    ReconciliationResult,
    VarianceLine,
    VarianceStatus,
)
from po_reconciliation.schemas.po import PurchaseOrderLineItem
from po_reconciliation.schemas.received import ReceivedLineItem
from po_reconciliation.utils import to_number
from po_reconciliation.utils.logging import setup_logging, log_variance


logger = setup_logging(__name__)
config = get_config()


def as_po_item(item: Union[PurchaseOrderLineItem, Mapping[str, Any]]) -> PurchaseOrderLineItem:
    """Accept either a model or a raw storage row."""
    if isinstance(item, PurchaseOrderLineItem):
        return item
    return PurchaseOrderLineItem.model_validate(dict(item))


def resolve_tolerance(tolerance: Optional[float] = None) -> float:
    """Per-call tolerance, or the configured one. Must be positive, as in Config.validate."""
    if tolerance is None:
        return config.QUANTITY_MATCH_TOLERANCE
    if tolerance <= 0:
        raise ValueError(f"tolerance must be positive, got {tolerance}")
    return tolerance


def classify(
    ordered_qty: float,
    received_qty: Optional[float],
    tolerance: Optional[float] = None,
) -> VarianceStatus:
    """
    Classify one PO line.
    
    received_qty is None when no receipt bucket exists for the line.
    Raises ValueError for a non-positive tolerance.
    """
    tolerance = resolve_tolerance(tolerance)
    
    if received_qty is None:
        return VarianceStatus.MISSING
    
    delta = received_qty - ordered_qty
    if abs(delta) < tolerance:
        return VarianceStatus.MATCH
    if delta < 0:
        return VarianceStatus.SHORT
    return VarianceStatus.OVER


def first_unit_prices(items: Sequence[ReceivedLineItem]) -> Dict[str, Optional[float]]:
    """Unit price of the first received line per normalized name (None if that line has none)."""
    prices: Dict[str, Optional[float]] = {}
    for item in items:
        key = normalize(item.item_name)
        if key and key not in prices:
            prices[key] = item.unit_price
    return prices


def match_po_lines(
    po_items: Sequence[PurchaseOrderLineItem],
    received_items: Sequence[ReceivedLineItem],
    tolerance: Optional[float] = None,
) -> List[VarianceLine]:
    """Walk PO lines in order, claiming receipts, then emit the unclaimed ones as extra."""
    pool = aggregate(received_items)
    unit_prices = first_unit_prices(received_items)
    lines: List[VarianceLine] = []
    
    for item in po_items:
        key = normalize(item.item_name)
        ordered_qty = to_number(item.quantity)
        
        # Blank names can never claim a bucket
        receipt = pool.pop(key, None) if key else None
        received_qty = receipt.qty if receipt is not None else 0.0
        
        lines.append(
            VarianceLine(
                item_code=item.item_code,
                item_name=item.item_name,
                ordered_qty=ordered_qty,
                received_qty=received_qty,
                variance=received_qty - ordered_qty,
                status=classify(ordered_qty, receipt.qty if receipt is not None else None, tolerance),
                ordered_price=to_number(item.price_per_unit),
                received_price=unit_prices.get(key) if key else None,
            )
        )
    
    for key, receipt in pool.items():
        lines.append(
            VarianceLine(
                item_code=None,
                item_name=key,
                ordered_qty=0.0,
                received_qty=receipt.qty,
                variance=receipt.qty,
                status=VarianceStatus.EXTRA,
                ordered_price=None,
                received_price=None,
            )
        )
    
    return lines


def reconcile(
    po_items: Iterable[Union[PurchaseOrderLineItem, Mapping[str, Any]]],
    received_items: Iterable[Union[ReceivedLineItem, Mapping[str, Any]]],
    tolerance: Optional[float] = None,
    generated_at: Optional[datetime] = None,
) -> ReconciliationResult:
    """
    Reconcile received goods against a purchase order.
    
    Args:
        po_items: Ordered lines (models or raw rows)
        received_items: Received lines (models or raw rows)
        tolerance: Quantity difference treated as an exact match
        generated_at: Report timestamp (defaults to now, UTC)
    
    Returns:
        ReconciliationResult with one line per PO item plus one per
        unclaimed received name
    
    Raises:
        ValueError: if tolerance is given and not positive; the data
        itself never causes an error
    """
    tolerance = resolve_tolerance(tolerance)
    ordered = [as_po_item(item) for item in po_items or []]
    received = [as_received_item(item) for item in received_items or []]
    
    lines = match_po_lines(ordered, received, tolerance)
    summary = tabulate(lines)
    
    for line in lines:
        if line.status != VarianceStatus.MATCH:
            log_variance(logger, line)
    
    logger.info(
        f"Reconciled {len(ordered)} PO lines against {len(received)} received lines: "
        f"{summary.matched} matched, {summary.short} short, {summary.over} over, "
        f"{summary.missing} missing, {summary.extra} extra"
    )
    
    return ReconciliationResult(
        generated_at=generated_at or datetime.now(timezone.utc),
        summary=summary,
        items=lines,
    )
