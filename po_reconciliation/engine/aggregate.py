"""
Received-items aggregation.
Groups received lines that share a normalized name into one receipt bucket.
"""

from typing import Any, Dict, Iterable, Mapping, Union

from pydantic import BaseModel

from po_reconciliation.engine.normalize import normalize
from po_reconciliation.schemas.received import ReceivedLineItem
from po_reconciliation.utils import to_number


class AggregatedReceipt(BaseModel):
    """Summed quantity and value of all received lines with one normalized name."""
    qty: float = 0.0
    total: float = 0.0


def as_received_item(item: Union[ReceivedLineItem, Mapping[str, Any]]) -> ReceivedLineItem:
    """Accept either a model or a raw storage row."""
    if isinstance(item, ReceivedLineItem):
        return item
    return ReceivedLineItem.model_validate(dict(item))


def aggregate(items: Iterable[Union[ReceivedLineItem, Mapping[str, Any]]]) -> Dict[str, AggregatedReceipt]:
    """
    Build the normalized-name -> receipt map.
    
    Lines with a blank normalized name are skipped. Missing quantities and
    totals count as 0. Keys keep first-seen order.
    """
    pool: Dict[str, AggregatedReceipt] = {}
    
    for raw in items or []:
        item = as_received_item(raw)
        key = normalize(item.item_name)
        if not key:
            continue
        
        bucket = pool.get(key)
        if bucket is None:
            bucket = pool[key] = AggregatedReceipt()
        bucket.qty += to_number(item.quantity)
        bucket.total += to_number(item.total_price)
    
    return pool
