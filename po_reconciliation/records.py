"""
Helpers for building purchase orders and received records from user input.
"""

from typing import Any, Dict, Iterable, List, Mapping, Optional, Union

from pydantic import BaseModel

from po_reconciliation.errors import InvalidRecordError
from po_reconciliation.schemas.po import PurchaseOrderLineItem
from po_reconciliation.schemas.received import DocumentReference, ReceivedLineItem
from po_reconciliation.utils import parse_number, to_number


class RecordTotals(BaseModel):
    """Denormalized totals kept on a received record."""
    total_items: int = 0
    total_quantity: float = 0.0
    total_value: float = 0.0


def _field(item: Any, name: str) -> Any:
    if isinstance(item, Mapping):
        return item.get(name)
    return getattr(item, name, None)


def clean_purchase_order_items(
    items: Iterable[Union[Mapping[str, Any], PurchaseOrderLineItem]],
) -> List[PurchaseOrderLineItem]:
    """
    Normalize PO line input before the order is saved.
    
    Blank item codes become None, names are trimmed, line totals are
    recomputed from quantity and unit price, and nameless lines are dropped.
    """
    cleaned = []
    for item in items or []:
        name = str(_field(item, "item_name") or "").strip()
        if not name:
            continue
        code = str(_field(item, "item_code") or "").strip() or None
        quantity = to_number(_field(item, "quantity"))
        price_per_unit = to_number(_field(item, "price_per_unit"))
        cleaned.append(
            PurchaseOrderLineItem(
                item_code=code,
                item_name=name,
                quantity=quantity,
                price_per_unit=price_per_unit,
                price_total=quantity * price_per_unit,
            )
        )
    
    if not cleaned:
        raise InvalidRecordError("Add at least one item")
    return cleaned


def purchase_order_total(items: Iterable[PurchaseOrderLineItem]) -> float:
    return sum(to_number(item.price_total) for item in items)


def build_received_item(
    item_name: str,
    quantity: Any,
    unit_price: Any = None,
    unit: Optional[str] = None,
) -> ReceivedLineItem:
    """Validate one manually entered received line."""
    name = (item_name or "").strip()
    if not name:
        raise InvalidRecordError("Item name is required")
    
    qty = parse_number(quantity)
    if qty is None or qty <= 0:
        raise InvalidRecordError("Quantity must be > 0")
    
    price = parse_number(unit_price)
    return ReceivedLineItem(
        item_name=name,
        quantity=qty,
        unit=unit,
        unit_price=price,
        total_price=qty * price if price is not None else None,
    )


def recompute_record_totals(
    items: Iterable[Union[ReceivedLineItem, Mapping[str, Any]]],
) -> RecordTotals:
    totals = RecordTotals()
    for item in items or []:
        totals.total_items += 1
        totals.total_quantity += to_number(_field(item, "quantity"))
        totals.total_value += to_number(_field(item, "total_price"))
    return totals


def initial_variance_data(
    document_path: Optional[str],
    document_name: Optional[str] = None,
    mime_type: Optional[str] = None,
) -> Optional[Dict[str, Any]]:
    """Starting variance_data for a new received record: just the source document, if any."""
    if not document_path:
        return None
    reference = DocumentReference(path=document_path, name=document_name, mimeType=mime_type)
    return {"document": reference.model_dump()}
