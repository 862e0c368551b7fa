"""
Result assembly.
Merges a fresh variance report into a received record's persisted variance_data
without dropping keys owned by other features (the document reference, edit
history, ...).
"""

from typing import Any, Dict, Mapping, Optional, Union

from pydantic import BaseModel

from po_reconciliation.schemas.output import ReconciliationResult


def _to_plain(value: Any) -> Any:
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json")
    if isinstance(value, Mapping):
        return dict(value)
    return value


def merge_result(
    existing_document: Optional[Mapping[str, Any]],
    po_descriptor: Union[BaseModel, Mapping[str, Any]],
    result: Union[ReconciliationResult, Mapping[str, Any]],
) -> Dict[str, Any]:
    """
    Shallow-merge matched_po and variance into the existing document.
    
    Only the two top-level keys are replaced; every other key is carried
    over untouched. The input document is not modified.
    """
    merged = dict(existing_document or {})
    merged["matched_po"] = _to_plain(po_descriptor)
    merged["variance"] = _to_plain(result)
    return merged
