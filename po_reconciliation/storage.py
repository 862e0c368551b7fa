"""
JSON-file receiving store.
Holds purchase orders and received records and commits reconciliation
results in a single atomic write.
"""

import json
import os
import tempfile
import threading
from pathlib import Path
from typing import Any, Dict, Union

from pydantic import ValidationError

from po_reconciliation.errors import RecordNotFoundError, StorageError
from po_reconciliation.records import recompute_record_totals
from po_reconciliation.schemas.po import PurchaseOrder
from po_reconciliation.schemas.received import ReceivedRecord
from po_reconciliation.utils.logging import setup_logging


logger = setup_logging(__name__)

PO_STATUS_RECEIVED = "received"
RECORD_STATUS_MATCHED = "matched"


class JsonReceivingStore:
    """
    Receiving store backed by one JSON file.
    
    Layout: {"purchase_orders": {id: {...}}, "received_records": {id: {...}}}.
    Every mutation rewrites the whole file through a temp file and
    os.replace, so readers never see a partial write. Concurrent writers
    on one instance are serialized; the last write wins.
    """
    
    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)
        self._lock = threading.Lock()
    
    def _read(self) -> Dict[str, Dict[str, Any]]:
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except FileNotFoundError:
            logger.warning(f"Store file not found: {self.path}. Using empty store.")
            return {"purchase_orders": {}, "received_records": {}}
        except (OSError, json.JSONDecodeError) as e:
            raise StorageError(f"Cannot read store {self.path}: {e}") from e
        
        data.setdefault("purchase_orders", {})
        data.setdefault("received_records", {})
        return data
    
    def _write(self, data: Dict[str, Any]) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(dir=self.path.parent, suffix=".tmp")
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    json.dump(data, f, indent=2, default=str)
                os.replace(tmp_path, self.path)
            except BaseException:
                Path(tmp_path).unlink(missing_ok=True)
                raise
        except OSError as e:
            raise StorageError(f"Cannot write store {self.path}: {e}") from e
    
    def get_purchase_order(self, po_id: str) -> PurchaseOrder:
        row = self._read()["purchase_orders"].get(po_id)
        if row is None:
            raise RecordNotFoundError("Purchase order", po_id)
        try:
            return PurchaseOrder.model_validate(row)
        except ValidationError as e:
            raise StorageError(f"Purchase order '{po_id}' is malformed in {self.path}: {e}") from e
    
    def get_received_record(self, record_id: str) -> ReceivedRecord:
        row = self._read()["received_records"].get(record_id)
        if row is None:
            raise RecordNotFoundError("Received record", record_id)
        try:
            return ReceivedRecord.model_validate(row)
        except ValidationError as e:
            raise StorageError(f"Received record '{record_id}' is malformed in {self.path}: {e}") from e
    
    def add_purchase_order(self, po: PurchaseOrder) -> None:
        with self._lock:
            data = self._read()
            data["purchase_orders"][po.id] = po.model_dump(mode="json")
            self._write(data)
        logger.debug(f"Stored purchase order {po.id}")
    
    def add_received_record(self, record: ReceivedRecord) -> None:
        """Store a received record, refreshing its denormalized totals from its items."""
        totals = recompute_record_totals(record.items)
        record = record.model_copy(update=totals.model_dump())
        with self._lock:
            data = self._read()
            data["received_records"][record.id] = record.model_dump(mode="json")
            self._write(data)
        logger.debug(f"Stored received record {record.id}")
    
    def commit_reconciliation(
        self,
        record_id: str,
        po_id: str,
        variance_data: Dict[str, Any],
    ) -> None:
        """
        Save the merged variance_data and flip both status flags in one write.
        
        Raises RecordNotFoundError before anything is written if either id
        is unknown.
        """
        with self._lock:
            data = self._read()
            record = data["received_records"].get(record_id)
            if record is None:
                raise RecordNotFoundError("Received record", record_id)
            po = data["purchase_orders"].get(po_id)
            if po is None:
                raise RecordNotFoundError("Purchase order", po_id)
            
            record["variance_data"] = variance_data
            record["status"] = RECORD_STATUS_MATCHED
            record["matched_po_id"] = po_id
            po["status"] = PO_STATUS_RECEIVED
            
            self._write(data)
        
        logger.info(f"Committed reconciliation of record {record_id} against PO {po_id}")
    
