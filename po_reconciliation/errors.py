"""
Exception types raised around the reconciliation engine.

The engine itself treats every input permissively and never raises for
bad data; these errors come from record construction, storage, and the
reconcile-and-save workflow.
"""

from typing import Optional


class ReceivingError(Exception):
    """Base class for receiving and reconciliation errors."""


class InvalidRecordError(ReceivingError, ValueError):
    """A purchase order or received line could not be built from user input."""


class StorageError(ReceivingError):
    """The receiving store could not be read or written."""


class RecordNotFoundError(StorageError, KeyError):
    """A purchase order or received record id does not exist in the store."""
    
    def __init__(self, kind: str, record_id: str):
        self.kind = kind
        self.record_id = record_id
        super().__init__(f"{kind} '{record_id}' not found")
    
    def __str__(self) -> str:
        # KeyError would otherwise repr() the message
        return f"{self.kind} '{self.record_id}' not found"


class ReconcileAndSaveError(ReceivingError):
    """Terminal failure of the reconcile-and-save workflow. Nothing was committed."""
    
    def __init__(
        self,
        step: str,
        message: str,
        cause: Optional[BaseException] = None,
        error_type: Optional[str] = None,
    ):
        self.step = step
        self.cause = cause
        self.error_type = error_type or (type(cause).__name__ if cause else None)
        super().__init__(f"[{step}] {message}")
    
    @property
    def is_not_found(self) -> bool:
        return self.error_type == RecordNotFoundError.__name__
