"""
Structured logging for the reconciliation system.
"""

import logging
import json
from datetime import datetime, timezone
from typing import Any, Optional
from po_reconciliation.config import get_config


config = get_config()


class StructuredFormatter(logging.Formatter):
    """Formats log records as structured JSON."""
    
    def format(self, record: logging.LogRecord) -> str:
        log_obj = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        
        if hasattr(record, "extra"):
            log_obj.update(record.extra)
        
        return json.dumps(log_obj, default=str)


def setup_logging(name: str = __name__) -> logging.Logger:
    """Setup and return a configured logger."""
    logger = logging.getLogger(name)
    logger.setLevel(getattr(logging, config.LOG_LEVEL))
    
    # Loggers are shared per name; only configure once
    if logger.handlers:
        return logger
    
    # Console handler
    console_handler = logging.StreamHandler()
    console_handler.setLevel(getattr(logging, config.LOG_LEVEL))
    console_formatter = logging.Formatter(config.LOG_FORMAT)
    console_handler.setFormatter(console_formatter)
    logger.addHandler(console_handler)
    
    # File handler with structured JSON
    if config.LOG_FILE:
        file_handler = logging.FileHandler(config.LOG_FILE)
        file_handler.setLevel(getattr(logging, config.LOG_LEVEL))
        file_handler.setFormatter(StructuredFormatter())
        logger.addHandler(file_handler)
    
    return logger


def log_step(
    logger: logging.Logger,
    step: str,
    action: str,
    details: Optional[dict] = None,
) -> None:
    """Log a workflow step with context."""
    extra = {
        "step": step,
        "action": action,
    }
    if details:
        extra.update(details)
    
    logger.info(
        f"[{step}] {action}",
        extra={"extra": extra}
    )


def log_variance(logger: logging.Logger, line: Any) -> None:
    """Log a variance line that is not an exact match."""
    status = getattr(line.status, "value", line.status)
    extra = {
        "type": "variance",
        "status": status,
        "item_name": line.item_name,
        "ordered_qty": line.ordered_qty,
        "received_qty": line.received_qty,
        "variance": line.variance,
    }
    logger.warning(
        f"Variance detected: {line.item_name} ({status}, {line.variance:+g})",
        extra={"extra": extra}
    )
