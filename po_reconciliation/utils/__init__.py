"""
Shared utilities and helpers.
"""

import json
import math
from typing import Any, Dict, Optional
from datetime import datetime


def serialize_for_json(obj: Any) -> Any:
    """Serialize objects that aren't JSON-serializable by default."""
    if isinstance(obj, datetime):
        return obj.isoformat()
    elif hasattr(obj, "model_dump"):  # Pydantic model
        return obj.model_dump(mode="json")
    elif hasattr(obj, "__dict__"):
        return obj.__dict__
    return str(obj)


def dict_to_json_string(data: Dict) -> str:
    """Convert dict to JSON string, handling non-serializable types."""
    return json.dumps(data, default=serialize_for_json, indent=2)


def parse_number(value: Any) -> Optional[float]:
    """
    Parse a loosely-typed numeric field.
    
    Returns None for missing, non-numeric, boolean, or non-finite values
    instead of raising.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(number):
        return None
    return number


def to_number(value: Any, default: float = 0.0) -> float:
    """Coerce a loosely-typed numeric field to a float, falling back to default."""
    number = parse_number(value)
    return default if number is None else number
