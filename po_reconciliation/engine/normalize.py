"""
Item-name normalization.
The normalized name is the only join key between PO lines and received lines.
"""

from typing import Any


def normalize(name: Any) -> str:
    """
    Canonicalize an item name for matching.
    
    Trims, lowercases and collapses every whitespace run to a single space.
    Total and idempotent; None and blank input give "".
    """
    if name is None:
        return ""
    return " ".join(str(name).split()).lower()
