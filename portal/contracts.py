# portal/contracts.py
from __future__ import annotations
from typing import Any, Tuple

def _is_int(x: Any) -> bool:
    return isinstance(x, int) and not isinstance(x, bool)

def _is_number(x: Any) -> bool:
    return isinstance(x, (int, float)) and not isinstance(x, bool)

def validate_layout_payload(payload: Any) -> Tuple[bool, str]:
    """
    Shape check for POST /api/layout bodies. Item fields themselves are
    checked by rowline.item_import, which reports the offending item.
    """
    if not isinstance(payload, dict):
        return False, "body must be a JSON object"

    if "items" not in payload:
        return False, "missing top-level key: items"

    items = payload["items"]
    if not isinstance(items, list):
        return False, "items must be a list"
    for i, it in enumerate(items):
        if not isinstance(it, dict):
            return False, f"items[{i}] must be an object"

    has_width = payload.get("row_width") is not None
    has_viewport = payload.get("viewport_width") is not None
    if has_width and has_viewport:
        return False, "give row_width or viewport_width, not both"

    if has_width:
        rw = payload["row_width"]
        if not _is_int(rw) or rw < 1:
            return False, "row_width must be an integer >= 1"

    if has_viewport:
        vw = payload["viewport_width"]
        if not _is_number(vw) or vw < 0:
            return False, "viewport_width must be a number >= 0"

    return True, ""
