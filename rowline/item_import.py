# rowline/item_import.py
from __future__ import annotations

import csv
import json
import math
from io import StringIO
from typing import Any, Dict, List, Optional, Set, Tuple

from .content_types import CONTENT_KINDS, MAX_RATING, MIN_RATING, ContentItem, ItemId


# ---------------------------------------------------------------------------
# Public types
# ---------------------------------------------------------------------------

class ItemImportError(Exception):
    """Fatal item import error (bad file, missing aspect ratio, duplicate id, etc.)."""


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

_CANONICAL_HEADERS = {
    "id": {"id", "item_id", "key"},
    "aspect_ratio": {"aspect_ratio", "aspectratio", "ratio", "ar"},
    "width": {"width", "image_width", "w"},
    "height": {"height", "image_height", "h"},
    "rating": {"rating", "stars", "score"},
    "kind": {"kind", "type", "content_type"},
}

_KNOWN_FIELDS = set(_CANONICAL_HEADERS)


def _normalize_header(header: str) -> str:
    h = (header or "").strip().lower()
    for canonical, aliases in _CANONICAL_HEADERS.items():
        if h in aliases:
            return canonical
    return h  # unknown headers end up in ContentItem.meta


def _blank(raw: Any) -> bool:
    return raw is None or (isinstance(raw, str) and not raw.strip())


def _parse_number(raw: Any, field: str) -> float:
    if isinstance(raw, bool):
        raise ItemImportError(f"Invalid {field} value: {raw!r}")
    try:
        value = float(str(raw).strip()) if isinstance(raw, str) else float(raw)
    except (TypeError, ValueError):
        raise ItemImportError(f"Invalid {field} value: {raw!r}")
    if not math.isfinite(value):
        raise ItemImportError(f"Invalid {field} value: {raw!r}")
    return value


def _parse_pixels(raw: Any, field: str) -> Optional[int]:
    if _blank(raw):
        return None
    value = _parse_number(raw, field)
    if value <= 0 or not value.is_integer():
        raise ItemImportError(f"Invalid {field} value: {raw!r}")
    return int(value)


def _parse_rating(raw: Any) -> int:
    value = _parse_number(raw, "rating")
    if not value.is_integer():
        raise ItemImportError(f"Rating must be a whole number, got {raw!r}")
    rating = int(value)
    if not MIN_RATING <= rating <= MAX_RATING:
        raise ItemImportError(f"Rating {rating} outside {MIN_RATING}-{MAX_RATING}")
    return rating


def _coerce_id(raw: Any, position: int) -> ItemId:
    if _blank(raw):
        return position
    if isinstance(raw, int) and not isinstance(raw, bool):
        return raw
    s = str(raw).strip()
    # "12" in a CSV should match 12 in a JSON file
    return int(s) if s.isdigit() else s


def _build_item(raw: Dict[str, Any], position: int) -> Tuple[ContentItem, bool]:
    """
    Turn one canonicalized record into a ContentItem.

    Returns (item, rating_defaulted). Raises ItemImportError without a
    row/item prefix; callers add it.
    """
    width = _parse_pixels(raw.get("width"), "width")
    height = _parse_pixels(raw.get("height"), "height")

    if not _blank(raw.get("aspect_ratio")):
        aspect_ratio = _parse_number(raw["aspect_ratio"], "aspect_ratio")
    elif width is not None and height is not None:
        aspect_ratio = width / height
    else:
        raise ItemImportError("missing aspect_ratio (or width and height).")

    if aspect_ratio <= 0:
        raise ItemImportError(f"aspect_ratio must be > 0, got {aspect_ratio:g}")

    rating_defaulted = _blank(raw.get("rating"))
    rating = 0 if rating_defaulted else _parse_rating(raw["rating"])

    kind = "image" if _blank(raw.get("kind")) else str(raw["kind"]).strip().lower()
    if kind not in CONTENT_KINDS:
        raise ItemImportError(
            f"unknown kind {kind!r}; expected one of {', '.join(CONTENT_KINDS)}."
        )

    meta = {k: v for k, v in raw.items() if k not in _KNOWN_FIELDS and not _blank(v)}

    item = ContentItem(
        id=_coerce_id(raw.get("id"), position),
        aspect_ratio=aspect_ratio,
        rating=rating,
        kind=kind,
        width=width,
        height=height,
        meta=meta,
    )
    return item, rating_defaulted


def _collect(
    records: List[Tuple[str, Dict[str, Any]]],
) -> Tuple[List[ContentItem], List[str]]:
    items: List[ContentItem] = []
    seen: Set[ItemId] = set()
    unrated: List[str] = []

    for position, (label, raw) in enumerate(records, start=1):
        try:
            item, rating_defaulted = _build_item(raw, position)
        except ItemImportError as e:
            raise ItemImportError(f"{label}: {e}") from e

        if item.id in seen:
            raise ItemImportError(f"{label}: duplicate id {item.id!r}.")
        seen.add(item.id)

        if rating_defaulted:
            unrated.append(str(item.id))
        items.append(item)

    warnings: List[str] = []
    if unrated:
        warnings.append(
            f"{len(unrated)} item(s) have no rating and were given rating 0: {', '.join(unrated)}"
        )
    return items, warnings


# ---------------------------------------------------------------------------
# CSV parsing
# ---------------------------------------------------------------------------

def parse_csv_items(text: str) -> Tuple[List[ContentItem], List[str]]:
    """
    Parse a CSV item list into ContentItems plus non-fatal warnings.

    Raises ItemImportError for fatal problems (no usable geometry columns,
    invalid values, duplicate ids).
    """
    if not text.strip():
        raise ItemImportError("CSV file appears to be empty.")

    reader = csv.DictReader(StringIO(text))
    if reader.fieldnames is None:
        raise ItemImportError("CSV file has no header row.")

    header_map: Dict[str, str] = {h: _normalize_header(h) for h in reader.fieldnames}
    canonical_values = set(header_map.values())
    if "aspect_ratio" not in canonical_values and not {"width", "height"} <= canonical_values:
        raise ItemImportError(
            "CSV must include an 'aspect_ratio' column or both 'width' and 'height'."
        )

    records: List[Tuple[str, Dict[str, Any]]] = []
    row_index = 1  # header is line 1
    for row in reader:
        row_index += 1
        raw = {header_map.get(k, k): v for k, v in row.items() if k is not None}
        if all(_blank(v) for v in raw.values()):
            continue
        records.append((f"Row {row_index}", raw))

    if not records:
        raise ItemImportError("CSV file has a header but no items.")

    return _collect(records)


# ---------------------------------------------------------------------------
# JSON parsing
# ---------------------------------------------------------------------------

def parse_json_items(data: Any) -> Tuple[List[ContentItem], List[str]]:
    """
    Parse a decoded JSON payload into ContentItems plus non-fatal warnings.

    Accepts either:
      - {"items": [...]} or
      - [...]
    """
    if data is None:
        raise ItemImportError("JSON body is empty.")

    if isinstance(data, dict) and "items" in data:
        items_in = data["items"]
    else:
        items_in = data

    if not isinstance(items_in, list):
        raise ItemImportError("JSON payload must be a list of items or an object with an 'items' array.")

    records: List[Tuple[str, Dict[str, Any]]] = []
    for idx, raw in enumerate(items_in, start=1):
        if not isinstance(raw, dict):
            raise ItemImportError(f"Item {idx} is not an object.")
        records.append((f"Item {idx}", {_normalize_header(k): v for k, v in raw.items()}))

    return _collect(records)


# ---------------------------------------------------------------------------
# Unified entrypoint for Flask routes / CLI
# ---------------------------------------------------------------------------

def _decode(file_bytes: bytes) -> str:
    try:
        return file_bytes.decode("utf-8-sig", errors="strict")
    except UnicodeDecodeError as e:
        raise ItemImportError(f"File is not valid UTF-8: {e}") from e


def parse_upload(file_bytes: bytes, filename: str) -> Tuple[List[ContentItem], List[str]]:
    """
    Decide parser based on filename extension.

    Returns (items, warnings). Raises ItemImportError for fatal issues.
    """
    if not filename:
        raise ItemImportError("File has no name; expected .csv or .json.")

    lower = filename.lower()
    if lower.endswith(".csv"):
        return parse_csv_items(_decode(file_bytes))

    if lower.endswith(".json"):
        try:
            data = json.loads(_decode(file_bytes))
        except json.JSONDecodeError as e:
            raise ItemImportError(f"Invalid JSON: {e}") from e
        return parse_json_items(data)

    raise ItemImportError("Unsupported file type; only .csv and .json item lists are accepted.")
