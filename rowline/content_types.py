"""
RowLine Content Types
Defines the item model consumed by the row builder plus the TypedDicts used
for JSON payloads (API responses, exports, CLI output).

- Geometry-free: an item is only an id, an aspect ratio and a rating.
  Pixel sizes are the downstream sizer's business.
- Dataclasses are frozen; the engine never mutates the caller's items.
- Payload TypedDicts mirror what portal/app.py and rowline/export.py emit.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Literal, NotRequired, Optional, TypedDict, Union


# ────────────────────────────────────────────────
# Basic enums (string literals, JSON-friendly)
# ────────────────────────────────────────────────

Orientation = Literal["horizontal", "vertical"]
Direction = Literal["horizontal", "vertical"]

ItemId = Union[int, str]

# "collection" = a collection thumbnail card, "text" = a text block that
# occupies row space like an image would.
CONTENT_KINDS = ("image", "gif", "collection", "text")

MIN_RATING = 0
MAX_RATING = 5


# ────────────────────────────────────────────────
# 🖼 Engine input
# ────────────────────────────────────────────────

@dataclass(frozen=True, slots=True)
class ContentItem:
    """
    One entry of the ordered sequence handed to build_rows().

    aspect_ratio: width / height, must be > 0.
    rating:       caller-assigned importance score, 0–5.
    kind:         one of CONTENT_KINDS; changes the base rating (see rating.py).
    width/height: optional source pixel size, informational only.
    """
    id: ItemId
    aspect_ratio: float
    rating: int = 0
    kind: str = "image"
    width: Optional[int] = None
    height: Optional[int] = None
    meta: Dict[str, object] = field(default_factory=dict, compare=False, hash=False)

    @classmethod
    def from_size(
        cls,
        id: ItemId,
        width: int,
        height: int,
        rating: int = 0,
        kind: str = "image",
        meta: Optional[Dict[str, object]] = None,
    ) -> "ContentItem":
        """Build an item from pixel dimensions."""
        return cls(
            id=id, aspect_ratio=width / height, rating=rating, kind=kind,
            width=width, height=height, meta=dict(meta or {}),
        )


# ────────────────────────────────────────────────
# 📦 JSON payloads (API / export surface)
# ────────────────────────────────────────────────

class ItemPayload(TypedDict):
    id: ItemId
    aspect_ratio: float
    rating: int
    kind: NotRequired[str]
    width: NotRequired[Optional[int]]
    height: NotRequired[Optional[int]]


class LeafPayload(TypedDict):
    type: Literal["leaf"]
    id: ItemId


class CombinedPayload(TypedDict):
    type: Literal["combined"]
    direction: Direction
    children: List["BoxTreePayload"]   # always exactly two


BoxTreePayload = Union[LeafPayload, CombinedPayload]


class LayoutPayload(TypedDict):
    """
    Nesting decision for one row. Only the keys relevant to the shape are set.
    """
    shape: str                           # "horizontal" | "main-stacked" | "nested-quad"
    items: NotRequired[List[ItemId]]     # horizontal strip, left → right
    main: NotRequired[ItemId]            # main-stacked / nested-quad
    stacked: NotRequired[List[ItemId]]   # main-stacked
    top_pair: NotRequired[List[ItemId]]  # nested-quad
    bottom: NotRequired[ItemId]          # nested-quad


class RowPayload(TypedDict):
    index: int
    pattern: str
    direction: Optional[Direction]
    fill_ratio: float
    item_ids: List[ItemId]
    used_indices: List[int]
    layout: LayoutPayload
    box_tree: BoxTreePayload


class LayoutResponse(TypedDict):
    row_width: int
    row_count: int
    item_count: int
    rows: List[RowPayload]
    meta: NotRequired[Dict[str, object]]


__all__ = [
    "Orientation",
    "Direction",
    "ItemId",
    "CONTENT_KINDS",
    "MIN_RATING",
    "MAX_RATING",
    "ContentItem",
    "ItemPayload",
    "LeafPayload",
    "CombinedPayload",
    "BoxTreePayload",
    "LayoutPayload",
    "RowPayload",
    "LayoutResponse",
]
