# rowline/rating.py
"""
Orientation & Value Model

Classifies an item as horizontal or vertical and turns its rating into the
share of a row it is deemed to occupy ("component value").

    effective rating  = base rating, minus one for verticals (floored at 0)
    items per row     = clamp(row_width + 1 - effective, 1, row_width)
    component value   = row_width / items per row

At row_width=5: eff 5 → 5.0 (full row), 4 → 2.5, 3 → 1.667, 2 → 1.25,
1 and 0 → 1.0.
"""

from __future__ import annotations

from .content_types import ContentItem, Orientation

# Collection cards always pair up two-per-row on desktop.
COLLECTION_CARD_RATING = 4
VERTICAL_PENALTY = 1


def orientation(item: ContentItem) -> Orientation:
    """Horizontal if aspect ratio > 1.0; square counts as vertical."""
    return "horizontal" if item.aspect_ratio > 1.0 else "vertical"


def is_horizontal(item: ContentItem) -> bool:
    return orientation(item) == "horizontal"


def is_vertical(item: ContentItem) -> bool:
    return orientation(item) == "vertical"


def base_rating(item: ContentItem) -> int:
    """
    Rating before the vertical penalty.

    Collection cards are pinned to 4 and text blocks to 0, whatever the
    caller put in `rating`.
    """
    if item.kind == "collection":
        return COLLECTION_CARD_RATING
    if item.kind == "text":
        return 0
    return item.rating or 0


def effective_rating(item: ContentItem) -> int:
    rating = base_rating(item)
    if orientation(item) == "horizontal":
        return rating
    return max(rating - VERTICAL_PENALTY, 0)


def component_value(effective: int, row_width: int) -> float:
    items_per_row = min(max(row_width + 1 - effective, 1), row_width)
    return row_width / items_per_row


def item_component_value(item: ContentItem, row_width: int) -> float:
    return component_value(effective_rating(item), row_width)
