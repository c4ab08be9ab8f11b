"""
Layout Classifier
Decides how a finished row nests: a flat strip, a main item beside a stack,
or the four-item nested quad.

    nested-quad:
    ┌──────────┬───────────┐
    │          │  V1 │ V2  │   <- top pair (two lowest-rated verticals)
    │   Main   ├───────────┤
    │   (V)    │  Bottom   │   <- remaining item
    └──────────┴───────────┘

Runs on every row, whatever pattern produced it.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Sequence, Tuple

from ..content_types import ContentItem
from ..rating import effective_rating, is_vertical


class LayoutShape(str, Enum):
    HORIZONTAL = "horizontal"
    MAIN_STACKED = "main-stacked"
    NESTED_QUAD = "nested-quad"


@dataclass(frozen=True, slots=True)
class RowLayout:
    shape: LayoutShape
    items: Tuple[ContentItem, ...] = ()          # horizontal strip
    main: Optional[ContentItem] = None
    stacked: Tuple[ContentItem, ...] = ()        # main-stacked
    top_pair: Tuple[ContentItem, ...] = ()       # nested-quad
    bottom: Optional[ContentItem] = None         # nested-quad


def _nested_quad(components: Sequence[ContentItem]) -> Optional[RowLayout]:
    verticals = [i for i, c in enumerate(components) if is_vertical(c)]
    if len(verticals) < 3:
        return None

    # highest effective rating wins main; earliest on ties
    main_idx = min(verticals, key=lambda i: (-effective_rating(components[i]), i))
    rest = sorted(
        (i for i in verticals if i != main_idx),
        key=lambda i: (effective_rating(components[i]), i),
    )
    top = sorted(rest[:2])
    bottom_idx = next(i for i in range(len(components)) if i != main_idx and i not in top)

    return RowLayout(
        shape=LayoutShape.NESTED_QUAD,
        main=components[main_idx],
        top_pair=(components[top[0]], components[top[1]]),
        bottom=components[bottom_idx],
    )


def classify_layout(
    components: Sequence[ContentItem],
    main_index: Optional[int] = None,
) -> RowLayout:
    """main_index: position of the pattern's designated main item, if any."""
    if main_index is not None and len(components) >= 3:
        return RowLayout(
            shape=LayoutShape.MAIN_STACKED,
            main=components[main_index],
            stacked=tuple(c for i, c in enumerate(components) if i != main_index),
        )

    if len(components) == 4:
        quad = _nested_quad(components)
        if quad is not None:
            return quad

    return RowLayout(shape=LayoutShape.HORIZONTAL, items=tuple(components))
