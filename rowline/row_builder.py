# rowline/row_builder.py
"""
Row Builder

Driver of the layout engine. Walks the ordered item sequence and emits one
RowResult per display row:

  1. Window = the first LOOKAHEAD_WINDOW pending items.
  2. Catalog patterns are tried in priority order; the first match that
     also passes the fill validator is committed.
  3. Otherwise the force-fill packer's row is taken as-is.
  4. Each committed row is classified and turned into a box tree.

Matched positions leave the pending list. An item passed over by the
matcher keeps its place at the front, so it lands in a later row.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from .content_types import ContentItem, Direction
from .force_fill import force_complete_row
from .layout.box_tree import BoxTree, build_box_tree
from .layout.classifier import LayoutShape, RowLayout, classify_layout
from .patterns.catalog import PATTERNS_BY_PRIORITY, CombinationPattern, get_pattern
from .patterns.matcher import MatchResult, match_pattern
from .scoring.fill import fill_ratio, is_row_complete

log = logging.getLogger(__name__)

LOOKAHEAD_WINDOW = 5


@dataclass(frozen=True, slots=True)
class RowResult:
    pattern_name: CombinationPattern
    used_indices: Tuple[int, ...]          # positions in the caller's sequence
    components: Tuple[ContentItem, ...]    # original relative order
    direction: Optional[Direction]
    layout: RowLayout
    box_tree: BoxTree
    fill_ratio: float


def _match_window(window: Sequence[ContentItem], row_width: int) -> MatchResult:
    for name in PATTERNS_BY_PRIORITY:
        match = match_pattern(get_pattern(name), window, row_width)
        if match is not None and is_row_complete(match.components, row_width):
            return match
    return force_complete_row(window, row_width)


def build_rows(
    items: Sequence[ContentItem],
    row_width: int,
    lookahead: int = LOOKAHEAD_WINDOW,
) -> List[RowResult]:
    """
    Partition `items` into rows for a row of `row_width` slots.

    Every item lands in exactly one row. Raises ValueError for a row width
    below 1; an empty sequence yields no rows.
    """
    if row_width < 1:
        raise ValueError(f"row_width must be >= 1, got {row_width}")
    if lookahead < 1:
        raise ValueError(f"lookahead must be >= 1, got {lookahead}")

    pending: List[int] = list(range(len(items)))
    rows: List[RowResult] = []

    while pending:
        window_idx = pending[:lookahead]
        window = [items[i] for i in window_idx]

        match = _match_window(window, row_width)
        used = tuple(window_idx[p] for p in match.used_indices)

        layout = classify_layout(match.components, match.main_index)
        direction = None if layout.shape is LayoutShape.NESTED_QUAD else match.direction
        fill = fill_ratio(match.components, row_width)

        row = RowResult(
            pattern_name=match.pattern,
            used_indices=used,
            components=match.components,
            direction=direction,
            layout=layout,
            box_tree=build_box_tree(layout),
            fill_ratio=fill,
        )
        rows.append(row)
        log.debug(
            "row %d: %s %s fill=%.3f layout=%s",
            len(rows) - 1, row.pattern_name.value, list(used), fill, layout.shape.value,
        )

        taken = set(used)
        pending = [i for i in pending if i not in taken]

    return rows
