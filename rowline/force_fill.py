# rowline/force_fill.py
"""
Force-Fill Packer

Fallback used by the row builder when no catalog pattern yields a complete
row. Its result is accepted as-is, which guarantees forward progress.

Strategy:
  1. Sequential: take item 0, then the following items in reading order
     until the row reaches 90%. If the window runs out first, the short
     row is returned (normally the last row of the sequence).
  2. Best-fit: only when the next sequential item would push the row past
     115% while it is still under 90%. Restart from item 0 and repeatedly
     add the unused item whose value is closest to the remaining gap
     (lowest index on ties), as long as that keeps the row at or under
     115% and strictly closer to 100%.

No packed row ever exceeds MAX_FILL_RATIO: item 0 alone is at most a full
row and every later addition is capped.
"""

from __future__ import annotations

import logging
from typing import List, Sequence

from .content_types import ContentItem
from .patterns.catalog import CombinationPattern
from .patterns.matcher import MatchResult
from .rating import item_component_value
from .scoring.fill import MAX_FILL_RATIO, MIN_FILL_RATIO

log = logging.getLogger(__name__)


def _result(window: Sequence[ContentItem], used: List[int]) -> MatchResult:
    ordered = sorted(used)
    return MatchResult(
        pattern=CombinationPattern.FORCE_FILL,
        used_indices=tuple(ordered),
        components=tuple(window[i] for i in ordered),
        direction="horizontal",
    )


def force_complete_row(window: Sequence[ContentItem], row_width: int) -> MatchResult:
    if not window:
        raise ValueError("force_complete_row called with empty window")

    values = [item_component_value(item, row_width) for item in window]

    # --- Sequential fill (preserves reading order) ---
    total = values[0]
    count = 1
    overshoot = False
    while count < len(window) and total / row_width < MIN_FILL_RATIO:
        if (total + values[count]) / row_width > MAX_FILL_RATIO:
            overshoot = True
            break
        total += values[count]
        count += 1

    if not overshoot:
        return _result(window, list(range(count)))

    log.debug(
        "sequential fill overshoots at item %d (fill=%.3f); switching to best-fit",
        count, total / row_width,
    )

    # --- Best-fit (may reorder within the window) ---
    used = [0]
    total = values[0]
    available = list(range(1, len(window)))

    while available and total / row_width < MIN_FILL_RATIO:
        gap = row_width - total
        best = min(available, key=lambda i: (abs(values[i] - gap), i))

        stop_cost = abs(1.0 - total / row_width)
        prospective = (total + values[best]) / row_width
        if prospective > MAX_FILL_RATIO or abs(1.0 - prospective) >= stop_cost:
            break

        used.append(best)
        available.remove(best)
        total += values[best]

    return _result(window, used)
