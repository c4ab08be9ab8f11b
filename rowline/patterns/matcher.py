# rowline/patterns/matcher.py
"""
Pattern Matcher

Tests one catalog pattern against the lookahead window of pending items.

Rules, in the order they are applied:
  1. Width gate: a pattern never applies below its min_row_width.
  2. Lead rule: the window's first item must take part in the match so rows
     keep document order. A pattern with skip_low_lead may leave a
     low-significance lead pending and search from position 1 instead; the
     skipped item simply stays at the front of the queue.
  3. Reach: only len(requires) + max_proximity positions are searched, so
     at most max_proximity unmatched items are passed over.
  4. Assignment: requirements are placed on distinct positions by a small
     depth-first search. Non-flexible patterns keep requirement order equal
     to window order; flexible ones place requirement 0 anywhere and the
     rest on any remaining positions.
  5. Role proximity: items matched by the same requirement must sit within
     rating_proximity effective stars of each other.

A non-match returns None. Completeness is not checked here; the row
builder runs the fill validator on whatever comes back.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Tuple

from ..content_types import ContentItem, Direction
from ..rating import component_value, effective_rating, item_component_value, orientation
from ..scoring.fill import MIN_FILL_RATIO, fill_ratio
from .catalog import CombinationPattern, PatternDefinition, Requirement

# A lead item worth no more than an effective-2★ item may be skipped.
LOW_SIGNIFICANCE_RATING = 2


@dataclass(frozen=True, slots=True)
class MatchResult:
    pattern: CombinationPattern
    used_indices: Tuple[int, ...]          # window positions, ascending
    components: Tuple[ContentItem, ...]    # same order as used_indices
    direction: Optional[Direction]
    main_index: Optional[int] = None       # index into components


def is_low_significance(item: ContentItem, row_width: int) -> bool:
    threshold = component_value(LOW_SIGNIFICANCE_RATING, row_width)
    return item_component_value(item, row_width) <= threshold


def satisfies(item: ContentItem, req: Requirement) -> bool:
    if req.orientation is not None and orientation(item) != req.orientation:
        return False
    rating = effective_rating(item)
    if rating < req.min_rating:
        return False
    if req.max_rating is not None and rating > req.max_rating:
        return False
    return True


def _within_proximity(
    requires: Sequence[Requirement],
    items: Sequence[ContentItem],
    limit: Optional[int],
) -> bool:
    if limit is None:
        return True
    by_role: Dict[Requirement, List[int]] = {}
    for req, item in zip(requires, items):
        by_role.setdefault(req, []).append(effective_rating(item))
    return all(max(r) - min(r) <= limit for r in by_role.values())


def _assign(
    requires: Sequence[Requirement],
    candidates: Sequence[ContentItem],
    *,
    flexible: bool,
    must_lead: bool,
    rating_proximity: Optional[int],
) -> Optional[List[int]]:
    """
    First assignment (in position order) of requirement -> candidate position
    that passes the lead rule and role proximity. Returned in requirement
    order.
    """
    eligible = [[i for i, it in enumerate(candidates) if satisfies(it, req)] for req in requires]
    if any(not e for e in eligible):
        return None

    chosen: List[int] = []

    def _walk(k: int) -> Optional[List[int]]:
        if k == len(requires):
            if must_lead and 0 not in chosen:
                return None
            if not _within_proximity(requires, [candidates[p] for p in chosen], rating_proximity):
                return None
            return list(chosen)
        for pos in eligible[k]:
            if pos in chosen:
                continue
            if not flexible and chosen and pos <= chosen[-1]:
                continue
            chosen.append(pos)
            found = _walk(k + 1)
            if found is not None:
                return found
            chosen.pop()
        return None

    return _walk(0)


def _match_requirements(
    pattern: PatternDefinition,
    requires: Tuple[Requirement, ...],
    window: Sequence[ContentItem],
    start: int,
) -> Optional[MatchResult]:
    reach = len(requires) + (pattern.max_proximity or 0)
    candidates = window[start:start + reach]
    if len(candidates) < len(requires):
        return None

    positions = _assign(
        requires,
        candidates,
        flexible=pattern.flexible,
        must_lead=(start == 0),
        rating_proximity=pattern.rating_proximity,
    )
    if positions is None:
        return None

    ordered = sorted(positions)
    main_index = ordered.index(positions[0]) if pattern.has_main else None
    return MatchResult(
        pattern=pattern.name,
        used_indices=tuple(start + p for p in ordered),
        components=tuple(candidates[p] for p in ordered),
        direction=pattern.direction,
        main_index=main_index,
    )


def match_pattern(
    pattern: PatternDefinition,
    window: Sequence[ContentItem],
    row_width: int,
) -> Optional[MatchResult]:
    """
    Try to satisfy `pattern` with distinct items from `window`.

    Returns a MatchResult (positions relative to the window) or None.
    """
    if row_width < pattern.min_row_width:
        return None
    if len(window) < len(pattern.requires):
        return None

    start = 0
    if pattern.skip_low_lead and is_low_significance(window[0], row_width):
        start = 1

    requires = pattern.requires
    best = _match_requirements(pattern, requires, window, start)
    if best is None or not pattern.repeat_last:
        return best

    # "Three or more": keep adding items for the last role while the row is
    # still short and the window can supply them.
    while fill_ratio(best.components, row_width) < MIN_FILL_RATIO:
        requires = requires + (requires[-1],)
        longer = _match_requirements(pattern, requires, window, start)
        if longer is None:
            break
        best = longer
    return best
