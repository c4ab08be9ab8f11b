# rowline/patterns/catalog.py
"""
Pattern Catalog

Static table of the curated row combinations. Every entry is a frozen
PatternDefinition keyed by its CombinationPattern name; nothing is
registered at runtime.

Thresholds in a Requirement apply to the *effective* rating (after the
vertical penalty), so "V 0–3" accepts a vertical rated 4.

FORCE_FILL is a sentinel: it tags rows produced by the force-fill packer
and has no table entry.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Mapping, Optional, Tuple

from ..content_types import Direction, Orientation


class CombinationPattern(str, Enum):
    STANDALONE = "STANDALONE"
    HORIZONTAL_PAIR = "HORIZONTAL_PAIR"
    VERTICAL_PAIR = "VERTICAL_PAIR"
    DOMINANT_SECONDARY = "DOMINANT_SECONDARY"
    TRIPLE_HORIZONTAL = "TRIPLE_HORIZONTAL"
    DOMINANT_VERTICAL_PAIR = "DOMINANT_VERTICAL_PAIR"
    MULTI_SMALL = "MULTI_SMALL"
    FORCE_FILL = "FORCE_FILL"


@dataclass(frozen=True, slots=True)
class Requirement:
    orientation: Optional[Orientation] = None
    min_rating: int = 0
    max_rating: Optional[int] = None


@dataclass(frozen=True, slots=True)
class PatternDefinition:
    """
    rating_proximity: max effective-rating spread among items matched by
                      identical requirements (same role).
    max_proximity:    max number of unmatched window positions the matcher
                      may pass over before its last match (None → 0).
    flexible:         requirements after the first may sit anywhere in the
                      window, in any order.
    skip_low_lead:    a low-significance lead item may be left pending.
    has_main:         requirement 0 is the dominant item of the row.
    repeat_last:      the last requirement may match further items.
    """
    name: CombinationPattern
    requires: Tuple[Requirement, ...]
    direction: Optional[Direction]
    min_row_width: int
    rating_proximity: Optional[int] = None
    max_proximity: Optional[int] = None
    flexible: bool = False
    skip_low_lead: bool = False
    has_main: bool = False
    repeat_last: bool = False


_H_HERO = Requirement(orientation="horizontal", min_rating=5)
_H_MID = Requirement(orientation="horizontal", min_rating=3, max_rating=4)
_V_ANY = Requirement(orientation="vertical", min_rating=0, max_rating=4)
_H_DOMINANT = Requirement(orientation="horizontal", min_rating=4)
_V_SECONDARY = Requirement(orientation="vertical", min_rating=0, max_rating=3)
_H_LOW = Requirement(orientation="horizontal", min_rating=2, max_rating=3)
_ANY_STACKED = Requirement(min_rating=0, max_rating=3)
_ANY_SMALL = Requirement(min_rating=0, max_rating=2)


PATTERN_TABLE: Mapping[CombinationPattern, PatternDefinition] = MappingProxyType({
    CombinationPattern.STANDALONE: PatternDefinition(
        name=CombinationPattern.STANDALONE,
        requires=(_H_HERO,),
        direction=None,
        min_row_width=5,
        max_proximity=2,
        skip_low_lead=True,
    ),
    CombinationPattern.HORIZONTAL_PAIR: PatternDefinition(
        name=CombinationPattern.HORIZONTAL_PAIR,
        requires=(_H_MID, _H_MID),
        direction="horizontal",
        min_row_width=4,
        rating_proximity=1,
    ),
    CombinationPattern.VERTICAL_PAIR: PatternDefinition(
        name=CombinationPattern.VERTICAL_PAIR,
        requires=(_V_ANY, _V_ANY),
        direction="horizontal",
        min_row_width=4,
        rating_proximity=0,
        max_proximity=2,
    ),
    CombinationPattern.DOMINANT_SECONDARY: PatternDefinition(
        name=CombinationPattern.DOMINANT_SECONDARY,
        requires=(_H_DOMINANT, _V_SECONDARY),
        direction="horizontal",
        min_row_width=4,
        max_proximity=3,
    ),
    CombinationPattern.TRIPLE_HORIZONTAL: PatternDefinition(
        name=CombinationPattern.TRIPLE_HORIZONTAL,
        requires=(_H_LOW, _H_LOW, _H_LOW),
        direction="horizontal",
        min_row_width=5,
        rating_proximity=0,
        max_proximity=1,
    ),
    # Main on the left, two secondaries of any orientation stacked beside it
    # (catches V2★ → eff 1, H3★, ...).
    CombinationPattern.DOMINANT_VERTICAL_PAIR: PatternDefinition(
        name=CombinationPattern.DOMINANT_VERTICAL_PAIR,
        requires=(_H_DOMINANT, _ANY_STACKED, _ANY_STACKED),
        direction="horizontal",
        min_row_width=5,
        max_proximity=3,
        flexible=True,
        has_main=True,
    ),
    CombinationPattern.MULTI_SMALL: PatternDefinition(
        name=CombinationPattern.MULTI_SMALL,
        requires=(_ANY_SMALL, _ANY_SMALL, _ANY_SMALL),
        direction="horizontal",
        min_row_width=3,
        rating_proximity=0,
        max_proximity=2,
        flexible=True,
        repeat_last=True,
    ),
})

# Most selective first, most permissive last.
PATTERNS_BY_PRIORITY: Tuple[CombinationPattern, ...] = (
    CombinationPattern.STANDALONE,
    CombinationPattern.HORIZONTAL_PAIR,
    CombinationPattern.VERTICAL_PAIR,
    CombinationPattern.DOMINANT_SECONDARY,
    CombinationPattern.TRIPLE_HORIZONTAL,
    CombinationPattern.DOMINANT_VERTICAL_PAIR,
    CombinationPattern.MULTI_SMALL,
)


def get_pattern(name: CombinationPattern) -> PatternDefinition:
    """Catalog lookup; a missing entry is a KeyError (catalog bug, not input)."""
    return PATTERN_TABLE[name]
