"""
Fill Validator
A row is "complete" when its components cover 90–115% of the row width.
The lower bound tolerates small gaps; the upper bound stops items from
being squeezed far below their intended size.
"""

from __future__ import annotations

from typing import Sequence

from ..content_types import ContentItem
from ..rating import item_component_value

MIN_FILL_RATIO = 0.9
MAX_FILL_RATIO = 1.15


def total_component_value(components: Sequence[ContentItem], row_width: int) -> float:
    return sum(item_component_value(c, row_width) for c in components)


def fill_ratio(components: Sequence[ContentItem], row_width: int) -> float:
    return total_component_value(components, row_width) / row_width


def is_row_complete(components: Sequence[ContentItem], row_width: int) -> bool:
    if not components:
        return False
    fill = fill_ratio(components, row_width)
    return MIN_FILL_RATIO <= fill <= MAX_FILL_RATIO
