"""
Viewport → row width
Maps a viewport width in CSS pixels to the slot count handed to build_rows().
"""

from __future__ import annotations

from typing import Tuple

# (exclusive upper bound in px, row width); anything wider is desktop.
BREAKPOINTS: Tuple[Tuple[int, int], ...] = (
    (768, 1),    # mobile
    (1024, 3),   # tablet
    (1280, 4),   # small desktop
)
DESKTOP_ROW_WIDTH = 5


def row_width_for_viewport(viewport_px: float) -> int:
    if viewport_px < 0:
        raise ValueError(f"viewport width must be >= 0, got {viewport_px}")
    for bound, width in BREAKPOINTS:
        if viewport_px < bound:
            return width
    return DESKTOP_ROW_WIDTH
