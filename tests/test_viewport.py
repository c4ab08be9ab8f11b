"""
Viewport → row width tests.

Covers:
  - Breakpoints 768 / 1024 / 1280 (exclusive upper bounds)
  - Negative widths rejected
"""

from __future__ import annotations

import pytest

from rowline.viewport import row_width_for_viewport


class TestRowWidthForViewport:
    @pytest.mark.parametrize("px, expected", [
        (0, 1),
        (375, 1),
        (767, 1),
        (768, 3),
        (1023.5, 3),
        (1024, 4),
        (1279, 4),
        (1280, 5),
        (2560, 5),
    ])
    def test_breakpoints(self, px, expected):
        assert row_width_for_viewport(px) == expected

    def test_negative_rejected(self):
        with pytest.raises(ValueError):
            row_width_for_viewport(-1)
