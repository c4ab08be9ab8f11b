"""
Force-fill packer tests.

Covers:
  - Empty window is a programmer error
  - Sequential phase keeps reading order and stops once complete
  - Short windows come back underfilled
  - Best-fit phase on overshoot: closest-to-gap choice, lowest index on ties
  - No packed row ever exceeds 115%
"""

from __future__ import annotations

import pytest

from rowline.content_types import ContentItem
from rowline.force_fill import force_complete_row
from rowline.patterns.catalog import CombinationPattern
from rowline.scoring.fill import MAX_FILL_RATIO, fill_ratio


def _h(id, rating):
    return ContentItem(id=id, aspect_ratio=1920 / 1080, rating=rating)


def _v(id, rating):
    return ContentItem(id=id, aspect_ratio=1080 / 1920, rating=rating)


class TestSequential:
    def test_empty_window_raises(self):
        with pytest.raises(ValueError):
            force_complete_row([], 5)

    def test_tags_result(self):
        m = force_complete_row([_h(1, 3)], 5)
        assert m.pattern is CombinationPattern.FORCE_FILL
        assert m.direction == "horizontal"
        assert m.main_index is None

    def test_window_exhausted_underfilled(self):
        window = [_h(1, 3), _h(2, 4)]
        m = force_complete_row(window, 5)
        assert m.used_indices == (0, 1)
        assert fill_ratio(m.components, 5) == pytest.approx(25 / 30)

    def test_stops_once_complete(self):
        window = [_h(i, 3) for i in range(4)]
        m = force_complete_row(window, 5)
        assert m.used_indices == (0, 1, 2)
        assert fill_ratio(m.components, 5) == pytest.approx(1.0)

    def test_full_lead_alone(self):
        assert force_complete_row([_h(1, 5), _h(2, 5)], 5).used_indices == (0,)

    def test_single_item_row_width_one(self):
        assert force_complete_row([_v(1, 0), _v(2, 0)], 1).used_indices == (0,)


class TestBestFit:
    def test_skips_item_that_would_overshoot(self):
        # V4 + H3 = 67%, + H4 would be 117%: restart and pick H4 then H1
        window = [_v(1, 4), _h(2, 3), _h(3, 4), _h(4, 1)]
        m = force_complete_row(window, 5)
        assert m.used_indices == (0, 2, 3)
        assert [c.id for c in m.components] == [1, 3, 4]
        assert fill_ratio(m.components, 5) == pytest.approx(31 / 30)

    def test_tie_goes_to_lowest_index_and_stops_short(self):
        # H4 + H3 = 83%; a second H3 would reach 117%
        window = [_h(1, 4), _h(2, 3), _h(3, 3)]
        m = force_complete_row(window, 5)
        assert m.used_indices == (0, 1)
        assert fill_ratio(m.components, 5) == pytest.approx(25 / 30)

    def test_keeps_lead_even_when_best_fit_reorders(self):
        window = [_v(1, 4), _h(2, 3), _h(3, 4), _h(4, 1)]
        assert force_complete_row(window, 5).used_indices[0] == 0

    def test_never_exceeds_upper_bound(self):
        windows = [
            [_h(1, 4), _h(2, 4), _h(3, 4)],
            [_h(1, 3), _h(2, 3), _h(3, 5)],
            [_v(1, 5), _h(2, 4), _h(3, 5), _v(4, 2)],
            [_h(1, 2), _h(2, 5), _h(3, 5), _h(4, 4), _v(5, 1)],
        ]
        for window in windows:
            m = force_complete_row(window, 5)
            assert fill_ratio(m.components, 5) <= MAX_FILL_RATIO
