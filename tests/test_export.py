"""
Row export tests.

Covers:
  - rows_to_payload: counts, per-row dict, layout dict per shape, box tree
  - rows_to_csv: one line per item in reading order
  - rows_to_xlsx: "Rows" and "Items" sheets, bold headers
  - ExportError for anything that is not a RowResult, and for ids the
    workbook cannot hold
"""

from __future__ import annotations

import csv
import io
import json

import openpyxl
import pytest

from rowline.content_types import ContentItem
from rowline.export import ExportError, rows_to_csv, rows_to_payload, rows_to_xlsx
from rowline.row_builder import build_rows


def _h(id, rating):
    return ContentItem(id=id, aspect_ratio=1920 / 1080, rating=rating)


def _v(id, rating):
    return ContentItem(id=id, aspect_ratio=1080 / 1920, rating=rating)


@pytest.fixture()
def rows():
    # hero | dominant + stacked pair | nested quad
    items = [
        _h("hero", 5),
        _h("main", 4), _v("s1", 3), _v("s2", 3),
        _v("q1", 3), _v("q2", 1), _v("q3", 1), _h("q4", 3),
    ]
    return build_rows(items, 5)


class TestPayload:
    def test_counts(self, rows):
        payload = rows_to_payload(rows, 5)
        assert payload["row_width"] == 5
        assert payload["row_count"] == 3
        assert payload["item_count"] == 8
        json.dumps(payload)  # serializable

    def test_hero_row(self, rows):
        row = rows_to_payload(rows, 5)["rows"][0]
        assert row["index"] == 0
        assert row["pattern"] == "STANDALONE"
        assert row["direction"] is None
        assert row["fill_ratio"] == 1.0
        assert row["item_ids"] == ["hero"]
        assert row["layout"] == {"shape": "horizontal", "items": ["hero"]}
        assert row["box_tree"] == {"type": "leaf", "id": "hero"}

    def test_main_stacked_row(self, rows):
        row = rows_to_payload(rows, 5)["rows"][1]
        assert row["pattern"] == "DOMINANT_VERTICAL_PAIR"
        assert row["used_indices"] == [1, 2, 3]
        assert row["layout"] == {"shape": "main-stacked", "main": "main", "stacked": ["s1", "s2"]}

    def test_nested_quad_row(self, rows):
        row = rows_to_payload(rows, 5)["rows"][2]
        assert row["direction"] is None
        assert row["layout"] == {
            "shape": "nested-quad",
            "main": "q1",
            "top_pair": ["q2", "q3"],
            "bottom": "q4",
        }

    def test_empty(self):
        assert rows_to_payload([], 3) == {"row_width": 3, "row_count": 0, "item_count": 0, "rows": []}

    def test_rejects_foreign_rows(self):
        with pytest.raises(ExportError, match="Row 0"):
            rows_to_payload([{"pattern": "x"}], 5)


class TestCsv:
    def test_one_line_per_item(self, rows):
        lines = list(csv.DictReader(io.StringIO(rows_to_csv(rows))))
        assert len(lines) == 8
        assert list(lines[0]) == ["row", "position", "id", "pattern", "layout", "fill"]
        assert [ln["id"] for ln in lines] == ["hero", "main", "s1", "s2", "q1", "q2", "q3", "q4"]
        assert lines[2]["row"] == "1"
        assert lines[2]["position"] == "1"
        assert lines[2]["layout"] == "main-stacked"


class TestXlsx:
    def test_sheets(self, rows):
        wb = openpyxl.load_workbook(io.BytesIO(rows_to_xlsx(rows, 5)))
        assert wb.sheetnames == ["Rows", "Items"]

        ws = wb["Rows"]
        assert [c.value for c in ws[1]] == ["row", "pattern", "direction", "layout", "items", "fill", "item_ids"]
        assert ws[1][0].font.bold
        assert ws.cell(row=2, column=2).value == "STANDALONE"
        assert ws.cell(row=3, column=7).value == "main, s1, s2"

        items_ws = wb["Items"]
        assert items_ws.max_row == 1 + 8
        assert items_ws.cell(row=2, column=3).value == "hero"

    def test_rejects_foreign_rows(self):
        with pytest.raises(ExportError):
            rows_to_xlsx([None], 5)

    def test_control_characters_in_ids(self):
        rows = build_rows([ContentItem(id="a\x01b", aspect_ratio=1.5, rating=5)], 5)
        with pytest.raises(ExportError, match="Workbook could not be written"):
            rows_to_xlsx(rows, 5)

    def test_control_characters_still_fine_in_csv(self):
        rows = build_rows([ContentItem(id="a\x01b", aspect_ratio=1.5, rating=5)], 5)
        assert "a\x01b" in rows_to_csv(rows)
