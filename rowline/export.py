# rowline/export.py
"""
Row export

Serializes build_rows() output for the outside world:
  - rows_to_payload → JSON-ready dict (API responses, CLI --out)
  - rows_to_csv     → one line per item, reading order
  - rows_to_xlsx    → workbook bytes with a "Rows" and an "Items" sheet
"""

from __future__ import annotations

import csv
import io
from typing import Any, Dict, List, Sequence

from openpyxl import Workbook
from openpyxl.styles import Font
from openpyxl.utils.exceptions import IllegalCharacterError

from .content_types import LayoutPayload, LayoutResponse, RowPayload
from .layout.box_tree import box_tree_to_dict
from .layout.classifier import LayoutShape, RowLayout
from .row_builder import RowResult

CSV_FIELDS = ["row", "position", "id", "pattern", "layout", "fill"]

ROWS_SHEET_HEADERS = ["row", "pattern", "direction", "layout", "items", "fill", "item_ids"]
ITEMS_SHEET_HEADERS = ["row", "position", "id", "aspect_ratio", "rating", "kind", "pattern"]


class ExportError(Exception):
    """Raised when a row list cannot be serialized."""


def _check_rows(rows: Sequence[Any]) -> None:
    for idx, row in enumerate(rows):
        if not isinstance(row, RowResult):
            raise ExportError(f"Row {idx}: expected RowResult, got {type(row).__name__}")


def layout_to_dict(layout: RowLayout) -> LayoutPayload:
    out: LayoutPayload = {"shape": layout.shape.value}
    if layout.shape is LayoutShape.HORIZONTAL:
        out["items"] = [c.id for c in layout.items]
    elif layout.shape is LayoutShape.MAIN_STACKED:
        out["main"] = layout.main.id
        out["stacked"] = [c.id for c in layout.stacked]
    else:
        out["main"] = layout.main.id
        out["top_pair"] = [c.id for c in layout.top_pair]
        out["bottom"] = layout.bottom.id
    return out


def row_to_dict(row: RowResult, index: int = 0) -> RowPayload:
    return {
        "index": index,
        "pattern": row.pattern_name.value,
        "direction": row.direction,
        "fill_ratio": round(row.fill_ratio, 4),
        "item_ids": [c.id for c in row.components],
        "used_indices": list(row.used_indices),
        "layout": layout_to_dict(row.layout),
        "box_tree": box_tree_to_dict(row.box_tree),
    }


def rows_to_payload(rows: Sequence[RowResult], row_width: int) -> LayoutResponse:
    _check_rows(rows)
    return {
        "row_width": row_width,
        "row_count": len(rows),
        "item_count": sum(len(r.components) for r in rows),
        "rows": [row_to_dict(r, i) for i, r in enumerate(rows)],
    }


def _csv_lines(rows: Sequence[RowResult]) -> List[Dict[str, Any]]:
    lines: List[Dict[str, Any]] = []
    for row_idx, row in enumerate(rows):
        for pos, item in enumerate(row.components):
            lines.append({
                "row": row_idx,
                "position": pos,
                "id": item.id,
                "pattern": row.pattern_name.value,
                "layout": row.layout.shape.value,
                "fill": round(row.fill_ratio, 4),
            })
    return lines


def rows_to_csv(rows: Sequence[RowResult]) -> str:
    _check_rows(rows)
    buf = io.StringIO()
    writer = csv.DictWriter(buf, fieldnames=CSV_FIELDS)
    writer.writeheader()
    for line in _csv_lines(rows):
        writer.writerow(line)
    return buf.getvalue()


def _fill_workbook(wb: Workbook, rows: Sequence[RowResult], row_width: int) -> None:
    ws = wb.active
    ws.title = "Rows"
    ws.append(ROWS_SHEET_HEADERS)
    for row_idx, row in enumerate(rows):
        ws.append([
            row_idx,
            row.pattern_name.value,
            row.direction or "",
            row.layout.shape.value,
            len(row.components),
            round(row.fill_ratio, 4),
            ", ".join(str(c.id) for c in row.components),
        ])
    ws.append([])
    ws.append(["row_width", row_width])

    items_ws = wb.create_sheet("Items")
    items_ws.append(ITEMS_SHEET_HEADERS)
    for row_idx, row in enumerate(rows):
        for pos, item in enumerate(row.components):
            items_ws.append([
                row_idx,
                pos,
                item.id,
                round(item.aspect_ratio, 4),
                item.rating,
                item.kind,
                row.pattern_name.value,
            ])

    for sheet in (ws, items_ws):
        for cell in sheet[1]:
            cell.font = Font(bold=True)
        sheet.freeze_panes = "A2"


def rows_to_xlsx(rows: Sequence[RowResult], row_width: int) -> bytes:
    _check_rows(rows)

    wb = Workbook()
    out = io.BytesIO()
    try:
        # openpyxl refuses control characters as soon as a cell is assigned
        _fill_workbook(wb, rows, row_width)
        wb.save(out)
    except (IllegalCharacterError, ValueError) as e:
        raise ExportError(f"Workbook could not be written: {e}") from e
    return out.getvalue()
