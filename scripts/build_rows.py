#!/usr/bin/env python3
"""
Build display rows from an item list or a folder of images.

    python scripts/build_rows.py items.csv --row-width 5
    python scripts/build_rows.py --images photos/ --viewport-width 1100 --xlsx rows.xlsx

Prints one summary line per row; --out / --csv / --xlsx write the full result.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.append(str(ROOT))

from rowline.content_types import ContentItem
from rowline.export import ExportError, rows_to_csv, rows_to_payload, rows_to_xlsx
from rowline.image_probe import ImageProbeError, items_from_directory
from rowline.item_import import ItemImportError, parse_upload
from rowline.row_builder import RowResult, build_rows
from rowline.viewport import row_width_for_viewport

DEFAULT_ROW_WIDTH = 5


def _load_items(args: argparse.Namespace) -> List[ContentItem]:
    if args.images:
        return items_from_directory(args.images, default_rating=args.default_rating)

    p = Path(args.input)
    if not p.exists():
        raise ItemImportError(f"Input file not found: {p}")
    items, warnings = parse_upload(p.read_bytes(), p.name)
    for w in warnings:
        print(f"[WARN] {w}", file=sys.stderr)
    return items


def format_row(index: int, row: RowResult) -> str:
    ids = ", ".join(str(c.id) for c in row.components)
    return (
        f"{index:>3}  {row.pattern_name.value:<24} {row.layout.shape.value:<12} "
        f"{row.fill_ratio * 100:5.1f}%  [{ids}]"
    )


def main(argv: Optional[List[str]] = None) -> int:
    ap = argparse.ArgumentParser(description="Arrange content items into display rows.")
    ap.add_argument("input", nargs="?", help=".json or .csv item list")
    ap.add_argument("--images", type=str, help="Directory of images to probe instead of an item list")
    ap.add_argument("--default-rating", type=int, default=0, help="Rating for probed images (default: 0)")
    width = ap.add_mutually_exclusive_group()
    width.add_argument("--row-width", type=int, help=f"Slots per row (default: {DEFAULT_ROW_WIDTH})")
    width.add_argument("--viewport-width", type=float, help="Viewport width in px; picks the row width")
    ap.add_argument("--out", type=str, help="Write the JSON payload here")
    ap.add_argument("--csv", type=str, help="Write one CSV line per item here")
    ap.add_argument("--xlsx", type=str, help="Write an Excel workbook here")
    ap.add_argument("-v", "--verbose", action="store_true", help="Debug logging from the engine")
    args = ap.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if bool(args.input) == bool(args.images):
        print("[ERR] Give exactly one of an input file or --images DIR.", file=sys.stderr)
        return 2

    if args.viewport_width is not None:
        if args.viewport_width < 0:
            print("[ERR] --viewport-width must be >= 0.", file=sys.stderr)
            return 2
        row_width = row_width_for_viewport(args.viewport_width)
    else:
        row_width = args.row_width if args.row_width is not None else DEFAULT_ROW_WIDTH
    if row_width < 1:
        print("[ERR] --row-width must be >= 1.", file=sys.stderr)
        return 2

    try:
        items = _load_items(args)
    except (ItemImportError, ImageProbeError, ValueError) as e:
        print(f"[ERR] {e}", file=sys.stderr)
        return 1

    rows = build_rows(items, row_width)
    print(f"[ROWS] {len(rows)} row(s) from {len(items)} item(s) at row_width={row_width}")
    for i, row in enumerate(rows):
        print(format_row(i, row))

    try:
        if args.out:
            Path(args.out).write_text(json.dumps(rows_to_payload(rows, row_width), indent=2), encoding="utf-8")
            print(f"[SAVE] JSON → {args.out}")
        if args.csv:
            Path(args.csv).write_text(rows_to_csv(rows), encoding="utf-8-sig", newline="")
            print(f"[SAVE] CSV → {args.csv}")
        if args.xlsx:
            Path(args.xlsx).write_bytes(rows_to_xlsx(rows, row_width))
            print(f"[SAVE] XLSX → {args.xlsx}")
    except (ExportError, OSError) as e:
        print(f"[ERR] {e}", file=sys.stderr)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
