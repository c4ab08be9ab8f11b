# portal/app.py
from flask import Flask, jsonify, request, make_response

# --- Standard libs & typing ---
import os
import json
import logging
from pathlib import Path
from functools import wraps
from typing import Any, Dict, List, Optional, Tuple

from dotenv import load_dotenv
from werkzeug.exceptions import RequestEntityTooLarge
from werkzeug.utils import secure_filename

from portal.contracts import validate_layout_payload
from rowline.export import ExportError, rows_to_csv, rows_to_payload, rows_to_xlsx
from rowline.item_import import ItemImportError, parse_json_items, parse_upload
from rowline.row_builder import RowResult, build_rows
from rowline.viewport import row_width_for_viewport

log = logging.getLogger(__name__)

# ------------------------
# App & Config
# ------------------------
ROOT = Path(__file__).resolve().parents[1]

# --- Load .env if present (ROWLINE_* settings) ---
load_dotenv(ROOT / ".env")


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        log.warning("%s=%r is not an integer; using %d", name, raw, default)
        return default


DEFAULT_ROW_WIDTH = _env_int("ROWLINE_DEFAULT_ROW_WIDTH", 5)
MAX_ITEMS = _env_int("ROWLINE_MAX_ITEMS", 2000)

app = Flask(__name__)
app.config["SECRET_KEY"] = os.getenv("ROWLINE_SECRET_KEY") or "dev-secret-change-me"
app.config["MAX_CONTENT_LENGTH"] = _env_int("ROWLINE_MAX_CONTENT_LENGTH", 2 * 1024 * 1024)
app.config["ROWLINE_DEFAULT_ROW_WIDTH"] = DEFAULT_ROW_WIDTH
app.config["ROWLINE_MAX_ITEMS"] = MAX_ITEMS

XLSX_MIMETYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


# ------------------------
# Error plumbing
# ------------------------
class LayoutRequestError(Exception):
    """Client-side problem with a layout request; carries the HTTP status."""

    def __init__(self, message: str, status: int = 400):
        super().__init__(message)
        self.status = status


def _error(message: str, status: int):
    return jsonify({"ok": False, "error": message}), status


def json_errors(view_func):
    """Map request/import/export failures to {"ok": false, "error": ...} responses."""
    @wraps(view_func)
    def wrapper(*args, **kwargs):
        try:
            return view_func(*args, **kwargs)
        except LayoutRequestError as e:
            return _error(str(e), e.status)
        except ItemImportError as e:
            return _error(str(e), 400)
        except RequestEntityTooLarge:
            return _error("Request too large. Send fewer items or raise ROWLINE_MAX_CONTENT_LENGTH.", 413)
        except ExportError as e:
            app.logger.exception("Export failed")
            return _error(f"export failed: {e}", 500)
        except Exception as e:
            app.logger.exception("Layout request failed")
            return _error(f"Server error: {e}", 500)
    return wrapper


@app.errorhandler(RequestEntityTooLarge)
def _too_large(_e):
    return _error("Request too large. Send fewer items or raise ROWLINE_MAX_CONTENT_LENGTH.", 413)


# ------------------------
# Request helpers
# ------------------------
def _resolve_row_width(row_width: Optional[int], viewport_width: Optional[float]) -> int:
    if row_width is not None:
        return int(row_width)
    if viewport_width is not None:
        return row_width_for_viewport(viewport_width)
    return int(app.config["ROWLINE_DEFAULT_ROW_WIDTH"])


def _check_item_count(count: int) -> None:
    limit = int(app.config["ROWLINE_MAX_ITEMS"])
    if count > limit:
        raise LayoutRequestError(f"too many items: {count} (limit {limit})", 413)


def _layout_from_json() -> Tuple[List[RowResult], int, List[str]]:
    payload = request.get_json(silent=True)
    if payload is None:
        raise LayoutRequestError("expected a JSON body")

    ok, err = validate_layout_payload(payload)
    if not ok:
        raise LayoutRequestError(f"schema: {err}")

    _check_item_count(len(payload["items"]))
    items, warnings = parse_json_items(payload["items"])
    row_width = _resolve_row_width(payload.get("row_width"), payload.get("viewport_width"))

    rows = build_rows(items, row_width)
    app.logger.info("Built %d row(s) from %d item(s) at row_width=%d", len(rows), len(items), row_width)
    return rows, row_width, warnings


def _form_number(name: str, cast) -> Optional[Any]:
    raw = (request.form.get(name) or "").strip()
    if not raw:
        return None
    try:
        return cast(raw)
    except ValueError:
        raise LayoutRequestError(f"{name} must be a number")


def _layout_response(rows: List[RowResult], row_width: int, warnings: List[str]):
    body: Dict[str, Any] = {"ok": True, **rows_to_payload(rows, row_width), "warnings": warnings}
    return jsonify(body)


def _attachment(data: bytes, mimetype: str, filename: str):
    resp = make_response(data)
    resp.headers["Content-Type"] = mimetype
    resp.headers["Content-Disposition"] = f'attachment; filename="{filename}"'
    return resp


# ------------------------
# Layout API
# ------------------------
@app.post("/api/layout")
@json_errors
def api_layout():
    rows, row_width, warnings = _layout_from_json()
    return _layout_response(rows, row_width, warnings)


@app.post("/api/layout/upload")
@json_errors
def api_layout_upload():
    """Multipart upload of a .csv or .json item list (field 'file')."""
    if "file" not in request.files:
        raise LayoutRequestError("No file field 'file' provided")
    file = request.files["file"]
    if not file.filename:
        raise LayoutRequestError("Empty filename")

    row_width = _form_number("row_width", int)
    viewport_width = _form_number("viewport_width", float)
    if row_width is not None and viewport_width is not None:
        raise LayoutRequestError("give row_width or viewport_width, not both")
    if row_width is not None and row_width < 1:
        raise LayoutRequestError("row_width must be an integer >= 1")
    if viewport_width is not None and viewport_width < 0:
        raise LayoutRequestError("viewport_width must be a number >= 0")

    items, warnings = parse_upload(file.read(), file.filename)
    _check_item_count(len(items))
    width = _resolve_row_width(row_width, viewport_width)

    rows = build_rows(items, width)
    app.logger.info("Upload %s: %d row(s) from %d item(s)", secure_filename(file.filename), len(rows), len(items))
    return _layout_response(rows, width, warnings)


@app.post("/api/layout/export.json")
@json_errors
def api_layout_export_json():
    rows, row_width, _warnings = _layout_from_json()
    data = json.dumps(rows_to_payload(rows, row_width), indent=2).encode("utf-8")
    return _attachment(data, "application/json; charset=utf-8", "rows.json")


@app.post("/api/layout/export.csv")
@json_errors
def api_layout_export_csv():
    rows, _row_width, _warnings = _layout_from_json()
    data = rows_to_csv(rows).encode("utf-8-sig")
    return _attachment(data, "text/csv; charset=utf-8", "rows.csv")


@app.post("/api/layout/export.xlsx")
@json_errors
def api_layout_export_xlsx():
    rows, row_width, _warnings = _layout_from_json()
    return _attachment(rows_to_xlsx(rows, row_width), XLSX_MIMETYPE, "rows.xlsx")


from routes.core import core_bp

app.register_blueprint(core_bp)
# ------------------------
# Run
# ------------------------
if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    app.run(host="0.0.0.0", port=5000, debug=os.getenv("FLASK_DEBUG") == "1")
