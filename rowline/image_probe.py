# rowline/image_probe.py
"""
Image probing

Reads pixel dimensions from image files so a folder of photos can be fed
straight into build_rows(). EXIF orientation is applied first: a portrait
photo stored as landscape pixels with Orientation=6 must come out vertical.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Mapping, Optional, Tuple, Union

from PIL import Image, ImageOps

from .content_types import MAX_RATING, MIN_RATING, ContentItem

log = logging.getLogger(__name__)

IMAGE_EXTENSIONS = (".jpg", ".jpeg", ".png", ".gif", ".webp", ".bmp", ".tif", ".tiff")

PathLike = Union[str, Path]


class ImageProbeError(Exception):
    """Raised when a file cannot be opened or decoded as an image."""


def probe_image(path: PathLike) -> Tuple[int, int]:
    """Return (width, height) after EXIF orientation is applied."""
    p = Path(path)
    try:
        with Image.open(p) as im:
            fixed = ImageOps.exif_transpose(im)
            width, height = fixed.size
    except FileNotFoundError as e:
        raise ImageProbeError(f"{p.name}: file not found") from e
    except OSError as e:
        raise ImageProbeError(f"{p.name}: not a readable image ({e})") from e

    if width <= 0 or height <= 0:
        raise ImageProbeError(f"{p.name}: empty image ({width}x{height})")
    return width, height


def item_from_image(path: PathLike, rating: int = 0) -> ContentItem:
    """ContentItem keyed by file name; animated GIFs get kind "gif"."""
    if not MIN_RATING <= rating <= MAX_RATING:
        raise ValueError(f"rating must be {MIN_RATING}-{MAX_RATING}, got {rating}")
    p = Path(path)
    width, height = probe_image(p)
    kind = "gif" if p.suffix.lower() == ".gif" else "image"
    return ContentItem.from_size(p.name, width, height, rating=rating, kind=kind, meta={"path": str(p)})


def items_from_directory(
    directory: PathLike,
    ratings: Optional[Mapping[str, int]] = None,
    default_rating: int = 0,
) -> List[ContentItem]:
    """
    One item per image file in `directory`, sorted by file name.

    ratings: optional file name -> rating map; files not listed get
    default_rating. Non-image extensions are ignored.
    """
    root = Path(directory)
    if not root.is_dir():
        raise ImageProbeError(f"{root}: not a directory")

    ratings = ratings or {}
    files = sorted(
        (p for p in root.iterdir() if p.is_file() and p.suffix.lower() in IMAGE_EXTENSIONS),
        key=lambda p: p.name,
    )
    items = [item_from_image(p, ratings.get(p.name, default_rating)) for p in files]
    log.info("Probed %d image(s) in %s", len(items), root)
    return items
