"""
Image probing tests (Pillow images written to tmp_path).

Covers:
  - probe_image size, EXIF orientation applied
  - Unreadable / missing files raise ImageProbeError
  - item_from_image: id, kind, meta path, rating range
  - items_from_directory: name order, non-image files ignored, rating map
"""

from __future__ import annotations

import pytest
from PIL import Image

from rowline.image_probe import ImageProbeError, item_from_image, items_from_directory, probe_image
from rowline.rating import orientation


def _save(path, size, fmt=None, exif=None):
    im = Image.new("RGB", size, color=(120, 80, 40))
    kwargs = {}
    if exif is not None:
        kwargs["exif"] = exif
    im.save(path, fmt, **kwargs)
    return path


class TestProbeImage:
    def test_plain_size(self, tmp_path):
        p = _save(tmp_path / "wide.png", (40, 20))
        assert probe_image(p) == (40, 20)

    def test_exif_rotation_swaps_dimensions(self, tmp_path):
        exif = Image.Exif()
        exif[0x0112] = 6  # rotate 90° CW on display
        p = _save(tmp_path / "phone.jpg", (40, 20), "JPEG", exif=exif)
        assert probe_image(p) == (20, 40)

    def test_not_an_image(self, tmp_path):
        p = tmp_path / "notes.jpg"
        p.write_text("not really a jpeg")
        with pytest.raises(ImageProbeError, match="notes.jpg"):
            probe_image(p)

    def test_missing_file(self, tmp_path):
        with pytest.raises(ImageProbeError, match="not found"):
            probe_image(tmp_path / "gone.png")


class TestItemFromImage:
    def test_builds_item(self, tmp_path):
        p = _save(tmp_path / "tall.png", (30, 60))
        item = item_from_image(p, rating=4)
        assert item.id == "tall.png"
        assert item.rating == 4
        assert item.kind == "image"
        assert orientation(item) == "vertical"
        assert item.meta["path"] == str(p)

    def test_gif_kind(self, tmp_path):
        p = _save(tmp_path / "loop.gif", (50, 20), "GIF")
        assert item_from_image(p).kind == "gif"

    def test_rating_range(self, tmp_path):
        p = _save(tmp_path / "a.png", (10, 10))
        with pytest.raises(ValueError):
            item_from_image(p, rating=7)


class TestItemsFromDirectory:
    def test_sorted_and_filtered(self, tmp_path):
        _save(tmp_path / "b.png", (40, 20))
        _save(tmp_path / "a.jpg", (20, 40), "JPEG")
        (tmp_path / "readme.txt").write_text("skip me")
        items = items_from_directory(tmp_path)
        assert [i.id for i in items] == ["a.jpg", "b.png"]

    def test_rating_map(self, tmp_path):
        _save(tmp_path / "a.png", (40, 20))
        _save(tmp_path / "b.png", (40, 20))
        items = items_from_directory(tmp_path, ratings={"b.png": 5}, default_rating=2)
        assert [i.rating for i in items] == [2, 5]

    def test_not_a_directory(self, tmp_path):
        with pytest.raises(ImageProbeError):
            items_from_directory(tmp_path / "nope")
