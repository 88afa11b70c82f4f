"""Unit tests for dirwatch.metadata (EXIF extraction)."""

import logging
from pathlib import Path

from dirwatch.metadata import MetadataExtractor
from dirwatch.note import ImageMetadata

from helpers import make_jpeg


class TestSupports:
    def test_default_allow_list(self):
        ex = MetadataExtractor()
        assert ex.supports("a/photo.jpg")
        assert ex.supports("a/photo.JPEG")
        assert not ex.supports("a/photo.png")
        assert not ex.supports("a/notes")

    def test_custom_extensions_are_normalised(self):
        ex = MetadataExtractor([".TIFF", "png"])
        assert ex.supports("x.tiff")
        assert ex.supports("x.PNG")
        assert not ex.supports("x.jpg")


class TestExtract:
    def test_reads_exif_datetime(self, tmp_path: Path):
        path = make_jpeg(tmp_path / "photo.jpg", taken="2021:06:01 12:30:00")
        assert MetadataExtractor().extract(path) == ImageMetadata(created="2021:06:01 12:30:00")

    def test_upper_case_extension(self, tmp_path: Path):
        path = make_jpeg(tmp_path / "PHOTO.JPG", taken="2020:01:02 03:04:05")
        meta = MetadataExtractor().extract(path)
        assert meta is not None
        assert meta.created == "2020:01:02 03:04:05"

    def test_image_without_exif(self, tmp_path: Path):
        path = make_jpeg(tmp_path / "plain.jpg")
        assert MetadataExtractor().extract(path) is None

    def test_unsupported_extension_is_not_opened(self, tmp_path: Path):
        path = tmp_path / "notes.txt"
        path.write_text("not an image", encoding="utf-8")
        assert MetadataExtractor().extract(path) is None

    def test_corrupt_image_is_logged_and_tolerated(self, tmp_path: Path, caplog):
        path = tmp_path / "broken.jpg"
        path.write_bytes(b"\xff\xd8 definitely not a jpeg")
        with caplog.at_level(logging.WARNING, logger="dirwatch.metadata"):
            assert MetadataExtractor().extract(path) is None
        assert "broken.jpg" in caplog.text

    def test_missing_file_is_tolerated(self, tmp_path: Path):
        assert MetadataExtractor().extract(tmp_path / "gone.jpg") is None
