"""Unit tests for dirwatch.config."""

import json
from pathlib import Path

import pytest

from dirwatch.config import JsonConfigStore, WatchConfig, WatchOptions


class TestWatchConfig:
    def test_paths_are_normalised(self):
        cfg = WatchConfig(directory_to_watch="/attachments/", note_to_update="./Gallery.md")
        assert cfg.directory_to_watch == "attachments"
        assert cfg.note_to_update == "Gallery.md"

    def test_round_trip_keys(self):
        cfg = WatchConfig.from_dict({"directoryToWatch": "a", "noteToUpdate": "b.md"})
        assert cfg.to_dict() == {"directoryToWatch": "a", "noteToUpdate": "b.md"}

    def test_missing_and_null_keys_default_to_empty(self):
        cfg = WatchConfig.from_dict({"noteToUpdate": None, "other": 1})
        assert cfg == WatchConfig()


class TestJsonConfigStore:
    def test_default_when_missing(self, tmp_path: Path):
        assert JsonConfigStore(tmp_path / "data.json").get() == WatchConfig()

    def test_set_writes_host_shape(self, tmp_path: Path):
        path = tmp_path / "nested" / "data.json"
        JsonConfigStore(path).set(WatchConfig("photos", "Gallery.md"))
        assert json.loads(path.read_text(encoding="utf-8")) == {
            "directoryToWatch": "photos",
            "noteToUpdate": "Gallery.md",
        }

    def test_survives_restart(self, tmp_path: Path):
        path = tmp_path / "data.json"
        JsonConfigStore(path).set(WatchConfig("photos", "Gallery.md"))
        assert JsonConfigStore(path).get() == WatchConfig("photos", "Gallery.md")

    @pytest.mark.parametrize("content", ["{not json", "[1, 2]", ""])
    def test_unreadable_file_falls_back_to_defaults(self, tmp_path: Path, content):
        path = tmp_path / "data.json"
        path.write_text(content, encoding="utf-8")
        assert JsonConfigStore(path).get() == WatchConfig()


class TestWatchOptions:
    def test_defaults(self):
        opts = WatchOptions.from_mapping({})
        assert opts.debounce_seconds == 1.0
        assert opts.image_extensions == ("jpg", "jpeg")
        assert opts.note_extensions == ("md",)
        assert opts.preserve_frontmatter is False
        assert opts.settings_file == ".dirwatch/data.json"

    def test_extensions_normalised(self):
        opts = WatchOptions.from_mapping({"image_extensions": [".JPG", "jpg", "Heic"], "note_extensions": "TXT"})
        assert opts.image_extensions == ("jpg", "heic")
        assert opts.note_extensions == ("txt",)

    def test_unknown_keys_kept_as_extra(self):
        assert WatchOptions.from_mapping({"colour": "blue"}).extra == {"colour": "blue"}

    def test_negative_debounce_rejected(self):
        with pytest.raises(ValueError, match="debounce_seconds"):
            WatchOptions.from_mapping({"debounce_seconds": -1})
