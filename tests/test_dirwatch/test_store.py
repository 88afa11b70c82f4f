"""Unit tests for dirwatch.store and the vault entry types."""

from pathlib import Path

import pytest

from dirwatch.errors import ErrorCode, StoreIOFailure
from dirwatch.note import DirectoryEntry, FileEntry, ImageMetadata, PendingFile, normalise_path
from dirwatch.store import FileStore, LocalFileStore


class TestEntries:
    def test_file_entry_parts(self):
        entry = FileEntry("attachments/Photo 1.JPG")
        assert entry.kind == "file"
        assert entry.name == "Photo 1.JPG"
        assert entry.extension == "jpg"
        assert entry.parent == "attachments"

    def test_root_level_parent_is_empty(self):
        assert FileEntry("a.jpg").parent == ""
        assert DirectoryEntry("attachments").parent == ""

    def test_directory_entry(self):
        entry = DirectoryEntry("photos/2024/")
        assert entry.kind == "directory"
        assert entry.path == "photos/2024"
        assert entry.name == "2024"
        assert entry.parent == "photos"

    @pytest.mark.parametrize(
        "raw, expected",
        [("", ""), ("/", ""), (".", ""), ("a/b/", "a/b"), ("\\a\\b.md", "a/b.md"), ("./x.md", "x.md")],
    )
    def test_normalise_path(self, raw, expected):
        assert normalise_path(raw) == expected

    def test_pending_file_to_dict(self):
        pending = PendingFile(FileEntry("a/b.jpg"), ImageMetadata(created="2021:06:01 00:00:00"))
        assert pending.to_dict() == {"path": "a/b.jpg", "name": "b.jpg", "created": "2021:06:01 00:00:00"}


class TestLocalFileStore:
    def test_satisfies_protocol(self, tmp_path: Path):
        assert isinstance(LocalFileStore(tmp_path), FileStore)

    def test_resolve(self, vault: Path):
        store = LocalFileStore(vault)
        assert store.resolve("Gallery.md") == FileEntry("Gallery.md")
        assert store.resolve("attachments") == DirectoryEntry("attachments")
        assert store.resolve("nope.md") is None

    def test_read_write(self, vault: Path):
        store = LocalFileStore(vault)
        store.write("Gallery.md", "- [[a.jpg]]")
        assert store.read("Gallery.md") == "- [[a.jpg]]"
        assert store.exists("Gallery.md")
        assert not store.exists("Other.md")

    def test_read_missing_raises_store_failure(self, vault: Path):
        with pytest.raises(StoreIOFailure) as info:
            LocalFileStore(vault).read("missing.md")
        assert info.value.code is ErrorCode.STORE_READ_FAILED

    def test_unencodable_text_raises_store_failure(self, vault: Path):
        with pytest.raises(StoreIOFailure) as info:
            LocalFileStore(vault).write("Gallery.md", "- [[bad\udcff.jpg]]")
        assert info.value.code is ErrorCode.STORE_WRITE_FAILED

    def test_write_into_missing_folder_raises_store_failure(self, vault: Path):
        with pytest.raises(StoreIOFailure) as info:
            LocalFileStore(vault).write("no/such/dir/note.md", "x")
        assert info.value.code is ErrorCode.STORE_WRITE_FAILED

