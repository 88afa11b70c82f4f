"""Vault entries and the records that flow through the update pipeline."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import PurePosixPath
from typing import Any, ClassVar, Union


def normalise_path(path: str) -> str:
    """Vault-relative POSIX form: no leading/trailing slashes, ``""`` for root."""
    cleaned = str(path).replace("\\", "/").strip("/")
    if cleaned in ("", "."):
        return ""
    return str(PurePosixPath(cleaned))


@dataclass(frozen=True)
class FileEntry:
    """A file in the vault, addressed by its vault-relative path."""

    path: str
    kind: ClassVar[str] = "file"

    def __post_init__(self) -> None:
        object.__setattr__(self, "path", normalise_path(self.path))

    @property
    def name(self) -> str:
        """Display name: file name including its extension."""
        return PurePosixPath(self.path).name

    @property
    def extension(self) -> str:
        return PurePosixPath(self.path).suffix.lstrip(".").lower()

    @property
    def parent(self) -> str:
        return normalise_path(str(PurePosixPath(self.path).parent))


@dataclass(frozen=True)
class DirectoryEntry:
    """A folder in the vault."""

    path: str
    kind: ClassVar[str] = "directory"

    def __post_init__(self) -> None:
        object.__setattr__(self, "path", normalise_path(self.path))

    @property
    def name(self) -> str:
        return PurePosixPath(self.path).name

    @property
    def parent(self) -> str:
        return normalise_path(str(PurePosixPath(self.path).parent))


Entry = Union[FileEntry, DirectoryEntry]


@dataclass(frozen=True)
class ImageMetadata:
    """Metadata embedded in an image file."""

    #: Raw creation timestamp as stored in the image, e.g. ``2021:06:01 12:30:00``
    created: str | None = None


@dataclass
class PendingFile:
    """A newly created file waiting for the next flush cycle."""

    entry: FileEntry
    metadata: ImageMetadata | None = None

    @property
    def path(self) -> str:
        return self.entry.path

    def to_dict(self) -> dict[str, Any]:
        return {
            "path": self.entry.path,
            "name": self.entry.name,
            "created": self.metadata.created if self.metadata else None,
        }
