"""File store protocol and the local-disk implementation."""

from __future__ import annotations

from pathlib import Path
from typing import Protocol, runtime_checkable

from dirwatch.errors import StoreIOFailure
from dirwatch.note import DirectoryEntry, Entry, FileEntry, normalise_path


@runtime_checkable
class FileStore(Protocol):
    """Read/write primitives the pipeline needs from the host.

    All paths are vault-relative POSIX strings.
    """

    def exists(self, path: str) -> bool:
        """Return ``True`` when *path* names a file or folder."""
        ...

    def read(self, path: str) -> str:
        """Return the full text of the file at *path*."""
        ...

    def write(self, path: str, text: str) -> None:
        """Replace the contents of the file at *path* with *text*."""
        ...

    def resolve(self, path: str) -> Entry | None:
        """Return the entry at *path*, or ``None`` when nothing is there."""
        ...

    def absolute(self, path: str) -> Path:
        """Return the on-disk location of *path*."""
        ...


class LocalFileStore:
    """:class:`FileStore` over a vault directory on disk."""

    def __init__(self, vault_dir: Path) -> None:
        self.vault_dir = Path(vault_dir)

    def absolute(self, path: str) -> Path:
        rel = normalise_path(path)
        return self.vault_dir / rel if rel else self.vault_dir

    def exists(self, path: str) -> bool:
        return self.absolute(path).exists()

    def resolve(self, path: str) -> Entry | None:
        target = self.absolute(path)
        if target.is_dir():
            return DirectoryEntry(path)
        if target.is_file():
            return FileEntry(path)
        return None

    def read(self, path: str) -> str:
        try:
            return self.absolute(path).read_text(encoding="utf-8")
        except (OSError, UnicodeError) as exc:
            raise StoreIOFailure(path, "read", str(exc)) from exc

    def write(self, path: str, text: str) -> None:
        try:
            self.absolute(path).write_text(text, encoding="utf-8")
        except (OSError, UnicodeError) as exc:
            raise StoreIOFailure(path, "write", str(exc)) from exc
