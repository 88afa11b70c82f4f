"""Render a file as its line in the target note."""

from __future__ import annotations

from datetime import datetime

from dirwatch.note import FileEntry, ImageMetadata

# EXIF stores "YYYY:MM:DD HH:MM:SS"
EXIF_DATETIME_FORMAT = "%Y:%m:%d %H:%M:%S"


def created_date(metadata: ImageMetadata | None) -> str | None:
    """ISO date (``YYYY-MM-DD``) for *metadata*, or ``None`` if it can't be parsed."""
    if metadata is None or not metadata.created:
        return None
    try:
        return datetime.strptime(metadata.created, EXIF_DATETIME_FORMAT).date().isoformat()
    except ValueError:
        return None


def display_name(entry: FileEntry) -> str:
    """File name safe to write as UTF-8.

    Names that were not valid UTF-8 on disk arrive with surrogate escapes;
    each undecodable byte becomes U+FFFD.
    """
    try:
        raw = entry.name.encode("utf-8", "surrogateescape")
    except UnicodeEncodeError:
        # lone surrogates that are not byte escapes
        raw = entry.name.encode("utf-8", "replace")
    return raw.decode("utf-8", "replace")


def format_entry(entry: FileEntry, metadata: ImageMetadata | None = None) -> str:
    """``- [[photo.jpg]]``, or ``- [[photo.jpg]] (2021-06-01)`` when the date is known."""
    line = f"- [[{display_name(entry)}]]"
    date = created_date(metadata)
    if date:
        line += f" ({date})"
    return line
