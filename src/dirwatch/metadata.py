"""EXIF creation-time extraction for newly added images."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from pathlib import Path

from PIL import ExifTags, Image

from dirwatch.errors import MetadataUnavailable
from dirwatch.note import ImageMetadata

logger = logging.getLogger(__name__)

DEFAULT_IMAGE_EXTENSIONS = ("jpg", "jpeg")

# Exif IFD tags, most specific first; base-IFD DateTime is the last resort.
_EXIF_DATE_TAGS = (
    ExifTags.Base.DateTimeOriginal,
    ExifTags.Base.DateTimeDigitized,
)


class MetadataExtractor:
    """Reads the creation timestamp out of images with a known extension."""

    def __init__(self, image_extensions: Iterable[str] = DEFAULT_IMAGE_EXTENSIONS) -> None:
        self.image_extensions = frozenset(ext.lower().lstrip(".") for ext in image_extensions)

    def supports(self, path: Path | str) -> bool:
        return Path(path).suffix.lower().lstrip(".") in self.image_extensions

    def extract(self, path: Path | str) -> ImageMetadata | None:
        """Return the image's metadata, or ``None`` when there is none to read.

        Unsupported extensions are not an error.  Unreadable or corrupt images
        are logged and also yield ``None``.
        """
        path = Path(path)
        if not self.supports(path):
            return None
        try:
            created = _read_created(path)
        except Exception as exc:  # noqa: BLE001
            err = MetadataUnavailable(str(path), str(exc) or type(exc).__name__)
            logger.warning("%s", err.message)
            return None
        if created is None:
            logger.debug("no creation timestamp in %s", path)
            return None
        return ImageMetadata(created=created)


def _read_created(path: Path) -> str | None:
    with Image.open(path) as img:
        exif = img.getexif()
        exif_ifd = exif.get_ifd(ExifTags.IFD.Exif)
        for tag in _EXIF_DATE_TAGS:
            value = _clean(exif_ifd.get(tag))
            if value:
                return value
        return _clean(exif.get(ExifTags.Base.DateTime))


def _clean(value: object) -> str | None:
    if value is None:
        return None
    if isinstance(value, bytes):
        value = value.decode("ascii", errors="ignore")
    text = str(value).strip("\x00 ").strip()
    return text or None
