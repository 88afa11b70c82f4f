"""Test doubles shared by the dirwatch tests."""

from __future__ import annotations

from pathlib import Path

from PIL import ExifTags, Image

from dirwatch.store import LocalFileStore


class FakeTimer:
    """Stands in for ``threading.Timer``; fires only when told to."""

    def __init__(self, interval, function):
        self.interval = interval
        self.function = function
        self.daemon = False
        self.started = False
        self.cancelled = False

    def start(self):
        self.started = True

    def cancel(self):
        self.cancelled = True

    def fire(self):
        if not self.cancelled:
            self.function()


class FakeTimers:
    """Timer factory that remembers every timer it hands out."""

    def __init__(self):
        self.created: list[FakeTimer] = []

    def __call__(self, interval, function):
        timer = FakeTimer(interval, function)
        self.created.append(timer)
        return timer

    @property
    def last(self) -> FakeTimer:
        return self.created[-1]


class FakeClock:
    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class RecordingStore(LocalFileStore):
    """Local store that remembers every write."""

    def __init__(self, vault_dir: Path) -> None:
        super().__init__(vault_dir)
        self.writes: list[tuple[str, str]] = []

    def write(self, path: str, text: str) -> None:
        self.writes.append((path, text))
        super().write(path, text)


def make_jpeg(path: Path, taken: str | None = None) -> Path:
    """Write a tiny JPEG, with an EXIF ``DateTime`` when *taken* is given."""
    img = Image.new("RGB", (8, 8), "white")
    if taken is None:
        img.save(path, "JPEG")
    else:
        exif = Image.Exif()
        exif[ExifTags.Base.DateTime] = taken
        img.save(path, "JPEG", exif=exif)
    return path

