"""Watch configuration (persisted) and runtime options (plugin descriptor).

The persisted settings file keeps the host's JSON shape::

    {"directoryToWatch": "attachments", "noteToUpdate": "Gallery.md"}

Runtime options are extra keys of the ``[plugin]`` table in the descriptor::

    [plugin]
    id    = "directory-watcher"
    ...
    debounce_seconds     = 1.0
    image_extensions     = ["jpg", "jpeg"]
    note_extensions      = ["md"]
    preserve_frontmatter = false
    settings_file        = ".dirwatch/data.json"
"""

from __future__ import annotations

import json
import logging
import threading
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Protocol, runtime_checkable

from dirwatch.metadata import DEFAULT_IMAGE_EXTENSIONS
from dirwatch.note import normalise_path

logger = logging.getLogger(__name__)

DEFAULT_DEBOUNCE_SECONDS = 1.0
DEFAULT_NOTE_EXTENSIONS = ("md",)
DEFAULT_SETTINGS_FILE = ".dirwatch/data.json"


@dataclass(frozen=True)
class WatchConfig:
    """Which folder to watch and which note to update (vault-relative)."""

    directory_to_watch: str = ""
    note_to_update: str = ""

    def __post_init__(self) -> None:
        object.__setattr__(self, "directory_to_watch", normalise_path(self.directory_to_watch))
        object.__setattr__(self, "note_to_update", normalise_path(self.note_to_update))

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "WatchConfig":
        return cls(
            directory_to_watch=str(data.get("directoryToWatch") or ""),
            note_to_update=str(data.get("noteToUpdate") or ""),
        )

    def to_dict(self) -> dict[str, str]:
        return {
            "directoryToWatch": self.directory_to_watch,
            "noteToUpdate": self.note_to_update,
        }


@runtime_checkable
class ConfigStore(Protocol):
    """Where the host keeps :class:`WatchConfig` between restarts."""

    def get(self) -> WatchConfig: ...

    def set(self, config: WatchConfig) -> None: ...


class JsonConfigStore:
    """:class:`ConfigStore` backed by a JSON file."""

    def __init__(self, path: Path) -> None:
        self.path = Path(path)
        self._lock = threading.Lock()
        self._cached: WatchConfig | None = None

    def get(self) -> WatchConfig:
        with self._lock:
            if self._cached is None:
                self._cached = self._load()
            return self._cached

    def set(self, config: WatchConfig) -> None:
        with self._lock:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(json.dumps(config.to_dict(), indent=2) + "\n", encoding="utf-8")
            self._cached = config

    def _load(self) -> WatchConfig:
        if not self.path.exists():
            return WatchConfig()
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            logger.warning("ignoring unreadable settings file %s: %s", self.path, exc)
            return WatchConfig()
        if not isinstance(data, dict):
            logger.warning("ignoring settings file %s: expected an object", self.path)
            return WatchConfig()
        return WatchConfig.from_dict(data)


def _extensions(values: Iterable[str] | str) -> tuple[str, ...]:
    if isinstance(values, str):
        values = [values]
    return tuple(dict.fromkeys(str(v).lower().lstrip(".") for v in values if str(v).strip()))


@dataclass(frozen=True)
class WatchOptions:
    """Runtime options for the pipeline."""

    debounce_seconds: float = DEFAULT_DEBOUNCE_SECONDS
    image_extensions: tuple[str, ...] = DEFAULT_IMAGE_EXTENSIONS
    note_extensions: tuple[str, ...] = DEFAULT_NOTE_EXTENSIONS
    preserve_frontmatter: bool = False
    settings_file: str = DEFAULT_SETTINGS_FILE
    extra: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "WatchOptions":
        known = {
            "debounce_seconds",
            "image_extensions",
            "note_extensions",
            "preserve_frontmatter",
            "settings_file",
        }
        debounce = float(data.get("debounce_seconds", DEFAULT_DEBOUNCE_SECONDS))
        if debounce < 0:
            raise ValueError(f"debounce_seconds must not be negative, got {debounce}")
        return cls(
            debounce_seconds=debounce,
            image_extensions=_extensions(data.get("image_extensions", DEFAULT_IMAGE_EXTENSIONS)),
            note_extensions=_extensions(data.get("note_extensions", DEFAULT_NOTE_EXTENSIONS)),
            preserve_frontmatter=bool(data.get("preserve_frontmatter", False)),
            settings_file=str(data.get("settings_file", DEFAULT_SETTINGS_FILE)),
            extra={k: v for k, v in data.items() if k not in known},
        )
