"""DirectoryWatcher plugin: the context object that wires the pipeline.

Created on load, torn down on unload.  Files created directly inside the
watched directory are queued; the flusher folds them into the target note.
"""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

from dirwatch.batch import BatchCollector
from dirwatch.config import ConfigStore, JsonConfigStore, WatchConfig, WatchOptions
from dirwatch.flusher import DebouncedFlusher, FlushResult, TimerFactory
from dirwatch.metadata import MetadataExtractor
from dirwatch.note import Entry, FileEntry, PendingFile, normalise_path
from dirwatch.store import FileStore, LocalFileStore

if TYPE_CHECKING:
    from dirwatch.plugin import PluginDescriptor

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MenuAction:
    """One context-menu item offered for a vault entry."""

    title: str
    icon: str
    run: Callable[[], None]


@dataclass(frozen=True)
class SettingRow:
    """A read-only row of the settings panel."""

    name: str
    description: str
    placeholder: str
    value: str


class DirectoryWatcher:
    """Watches one folder and keeps one note listing the files added to it."""

    def __init__(
        self,
        descriptor: "PluginDescriptor",
        *,
        store: FileStore | None = None,
        config_store: ConfigStore | None = None,
        timer_factory: TimerFactory = threading.Timer,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.descriptor = descriptor
        self.options = WatchOptions.from_mapping(descriptor.meta)
        self.store = store
        self.config_store = config_store
        self._timer_factory = timer_factory
        self._clock = clock
        self.collector: BatchCollector | None = None
        self.flusher: DebouncedFlusher | None = None

    @property
    def loaded(self) -> bool:
        return self.flusher is not None and not self.flusher.closed

    @property
    def config(self) -> WatchConfig:
        if self.config_store is None:
            return WatchConfig()
        return self.config_store.get()

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def on_load(self, vault_dir: Path | None = None) -> None:
        if self.store is None:
            if vault_dir is None:
                raise ValueError("vault_dir is required when no file store was supplied")
            self.store = LocalFileStore(Path(vault_dir))
        if self.config_store is None:
            settings = Path(vault_dir) / self.options.settings_file if vault_dir else Path(self.options.settings_file)
            self.config_store = JsonConfigStore(settings)

        self.collector = BatchCollector()
        self.flusher = DebouncedFlusher(
            self.collector,
            self.store,
            self.config_store,
            MetadataExtractor(self.options.image_extensions),
            wait=self.options.debounce_seconds,
            note_extensions=self.options.note_extensions,
            preserve_frontmatter=self.options.preserve_frontmatter,
            timer_factory=self._timer_factory,
            clock=self._clock,
        )
        self.collector.on_add = self.flusher.trigger

        if self.options.extra:
            logger.warning("ignoring unknown plugin options: %s", ", ".join(sorted(self.options.extra)))

        cfg = self.config
        logger.info(
            "loaded: watching %r, updating %r",
            cfg.directory_to_watch or "(unset)",
            cfg.note_to_update or "(unset)",
        )

    def on_unload(self) -> None:
        if self.flusher is not None:
            self.flusher.close()
        if self.collector is not None:
            dropped = self.collector.clear()
            if dropped:
                logger.warning("unloading with %d unflushed file(s); they are dropped", dropped)
        logger.info("stop watching %r", self.config.directory_to_watch or "(unset)")

    # ------------------------------------------------------------------
    # Notifications
    # ------------------------------------------------------------------

    def on_file_created(self, entry: Entry) -> None:
        """Queue *entry* when it is a file directly inside the watched folder."""
        if not self.loaded or self.collector is None:
            return
        if entry.kind != "file":
            return
        watched = self.config.directory_to_watch
        if not watched or entry.parent != watched:
            return
        logger.debug("new file in watched directory: %s", entry.path)
        self.collector.add(PendingFile(entry))

    def flush_now(self) -> FlushResult | None:
        """Run a flush cycle immediately, bypassing the debounce window."""
        if self.flusher is None:
            return None
        return self.flusher.flush()

    # ------------------------------------------------------------------
    # Settings
    # ------------------------------------------------------------------

    def _save(self, config: WatchConfig) -> None:
        if self.config_store is None:
            raise RuntimeError("Plugin not loaded, call on_load first.")
        self.config_store.set(config)

    def update_directory_path(self, path: str) -> None:
        cfg = self.config
        logger.info("stop watching %r", cfg.directory_to_watch or "(unset)")
        self._save(WatchConfig(directory_to_watch=path, note_to_update=cfg.note_to_update))
        logger.info("start watching %r", normalise_path(path) or "(vault root)")

    def update_note_path(self, path: str) -> None:
        if FileEntry(path).extension not in self.options.note_extensions:
            raise ValueError(f"{path!r} is not a note; expected one of {', '.join(self.options.note_extensions)}")
        cfg = self.config
        self._save(WatchConfig(directory_to_watch=cfg.directory_to_watch, note_to_update=path))
        logger.info("updating note %r", normalise_path(path))

    def context_actions(self, entry: Entry) -> list[MenuAction]:
        """Context-menu items the host should offer for *entry*."""
        if entry.kind == "directory":
            return [MenuAction("Set as watched directory", "star", lambda: self.update_directory_path(entry.path))]
        if entry.kind == "file" and entry.extension in self.options.note_extensions:
            return [MenuAction("Set as file to update", "star", lambda: self.update_note_path(entry.path))]
        return []

    def settings_rows(self) -> list[SettingRow]:
        cfg = self.config
        return [
            SettingRow(
                name="Directory to watch",
                description=(
                    "The changes in the directory will be reflected in note. "
                    "Use context menu in file explorer to change the value."
                ),
                placeholder="Relative path to directory",
                value=cfg.directory_to_watch,
            ),
            SettingRow(
                name="Note to update",
                description=(
                    "The changes will be pasted to this note. "
                    "Use context menu in file explorer to change the value."
                ),
                placeholder="Name of note",
                value=cfg.note_to_update,
            ),
        ]


def create_plugin(descriptor: "PluginDescriptor") -> DirectoryWatcher:
    return DirectoryWatcher(descriptor)

