"""watchdog feed: turns file-creation events into ``on_file_created`` hooks.

Run against a vault:
    python -m dirwatch VAULT_DIR

Plugin descriptors are read from ``VAULT_DIR/.dirwatch/plugins/*.toml``;
without any, the built-in directory watcher runs with default options.
The whole vault is observed recursively because the watched folder can be
changed while running; the plugin does the filtering.
"""

from __future__ import annotations

import locale
import logging
import sys
import time
from pathlib import Path

from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer

from dirwatch.note import DirectoryEntry, Entry, FileEntry
from dirwatch.plugin import (
    WatcherPlugin,
    create_from_descriptor,
    default_descriptor,
    fire_hook,
    load_all_plugins,
)

logger = logging.getLogger(__name__)

_PLUGINS_DIR = ".dirwatch/plugins"


class VaultEventHandler(FileSystemEventHandler):
    """Forwards creations under *vault_dir* to the plugins."""

    def __init__(self, vault_dir: Path, plugins: list[WatcherPlugin]) -> None:
        super().__init__()
        self.vault_dir = Path(vault_dir).resolve()
        self.plugins = plugins

    def _entry(self, event: FileSystemEvent) -> Entry | None:
        src = event.src_path
        if isinstance(src, bytes):
            src = src.decode(sys.getfilesystemencoding())
        try:
            rel = Path(src).resolve().relative_to(self.vault_dir).as_posix()
        except ValueError:
            return None
        if event.is_directory:
            return DirectoryEntry(rel)
        return FileEntry(rel)

    def on_created(self, event: FileSystemEvent) -> None:
        entry = self._entry(event)
        if entry is None:
            return
        try:
            fire_hook(self.plugins, "on_file_created", entry=entry)
        except Exception:
            logger.exception("on_file_created failed for %s", entry.path)


def start_observer(vault_dir: Path, plugins: list[WatcherPlugin]) -> Observer:  # type: ignore[valid-type]
    """Start watching *vault_dir*; call ``.stop()`` on the result to shut down."""
    handler = VaultEventHandler(vault_dir, plugins)
    observer = Observer()
    observer.schedule(handler, str(vault_dir), recursive=True)
    observer.daemon = True
    observer.start()
    logger.info("Watching %s for new files", vault_dir)
    return observer


def load_plugins(vault_dir: Path) -> list[WatcherPlugin]:
    plugins_dir = vault_dir / _PLUGINS_DIR
    plugins = load_all_plugins(plugins_dir) if plugins_dir.is_dir() else []
    if not plugins:
        plugins = [create_from_descriptor(default_descriptor())]
    return plugins


def use_system_collation() -> None:
    """Sort note lines with the user's collation rather than the C default."""
    try:
        locale.setlocale(locale.LC_COLLATE, "")
    except locale.Error as exc:
        logger.warning("keeping C collation: %s", exc)


def run(vault_dir: Path, poll_interval: float = 1.0) -> None:
    vault_dir = Path(vault_dir)
    if not vault_dir.is_dir():
        raise NotADirectoryError(f"vault directory not found: {vault_dir}")
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(name)s %(message)s")
    use_system_collation()

    plugins = load_plugins(vault_dir)
    fire_hook(plugins, "on_load", vault_dir=vault_dir)
    observer = start_observer(vault_dir, plugins)
    try:
        while observer.is_alive():
            time.sleep(poll_interval)
    except KeyboardInterrupt:
        logger.info("interrupted")
    finally:
        observer.stop()
        observer.join()
        fire_hook(plugins, "on_unload")


def main(argv: list[str] | None = None) -> int:
    args = sys.argv[1:] if argv is None else argv
    vault = Path(args[0]) if args else Path.cwd()
    try:
        run(vault)
    except NotADirectoryError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2
    return 0


if __name__ == "__main__":
    sys.exit(main())
