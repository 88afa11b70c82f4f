"""Plugin descriptor loader for the directory watcher.

Each plugin is described by a TOML file::

    [plugin]
    id      = "directory-watcher"
    name    = "Directory Watcher"
    version = "0.1.0"
    entry   = "dirwatch.watcher_plugin"   # module exposing create_plugin()
    hooks   = ["on_load", "on_unload", "on_file_created"]

    debounce_seconds = 1.0                # any other key is a runtime option

Plugins are loaded by :func:`load_all_plugins` which scans a directory for
``*.toml`` files.  The runner falls back to :func:`default_descriptor` when
none are found.
"""

from __future__ import annotations

import importlib
import logging
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from dirwatch.note import Entry

logger = logging.getLogger(__name__)

HOOKS = ("on_load", "on_unload", "on_file_created")


# ---------------------------------------------------------------------------
# Descriptor
# ---------------------------------------------------------------------------


@dataclass
class PluginDescriptor:
    id: str
    name: str
    version: str
    entry: str  # dotted Python module path
    hooks: list[str] = field(default_factory=list)
    meta: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "PluginDescriptor":
        plugin = data.get("plugin", data)
        return cls(
            id=plugin["id"],
            name=plugin["name"],
            version=plugin.get("version", "0.1.0"),
            entry=plugin["entry"],
            hooks=plugin.get("hooks", []),
            meta={k: v for k, v in plugin.items() if k not in {"id", "name", "version", "entry", "hooks"}},
        )


def default_descriptor(**options: Any) -> PluginDescriptor:
    """Descriptor of the built-in directory watcher plugin."""
    return PluginDescriptor(
        id="directory-watcher",
        name="Directory Watcher",
        version="0.1.0",
        entry="dirwatch.watcher_plugin",
        hooks=list(HOOKS),
        meta=dict(options),
    )


# ---------------------------------------------------------------------------
# Protocol
# ---------------------------------------------------------------------------


@runtime_checkable
class WatcherPlugin(Protocol):
    descriptor: PluginDescriptor

    def on_load(self, vault_dir: Path | None = None) -> None: ...
    def on_unload(self) -> None: ...
    def on_file_created(self, entry: "Entry") -> None: ...


# ---------------------------------------------------------------------------
# Loader
# ---------------------------------------------------------------------------


def create_from_descriptor(desc: PluginDescriptor) -> WatcherPlugin:
    """Import ``desc.entry`` and call its ``create_plugin(descriptor)`` factory."""
    module = importlib.import_module(desc.entry)

    if not hasattr(module, "create_plugin"):
        raise AttributeError(f"Plugin module '{desc.entry}' must expose a 'create_plugin(descriptor)' factory.")

    plugin: WatcherPlugin = module.create_plugin(desc)
    return plugin


def load_plugin(descriptor_path: Path) -> WatcherPlugin:
    """Load a single plugin from a ``.toml`` descriptor file."""
    with open(descriptor_path, "rb") as fh:
        data = tomllib.load(fh)
    return create_from_descriptor(PluginDescriptor.from_dict(data))


def load_all_plugins(plugins_dir: Path) -> list[WatcherPlugin]:
    """Load every ``*.toml`` plugin descriptor found in *plugins_dir*."""
    plugins_dir = Path(plugins_dir)
    plugins: list[WatcherPlugin] = []
    for toml_path in sorted(plugins_dir.glob("*.toml")):
        try:
            plugins.append(load_plugin(toml_path))
        except Exception as exc:  # noqa: BLE001
            # Log but don't hard-crash so remaining plugins still load
            logger.warning("Failed to load plugin %s: %s", toml_path.name, exc)
    return plugins


def fire_hook(plugins: list[WatcherPlugin], hook: str, **kwargs: Any) -> None:
    """Call *hook* on every plugin that declares it."""
    for plugin in plugins:
        if hook in plugin.descriptor.hooks and hasattr(plugin, hook):
            getattr(plugin, hook)(**kwargs)
