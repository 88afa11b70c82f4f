"""Directory watcher: keeps a note listing the images added to a vault folder."""

from dirwatch.batch import BatchCollector
from dirwatch.config import JsonConfigStore, WatchConfig, WatchOptions
from dirwatch.flusher import DebouncedFlusher, FlushResult
from dirwatch.formatter import format_entry
from dirwatch.merger import merge_content
from dirwatch.metadata import MetadataExtractor
from dirwatch.note import DirectoryEntry, FileEntry, ImageMetadata, PendingFile
from dirwatch.store import LocalFileStore
from dirwatch.watcher_plugin import DirectoryWatcher

__all__ = [
    "BatchCollector",
    "DebouncedFlusher",
    "DirectoryEntry",
    "DirectoryWatcher",
    "FileEntry",
    "FlushResult",
    "ImageMetadata",
    "JsonConfigStore",
    "LocalFileStore",
    "MetadataExtractor",
    "PendingFile",
    "WatchConfig",
    "WatchOptions",
    "format_entry",
    "merge_content",
]
