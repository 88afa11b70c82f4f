"""BatchCollector: the pending batch of newly created files."""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable

from dirwatch.note import PendingFile

logger = logging.getLogger(__name__)


class BatchCollector:
    """Accumulates :class:`PendingFile` items until a flush takes them.

    ``add`` and ``drain`` are mutually exclusive, so an item added while a
    flush starts lands wholly in that flush or wholly in the next one.
    """

    def __init__(self, on_add: Callable[[], None] | None = None) -> None:
        self.on_add = on_add
        self._lock = threading.Lock()
        self._pending: list[PendingFile] = []

    def __len__(self) -> int:
        with self._lock:
            return len(self._pending)

    def add(self, pending: PendingFile) -> None:
        """Queue *pending* and signal ``on_add``."""
        with self._lock:
            self._pending.append(pending)
            size = len(self._pending)
        logger.debug("queued %s (%d pending)", pending.path, size)
        # Outside the lock: the callback may start a flush that drains us.
        if self.on_add is not None:
            self.on_add()

    def drain(self) -> list[PendingFile]:
        """Hand the whole batch over and start a fresh one."""
        with self._lock:
            batch, self._pending = self._pending, []
        return batch

    def clear(self) -> int:
        """Discard pending items; returns how many were dropped."""
        return len(self.drain())
