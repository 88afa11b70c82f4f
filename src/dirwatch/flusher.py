"""DebouncedFlusher: coalesces bursts of new files into one note rewrite.

Two states:

``IDLE``
    No timer armed.  The next :meth:`DebouncedFlusher.trigger` arms one.
``PENDING``
    A timer is armed.  Further triggers are absorbed; the timer is not reset,
    so latency stays bounded by the window.

The delay of a freshly armed timer is zero when nothing fired during the
last ``wait`` seconds (leading edge) and the rest of that window otherwise
(trailing edge).  When the timer fires the state returns to ``IDLE`` and one
read-merge-write cycle runs against the target note.  Cycles never overlap.
"""

from __future__ import annotations

import enum
import logging
import threading
import time
from collections.abc import Callable, Collection
from dataclasses import dataclass, field
from typing import Any, Protocol

from dirwatch.batch import BatchCollector
from dirwatch.config import DEFAULT_DEBOUNCE_SECONDS, DEFAULT_NOTE_EXTENSIONS, ConfigStore
from dirwatch.errors import DirwatchError, StoreIOFailure, TargetNoteMissing
from dirwatch.formatter import format_entry
from dirwatch.merger import merge_content
from dirwatch.metadata import MetadataExtractor
from dirwatch.note import PendingFile
from dirwatch.store import FileStore

logger = logging.getLogger(__name__)


class Timer(Protocol):
    daemon: bool

    def start(self) -> None: ...

    def cancel(self) -> None: ...


TimerFactory = Callable[[float, Callable[[], None]], Timer]


class FlushState(enum.Enum):
    IDLE = "idle"
    PENDING = "pending"


@dataclass
class FlushResult:
    """Outcome of one flush cycle."""

    files: list[PendingFile] = field(default_factory=list)
    lines: list[str] = field(default_factory=list)
    written: bool = False
    error: DirwatchError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def to_dict(self) -> dict[str, Any]:
        return {
            "files": [p.to_dict() for p in self.files],
            "lines": self.lines,
            "written": self.written,
            "error": self.error.to_dict() if self.error else None,
        }


class DebouncedFlusher:
    """Single-flight, time-windowed writer for the target note."""

    def __init__(
        self,
        collector: BatchCollector,
        store: FileStore,
        config: ConfigStore,
        extractor: MetadataExtractor | None = None,
        *,
        wait: float = DEFAULT_DEBOUNCE_SECONDS,
        note_extensions: Collection[str] = DEFAULT_NOTE_EXTENSIONS,
        preserve_frontmatter: bool = False,
        timer_factory: TimerFactory = threading.Timer,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.collector = collector
        self.store = store
        self.config = config
        self.extractor = extractor or MetadataExtractor()
        self.wait = wait
        self.note_extensions = frozenset(note_extensions)
        self.preserve_frontmatter = preserve_frontmatter
        self._timer_factory = timer_factory
        self._clock = clock

        self._lock = threading.Lock()        # guards state / timer / last fire
        self._flush_lock = threading.Lock()  # one cycle at a time
        self._state = FlushState.IDLE
        self._timer: Timer | None = None
        self._last_fire: float | None = None
        self._closed = False
        self.last_result: FlushResult | None = None

    @property
    def state(self) -> FlushState:
        return self._state

    @property
    def closed(self) -> bool:
        return self._closed

    # ------------------------------------------------------------------
    # Debounce state machine
    # ------------------------------------------------------------------

    def trigger(self) -> None:
        """Request a flush; collapses into the already-armed timer if any."""
        with self._lock:
            if self._closed or self._state is FlushState.PENDING:
                return
            self._state = FlushState.PENDING
            delay = self._next_delay()
            timer = self._timer_factory(delay, self._fire)
            timer.daemon = True
            self._timer = timer
        logger.debug("flush scheduled in %.3fs", delay)
        timer.start()

    def _next_delay(self) -> float:
        if self._last_fire is None:
            return 0.0
        elapsed = self._clock() - self._last_fire
        return max(0.0, self.wait - elapsed)

    def _fire(self) -> None:
        with self._lock:
            if self._closed:
                return
            self._timer = None
            self._state = FlushState.IDLE
            self._last_fire = self._clock()
        try:
            self.flush()
        except Exception:
            logger.exception("unexpected error during flush")

    def close(self) -> None:
        """Cancel any armed timer without flushing; further triggers are ignored."""
        with self._lock:
            self._closed = True
            timer, self._timer = self._timer, None
            self._state = FlushState.IDLE
        if timer is not None:
            timer.cancel()
            logger.debug("pending flush cancelled")

    # ------------------------------------------------------------------
    # Read-merge-write cycle
    # ------------------------------------------------------------------

    def flush(self) -> FlushResult:
        """Drain the batch and fold it into the target note.

        Target and store errors end this cycle only: they are logged, the
        drained batch is dropped and the error is returned in the result.
        """
        with self._flush_lock:
            batch = self.collector.drain()
            result = FlushResult(files=batch)
            if batch:
                try:
                    result.lines = [self._render(pending) for pending in batch]
                    result.written = self._commit(result.lines)
                except DirwatchError as exc:
                    logger.error("flush failed, dropping %d file(s): %s", len(batch), exc.message)
                    result.error = exc
            self.last_result = result
            return result

    def _render(self, pending: PendingFile) -> str:
        if pending.metadata is None:
            pending.metadata = self.extractor.extract(self.store.absolute(pending.path))
        return format_entry(pending.entry, pending.metadata)

    def _commit(self, lines: list[str]) -> bool:
        note_path = self.config.get().note_to_update
        entry = self.store.resolve(note_path) if note_path else None
        if entry is None or entry.kind != "file" or entry.extension not in self.note_extensions:
            raise TargetNoteMissing(note_path)

        try:
            previous = self.store.read(note_path)
        except OSError as exc:
            raise StoreIOFailure(note_path, "read", str(exc)) from exc

        merged = merge_content(previous, lines, preserve_frontmatter=self.preserve_frontmatter)
        if merged == previous:
            logger.info("%s already up to date", note_path)
            return False

        try:
            self.store.write(note_path, merged)
        except OSError as exc:
            raise StoreIOFailure(note_path, "write", str(exc)) from exc
        logger.info("added %d entr%s to %s", len(lines), "y" if len(lines) == 1 else "ies", note_path)
        return True
