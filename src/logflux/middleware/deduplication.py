"""
Deduplication middleware.

Holds the first entry of each key for ``window_ms``. Identical entries that
arrive while it is held are counted and dropped. When the window closes the
held entry is forwarded once, with ``meta["duplicateCount"]`` set when
duplicates were seen.
"""

import functools
import threading
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

from logflux.constants import DEFAULT_DEDUP_WINDOW_MS, DUPLICATE_COUNT_META_KEY
from logflux.core.models import LogEntry
from logflux.core.pipeline import Next
from logflux.transports.batch import TimerFactory, daemon_timer


def default_key(entry: LogEntry) -> str:
    error_message = entry.error.message if entry.error else ""
    return f"{entry.level}:{entry.message}:{error_message}"


@dataclass
class _Pending:
    entry: LogEntry
    next_: Next
    count: int
    timer: Any


class DeduplicationMiddleware:
    """Collapse identical entries within a time window."""

    def __init__(
        self,
        window_ms: int = DEFAULT_DEDUP_WINDOW_MS,
        key_fn: Optional[Callable[[LogEntry], str]] = None,
        timer_factory: Optional[TimerFactory] = None,
    ):
        self.window_ms = window_ms
        self.key_fn = key_fn or default_key
        self._timer_factory = timer_factory or daemon_timer
        self._pending: Dict[str, _Pending] = {}
        self._lock = threading.Lock()

    def __call__(self, entry: LogEntry, next_: Next) -> None:
        key = self.key_fn(entry)
        with self._lock:
            pending = self._pending.get(key)
            if pending is not None:
                pending.count += 1
                return
            pending = _Pending(entry=entry, next_=next_, count=1, timer=None)
            pending.timer = self._timer_factory(
                self.window_ms / 1000, functools.partial(self._release, key, pending)
            )
            self._pending[key] = pending
        pending.timer.start()

    def _release(self, key: str, pending: _Pending) -> None:
        with self._lock:
            # A flush may already have emitted this entry
            if self._pending.get(key) is not pending:
                return
            del self._pending[key]
        self._emit(pending)

    def _emit(self, pending: _Pending) -> None:
        if pending.count > 1:
            pending.entry.meta = {
                **pending.entry.meta,
                DUPLICATE_COUNT_META_KEY: pending.count,
            }
        pending.next_(pending.entry)

    def flush(self) -> None:
        """Forward every held entry now instead of waiting for its window."""
        with self._lock:
            held = list(self._pending.values())
            self._pending.clear()
        for pending in held:
            pending.timer.cancel()
            self._emit(pending)
