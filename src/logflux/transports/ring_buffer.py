"""
Ring buffer transport.

Keeps the most recent ``max_size`` entries in memory for on-demand
retrieval, e.g. for diagnostic endpoints or in-app log viewers. Writes are
O(1); once full, each write overwrites the oldest slot.
"""

import threading
from typing import List, Optional

from logflux.core.config import RingBufferOptions, validate_options
from logflux.core.levels import resolve_level
from logflux.core.models import LogEntry

from .base import Transport


class RingBufferTransport(Transport):
    """Fixed-capacity circular store of log entries."""

    def __init__(self, max_size: Optional[int] = None, level: Optional[str] = None):
        opts = validate_options(
            RingBufferOptions, "ring buffer transport", max_size=max_size, level=level
        )
        self.name = "ring-buffer"
        self.level = opts.level
        self.max_size = opts.max_size
        self._buffer: List[LogEntry] = []
        self._head = 0
        self._count = 0
        self._lock = threading.Lock()

    def deliver(self, entry: LogEntry) -> None:
        with self._lock:
            if self._count < self.max_size:
                if len(self._buffer) > self._count:
                    self._buffer[self._count] = entry
                else:
                    self._buffer.append(entry)
                self._count += 1
            else:
                self._buffer[self._head] = entry
            self._head = (self._head + 1) % self.max_size

    def get_entries(
        self,
        level: Optional[str] = None,
        since: Optional[int] = None,
        limit: Optional[int] = None,
    ) -> List[LogEntry]:
        """Return buffered entries, oldest first.

        Args:
            level: Minimum level name to include
            since: Minimum timestamp (epoch ms, inclusive)
            limit: Keep only the most recent ``limit`` matches

        Returns:
            Filtered list in write order
        """
        with self._lock:
            if self._count < self.max_size:
                entries = self._buffer[: self._count]
            else:
                entries = self._buffer[self._head:] + self._buffer[: self._head]

        if level:
            floor = resolve_level(level)
            entries = [e for e in entries if e.level >= floor]
        if since:
            entries = [e for e in entries if e.timestamp >= since]
        if limit:
            entries = entries[-limit:]

        return entries

    def clear(self) -> None:
        """Drop all entries."""
        with self._lock:
            self._head = 0
            self._count = 0

    @property
    def size(self) -> int:
        return self._count

    def __len__(self) -> int:
        return self._count
