"""
Sampling middleware.

Rate-limits entries per key within fixed windows and optionally keeps only
a random fraction of them. Entries at or above ``priority_level`` always
pass.
"""

import random
from dataclasses import dataclass
from typing import Callable, Dict, Optional

from logflux.constants import (
    DEFAULT_SAMPLING_MAX_PER_WINDOW,
    DEFAULT_SAMPLING_WINDOW_MS,
    SAMPLING_BUCKET_CLEANUP_THRESHOLD,
)
from logflux.core.levels import LogLevel
from logflux.core.models import LogEntry
from logflux.core.pipeline import Next


@dataclass
class _Bucket:
    count: int
    window_start: int


class SamplingMiddleware:
    """Drop entries that exceed a per-key budget.

    Windows are measured on entry timestamps, so the logger's clock drives
    them.
    """

    def __init__(
        self,
        key_fn: Optional[Callable[[LogEntry], str]] = None,
        max_per_window: int = DEFAULT_SAMPLING_MAX_PER_WINDOW,
        window_ms: int = DEFAULT_SAMPLING_WINDOW_MS,
        sample_rate: float = 1.0,
        priority_level: int = LogLevel.WARN,
        rng: Callable[[], float] = random.random,
    ):
        self.key_fn = key_fn or (lambda entry: entry.message)
        self.max_per_window = max_per_window
        self.window_ms = window_ms
        self.sample_rate = sample_rate
        self.priority_level = priority_level
        self._rng = rng
        self._buckets: Dict[str, _Bucket] = {}

    def __call__(self, entry: LogEntry, next_: Next) -> None:
        if entry.level >= self.priority_level:
            next_(entry)
            return

        if self.sample_rate < 1 and self._rng() > self.sample_rate:
            return

        key = self.key_fn(entry)
        now = entry.timestamp
        bucket = self._buckets.get(key)
        if bucket is None or now - bucket.window_start >= self.window_ms:
            bucket = _Bucket(count=0, window_start=now)
            self._buckets[key] = bucket

        if bucket.count < self.max_per_window:
            bucket.count += 1
            next_(entry)

        if len(self._buckets) > SAMPLING_BUCKET_CLEANUP_THRESHOLD:
            self._evict(now)

    def _evict(self, now: int) -> None:
        expire_before = now - self.window_ms * 2
        for key in [k for k, b in self._buckets.items() if b.window_start < expire_before]:
            del self._buckets[key]
