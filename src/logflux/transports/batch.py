"""
Batching delivery wrapper.

Entries are buffered and flushed when the buffer reaches ``batch_size``
entries or when ``flush_interval_ms`` has elapsed since the first entry of
the batch was buffered, whichever comes first. The buffer is swapped for an
empty one under a lock, so concurrent callers never see a half-drained
batch.

BufferedTransport holds the buffering machinery; BatchTransport hands each
flushed entry to an inner transport, and WebhookTransport ships each
flushed batch as one HTTP request.
"""

import functools
import inspect
import logging
import threading
from abc import abstractmethod
from typing import Any, Callable, List, Optional

from logflux.constants import INTERNAL_LOGGER_NAME
from logflux.core.config import BatchOptions, validate_options
from logflux.core.dispatch import maybe_await, run_detached
from logflux.core.models import LogEntry

from .base import Transport

internal_logger = logging.getLogger(INTERNAL_LOGGER_NAME)

TimerFactory = Callable[[float, Callable[[], None]], Any]


def daemon_timer(interval: float, function: Callable[[], None]) -> threading.Timer:
    """Default timer factory: a one-shot daemon threading.Timer."""
    timer = threading.Timer(interval, function)
    timer.daemon = True
    return timer


class BufferedTransport(Transport):
    """Size- and time-triggered buffering.

    Subclasses implement ``_deliver_batch`` (fire-and-forget, called from
    the logging thread or the timer thread) and ``_drain`` (awaited by an
    explicit flush).
    """

    def __init__(
        self,
        batch_size: int,
        flush_interval_ms: int,
        timer_factory: Optional[TimerFactory] = None,
    ):
        self.batch_size = batch_size
        self.flush_interval_ms = flush_interval_ms
        self._timer_factory = timer_factory or daemon_timer
        self._buffer: List[LogEntry] = []
        self._timer = None
        # Bumped whenever the pending timer is cancelled or consumed
        self._generation = 0
        self._lock = threading.Lock()

    @property
    def pending(self) -> int:
        """Number of buffered, not yet flushed entries."""
        return len(self._buffer)

    def deliver(self, entry: LogEntry) -> None:
        batch = None
        with self._lock:
            self._buffer.append(entry)
            if len(self._buffer) >= self.batch_size:
                batch = self._take_batch()
            elif self._timer is None:
                self._schedule()
        if batch:
            self._deliver_batch(batch)

    async def flush(self) -> None:
        """Cancel the pending timer and deliver everything buffered now."""
        with self._lock:
            batch = self._take_batch()
        await self._drain(batch)

    async def close(self) -> None:
        await self.flush()

    def _schedule(self) -> None:
        callback = functools.partial(self._on_timer, self._generation)
        self._timer = self._timer_factory(self.flush_interval_ms / 1000, callback)
        self._timer.start()

    def _take_batch(self) -> List[LogEntry]:
        # Caller holds the lock
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
        self._generation += 1
        batch, self._buffer = self._buffer, []
        return batch

    def _on_timer(self, generation: int) -> None:
        with self._lock:
            if generation != self._generation:
                return
            self._timer = None
            batch = self._take_batch()
        if batch:
            self._deliver_batch(batch)

    @abstractmethod
    def _deliver_batch(self, batch: List[LogEntry]) -> None:
        """Hand a flushed batch on without waiting for it."""

    @abstractmethod
    async def _drain(self, batch: List[LogEntry]) -> None:
        """Deliver a flushed batch and wait until it is done."""


class BatchTransport(BufferedTransport):
    """Batching wrapper around any transport.

    Example:
        >>> batched = BatchTransport(ConsoleTransport(), batch_size=50,
        ...                          flush_interval_ms=2000)
    """

    def __init__(
        self,
        inner: Any,
        batch_size: Optional[int] = None,
        flush_interval_ms: Optional[int] = None,
        timer_factory: Optional[TimerFactory] = None,
    ):
        opts = validate_options(
            BatchOptions,
            "batch transport",
            batch_size=batch_size,
            flush_interval_ms=flush_interval_ms,
        )
        super().__init__(opts.batch_size, opts.flush_interval_ms, timer_factory)
        self.inner = inner
        self.name = f"batch({inner.name})"
        self.level = getattr(inner, "level", None)

    async def flush(self) -> None:
        """Deliver everything buffered now, then flush the inner transport."""
        await super().flush()
        inner_flush = getattr(self.inner, "flush", None)
        if callable(inner_flush):
            await maybe_await(inner_flush())

    async def close(self) -> None:
        """Flush, then close the inner transport."""
        await self.flush()
        inner_close = getattr(self.inner, "close", None)
        if callable(inner_close):
            await maybe_await(inner_close())

    def _deliver_batch(self, batch: List[LogEntry]) -> None:
        if inspect.iscoroutinefunction(self.inner.deliver):
            run_detached(self._drain(batch))
            return
        for entry in batch:
            try:
                result = self.inner.deliver(entry)
            except Exception as e:
                self._report(e)
                continue
            if inspect.isawaitable(result):
                run_detached(result)

    async def _drain(self, batch: List[LogEntry]) -> None:
        for entry in batch:
            try:
                await maybe_await(self.inner.deliver(entry))
            except Exception as e:
                self._report(e)

    def _report(self, exc: Exception) -> None:
        internal_logger.debug(
            "Batched delivery to %s failed: %s: %s",
            self.inner.name, type(exc).__name__, exc,
        )
