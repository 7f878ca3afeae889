"""
Transport contract.

A transport is any object with a ``name``, an optional ``level`` threshold
name and a ``deliver(entry)`` method that returns None or an awaitable.
``flush()`` and ``close()`` are optional and may also return awaitables.
The Transport base class and create_transport() are conveniences; the
logger only relies on the attributes above.
"""

from abc import ABC, abstractmethod
from typing import Any, Awaitable, Callable, Optional, Union

from logflux.core.models import LogEntry

HookResult = Union[None, Awaitable[Any]]


class Transport(ABC):
    """Base class for sinks."""

    name: str = "transport"
    level: Optional[str] = None

    @abstractmethod
    def deliver(self, entry: LogEntry) -> HookResult:
        """Consume one entry."""

    def flush(self) -> HookResult:
        """Flush buffered entries. No-op by default."""
        return None

    def close(self) -> HookResult:
        """Release resources. No-op by default."""
        return None

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name={self.name!r}, level={self.level!r})"


class FunctionTransport(Transport):
    """Transport built from plain callables."""

    def __init__(
        self,
        name: str,
        deliver: Callable[[LogEntry], HookResult],
        level: Optional[str] = None,
        flush: Optional[Callable[[], HookResult]] = None,
        close: Optional[Callable[[], HookResult]] = None,
    ):
        self.name = name
        self.level = level
        self._deliver = deliver
        self._flush = flush
        self._close = close

    def deliver(self, entry: LogEntry) -> HookResult:
        return self._deliver(entry)

    def flush(self) -> HookResult:
        return self._flush() if self._flush else None

    def close(self) -> HookResult:
        return self._close() if self._close else None


def create_transport(
    name: str,
    deliver: Callable[[LogEntry], HookResult],
    level: Optional[str] = None,
    flush: Optional[Callable[[], HookResult]] = None,
    close: Optional[Callable[[], HookResult]] = None,
) -> Transport:
    """Build a transport from a delivery function.

    Example:
        >>> received = []
        >>> sink = create_transport("memory", received.append, level="WARN")
    """
    return FunctionTransport(name, deliver, level=level, flush=flush, close=close)
