"""
Pytest configuration and shared fixtures for logflux tests.
"""

from typing import Callable, List, Optional

import pytest

from logflux.core.models import LogEntry


class RecordingTransport:
    """Transport that keeps every delivered entry in memory."""

    def __init__(self, name: str = "recording", level: Optional[str] = None):
        self.name = name
        self.level = level
        self.entries: List[LogEntry] = []
        self.flush_calls = 0
        self.close_calls = 0

    def deliver(self, entry: LogEntry) -> None:
        self.entries.append(entry)

    def flush(self) -> None:
        self.flush_calls += 1

    def close(self) -> None:
        self.close_calls += 1

    @property
    def messages(self) -> List[str]:
        return [entry.message for entry in self.entries]


class ManualTimer:
    """One-shot timer that only fires when the test says so."""

    def __init__(self, interval: float, callback: Callable[[], None]):
        self.interval = interval
        self.callback = callback
        self.started = False
        self.cancelled = False

    def start(self) -> None:
        self.started = True

    def cancel(self) -> None:
        self.cancelled = True

    def fire(self) -> None:
        self.callback()


class ManualTimerFactory:
    """Timer factory recording every timer it creates."""

    def __init__(self):
        self.timers: List[ManualTimer] = []

    def __call__(self, interval: float, callback: Callable[[], None]) -> ManualTimer:
        timer = ManualTimer(interval, callback)
        self.timers.append(timer)
        return timer

    @property
    def active(self) -> List[ManualTimer]:
        return [t for t in self.timers if t.started and not t.cancelled]

    def fire_all(self) -> None:
        for timer in list(self.active):
            timer.fire()


class FakeClock:
    """Settable millisecond clock."""

    def __init__(self, now: int = 1_700_000_000_000):
        self.now = now

    def __call__(self) -> int:
        return self.now

    def advance(self, ms: int) -> None:
        self.now += ms


def make_entry(
    message: str = "hello",
    level: int = 30,
    level_name: str = "INFO",
    timestamp: int = 1_700_000_000_000,
    **kwargs,
) -> LogEntry:
    """Build a LogEntry directly, bypassing the logger."""
    return LogEntry(
        id=kwargs.pop("id", "entry-1"),
        level=level,
        level_name=level_name,
        message=message,
        timestamp=timestamp,
        meta=kwargs.pop("meta", {}),
        **kwargs,
    )


@pytest.fixture
def recorder():
    """A fresh recording transport."""
    return RecordingTransport()


@pytest.fixture
def timers():
    """Manual timer factory for batch and deduplication tests."""
    return ManualTimerFactory()


@pytest.fixture
def clock():
    """Deterministic clock in epoch milliseconds."""
    return FakeClock()


@pytest.fixture(autouse=True)
def clear_logflux_env(monkeypatch):
    """Keep LOGFLUX_* variables from the host out of the tests."""
    monkeypatch.delenv("LOGFLUX_LEVEL", raising=False)
    monkeypatch.delenv("LOGFLUX_INCLUDE_STACK", raising=False)


@pytest.fixture
def entry_factory():
    """The make_entry() helper."""
    return make_entry


@pytest.fixture
def recorder_factory():
    """Build additional recording transports with custom names and levels."""
    return RecordingTransport
