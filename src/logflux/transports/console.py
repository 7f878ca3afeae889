"""
Console transport.

Writes one JSON document per entry to a text stream (stderr by default),
or renders a colored one-line summary through a Rich console when
``pretty=True``.
"""

import sys
from datetime import datetime, timezone
from typing import Callable, Optional, TextIO

from rich.console import Console
from rich.text import Text

from logflux.core.levels import LogLevel
from logflux.core.models import LogEntry

from .base import Transport

_LEVEL_STYLES = {
    LogLevel.TRACE: "dim",
    LogLevel.DEBUG: "cyan",
    LogLevel.INFO: "green",
    LogLevel.WARN: "yellow",
    LogLevel.ERROR: "red",
    LogLevel.FATAL: "bold white on red",
}


def _style_for(level: int) -> str:
    style = "white"
    for threshold, candidate in _LEVEL_STYLES.items():
        if level >= threshold:
            style = candidate
    return style


class ConsoleTransport(Transport):
    """Write entries to a stream as JSON lines or Rich-formatted text."""

    def __init__(
        self,
        level: Optional[str] = None,
        stream: Optional[TextIO] = None,
        pretty: bool = False,
        formatter: Optional[Callable[[LogEntry], str]] = None,
        console: Optional[Console] = None,
    ):
        self.name = "console"
        self.level = level
        self.stream = stream or sys.stderr
        self.pretty = pretty
        self.formatter = formatter or (lambda entry: entry.to_json())
        self.console = console or (
            Console(file=self.stream, highlight=False) if pretty else None
        )

    def deliver(self, entry: LogEntry) -> None:
        if self.pretty:
            self.console.print(self.render(entry))
        else:
            self.stream.write(self.formatter(entry) + "\n")

    def render(self, entry: LogEntry) -> Text:
        """Build the Rich text line for an entry."""
        when = datetime.fromtimestamp(entry.timestamp / 1000, tz=timezone.utc)
        line = Text()
        line.append(when.strftime("%H:%M:%S.%f")[:-3] + " ", style="dim")
        line.append(f"{entry.level_name:<5}", style=_style_for(entry.level))
        line.append(f" {entry.message}")
        fields = {**(entry.context or {}), **entry.meta}
        if entry.correlation_id:
            fields["correlationId"] = entry.correlation_id
        if fields:
            line.append(" " + " ".join(f"{k}={v}" for k, v in fields.items()), style="dim")
        if entry.error is not None:
            line.append(f"\n  {entry.error.name}: {entry.error.message}", style="red")
            if entry.error.stack:
                line.append("\n" + entry.error.stack.rstrip(), style="dim red")
        return line

    def flush(self) -> None:
        flush = getattr(self.stream, "flush", None)
        if callable(flush):
            flush()
