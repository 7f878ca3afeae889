"""
Correlation ID middleware.

Makes sure every entry carries a correlation ID so a request can be followed
across services. An existing ID is reused from, in order: the entry itself,
``meta["correlationId"]``, ``meta["traceId"]`` and ``meta[header]``. If none
is present a new one is generated.
"""

import uuid
from typing import Callable, Optional

from logflux.constants import DEFAULT_CORRELATION_HEADER
from logflux.core.models import LogEntry
from logflux.core.pipeline import Next


class CorrelationIdMiddleware:
    def __init__(
        self,
        header: str = DEFAULT_CORRELATION_HEADER,
        generator: Optional[Callable[[], str]] = None,
    ):
        self.header = header
        self.generator = generator or (lambda: uuid.uuid4().hex)

    def __call__(self, entry: LogEntry, next_: Next) -> None:
        if entry.correlation_id:
            next_(entry)
            return

        meta = entry.meta
        correlation_id = (
            meta.get("correlationId")
            or meta.get("traceId")
            or meta.get(self.header)
            or self.generator()
        )
        entry.correlation_id = str(correlation_id)
        if not meta.get("correlationId"):
            meta["correlationId"] = entry.correlation_id
        next_(entry)
