"""
Middleware for the logflux pipeline.

A middleware is any callable ``(entry, next_)``. It may edit the entry,
forward a different one, or not call ``next_`` at all to drop it.
"""

from .alert import AlertMiddleware, AlertRule
from .context import AsyncContext
from .correlation_id import CorrelationIdMiddleware
from .deduplication import DeduplicationMiddleware
from .level_override import LevelOverrideMiddleware
from .redaction import RedactionMiddleware
from .sampling import SamplingMiddleware

__all__ = [
    "AlertMiddleware",
    "AlertRule",
    "AsyncContext",
    "CorrelationIdMiddleware",
    "DeduplicationMiddleware",
    "LevelOverrideMiddleware",
    "RedactionMiddleware",
    "SamplingMiddleware",
]
