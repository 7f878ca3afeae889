"""
logflux: structured logging pipeline

Log calls become structured entries that flow through a middleware chain
and fan out to any number of transports.

Architecture Overview:
- Core: levels, entries, error serialization, pipeline composition, Logger
- Transports: ring buffer, batching wrapper, webhook, console
- Middleware: async context propagation, redaction, sampling, deduplication,
  level override, correlation IDs, alerting
- Resilience: retry with backoff for network delivery
- Exceptions: configuration and delivery errors
"""

__version__ = "0.1.0"

from .core import (
    SILENT,
    LogEntry,
    Logger,
    LogLevel,
    SerializedError,
    compose_middleware,
    create_logger,
    resolve_level,
    serialize_error,
)
from .core.config import LogfluxSettings
from .exceptions import (
    ConfigurationError,
    DeliveryFailedError,
    DeliveryRejectedError,
    InvalidConfigurationError,
    LogfluxError,
    TransportError,
)
from .middleware import (
    AlertMiddleware,
    AlertRule,
    AsyncContext,
    CorrelationIdMiddleware,
    DeduplicationMiddleware,
    LevelOverrideMiddleware,
    RedactionMiddleware,
    SamplingMiddleware,
)
from .transports import (
    BatchTransport,
    ConsoleTransport,
    RingBufferTransport,
    Transport,
    WebhookTransport,
    create_transport,
)

__all__ = [
    "create_logger",
    "Logger",
    "LogLevel",
    "SILENT",
    "resolve_level",
    "LogEntry",
    "SerializedError",
    "serialize_error",
    "compose_middleware",
    "LogfluxSettings",
    "Transport",
    "create_transport",
    "RingBufferTransport",
    "BatchTransport",
    "WebhookTransport",
    "ConsoleTransport",
    "AsyncContext",
    "RedactionMiddleware",
    "SamplingMiddleware",
    "DeduplicationMiddleware",
    "LevelOverrideMiddleware",
    "CorrelationIdMiddleware",
    "AlertMiddleware",
    "AlertRule",
    "LogfluxError",
    "ConfigurationError",
    "InvalidConfigurationError",
    "TransportError",
    "DeliveryRejectedError",
    "DeliveryFailedError",
]
