"""
Logger facade with shared pipeline state and child loggers.

A Logger owns nothing but its bound context. Level, transports, middleware,
clock, ID source and stack policy live on a Pipeline object that a logger
and every child derived from it hold by reference, so changing the level
through any of them changes it for all of them.
"""

import asyncio
import sys
import threading
import time
import uuid
from typing import Any, Callable, Dict, List, Optional, Union

from logflux.constants import DURATION_META_KEY

from .config import LoggerOptions, LogfluxSettings, validate_options
from .dispatch import maybe_await, wait_detached
from .errors import serialize_error
from .levels import (
    SILENT,
    LogLevel,
    level_name,
    resolve_level,
    should_include_stack,
    should_log,
    snap_level,
)
from .models import LogEntry
from .pipeline import Middleware, compose_middleware, fan_out

MetaOrError = Union[Dict[str, Any], BaseException, None]


def _wall_clock_ms() -> int:
    return int(time.time() * 1000)


def _default_id() -> str:
    return str(uuid.uuid4())


class Pipeline:
    """Shared, mutable pipeline state.

    The composed middleware chain closes over a snapshot of the transport
    list and is rebuilt whenever either list changes. A log call captures
    ``chain`` once, so concurrent add/remove never affects it.
    """

    def __init__(
        self,
        level: Union[int, float],
        transports: List[Any],
        middleware: List[Middleware],
        include_stack: Union[bool, str],
        clock: Callable[[], int],
        id_generator: Optional[Callable[[], str]],
    ):
        self.level = level
        self.include_stack = include_stack
        self.clock = clock
        self.id_generator = id_generator
        self._transports: List[Any] = list(transports)
        self._middleware: List[Middleware] = list(middleware)
        self._lock = threading.Lock()
        self.chain = self._build_chain()

    @property
    def transports(self) -> List[Any]:
        return list(self._transports)

    @property
    def middleware(self) -> List[Middleware]:
        return list(self._middleware)

    def _build_chain(self) -> Callable[[LogEntry], None]:
        transports = tuple(self._transports)

        def deliver(entry: LogEntry) -> None:
            fan_out(entry, transports, self.level)

        return compose_middleware(self._middleware, deliver)

    def add_transport(self, transport: Any) -> None:
        with self._lock:
            self._transports = [*self._transports, transport]
            self.chain = self._build_chain()

    def remove_transport(self, name: str) -> None:
        with self._lock:
            self._transports = [t for t in self._transports if t.name != name]
            self.chain = self._build_chain()

    def add_middleware(self, middleware: Middleware) -> None:
        with self._lock:
            self._middleware = [*self._middleware, middleware]
            self.chain = self._build_chain()

    def remove_middleware(self, middleware: Middleware) -> None:
        with self._lock:
            self._middleware = [m for m in self._middleware if m is not middleware]
            self.chain = self._build_chain()


class Timer:
    """Handle returned by Logger.start_timer()."""

    def __init__(self, logger: "Logger", level: Union[int, float]):
        self._logger = logger
        self._level = level
        self._start = time.perf_counter()

    def elapsed(self) -> float:
        """Milliseconds since the timer started."""
        return (time.perf_counter() - self._start) * 1000

    def done(self, message: str, meta: Optional[Dict[str, Any]] = None) -> None:
        """Log ``message`` at the captured level with the elapsed duration."""
        merged = dict(meta or {})
        merged[DURATION_META_KEY] = self.elapsed()
        self._logger.log(self._level, message, merged)


class Logger:
    """Structured logger.

    Log methods accept a message, an optional metadata dict and keyword
    fields that are merged into the metadata::

        logger.info("Order placed", {"order_id": 7}, region="eu")
        logger.error("Charge failed", exc)
        logger.error("Charge failed", {"order_id": 7}, exc)
    """

    def __init__(self, pipeline: Pipeline, context: Optional[Dict[str, Any]] = None):
        self._pipeline = pipeline
        self._context: Dict[str, Any] = dict(context or {})

    @property
    def context(self) -> Dict[str, Any]:
        return dict(self._context)

    # Log methods

    def trace(self, message: str, meta: Optional[Dict[str, Any]] = None, **fields):
        self._log(LogLevel.TRACE, message, meta, None, fields)

    def debug(self, message: str, meta: Optional[Dict[str, Any]] = None, **fields):
        self._log(LogLevel.DEBUG, message, meta, None, fields)

    def info(self, message: str, meta: Optional[Dict[str, Any]] = None, **fields):
        self._log(LogLevel.INFO, message, meta, None, fields)

    def warn(self, message: str, meta: Optional[Dict[str, Any]] = None, **fields):
        self._log(LogLevel.WARN, message, meta, None, fields)

    warning = warn

    def error(
        self,
        message: str,
        meta_or_error: MetaOrError = None,
        error: Optional[BaseException] = None,
        **fields,
    ):
        self._log_with_error(LogLevel.ERROR, message, meta_or_error, error, fields)

    def fatal(
        self,
        message: str,
        meta_or_error: MetaOrError = None,
        error: Optional[BaseException] = None,
        **fields,
    ):
        self._log_with_error(LogLevel.FATAL, message, meta_or_error, error, fields)

    critical = fatal

    def exception(self, message: str, meta: Optional[Dict[str, Any]] = None, **fields):
        """Log at ERROR with the exception currently being handled."""
        self._log(LogLevel.ERROR, message, meta, sys.exc_info()[1], fields)

    def log(
        self,
        level: Union[str, int, float],
        message: str,
        meta: Optional[Dict[str, Any]] = None,
        error: Optional[BaseException] = None,
        **fields,
    ):
        """Log at an arbitrary level given by name or number.

        Numbers between registered levels are rounded down, e.g. 35 logs
        at INFO.
        """
        value = snap_level(resolve_level(level))
        if value == SILENT:
            return
        self._log(value, message, meta, error, fields)

    # Child loggers

    def child(self, context: Optional[Dict[str, Any]] = None, **fields) -> "Logger":
        """Return a logger sharing this pipeline with extra bound context."""
        merged = {**self._context, **(context or {}), **fields}
        return Logger(self._pipeline, merged)

    # Dynamic configuration

    def add_transport(self, transport: Any) -> None:
        self._pipeline.add_transport(transport)

    def remove_transport(self, name: str) -> None:
        self._pipeline.remove_transport(name)

    def add_middleware(self, middleware: Middleware) -> None:
        self._pipeline.add_middleware(middleware)

    def remove_middleware(self, middleware: Middleware) -> None:
        self._pipeline.remove_middleware(middleware)

    @property
    def transports(self) -> List[Any]:
        return self._pipeline.transports

    @property
    def middleware(self) -> List[Middleware]:
        return self._pipeline.middleware

    def set_level(self, level: Union[str, int]) -> None:
        self._pipeline.level = snap_level(resolve_level(level))

    def get_level(self) -> str:
        return level_name(self._pipeline.level)

    def is_level_enabled(self, level: Union[str, int]) -> bool:
        return should_log(resolve_level(level), self._pipeline.level)

    def start_timer(self, level: Union[str, int] = "INFO") -> Timer:
        return Timer(self, resolve_level(level))

    # Lifecycle

    async def flush(self) -> None:
        """Wait for detached deliveries, then flush every transport concurrently.

        The first flush failure propagates.
        """
        await wait_detached()
        await asyncio.gather(
            *(_call_hook(t, "flush") for t in self._pipeline.transports)
        )

    async def close(self) -> None:
        """Flush, then close every transport concurrently."""
        await self.flush()
        await asyncio.gather(
            *(_call_hook(t, "close") for t in self._pipeline.transports)
        )

    # Internal

    def _log_with_error(self, level, message, meta_or_error, error, fields):
        if isinstance(meta_or_error, BaseException):
            self._log(level, message, None, meta_or_error, fields)
        else:
            self._log(level, message, meta_or_error, error, fields)

    def _log(
        self,
        level: Union[int, float],
        message: str,
        meta: Optional[Dict[str, Any]],
        error: Optional[BaseException],
        fields: Dict[str, Any],
    ) -> None:
        pipeline = self._pipeline
        if not should_log(level, pipeline.level):
            return

        level = int(level)
        # Copied so middleware edits never reach the caller's dict
        meta = {**(meta or {}), **fields}

        entry = LogEntry(
            id=pipeline.id_generator() if pipeline.id_generator else "",
            level=level,
            level_name=level_name(level),
            message=message,
            timestamp=pipeline.clock(),
            meta=meta,
            context=dict(self._context) if self._context else None,
        )

        if error is not None:
            entry.error = serialize_error(
                error, should_include_stack(level, pipeline.include_stack)
            )

        pipeline.chain(entry)


async def _call_hook(transport: Any, hook: str) -> None:
    method = getattr(transport, hook, None)
    if callable(method):
        await maybe_await(method())


def create_logger(**options) -> Logger:
    """Create a logger.

    Keyword options: ``level``, ``transports``, ``middleware``, ``context``,
    ``timestamp``, ``id_generator`` and ``include_stack``. Level and stack
    policy default to LOGFLUX_LEVEL / LOGFLUX_INCLUDE_STACK, then INFO / ERROR.

    Raises:
        InvalidConfigurationError: if any option is invalid
    """
    opts = validate_options(LoggerOptions, "logger", **options)
    settings = LogfluxSettings()

    if opts.id_generator is False:
        id_generator = None
    else:
        id_generator = opts.id_generator or _default_id

    include_stack = opts.include_stack if opts.include_stack is not None else settings.include_stack

    pipeline = Pipeline(
        level=resolve_level(opts.level or settings.level),
        transports=opts.transports,
        middleware=opts.middleware,
        include_stack=include_stack,
        clock=opts.timestamp or _wall_clock_ms,
        id_generator=id_generator,
    )
    return Logger(pipeline, opts.context)
