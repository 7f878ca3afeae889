"""
Core logging pipeline: levels, entries, error serialization, middleware
composition, transport fan-out and the Logger facade.
"""

from .errors import serialize_error
from .levels import (
    SILENT,
    LogLevel,
    snap_level,
    level_name,
    resolve_level,
    should_include_stack,
    should_log,
)
from .logger import Logger, Pipeline, Timer, create_logger
from .models import LogEntry, SerializedError
from .pipeline import Middleware, Next, compose_middleware, fan_out

__all__ = [
    "LogLevel",
    "SILENT",
    "resolve_level",
    "snap_level",
    "level_name",
    "should_log",
    "should_include_stack",
    "LogEntry",
    "SerializedError",
    "serialize_error",
    "Middleware",
    "Next",
    "compose_middleware",
    "fan_out",
    "Logger",
    "Pipeline",
    "Timer",
    "create_logger",
]
