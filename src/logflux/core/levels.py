"""
Log level registry.

Total order over severity names, case-insensitive resolution and the
threshold checks used by the logger, the fan-out and the transports.
"""

import math
from enum import IntEnum
from typing import Union

LevelLike = Union[str, int, float]


class LogLevel(IntEnum):
    """Numeric severities, lowest to highest."""

    TRACE = 10
    DEBUG = 20
    INFO = 30
    WARN = 40
    ERROR = 50
    FATAL = 60


# Threshold above every level; disables output entirely.
SILENT = math.inf

_NAME_TO_VALUE = {level.name.lower(): int(level) for level in LogLevel}
_NAME_TO_VALUE["silent"] = SILENT
_VALUE_TO_NAME = {int(level): level.name for level in LogLevel}


def resolve_level(level: LevelLike) -> Union[int, float]:
    """Resolve a level name to its numeric weight.

    Names are matched case-insensitively. Unknown names resolve to INFO
    instead of raising. Numbers are returned unchanged.
    """
    if isinstance(level, (int, float)) and not isinstance(level, bool):
        return level
    if not isinstance(level, str):
        return int(LogLevel.INFO)
    return _NAME_TO_VALUE.get(level.lower(), int(LogLevel.INFO))


def snap_level(value: Union[int, float]) -> Union[int, float]:
    """Round a numeric level down to the nearest registered level.

    Values below TRACE become TRACE. SILENT is returned unchanged.
    """
    if value == SILENT:
        return value
    snapped = LogLevel.TRACE
    for level in LogLevel:
        if value >= level:
            snapped = level
    return int(snapped)


def level_name(value: Union[int, float]) -> str:
    """Canonical upper-case name for a numeric level."""
    if value == SILENT:
        return "SILENT"
    return _VALUE_TO_NAME.get(value, "INFO")


def should_log(entry_level: Union[int, float], threshold: Union[int, float]) -> bool:
    """Return True when an entry at ``entry_level`` passes ``threshold``."""
    return entry_level >= threshold


def should_include_stack(entry_level: int, include_stack: Union[bool, str]) -> bool:
    """Decide whether a stack trace is captured for an entry at ``entry_level``."""
    if isinstance(include_stack, bool):
        return include_stack
    return entry_level >= resolve_level(include_stack)
