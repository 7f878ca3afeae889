"""Tests for the level registry."""

import math

import pytest

from logflux.core.levels import (
    SILENT,
    LogLevel,
    level_name,
    resolve_level,
    should_include_stack,
    should_log,
    snap_level,
)


class TestLogLevel:
    def test_levels_are_strictly_ordered(self):
        """Severities increase from TRACE to FATAL."""
        order = [LogLevel.TRACE, LogLevel.DEBUG, LogLevel.INFO,
                 LogLevel.WARN, LogLevel.ERROR, LogLevel.FATAL]
        assert order == sorted(order)
        assert [int(level) for level in order] == [10, 20, 30, 40, 50, 60]

    def test_silent_is_above_every_level(self):
        assert SILENT == math.inf
        assert all(SILENT > level for level in LogLevel)


class TestResolveLevel:
    @pytest.mark.parametrize("name,expected", [
        ("trace", 10), ("DEBUG", 20), ("Info", 30),
        ("warn", 40), ("ERROR", 50), ("fatal", 60),
    ])
    def test_names_resolve_case_insensitively(self, name, expected):
        assert resolve_level(name) == expected

    def test_silent_resolves_to_infinity(self):
        assert resolve_level("silent") == math.inf

    def test_unknown_name_falls_back_to_info(self):
        """Unknown names resolve to INFO instead of raising."""
        assert resolve_level("verbose") == 30

    def test_numbers_pass_through(self):
        assert resolve_level(42) == 42
        assert resolve_level(SILENT) == SILENT


class TestLevelHelpers:
    def test_snap_level_rounds_down_to_registered_level(self):
        assert snap_level(35) == LogLevel.INFO
        assert snap_level(40) == LogLevel.WARN
        assert snap_level(99) == LogLevel.FATAL
        assert snap_level(3) == LogLevel.TRACE
        assert snap_level(SILENT) == SILENT

    def test_level_name(self):
        assert level_name(50) == "ERROR"
        assert level_name(SILENT) == "SILENT"

    def test_should_log_is_inclusive(self):
        assert should_log(30, 30)
        assert should_log(40, 30)
        assert not should_log(20, 30)
        assert not should_log(60, SILENT)

    def test_should_include_stack_with_bool(self):
        assert should_include_stack(10, True)
        assert not should_include_stack(60, False)

    def test_should_include_stack_with_level_name(self):
        assert should_include_stack(50, "ERROR")
        assert should_include_stack(60, "ERROR")
        assert not should_include_stack(40, "ERROR")
