"""Tests for the level override middleware."""

from logflux import create_logger
from logflux.core.levels import LogLevel
from logflux.middleware import LevelOverrideMiddleware


class TestLevelOverrideMiddleware:
    def test_meta_key_rewrites_level(self, recorder_factory):
        debug_sink = recorder_factory("debug-sink", level="DEBUG")
        logger = create_logger(transports=[debug_sink], level="TRACE",
                               middleware=[LevelOverrideMiddleware()])

        logger.trace("detail", {"x-log-level": "debug"})

        entry = debug_sink.entries[0]
        assert entry.level == LogLevel.DEBUG
        assert entry.level_name == "DEBUG"
        assert "x-log-level" not in entry.meta

    def test_context_key(self, entry_factory):
        received = []

        LevelOverrideMiddleware()(
            entry_factory(context={"x-log-level": "ERROR"}), received.append
        )

        assert received[0].level == LogLevel.ERROR

    def test_headers_key_and_cleanup(self, entry_factory):
        received = []
        headers = {"x-log-level": "warn", "accept": "json"}

        LevelOverrideMiddleware()(entry_factory(meta={"headers": headers}), received.append)

        assert received[0].level == LogLevel.WARN
        assert received[0].meta["headers"] == {"accept": "json"}
        assert headers == {"x-log-level": "warn", "accept": "json"}

    def test_cleanup_disabled(self, entry_factory):
        received = []

        LevelOverrideMiddleware(key="lvl", cleanup=False)(
            entry_factory(meta={"lvl": "fatal"}), received.append
        )

        assert received[0].level == LogLevel.FATAL
        assert received[0].meta == {"lvl": "fatal"}

    def test_unknown_level_is_ignored(self, entry_factory):
        received = []

        LevelOverrideMiddleware()(entry_factory(meta={"x-log-level": "loud"}), received.append)

        assert received[0].level == LogLevel.INFO
        assert received[0].meta == {"x-log-level": "loud"}
