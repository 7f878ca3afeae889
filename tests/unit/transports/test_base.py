"""Tests for the transport contract helpers."""

from logflux import create_logger
from logflux.transports import Transport, create_transport


class TestCreateTransport:
    def test_builds_transport_from_function(self, entry_factory):
        received = []

        transport = create_transport("memory", received.append, level="WARN")
        transport.deliver(entry_factory())

        assert isinstance(transport, Transport)
        assert transport.name == "memory"
        assert transport.level == "WARN"
        assert len(received) == 1

    def test_hooks_default_to_none(self):
        transport = create_transport("memory", lambda entry: None)

        assert transport.flush() is None
        assert transport.close() is None

    async def test_async_hooks_are_awaited_by_logger(self):
        calls = []

        async def flush():
            calls.append("flush")

        async def close():
            calls.append("close")

        transport = create_transport("memory", lambda entry: None, flush=flush, close=close)
        logger = create_logger(transports=[transport])

        await logger.close()

        assert calls == ["flush", "close"]
