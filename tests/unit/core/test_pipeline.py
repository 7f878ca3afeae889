"""Tests for middleware composition and transport fan-out."""

import asyncio

import pytest

from logflux.core.pipeline import compose_middleware, fan_out


class TestComposeMiddleware:
    def test_empty_chain_returns_final(self):
        final = lambda entry: None

        assert compose_middleware([], final) is final

    def test_middleware_run_in_order(self, entry_factory):
        calls = []

        def first(entry, next_):
            calls.append("first")
            next_(entry)

        def second(entry, next_):
            calls.append("second")
            next_(entry)

        run = compose_middleware([first, second], lambda entry: calls.append("final"))
        run(entry_factory())

        assert calls == ["first", "second", "final"]

    def test_pass_through_delivers_same_object(self, entry_factory):
        """A middleware that only calls next hands on the identical entry."""
        received = []
        run = compose_middleware([lambda entry, next_: next_(entry)], received.append)
        entry = entry_factory()

        run(entry)

        assert received[0] is entry

    def test_not_calling_next_drops_entry(self, entry_factory):
        received = []
        run = compose_middleware([lambda entry, next_: None], received.append)

        run(entry_factory())

        assert received == []

    def test_middleware_may_replace_entry(self, entry_factory):
        received = []
        replacement = entry_factory("replaced")
        run = compose_middleware(
            [lambda entry, next_: next_(replacement)], received.append
        )

        run(entry_factory())

        assert received == [replacement]

    def test_later_list_edits_do_not_affect_chain(self, entry_factory):
        calls = []
        middleware = [lambda entry, next_: (calls.append("a"), next_(entry))]
        run = compose_middleware(middleware, lambda entry: None)

        middleware.append(lambda entry, next_: calls.append("b"))
        run(entry_factory())

        assert calls == ["a"]

    def test_middleware_exception_propagates(self, entry_factory):
        def broken(entry, next_):
            raise RuntimeError("middleware bug")

        run = compose_middleware([broken], lambda entry: None)

        with pytest.raises(RuntimeError, match="middleware bug"):
            run(entry_factory())


class TestFanOut:
    def test_transport_level_overrides_logger_level(self, entry_factory, recorder_factory):
        quiet = recorder_factory("quiet", level="ERROR")
        chatty = recorder_factory("chatty", level="DEBUG")
        default = recorder_factory("default")

        fan_out(entry_factory(level=20, level_name="DEBUG"), [quiet, chatty, default], 30)

        assert quiet.entries == []
        assert len(chatty.entries) == 1
        assert default.entries == []

    def test_failing_transport_does_not_affect_others(self, entry_factory, recorder):
        class Broken:
            name = "broken"
            level = None

            def deliver(self, entry):
                raise IOError("disk full")

        fan_out(entry_factory(), [Broken(), recorder], 30)

        assert len(recorder.entries) == 1

    async def test_async_failure_is_swallowed(self, entry_factory, recorder):
        class AsyncBroken:
            name = "async-broken"
            level = None

            async def deliver(self, entry):
                raise IOError("network down")

        fan_out(entry_factory(), [AsyncBroken(), recorder], 30)
        await asyncio.sleep(0)

        assert len(recorder.entries) == 1
