"""Tests for the console transport."""

import io
import json

from rich.text import Text

from logflux.core.models import SerializedError
from logflux.transports import ConsoleTransport


class TestConsoleTransport:
    def test_writes_json_lines(self, entry_factory):
        stream = io.StringIO()
        console = ConsoleTransport(stream=stream)

        console.deliver(entry_factory("first", meta={"user": "ada"}))
        console.deliver(entry_factory("second"))

        lines = stream.getvalue().splitlines()
        assert len(lines) == 2
        assert json.loads(lines[0])["meta"] == {"user": "ada"}
        assert json.loads(lines[1])["message"] == "second"

    def test_custom_formatter(self, entry_factory):
        stream = io.StringIO()
        console = ConsoleTransport(stream=stream, formatter=lambda e: e.message.upper())

        console.deliver(entry_factory("quiet"))

        assert stream.getvalue() == "QUIET\n"

    def test_pretty_output(self, entry_factory):
        stream = io.StringIO()
        console = ConsoleTransport(stream=stream, pretty=True)

        console.deliver(entry_factory(
            "Charge failed", level=50, level_name="ERROR", meta={"order_id": 7},
            error=SerializedError(message="declined", name="ValueError"),
        ))

        output = stream.getvalue()
        assert "ERROR" in output
        assert "Charge failed" in output
        assert "order_id=7" in output
        assert "ValueError: declined" in output

    def test_render_returns_rich_text(self, entry_factory):
        console = ConsoleTransport(stream=io.StringIO(), pretty=True)

        line = console.render(entry_factory("hi", correlation_id="c-1"))

        assert isinstance(line, Text)
        assert "correlationId=c-1" in line.plain
