"""Tests for error serialization."""

from logflux.constants import MAX_CAUSE_DEPTH
from logflux.core.errors import serialize_error


def _raise_chain(length):
    """Raise and catch a chain of ``length`` exceptions linked by ``from``."""
    err = None
    for i in range(length):
        try:
            if err is None:
                raise ValueError("level 0")
            raise RuntimeError(f"level {i}") from err
        except Exception as e:
            err = e
    return err


class TestSerializeError:
    def test_basic_fields(self):
        err = ValueError("bad input")

        serialized = serialize_error(err, include_stack=False)

        assert serialized.message == "bad input"
        assert serialized.name == "ValueError"
        assert serialized.stack is None
        assert serialized.cause is None

    def test_stack_included_when_requested(self):
        try:
            raise KeyError("missing")
        except KeyError as e:
            serialized = serialize_error(e, include_stack=True)

        assert "Traceback" in serialized.stack
        assert "KeyError" in serialized.stack

    def test_code_taken_from_errno(self):
        err = FileNotFoundError(2, "No such file")

        assert serialize_error(err, include_stack=False).code == "2"

    def test_code_attribute_preferred(self):
        err = RuntimeError("boom")
        err.code = "E_BOOM"

        assert serialize_error(err, include_stack=False).code == "E_BOOM"

    def test_explicit_cause_is_followed(self):
        err = _raise_chain(2)

        serialized = serialize_error(err, include_stack=False)

        assert serialized.name == "RuntimeError"
        assert serialized.cause.name == "ValueError"
        assert serialized.cause.message == "level 0"

    def test_implicit_context_is_followed(self):
        try:
            try:
                raise ValueError("inner")
            except ValueError:
                raise RuntimeError("outer")
        except RuntimeError as e:
            serialized = serialize_error(e, include_stack=False)

        assert serialized.cause.message == "inner"

    def test_suppressed_context_is_ignored(self):
        try:
            try:
                raise ValueError("inner")
            except ValueError:
                raise RuntimeError("outer") from None
        except RuntimeError as e:
            serialized = serialize_error(e, include_stack=False)

        assert serialized.cause is None

    def test_cause_chain_is_truncated(self):
        """A 7-level chain keeps exactly five cause links."""
        err = _raise_chain(7)

        serialized = serialize_error(err, include_stack=False)

        assert serialized.depth() == MAX_CAUSE_DEPTH == 5

    def test_cyclic_chain_terminates(self):
        first = ValueError("first")
        second = ValueError("second")
        first.__cause__ = second
        second.__cause__ = first

        serialized = serialize_error(first, include_stack=False)

        assert serialized.depth() == MAX_CAUSE_DEPTH

    def test_unprintable_message_degrades(self):
        class Unprintable(Exception):
            def __str__(self):
                raise RuntimeError("cannot render")

        try:
            raise Unprintable()
        except Unprintable as e:
            serialized = serialize_error(e, include_stack=True)

        assert serialized.message == "<unprintable Unprintable>"
        assert "Unprintable" in serialized.stack

    def test_unprintable_code_degrades(self):
        class BadCode:
            def __str__(self):
                raise ValueError("no")

        err = RuntimeError("boom")
        err.code = BadCode()

        assert serialize_error(err, include_stack=False).code == "<unprintable BadCode>"
