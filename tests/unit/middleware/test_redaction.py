"""Tests for the redaction middleware."""

from logflux import create_logger
from logflux.middleware import RedactionMiddleware


class TestRedactionMiddleware:
    def test_masks_matching_keys_case_insensitively(self, recorder):
        logger = create_logger(transports=[recorder],
                               middleware=[RedactionMiddleware(["password", "Token"])])

        logger.info("login", {"user": "ada", "PASSWORD": "s3cret", "token": "abc"})

        assert recorder.entries[0].meta == {
            "user": "ada", "PASSWORD": "[REDACTED]", "token": "[REDACTED]",
        }

    def test_nested_and_context_values(self, recorder):
        logger = create_logger(
            transports=[recorder],
            middleware=[RedactionMiddleware(["authorization"], replacement="***")],
            context={"authorization": "Bearer x"},
        )

        logger.info("call", {"request": {"headers": {"Authorization": "Bearer y"}}})

        entry = recorder.entries[0]
        assert entry.meta["request"]["headers"]["Authorization"] == "***"
        assert entry.context == {"authorization": "***"}

    def test_shallow_mode_skips_nested(self, entry_factory):
        received = []
        redact = RedactionMiddleware(["secret"], deep=False)

        redact(entry_factory(meta={"secret": 1, "inner": {"secret": 2}}), received.append)

        assert received[0].meta == {"secret": "[REDACTED]", "inner": {"secret": 2}}

    def test_original_entry_untouched(self, entry_factory):
        received = []
        entry = entry_factory(meta={"password": "s3cret"})

        RedactionMiddleware(["password"])(entry, received.append)

        assert entry.meta == {"password": "s3cret"}
        assert received[0] is not entry
