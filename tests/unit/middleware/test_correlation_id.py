"""Tests for the correlation ID middleware."""

from logflux.middleware import CorrelationIdMiddleware


def _apply(middleware, entry):
    received = []
    middleware(entry, received.append)
    return received[0]


class TestCorrelationIdMiddleware:
    def test_existing_id_is_kept(self, entry_factory):
        entry = _apply(CorrelationIdMiddleware(), entry_factory(correlation_id="c-1"))

        assert entry.correlation_id == "c-1"
        assert entry.meta == {}

    def test_lookup_order(self, entry_factory):
        middleware = CorrelationIdMiddleware()

        from_correlation = _apply(middleware, entry_factory(
            meta={"correlationId": "a", "traceId": "b", "x-correlation-id": "c"}))
        from_trace = _apply(middleware, entry_factory(
            meta={"traceId": "b", "x-correlation-id": "c"}))
        from_header = _apply(middleware, entry_factory(meta={"x-correlation-id": "c"}))

        assert from_correlation.correlation_id == "a"
        assert from_trace.correlation_id == "b"
        assert from_trace.meta["correlationId"] == "b"
        assert from_header.correlation_id == "c"

    def test_generates_when_missing(self, entry_factory):
        middleware = CorrelationIdMiddleware(generator=lambda: "generated")

        entry = _apply(middleware, entry_factory())

        assert entry.correlation_id == "generated"
        assert entry.meta["correlationId"] == "generated"

    def test_default_generator_is_unique(self, entry_factory):
        middleware = CorrelationIdMiddleware()

        first = _apply(middleware, entry_factory())
        second = _apply(middleware, entry_factory())

        assert first.correlation_id != second.correlation_id

    def test_custom_header(self, entry_factory):
        middleware = CorrelationIdMiddleware(header="x-request-id")

        entry = _apply(middleware, entry_factory(meta={"x-request-id": "r-5"}))

        assert entry.correlation_id == "r-5"
