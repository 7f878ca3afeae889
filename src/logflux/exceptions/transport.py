"""
Transport delivery exceptions.

These describe why a sink gave up on a batch. They are raised inside the
transport's own send path and handled there; they never reach the code
that emitted the log entry.
"""

from typing import Optional

from .base import LogfluxError


class TransportError(LogfluxError):
    """Base class for transport delivery errors."""

    def __init__(self, transport: str, message: str, error_code: Optional[str] = None):
        self.transport = transport
        super().__init__(
            f"Transport '{transport}': {message}", error_code, {"transport": transport}
        )


class DeliveryRejectedError(TransportError):
    """Raised when the destination rejects a batch with a 4xx response."""

    def __init__(self, transport: str, status_code: int, reason: Optional[str] = None):
        self.status_code = status_code
        message = f"batch rejected with HTTP {status_code}"
        if reason:
            message += f" ({reason})"
        super().__init__(transport, message, error_code="DELIVERY_REJECTED")
        self.context["status_code"] = status_code


class DeliveryFailedError(TransportError):
    """Raised when a batch could not be delivered after all retries."""

    def __init__(self, transport: str, attempts: int, last_error: Optional[str] = None):
        self.attempts = attempts
        message = f"delivery failed after {attempts} attempts"
        if last_error:
            message += f": {last_error}"
        super().__init__(transport, message, error_code="DELIVERY_FAILED")
        self.context["attempts"] = attempts


class ServerError(TransportError):
    """Raised for a 5xx response; retryable."""

    def __init__(self, transport: str, status_code: int):
        self.status_code = status_code
        super().__init__(
            transport, f"server responded with HTTP {status_code}", error_code="SERVER_ERROR"
        )
        self.context["status_code"] = status_code
