"""
Base exception class for logflux.

Every logflux error carries a stable ``error_code`` and a ``context`` dict
of structured details (component, transport, HTTP status, attempts) that
is rendered into ``str()`` so log lines stay self-describing.
"""

from typing import Any, Dict, Optional


class LogfluxError(Exception):
    """Base exception for all logflux errors.

    Attributes:
        message: The error message
        error_code: Stable code for programmatic handling
        context: Structured details about the failure
    """

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.error_code = error_code
        self.context: Dict[str, Any] = dict(context or {})
        super().__init__(message)

    def __str__(self) -> str:
        details = [f"{k}={v}" for k, v in self.context.items() if v is not None]
        if not details:
            return self.message
        return f"{self.message} ({', '.join(details)})"
