"""
Redaction middleware.

Masks the values of sensitive keys in an entry's metadata and bound context
before it reaches any transport. Matching is case-insensitive and, by
default, also applies to nested dictionaries. The original entry is left
untouched; a redacted copy is forwarded.
"""

import dataclasses
from typing import Any, Dict, Iterable, Optional

from logflux.constants import DEFAULT_REDACT_VALUE
from logflux.core.models import LogEntry
from logflux.core.pipeline import Next


class RedactionMiddleware:
    """Replace values of sensitive keys with a placeholder.

    Example:
        >>> redact = RedactionMiddleware(["password", "authorization"])
        >>> logger = create_logger(middleware=[redact], transports=[...])
        >>> logger.info("Login", {"user": "ada", "password": "s3cret"})
        # meta delivered as {"user": "ada", "password": "[REDACTED]"}
    """

    def __init__(
        self,
        paths: Iterable[str],
        replacement: str = DEFAULT_REDACT_VALUE,
        deep: bool = True,
    ):
        self.paths = {path.lower() for path in paths}
        self.replacement = replacement
        self.deep = deep

    def redact(self, data: Dict[str, Any]) -> Dict[str, Any]:
        result = {}
        for key, value in data.items():
            if str(key).lower() in self.paths:
                result[key] = self.replacement
            elif self.deep and isinstance(value, dict):
                result[key] = self.redact(value)
            else:
                result[key] = value
        return result

    def __call__(self, entry: LogEntry, next_: Next) -> None:
        context: Optional[Dict[str, Any]] = entry.context
        redacted = dataclasses.replace(
            entry,
            meta=self.redact(entry.meta) if entry.meta else entry.meta,
            context=self.redact(context) if context else context,
        )
        next_(redacted)
