"""
Per-entry level override.

Lets a single request raise or lower the level of its own entries, e.g. a
caller sending ``x-log-level: DEBUG`` to get debug detail for one request in
production. The key is looked up in the entry's metadata, then its bound
context, then ``meta["headers"]``.
"""

from typing import Any, Dict, Optional

from logflux.constants import DEFAULT_LEVEL_OVERRIDE_KEY
from logflux.core.levels import LogLevel
from logflux.core.models import LogEntry
from logflux.core.pipeline import Next


class LevelOverrideMiddleware:
    def __init__(self, key: str = DEFAULT_LEVEL_OVERRIDE_KEY, cleanup: bool = True):
        self.key = key
        self.cleanup = cleanup

    def _find(self, entry: LogEntry) -> Optional[Any]:
        headers = entry.meta.get("headers")
        return (
            entry.meta.get(self.key)
            or (entry.context or {}).get(self.key)
            or (headers.get(self.key) if isinstance(headers, dict) else None)
        )

    def __call__(self, entry: LogEntry, next_: Next) -> None:
        name = self._find(entry)
        upper = name.upper() if isinstance(name, str) else None
        if upper in LogLevel.__members__:
            entry.level = int(LogLevel[upper])
            entry.level_name = upper
            if self.cleanup:
                self._remove_key(entry.meta)
        next_(entry)

    def _remove_key(self, meta: Dict[str, Any]) -> None:
        meta.pop(self.key, None)
        headers = meta.get("headers")
        if isinstance(headers, dict) and self.key in headers:
            meta["headers"] = {k: v for k, v in headers.items() if k != self.key}
