"""
Data model for log entries.

LogEntry is the unit that flows through the middleware chain and out to the
transports. It is a plain mutable dataclass: middleware is allowed to edit it
in place or hand a different instance to the next step.
"""

import json
from dataclasses import dataclass, field
from typing import Any, Dict, Optional


@dataclass
class SerializedError:
    """Bounded, JSON-friendly snapshot of an exception and its cause chain."""

    message: str
    name: str
    stack: Optional[str] = None
    code: Optional[str] = None
    cause: Optional["SerializedError"] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a dictionary, omitting empty optional fields."""
        data: Dict[str, Any] = {"message": self.message, "name": self.name}
        if self.stack is not None:
            data["stack"] = self.stack
        if self.code is not None:
            data["code"] = self.code
        if self.cause is not None:
            data["cause"] = self.cause.to_dict()
        return data

    def depth(self) -> int:
        """Number of cause links below this node."""
        links = 0
        node = self.cause
        while node is not None:
            links += 1
            node = node.cause
        return links


@dataclass
class LogEntry:
    """A single structured log record."""

    id: str
    level: int
    level_name: str
    message: str
    timestamp: int
    meta: Dict[str, Any] = field(default_factory=dict)
    context: Optional[Dict[str, Any]] = None
    correlation_id: Optional[str] = None
    error: Optional[SerializedError] = None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the wire representation used by transports."""
        data: Dict[str, Any] = {
            "id": self.id,
            "level": self.level,
            "levelName": self.level_name,
            "message": self.message,
            "timestamp": self.timestamp,
            "meta": self.meta,
        }
        if self.context:
            data["context"] = self.context
        if self.correlation_id is not None:
            data["correlationId"] = self.correlation_id
        if self.error is not None:
            data["error"] = self.error.to_dict()
        return data

    def to_json(self) -> str:
        """Serialize to a JSON string; unknown values fall back to str()."""
        return json.dumps(self.to_dict(), default=str)
