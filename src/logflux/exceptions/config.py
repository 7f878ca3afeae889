"""
Configuration-related exceptions.

Raised synchronously while constructing a logger, transport or middleware
with invalid options.
"""

from typing import Any, List

from .base import LogfluxError


class ConfigurationError(LogfluxError):
    """Base class for configuration-related errors."""
    pass


class InvalidConfigurationError(ConfigurationError):
    """Raised when options contain invalid values."""

    def __init__(self, component: str, errors: List[str], value: Any = None):
        self.component = component
        self.errors = errors
        self.value = value
        message = f"Invalid configuration for {component}:"
        for error in errors:
            message += f"\n  - {error}"
        super().__init__(message, "CONFIG_INVALID", {"component": component})

    @classmethod
    def from_validation_error(cls, component: str, exc) -> "InvalidConfigurationError":
        """Build from a pydantic ValidationError."""
        errors = []
        for err in exc.errors():
            location = ".".join(str(part) for part in err.get("loc", ())) or component
            errors.append(f"{location}: {err.get('msg')}")
        return cls(component, errors)
