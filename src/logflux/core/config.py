"""
Configuration models for logflux.

Pydantic models validate the options accepted by the logger and the built-in
transports. Invalid options are reported as InvalidConfigurationError at
construction time. LogfluxSettings reads process-wide defaults from the
environment (LOGFLUX_LEVEL, LOGFLUX_INCLUDE_STACK).
"""

from typing import Any, Callable, Dict, List, Optional, Type, TypeVar, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from logflux.constants import (
    DEFAULT_BATCH_SIZE,
    DEFAULT_FLUSH_INTERVAL_MS,
    DEFAULT_INCLUDE_STACK,
    DEFAULT_LOG_LEVEL,
    DEFAULT_MAX_RETRIES,
    DEFAULT_RING_BUFFER_SIZE,
    DEFAULT_WEBHOOK_BATCH_SIZE,
    DEFAULT_WEBHOOK_TIMEOUT_SECONDS,
)
from logflux.exceptions import InvalidConfigurationError

from .levels import level_name, resolve_level

ModelT = TypeVar("ModelT", bound=BaseModel)


def _normalize_level_name(v: Optional[str]) -> Optional[str]:
    # Unknown names fall back to INFO, matching resolve_level()
    if v is None:
        return v
    return level_name(resolve_level(v))


class LogfluxSettings(BaseSettings):
    """Environment-provided defaults."""

    model_config = SettingsConfigDict(env_prefix="LOGFLUX_", extra="ignore")

    level: str = Field(DEFAULT_LOG_LEVEL, description="Default logger threshold")
    include_stack: Union[bool, str] = Field(
        DEFAULT_INCLUDE_STACK, description="Stack capture policy"
    )

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: str) -> str:
        return _normalize_level_name(v)

    @field_validator("include_stack")
    @classmethod
    def validate_include_stack(cls, v):
        if isinstance(v, str):
            if v.lower() in ("true", "false"):
                return v.lower() == "true"
            return _normalize_level_name(v)
        return v


class LoggerOptions(BaseModel):
    """Options recognized by create_logger()."""

    model_config = ConfigDict(arbitrary_types_allowed=True, extra="forbid")

    level: Optional[str] = Field(None, description="Initial threshold name")
    transports: List[Any] = Field(default_factory=list, description="Initial sinks")
    middleware: List[Callable[..., Any]] = Field(
        default_factory=list, description="Initial middleware chain"
    )
    context: Dict[str, Any] = Field(default_factory=dict, description="Bound context")
    timestamp: Optional[Callable[[], int]] = Field(None, description="Clock override (ms)")
    id_generator: Union[Callable[[], str], bool, None] = Field(
        None, description="ID source, or False to disable"
    )
    include_stack: Union[bool, str, None] = Field(
        None, description="True, False, or minimum level name for stack capture"
    )

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: Optional[str]) -> Optional[str]:
        return _normalize_level_name(v)

    @field_validator("include_stack")
    @classmethod
    def validate_include_stack(cls, v):
        if isinstance(v, str):
            return _normalize_level_name(v)
        return v

    @field_validator("id_generator")
    @classmethod
    def validate_id_generator(cls, v):
        if v is True:
            raise ValueError("id_generator must be a callable, False, or None")
        return v

    @field_validator("transports")
    @classmethod
    def validate_transports(cls, v: List[Any]) -> List[Any]:
        for transport in v:
            if not callable(getattr(transport, "deliver", None)):
                raise ValueError(f"transport {transport!r} has no deliver() method")
            if not getattr(transport, "name", None):
                raise ValueError(f"transport {transport!r} has no name")
        return v


class RingBufferOptions(BaseModel):
    """Ring buffer transport options."""

    max_size: int = Field(DEFAULT_RING_BUFFER_SIZE, ge=1, description="Capacity")
    level: Optional[str] = Field(None, description="Per-transport threshold")

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: Optional[str]) -> Optional[str]:
        return _normalize_level_name(v)


class BatchOptions(BaseModel):
    """Batching wrapper options."""

    batch_size: int = Field(DEFAULT_BATCH_SIZE, ge=1, description="Flush trigger by count")
    flush_interval_ms: int = Field(
        DEFAULT_FLUSH_INTERVAL_MS, ge=0, description="Flush trigger by elapsed time"
    )


class WebhookOptions(BaseModel):
    """Webhook transport options."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    url: str = Field(..., min_length=1, description="Destination URL")
    method: str = Field("POST", description="HTTP method")
    headers: Dict[str, str] = Field(default_factory=dict)
    batch_size: int = Field(DEFAULT_WEBHOOK_BATCH_SIZE, ge=1)
    flush_interval_ms: int = Field(DEFAULT_FLUSH_INTERVAL_MS, ge=0)
    level: Optional[str] = None
    retry: bool = False
    max_retries: int = Field(DEFAULT_MAX_RETRIES, ge=0, le=20)
    timeout: float = Field(DEFAULT_WEBHOOK_TIMEOUT_SECONDS, gt=0)

    @field_validator("url")
    @classmethod
    def validate_url(cls, v: str) -> str:
        if not v.startswith(("http://", "https://")):
            raise ValueError("url must start with http:// or https://")
        return v

    @field_validator("method")
    @classmethod
    def validate_method(cls, v: str) -> str:
        return v.upper()

    @field_validator("level")
    @classmethod
    def validate_level(cls, v: Optional[str]) -> Optional[str]:
        return _normalize_level_name(v)


def validate_options(model: Type[ModelT], component: str, **values) -> ModelT:
    """Validate ``values`` against ``model``; raise InvalidConfigurationError."""
    provided = {key: value for key, value in values.items() if value is not None}
    try:
        return model(**provided)
    except ValidationError as e:
        raise InvalidConfigurationError.from_validation_error(component, e) from e
