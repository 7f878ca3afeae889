"""Retry and backoff support for network transports."""

from .retry import (
    ExponentialBackoffStrategy,
    RetryAttempt,
    RetryManager,
    RetryPolicy,
)

__all__ = [
    "RetryPolicy",
    "RetryAttempt",
    "RetryManager",
    "ExponentialBackoffStrategy",
]
