"""
logflux Exception Hierarchy

Exception Hierarchy:
    LogfluxError (base)
    ├── ConfigurationError
    │   └── InvalidConfigurationError
    └── TransportError
        ├── DeliveryRejectedError
        ├── DeliveryFailedError
        └── ServerError

Configuration errors surface to whoever constructs a component. Transport
errors are handled inside the transport that raised them.
"""

from .base import LogfluxError
from .config import ConfigurationError, InvalidConfigurationError
from .transport import (
    DeliveryFailedError,
    DeliveryRejectedError,
    ServerError,
    TransportError,
)

__all__ = [
    # Base
    "LogfluxError",
    # Configuration
    "ConfigurationError",
    "InvalidConfigurationError",
    # Transports
    "TransportError",
    "DeliveryRejectedError",
    "DeliveryFailedError",
    "ServerError",
]
