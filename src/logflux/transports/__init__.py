"""
Built-in transports.

- base: Transport contract and create_transport() helper
- ring_buffer: in-memory store of the most recent entries
- batch: batching wrapper around any transport
- webhook: batched, retrying HTTP delivery
- console: JSON lines or Rich output to a stream
"""

from .base import FunctionTransport, Transport, create_transport
from .batch import BatchTransport, BufferedTransport, daemon_timer
from .console import ConsoleTransport
from .ring_buffer import RingBufferTransport
from .webhook import WebhookTransport

__all__ = [
    "Transport",
    "FunctionTransport",
    "create_transport",
    "RingBufferTransport",
    "BufferedTransport",
    "BatchTransport",
    "daemon_timer",
    "WebhookTransport",
    "ConsoleTransport",
]
