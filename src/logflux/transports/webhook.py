"""
Webhook transport: ships log batches to an HTTP endpoint.

Batches are posted with ``requests`` on a single worker thread, so the
logging call never waits on the network and batches leave in order. With
``retry=True`` a send is retried with exponential backoff after a
connection-level failure or a 5xx response. A 4xx response is final: the
batch is dropped and the rejection is reported through the ``logging``
module instead of being raised.
"""

import asyncio
import json
import logging
import threading
import time
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Any, Callable, Dict, List, Optional, Set

import requests

from logflux.constants import (
    HTTP_STATUS_CLIENT_ERROR_MIN,
    HTTP_STATUS_SERVER_ERROR_MAX,
    HTTP_STATUS_SERVER_ERROR_MIN,
)
from logflux.core.config import WebhookOptions, validate_options
from logflux.core.models import LogEntry
from logflux.exceptions import DeliveryFailedError, DeliveryRejectedError, ServerError
from logflux.resilience.retry import RetryManager, RetryPolicy

from .batch import BufferedTransport, TimerFactory

logger = logging.getLogger(__name__)

Serializer = Callable[[List[LogEntry]], str]


class WebhookTransport(BufferedTransport):
    """POST log entries to an HTTP endpoint, optionally batched and retried.

    Example:
        >>> hook = WebhookTransport(
        ...     "https://logs.example.com/ingest",
        ...     headers={"Authorization": "Bearer token"},
        ...     batch_size=50,
        ...     retry=True,
        ... )
    """

    def __init__(
        self,
        url: str,
        method: Optional[str] = None,
        headers: Optional[Dict[str, str]] = None,
        batch_size: Optional[int] = None,
        flush_interval_ms: Optional[int] = None,
        level: Optional[str] = None,
        serializer: Optional[Serializer] = None,
        retry: Optional[bool] = None,
        max_retries: Optional[int] = None,
        timeout: Optional[float] = None,
        session: Optional[requests.Session] = None,
        timer_factory: Optional[TimerFactory] = None,
        sleep: Callable[[float], None] = time.sleep,
        clock: Optional[Callable[[], int]] = None,
    ):
        opts = validate_options(
            WebhookOptions,
            "webhook transport",
            url=url,
            method=method,
            headers=headers,
            batch_size=batch_size,
            flush_interval_ms=flush_interval_ms,
            level=level,
            retry=retry,
            max_retries=max_retries,
            timeout=timeout,
        )
        super().__init__(opts.batch_size, opts.flush_interval_ms, timer_factory)
        self.name = "webhook"
        self.level = opts.level
        self.url = opts.url
        self.method = opts.method
        self.headers = {"Content-Type": "application/json", **opts.headers}
        self.timeout = opts.timeout
        self.retry = opts.retry
        self.max_retries = opts.max_retries
        self.serializer = serializer or self._default_serializer
        self._clock = clock or (lambda: int(time.time() * 1000))
        self._owns_session = session is None
        self.session = session or requests.Session()
        self._retry_manager = RetryManager(
            RetryPolicy(max_attempts=opts.max_retries + 1), sleep=sleep
        )
        self._executor = ThreadPoolExecutor(
            max_workers=1, thread_name_prefix="logflux-webhook"
        )
        self._in_flight: Set[Future] = set()
        self._in_flight_lock = threading.Lock()

    def _default_serializer(self, entries: List[LogEntry]) -> str:
        return json.dumps(
            {
                "entries": [entry.to_dict() for entry in entries],
                "count": len(entries),
                "timestamp": self._clock(),
            },
            default=str,
        )

    def _deliver_batch(self, batch: List[LogEntry]) -> None:
        try:
            future = self._executor.submit(self.send_batch, batch)
        except RuntimeError:
            # Executor already shut down by close()
            logger.warning(
                "Webhook %s is closed; dropped %d log entries", self.url, len(batch)
            )
            return
        with self._in_flight_lock:
            self._in_flight.add(future)
        future.add_done_callback(self._forget)

    def _forget(self, future: Future) -> None:
        with self._in_flight_lock:
            self._in_flight.discard(future)

    async def _drain(self, batch: List[LogEntry]) -> None:
        if batch:
            self._deliver_batch(batch)
        with self._in_flight_lock:
            in_flight = list(self._in_flight)
        if in_flight:
            await asyncio.gather(
                *(asyncio.wrap_future(f) for f in in_flight), return_exceptions=True
            )

    async def close(self) -> None:
        """Send what is buffered, wait for in-flight requests, release resources."""
        await self.flush()
        self._executor.shutdown(wait=False)
        if self._owns_session:
            self.session.close()

    def send_batch(self, batch: List[LogEntry]) -> bool:
        """Send one batch synchronously, retrying if enabled.

        Returns:
            True if the endpoint accepted the batch. Failures are logged,
            never raised.
        """
        try:
            if self.retry:
                self._retry_manager.execute_with_retry(self._post, batch)
            else:
                self._post(batch)
            return True
        except DeliveryRejectedError as e:
            logger.warning(
                "Webhook %s rejected %d log entries: %s", self.url, len(batch), e.message
            )
        except Exception as e:
            attempts = len(self._retry_manager.attempts) + 1 if self.retry else 1
            failure = DeliveryFailedError(self.name, attempts, f"{type(e).__name__}: {e}")
            logger.error(
                "Webhook %s dropped %d log entries [%s]: %s",
                self.url, len(batch), failure.error_code, failure.message,
            )
        return False

    def _post(self, batch: List[LogEntry]) -> requests.Response:
        response = self.session.request(
            self.method,
            self.url,
            data=self.serializer(batch),
            headers=self.headers,
            timeout=self.timeout,
        )
        status = response.status_code
        if HTTP_STATUS_CLIENT_ERROR_MIN <= status < HTTP_STATUS_SERVER_ERROR_MIN:
            raise DeliveryRejectedError(self.name, status, getattr(response, "reason", None))
        if HTTP_STATUS_SERVER_ERROR_MIN <= status <= HTTP_STATUS_SERVER_ERROR_MAX:
            raise ServerError(self.name, status)
        return response
