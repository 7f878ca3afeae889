"""
Detached execution of awaitables returned by transports and callbacks.

Delivery is fire-and-forget: when a sink returns an awaitable it is run
without blocking the logging call. Inside a running event loop it becomes a
task on that loop; from plain synchronous code it is handed to a shared
background loop thread. Failures are read and dropped so they never surface
as "exception was never retrieved" warnings or reach the caller.
"""

import asyncio
import concurrent.futures
import inspect
import logging
import threading
from typing import Any, Awaitable, Optional, Set

from logflux.constants import INTERNAL_LOGGER_NAME

internal_logger = logging.getLogger(INTERNAL_LOGGER_NAME)

# Strong references so detached tasks are not garbage collected mid-flight
_detached_tasks: Set["asyncio.Task[Any]"] = set()
# Futures running on the background loop, settled by wait_detached() too
_background_futures: Set["concurrent.futures.Future[Any]"] = set()
_background_lock = threading.Lock()


class _BackgroundLoop:
    """Lazily started event loop running in a daemon thread."""

    def __init__(self):
        self._lock = threading.Lock()
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._thread: Optional[threading.Thread] = None

    def get_loop(self) -> asyncio.AbstractEventLoop:
        with self._lock:
            if self._loop is None or self._loop.is_closed():
                self._loop = asyncio.new_event_loop()
                self._thread = threading.Thread(
                    target=self._loop.run_forever,
                    name="logflux-dispatch",
                    daemon=True,
                )
                self._thread.start()
            return self._loop

    def current_loop(self) -> Optional[asyncio.AbstractEventLoop]:
        return self._loop


_background = _BackgroundLoop()


async def _await(awaitable: Awaitable[Any]) -> Any:
    return await awaitable


def _report(future) -> None:
    if future.cancelled():
        return
    exc = future.exception()
    if exc is not None:
        internal_logger.debug(
            "Detached delivery failed: %s: %s", type(exc).__name__, exc
        )


def run_detached(awaitable: Awaitable[Any]):
    """Run ``awaitable`` without waiting for it; its failure is swallowed.

    Returns the task or concurrent future tracking it.
    """
    try:
        loop = asyncio.get_running_loop()
    except RuntimeError:
        loop = None

    if loop is not None:
        task = loop.create_task(_await(awaitable))
        _detached_tasks.add(task)
        task.add_done_callback(_detached_tasks.discard)
        task.add_done_callback(_report)
        return task

    future = asyncio.run_coroutine_threadsafe(_await(awaitable), _background.get_loop())
    with _background_lock:
        _background_futures.add(future)
    future.add_done_callback(_forget_background)
    future.add_done_callback(_report)
    return future


def _forget_background(future) -> None:
    with _background_lock:
        _background_futures.discard(future)


async def wait_detached() -> None:
    """Wait for detached work to settle.

    Covers tasks started on the running loop and everything handed to the
    background loop from synchronous code. Tasks belonging to some other
    event loop cannot be awaited here and are skipped.
    """
    loop = asyncio.get_running_loop()
    pending = [
        task for task in list(_detached_tasks)
        if task.get_loop() is loop and not task.done()
    ]
    background = []
    if loop is not _background.current_loop():
        with _background_lock:
            background = [f for f in _background_futures if not f.done()]
    pending.extend(asyncio.wrap_future(f) for f in background)
    if pending:
        await asyncio.gather(*pending, return_exceptions=True)


async def maybe_await(result: Any) -> Any:
    """Await ``result`` if it is awaitable, otherwise return it as is."""
    if inspect.isawaitable(result):
        return await result
    return result
