"""
Continuation-scoped logging context.

AsyncContext keeps a frame of key/value pairs in a ``contextvars.ContextVar``.
A frame entered with ``scope()`` or ``run_in_scope()`` is visible to
everything running inside it, including code that resumes after an
``await`` and tasks created inside the scope. Concurrent tasks each carry
their own copy of the context, so sibling scopes never see each other.

Usage:
    ctx = AsyncContext()
    logger = create_logger(middleware=[ctx.middleware], transports=[...])

    async def handle(request):
        with ctx.scope(request_id=request.id, user_id=request.user):
            logger.info("Handling request")
            await charge(request)
            logger.info("Charged")  # still carries request_id and user_id
"""

import functools
import inspect
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Any, Awaitable, Callable, Dict, Iterator, Optional

from logflux.constants import DEFAULT_REQUEST_ID_KEY
from logflux.core.models import LogEntry
from logflux.core.pipeline import Next

Frame = Dict[str, Any]


class AsyncContext:
    """Ambient context frames plus the middleware that injects them."""

    def __init__(self, request_key: str = DEFAULT_REQUEST_ID_KEY, name: str = "logflux_context"):
        self.request_key = request_key
        self._frame: ContextVar[Optional[Frame]] = ContextVar(name, default=None)
        # Stable reference so it can be passed to remove_middleware()
        self.middleware = self._inject

    def current_frame(self) -> Optional[Frame]:
        """The active frame, or None outside any scope."""
        return self._frame.get()

    @contextmanager
    def scope(self, values: Optional[Frame] = None, **fields) -> Iterator[Frame]:
        """Enter a frame layered over the current one (new keys win)."""
        parent = self._frame.get()
        frame = {**(parent or {}), **(values or {}), **fields}
        token = self._frame.set(frame)
        try:
            yield frame
        finally:
            self._frame.reset(token)

    def run_in_scope(self, values: Frame, fn: Callable, *args, **kwargs):
        """Run ``fn`` inside a new frame.

        ``fn`` is called inside the frame. If it returns an awaitable (a
        coroutine function, an object with ``async def __call__``, a lambda
        returning a coroutine), a coroutine is returned that awaits it with
        the same frame active across every suspension. Otherwise the plain
        result is returned.
        """
        with self.scope(values) as frame:
            result = fn(*args, **kwargs)
        if inspect.isawaitable(result):
            return self._await_in_frame(frame, result)
        return result

    async def _await_in_frame(self, frame: Frame, awaitable: Awaitable[Any]) -> Any:
        token = self._frame.set(frame)
        try:
            return await awaitable
        finally:
            self._frame.reset(token)

    def merge(self, values: Optional[Frame] = None, **fields) -> None:
        """Update the active frame in place; no-op outside any scope."""
        frame = self._frame.get()
        if frame is not None:
            frame.update(values or {})
            frame.update(fields)

    def bind(self, values: Optional[Frame] = None, **fields) -> Callable:
        """Decorator running the wrapped function inside a frame."""
        frame_values = {**(values or {}), **fields}

        def decorator(func: Callable) -> Callable:
            if inspect.iscoroutinefunction(func):
                @functools.wraps(func)
                async def async_wrapper(*args, **kwargs):
                    with self.scope(frame_values):
                        return await func(*args, **kwargs)
                return async_wrapper

            @functools.wraps(func)
            def wrapper(*args, **kwargs):
                with self.scope(frame_values):
                    return func(*args, **kwargs)
            return wrapper

        return decorator

    def _inject(self, entry: LogEntry, next_: Next) -> None:
        frame = self._frame.get()
        if frame:
            for key, value in frame.items():
                # Explicit per-call metadata wins
                if key not in entry.meta:
                    entry.meta[key] = value

            request_id = frame.get(self.request_key)
            if request_id and not entry.correlation_id:
                entry.correlation_id = str(request_id)

        next_(entry)
