"""
Pipeline: middleware composition and transport fan-out.

Middleware are called in order with ``(entry, next)``. A middleware that
never calls ``next`` drops the entry. Entries that reach the end of the
chain are fanned out to every transport whose level filter they pass.
"""

import inspect
import logging
from typing import Callable, Iterable, List, Union

from logflux.constants import INTERNAL_LOGGER_NAME

from .dispatch import run_detached
from .levels import resolve_level, should_log
from .models import LogEntry

internal_logger = logging.getLogger(INTERNAL_LOGGER_NAME)

Next = Callable[[LogEntry], None]
Middleware = Callable[[LogEntry, Next], None]


def compose_middleware(middleware: List[Middleware], final: Next) -> Next:
    """Build a single entry point from an ordered list of middleware.

    The list is copied, so later edits to ``middleware`` do not affect the
    returned function.
    """
    if not middleware:
        return final

    chain = list(middleware)

    def run(entry: LogEntry) -> None:
        index = 0

        def next_(current: LogEntry) -> None:
            nonlocal index
            if index < len(chain):
                step = chain[index]
                index += 1
                step(current, next_)
            else:
                final(current)

        next_(entry)

    return run


def fan_out(
    entry: LogEntry,
    transports: Iterable,
    logger_level: Union[int, float],
) -> None:
    """Deliver ``entry`` to every transport whose threshold it passes.

    Each transport gets its own failure boundary: synchronous exceptions are
    caught here and awaitable results are detached with their errors dropped.
    """
    for transport in transports:
        configured = getattr(transport, "level", None)
        threshold = resolve_level(configured) if configured else logger_level
        if not should_log(entry.level, threshold):
            continue

        try:
            result = transport.deliver(entry)
        except Exception as e:
            internal_logger.debug(
                "Transport %s failed: %s: %s",
                getattr(transport, "name", transport), type(e).__name__, e,
            )
            continue

        if inspect.isawaitable(result):
            run_detached(result)
