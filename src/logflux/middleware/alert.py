"""
Alert middleware.

Evaluates every entry against a list of rules. A rule fires its callback
once ``threshold`` matching entries have been seen within ``window_ms``
(measured on entry timestamps), then stays quiet for ``cooldown_ms``.
Entries always continue down the chain; alerting never drops anything.
"""

import inspect
import logging
import math
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Dict, List, Optional

from logflux.constants import INTERNAL_LOGGER_NAME
from logflux.core.dispatch import run_detached
from logflux.core.models import LogEntry
from logflux.core.pipeline import Next

logger = logging.getLogger(INTERNAL_LOGGER_NAME)


@dataclass
class AlertRule:
    """A named alert condition.

    Attributes:
        name: Unique rule name
        when: Predicate selecting the entries this rule counts
        on_alert: Called with the matching entries when the rule fires; may
            be a coroutine function
        threshold: Matching entries needed to fire
        window_ms: Counting window; None counts without expiry
        cooldown_ms: Minimum time between two firings
    """

    name: str
    when: Callable[[LogEntry], bool]
    on_alert: Callable[[List[LogEntry]], Optional[Awaitable[Any]]]
    threshold: int = 1
    window_ms: Optional[int] = None
    cooldown_ms: int = 0


@dataclass
class _RuleState:
    entries: List[LogEntry] = field(default_factory=list)
    last_fired: float = -math.inf


class AlertMiddleware:
    def __init__(self, rules: List[AlertRule]):
        self.rules = list(rules)
        self._states: Dict[str, _RuleState] = {rule.name: _RuleState() for rule in self.rules}

    def __call__(self, entry: LogEntry, next_: Next) -> None:
        now = entry.timestamp
        for rule in self.rules:
            if not rule.when(entry):
                continue

            state = self._states[rule.name]
            if rule.window_ms is not None:
                state.entries = [e for e in state.entries if now - e.timestamp < rule.window_ms]
            state.entries.append(entry)

            if len(state.entries) >= rule.threshold and now - state.last_fired >= rule.cooldown_ms:
                fired, state.entries = state.entries, []
                state.last_fired = now
                self._fire(rule, fired)

        next_(entry)

    def _fire(self, rule: AlertRule, entries: List[LogEntry]) -> None:
        try:
            result = rule.on_alert(entries)
        except Exception as e:
            logger.debug("Alert rule %r callback failed: %s", rule.name, e)
            return
        if inspect.isawaitable(result):
            run_detached(_guard(rule.name, result))


async def _guard(name: str, awaitable: Awaitable[Any]) -> None:
    try:
        await awaitable
    except Exception as e:
        logger.debug("Alert rule %r callback failed: %s", name, e)
