"""
Error serialization.

Turns an exception into a SerializedError tree. The cause chain is followed
through ``__cause__`` (or the implicit ``__context__``) and cut off at
MAX_CAUSE_DEPTH links so cyclic or very deep chains always terminate.
Exceptions that fail to render degrade to a placeholder instead of raising.
"""

import traceback
from typing import Optional

from logflux.constants import MAX_CAUSE_DEPTH

from .models import SerializedError


def _safe_str(value: object) -> str:
    try:
        return str(value)
    except Exception:
        return f"<unprintable {type(value).__name__}>"


def _error_code(err: BaseException) -> Optional[str]:
    try:
        code = getattr(err, "code", None)
        if code is None:
            code = getattr(err, "errno", None)
    except Exception:
        return None
    return None if code is None else _safe_str(code)


def _format_stack(err: BaseException) -> str:
    return "".join(traceback.format_exception(type(err), err, err.__traceback__))


def _next_cause(err: BaseException) -> Optional[BaseException]:
    if err.__cause__ is not None:
        return err.__cause__
    if err.__context__ is not None and not err.__suppress_context__:
        return err.__context__
    return None


def serialize_error(
    err: BaseException, include_stack: bool, depth: int = 0
) -> SerializedError:
    """Serialize ``err`` and up to MAX_CAUSE_DEPTH chained causes.

    Args:
        err: The exception to capture
        include_stack: Whether to attach the formatted traceback
        depth: Current recursion depth; callers pass the default

    Returns:
        SerializedError tree with no ``cause`` at the truncation point
    """
    serialized = SerializedError(
        message=_safe_str(err),
        name=type(err).__name__,
        code=_error_code(err),
    )
    if include_stack:
        serialized.stack = _format_stack(err)

    cause = _next_cause(err)
    if isinstance(cause, BaseException) and depth < MAX_CAUSE_DEPTH:
        serialized.cause = serialize_error(cause, include_stack, depth + 1)

    return serialized
