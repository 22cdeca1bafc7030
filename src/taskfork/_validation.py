"""Internal validation helpers shared by the builder and result modules.

These helpers centralize argument checks so that every public entry point
reports mistakes with the same exception type and message shape.
"""

from __future__ import annotations

from datetime import timedelta
import inspect
import typing

from taskfork.errors import InvalidArgumentError


def _require(
    *,
    condition: bool,
    message: str,
    field_name: str | None = None,
    hint: str | None = None,
) -> None:
    """Centralized validation with optional field context for clearer errors."""
    if condition:
        return
    if field_name:
        message = f"{field_name}: {message}"
    raise InvalidArgumentError(message, hint=hint)


def _require_callable(func: typing.Any, field_name: str) -> None:
    _require(condition=callable(func), message="must be callable", field_name=field_name)


def _require_zero_arg_callable(func: typing.Any, field_name: str) -> None:
    """Validate callable takes no arguments for predictable execution."""
    _require_callable(func, field_name)

    try:
        sig = inspect.signature(func)
    except (ValueError, TypeError):
        # Some builtins have no introspectable signature; accept them as-is.
        return
    has_required_params = any(
        p.default is p.empty
        and p.kind in (p.POSITIONAL_ONLY, p.POSITIONAL_OR_KEYWORD, p.KEYWORD_ONLY)
        for p in sig.parameters.values()
    )
    _require(
        condition=not has_required_params,
        message="must be a zero-argument callable",
        field_name=field_name,
    )


def _to_seconds(duration: float | timedelta | None, field_name: str) -> float | None:
    """Normalize a deadline to non-negative seconds, or None for no deadline."""
    if duration is None:
        return None
    if isinstance(duration, timedelta):
        seconds = duration.total_seconds()
    else:
        _require(
            condition=isinstance(duration, (int, float))
            and not isinstance(duration, bool),
            message=f"expected seconds or timedelta, got {type(duration).__name__}",
            field_name=field_name,
        )
        seconds = float(duration)
    _require(
        condition=seconds >= 0,
        message=f"must be >= 0, got {seconds}",
        field_name=field_name,
    )
    return seconds
