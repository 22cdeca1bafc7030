"""Folding helpers over ordered sequences of results.

Two policies are offered. Lenient folding substitutes a fallback for every
failure and every absent success, and always completes. Fail-fast folding
stops at the first failure in scan order and reports it; absent successes
are skipped. Both consume the iterable lazily, so when given
``Fork.stream()`` the fail-fast fold does not wait on handles after the
first failure.

The reducer is assumed associative; that is not checked.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Final

from taskfork._validation import _require_callable
from taskfork.result import Failure, Result, Success

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable


class _Missing:
    __slots__ = ()

    def __repr__(self) -> str:
        return "MISSING"


#: Sentinel meaning "no initial value": the fold starts from the first element.
MISSING: Final[Any] = _Missing()


def _fold(
    values: Iterable[Any], reducer: Callable[[Any, Any], Any], initial: Any
) -> Any:
    acc = initial
    for v in values:
        acc = v if acc is MISSING else reducer(acc, v)
    return None if acc is MISSING else acc


def fold_lenient(
    results: Iterable[Result[Any, Any]],
    reducer: Callable[[Any, Any], Any],
    fallback: Any,
    *,
    initial: Any = MISSING,
) -> Any:
    """Fold success values in order, using ``fallback`` for the rest.

    Failures and successes without a value (``Success(None)``) both
    contribute ``fallback``, so the reducer never sees ``None`` from a task.

    Returns ``initial`` (or ``None`` when no initial is given) for an empty
    input.
    """
    _require_callable(reducer, "reducer")
    return _fold(
        (r.value if r.has_value() else fallback for r in results),
        reducer,
        initial,
    )


def fold_or_fail(
    results: Iterable[Result[Any, Any]],
    reducer: Callable[[Any, Any], Any],
    *,
    initial: Any = MISSING,
) -> Result[Any, Any]:
    """Fold success values in order, stopping at the first failure.

    Returns:
        The first ``Failure`` met while scanning, or ``Success`` of the
        folded value. Absent successes are not folded. Values folded
        before the failure are discarded.
    """
    _require_callable(reducer, "reducer")
    acc = initial
    for r in results:
        if isinstance(r, Failure):
            return r
        if not r.has_value():
            continue
        acc = r.value if acc is MISSING else reducer(acc, r.value)
    return Success(None if acc is MISSING else acc)


def successes(results: Iterable[Result[Any, Any]]) -> list[Any]:
    """Return the values of successes that carry a value, in order."""
    return [r.value for r in results if isinstance(r, Success) and r.has_value()]


def failures(results: Iterable[Result[Any, Any]]) -> list[Any]:
    """Return the errors of all failures, in order."""
    return [r.error for r in results if isinstance(r, Failure)]


def partition(
    results: Iterable[Result[Any, Any]],
) -> tuple[list[Success[Any]], list[Failure[Any]]]:
    """Split results into (successes, failures), each keeping scan order."""
    ok: list[Success[Any]] = []
    bad: list[Failure[Any]] = []
    for r in results:
        (ok if isinstance(r, Success) else bad).append(r)
    return ok, bad
