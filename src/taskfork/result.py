"""Result values for task outcomes.

Every task outcome, including timeouts and tasks that return ``None``, is
delivered as either ``Success`` or ``Failure``. Nothing here raises on its
own: turning a ``Failure`` back into an exception is always an explicit
call (``get_or_throw()`` or ``get()``).

Example:
    result = attempt(lambda: int("42"))
    doubled = result.map(lambda v: v * 2)
    doubled.get_or_else(0)  # 84
"""

from __future__ import annotations

import dataclasses
import typing

from taskfork.errors import HINTS, IllegalStateError

if typing.TYPE_CHECKING:
    from collections.abc import Callable

TSuccess = typing.TypeVar("TSuccess")
TFailure = typing.TypeVar("TFailure")


def _require_result(value: typing.Any) -> None:
    if not isinstance(value, Success | Failure):
        raise IllegalStateError(
            f"flat_map function returned {type(value).__name__}; expected Success|Failure."
        )


@dataclasses.dataclass(frozen=True, slots=True)
class Success[TSuccess]:
    """A produced value. ``None`` is a valid value and is not a failure."""

    value: TSuccess

    def is_success(self) -> bool:
        return True

    def is_failure(self) -> bool:
        return False

    def has_value(self) -> bool:
        """Return True unless the task produced ``None``."""
        return self.value is not None

    def map(self, fn: Callable[[TSuccess], typing.Any]) -> Result[typing.Any, typing.Any]:
        """Apply ``fn`` to the value; an exception from ``fn`` becomes a Failure."""
        try:
            return Success(fn(self.value))
        except Exception as exc:
            return Failure(exc)

    def flat_map(
        self, fn: Callable[[TSuccess], Result[typing.Any, typing.Any]]
    ) -> Result[typing.Any, typing.Any]:
        """Chain a Result-producing function."""
        try:
            out = fn(self.value)
        except Exception as exc:
            return Failure(exc)
        _require_result(out)
        return out

    def filter(self, predicate: Callable[[TSuccess], bool]) -> Result[TSuccess, typing.Any]:
        """Keep the value when ``predicate`` holds, otherwise become ``Success(None)``."""
        if self.value is None:
            return self
        try:
            keep = predicate(self.value)
        except Exception as exc:
            return Failure(exc)
        return self if keep else Success(None)

    def get(self) -> TSuccess:
        return self.value

    def get_or_else(self, default: typing.Any) -> typing.Any:
        """Return the value, or ``default`` when the value is absent."""
        return default if self.value is None else self.value

    def or_else_get(self, supplier: Callable[[], typing.Any]) -> typing.Any:
        return supplier() if self.value is None else self.value

    def get_or_throw(self) -> TSuccess:
        return self.value

    def on_success(self, fn: Callable[[TSuccess], object]) -> Success[TSuccess]:
        fn(self.value)
        return self

    def on_failure(self, fn: Callable[[typing.Any], object]) -> Success[TSuccess]:
        return self

    def retag_error(self, fn: Callable[[typing.Any], typing.Any]) -> Success[TSuccess]:
        return self


@dataclasses.dataclass(frozen=True, slots=True)
class Failure[TFailure]:
    """A captured failure, already passed through the active failure mapper."""

    error: TFailure

    def is_success(self) -> bool:
        return False

    def is_failure(self) -> bool:
        return True

    def has_value(self) -> bool:
        return False

    def map(self, fn: Callable[[typing.Any], typing.Any]) -> Failure[TFailure]:
        return self

    def flat_map(self, fn: Callable[[typing.Any], typing.Any]) -> Failure[TFailure]:
        return self

    def filter(self, predicate: Callable[[typing.Any], bool]) -> Failure[TFailure]:
        return self

    def get(self) -> typing.NoReturn:
        """Raise IllegalStateError; a Failure carries no value."""
        cause = self.error if isinstance(self.error, BaseException) else None
        raise IllegalStateError(
            f"get() called on Failure({self.error!r})", hint=HINTS["get_on_failure"]
        ) from cause

    def get_or_else(self, default: typing.Any) -> typing.Any:
        return default

    def or_else_get(self, supplier: Callable[[], typing.Any]) -> typing.Any:
        return supplier()

    def get_or_throw(self) -> typing.NoReturn:
        """Raise the carried error.

        Errors that are not exceptions (a mapper may retag failures into any
        type) are wrapped in IllegalStateError.
        """
        if isinstance(self.error, BaseException):
            raise self.error
        raise IllegalStateError(f"Failure({self.error!r})")

    def on_success(self, fn: Callable[[typing.Any], object]) -> Failure[TFailure]:
        return self

    def on_failure(self, fn: Callable[[TFailure], object]) -> Failure[TFailure]:
        fn(self.error)
        return self

    def retag_error(self, fn: Callable[[TFailure], typing.Any]) -> Failure[typing.Any]:
        """Remap only the failure channel."""
        return Failure(fn(self.error))


Result = Success[TSuccess] | Failure[TFailure]


def success(value: typing.Any = None) -> Success[typing.Any]:
    return Success(value)


def failure(error: typing.Any) -> Failure[typing.Any]:
    return Failure(error)


def attempt(
    fn: Callable[[], typing.Any],
    mapper: Callable[[Exception], typing.Any] | None = None,
) -> Result[typing.Any, typing.Any]:
    """Run ``fn`` and capture its outcome.

    Args:
        fn: Zero-argument callable.
        mapper: Optional failure transform applied to a raised exception.

    Returns:
        ``Success`` with the return value, or ``Failure`` with the (mapped)
        exception.
    """
    try:
        return Success(fn())
    except Exception as exc:
        return Failure(mapper(exc) if mapper is not None else exc)
