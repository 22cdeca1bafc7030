"""Exception hierarchy for taskfork.

Failures produced by tasks travel as ``Failure`` values; the classes below
are either raised for caller mistakes (bad arguments, reading a value that
is not there) or carried inside ``Failure`` for the wait-side outcomes
(deadline breach, interrupted wait).
"""

from __future__ import annotations


class TaskforkError(Exception):
    """Base exception for all taskfork errors."""

    def __init__(self, message: str | None, *, hint: str | None = None) -> None:
        self.hint = hint
        super().__init__(str(message) if message is not None else "None")

    def __str__(self) -> str:
        """Return the message followed by the hint, when one is set."""
        msg = super().__str__()
        return f"{msg}. {self.hint}" if self.hint else msg


class InvalidArgumentError(TaskforkError, ValueError):
    """An argument failed validation (missing pool, non-callable task, ...)."""


class IllegalStateError(TaskforkError):
    """An operation was requested in a state that cannot satisfy it."""


class ConfigurationError(TaskforkError):
    """Configuration validation or resolution failed."""


class TaskTimeoutError(TaskforkError, TimeoutError):
    """The configured deadline elapsed before a handle resolved.

    The task itself is not cancelled; it keeps running on the pool until it
    finishes on its own.
    """

    def __init__(
        self,
        message: str,
        *,
        hint: str | None = None,
        deadline_s: float | None = None,
        index: int | None = None,
    ) -> None:
        super().__init__(message, hint=hint)
        self.deadline_s = deadline_s
        self.index = index


class WaitInterruptedError(TaskforkError):
    """The wait ended because the handle was cancelled before resolving."""

    def __init__(
        self,
        message: str,
        *,
        hint: str | None = None,
        index: int | None = None,
    ) -> None:
        super().__init__(message, hint=hint)
        self.index = index


HINTS = {
    "missing_pool": (
        "Pass a concurrent.futures.Executor, or use Fork.default() to let "
        "taskfork build and own a thread pool."
    ),
    "timeout": (
        "The task is still running on the pool; raise the deadline or size "
        "the pool for slow tasks."
    ),
    "cancelled": "The pool was shut down with cancel_futures=True before the task ran.",
    "get_on_failure": "Check is_success() first, or use get_or_else()/get_or_throw().",
}
