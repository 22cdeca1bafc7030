"""Fork: fan-out blocking tasks onto a shared executor, fan results back in.

A ``Fork`` is an immutable value. Every configuration call (``submit``,
``with_deadline``, ``with_failure_mapper``) returns a new ``Fork`` that
shares the executor and the already-created handles with its parent; the
handle tuple itself is copy-on-append, so forks held by different threads
never observe each other's submissions.

Submission is eager: each task is handed to the executor before
``submit`` returns. Observation is ordered: ``stream()`` yields one result
per task in submission order, blocking on each handle in turn.

Notes on deadlines:
- A deadline bounds how long the *caller* waits for one handle. It does
  not cancel the task; a timed-out task keeps occupying a worker until it
  finishes. Size the pool with that in mind.
- Each handle gets the full deadline, measured from when its wait starts.

Example:
    with ThreadPoolExecutor() as pool:
        text = (
            Fork.create(pool)
            .submit(lambda: "X", lambda: "Y")
            .with_deadline(2.0)
            .collect(operator.add, "E")
        )
"""

from __future__ import annotations

from concurrent.futures import CancelledError, Executor, Future
import dataclasses
from dataclasses import dataclass, field
import logging
from typing import TYPE_CHECKING, Any, Literal, Self

from taskfork._validation import (
    _require,
    _require_callable,
    _require_zero_arg_callable,
    _to_seconds,
)
from taskfork.aggregate import MISSING, fold_lenient, fold_or_fail
from taskfork.config import resolve_config
from taskfork.errors import HINTS, TaskTimeoutError, WaitInterruptedError
from taskfork.pool import default_pool
from taskfork.result import Failure, Result, Success, attempt

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable, Iterator
    from datetime import timedelta
    from types import TracebackType

    from taskfork.config import FrozenConfig

log = logging.getLogger(__name__)

# A handle is the outcome of handing a task to the executor: the Future on
# success, or the raw exception ``Executor.submit`` raised.
Handle = Result[Future[Any], BaseException]


def _identity(error: Any) -> Any:
    return error


@dataclass(frozen=True)
class Fork[T, E]:
    """Immutable builder for one flat round of submission and collection.

    Attributes:
        pool: Executor the tasks run on; shared, never copied.
        handles: One handle per submitted task, in submission order.
        failure_mapper: Transform applied to every raw failure when it is
            observed. Replacing it retags already-captured failures.
        deadline_s: Per-handle wait bound in seconds, or None to wait
            indefinitely.
        owns_pool: True only for forks built by ``Fork.default()``.
    """

    pool: Executor
    handles: tuple[Handle, ...] = ()
    failure_mapper: Callable[[Any], E] = field(default=_identity, repr=False)
    deadline_s: float | None = None
    owns_pool: bool = False

    # --- Construction ---

    @classmethod
    def create(cls, pool: Executor) -> Fork[Any, BaseException]:
        """Create an empty fork on a caller-owned executor.

        Raises:
            InvalidArgumentError: If ``pool`` is None or has no ``submit``.
        """
        _require(
            condition=pool is not None,
            message="an executor is required",
            field_name="pool",
            hint=HINTS["missing_pool"],
        )
        _require(
            condition=callable(getattr(pool, "submit", None)),
            message=f"expected an Executor, got {type(pool).__name__}",
            field_name="pool",
            hint=HINTS["missing_pool"],
        )
        return cls(pool=pool)

    @classmethod
    def default(cls, config: FrozenConfig | None = None) -> Fork[Any, BaseException]:
        """Create a fork on a new thread pool that the fork owns.

        The pool is sized from ``config.max_workers`` or the CPU count, and
        ``config.default_deadline_s`` becomes the initial deadline. Release
        the pool with ``shutdown()`` or by using the fork as a context
        manager.
        """
        cfg = config if config is not None else resolve_config()
        return cls(
            pool=default_pool(cfg),
            deadline_s=cfg.default_deadline_s,
            owns_pool=True,
        )

    # --- Configuration (each returns a new Fork) ---

    def submit(self, *tasks: Callable[[], T]) -> Fork[T, E]:
        """Submit zero-argument callables; see ``submit_all``."""
        return self.submit_all(tasks)

    def submit_all(self, tasks: Iterable[Callable[[], T]]) -> Fork[T, E]:
        """Hand every task to the executor now and append one handle each.

        All tasks are validated before any is submitted. A task the
        executor refuses (e.g. after shutdown) gets a handle that resolves
        to a failure instead of raising here.
        """
        batch = tuple(tasks)
        for i, task in enumerate(batch):
            _require_zero_arg_callable(task, f"tasks[{i}]")

        added = tuple(self._enqueue(task) for task in batch)
        log.debug(
            "Submitted %d task(s); %d handle(s) total",
            len(added),
            len(self.handles) + len(added),
        )
        return dataclasses.replace(self, handles=self.handles + added)

    def with_deadline(self, duration: float | timedelta | None) -> Fork[T, E]:
        """Bound each subsequent wait to ``duration`` (seconds or timedelta).

        ``None`` removes the bound. Results already produced are unaffected.
        """
        return dataclasses.replace(self, deadline_s=_to_seconds(duration, "duration"))

    def with_failure_mapper[X](self, mapper: Callable[[Any], X]) -> Fork[T, X]:
        """Replace the failure transform.

        ``mapper`` always receives the raw failure (task exception,
        ``TaskTimeoutError``, ``WaitInterruptedError`` or a submission
        error), so mappers replace each other rather than compose.
        """
        _require_callable(mapper, "mapper")
        return dataclasses.replace(self, failure_mapper=mapper)  # type: ignore[arg-type]

    # --- Observation ---

    @property
    def size(self) -> int:
        """Number of tasks submitted so far."""
        return len(self.handles)

    def stream(self) -> Iterator[Result[T, E]]:
        """Lazily yield one result per handle, in submission order.

        Each step blocks the calling thread until that handle resolves or
        the deadline elapses. A failure never stops the stream.
        """
        for index, handle in enumerate(self.handles):
            yield self._await(index, handle)

    def join(self) -> list[Result[T, E]]:
        """Wait for every handle and return all results in submission order."""
        return list(self.stream())

    def collect(
        self,
        reducer: Callable[[Any, Any], Any],
        fallback: Any,
        *,
        initial: Any = MISSING,
    ) -> Any:
        """Fold success values with ``reducer``.

        Failures and absent values (tasks that returned ``None``) contribute
        ``fallback``, so the fold always completes.
        """
        return fold_lenient(self.stream(), reducer, fallback, initial=initial)

    def collect_or_fail(
        self,
        reducer: Callable[[Any, Any], Any],
        *,
        initial: Any = MISSING,
    ) -> Result[Any, E]:
        """Fold success values, or return the first failure in submission order.

        Handles after the first failure are not waited on.
        """
        return fold_or_fail(self.stream(), reducer, initial=initial)

    # --- Owned pool lifecycle ---

    def shutdown(self, *, wait: bool = True) -> None:
        """Shut down the pool if this fork created it; no-op otherwise."""
        if not self.owns_pool:
            return
        log.debug("Shutting down owned pool (wait=%s)", wait)
        self.pool.shutdown(wait=wait)

    def __enter__(self) -> Self:
        return self

    def __exit__(
        self,
        _: type[BaseException] | None,
        __: BaseException | None,
        ___: TracebackType | None,
    ) -> Literal[False]:
        self.shutdown()
        return False

    # --- Internals ---

    def _enqueue(self, task: Callable[[], T]) -> Handle:
        return attempt(lambda: self.pool.submit(task))

    def _await(self, index: int, handle: Handle) -> Result[T, E]:
        if isinstance(handle, Failure):
            return handle.retag_error(self.failure_mapper)

        future = handle.value
        raw: BaseException
        # exception() returns the task's own error; it raises only for the wait.
        try:
            exc = future.exception(timeout=self.deadline_s)
        except CancelledError:
            raw = WaitInterruptedError(
                f"Task {index} was cancelled before completing",
                hint=HINTS["cancelled"],
                index=index,
            )
        except TimeoutError:
            log.debug("Task %d exceeded deadline of %ss", index, self.deadline_s)
            raw = TaskTimeoutError(
                f"Task {index} did not complete within {self.deadline_s}s",
                hint=HINTS["timeout"],
                deadline_s=self.deadline_s,
                index=index,
            )
        else:
            if exc is None:
                return Success(future.result())
            raw = exc
        return Failure(self.failure_mapper(raw))
