"""taskfork: fan-out/fan-in of blocking tasks with typed results.

Public API:
    - Fork: immutable builder; submit tasks, then stream/join/collect
    - Success / Failure: typed outcome of every task
    - fold_lenient / fold_or_fail: aggregation over result sequences
    - resolve_config / default_pool: convenience pool construction

Example:
    with ThreadPoolExecutor() as pool:
        results = Fork.create(pool).submit(load_a, load_b).join()
        for result in results:
            result.on_failure(log_error)
"""

from __future__ import annotations

import logging

from taskfork.aggregate import (
    MISSING,
    failures,
    fold_lenient,
    fold_or_fail,
    partition,
    successes,
)
from taskfork.config import FrozenConfig, Settings, resolve_config
from taskfork.errors import (
    ConfigurationError,
    IllegalStateError,
    InvalidArgumentError,
    TaskforkError,
    TaskTimeoutError,
    WaitInterruptedError,
)
from taskfork.fork import Fork
from taskfork.pool import default_pool, resolve_worker_count
from taskfork.result import Failure, Result, Success, attempt, failure, success

try:
    from importlib.metadata import PackageNotFoundError, version

    __version__ = version("taskfork")
except PackageNotFoundError:
    __version__ = "0.0.0+unknown"

# Library-level NullHandler: stay silent unless the consumer configures logging.
logging.getLogger("taskfork").addHandler(logging.NullHandler())

__all__ = [
    "MISSING",
    "ConfigurationError",
    "Failure",
    "Fork",
    "FrozenConfig",
    "IllegalStateError",
    "InvalidArgumentError",
    "Result",
    "Settings",
    "Success",
    "TaskTimeoutError",
    "TaskforkError",
    "WaitInterruptedError",
    "attempt",
    "default_pool",
    "failure",
    "failures",
    "fold_lenient",
    "fold_or_fail",
    "partition",
    "resolve_config",
    "resolve_worker_count",
    "success",
    "successes",
]
