"""Default pool sizing and owned-pool lifecycle."""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
import threading

import pytest

from taskfork import Fork, Success
from taskfork.config import FrozenConfig, resolve_config
from taskfork.pool import default_pool, resolve_worker_count

pytestmark = pytest.mark.unit


def _cfg(**kw) -> FrozenConfig:
    return resolve_config(kw)


def test_configured_workers_win() -> None:
    assert resolve_worker_count(_cfg(max_workers=3), cpu_count=16) == 3


def test_falls_back_to_cpu_count() -> None:
    assert resolve_worker_count(_cfg(), cpu_count=12) == 12


def test_unknown_cpu_count_means_one(monkeypatch) -> None:
    monkeypatch.setattr("taskfork.pool.os.cpu_count", lambda: None)
    assert resolve_worker_count(_cfg()) == 1


def test_default_pool_uses_prefix() -> None:
    pool = default_pool(_cfg(max_workers=2, thread_name_prefix="unit"))
    try:
        name = pool.submit(lambda: threading.current_thread().name)
        assert name.result(timeout=5).startswith("unit")
    finally:
        pool.shutdown()


def test_default_fork_owns_and_releases_pool() -> None:
    with Fork.default(_cfg(max_workers=2, default_deadline_s=5)) as fork:
        assert fork.owns_pool
        assert fork.deadline_s == 5
        assert fork.submit(lambda: "X").join() == [Success("X")]

    # The pool is shut down: new submissions are captured as failures.
    (after,) = fork.submit(lambda: "Y").join()
    assert isinstance(after.error, RuntimeError)


def test_shutdown_leaves_borrowed_pool_alone() -> None:
    pool = ThreadPoolExecutor(max_workers=1)
    try:
        fork = Fork.create(pool)
        fork.shutdown()
        assert fork.submit(lambda: 1).join() == [Success(1)]
    finally:
        pool.shutdown()


def test_default_reads_environment(monkeypatch) -> None:
    monkeypatch.setenv("TASKFORK_DEFAULT_DEADLINE_S", "0.5")
    fork = Fork.default()
    try:
        assert fork.deadline_s == 0.5
    finally:
        fork.shutdown()


def test_default_tolerates_unrelated_env_variable(monkeypatch) -> None:
    monkeypatch.setenv("TASKFORK_DEBUG", "1")
    with pytest.warns(UserWarning, match="TASKFORK_DEBUG"):
        fork = Fork.default()
    with fork:
        assert fork.submit(lambda: "ok").join() == [Success("ok")]
