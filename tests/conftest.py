"""Pytest configuration and fixtures.

Provides environment isolation, logging configuration, a shared thread
pool, and task builders used across the suite.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator
from concurrent.futures import ThreadPoolExecutor
from contextlib import suppress
from dataclasses import dataclass, field
import logging
import os
import threading
import time
from typing import Any

import pytest

# =============================================================================
# Test Doubles
# =============================================================================


@dataclass
class TaskFactory:
    """Builds zero-argument tasks with controllable timing and outcomes.

    Every task built here counts its executions, and ``gate`` tasks block on
    a shared event that teardown releases so pools can shut down cleanly.
    """

    gate: threading.Event = field(default_factory=threading.Event)
    calls: int = 0
    threads: list[threading.Thread] = field(default_factory=list)
    _lock: threading.Lock = field(default_factory=threading.Lock)

    def _record(self) -> None:
        with self._lock:
            self.calls += 1
            self.threads.append(threading.current_thread())

    def value(self, v: Any) -> Callable[[], Any]:
        def task() -> Any:
            self._record()
            return v

        return task

    def delayed(self, v: Any, seconds: float) -> Callable[[], Any]:
        def task() -> Any:
            self._record()
            time.sleep(seconds)
            return v

        return task

    def failing(self, exc: BaseException) -> Callable[[], Any]:
        def task() -> Any:
            self._record()
            raise exc

        return task

    def blocked(self, v: Any) -> Callable[[], Any]:
        """Return a task that waits for ``gate`` before returning ``v``."""

        def task() -> Any:
            self._record()
            self.gate.wait(timeout=10)
            return v

        return task


@pytest.fixture
def tasks() -> Iterator[TaskFactory]:
    factory = TaskFactory()
    yield factory
    factory.gate.set()


@pytest.fixture
def pool(tasks: TaskFactory) -> Iterator[ThreadPoolExecutor]:
    """Caller-owned pool; torn down after the task gate is released."""
    executor = ThreadPoolExecutor(max_workers=8, thread_name_prefix="test-pool")
    yield executor
    tasks.gate.set()
    executor.shutdown(wait=True)


# =============================================================================
# Environment Isolation (Autouse)
# =============================================================================


@pytest.fixture(autouse=True)
def block_dotenv(request, monkeypatch):
    """Prevent python-dotenv from loading project .env files during tests.

    Opt-out: @pytest.mark.allow_dotenv
    """
    if request.node.get_closest_marker("allow_dotenv"):
        return
    with suppress(Exception):
        monkeypatch.setattr(
            "taskfork.config.core.load_dotenv",
            lambda *_args, **_kwargs: False,
            raising=False,
        )


@pytest.fixture(autouse=True)
def isolate_taskfork_env(request, monkeypatch):
    """Clear TASKFORK_* variables so configuration tests start from defaults.

    Opt-out: @pytest.mark.allow_env_pollution
    """
    if request.node.get_closest_marker("allow_env_pollution"):
        return
    for key in list(os.environ.keys()):
        if key.startswith("TASKFORK_"):
            monkeypatch.delenv(key, raising=False)


# =============================================================================
# Logging
# =============================================================================


@pytest.fixture(scope="session", autouse=True)
def quiet_noisy_libraries():
    """Suppress noisy third-party loggers."""
    logging.getLogger("concurrent.futures").setLevel(logging.WARNING)
