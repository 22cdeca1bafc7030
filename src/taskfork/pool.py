"""Default worker pool construction.

Callers normally own their executor. These helpers exist for the
convenience path (``Fork.default()``) and keep a single source of truth
for how a default pool is sized.
"""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
import logging
import os
from typing import TYPE_CHECKING

from taskfork.config import resolve_config

if TYPE_CHECKING:
    from taskfork.config import FrozenConfig

log = logging.getLogger(__name__)


def resolve_worker_count(cfg: FrozenConfig, *, cpu_count: int | None = None) -> int:
    """Resolve the thread count for a default pool.

    Priority:
    1) ``cfg.max_workers`` when set.
    2) Available hardware parallelism (``os.cpu_count()``).
    3) 1 when the platform cannot report a CPU count.
    """
    if cfg.max_workers is not None and cfg.max_workers > 0:
        return cfg.max_workers
    detected = cpu_count if cpu_count is not None else os.cpu_count()
    return detected if detected and detected > 0 else 1


def default_pool(config: FrozenConfig | None = None) -> ThreadPoolExecutor:
    """Build a fixed-size thread pool. The caller owns and must shut it down."""
    cfg = config if config is not None else resolve_config()
    workers = resolve_worker_count(cfg)
    log.debug(
        "Creating default pool: workers=%d prefix=%s", workers, cfg.thread_name_prefix
    )
    return ThreadPoolExecutor(
        max_workers=workers, thread_name_prefix=cfg.thread_name_prefix
    )
