# src/taskfork/config/__init__.py

"""Configuration management.

Resolve-once, freeze-then-flow: ``resolve_config`` validates environment
and override values through ``Settings`` and returns an immutable
``FrozenConfig``.
"""

from .core import FrozenConfig, Settings, resolve_config
from .loaders import ENV_PREFIX, load_env

__all__ = [
    "ENV_PREFIX",
    "FrozenConfig",
    "Settings",
    "load_env",
    "resolve_config",
]
