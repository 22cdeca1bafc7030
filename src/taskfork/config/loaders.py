# src/taskfork/config/loaders.py

"""Environment loading for configuration.

Pure data loading: values are read and coerced, never validated here. The
resolver in ``core`` merges the result and runs it through ``Settings``.
"""

from __future__ import annotations

import os
import typing
from typing import Any

ENV_PREFIX = "TASKFORK_"


def _coerce_env_value(value: str, target_type: type | None) -> Any:
    """Coerce env string to target type when possible.

    Falls back to original string on conversion failure or unknown type.
    """
    if target_type is int:
        try:
            return int(value)
        except ValueError:
            return value
    if target_type is float:
        try:
            return float(value)
        except ValueError:
            return value
    return value


def _target_type(field_name: str) -> type | None:
    from .core import Settings  # local import to keep loaders import-light

    info = Settings.model_fields.get(field_name)
    if info is None:
        return None
    candidates = (info.annotation, *typing.get_args(info.annotation))
    for t in (int, float):
        if t in candidates:
            return t
    return None


def load_env() -> dict[str, Any]:
    """Load ``TASKFORK_*`` environment variables.

    Unknown names are passed through; the resolver warns about them and
    leaves them out of validation.
    """
    config: dict[str, Any] = {}
    for key, value in os.environ.items():
        if not key.startswith(ENV_PREFIX):
            continue
        field_name = key[len(ENV_PREFIX) :].lower()
        config[field_name] = _coerce_env_value(value, _target_type(field_name))
    return config
