# src/taskfork/config/core.py

"""Core configuration schema and resolution.

Configuration is resolved once, validated through the pydantic ``Settings``
schema, then frozen into a ``FrozenConfig`` that the default pool and
``Fork.default()`` consume. Precedence: defaults < environment < overrides.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any
import warnings

from dotenv import load_dotenv
from pydantic import BaseModel, Field, ValidationError, field_validator

from taskfork.errors import ConfigurationError

if TYPE_CHECKING:
    from collections.abc import Mapping

# --- Schema (Pydantic wall) ---


class Settings(BaseModel):
    """Pydantic schema: the single source of truth for fields and defaults."""

    #: Worker threads for a default pool; ``None`` means ``os.cpu_count()``.
    max_workers: int | None = Field(default=None, ge=1)
    #: Deadline applied by ``Fork.default()``; ``None`` waits indefinitely.
    default_deadline_s: float | None = Field(default=None, ge=0)
    thread_name_prefix: str = Field(default="taskfork", min_length=1)

    model_config = {"extra": "forbid"}  # Env extras are filtered out before validation

    @field_validator("thread_name_prefix", mode="before")
    @classmethod
    def normalize_prefix(cls, v: Any) -> Any:
        """Trim surrounding whitespace on the thread name prefix."""
        if isinstance(v, str):
            return v.strip()
        return v

    @field_validator("max_workers", "default_deadline_s", mode="before")
    @classmethod
    def empty_means_unset(cls, v: Any) -> Any:
        """Map empty strings (e.g. ``TASKFORK_MAX_WORKERS=``) to None."""
        if isinstance(v, str) and not v.strip():
            return None
        return v


# --- Immutable runtime payload ---


@dataclass(frozen=True)
class FrozenConfig:
    """Validated configuration handed to pool construction."""

    max_workers: int | None
    default_deadline_s: float | None
    thread_name_prefix: str


_DOTENV_LOADED: bool = False


def _load_dotenv_once() -> None:
    global _DOTENV_LOADED
    if _DOTENV_LOADED:
        return
    load_dotenv()
    _DOTENV_LOADED = True


def resolve_config(overrides: Mapping[str, Any] | None = None) -> FrozenConfig:
    """Resolve configuration from the environment and overrides.

    Args:
        overrides: Programmatic values; they win over ``TASKFORK_*``
            environment variables. Unknown override keys are rejected; unknown
            environment variables only produce a warning.

    Returns:
        FrozenConfig instance.

    Raises:
        ConfigurationError: If validation fails.
    """
    _load_dotenv_once()

    from .loaders import load_env

    env = load_env()
    known_fields = set(Settings.model_fields.keys())
    extra = {k: v for k, v in env.items() if k not in known_fields}
    _warn_unknown_env(extra)

    merged = {
        **{k: v for k, v in env.items() if k in known_fields},
        **(overrides or {}),
    }

    try:
        settings = Settings.model_validate(merged)
    except ValidationError as e:
        err = e.errors()[0]
        field = ".".join(str(p) for p in err.get("loc", ())) or "config"
        msg = err.get("msg") or "invalid value"
        if msg.startswith("Value error, "):
            msg = msg[13:]
        raise ConfigurationError(
            f"Configuration validation failed: {field}: {msg}",
            hint="Check TASKFORK_* environment variables and overrides.",
        ) from e

    return FrozenConfig(
        max_workers=settings.max_workers,
        default_deadline_s=settings.default_deadline_s,
        thread_name_prefix=settings.thread_name_prefix,
    )


def _warn_unknown_env(extra: Mapping[str, Any]) -> None:
    """Warn about ``TASKFORK_*`` variables that match no setting."""
    if not extra:
        return

    from .loaders import ENV_PREFIX

    for name in sorted(extra):
        warnings.warn(
            f"Configuration: ignoring unknown variable {ENV_PREFIX}{name.upper()}",
            UserWarning,
            stacklevel=3,
        )
