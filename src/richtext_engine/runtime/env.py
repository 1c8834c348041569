"""Environment lookups shared by telemetry and host settings."""

from __future__ import annotations

import os
from typing import Optional

ENV_PREFIX = "RICHTEXT_ENGINE_"

_TRUTHY = {"1", "true", "yes", "on"}


def env(name: str, default: Optional[str] = None) -> Optional[str]:
    return os.getenv(f"{ENV_PREFIX}{name}", default)


def env_flag(name: str, default: bool) -> bool:
    raw = env(name)
    if raw is None:
        return default
    return raw.strip().lower() in _TRUTHY


def env_int(name: str, default: int) -> int:
    """Read an integer override, falling back to ``default`` on bad input."""

    raw = env(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        return default


__all__ = ["ENV_PREFIX", "env", "env_flag", "env_int"]
