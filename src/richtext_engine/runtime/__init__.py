"""Runtime services: telemetry and environment configuration."""

from . import telemetry
from .env import ENV_PREFIX, env, env_flag, env_int

__all__ = ["telemetry", "ENV_PREFIX", "env", "env_flag", "env_int"]
