"""
Runtime settings, read from environment variables with sensible defaults.

    INJURY_REPORT_MAX_AGE          seconds a cached report stays fresh (3600)
    INJURY_REPORT_LOOKBACK_STEPS   candidate steps searched per refresh (8)
    INJURY_REPORT_STEP_MINUTES     minutes between candidates (15)
    INJURY_REPORT_TIMEOUT          per-request timeout in seconds (15)
    INJURY_REPORT_ALIGN_TO_STEP    floor "now" to the step boundary (false)
"""

import os
from dataclasses import dataclass
from typing import Mapping, Optional

from .cache import DEFAULT_LOOKBACK_STEPS, DEFAULT_STEP_MINUTES
from .fetcher import DEFAULT_TIMEOUT

DEFAULT_MAX_AGE_SECONDS = 60 * 60

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


def _env_number(env: Mapping[str, str], name: str, default, cast):
    raw = env.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return cast(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {raw!r}") from None


def _env_bool(env: Mapping[str, str], name: str, default: bool) -> bool:
    raw = env.get(name)
    if raw is None or raw.strip() == "":
        return default
    value = raw.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    raise ValueError(f"{name} must be a boolean, got {raw!r}")


@dataclass(frozen=True)
class PipelineConfig:
    max_age_seconds: float = DEFAULT_MAX_AGE_SECONDS
    lookback_steps: int = DEFAULT_LOOKBACK_STEPS
    step_minutes: int = DEFAULT_STEP_MINUTES
    timeout: float = DEFAULT_TIMEOUT
    align_to_step: bool = False

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> "PipelineConfig":
        """Build a config from ``env`` (defaults to ``os.environ``)."""
        if env is None:
            env = os.environ
        config = cls(
            max_age_seconds=_env_number(env, "INJURY_REPORT_MAX_AGE", DEFAULT_MAX_AGE_SECONDS, float),
            lookback_steps=_env_number(env, "INJURY_REPORT_LOOKBACK_STEPS", DEFAULT_LOOKBACK_STEPS, int),
            step_minutes=_env_number(env, "INJURY_REPORT_STEP_MINUTES", DEFAULT_STEP_MINUTES, int),
            timeout=_env_number(env, "INJURY_REPORT_TIMEOUT", DEFAULT_TIMEOUT, float),
            align_to_step=_env_bool(env, "INJURY_REPORT_ALIGN_TO_STEP", False),
        )
        if config.lookback_steps < 0:
            raise ValueError("INJURY_REPORT_LOOKBACK_STEPS must be >= 0")
        if config.step_minutes <= 0:
            raise ValueError("INJURY_REPORT_STEP_MINUTES must be positive")
        return config
