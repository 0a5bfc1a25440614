"""Environment-driven configuration for the run loop.

Recognised variables:
    RUNLOOP_MIN_TICK_MS  smallest idle wait in milliseconds (default 1.0)
    RUNLOOP_PROFILE      when set to a truthy value, time every executed task
"""

from __future__ import annotations

import math
import os
from collections.abc import Mapping
from dataclasses import dataclass

from runloop.errors import ConfigError

ENV_MIN_TICK_MS = "RUNLOOP_MIN_TICK_MS"
ENV_PROFILE = "RUNLOOP_PROFILE"

DEFAULT_MIN_TICK_MS = 1.0

_TRUTHY = frozenset({"1", "true", "yes", "on"})
_FALSY = frozenset({"", "0", "false", "no", "off"})


def _parse_min_tick(raw: str) -> float:
    try:
        value = float(raw)
    except ValueError as exc:
        raise ConfigError(ENV_MIN_TICK_MS, raw, "not a number") from exc
    if math.isnan(value) or math.isinf(value) or value <= 0.0:
        raise ConfigError(ENV_MIN_TICK_MS, raw, "must be a finite positive number")
    return value


def _parse_flag(key: str, raw: str) -> bool:
    normalized = raw.strip().lower()
    if normalized in _TRUTHY:
        return True
    if normalized in _FALSY:
        return False
    raise ConfigError(key, raw, "expected a boolean flag")


@dataclass(frozen=True)
class LoopConfig:
    min_tick_ms: float = DEFAULT_MIN_TICK_MS
    profile: bool = False

    def __post_init__(self) -> None:
        if not isinstance(self.min_tick_ms, int | float) or not 0.0 < self.min_tick_ms < math.inf:
            raise ConfigError("min_tick_ms", self.min_tick_ms, "must be a positive number")

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> LoopConfig:
        """Build a config from ``environ`` (defaults to ``os.environ``)."""
        env = os.environ if environ is None else environ
        min_tick_raw = env.get(ENV_MIN_TICK_MS)
        profile_raw = env.get(ENV_PROFILE)
        return cls(
            min_tick_ms=DEFAULT_MIN_TICK_MS if min_tick_raw is None else _parse_min_tick(min_tick_raw),
            profile=False if profile_raw is None else _parse_flag(ENV_PROFILE, profile_raw),
        )


__all__ = [
    "DEFAULT_MIN_TICK_MS",
    "ENV_MIN_TICK_MS",
    "ENV_PROFILE",
    "LoopConfig",
]
