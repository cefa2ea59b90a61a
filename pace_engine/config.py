"""Engine defaults loaded from a .env file."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from dotenv import load_dotenv

from pace_engine.activity_calendar import MAX_ACTIVITY_BARS
from pace_engine.sampling import DEFAULT_LOOKBACK_DAYS
from pace_engine.trend import DEFAULT_TREND_DAYS


@dataclass
class EngineConfig:
    timezone: str = "UTC"
    trend_days: int = DEFAULT_TREND_DAYS
    lookback_days: int = DEFAULT_LOOKBACK_DAYS
    max_activity_bars: int = MAX_ACTIVITY_BARS

    def tzinfo(self) -> ZoneInfo:
        try:
            return ZoneInfo(self.timezone)
        except (ZoneInfoNotFoundError, ValueError) as exc:
            raise ValueError(f"Unknown timezone '{self.timezone}'") from exc


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw in (None, ""):
        return default
    try:
        value = int(raw)
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer, got '{raw}'") from exc
    if value <= 0:
        raise ValueError(f"{name} must be positive, got {value}")
    return value


def load_config(env_path: Optional[Path] = None) -> EngineConfig:
    """Load config from a .env file (explicit path, then CWD) and the environment."""

    for path in (env_path, Path.cwd() / ".env"):
        if path and path.exists():
            load_dotenv(path)
            break

    defaults = EngineConfig()
    config = EngineConfig(
        timezone=os.getenv("PACE_ENGINE_TIMEZONE", defaults.timezone),
        trend_days=_int_env("PACE_ENGINE_TREND_DAYS", defaults.trend_days),
        lookback_days=_int_env("PACE_ENGINE_LOOKBACK_DAYS", defaults.lookback_days),
        max_activity_bars=_int_env("PACE_ENGINE_MAX_BARS", defaults.max_activity_bars),
    )
    config.tzinfo()
    return config
