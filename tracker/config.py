from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import List

from dotenv import load_dotenv

load_dotenv()


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = float(raw)
    except ValueError:
        return default
    return value if value > 0 else default


def _env_list(name: str, default: List[str]) -> List[str]:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return list(default)
    return [p.strip() for p in raw.split(",") if p.strip()]


@dataclass(frozen=True)
class Settings:
    app_host: str
    app_port: int
    timer_tick_seconds: float
    targets_path: Path
    log_dir: Path
    log_level: str
    cors_origins: List[str]


def load_settings() -> Settings:
    """
    Application settings from the environment. Database settings are read
    separately by infrastructure.db.postgres.load_config_from_env.
    """
    log_dir = Path(os.getenv("LOG_DIR", ".local/tracker")).expanduser()
    targets_path = Path(
        os.getenv("TRACKER_TARGETS_PATH", str(log_dir / "targets.json"))
    ).expanduser()

    return Settings(
        app_host=os.getenv("APP_HOST", "0.0.0.0"),
        app_port=_env_int("APP_PORT", 8001),
        timer_tick_seconds=_env_float("TIMER_TICK_SECONDS", 0.4),
        targets_path=targets_path,
        log_dir=log_dir,
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        cors_origins=_env_list("CORS_ORIGINS", ["*"]),
    )
