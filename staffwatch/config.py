from __future__ import annotations

import os
from dataclasses import dataclass
from datetime import tzinfo
from pathlib import Path
from zoneinfo import ZoneInfo

from dotenv import load_dotenv

DEFAULT_WINDOW_MONTHS = 3


@dataclass(frozen=True)
class RuntimeConfig:
    artifact_root: Path
    window_months: int
    timezone: tzinfo | None
    log_level: str


def load_env(dotenv_path: str | Path | None = None) -> None:
    path = Path(dotenv_path) if dotenv_path else None
    if path and path.exists():
        load_dotenv(path)
        return
    load_dotenv()


def runtime_config() -> RuntimeConfig:
    artifact_root = Path(os.getenv("STAFFWATCH_ARTIFACT_DIR", "./artifacts")).expanduser().resolve()

    raw_months = os.getenv("STAFFWATCH_WINDOW_MONTHS", "").strip()
    try:
        window_months = int(raw_months) if raw_months else DEFAULT_WINDOW_MONTHS
    except ValueError as exc:
        raise ValueError(f"STAFFWATCH_WINDOW_MONTHS must be an integer, got {raw_months!r}") from exc
    if window_months < 0:
        raise ValueError("STAFFWATCH_WINDOW_MONTHS must not be negative")

    tz_name = os.getenv("STAFFWATCH_TIMEZONE", "").strip()
    timezone = ZoneInfo(tz_name) if tz_name else None

    log_level = os.getenv("LOG_LEVEL", "INFO").strip().upper() or "INFO"
    return RuntimeConfig(
        artifact_root=artifact_root,
        window_months=window_months,
        timezone=timezone,
        log_level=log_level,
    )
