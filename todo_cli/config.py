"""Settings loaded from environment variables."""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path

ENV_PREFIX = "TODO"

DEFAULT_TASKS_FILE = Path("tasks.json")
DEFAULT_LOG_LEVEL = "WARNING"


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


def _env_path(name: str, default: Path | None) -> Path | None:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return Path(raw).expanduser()


def _env_log_level(name: str, default: str) -> str:
    raw = (os.getenv(name) or "").strip().upper()
    if raw and isinstance(logging.getLevelName(raw), int):
        return raw
    return default


@dataclass(frozen=True, slots=True)
class Settings:
    tasks_file: Path
    log_level: str
    log_file: Path | None = None


def load_settings() -> Settings:
    return Settings(
        tasks_file=_env_path(_k("FILE"), DEFAULT_TASKS_FILE) or DEFAULT_TASKS_FILE,
        log_level=_env_log_level(_k("LOG_LEVEL"), DEFAULT_LOG_LEVEL),
        log_file=_env_path(_k("LOG_FILE"), None),
    )
