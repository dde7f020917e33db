# src/modern_todo/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object for the whole app (normal "settings layer").
- Nothing is read from disk besides .env; paths are only created by bootstrap.
- Bad values fall back to defaults instead of crashing at startup.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

from .tasks.task_models import DEFAULT_CATEGORIES, DEFAULT_CATEGORY

ENV_PREFIX = "TODO"


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _env_list(name: str, default: list[str]) -> list[str]:
    # Comma-separated only: category labels may contain spaces.
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return list(default)
    return [p.strip() for p in raw.split(",") if p.strip()]


def _env_path(name: str, default: Path) -> Path:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return Path(raw).expanduser()


@dataclass(frozen=True, slots=True)
class Settings:
    # ---- App / logging ----
    app_name: str
    log_level: str

    # ---- Connector flags ----
    console_enabled: bool

    # ---- Reminders ----
    reminders_enabled: bool
    reminder_interval_seconds: float
    reminder_retry_seconds: float

    # ---- Categories ----
    default_category: str
    categories: list[str]

    # ---- Local data paths (ignored by git) ----
    data_dir: Path
    prefs_db_path: Path
    log_dir: Path

    @staticmethod
    def from_env() -> "Settings":
        load_dotenv(override=False)

        app_name = _env(_k("APP_NAME"), "modern-todo").strip() or "modern-todo"
        log_level = _env(_k("LOG_LEVEL"), "INFO")

        console_enabled = _env_bool(_k("CONSOLE_ENABLED"), True)

        reminders_enabled = _env_bool(_k("REMINDERS_ENABLED"), True)
        reminder_interval_seconds = _env_float(_k("REMINDER_INTERVAL_SECONDS"), 15.0)
        reminder_retry_seconds = _env_float(_k("REMINDER_RETRY_SECONDS"), 60.0)

        categories = _env_list(_k("CATEGORIES"), list(DEFAULT_CATEGORIES))
        default_category = _env(_k("DEFAULT_CATEGORY"), DEFAULT_CATEGORY).strip() or DEFAULT_CATEGORY
        if default_category not in categories:
            categories.insert(0, default_category)

        data_dir = _env_path(_k("DATA_DIR"), Path(".local/todo"))
        prefs_db_path = _env_path(_k("PREFS_DB_PATH"), data_dir / "prefs.sqlite3")
        log_dir = _env_path(_k("LOG_DIR"), data_dir)

        return Settings(
            app_name=app_name,
            log_level=log_level,
            console_enabled=console_enabled,
            reminders_enabled=reminders_enabled,
            reminder_interval_seconds=reminder_interval_seconds,
            reminder_retry_seconds=reminder_retry_seconds,
            default_category=default_category,
            categories=categories,
            data_dir=data_dir,
            prefs_db_path=prefs_db_path,
            log_dir=log_dir,
        )


_SETTINGS: Settings | None = None


def get_settings() -> Settings:
    global _SETTINGS
    if _SETTINGS is None:
        _SETTINGS = Settings.from_env()
    return _SETTINGS
