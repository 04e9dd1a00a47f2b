# src/zentask/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object for the whole app (normal "settings layer").
- Nothing required at import time; every value has a local default.
- Settings are injectable: code takes a settings object instead of reading env.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

ENV_PREFIX = "ZENTASK"

STORAGE_BACKENDS = ("sqlite", "memory")


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


load_dotenv(override=False)


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v


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
        return float(raw)
    except ValueError:
        return default


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

    # ---- Storage ----
    data_dir: Path
    storage_backend: str
    tasks_db_path: Path
    collection_key: str

    # ---- Server ----
    host: str
    port: int

    # ---- Client ----
    api_url: str
    http_timeout_seconds: float

    @staticmethod
    def from_env() -> "Settings":
        app_name = _env(_k("APP_NAME"), "zentask").strip() or "zentask"
        log_level = _env(_k("LOG_LEVEL"), "INFO")

        data_dir = _env_path(_k("DATA_DIR"), Path(".local/zentask"))
        storage_backend = _env(_k("STORAGE"), "sqlite").strip().lower()
        if storage_backend not in STORAGE_BACKENDS:
            storage_backend = "sqlite"
        tasks_db_path = _env_path(_k("TASKS_DB_PATH"), data_dir / "tasks.sqlite3")
        collection_key = _env(_k("COLLECTION_KEY"), "tasks").strip() or "tasks"

        host = _env(_k("HOST"), "127.0.0.1").strip() or "127.0.0.1"
        port = _env_int(_k("PORT"), 8787)

        # Client defaults to the local server.
        api_url = _env(_k("API_URL"), f"http://{host}:{port}").rstrip("/")
        http_timeout_seconds = max(0.5, _env_float(_k("HTTP_TIMEOUT_SECONDS"), 10.0))

        return Settings(
            app_name=app_name,
            log_level=log_level,
            data_dir=data_dir,
            storage_backend=storage_backend,
            tasks_db_path=tasks_db_path,
            collection_key=collection_key,
            host=host,
            port=port,
            api_url=api_url,
            http_timeout_seconds=http_timeout_seconds,
        )


_SETTINGS: Settings | None = None


def get_settings() -> Settings:
    global _SETTINGS
    if _SETTINGS is None:
        _SETTINGS = Settings.from_env()
    return _SETTINGS
