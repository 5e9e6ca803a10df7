"""Settings loaded from environment variables (+ optional .env).

Every variable carries the ``TASKBOARD_`` prefix, e.g. ``TASKBOARD_DATABASE_URL``.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv

ENV_PREFIX = "TASKBOARD"

DEFAULT_CORS_ORIGINS = ["http://localhost:5173", "http://localhost:3000"]


def _k(suffix: str) -> str:
    return f"{ENV_PREFIX}_{suffix}"


def _env(name: str, default: str = "") -> str:
    v = os.getenv(_k(name))
    return default if v is None else v


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(_k(name))
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(_k(name))
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(_k(name))
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _env_list(name: str, default: List[str]) -> List[str]:
    raw = os.getenv(_k(name))
    if raw is None or raw.strip() == "":
        return list(default)
    return [p.strip() for p in raw.replace(",", " ").split() if p.strip()]


def _env_path(name: str) -> Optional[Path]:
    raw = os.getenv(_k(name))
    if raw is None or raw.strip() == "":
        return None
    return Path(raw).expanduser()


def _env_level(name: str, default: int) -> int:
    raw = os.getenv(_k(name))
    if raw is None or raw.strip() == "":
        return default
    level = logging.getLevelName(raw.strip().upper())
    return level if isinstance(level, int) else default


def _normalize_prefix(prefix: str) -> str:
    prefix = prefix.strip().rstrip("/")
    if prefix and not prefix.startswith("/"):
        prefix = "/" + prefix
    return prefix


@dataclass(frozen=True)
class Settings:
    # Server
    database_url: str = "sqlite+aiosqlite:///./taskboard.db"
    sql_echo: bool = False
    api_prefix: str = ""
    cors_origins: List[str] = field(default_factory=lambda: list(DEFAULT_CORS_ORIGINS))
    host: str = "127.0.0.1"
    port: int = 5000

    # Logging
    log_level: int = logging.INFO
    log_file: Optional[Path] = None

    # Client
    api_url: str = "http://localhost:5000"
    api_timeout: float = 10.0

    @classmethod
    def from_env(cls) -> "Settings":
        load_dotenv(override=False)
        return cls(
            database_url=_env("DATABASE_URL", cls.database_url),
            sql_echo=_env_bool("SQL_ECHO", cls.sql_echo),
            api_prefix=_normalize_prefix(_env("API_PREFIX", cls.api_prefix)),
            cors_origins=_env_list("CORS_ORIGINS", DEFAULT_CORS_ORIGINS),
            host=_env("HOST", cls.host),
            port=_env_int("PORT", cls.port),
            log_level=_env_level("LOG_LEVEL", cls.log_level),
            log_file=_env_path("LOG_FILE"),
            api_url=_env("API_URL", cls.api_url).rstrip("/"),
            api_timeout=_env_float("API_TIMEOUT", cls.api_timeout),
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings.from_env()
