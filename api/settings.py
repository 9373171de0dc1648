"""
API runtime settings.

Read once from the environment (a .env file at the project root is loaded
first, the same file the Supabase client uses).

Environment variables:
- LOG_LEVEL: logging level name (default: INFO)
- CORS_ALLOW_ORIGINS: comma-separated origins (default: *)
- TRIAGE_MAX_SALES: upper bound on sales fetched per triage request (default: 1000)
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import List

from dotenv import load_dotenv

env_path = Path(__file__).parent.parent / ".env"
load_dotenv(dotenv_path=env_path)


@dataclass(frozen=True, slots=True)
class Settings:
    log_level: str
    cors_allow_origins: List[str]
    triage_max_sales: int


def _parse_origins(raw: str) -> List[str]:
    origins = [origin.strip() for origin in raw.split(",") if origin.strip()]
    return origins or ["*"]


def load_settings() -> Settings:
    """
    Build Settings from the environment.

    Raises:
        RuntimeError: if a variable holds an invalid value
    """

    log_level = os.getenv("LOG_LEVEL", "INFO").strip().upper()
    if not isinstance(logging.getLevelName(log_level), int):
        raise RuntimeError(
            f"Invalid LOG_LEVEL: {log_level!r}. Use DEBUG, INFO, WARNING, ERROR or CRITICAL."
        )

    raw_max = os.getenv("TRIAGE_MAX_SALES", "1000")
    try:
        triage_max_sales = int(raw_max)
    except ValueError:
        raise RuntimeError(f"Invalid TRIAGE_MAX_SALES: {raw_max!r}. Must be an integer.")
    if triage_max_sales < 1:
        raise RuntimeError("TRIAGE_MAX_SALES must be >= 1")

    return Settings(
        log_level=log_level,
        cors_allow_origins=_parse_origins(os.getenv("CORS_ALLOW_ORIGINS", "*")),
        triage_max_sales=triage_max_sales,
    )


settings = load_settings()

__all__ = ["Settings", "load_settings", "settings"]
