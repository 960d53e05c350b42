"""
Pregnancy Planner — Centralized configuration.

Loads all settings from .env and validates them.
This module is the foundation for every other module in the project.
"""

from __future__ import annotations

import os
from datetime import date
from pathlib import Path

from dotenv import load_dotenv
from pydantic import BaseModel, field_validator

# Load .env from project root (two levels up from planner/config.py)
_ENV_PATH = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(_ENV_PATH)


class Settings(BaseModel):
    """Application settings loaded from environment variables."""

    # Where the published event data lives (xlsx primary, json fallback)
    DATA_BASE_URL: str = "http://localhost:5173/"

    # LMP: reference date for gestational week calculation
    LMP_DATE: str = "2025-10-20"

    # SQLite (sync credentials)
    DATABASE_PATH: str = "data/planner.db"

    # GitHub REST API root
    GITHUB_API_URL: str = "https://api.github.com"

    @field_validator("DATA_BASE_URL", mode="before")
    @classmethod
    def ensure_trailing_slash(cls, v: str) -> str:
        v = (v or "").strip() or "/"
        return v if v.endswith("/") else v + "/"

    @field_validator("LMP_DATE", mode="before")
    @classmethod
    def parse_lmp(cls, v: str | date) -> str:
        if isinstance(v, date):
            return v.isoformat()
        return date.fromisoformat(str(v).strip()).isoformat()

    @field_validator("GITHUB_API_URL", mode="before")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return str(v).strip().rstrip("/")


def _load_settings() -> Settings:
    """Load settings from environment."""
    return Settings(
        DATA_BASE_URL=os.getenv("DATA_BASE_URL", "http://localhost:5173/"),
        LMP_DATE=os.getenv("LMP_DATE", "2025-10-20"),
        DATABASE_PATH=os.getenv("DATABASE_PATH", "data/planner.db"),
        GITHUB_API_URL=os.getenv("GITHUB_API_URL", "https://api.github.com"),
    )


# Singleton — imported by all other modules as:
#   from planner.config import settings
settings = _load_settings()
