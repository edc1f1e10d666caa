"""
ChorePlan Assistant — Centralized configuration.

Loads all settings from .env and validates required keys.
This module is the foundation for every other module in the project.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path

from dotenv import load_dotenv
from pydantic import BaseModel, field_validator

# Load .env from project root (two levels up from src/config.py)
_ENV_PATH = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(_ENV_PATH)


class Settings(BaseModel):
    """Application settings loaded from environment variables."""

    # Telegram
    TELEGRAM_BOT_TOKEN: str

    # LLM — provider-agnostic (anthropic, gemini, openai, cohere)
    LLM_PROVIDER: str = "anthropic"
    LLM_MODEL: str = ""          # empty → smart default per provider
    LLM_API_KEY: str = ""        # fallback when no key was set via /apikey
    LLM_MAX_TOKENS: int = 1500

    # SQLite (chore catalog + stored credential)
    DATABASE_PATH: str = "data/choreplan.db"

    # Security
    ALLOWED_USER_IDS: list[int] = []

    # Planning
    TIMEZONE: str = "UTC"
    DEFAULT_PLAN_MONTHS: int = 1
    MAX_PLAN_MONTHS: int = 24

    @field_validator("ALLOWED_USER_IDS", mode="before")
    @classmethod
    def parse_user_ids(cls, v: str | list[int]) -> list[int]:
        if isinstance(v, list):
            return v
        if isinstance(v, str) and v.strip():
            return [int(uid.strip()) for uid in v.split(",") if uid.strip()]
        return []

    @field_validator("LLM_MAX_TOKENS", "DEFAULT_PLAN_MONTHS", "MAX_PLAN_MONTHS", mode="before")
    @classmethod
    def parse_int(cls, v: str | int) -> int:
        return int(v)


def _load_settings() -> Settings:
    """Load settings from environment, validating required keys."""
    token = os.getenv("TELEGRAM_BOT_TOKEN", "")

    if not token or token.startswith("your-"):
        print("ERROR: TELEGRAM_BOT_TOKEN is missing or not set in .env", file=sys.stderr)
        sys.exit(1)

    llm_api_key = os.getenv("LLM_API_KEY", "")
    if llm_api_key.startswith("your-"):
        llm_api_key = ""

    return Settings(
        TELEGRAM_BOT_TOKEN=token,
        LLM_PROVIDER=os.getenv("LLM_PROVIDER", "anthropic"),
        LLM_MODEL=os.getenv("LLM_MODEL", ""),
        LLM_API_KEY=llm_api_key,
        LLM_MAX_TOKENS=os.getenv("LLM_MAX_TOKENS", "1500"),
        DATABASE_PATH=os.getenv("DATABASE_PATH", "data/choreplan.db"),
        ALLOWED_USER_IDS=os.getenv("ALLOWED_USER_IDS", ""),
        TIMEZONE=os.getenv("TIMEZONE", "UTC"),
        DEFAULT_PLAN_MONTHS=os.getenv("DEFAULT_PLAN_MONTHS", "1"),
        MAX_PLAN_MONTHS=os.getenv("MAX_PLAN_MONTHS", "24"),
    )


# Singleton — imported by all other modules as:
#   from src.config import settings
settings = _load_settings()
