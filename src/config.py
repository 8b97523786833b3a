"""
Household Hub — Centralized configuration.

Loads all settings from .env and validates them.
This module is the foundation for every other module in the project.
"""

from __future__ import annotations

import os
from pathlib import Path

from dotenv import load_dotenv
from pydantic import BaseModel, field_validator

# Load .env from project root (two levels up from src/config.py)
_ENV_PATH = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(_ENV_PATH)


class Settings(BaseModel):
    """Application settings loaded from environment variables."""

    # AI schedule assistant — OpenAI-compatible chat completions.
    # An empty key disables the feature instead of failing startup.
    OPENAI_API_KEY: str = ""
    OPENAI_API_URL: str = "https://api.openai.com/v1"
    AI_MODEL: str = "gpt-4o-mini"
    AI_TEMPERATURE: float = 0.3
    AI_MAX_TOKENS: int = 2000
    AI_TIMEOUT_SECONDS: float = 30.0

    # SQLite
    DATABASE_PATH: str = "data/household.db"

    # HTTP server
    API_HOST: str = "0.0.0.0"
    API_PORT: int = 8080
    LOG_LEVEL: str = "INFO"

    @field_validator("OPENAI_API_KEY", mode="before")
    @classmethod
    def drop_placeholder_key(cls, v: str | None) -> str:
        if not v or v.strip().startswith("your-"):
            return ""
        return v.strip()

    @field_validator("OPENAI_API_URL", mode="before")
    @classmethod
    def default_blank_url(cls, v: str | None) -> str:
        return v.strip() if v and v.strip() else "https://api.openai.com/v1"

    @field_validator("AI_MAX_TOKENS", "API_PORT", mode="before")
    @classmethod
    def parse_int(cls, v: str | int) -> int:
        return int(v)

    @field_validator("AI_TEMPERATURE", "AI_TIMEOUT_SECONDS", mode="before")
    @classmethod
    def parse_float(cls, v: str | float) -> float:
        return float(v)


def _load_settings() -> Settings:
    """Load settings from environment."""
    return Settings(
        OPENAI_API_KEY=os.getenv("OPENAI_API_KEY", ""),
        OPENAI_API_URL=os.getenv("OPENAI_API_URL", "https://api.openai.com/v1"),
        AI_MODEL=os.getenv("AI_MODEL", "gpt-4o-mini"),
        AI_TEMPERATURE=os.getenv("AI_TEMPERATURE", "0.3"),
        AI_MAX_TOKENS=os.getenv("AI_MAX_TOKENS", "2000"),
        AI_TIMEOUT_SECONDS=os.getenv("AI_TIMEOUT_SECONDS", "30"),
        DATABASE_PATH=os.getenv("DATABASE_PATH", "data/household.db"),
        API_HOST=os.getenv("API_HOST", "0.0.0.0"),
        API_PORT=os.getenv("API_PORT", "8080"),
        LOG_LEVEL=os.getenv("LOG_LEVEL", "INFO"),
    )


# Singleton — imported by all other modules as:
#   from src.config import settings
settings = _load_settings()
