"""Server configuration via environment variables."""

from __future__ import annotations

import logging
import os
from pathlib import Path

from dotenv import dotenv_values, load_dotenv
from pydantic import BaseModel, Field, field_validator

logger = logging.getLogger(__name__)

VALID_THINKING_LEVELS = {"minimal", "low", "medium", "high"}

DEFAULT_ENV_PATH = Path.home() / ".config" / "biblioart-mcp" / ".env"

MODEL_PRESETS: dict[str, dict[str, str]] = {
    "best": {
        "default_model": "gemini-3.1-pro-preview",
        "label": "Richest screenplays: 3.1 Pro (slowest, lowest rate limits)",
    },
    "stable": {
        "default_model": "gemini-3-pro-preview",
        "label": "Fallback: 3 Pro (higher rate limits)",
    },
    "fast": {
        "default_model": "gemini-3-flash-preview",
        "label": "Default: 3 Flash, fits comfortably inside the analyze deadline",
    },
}


class ServerConfig(BaseModel):
    """Runtime configuration resolved from environment."""

    gemini_api_key: str = Field(default="")
    default_model: str = Field(default="gemini-3-flash-preview")
    default_thinking_level: str = Field(default="low")
    default_temperature: float = Field(default=1.0)
    output_language: str = Field(default="en-US")
    analyze_timeout_seconds: float = Field(default=120.0)
    title_timeout_seconds: float = Field(default=60.0)
    refine_timeout_seconds: float = Field(default=60.0)
    extract_timeout_seconds: float = Field(default=60.0)
    settle_delay_seconds: float = Field(default=1.0)
    error_delay_seconds: float = Field(default=4.0)
    max_source_pages: int = Field(default=50)
    max_source_chars: int = Field(default=250_000)
    export_dir: str = Field(default="")

    @field_validator("default_thinking_level")
    @classmethod
    def validate_thinking_level(cls, value: str) -> str:
        level = value.strip().lower()
        if level not in VALID_THINKING_LEVELS:
            allowed = ", ".join(sorted(VALID_THINKING_LEVELS))
            raise ValueError(f"Invalid thinking level '{value}'. Allowed: {allowed}")
        return level

    @field_validator(
        "analyze_timeout_seconds",
        "title_timeout_seconds",
        "refine_timeout_seconds",
        "extract_timeout_seconds",
    )
    @classmethod
    def validate_timeouts(cls, value: float) -> float:
        if value <= 0:
            raise ValueError("Operation timeouts must be > 0")
        return value

    @field_validator("settle_delay_seconds", "error_delay_seconds")
    @classmethod
    def validate_delays(cls, value: float) -> float:
        if value < 0:
            raise ValueError("Delays must be >= 0")
        return value

    @field_validator("max_source_pages", "max_source_chars")
    @classmethod
    def validate_positive_ints(cls, value: int) -> int:
        if value < 1:
            raise ValueError("Configuration values must be >= 1")
        return value

    @classmethod
    def from_env(cls) -> ServerConfig:
        """Build config from environment variables."""
        export_default = str(Path.home() / "biblioart")
        return cls(
            gemini_api_key=os.getenv("GEMINI_API_KEY", ""),
            default_model=os.getenv("GEMINI_MODEL", "gemini-3-flash-preview"),
            default_thinking_level=os.getenv("GEMINI_THINKING_LEVEL", "low"),
            default_temperature=float(os.getenv("GEMINI_TEMPERATURE", "1.0")),
            output_language=os.getenv("BIBLIOART_LANGUAGE", "en-US"),
            analyze_timeout_seconds=float(os.getenv("BIBLIOART_ANALYZE_TIMEOUT", "120")),
            title_timeout_seconds=float(os.getenv("BIBLIOART_TITLE_TIMEOUT", "60")),
            refine_timeout_seconds=float(os.getenv("BIBLIOART_REFINE_TIMEOUT", "60")),
            extract_timeout_seconds=float(os.getenv("BIBLIOART_EXTRACT_TIMEOUT", "60")),
            settle_delay_seconds=float(os.getenv("BIBLIOART_SETTLE_DELAY", "1.0")),
            error_delay_seconds=float(os.getenv("BIBLIOART_ERROR_DELAY", "4.0")),
            max_source_pages=int(os.getenv("BIBLIOART_MAX_PAGES", "50")),
            max_source_chars=int(os.getenv("BIBLIOART_MAX_CHARS", "250000")),
            export_dir=os.getenv("BIBLIOART_EXPORT_DIR", export_default),
        )


# Singleton, initialised on first access.
_config: ServerConfig | None = None


def get_config() -> ServerConfig:
    """Return the global config singleton, creating it on first access.

    Loads ``~/.config/biblioart-mcp/.env`` before reading env vars.
    Process environment always takes precedence over the config file.
    """
    global _config
    if _config is None:
        if DEFAULT_ENV_PATH.is_file() and load_dotenv(DEFAULT_ENV_PATH, override=False):
            logger.info(
                "Loaded config file %s (%d key(s))",
                DEFAULT_ENV_PATH,
                len(dotenv_values(DEFAULT_ENV_PATH)),
            )
        _config = ServerConfig.from_env()
    return _config


def update_config(**overrides: object) -> ServerConfig:
    """Patch the live config (used by ``infra_configure`` tool)."""
    global _config
    cfg = get_config()
    data = cfg.model_dump()
    data.update({k: v for k, v in overrides.items() if v is not None})
    _config = ServerConfig(**data)
    return _config
