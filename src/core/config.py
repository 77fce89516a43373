"""Configuration management for Listing Quality Scorer."""

from __future__ import annotations

import json
import logging
from decimal import Decimal
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, ValidationError, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)


def get_config_dir() -> Path:
    """Get the configuration directory path."""
    config_dir = Path.home() / ".listing-quality-scorer"
    config_dir.mkdir(parents=True, exist_ok=True)
    return config_dir


def get_data_dir() -> Path:
    """Get the data directory path."""
    data_dir = get_config_dir() / "data"
    data_dir.mkdir(parents=True, exist_ok=True)
    return data_dir


def get_db_path() -> Path:
    """Get the SQLite database file path."""
    return get_data_dir() / "scores.db"


class ScoringWeights(BaseModel):
    """Weight of each sub-score in the total."""

    seo: Decimal = Decimal("0.20")
    content: Decimal = Decimal("0.20")
    images: Decimal = Decimal("0.15")
    competitive: Decimal = Decimal("0.20")
    compliance: Decimal = Decimal("0.25")

    def total(self) -> Decimal:
        """Calculate total weight (must sum to 1.0)."""
        return self.seo + self.content + self.images + self.competitive + self.compliance

    def as_dict(self) -> dict[str, Decimal]:
        return {
            "seo": self.seo,
            "content": self.content,
            "images": self.images,
            "competitive": self.competitive,
            "compliance": self.compliance,
        }

    @model_validator(mode="after")
    def _check_total(self) -> "ScoringWeights":
        if self.total() != Decimal("1"):
            raise ValueError(f"Scoring weights must sum to 1.00, got {self.total()}")
        return self


class HistoryConfig(BaseModel):
    """Score history retention and trend settings."""

    max_entries_per_listing: int = 90
    default_days: int = 30
    trend_window: int = 7  # Entries in each of the recent/older windows
    trend_threshold: int = 5  # Average change that counts as a trend


class AlertConfig(BaseModel):
    """Alert configuration."""

    enabled: bool = True
    low_score_threshold: int = 60  # Alert when total score falls below this
    score_decrease_threshold: int = 10
    score_increase_threshold: int = 10
    max_alerts: int = 100


class WebConfig(BaseModel):
    """Web API configuration."""

    host: str = "127.0.0.1"
    port: int = 5050


class Settings(BaseSettings):
    """Application settings."""

    model_config = SettingsConfigDict(
        env_file=str(get_config_dir() / ".env"),
        env_file_encoding="utf-8",
        env_prefix="LQS_",
        env_nested_delimiter="__",
        extra="ignore",
    )

    marketplace_domain: str = "amazon.co.uk"
    currency_symbol: str = "£"

    weights: ScoringWeights = Field(default_factory=ScoringWeights)
    history: HistoryConfig = Field(default_factory=HistoryConfig)
    alerts: AlertConfig = Field(default_factory=AlertConfig)
    web: WebConfig = Field(default_factory=WebConfig)

    log_level: str = "INFO"
    debug_mode: bool = False

    def save(self) -> None:
        """Save settings to the config file."""
        config_path = get_config_dir() / "settings.json"
        data = self._convert_decimals(self.model_dump(mode="python"))
        with open(config_path, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2)

    def _convert_decimals(self, obj: Any) -> Any:
        """Recursively convert Decimal to string for JSON serialization."""
        if isinstance(obj, Decimal):
            return str(obj)
        elif isinstance(obj, dict):
            return {k: self._convert_decimals(v) for k, v in obj.items()}
        elif isinstance(obj, list):
            return [self._convert_decimals(item) for item in obj]
        return obj

    @classmethod
    def load(cls) -> "Settings":
        """Load settings from the config file or create defaults."""
        config_path = get_config_dir() / "settings.json"
        env_path = get_config_dir() / ".env"

        # Start with defaults (environment and .env applied by BaseSettings)
        settings = cls()

        if config_path.exists():
            try:
                with open(config_path, encoding="utf-8") as f:
                    data = json.load(f)
                settings = cls.model_validate(data)
            except (OSError, json.JSONDecodeError, ValidationError) as e:
                logger.warning(f"Ignoring unreadable settings file {config_path}: {e}")

        # model_validate skips env sources, so re-apply .env overrides
        if env_path.exists():
            from dotenv import dotenv_values

            env_vars = dotenv_values(env_path)
            if env_vars.get("LQS_LOG_LEVEL"):
                settings.log_level = env_vars["LQS_LOG_LEVEL"]
            if env_vars.get("LQS_DEBUG_MODE"):
                settings.debug_mode = env_vars["LQS_DEBUG_MODE"].lower() in ("true", "1", "yes")
            if env_vars.get("LQS_WEB__HOST"):
                settings.web.host = env_vars["LQS_WEB__HOST"]
            if env_vars.get("LQS_WEB__PORT"):
                settings.web.port = int(env_vars["LQS_WEB__PORT"])

        return settings


# Global settings instance
_settings: Settings | None = None


def get_settings() -> Settings:
    """Get the global settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings.load()
    return _settings


def reload_settings() -> Settings:
    """Reload settings from disk."""
    global _settings
    _settings = Settings.load()
    return _settings
