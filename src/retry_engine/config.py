"""
Configuration settings for the retry engine.

All settings are loaded from environment variables prefixed with
RETRY_ENGINE_ (e.g. RETRY_ENGINE_SLEEP_LOG_LEVEL=DEBUG), with sensible
defaults. A .env file is read for local development. Nothing is read at
import time: build `Settings()` when you need it, e.g. for Retry.from_settings.
"""

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from retry_engine.logging_config import resolve_log_level


class Settings(BaseSettings):
    """Retry engine settings loaded from environment variables."""
    
    model_config = SettingsConfigDict(
        env_prefix="RETRY_ENGINE_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )
    
    # === Logging ===
    LOG_LEVEL: str = "INFO"
    ENVIRONMENT: str = "development"  # "production" switches to JSON logs
    RETRY_LOG_LEVEL: str = "WARNING"  # "will not retry" / "giving up" events
    SLEEP_LOG_LEVEL: str = "INFO"  # "sleeping" / "retrying immediately" events
    
    # === Monitoring ===
    METRICS_ENABLED: bool = True

    @field_validator("LOG_LEVEL", "RETRY_LOG_LEVEL", "SLEEP_LOG_LEVEL")
    @classmethod
    def _normalize_level(cls, v: str) -> str:
        """Reject unknown level names and store them upper-cased."""
        resolve_log_level(v)
        return v.upper()
