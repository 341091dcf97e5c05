"""
Application configuration using Pydantic Settings.
"""
import logging
from functools import lru_cache
from typing import Optional

import pytz
from pydantic import field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Application
    APP_NAME: str = "KitchenOps"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # Undo/redo history
    HISTORY_CAPACITY: int = 50

    # Timestamps (IANA name, e.g. "Asia/Ho_Chi_Minh"); UTC when unset
    RESTAURANT_TIMEZONE: Optional[str] = None

    # Orders
    ORDER_ID_PREFIX: str = "ORD_"

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"LOG_LEVEL must be a standard logging level name (got {v!r})")
        return level

    @field_validator("HISTORY_CAPACITY")
    @classmethod
    def validate_history_capacity(cls, v: int) -> int:
        """
        Capacity must be at least 2.

        Eviction keeps the most recent half of the history, so a capacity
        of 1 would evict everything on the first overflow.
        """
        if v < 2:
            raise ValueError(f"HISTORY_CAPACITY must be at least 2 (got {v})")
        return v

    @field_validator("RESTAURANT_TIMEZONE")
    @classmethod
    def validate_timezone(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        try:
            pytz.timezone(v)
        except pytz.UnknownTimeZoneError:
            raise ValueError(f"RESTAURANT_TIMEZONE is not a known IANA timezone: {v!r}")
        return v

    class Config:
        env_file = ".env"
        case_sensitive = True
        extra = "ignore"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
