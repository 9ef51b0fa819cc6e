"""
Centralized configuration for the Matchday session core.

All settings are loaded from environment variables with sensible defaults.
Module-specific settings are namespaced by prefix (e.g., ACTIVITY_*, SUPABASE_*).
"""

from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "Matchday"
    app_version: str = "0.1.0"
    debug: bool = False

    # Supabase (identity provider + document store)
    supabase_url: str = ""
    supabase_anon_key: str = ""

    # Tables
    profiles_table: str = "users"
    activity_table: str = "user_activity"
    activity_order_column: str = "created_at"

    # Session bootstrap
    bootstrap_timeout_ms: int = 5000
    default_role: str = "spectator"

    # Activity queries
    activity_primary_overfetch: int = 3
    activity_fallback_overfetch: int = 5
    activity_default_limit: int = 100
    activity_page_size: int = 1000


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Uses lru_cache to ensure settings are only loaded once.
    """
    return Settings()
