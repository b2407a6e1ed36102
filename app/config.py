# =============================================================================
# app/config.py - Application Settings
# =============================================================================
# This module loads configuration from environment variables using pydantic-settings.
# It provides a single Settings class with all configuration values.
#
# Usage:
#   from app.config import settings
#   print(settings.SUPABASE_URL)
#
# Environment variables are loaded from:
# 1. System environment variables
# 2. .env file in project root (if exists)
# =============================================================================

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings are accessed via the global `settings` instance.
    """

    # -------------------------------------------------------------------------
    # Supabase Configuration
    # -------------------------------------------------------------------------
    # These are required - app won't start without them

    SUPABASE_URL: str = Field(
        ...,
        description="Supabase project URL (e.g., https://xxx.supabase.co)"
    )

    SUPABASE_ANON_KEY: str = Field(
        ...,
        description="Supabase anon/public API key"
    )

    SUPABASE_SERVICE_KEY: str = Field(
        ...,
        description="Supabase service_role key (bypasses RLS)"
    )

    SUPABASE_JWT_SECRET: str = Field(
        default="",
        description="Legacy HS256 JWT secret for verifying Supabase access tokens"
    )

    # -------------------------------------------------------------------------
    # Spotify Configuration
    # -------------------------------------------------------------------------
    # Optional at startup; catalog endpoints fail with an upstream auth error
    # until both values are set.

    SPOTIFY_CLIENT_ID: str = Field(
        default="",
        description="Spotify application client id (client credentials flow)"
    )

    SPOTIFY_CLIENT_SECRET: str = Field(
        default="",
        description="Spotify application client secret"
    )

    SPOTIFY_MARKET: str = Field(
        default="US",
        min_length=2,
        max_length=2,
        description="ISO country code used for catalog searches"
    )

    SPOTIFY_TOKEN_MARGIN_SECONDS: int = Field(
        default=60,
        ge=0,
        le=600,
        description="Seconds subtracted from the token lifetime before refreshing"
    )

    # -------------------------------------------------------------------------
    # Application Settings
    # -------------------------------------------------------------------------

    ENVIRONMENT: Literal["development", "staging", "production"] = Field(
        default="development",
        description="Current environment"
    )

    DEBUG: bool = Field(
        default=False,
        description="Enable debug mode (verbose logging, auto-reload)"
    )

    # -------------------------------------------------------------------------
    # Avatar Upload Settings
    # -------------------------------------------------------------------------

    AVATAR_BUCKET: str = Field(
        default="avatars",
        description="Supabase Storage bucket for profile pictures"
    )

    MAX_AVATAR_SIZE_MB: int = Field(
        default=5,
        ge=1,
        le=50,
        description="Maximum avatar upload size in MB"
    )

    # -------------------------------------------------------------------------
    # Calendar / Diagnostics
    # -------------------------------------------------------------------------

    CALENDAR_UID_DOMAIN: str = Field(
        default="rehearsalist.app",
        description="Domain suffix for iCalendar event UIDs"
    )

    PROFILE_SAMPLE_SIZE: int = Field(
        default=10,
        ge=1,
        le=100,
        description="Number of rows returned in diagnostic samples"
    )

    # -------------------------------------------------------------------------
    # Pydantic Settings Configuration
    # -------------------------------------------------------------------------

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_ignore_empty=True,
        case_sensitive=True,
        extra="ignore",
    )

    # -------------------------------------------------------------------------
    # Computed Properties
    # -------------------------------------------------------------------------

    @property
    def max_avatar_size_bytes(self) -> int:
        """Convert MB to bytes for file size validation."""
        return self.MAX_AVATAR_SIZE_MB * 1024 * 1024

    @property
    def spotify_configured(self) -> bool:
        return bool(self.SPOTIFY_CLIENT_ID and self.SPOTIFY_CLIENT_SECRET)


@lru_cache
def get_settings() -> Settings:
    """
    Get cached Settings instance.

    Using lru_cache ensures we only parse .env and validate once,
    not on every access.

    Returns:
        Settings: The application settings instance
    """
    return Settings()


# Global settings instance for easy importing
# Usage: from app.config import settings
settings = get_settings()
