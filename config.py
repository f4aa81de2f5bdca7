"""
Configuration settings for the course ranking client.

Uses Pydantic Settings for environment variable management with .env file support.
"""
from __future__ import annotations

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ========================================
    # WordPress REST API
    # ========================================
    qe_api_url: str = Field(
        default="",
        description="WordPress REST root, e.g. https://example.com/wp-json",
    )
    qe_nonce: str = Field(
        default="",
        description="wp_rest nonce sent as X-WP-Nonce",
    )
    qe_request_timeout_seconds: float = Field(
        default=30.0,
        description="HTTP timeout for ranking requests",
    )

    # ========================================
    # Ranking
    # ========================================
    qe_ranking_per_page: int = Field(
        default=20,
        description="Ranking rows per page (server caps at 50)",
    )
    qe_auto_jump_to_user_page: bool = Field(
        default=True,
        description="Open the ranking on the page holding the current user",
    )

    # ========================================
    # Logging
    # ========================================
    log_level: str = Field(
        default="WARNING",
        description="loguru level for the CLI sink",
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
