"""
Course ranking API configuration.

Endpoint paths mirror the routes registered by the plugin under the
``qe/v1`` namespace. ``RankingApiConfig`` is the explicit configuration
object handed to the client at construction time.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from pydantic import BaseModel, field_validator

from .exceptions import RankingConfigError

if TYPE_CHECKING:
    from config import Settings

# =============================================================================
# Endpoints
# =============================================================================
API_NAMESPACE = "qe/v1"
RANKING_ENDPOINT = f"/{API_NAMESPACE}/course-ranking/ranking"
STATUS_ENDPOINT = f"/{API_NAMESPACE}/course-ranking/my-ranking-status"

# =============================================================================
# Pagination
# =============================================================================
DEFAULT_PER_PAGE = 20
MAX_PER_PAGE = 50

NONCE_HEADER = "X-WP-Nonce"


def clamp_per_page(per_page: int) -> int:
    """Clamp to the range the server accepts (1..50)."""
    return min(MAX_PER_PAGE, max(1, int(per_page)))


class RankingApiConfig(BaseModel):
    """Configuration for the course ranking endpoints."""

    api_url: str
    nonce: str | None = None
    timeout_seconds: float = 30.0
    per_page: int = DEFAULT_PER_PAGE
    auto_jump_to_user_page: bool = True

    # Endpoints
    ranking_endpoint: str = RANKING_ENDPOINT
    status_endpoint: str = STATUS_ENDPOINT

    @field_validator("api_url")
    @classmethod
    def _strip_api_url(cls, value: str) -> str:
        return value.rstrip("/")

    @field_validator("per_page")
    @classmethod
    def _clamp_per_page(cls, value: int) -> int:
        return clamp_per_page(value)

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> RankingApiConfig:
        """
        Build the config from environment settings.

        Raises:
            RankingConfigError: If no API URL is configured
        """
        if settings is None:
            from config import get_settings

            settings = get_settings()

        if not settings.qe_api_url:
            raise RankingConfigError(
                "WordPress API configuration not found. Set QE_API_URL (and QE_NONCE)."
            )

        return cls(
            api_url=settings.qe_api_url,
            nonce=settings.qe_nonce or None,
            timeout_seconds=settings.qe_request_timeout_seconds,
            per_page=settings.qe_ranking_per_page,
            auto_jump_to_user_page=settings.qe_auto_jump_to_user_page,
        )
