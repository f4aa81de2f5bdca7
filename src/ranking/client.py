"""
Course ranking API client.

HTTP client for the plugin's ``qe/v1/course-ranking`` routes. Every call
either returns a validated model or raises a ``RankingApiError`` subclass;
callers never see raw JSON or httpx exceptions.

Usage:
    async with CourseRankingClient(RankingApiConfig.from_settings()) as client:
        page = await client.get_course_ranking(42, page=2, with_risk=True)
        status = await client.get_my_ranking_status(42)
"""

from __future__ import annotations

from typing import Any, TypeVar

import httpx
from loguru import logger
from pydantic import BaseModel, ValidationError

from .config import NONCE_HEADER, RankingApiConfig, clamp_per_page
from .exceptions import (
    RankingApplicationError,
    RankingResponseError,
    RankingTransportError,
)
from .models import ApiEnvelope, MyRankingStatus, RankingPage

M = TypeVar("M", bound=BaseModel)


class CourseRankingClient:
    """HTTP client for the course ranking endpoints."""

    def __init__(self, config: RankingApiConfig):
        self.config = config
        self._client: httpx.AsyncClient | None = None

    async def __aenter__(self) -> "CourseRankingClient":
        await self._ensure_client()
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.close()

    async def _ensure_client(self) -> httpx.AsyncClient:
        if self._client is None:
            headers = {"Content-Type": "application/json"}
            if self.config.nonce:
                headers[NONCE_HEADER] = self.config.nonce

            self._client = httpx.AsyncClient(
                base_url=self.config.api_url,
                headers=headers,
                timeout=httpx.Timeout(self.config.timeout_seconds),
                follow_redirects=True,
            )
        return self._client

    async def close(self) -> None:
        if self._client:
            await self._client.aclose()
            self._client = None

    # =========================================================================
    # Ranking
    # =========================================================================

    async def get_course_ranking(
        self,
        course_id: int,
        page: int = 1,
        per_page: int | None = None,
        with_risk: bool = False,
    ) -> RankingPage:
        """
        Fetch one page of the course ranking.

        Args:
            course_id: Course post ID
            page: 1-indexed page number
            per_page: Rows per page (clamped to 1..50)
            with_risk: Rank by risk-mode scores

        Returns:
            Parsed ranking page

        Raises:
            RankingTransportError: Network failure or non-2xx status
            RankingApplicationError: Endpoint answered ``success: false``
            RankingResponseError: Body is not valid ranking JSON
        """
        params = {
            "course_id": course_id,
            "page": max(1, page),
            "per_page": clamp_per_page(per_page or self.config.per_page),
            "with_risk": "true" if with_risk else "false",
        }
        logger.debug(f"GET {self.config.ranking_endpoint} {params}")
        body = await self._get_json(self.config.ranking_endpoint, params)
        return self._unwrap(body, RankingPage, "ranking")

    async def get_my_ranking_status(self, course_id: int) -> MyRankingStatus:
        """
        Fetch the current user's standing in a course.

        Raises:
            RankingApiError: On any transport, application or parsing failure
        """
        params = {"course_id": course_id}
        logger.debug(f"GET {self.config.status_endpoint} {params}")
        body = await self._get_json(self.config.status_endpoint, params)
        return self._unwrap(body, MyRankingStatus, "ranking status")

    async def health_check(self) -> bool:
        """
        Check if the ranking routes are reachable.

        Returns:
            True if the REST namespace index answers 200, False otherwise
        """
        try:
            client = await self._ensure_client()
            response = await client.get("/qe/v1", timeout=5.0)
            return response.status_code == 200

        except httpx.HTTPError:
            return False

    # =========================================================================
    # Internals
    # =========================================================================

    async def _get_json(self, endpoint: str, params: dict[str, Any]) -> Any:
        client = await self._ensure_client()
        try:
            response = await client.get(endpoint, params=params)
        except httpx.RequestError as e:
            raise RankingTransportError(f"Network error: {e}") from e

        if response.status_code < 200 or response.status_code >= 300:
            raise RankingTransportError(
                _error_message(response), status_code=response.status_code
            )

        try:
            return response.json()
        except ValueError as e:
            raise RankingResponseError("Response is not valid JSON") from e

    @staticmethod
    def _unwrap(body: Any, model: type[M], what: str) -> M:
        try:
            envelope = ApiEnvelope[model].model_validate(body)
        except ValidationError as e:
            raise RankingResponseError(f"Malformed {what} response: {e.error_count()} errors") from e

        if not envelope.success:
            raise RankingApplicationError(envelope.message or f"Failed to fetch {what}")
        if envelope.data is None:
            raise RankingResponseError(f"Malformed {what} response: missing data")
        return envelope.data


def _error_message(response: httpx.Response) -> str:
    """Prefer the WordPress error ``message`` over the bare status line."""
    try:
        data = response.json()
    except ValueError:
        data = None
    if isinstance(data, dict) and data.get("message"):
        return str(data["message"])
    return f"API request failed: {response.status_code} {response.reason_phrase}"
