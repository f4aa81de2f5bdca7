"""
Course ranking session.

Pairs a ``RankingFetchCoordinator`` with a ``RankingStatusCache`` for one
course: the ranking table and the user's own standing load together when the
course opens, then evolve independently.

Usage:
    async with CourseRankingSession.from_settings() as session:
        await session.open(42)
        await session.next_page()
        await session.toggle_risk()
"""

from __future__ import annotations

import asyncio
from typing import Any

from loguru import logger

from .client import CourseRankingClient
from .config import RankingApiConfig
from .coordinator import RankingFetchCoordinator
from .models import MyRankingStatus
from .status_cache import RankingStatusCache


class CourseRankingSession:
    """Ranking coordinator and status cache sharing one client."""

    def __init__(
        self,
        client: CourseRankingClient,
        per_page: int | None = None,
        auto_jump_to_user_page: bool | None = None,
        owns_client: bool = False,
    ):
        config = client.config
        self.client = client
        self.coordinator = RankingFetchCoordinator(
            client,
            per_page=per_page if per_page is not None else config.per_page,
        )
        self.status_cache = RankingStatusCache(client)
        self.auto_jump_to_user_page = (
            auto_jump_to_user_page
            if auto_jump_to_user_page is not None
            else config.auto_jump_to_user_page
        )
        self._owns_client = owns_client

    @classmethod
    def from_settings(cls, **kwargs: Any) -> CourseRankingSession:
        """Build a session with its own client from environment settings."""
        client = CourseRankingClient(RankingApiConfig.from_settings())
        return cls(client, owns_client=True, **kwargs)

    async def __aenter__(self) -> "CourseRankingSession":
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.close()

    async def close(self) -> None:
        if self._owns_client:
            await self.client.close()

    @property
    def course_id(self) -> int | None:
        return self.coordinator.course_id

    @property
    def my_status(self) -> MyRankingStatus | None:
        return self.status_cache.my_status

    async def open(self, course_id: int) -> None:
        """
        Load a course: first ranking page with statistics, plus the user's status.

        The server answers a page-1 request with the user's page while the
        client keeps ``current_page == 1``; with ``auto_jump_to_user_page``
        the session then navigates to the user's page explicitly.
        """
        self.coordinator.set_course(course_id)
        await asyncio.gather(
            self.coordinator.fetch_ranking(load_statistics=True),
            self.status_cache.set_course(course_id),
        )

        pagination = self.coordinator.pagination
        if (
            self.auto_jump_to_user_page
            and pagination.user_page
            and pagination.current_page == 1
        ):
            logger.debug(f"Jumping to user page {pagination.user_page}")
            await self.coordinator.go_to_user_page()

    async def refresh(self) -> None:
        """Manual refresh: current page and statistics."""
        await self.coordinator.refresh(force_statistics=True)

    # Navigation is delegated; the status cache ignores it.

    async def toggle_risk(self) -> None:
        await self.coordinator.toggle_risk()

    async def go_to_page(self, page: int) -> bool:
        return await self.coordinator.go_to_page(page)

    async def next_page(self) -> bool:
        return await self.coordinator.next_page()

    async def prev_page(self) -> bool:
        return await self.coordinator.prev_page()

    async def first_page(self) -> bool:
        return await self.coordinator.first_page()

    async def last_page(self) -> bool:
        return await self.coordinator.last_page()

    async def go_to_user_page(self) -> bool:
        return await self.coordinator.go_to_user_page()
