"""
Ranking fetch coordinator.

Owns the paginated ranking state for one course and guarantees that only the
most recently issued request can change it. Every fetch stamps itself with
``generation = ++counter`` before awaiting the network; when it resumes it
compares that stamp against the counter and drops its result (or error) if a
newer fetch has been issued in the meantime. The transport is never
cancelled; stale responses still complete and are simply ignored.

Navigation methods mutate ``PaginationState`` synchronously before their
first await, so two navigations issued back to back always see each other's
page change.
"""

from __future__ import annotations

from loguru import logger

from .client import CourseRankingClient
from .config import DEFAULT_PER_PAGE, clamp_per_page
from .exceptions import RankingApiError
from .models import (
    MyRankingStats,
    PaginationState,
    RankingEntry,
    RankingPage,
    RankingStatistics,
)


class RankingFetchCoordinator:
    """
    Paginated course ranking with last-issued-wins commits.

    State read by the presentation layer:
    - entries, statistics, my_stats, total_quizzes
    - pagination (current_page is client owned)
    - with_risk, loading, error
    """

    def __init__(
        self,
        client: CourseRankingClient,
        course_id: int | None = None,
        with_risk: bool = False,
        per_page: int = DEFAULT_PER_PAGE,
    ):
        self.client = client
        self.course_id = course_id
        self.with_risk = with_risk

        self.entries: list[RankingEntry] = []
        self.statistics: RankingStatistics | None = None
        self.my_stats: MyRankingStats | None = None
        self.total_quizzes = 0
        self.pagination = PaginationState(per_page=clamp_per_page(per_page))
        self.loading = False
        self.error: str | None = None

        self._generation = 0

    @property
    def generation(self) -> int:
        """Number of fetches issued so far."""
        return self._generation

    @property
    def has_data(self) -> bool:
        return bool(self.entries)

    @property
    def show_inline_error(self) -> bool:
        """An error with nothing committed to fall back on."""
        return self.error is not None and not self.entries

    # =========================================================================
    # Fetching
    # =========================================================================

    async def fetch_ranking(
        self,
        page: int | None = None,
        load_statistics: bool = False,
    ) -> None:
        """
        Fetch one ranking page and commit it if no newer fetch was issued.

        Args:
            page: Page to request; defaults to ``pagination.current_page``
            load_statistics: Replace already committed statistics
        """
        if not self.course_id:
            return

        self._generation += 1
        generation = self._generation
        target_page = page if page is not None else self.pagination.current_page

        self.loading = True
        self.error = None
        logger.debug(
            f"Ranking fetch #{generation}: course={self.course_id} page={target_page} "
            f"with_risk={self.with_risk}"
        )

        try:
            result = await self.client.get_course_ranking(
                self.course_id,
                page=target_page,
                per_page=self.pagination.per_page,
                with_risk=self.with_risk,
            )
        except RankingApiError as e:
            if self._is_stale(generation):
                logger.debug(f"Discarding error from stale ranking fetch #{generation}: {e}")
                return
            logger.error(f"Ranking fetch #{generation} failed: {e}")
            self.error = str(e)
            self.loading = False
            return

        if self._is_stale(generation):
            logger.debug(
                f"Discarding stale ranking fetch #{generation} (latest is #{self._generation})"
            )
            return

        self._commit(result, load_statistics)

    async def refresh(self, force_statistics: bool = False) -> None:
        """Re-fetch the current page."""
        await self.fetch_ranking(load_statistics=force_statistics)

    def _is_stale(self, generation: int) -> bool:
        return generation != self._generation

    def _commit(self, result: RankingPage, load_statistics: bool) -> None:
        self.entries = list(result.entries)
        self.my_stats = result.my_stats
        self.total_quizzes = result.total_quizzes
        if result.statistics is not None and (load_statistics or self.statistics is None):
            self.statistics = result.statistics
        self.pagination.merge(result.pagination)
        self.loading = False
        logger.info(
            f"Committed ranking page {self.pagination.current_page}/{self.pagination.total_pages} "
            f"({len(self.entries)} entries)"
        )

    # =========================================================================
    # Course / risk mode
    # =========================================================================

    def set_course(self, course_id: int | None) -> bool:
        """
        Point the coordinator at another course.

        Committed data belongs to the old course and is dropped; the next
        fetch loads statistics again. Returns False if the course is unchanged.
        """
        if course_id == self.course_id:
            return False

        self.course_id = course_id
        # In-flight fetches for the old course must not commit
        self._generation += 1
        self.entries = []
        self.statistics = None
        self.my_stats = None
        self.total_quizzes = 0
        self.pagination.reset()
        self.loading = False
        self.error = None
        return True

    async def toggle_risk(self) -> None:
        """Switch scoring mode; positions differ per mode so go back to page 1."""
        self.with_risk = not self.with_risk
        self.pagination.current_page = 1
        await self.fetch_ranking()

    # =========================================================================
    # Navigation
    # =========================================================================

    async def go_to_page(self, page: int) -> bool:
        """
        Navigate to ``page`` and fetch it.

        Returns:
            False (and does nothing) if the page is out of range or current
        """
        if not self.pagination.can_go_to(page):
            return False

        self.pagination.current_page = page
        await self.fetch_ranking(page)
        return True

    async def next_page(self) -> bool:
        return await self.go_to_page(self.pagination.current_page + 1)

    async def prev_page(self) -> bool:
        return await self.go_to_page(self.pagination.current_page - 1)

    async def first_page(self) -> bool:
        return await self.go_to_page(1)

    async def last_page(self) -> bool:
        return await self.go_to_page(self.pagination.total_pages)

    async def go_to_user_page(self) -> bool:
        """Jump to the page holding the current user, if the server told us."""
        user_page = self.pagination.user_page
        if user_page is None:
            return False
        return await self.go_to_page(user_page)
