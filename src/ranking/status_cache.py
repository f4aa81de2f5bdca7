"""Current user's ranking status, fetched independently of the ranking table."""

from __future__ import annotations

from loguru import logger

from .client import CourseRankingClient
from .exceptions import RankingApiError
from .models import MyRankingStatus


class RankingStatusCache:
    """
    Holds the user's own standing for one course.

    The status carries both risk variants, so it is fetched once per course
    and not on risk toggles or page changes. Failures are non-critical: they
    are logged and leave ``my_status`` as None.
    """

    def __init__(self, client: CourseRankingClient, course_id: int | None = None):
        self.client = client
        self.course_id = course_id
        self.my_status: MyRankingStatus | None = None
        self._triggered_for: int | None = None

    async def fetch_my_status(self) -> MyRankingStatus | None:
        course_id = self.course_id
        if not course_id:
            return None

        try:
            status = await self.client.get_my_ranking_status(course_id)
        except RankingApiError as e:
            if course_id != self.course_id:
                logger.debug(f"Ignoring status failure for previous course {course_id}")
                return None
            logger.warning(f"Could not fetch ranking status for course {course_id}: {e}")
            return None

        if course_id != self.course_id:
            logger.debug(f"Discarding ranking status for previous course {course_id}")
            return None

        self.my_status = status
        return status

    async def set_course(self, course_id: int | None) -> MyRankingStatus | None:
        """Fetch the status once when the course becomes available or changes."""
        if course_id == self._triggered_for:
            return self.my_status

        self._triggered_for = course_id
        self.course_id = course_id
        self.my_status = None
        return await self.fetch_my_status()
