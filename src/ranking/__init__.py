"""
Course ranking client for the Quiz Extended REST API.

Modules:
- client: httpx client for the qe/v1 course-ranking routes
- coordinator: paginated ranking state with stale-response suppression
- status_cache: the current user's own standing
- session: coordinator and status cache bound to one course
"""
from .client import CourseRankingClient
from .config import RankingApiConfig
from .coordinator import RankingFetchCoordinator
from .exceptions import (
    RankingApiError,
    RankingApplicationError,
    RankingConfigError,
    RankingError,
    RankingResponseError,
    RankingTransportError,
)
from .models import (
    MyRankingStats,
    MyRankingStatus,
    PaginationState,
    RankingEntry,
    RankingPage,
    RankingStatistics,
)
from .session import CourseRankingSession
from .status_cache import RankingStatusCache

__all__ = [
    "CourseRankingClient",
    "CourseRankingSession",
    "MyRankingStats",
    "MyRankingStatus",
    "PaginationState",
    "RankingApiConfig",
    "RankingApiError",
    "RankingApplicationError",
    "RankingConfigError",
    "RankingEntry",
    "RankingError",
    "RankingFetchCoordinator",
    "RankingPage",
    "RankingResponseError",
    "RankingStatistics",
    "RankingStatusCache",
    "RankingTransportError",
]
