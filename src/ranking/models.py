"""
Course ranking data model.

Server payloads are parsed into pydantic models at the HTTP boundary so the
coordinator never touches raw JSON. ``PaginationState`` is the one piece of
client-owned state: its ``current_page`` reflects navigation intent and is
never taken from a response.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from loguru import logger
from pydantic import BaseModel, ConfigDict, Field, field_validator

T = TypeVar("T")


# =============================================================================
# Ranking response
# =============================================================================


class RankingEntry(BaseModel):
    """One row of the ranking table."""

    model_config = ConfigDict(extra="ignore")

    user_id: int
    display_name: str = ""
    avatar_url: str = ""
    position: int
    position_with_risk: int | None = None
    position_without_risk: int | None = None
    score: float = 0.0
    score_with_risk: float = 0.0
    score_without_risk: float = 0.0
    quizzes_completed: int = 0
    total_attempts: int = 0
    is_current_user: bool = False

    def score_for(self, with_risk: bool) -> float:
        return self.score_with_risk if with_risk else self.score_without_risk


class RankingStatistics(BaseModel):
    """Course-wide aggregates, identical for every page."""

    model_config = ConfigDict(extra="ignore")

    total_users: int = 0
    avg_score_with_risk: float = 0.0
    avg_score_without_risk: float = 0.0
    top_10_cutoff_with_risk: float = 0.0
    top_10_cutoff_without_risk: float = 0.0
    top_20_cutoff_with_risk: float = 0.0
    top_20_cutoff_without_risk: float = 0.0

    def average_for(self, with_risk: bool) -> float:
        return self.avg_score_with_risk if with_risk else self.avg_score_without_risk

    def top_20_cutoff_for(self, with_risk: bool) -> float:
        return self.top_20_cutoff_with_risk if with_risk else self.top_20_cutoff_without_risk


class MyRankingStats(BaseModel):
    """The current user's standing as embedded in the ranking response."""

    model_config = ConfigDict(extra="ignore")

    position: int | None = None
    position_with_risk: int | None = None
    position_without_risk: int | None = None
    score_with_risk: float = 0.0
    score_without_risk: float = 0.0
    percentile_with_risk: float = 0.0
    percentile_without_risk: float = 0.0
    total_attempts: int = 0


class PaginationMeta(BaseModel):
    """Pagination block echoed by the server."""

    model_config = ConfigDict(extra="ignore")

    current_page: int = 1
    total_pages: int = 0
    per_page: int = 20
    total_users: int = 0
    user_page: int | None = None


class RankingPage(BaseModel):
    """One page of ranking data plus the aggregates returned alongside it."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    entries: list[RankingEntry] = Field(default_factory=list, alias="ranking")
    statistics: RankingStatistics | None = None
    my_stats: MyRankingStats | None = None
    pagination: PaginationMeta = Field(default_factory=PaginationMeta)
    total_quizzes: int = 0
    with_risk: bool = False

    @field_validator("statistics", mode="before")
    @classmethod
    def _empty_statistics(cls, value: Any) -> Any:
        # Courses without quizzes answer with ``statistics: []``
        if value == [] or value == {}:
            return None
        return value

    @field_validator("entries", mode="after")
    @classmethod
    def _unique_users(cls, entries: list[RankingEntry]) -> list[RankingEntry]:
        seen: set[int] = set()
        unique = []
        for entry in entries:
            if entry.user_id in seen:
                logger.warning("Dropping duplicate ranking entry for user {}", entry.user_id)
                continue
            seen.add(entry.user_id)
            unique.append(entry)
        return unique

    @property
    def current_user_entry(self) -> RankingEntry | None:
        for entry in self.entries:
            if entry.is_current_user:
                return entry
        return None


# =============================================================================
# My-status response
# =============================================================================


class MyRankingStatus(BaseModel):
    """
    The current user's progress and position in a course.

    ``position``, ``position_with_risk`` and ``total_users`` are only sent once
    the user has completed at least one quiz.
    """

    model_config = ConfigDict(extra="ignore")

    has_completed_all: bool = False
    total_quizzes: int = 0
    completed_quizzes: int = 0
    pending_quizzes: int = 0
    average_score: float = 0.0
    average_score_with_risk: float = 0.0
    total_attempts: int = 0
    last_attempt: str | None = None
    position: int | None = None
    position_with_risk: int | None = None
    total_users: int | None = None

    def score_for(self, with_risk: bool) -> float:
        return self.average_score_with_risk if with_risk else self.average_score

    def position_for(self, with_risk: bool) -> int | None:
        return self.position_with_risk if with_risk else self.position


# =============================================================================
# Envelope
# =============================================================================


class ApiEnvelope(BaseModel, Generic[T]):
    """``{success, data, message}`` wrapper used by every qe/v1 endpoint."""

    model_config = ConfigDict(extra="ignore")

    success: bool
    data: T | None = None
    message: str | None = None


# =============================================================================
# Client-owned state
# =============================================================================


@dataclass
class PaginationState:
    """Pagination as the client sees it."""

    current_page: int = 1
    total_pages: int = 0
    per_page: int = 20
    total_users: int = 0
    user_page: int | None = None

    def can_go_to(self, page: int) -> bool:
        """True if ``page`` is in range and not already the current page."""
        return 1 <= page <= self.total_pages and page != self.current_page

    def merge(self, meta: PaginationMeta) -> None:
        """Take server-derived fields from ``meta``; ``current_page`` stays."""
        self.total_pages = meta.total_pages
        self.per_page = meta.per_page
        self.total_users = meta.total_users
        self.user_page = meta.user_page

    def reset(self) -> None:
        self.current_page = 1
        self.total_pages = 0
        self.total_users = 0
        self.user_page = None
