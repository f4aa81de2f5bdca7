"""Exceptions raised by the course ranking client."""

from __future__ import annotations


class RankingError(Exception):
    """Base class for course ranking errors."""
    pass


class RankingConfigError(RankingError):
    """Raised when the API configuration is missing or invalid."""
    pass


class RankingApiError(RankingError):
    """Raised when a ranking request does not produce usable data."""
    pass


class RankingTransportError(RankingApiError):
    """Network failure or non-2xx HTTP status."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class RankingApplicationError(RankingApiError):
    """The endpoint answered with ``success: false``."""
    pass


class RankingResponseError(RankingApiError):
    """The response body was not JSON or did not match the expected shape."""
    pass
