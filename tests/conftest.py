"""
Pytest Configuration and Fixtures.

This file configures pytest and provides shared fixtures for all tests.
"""
import asyncio
import math
import sys
from pathlib import Path

import pytest

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from src.ranking.config import RankingApiConfig  # noqa: E402
from src.ranking.models import RankingPage  # noqa: E402


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "smoke: Smoke tests for CLI commands")


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their location."""
    for item in items:
        if "unit" in str(item.fspath):
            item.add_marker(pytest.mark.unit)
        elif "smoke" in str(item.fspath):
            item.add_marker(pytest.mark.smoke)


@pytest.fixture(scope="session")
def project_root():
    """Return the project root directory."""
    return PROJECT_ROOT


@pytest.fixture
def api_config():
    """API configuration pointing at a fake WordPress install."""
    return RankingApiConfig(
        api_url="http://wp.test/wp-json/",
        nonce="abc123nonce",
        per_page=10,
        timeout_seconds=5.0,
    )


def build_ranking_data(
    total_users=45,
    page=1,
    per_page=10,
    with_risk=False,
    current_user_id=None,
    avg_score=70.0,
    current_page=None,
):
    """
    Build the ``data`` block of a ranking response.

    Users are numbered 1..total_users and already sorted best first, as the
    server sends them.
    """
    offset = (page - 1) * per_page
    ranking = []
    for index, user_id in enumerate(range(offset + 1, min(total_users, offset + per_page) + 1)):
        position = offset + index + 1
        score_without = round(100 - position * 0.5, 2)
        score_with = round(score_without - 1, 2)
        ranking.append({
            "position": position,
            "user_id": user_id,
            "display_name": f"User {user_id}",
            "avatar_url": f"http://wp.test/avatar/{user_id}.png",
            "score_without_risk": score_without,
            "score_with_risk": score_with,
            "score": score_with if with_risk else score_without,
            "quizzes_completed": 8,
            "total_attempts": 10,
            "is_current_user": user_id == current_user_id,
        })

    user_page = math.ceil(current_user_id / per_page) if current_user_id else None
    return {
        "ranking": ranking,
        "total_quizzes": 8,
        "statistics": {
            "total_users": total_users,
            "avg_score_without_risk": avg_score,
            "avg_score_with_risk": avg_score - 1,
            "top_10_cutoff_without_risk": 97.5,
            "top_10_cutoff_with_risk": 96.5,
            "top_20_cutoff_without_risk": 95.5,
            "top_20_cutoff_with_risk": 94.5,
        },
        "my_stats": {
            "position": current_user_id,
            "position_without_risk": current_user_id,
            "position_with_risk": current_user_id,
            "score_without_risk": 80.0,
            "score_with_risk": 79.0,
            "percentile_without_risk": 10.0,
            "percentile_with_risk": 10.0,
            "total_attempts": 10,
        } if current_user_id else None,
        "pagination": {
            "current_page": current_page if current_page is not None else page,
            "total_pages": math.ceil(total_users / per_page),
            "per_page": per_page,
            "total_users": total_users,
            "user_page": user_page,
        },
        "with_risk": with_risk,
    }


@pytest.fixture
def make_ranking_data():
    """Factory for raw ranking ``data`` blocks."""
    return build_ranking_data


@pytest.fixture
def make_ranking_page():
    """Factory for parsed ``RankingPage`` objects."""
    def _make(**kwargs):
        return RankingPage.model_validate(build_ranking_data(**kwargs))
    return _make


class FakeRankingClient:
    """
    Stand-in for ``CourseRankingClient``.

    With a ``responder`` every call resolves immediately with its return value
    (or raises it, if it is an exception). Without one, each call parks on a
    future in ``pending`` so the test decides when and in which order calls
    resolve.

    Status calls resolve with ``status_result`` unless ``gate_status`` is set,
    in which case they park on futures in ``status_pending``.
    """

    def __init__(self, config, responder=None):
        self.config = config
        self.responder = responder
        self.calls = []
        self.pending = []
        self.status_calls = []
        self.status_result = None
        self.gate_status = False
        self.status_pending = []

    async def get_course_ranking(self, course_id, page=1, per_page=None, with_risk=False):
        call = {"course_id": course_id, "page": page, "per_page": per_page, "with_risk": with_risk}
        self.calls.append(call)
        if self.responder is not None:
            result = self.responder(**call)
            if isinstance(result, Exception):
                raise result
            return result

        future = asyncio.get_running_loop().create_future()
        self.pending.append(future)
        return await future

    async def get_my_ranking_status(self, course_id):
        self.status_calls.append(course_id)
        if self.gate_status:
            future = asyncio.get_running_loop().create_future()
            self.status_pending.append(future)
            return await future
        if isinstance(self.status_result, Exception):
            raise self.status_result
        return self.status_result

    async def close(self):
        pass


@pytest.fixture
def fake_client(api_config):
    """Fake client answering every ranking call with a 45-user course."""
    def responder(course_id, page, per_page, with_risk):
        return RankingPage.model_validate(
            build_ranking_data(total_users=45, page=page, per_page=per_page or 10, with_risk=with_risk)
        )
    return FakeRankingClient(api_config, responder=responder)


@pytest.fixture
def gated_client(api_config):
    """Fake client whose calls only resolve when the test says so."""
    return FakeRankingClient(api_config)

