"""
Pytest configuration and fixtures.

Provides shared fixtures for service and API tests.
"""

from datetime import datetime, timezone

import pytest
from fastapi.testclient import TestClient

from longdiv.division import DivisionProblem

from ..core.config import Settings
from ..main import app
from ..repositories import InMemorySessionRepository
from ..repositories import session_repository as session_repository_module
from ..services import GradingService, ProblemService, RewardService


@pytest.fixture(autouse=True)
def fresh_session_repository():
    """Give every test its own singleton session store"""
    session_repository_module._session_repository = None
    yield
    session_repository_module._session_repository = None


@pytest.fixture
def client() -> TestClient:
    """FastAPI test client"""
    return TestClient(app)


@pytest.fixture
def test_settings() -> Settings:
    return Settings(MAX_SESSIONS=3, LOG_FORMAT="text")


@pytest.fixture
def session_repository(test_settings) -> InMemorySessionRepository:
    return InMemorySessionRepository(max_sessions=test_settings.MAX_SESSIONS)


@pytest.fixture
def problem_service(test_settings) -> ProblemService:
    return ProblemService(test_settings)


@pytest.fixture
def grading_service(session_repository, problem_service) -> GradingService:
    return GradingService(session_repository, problem_service)


@pytest.fixture
def reward_service(test_settings) -> RewardService:
    return RewardService(
        test_settings,
        clock=lambda: datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc),
    )


@pytest.fixture
def sample_problem() -> DivisionProblem:
    """84 ÷ 4, answered 2, 8, 0, 4, 1, 4, 0"""
    return DivisionProblem.create("sample-84-4", 84, 4)
