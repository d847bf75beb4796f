"""
Tests for the service and repository layers.

Unit tests for problem, grading and reward services.
"""

import asyncio

import pytest

from longdiv.division import RemainderMode
from longdiv.errors import EngineCompleteError, GenerationError, InvalidArgumentError

from ..core.config import Settings
from ..core.errors import SessionNotFoundError, ValidationError, engine_error_status
from ..models import EngineSession
from ..services import RewardService

ANSWERS = [2, 8, 0, 4, 1, 4, 0]


class TestProblemService:
    async def test_generate_by_level(self, problem_service):
        """Explicit levels are honored"""
        problem = await problem_service.generate_problem(difficulty_level=3, seed=11)
        assert problem.difficulty_level == 3

    async def test_generate_by_solved_count(self, problem_service):
        problem = await problem_service.generate_problem(total_solved=50, seed=11)
        assert problem.difficulty_level == 4

    async def test_seed_is_reproducible(self, problem_service):
        first = await problem_service.generate_problem(difficulty_level=2, seed=7)
        second = await problem_service.generate_problem(difficulty_level=2, seed=7)
        assert first == second

    async def test_remainder_mode(self, problem_service):
        for seed in range(20):
            problem = await problem_service.generate_problem(
                difficulty_level=1, remainder_mode=RemainderMode.REQUIRE, seed=seed
            )
            assert problem.remainder != 0

    async def test_level_or_count_required(self, problem_service):
        with pytest.raises(ValidationError):
            await problem_service.generate_problem()

    async def test_solve(self, problem_service, sample_problem):
        solution = await problem_service.solve_problem(sample_problem)
        assert [s.expected_value for s in solution.steps] == ANSWERS

    async def test_solve_malformed_mapping(self, problem_service):
        with pytest.raises(InvalidArgumentError):
            await problem_service.solve_problem({"id": "x", "dividend": 5, "divisor": 0})

    async def test_progression(self, problem_service):
        summary = await problem_service.get_progression(24)
        assert summary.difficulty_level == 2
        assert summary.problems_until_next_tier == 1
        assert summary.next_level == 3
        assert summary.tier.level == 2


class TestSessionRepository:
    async def test_missing_session(self, session_repository):
        with pytest.raises(SessionNotFoundError):
            await session_repository.get("missing")

    async def test_evicts_oldest(self, grading_service, session_repository, sample_problem):
        """The store holds at most MAX_SESSIONS sessions"""
        sessions = [await grading_service.start_session(sample_problem) for _ in range(4)]
        assert await session_repository.count() == 3
        with pytest.raises(SessionNotFoundError):
            await session_repository.get(sessions[0].session_id)
        assert (await session_repository.get(sessions[3].session_id)) == sessions[3]

    async def test_delete(self, grading_service, session_repository, sample_problem):
        session = await grading_service.start_session(sample_problem)
        await session_repository.delete(session.session_id)
        assert await session_repository.list() == []


class TestGradingService:
    async def test_start_session(self, grading_service, sample_problem):
        session = await grading_service.start_session(sample_problem)
        assert isinstance(session, EngineSession)
        assert session.problem == sample_problem
        assert session.engine_state.current_step_index == 0

    async def test_submit_records_result(self, grading_service, sample_problem):
        session = await grading_service.start_session(sample_problem)
        updated = await grading_service.submit_answer(session.session_id, "3")
        assert updated.last_result.correct is False
        assert updated.submissions == 1
        assert updated.engine_state.total_incorrect_attempts == 1

        fetched = await grading_service.get_session(session.session_id)
        assert fetched == updated

    async def test_complete_and_resubmit(self, grading_service, sample_problem):
        session = await grading_service.start_session(sample_problem)
        for answer in ANSWERS:
            session = await grading_service.submit_answer(session.session_id, answer)
        assert session.engine_state.completed is True
        with pytest.raises(EngineCompleteError):
            await grading_service.submit_answer(session.session_id, 0)

    async def test_concurrent_submissions_serialize(self, grading_service, sample_problem):
        """Concurrent wrong answers are all counted"""
        session = await grading_service.start_session(sample_problem)
        await asyncio.gather(*(
            grading_service.submit_answer(session.session_id, 9) for _ in range(10)
        ))
        final = await grading_service.get_session(session.session_id)
        assert final.engine_state.total_incorrect_attempts == 10
        assert final.submissions == 10

    async def test_reset(self, grading_service, sample_problem):
        session = await grading_service.start_session(sample_problem)
        await grading_service.submit_answer(session.session_id, 2)
        reset = await grading_service.reset_session(session.session_id)
        assert reset.engine_state.current_step_index == 0
        assert reset.last_result is None

    async def test_unknown_session(self, grading_service):
        with pytest.raises(SessionNotFoundError):
            await grading_service.submit_answer("nope", 1)


class TestRewardService:
    async def test_resolve(self, reward_service):
        resolution = await reward_service.resolve(10, [])
        assert [r.name for r in resolution.newly_unlocked_rewards] == [
            "Tyrannosaurus Rex", "Velociraptor"
        ]
        assert resolution.unlocked_rewards[0].earned_at == "2024-05-01T12:00:00+00:00"

    async def test_prefetch_target(self, reward_service):
        assert await reward_service.prefetch_target(0) is None
        target = await reward_service.prefetch_target(8)
        assert target.name == "Velociraptor"

    async def test_solved_count_ceiling(self):
        """Counts above the configured ceiling are refused before any reward is built"""
        service = RewardService(Settings(MAX_TOTAL_SOLVED=20))
        resolution = await service.resolve(20, [])
        assert len(resolution.unlocked_rewards) == 4

        with pytest.raises(ValidationError) as exc_info:
            await service.resolve(21, [])
        assert exc_info.value.status_code == 422
        assert exc_info.value.details == {"field": "total_solved"}


class TestEngineErrorStatus:
    def test_status_mapping(self):
        assert engine_error_status(EngineCompleteError("p-1")) == 409
        assert engine_error_status(InvalidArgumentError("bad input", argument="value")) == 422
        assert engine_error_status(GenerationError(level=4, attempts=300)) == 500
