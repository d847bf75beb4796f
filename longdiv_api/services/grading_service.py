"""
Grading service for step answers.

Runs engine sessions: start, submit one answer, reset, inspect.
"""

from typing import Any

from longdiv.division import DivisionProblem, reset_engine, start_engine, submit_answer

from ..models.domain import EngineSession
from ..repositories.session_repository import SessionRepositoryInterface
from ..core.logging import get_context_logger
from .problem_service import ProblemService

logger = get_context_logger(__name__)


class GradingService:
    """
    Service for step-by-step answer grading.

    Each submission is a pure engine transition applied inside the
    repository's update, so concurrent requests on one session are
    serialized.
    """

    def __init__(
        self,
        repository: SessionRepositoryInterface,
        problem_service: ProblemService,
    ):
        self.repository = repository
        self.problem_service = problem_service

    async def start_session(self, problem: DivisionProblem) -> EngineSession:
        """Solve a problem and open a new engine session on it"""
        solution = await self.problem_service.solve_problem(problem)
        session = await self.repository.add(EngineSession(engine_state=start_engine(solution)))

        logger.info(
            "Session started",
            extra_data={
                "session_id": session.session_id,
                "problem_id": problem.id,
                "num_steps": len(solution.steps),
            }
        )
        return session

    async def get_session(self, session_id: str) -> EngineSession:
        return await self.repository.get(session_id)

    async def submit_answer(self, session_id: str, entered_value: Any) -> EngineSession:
        """
        Grade one answer for the session's current step.

        Returns:
            The updated session; ``last_result`` holds the validation result

        Raises:
            SessionNotFoundError: If the session does not exist
            EngineCompleteError: If the session's problem is already finished
        """

        def transition(session: EngineSession) -> EngineSession:
            state, result = submit_answer(session.engine_state, entered_value)
            return session.with_state(state, result)

        session = await self.repository.update(session_id, transition)
        result = session.last_result

        logger.info(
            "Answer graded",
            extra_data={
                "session_id": session_id,
                "step_index": result.step.sequence_index,
                "step_kind": result.step.kind,
                "correct": result.correct,
                "is_complete": result.is_complete,
            }
        )
        return session

    async def reset_session(self, session_id: str) -> EngineSession:
        """Return a session to its first step with cleared attempt counters"""
        session = await self.repository.update(
            session_id,
            lambda s: s.with_state(reset_engine(s.engine_state)),
        )

        logger.info("Session reset", extra_data={"session_id": session_id})
        return session


# Factory function
def get_grading_service(
    repository: SessionRepositoryInterface,
    problem_service: ProblemService,
) -> GradingService:
    """Create grading service instance"""
    return GradingService(repository, problem_service)
