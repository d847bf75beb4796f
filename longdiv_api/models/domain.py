"""
Domain models for the long-division service.

These wrap engine snapshots with the bookkeeping the service needs.
"""

from datetime import datetime, timezone
from typing import Optional
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field

from longdiv.division.engine import StepEngineState
from longdiv.division.models import DivisionProblem
from longdiv.division.tiers import DifficultyTier
from longdiv.division.validator import StepValidationResult


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class EngineSession(BaseModel):
    """One learner working through one problem"""

    model_config = ConfigDict(frozen=True)

    session_id: str = Field(default_factory=lambda: uuid4().hex)
    engine_state: StepEngineState
    created_at: datetime = Field(default_factory=utcnow)
    last_activity: datetime = Field(default_factory=utcnow)
    submissions: int = Field(0, ge=0)
    last_result: Optional[StepValidationResult] = None

    @property
    def problem(self) -> DivisionProblem:
        return self.engine_state.solution.problem

    def with_state(
        self,
        engine_state: StepEngineState,
        result: Optional[StepValidationResult] = None,
    ) -> "EngineSession":
        """Copy with a new engine snapshot and refreshed activity time"""
        update = {
            "engine_state": engine_state,
            "last_activity": utcnow(),
            "last_result": result,
        }
        if result is not None:
            update["submissions"] = self.submissions + 1
        return self.model_copy(update=update)


class ProgressionSummary(BaseModel):
    """Where a solved count sits on the difficulty table"""

    total_solved: int
    difficulty_level: int
    tier: DifficultyTier
    problems_until_next_tier: Optional[int] = None
    next_level: Optional[int] = None
