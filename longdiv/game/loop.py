"""
Game loop orchestration.

Ties the division engine to player progress and rewards:

    start_next_problem -> submit ... submit -> (completed) -> rewards -> next problem

Progress and reward snapshots are immutable models; the loop swaps in new
snapshots after each transition.
"""

from __future__ import annotations

import logging
import random as _random
import uuid
from typing import Any, Optional, Sequence, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator

from ..division.engine import StepEngineState, start_engine, submit_answer
from ..division.generator import MAX_GENERATION_ATTEMPTS, RandomSource, generate_problem
from ..division.models import DivisionProblem, RemainderMode
from ..division.progression import level_for_solved_count
from ..division.solver import solve
from ..division.tiers import DEFAULT_DIFFICULTY_TABLE, DifficultyTable
from ..division.validator import StepValidationResult
from ..errors import InvalidArgumentError
from ..rewards.milestones import Clock, RewardResolution, UnlockedReward, resolve_rewards, utc_now
from ..rewards.roster import REWARD_UNLOCK_INTERVAL

logger = logging.getLogger(__name__)


class SessionProgress(BaseModel):
    """Counters for the current play session"""

    model_config = ConfigDict(frozen=True)

    session_id: str = Field(default_factory=lambda: f"session-{uuid.uuid4().hex[:12]}")
    started_at: str
    solved_problems: int = Field(0, ge=0)
    attempted_problems: int = Field(0, ge=0)

    @model_validator(mode="after")
    def check_counts(self) -> "SessionProgress":
        if self.solved_problems > self.attempted_problems:
            raise ValueError("solved_problems cannot exceed attempted_problems")
        return self


class LifetimeProgress(BaseModel):
    """Counters that persist across sessions"""

    model_config = ConfigDict(frozen=True)

    total_problems_solved: int = Field(0, ge=0)
    total_problems_attempted: int = Field(0, ge=0)
    current_difficulty_level: int = Field(1, ge=1)
    rewards_unlocked: int = Field(0, ge=0)

    @model_validator(mode="after")
    def check_counts(self) -> "LifetimeProgress":
        if self.total_problems_solved > self.total_problems_attempted:
            raise ValueError("total_problems_solved cannot exceed total_problems_attempted")
        return self


class PlayerProgress(BaseModel):
    model_config = ConfigDict(frozen=True)

    session: SessionProgress
    lifetime: LifetimeProgress = Field(default_factory=LifetimeProgress)


class CompletedProblem(BaseModel):
    """Summary emitted when the last step of a problem is answered"""

    model_config = ConfigDict(frozen=True)

    problem_id: str
    solved_problems_this_session: int
    total_problems_solved: int
    incorrect_attempts: int


class LoopStepResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    validation: StepValidationResult
    engine_state: Optional[StepEngineState]
    completed_problem: Optional[CompletedProblem] = None
    newly_unlocked_rewards: list[UnlockedReward] = Field(default_factory=list)
    next_problem: Optional[DivisionProblem] = None


class GameLoop:
    """
    One player's game: active problem, progress counters, and rewards.

    Args:
        progress: Saved progress to resume from (a new session if omitted)
        unlocked_rewards: Persisted reward list, reconciled on construction
        remainder_mode: Remainder policy for generated problems
        random: Random source in [0, 1)
        clock: Timestamp source for sessions and rewards
        table: Difficulty table shared by generation and progression
        reward_interval: Solves per reward milestone
        auto_advance: Start the next problem as soon as one is completed

    Example:
        >>> loop = GameLoop(random=random.Random(7).random)
        >>> problem = loop.start_next_problem()
        >>> loop.submit(loop.engine_state.current_step.expected_value).validation.correct
        True
    """

    def __init__(
        self,
        progress: Optional[PlayerProgress] = None,
        unlocked_rewards: Optional[Sequence[Any]] = None,
        *,
        remainder_mode: Union[RemainderMode, str] = RemainderMode.ALLOW,
        random: RandomSource = _random.random,
        clock: Clock = utc_now,
        table: DifficultyTable = DEFAULT_DIFFICULTY_TABLE,
        reward_interval: int = REWARD_UNLOCK_INTERVAL,
        max_attempts: int = MAX_GENERATION_ATTEMPTS,
        auto_advance: bool = True,
    ):
        self._remainder_mode = remainder_mode
        self._random = random
        self._clock = clock
        self._table = table
        self._reward_interval = reward_interval
        self._max_attempts = max_attempts
        self.auto_advance = auto_advance

        if progress is None:
            started = clock()
            started_at = started if isinstance(started, str) else started.isoformat()
            progress = PlayerProgress(session=SessionProgress(started_at=started_at))

        solved = progress.lifetime.total_problems_solved
        resolution = resolve_rewards(solved, unlocked_rewards, clock, reward_interval)
        self._rewards = list(resolution.unlocked_rewards)
        self._progress = self._with_lifetime(
            progress,
            current_difficulty_level=level_for_solved_count(solved, table),
            rewards_unlocked=len(self._rewards),
        )
        self.initial_resolution: RewardResolution = resolution
        self._problem: Optional[DivisionProblem] = None
        self._engine: Optional[StepEngineState] = None

    @property
    def progress(self) -> PlayerProgress:
        return self._progress

    @property
    def unlocked_rewards(self) -> list[UnlockedReward]:
        return list(self._rewards)

    @property
    def active_problem(self) -> Optional[DivisionProblem]:
        return self._problem

    @property
    def engine_state(self) -> Optional[StepEngineState]:
        return self._engine

    @staticmethod
    def _with_lifetime(progress: PlayerProgress, **update: Any) -> PlayerProgress:
        return progress.model_copy(update={"lifetime": progress.lifetime.model_copy(update=update)})

    def start_next_problem(self) -> DivisionProblem:
        """Generate, solve and start the next problem at the player's level."""
        solved = self._progress.lifetime.total_problems_solved
        level = level_for_solved_count(solved, self._table)
        problem = generate_problem(
            level,
            remainder_mode=self._remainder_mode,
            random=self._random,
            max_attempts=self._max_attempts,
            table=self._table,
        )
        self._problem = problem
        self._engine = start_engine(solve(problem))

        session = self._progress.session
        lifetime = self._progress.lifetime
        self._progress = PlayerProgress(
            session=session.model_copy(update={"attempted_problems": session.attempted_problems + 1}),
            lifetime=lifetime.model_copy(
                update={
                    "total_problems_attempted": lifetime.total_problems_attempted + 1,
                    "current_difficulty_level": level,
                }
            ),
        )
        logger.debug("Started problem %s at level %d", problem.id, level)
        return problem

    def submit(self, entered_value: Any) -> LoopStepResult:
        """
        Submit an answer for the active problem's current step.

        Raises:
            InvalidArgumentError: If there is no active problem
        """
        if self._engine is None or self._problem is None:
            raise InvalidArgumentError(
                "An active problem is required before step input can be applied.",
                argument="entered_value",
            )

        transition = submit_answer(self._engine, entered_value)
        self._engine = transition.state
        if not transition.result.is_complete:
            return LoopStepResult(validation=transition.result, engine_state=self._engine)

        completed = self._complete_problem()
        newly_unlocked = self._resolve_rewards()
        finished_state = self._engine

        next_problem = None
        if self.auto_advance:
            next_problem = self.start_next_problem()
        else:
            self._problem = None
            self._engine = None

        return LoopStepResult(
            validation=transition.result,
            engine_state=self._engine if self.auto_advance else finished_state,
            completed_problem=completed,
            newly_unlocked_rewards=newly_unlocked,
            next_problem=next_problem,
        )

    def _complete_problem(self) -> CompletedProblem:
        session = self._progress.session
        lifetime = self._progress.lifetime
        solved = lifetime.total_problems_solved + 1
        self._progress = PlayerProgress(
            session=session.model_copy(update={"solved_problems": session.solved_problems + 1}),
            lifetime=lifetime.model_copy(
                update={
                    "total_problems_solved": solved,
                    "current_difficulty_level": level_for_solved_count(solved, self._table),
                }
            ),
        )
        logger.info("Player solved %s (%d total)", self._problem.id, solved)
        return CompletedProblem(
            problem_id=self._problem.id,
            solved_problems_this_session=self._progress.session.solved_problems,
            total_problems_solved=solved,
            incorrect_attempts=self._engine.total_incorrect_attempts,
        )

    def _resolve_rewards(self) -> list[UnlockedReward]:
        resolution = resolve_rewards(
            self._progress.lifetime.total_problems_solved,
            self._rewards,
            self._clock,
            self._reward_interval,
        )
        self._rewards = list(resolution.unlocked_rewards)
        self._progress = self._with_lifetime(self._progress, rewards_unlocked=len(self._rewards))
        return list(resolution.newly_unlocked_rewards)


__all__ = [
    "SessionProgress",
    "LifetimeProgress",
    "PlayerProgress",
    "CompletedProblem",
    "LoopStepResult",
    "GameLoop",
]
