"""
Step engine.

A small state machine over a solution's steps:

    pending  (current_step_index < len(steps))
    complete (current_step_index == len(steps))

:func:`submit_answer` is a pure transition ``(state, value) -> (state, result)``
returning a new frozen state; nothing is mutated. :class:`StepEngine` is a
thin convenience wrapper that holds the latest state for a single caller.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any, NamedTuple, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from ..errors import EngineCompleteError
from .models import DivisionSolution, Step, StepKind
from .validator import StepValidationResult, validate_step

logger = logging.getLogger(__name__)


class EngineStatus(str, Enum):
    PENDING = "pending"
    COMPLETE = "complete"


class StepEngineState(BaseModel):
    """Snapshot of progress through one solution"""

    model_config = ConfigDict(frozen=True)

    solution: DivisionSolution
    current_step_index: int = Field(0, ge=0)
    current_attempts: int = Field(0, ge=0)
    total_incorrect_attempts: int = Field(0, ge=0)
    completed: bool = False

    @model_validator(mode="after")
    def check_position(self) -> "StepEngineState":
        total = len(self.solution.steps)
        if self.current_step_index > total:
            raise ValueError(f"current_step_index {self.current_step_index} is past the last step ({total})")
        if self.completed != (self.current_step_index == total):
            raise ValueError("completed must be true exactly when every step has been answered")
        return self

    @property
    def steps(self) -> tuple[Step, ...]:
        return self.solution.steps

    @property
    def status(self) -> EngineStatus:
        return EngineStatus.COMPLETE if self.completed else EngineStatus.PENDING

    @property
    def current_step(self) -> Optional[Step]:
        if self.completed:
            return None
        return self.solution.steps[self.current_step_index]


class EngineTransition(NamedTuple):
    state: StepEngineState
    result: StepValidationResult


class EngineProgress(BaseModel):
    """Read-only summary of engine progress"""

    total_steps: int
    completed_steps: int
    current_step_kind: Optional[StepKind]
    is_complete: bool


def start_engine(solution: DivisionSolution) -> StepEngineState:
    """Initial pending state at step 0 with no attempts."""
    return StepEngineState(solution=solution)


def submit_answer(state: StepEngineState, entered_value: Any) -> EngineTransition:
    """
    Submit an answer for the current step.

    Correct answers reset the per-step attempt count and advance (completing
    after the last step). Wrong answers bump both attempt counters and stay
    on the same step.

    Raises:
        EngineCompleteError: If the engine is already complete
    """
    if state.completed:
        raise EngineCompleteError(state.solution.problem.id)

    result = validate_step(
        state.solution,
        state.current_step_index,
        entered_value,
        state.current_attempts,
    )

    if result.correct:
        next_state = state.model_copy(
            update={
                "current_step_index": state.current_step_index + 1,
                "current_attempts": 0,
                "completed": result.is_complete,
            }
        )
        if result.is_complete:
            logger.info(
                "Problem %s complete with %d incorrect attempt(s)",
                state.solution.problem.id, state.total_incorrect_attempts,
            )
    else:
        next_state = state.model_copy(
            update={
                "current_attempts": state.current_attempts + 1,
                "total_incorrect_attempts": state.total_incorrect_attempts + 1,
            }
        )

    return EngineTransition(next_state, result)


def reset_engine(state: StepEngineState) -> StepEngineState:
    """Return to the initial pending state over the same solution."""
    return start_engine(state.solution)


def engine_progress(state: StepEngineState) -> EngineProgress:
    current = state.current_step
    return EngineProgress(
        total_steps=len(state.steps),
        completed_steps=state.current_step_index,
        current_step_kind=StepKind(current.kind) if current is not None else None,
        is_complete=state.completed,
    )


class StepEngine:
    """
    Stateful wrapper around the pure engine transitions.

    Owned by one caller at a time; calls to submit() must be serialized.

    Example:
        >>> engine = StepEngine(solve(problem))
        >>> engine.submit("2").correct
        True
    """

    def __init__(self, solution: DivisionSolution):
        self._state = start_engine(solution)

    @property
    def state(self) -> StepEngineState:
        return self._state

    @property
    def current_step(self) -> Optional[Step]:
        return self._state.current_step

    @property
    def is_complete(self) -> bool:
        return self._state.completed

    def submit(self, entered_value: Any) -> StepValidationResult:
        transition = submit_answer(self._state, entered_value)
        self._state = transition.state
        return transition.result

    def reset(self) -> None:
        self._state = reset_engine(self._state)

    def progress(self) -> EngineProgress:
        return engine_progress(self._state)


__all__ = [
    "EngineStatus",
    "StepEngineState",
    "EngineTransition",
    "EngineProgress",
    "start_engine",
    "submit_answer",
    "reset_engine",
    "engine_progress",
    "StepEngine",
]
