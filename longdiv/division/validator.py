"""
Step validation.

Checks one learner answer against one step of a solution. A wrong answer is
an ordinary result carrying a :class:`Hint`, not an exception. Hint messages
rotate through a small fixed list per step kind, keyed by the attempt number,
so repeated mistakes on the same step see different wording while the choice
stays deterministic.
"""

from __future__ import annotations

import re
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field

from ..errors import InvalidArgumentError, StepIndexError
from .models import DivisionSolution, Step, StepKind

INTEGER_PATTERN = re.compile(r"^\d+$", re.ASCII)

HINT_MESSAGES: dict[StepKind, tuple[str, ...]] = {
    StepKind.QUOTIENT_DIGIT: (
        "The T-Rex asks: how many times does the divisor fit into the working number?",
        "Think like a raptor and divide carefully!",
        "A Triceratops would try dividing one more time...",
    ),
    StepKind.MULTIPLY_RESULT: (
        "The T-Rex says: try multiplying again!",
        "Even a Velociraptor double-checks its multiplication!",
        "Multiply the divisor by the quotient digit you just found.",
    ),
    StepKind.SUBTRACTION_RESULT: (
        "Uh oh, the raptor got that one. Try subtracting again!",
        "A Brachiosaurus takes it slow. Subtract carefully!",
        "Check your subtraction, paleontologist!",
    ),
    StepKind.BRING_DOWN: (
        "Watch the digit slide down. Which one comes next?",
    ),
}


class Hint(BaseModel):
    """Feedback for an incorrect answer"""

    model_config = ConfigDict(frozen=True)

    step_kind: StepKind
    entered_value: Optional[int] = Field(None, description="Normalized answer, None if not a whole number")
    expected_value: int
    attempt_number: int = Field(..., ge=0)
    message: str


class StepValidationResult(BaseModel):
    """Outcome of validating one answer"""

    model_config = ConfigDict(frozen=True)

    correct: bool
    entered_value: Optional[int]
    expected_value: int
    step: Step
    hint: Optional[Hint] = None
    next_step_index: Optional[int] = None
    is_complete: bool = False


def hint_message(step_kind: StepKind, attempt_number: int) -> str:
    """Pick the hint message for a step kind and attempt number."""
    messages = HINT_MESSAGES[StepKind(step_kind)]
    return messages[attempt_number % len(messages)]


def normalize_answer(value: Any) -> Optional[int]:
    """
    Normalize a learner answer to a non-negative int.

    Ints are taken as-is; strings are stripped and must be all digits
    (leading zeros are ignored). Anything else, including negative numbers
    and bools, normalizes to None and can never be correct.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value if value >= 0 else None
    if isinstance(value, str):
        text = value.strip()
        if INTEGER_PATTERN.match(text):
            return int(text)
    return None


def expected_answer(step: Step) -> int:
    """Value a learner must enter for a step (bring-down expects the digit)."""
    if step.kind == StepKind.BRING_DOWN:
        return step.digit_brought_down
    return step.expected_value


def validate_step(
    solution: DivisionSolution,
    step_index: int,
    entered_value: Any,
    attempt_number: int = 0,
) -> StepValidationResult:
    """
    Validate a learner answer for one step.

    Args:
        solution: Solution being worked through
        step_index: Index of the step being answered
        entered_value: Learner input (int or digit string)
        attempt_number: Zero-based count of earlier wrong tries on this step

    Returns:
        StepValidationResult; on a wrong answer next_step_index stays put

    Raises:
        StepIndexError: If step_index is outside the solution
        InvalidArgumentError: If attempt_number is negative
    """
    steps = solution.steps
    if isinstance(step_index, bool) or not isinstance(step_index, int) \
            or not 0 <= step_index < len(steps):
        raise StepIndexError(step_index, len(steps))
    if isinstance(attempt_number, bool) or not isinstance(attempt_number, int) or attempt_number < 0:
        raise InvalidArgumentError(
            "attempt_number must be a non-negative integer.", argument="attempt_number"
        )

    step = steps[step_index]
    expected = expected_answer(step)
    normalized = normalize_answer(entered_value)
    correct = normalized is not None and normalized == expected
    is_last = step_index == len(steps) - 1

    if correct:
        return StepValidationResult(
            correct=True,
            entered_value=normalized,
            expected_value=expected,
            step=step,
            next_step_index=None if is_last else step_index + 1,
            is_complete=is_last,
        )

    return StepValidationResult(
        correct=False,
        entered_value=normalized,
        expected_value=expected,
        step=step,
        hint=Hint(
            step_kind=StepKind(step.kind),
            entered_value=normalized,
            expected_value=expected,
            attempt_number=attempt_number,
            message=hint_message(StepKind(step.kind), attempt_number),
        ),
        next_step_index=step_index,
        is_complete=False,
    )


__all__ = [
    "HINT_MESSAGES",
    "Hint",
    "StepValidationResult",
    "hint_message",
    "normalize_answer",
    "expected_answer",
    "validate_step",
]
