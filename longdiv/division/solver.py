"""
Long-division solver.

Decomposes a problem into the exact ordered workflow a student follows with
the "bus stop" method. Enough leading dividend digits are gathered so the
first working number is at least the divisor; after that every round emits:

    1. quotient-digit      floor(working / divisor)
    2. multiply-result     divisor * quotient digit
    3. subtraction-result  working - product
    4. bring-down          next dividend digit (only if one remains)

Zero quotient digits are emitted as their own step, and the sequence always
ends on a subtraction-result holding the remainder.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any, Union

from pydantic import ValidationError

from ..errors import InvalidArgumentError
from .models import (
    BringDownStep,
    DivisionProblem,
    DivisionSolution,
    MultiplyResultStep,
    QuotientDigitStep,
    StepKind,
    SubtractionResultStep,
)

logger = logging.getLogger(__name__)

DECIMAL_BASE = 10


def step_id(problem_id: str, sequence_index: int, kind: StepKind) -> str:
    """Deterministic step identifier."""
    return f"{problem_id}:step:{sequence_index}:{StepKind(kind).value}"


def _coerce_problem(problem: Union[DivisionProblem, Mapping[str, Any]]) -> DivisionProblem:
    if isinstance(problem, Mapping):
        try:
            return DivisionProblem.model_validate(dict(problem))
        except ValidationError as exc:
            raise InvalidArgumentError(
                f"Malformed division problem: {exc.error_count()} validation error(s)",
                argument="problem",
                errors=[
                    {"loc": list(e["loc"]), "msg": e["msg"]} for e in exc.errors()
                ],
            ) from exc

    if not isinstance(problem, DivisionProblem):
        raise InvalidArgumentError(
            "problem must be a DivisionProblem or a mapping of its fields.",
            argument="problem",
        )
    return problem


def _check_fields(problem: DivisionProblem) -> None:
    # Models built with model_construct() skip validation
    if not isinstance(problem.id, str) or not problem.id.strip():
        raise InvalidArgumentError("problem.id must be a non-empty string.", argument="problem.id")
    for name in ("dividend", "quotient", "remainder"):
        value = getattr(problem, name)
        if isinstance(value, bool) or not isinstance(value, int) or value < 0:
            raise InvalidArgumentError(
                f"problem.{name} must be a non-negative integer.", argument=f"problem.{name}"
            )
    divisor = problem.divisor
    if isinstance(divisor, bool) or not isinstance(divisor, int) or divisor <= 0:
        raise InvalidArgumentError(
            "problem.divisor must be a positive integer.", argument="problem.divisor"
        )
    if divmod(problem.dividend, divisor) != (problem.quotient, problem.remainder):
        raise InvalidArgumentError(
            "problem quotient/remainder do not match dividend ÷ divisor.",
            argument="problem",
        )


def solve(problem: Union[DivisionProblem, Mapping[str, Any]]) -> DivisionSolution:
    """
    Solve a problem step by step.

    Args:
        problem: A DivisionProblem, or a mapping (e.g. decoded JSON) of its fields

    Returns:
        DivisionSolution with the ordered step sequence

    Raises:
        InvalidArgumentError: If the problem is malformed
    """
    problem = _coerce_problem(problem)
    _check_fields(problem)

    pid = problem.id
    divisor = problem.divisor
    digits = [int(c) for c in str(problem.dividend)]
    steps: list = []

    # Gather leading digits until the working number reaches the divisor
    working = 0
    pos = 0
    while pos < len(digits) and working < divisor:
        working = working * DECIMAL_BASE + digits[pos]
        pos += 1
    digit_position = pos - 1

    while True:
        quotient_digit = working // divisor
        product = divisor * quotient_digit
        difference = working - product

        for kind, model, value in (
            (StepKind.QUOTIENT_DIGIT, QuotientDigitStep, quotient_digit),
            (StepKind.MULTIPLY_RESULT, MultiplyResultStep, product),
            (StepKind.SUBTRACTION_RESULT, SubtractionResultStep, difference),
        ):
            index = len(steps)
            steps.append(
                model(
                    id=step_id(pid, index, kind),
                    problem_id=pid,
                    sequence_index=index,
                    expected_value=value,
                    digit_position=digit_position,
                )
            )

        if pos >= len(digits):
            break

        brought_down = digits[pos]
        working = difference * DECIMAL_BASE + brought_down
        index = len(steps)
        steps.append(
            BringDownStep(
                id=step_id(pid, index, StepKind.BRING_DOWN),
                problem_id=pid,
                sequence_index=index,
                expected_value=brought_down,
                digit_position=pos,
                digit_brought_down=brought_down,
                new_working_number=working,
            )
        )
        digit_position = pos
        pos += 1

    solution = DivisionSolution(problem=problem, steps=tuple(steps))

    logger.debug(
        "Solved %s: %d ÷ %d in %d steps",
        pid, problem.dividend, divisor, len(steps),
    )
    return solution


def quotient_from_steps(solution: DivisionSolution) -> int:
    """Concatenate the quotient-digit values of a solution back into a number."""
    return int("".join(str(d) for d in solution.quotient_digits))


__all__ = [
    "DECIMAL_BASE",
    "step_id",
    "solve",
    "quotient_from_steps",
]
