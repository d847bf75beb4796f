"""
Division problem generator.

Produces problems whose dividend and divisor digit counts fall within a
difficulty tier's ranges. All randomness comes from an injected
``random() -> float in [0, 1)`` callable, so seeding it (for example with
``random.Random(42).random``) makes generation reproducible.
"""

from __future__ import annotations

import logging
import math
import random as _random
from typing import Callable, Optional, Union

from ..errors import GenerationError, InvalidArgumentError, require_positive_int
from .models import DivisionProblem, RemainderMode
from .progression import level_for_solved_count
from .tiers import DEFAULT_DIFFICULTY_TABLE, DifficultyTable

logger = logging.getLogger(__name__)

RandomSource = Callable[[], float]

MAX_GENERATION_ATTEMPTS = 300
REMAINDER_QUOTIENT_ATTEMPTS = 12
PROBLEM_ID_SPACE = 16 ** 8


def _unit(random: RandomSource) -> float:
    value = random()
    if isinstance(value, bool) or not isinstance(value, (int, float)) or not 0.0 <= value < 1.0:
        raise InvalidArgumentError(
            "random must return a finite number in the range [0, 1).",
            argument="random",
            value=repr(value),
        )
    return float(value)


def random_int(low: int, high: int, random: RandomSource) -> int:
    """Inclusive random integer in [low, high] drawn from ``random``."""
    if high < low:
        raise InvalidArgumentError("high must be greater than or equal to low.")
    if high == low:
        return low
    return low + int(_unit(random) * (high - low + 1))


def digit_count(value: int) -> int:
    """Number of decimal digits in ``value`` (0 has one digit)."""
    return len(str(abs(value)))


def _min_for_digits(digits: int, is_divisor: bool) -> int:
    if digits == 1:
        # A divisor of 1 is a degenerate lesson
        return 2 if is_divisor else 1
    return 10 ** (digits - 1)


def _max_for_digits(digits: int) -> int:
    return 10 ** digits - 1


def _resolve_mode(remainder_mode: Union[RemainderMode, str]) -> RemainderMode:
    try:
        return RemainderMode(remainder_mode)
    except ValueError:
        raise InvalidArgumentError(
            'remainder_mode must be one of "allow", "require", or "forbid".',
            argument="remainder_mode",
            value=repr(remainder_mode),
        ) from None


def _dividend_candidate(
    divisor: int,
    dividend_digits: int,
    with_remainder: bool,
    random: RandomSource,
) -> Optional[int]:
    """Pick a dividend with the requested digit count and remainder outcome."""
    min_dividend = _min_for_digits(dividend_digits, False)
    max_dividend = _max_for_digits(dividend_digits)

    if not with_remainder:
        min_quotient = max(1, math.ceil(min_dividend / divisor))
        max_quotient = max_dividend // divisor
        if min_quotient > max_quotient:
            return None
        return divisor * random_int(min_quotient, max_quotient, random)

    min_quotient = max(1, math.ceil((min_dividend - (divisor - 1)) / divisor))
    max_quotient = (max_dividend - 1) // divisor
    if min_quotient > max_quotient:
        return None

    for _ in range(REMAINDER_QUOTIENT_ATTEMPTS):
        base = divisor * random_int(min_quotient, max_quotient, random)
        min_remainder = max(1, min_dividend - base)
        max_remainder = min(divisor - 1, max_dividend - base)
        if min_remainder > max_remainder:
            continue
        dividend = base + random_int(min_remainder, max_remainder, random)
        if digit_count(dividend) == dividend_digits:
            return dividend

    return None


def _problem_id(level: int, random: RandomSource) -> str:
    return f"division-{level}-{int(_unit(random) * PROBLEM_ID_SPACE):08x}"


def generate_problem(
    difficulty_level: int,
    remainder_mode: Union[RemainderMode, str] = RemainderMode.ALLOW,
    random: RandomSource = _random.random,
    max_attempts: int = MAX_GENERATION_ATTEMPTS,
    table: DifficultyTable = DEFAULT_DIFFICULTY_TABLE,
) -> DivisionProblem:
    """
    Generate a division problem for a difficulty level.

    Args:
        difficulty_level: Level from the table (levels above the top clamp to it)
        remainder_mode: "forbid" exact division, "require" a remainder, or "allow" either
        random: Source of floats in [0, 1)
        max_attempts: Sampling budget before giving up
        table: Difficulty table supplying digit ranges

    Returns:
        A new DivisionProblem

    Raises:
        InvalidArgumentError: On a bad level, mode, attempt budget or random value
        GenerationError: If no problem satisfies the ranges within max_attempts
    """
    require_positive_int(max_attempts, "max_attempts")
    mode = _resolve_mode(remainder_mode)
    tier = table.tier(difficulty_level)

    for _ in range(max_attempts):
        dividend_digits = random_int(tier.min_dividend_digits, tier.max_dividend_digits, random)
        divisor_digits = random_int(tier.min_divisor_digits, tier.max_divisor_digits, random)
        divisor = random_int(
            _min_for_digits(divisor_digits, True), _max_for_digits(divisor_digits), random
        )

        if mode is RemainderMode.ALLOW:
            with_remainder = _unit(random) >= 0.5
        else:
            with_remainder = mode is RemainderMode.REQUIRE

        dividend = _dividend_candidate(divisor, dividend_digits, with_remainder, random)
        if dividend is None and mode is RemainderMode.ALLOW:
            dividend = _dividend_candidate(divisor, dividend_digits, not with_remainder, random)
        if dividend is None:
            continue

        problem = DivisionProblem.create(
            id=_problem_id(tier.level, random),
            dividend=dividend,
            divisor=divisor,
            difficulty_level=tier.level,
        )
        logger.debug(
            "Generated division problem %s: %d ÷ %d (level %d, mode %s)",
            problem.id, problem.dividend, problem.divisor, tier.level, mode.value,
        )
        return problem

    logger.warning(
        "Generation exhausted %d attempts for level %d (mode %s)",
        max_attempts, tier.level, mode.value,
    )
    raise GenerationError(tier.level, max_attempts)


def generate_problem_for_solved_count(
    total_solved: int,
    remainder_mode: Union[RemainderMode, str] = RemainderMode.ALLOW,
    random: RandomSource = _random.random,
    max_attempts: int = MAX_GENERATION_ATTEMPTS,
    table: DifficultyTable = DEFAULT_DIFFICULTY_TABLE,
) -> DivisionProblem:
    """Generate a problem at the level progression assigns to ``total_solved``."""
    level = level_for_solved_count(total_solved, table)
    return generate_problem(level, remainder_mode, random, max_attempts, table)


def generate_problems(
    difficulty_level: int,
    count: int,
    remainder_mode: Union[RemainderMode, str] = RemainderMode.ALLOW,
    random: RandomSource = _random.random,
    table: DifficultyTable = DEFAULT_DIFFICULTY_TABLE,
) -> list[DivisionProblem]:
    """Generate a batch of problems for one level."""
    if isinstance(count, bool) or not isinstance(count, int) or count < 0:
        raise InvalidArgumentError("count must be a non-negative integer.", argument="count")
    return [
        generate_problem(difficulty_level, remainder_mode, random, table=table)
        for _ in range(count)
    ]


__all__ = [
    "RandomSource",
    "MAX_GENERATION_ATTEMPTS",
    "random_int",
    "digit_count",
    "generate_problem",
    "generate_problem_for_solved_count",
    "generate_problems",
]
