"""Tests for seedable problem generation."""

import random
import re

import pytest

from longdiv.division import (
    DEFAULT_DIFFICULTY_TABLE,
    DifficultyTable,
    DifficultyTier,
    RemainderMode,
    generate_problem,
    generate_problem_for_solved_count,
    generate_problems,
)
from longdiv.division.generator import digit_count, random_int
from longdiv.errors import GenerationError, InvalidArgumentError

PROBLEM_ID = re.compile(r"^division-\d+-[0-9a-f]{8}$")


class TestDigitRanges:
    """Generated operands respect the tier ranges."""

    @pytest.mark.parametrize("level", [1, 2, 3, 4])
    def test_ranges(self, level, seeded_random):
        """Dividend and divisor digit counts fall inside the tier."""
        tier = DEFAULT_DIFFICULTY_TABLE.tier(level)
        source = seeded_random(level * 101)
        for _ in range(200):
            problem = generate_problem(level, random=source)
            assert tier.min_dividend_digits <= digit_count(problem.dividend) <= tier.max_dividend_digits
            assert tier.min_divisor_digits <= digit_count(problem.divisor) <= tier.max_divisor_digits
            assert problem.divisor >= 2
            assert problem.difficulty_level == level

    def test_problem_invariants(self, seeded_random):
        """Quotient and remainder are consistent with the operands."""
        source = seeded_random(7)
        for problem in generate_problems(4, 100, random=source):
            assert problem.dividend == problem.divisor * problem.quotient + problem.remainder
            assert 0 <= problem.remainder < problem.divisor
            assert problem.allow_remainder == (problem.remainder != 0)

    def test_level_above_table_clamps(self, seeded_random):
        """Levels past the top produce top-level problems."""
        problem = generate_problem(9, random=seeded_random())
        assert problem.difficulty_level == 4

    def test_problem_id_format(self, seeded_random):
        problem = generate_problem(2, random=seeded_random())
        assert PROBLEM_ID.match(problem.id)
        assert problem.id.startswith("division-2-")


class TestRemainderModes:
    """Remainder policies."""

    @pytest.mark.parametrize("level", [1, 2, 3, 4])
    def test_forbid(self, level, seeded_random):
        """forbid always divides exactly."""
        source = seeded_random(level)
        for _ in range(100):
            assert generate_problem(level, RemainderMode.FORBID, source).remainder == 0

    @pytest.mark.parametrize("level", [1, 2, 3, 4])
    def test_require(self, level, seeded_random):
        """require always leaves a remainder."""
        source = seeded_random(level)
        for _ in range(100):
            assert generate_problem(level, RemainderMode.REQUIRE, source).remainder != 0

    def test_allow_reaches_both_outcomes(self, seeded_random):
        """allow produces exact and inexact problems."""
        source = seeded_random(99)
        outcomes = {generate_problem(1, "allow", source).has_remainder for _ in range(200)}
        assert outcomes == {True, False}

    def test_mode_strings(self, seeded_random):
        """Modes may be passed as their string values."""
        assert generate_problem(1, "forbid", seeded_random()).remainder == 0

    def test_unknown_mode(self, seeded_random):
        with pytest.raises(InvalidArgumentError) as exc_info:
            generate_problem(1, "sometimes", seeded_random())
        assert exc_info.value.argument == "remainder_mode"


class TestDeterminism:
    """Seeded sources reproduce problems exactly."""

    def test_same_seed_same_problems(self):
        first = generate_problems(3, 20, random=random.Random(42).random)
        second = generate_problems(3, 20, random=random.Random(42).random)
        assert first == second

    def test_different_seeds_differ(self):
        first = generate_problems(4, 20, random=random.Random(1).random)
        second = generate_problems(4, 20, random=random.Random(2).random)
        assert first != second

    def test_constant_source(self):
        """A constant source still yields a valid problem."""
        problem = generate_problem(1, RemainderMode.REQUIRE, lambda: 0.0)
        assert (problem.dividend, problem.divisor) == (11, 2)


class TestInvalidArguments:
    """Bad inputs are rejected before or during sampling."""

    @pytest.mark.parametrize("bad_value", [1.0, -0.1, float("nan"), "0.5", None, True])
    def test_bad_random_values(self, bad_value):
        """random must return a number in [0, 1)."""
        with pytest.raises(InvalidArgumentError) as exc_info:
            generate_problem(4, random=lambda: bad_value)
        assert exc_info.value.argument == "random"

    @pytest.mark.parametrize("level", [0, -3, 1.5, True])
    def test_bad_levels(self, level, seeded_random):
        with pytest.raises(InvalidArgumentError):
            generate_problem(level, random=seeded_random())

    def test_bad_attempt_budget(self, seeded_random):
        with pytest.raises(InvalidArgumentError):
            generate_problem(1, random=seeded_random(), max_attempts=0)

    def test_bad_count(self, seeded_random):
        with pytest.raises(InvalidArgumentError):
            generate_problems(1, -1, random=seeded_random())

    def test_random_int_bounds(self):
        with pytest.raises(InvalidArgumentError):
            random_int(5, 4, lambda: 0.5)
        assert random_int(3, 3, lambda: 0.99) == 3
        assert random_int(0, 9, lambda: 0.999) == 9


class TestGenerationFailure:
    """Unsatisfiable tiers exhaust the attempt budget."""

    def test_exhausted_attempts(self, seeded_random):
        """An exact 1-digit ÷ 2-digit problem cannot exist."""
        table = DifficultyTable(tiers=(
            DifficultyTier(level=1, min_dividend_digits=1, max_dividend_digits=1,
                           min_divisor_digits=2, max_divisor_digits=2, minimum_solved_count=0),
        ))
        with pytest.raises(GenerationError) as exc_info:
            generate_problem(1, RemainderMode.FORBID, seeded_random(), max_attempts=5, table=table)
        assert exc_info.value.details == {"level": 1, "attempts": 5}
        assert isinstance(exc_info.value, RuntimeError)


class TestSolvedCountGeneration:
    """Generation driven by progression."""

    @pytest.mark.parametrize("solved,level", [(0, 1), (10, 2), (25, 3), (50, 4), (500, 4)])
    def test_level_from_solved_count(self, solved, level, seeded_random):
        problem = generate_problem_for_solved_count(solved, random=seeded_random())
        assert problem.difficulty_level == level

    def test_negative_solved_count(self, seeded_random):
        with pytest.raises(InvalidArgumentError):
            generate_problem_for_solved_count(-1, random=seeded_random())
