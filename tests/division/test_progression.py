"""Tests for solved-count difficulty progression."""

import pytest

from longdiv.division import (
    DifficultyTable,
    DifficultyTier,
    all_levels,
    level_for_solved_count,
    next_level,
    problems_until_next_tier,
    tier_for_solved_count,
)
from longdiv.errors import InvalidArgumentError


class TestLevelForSolvedCount:
    """Threshold scanning over the default table."""

    @pytest.mark.parametrize(
        "solved,level",
        [
            (0, 1), (9, 1),
            (10, 2), (24, 2),
            (25, 3), (49, 3),
            (50, 4), (51, 4), (10_000, 4),
        ],
    )
    def test_boundaries(self, solved, level):
        """Levels change exactly at 10, 25 and 50."""
        assert level_for_solved_count(solved) == level

    def test_monotonic(self):
        """More solves never lower the level."""
        levels = [level_for_solved_count(n) for n in range(200)]
        assert levels == sorted(levels)

    @pytest.mark.parametrize("bad", [-1, 2.5, True, None, "10"])
    def test_invalid_counts(self, bad):
        """Negative or non-integer counts are rejected."""
        with pytest.raises(InvalidArgumentError) as exc_info:
            level_for_solved_count(bad)
        assert exc_info.value.argument == "total_solved"

    def test_custom_table(self):
        """Progression follows whatever table is passed."""
        table = DifficultyTable(tiers=(
            DifficultyTier(level=1, min_dividend_digits=2, max_dividend_digits=2,
                           min_divisor_digits=1, max_divisor_digits=1, minimum_solved_count=0),
            DifficultyTier(level=2, min_dividend_digits=3, max_dividend_digits=3,
                           min_divisor_digits=1, max_divisor_digits=1, minimum_solved_count=2),
        ))
        assert level_for_solved_count(1, table) == 1
        assert level_for_solved_count(2, table) == 2
        assert next_level(2, table) is None


class TestProgressionHelpers:
    """Gap and next-level reporting."""

    def test_tier_for_solved_count(self):
        assert tier_for_solved_count(30).level == 3

    def test_problems_until_next_tier(self):
        """Counts down to the next threshold."""
        assert problems_until_next_tier(0) == 10
        assert problems_until_next_tier(9) == 1
        assert problems_until_next_tier(10) == 15
        assert problems_until_next_tier(49) == 1

    def test_no_gap_at_top(self):
        """The top level is sticky."""
        assert problems_until_next_tier(50) is None
        assert problems_until_next_tier(500) is None

    def test_next_level(self):
        assert next_level(0) == 2
        assert next_level(30) == 4
        assert next_level(50) is None

    def test_all_levels(self):
        assert all_levels() == [1, 2, 3, 4]
