"""
Difficulty progression.

Maps a lifetime solved-count to a difficulty level by scanning the ascending
thresholds of a :class:`~longdiv.division.tiers.DifficultyTable`. The top
level is sticky: once reached, no count promotes past it.
"""

from __future__ import annotations

from typing import Optional

from ..errors import require_non_negative_int
from .tiers import DEFAULT_DIFFICULTY_TABLE, DifficultyTable, DifficultyTier


def level_for_solved_count(
    total_solved: int,
    table: DifficultyTable = DEFAULT_DIFFICULTY_TABLE,
) -> int:
    """
    Determine the difficulty level for a lifetime solved count.

    Args:
        total_solved: Lifetime problems solved (non-negative integer)
        table: Difficulty table to scan

    Returns:
        The highest level whose threshold is met

    Raises:
        InvalidArgumentError: If total_solved is not a non-negative integer
    """
    require_non_negative_int(total_solved, "total_solved")

    level = table.tiers[0].level
    for rule in table.progression_rules:
        if total_solved < rule.minimum_solved_count:
            break
        level = rule.level
    return level


def tier_for_solved_count(
    total_solved: int,
    table: DifficultyTable = DEFAULT_DIFFICULTY_TABLE,
) -> DifficultyTier:
    """Get the full tier for a lifetime solved count."""
    return table.tier(level_for_solved_count(total_solved, table))


def problems_until_next_tier(
    total_solved: int,
    table: DifficultyTable = DEFAULT_DIFFICULTY_TABLE,
) -> Optional[int]:
    """Number of solves left before the next level, or None at the top level."""
    index = table.index_of(level_for_solved_count(total_solved, table))
    if index >= len(table.tiers) - 1:
        return None
    return table.tiers[index + 1].minimum_solved_count - total_solved


def next_level(
    total_solved: int,
    table: DifficultyTable = DEFAULT_DIFFICULTY_TABLE,
) -> Optional[int]:
    """The level after the current one, or None at the top level."""
    index = table.index_of(level_for_solved_count(total_solved, table))
    if index >= len(table.tiers) - 1:
        return None
    return table.tiers[index + 1].level


def all_levels(table: DifficultyTable = DEFAULT_DIFFICULTY_TABLE) -> list[int]:
    """All levels in progression order."""
    return table.levels


__all__ = [
    "level_for_solved_count",
    "tier_for_solved_count",
    "problems_until_next_tier",
    "next_level",
    "all_levels",
]
