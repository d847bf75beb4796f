"""
Difficulty tier table.

One immutable, ordered table drives both problem generation (digit ranges)
and difficulty progression (solved-count thresholds), so the two can never
drift apart.

Default table:

    level 1:  0+ solved   2-digit ÷ 1-digit      (e.g. 84 ÷ 4)
    level 2: 10+ solved   3-digit ÷ 1-digit      (e.g. 456 ÷ 7)
    level 3: 25+ solved   3-digit ÷ 2-digit      (e.g. 789 ÷ 12)
    level 4: 50+ solved   4–5 digit ÷ 2–3 digit  (e.g. 12345 ÷ 123)
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, model_validator

from ..errors import InvalidArgumentError, require_positive_int


class DifficultyTier(BaseModel):
    """Generation ranges and progression threshold for one level"""

    model_config = ConfigDict(frozen=True)

    level: int = Field(..., ge=1)
    label: str = ""
    min_dividend_digits: int = Field(..., ge=1)
    max_dividend_digits: int = Field(..., ge=1)
    min_divisor_digits: int = Field(..., ge=1)
    max_divisor_digits: int = Field(..., ge=1)
    minimum_solved_count: int = Field(..., ge=0)

    @model_validator(mode="after")
    def check_ranges(self) -> "DifficultyTier":
        if self.min_dividend_digits > self.max_dividend_digits:
            raise ValueError("min_dividend_digits must not exceed max_dividend_digits")
        if self.min_divisor_digits > self.max_divisor_digits:
            raise ValueError("min_divisor_digits must not exceed max_divisor_digits")
        return self


class ProgressionRule(BaseModel):
    """Progression view of a tier: the solved count at which it unlocks"""

    model_config = ConfigDict(frozen=True)

    level: int
    minimum_solved_count: int


class DifficultyTable(BaseModel):
    """
    Ordered sequence of difficulty tiers.

    Levels must start at 1 and be gapless; thresholds must start at 0 and be
    strictly ascending.
    """

    model_config = ConfigDict(frozen=True)

    tiers: tuple[DifficultyTier, ...]

    @model_validator(mode="after")
    def check_ordering(self) -> "DifficultyTable":
        if not self.tiers:
            raise ValueError("a difficulty table needs at least one tier")
        for index, tier in enumerate(self.tiers):
            if tier.level != index + 1:
                raise ValueError("tier levels must be gapless and ascending from 1")
            if index == 0 and tier.minimum_solved_count != 0:
                raise ValueError("level 1 must begin at 0 solved problems")
            if index > 0 and tier.minimum_solved_count <= self.tiers[index - 1].minimum_solved_count:
                raise ValueError("minimum_solved_count must be strictly ascending")
        return self

    def __len__(self) -> int:
        return len(self.tiers)

    @property
    def levels(self) -> list[int]:
        return [t.level for t in self.tiers]

    @property
    def max_level(self) -> int:
        return self.tiers[-1].level

    @property
    def progression_rules(self) -> tuple[ProgressionRule, ...]:
        return tuple(
            ProgressionRule(level=t.level, minimum_solved_count=t.minimum_solved_count)
            for t in self.tiers
        )

    def tier(self, level: int) -> DifficultyTier:
        """
        Get the tier for a level.

        Levels above the table clamp to the top tier, which is sticky.

        Raises:
            InvalidArgumentError: If level is not a positive integer
        """
        require_positive_int(level, "difficulty_level")
        return self.tiers[min(level, self.max_level) - 1]

    def index_of(self, level: int) -> int:
        for index, tier in enumerate(self.tiers):
            if tier.level == level:
                return index
        raise InvalidArgumentError(f"Unknown difficulty level {level}.", argument="level")


DEFAULT_DIFFICULTY_TABLE = DifficultyTable(
    tiers=(
        DifficultyTier(
            level=1,
            label="2-digit ÷ 1-digit",
            min_dividend_digits=2,
            max_dividend_digits=2,
            min_divisor_digits=1,
            max_divisor_digits=1,
            minimum_solved_count=0,
        ),
        DifficultyTier(
            level=2,
            label="3-digit ÷ 1-digit",
            min_dividend_digits=3,
            max_dividend_digits=3,
            min_divisor_digits=1,
            max_divisor_digits=1,
            minimum_solved_count=10,
        ),
        DifficultyTier(
            level=3,
            label="3-digit ÷ 2-digit",
            min_dividend_digits=3,
            max_dividend_digits=3,
            min_divisor_digits=2,
            max_divisor_digits=2,
            minimum_solved_count=25,
        ),
        DifficultyTier(
            level=4,
            label="4–5 digit ÷ 2–3 digit",
            min_dividend_digits=4,
            max_dividend_digits=5,
            min_divisor_digits=2,
            max_divisor_digits=3,
            minimum_solved_count=50,
        ),
    )
)


def get_difficulty_tier(level: int, table: DifficultyTable = DEFAULT_DIFFICULTY_TABLE) -> DifficultyTier:
    """Get the tier for a level from the given table (default table if omitted)."""
    return table.tier(level)


__all__ = [
    "DifficultyTier",
    "ProgressionRule",
    "DifficultyTable",
    "DEFAULT_DIFFICULTY_TABLE",
    "get_difficulty_tier",
]
