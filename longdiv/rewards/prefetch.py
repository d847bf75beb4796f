"""
Near-milestone artwork prefetch decision.

Reward artwork is generated by an external image service, which is slow. The
caller can start generating the upcoming dinosaur's image a couple of
problems before the milestone lands. This module only decides *whether* and
*what* to prefetch; the image call itself lives outside the engine.
"""

from __future__ import annotations

from collections.abc import Sequence

from pydantic import BaseModel, ConfigDict

from ..errors import InvalidArgumentError, require_non_negative_int, require_positive_int
from .roster import (
    REWARD_UNLOCK_INTERVAL,
    dinosaur_for_reward_number,
    milestone_solved_count_for_reward,
    reward_number_for_solved_count,
)

NEAR_MILESTONE_PREFETCH_PROBLEM_NUMBERS = (3, 4)


class PrefetchTarget(BaseModel):
    model_config = ConfigDict(frozen=True)

    reward_number: int
    name: str
    milestone_solved_count: int
    problem_number_within_interval: int


def problem_number_within_interval(total_solved: int, interval: int = REWARD_UNLOCK_INTERVAL) -> int:
    """1-based position of the problem the learner is now working on within the interval."""
    require_non_negative_int(total_solved, "total_solved")
    require_positive_int(interval, "interval")
    return total_solved % interval + 1


def should_prefetch_reward_artwork(
    total_solved: int,
    interval: int = REWARD_UNLOCK_INTERVAL,
    prefetch_problem_numbers: Sequence[int] = NEAR_MILESTONE_PREFETCH_PROBLEM_NUMBERS,
) -> bool:
    """True when the learner is close enough to the next milestone to prefetch."""
    require_positive_int(interval, "interval")
    for number in prefetch_problem_numbers:
        require_positive_int(number, "prefetch_problem_numbers entries")
        if number > interval:
            raise InvalidArgumentError(
                "prefetch_problem_numbers entries must not exceed interval.",
                argument="prefetch_problem_numbers",
            )
    return problem_number_within_interval(total_solved, interval) in prefetch_problem_numbers


def next_prefetch_target(total_solved: int, interval: int = REWARD_UNLOCK_INTERVAL) -> PrefetchTarget:
    """The reward the learner will earn next."""
    reward_number = reward_number_for_solved_count(total_solved, interval) + 1
    return PrefetchTarget(
        reward_number=reward_number,
        name=dinosaur_for_reward_number(reward_number),
        milestone_solved_count=milestone_solved_count_for_reward(reward_number, interval),
        problem_number_within_interval=problem_number_within_interval(total_solved, interval),
    )


__all__ = [
    "NEAR_MILESTONE_PREFETCH_PROBLEM_NUMBERS",
    "PrefetchTarget",
    "problem_number_within_interval",
    "should_prefetch_reward_artwork",
    "next_prefetch_target",
]
