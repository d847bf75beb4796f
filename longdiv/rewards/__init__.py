"""
longdiv.rewards - Dinosaur rewards earned every few solved problems

One dinosaur per milestone, assigned by position in a
fixed roster, reconciled idempotently against persisted save data.
"""

from .milestones import (
    RewardResolution,
    UnlockedReward,
    contiguous_prefix,
    create_unlocked_reward,
    resolve_rewards,
    reward_id_for,
    reward_image_path,
    utc_now,
)
from .prefetch import (
    PrefetchTarget,
    next_prefetch_target,
    problem_number_within_interval,
    should_prefetch_reward_artwork,
)
from .roster import (
    DINOSAUR_ROSTER,
    REWARD_UNLOCK_INTERVAL,
    dinosaur_for_reward_number,
    milestone_solved_count_for_reward,
    most_recent_unlocked_dinosaur,
    next_dinosaur_to_unlock,
    reward_image_slug,
    reward_number_for_solved_count,
    unlock_order,
)

__all__ = [
    "REWARD_UNLOCK_INTERVAL",
    "DINOSAUR_ROSTER",
    "UnlockedReward",
    "RewardResolution",
    "PrefetchTarget",
    "resolve_rewards",
    "contiguous_prefix",
    "create_unlocked_reward",
    "reward_id_for",
    "reward_image_path",
    "utc_now",
    "reward_number_for_solved_count",
    "milestone_solved_count_for_reward",
    "dinosaur_for_reward_number",
    "most_recent_unlocked_dinosaur",
    "next_dinosaur_to_unlock",
    "unlock_order",
    "reward_image_slug",
    "problem_number_within_interval",
    "should_prefetch_reward_artwork",
    "next_prefetch_target",
]
