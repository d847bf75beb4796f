"""
Reward milestone resolver.

Reconciles a player's persisted reward list with their solved count. The
persisted list is untrusted (it may come from an edited or corrupted save
file), so the resolver:

1. keeps the longest prefix whose i-th entry is exactly reward i+1,
2. truncates that prefix to the milestones the solved count actually earns,
3. fills forward with newly earned rewards stamped by the injected clock.

Re-resolving the resolver's own output is a no-op, and bad list content is
counted as discarded rather than raised.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from datetime import datetime, timezone
from typing import Any, Callable, Optional, Union

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, StrictInt, ValidationError, field_validator

from ..errors import InvalidArgumentError, require_non_negative_int, require_positive_int
from .roster import (
    REWARD_UNLOCK_INTERVAL,
    dinosaur_for_reward_number,
    milestone_solved_count_for_reward,
    reward_image_slug,
    reward_number_for_solved_count,
)

logger = logging.getLogger(__name__)

Clock = Callable[[], Union[datetime, str]]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def parse_iso_timestamp(value: str) -> datetime:
    """Parse an ISO-8601 timestamp, accepting a trailing 'Z'."""
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    return datetime.fromisoformat(text)


class UnlockedReward(BaseModel):
    """A dinosaur the player has earned"""

    model_config = ConfigDict(frozen=True)

    reward_id: str = Field(..., validation_alias=AliasChoices("reward_id", "rewardId"))
    name: str = Field(
        ..., validation_alias=AliasChoices("name", "dinosaur_name", "dinosaurName")
    )
    image_path: str = Field(..., validation_alias=AliasChoices("image_path", "imagePath"))
    earned_at: str = Field(..., validation_alias=AliasChoices("earned_at", "earnedAt"))
    milestone_solved_count: StrictInt = Field(
        ..., ge=1, validation_alias=AliasChoices("milestone_solved_count", "milestoneSolvedCount")
    )

    @field_validator("earned_at")
    @classmethod
    def validate_earned_at(cls, v: str) -> str:
        """earned_at must be a parseable ISO timestamp."""
        parse_iso_timestamp(v)
        return v


class RewardResolution(BaseModel):
    """Result of reconciling rewards against a solved count"""

    model_config = ConfigDict(frozen=True)

    unlocked_rewards: list[UnlockedReward]
    newly_unlocked_rewards: list[UnlockedReward]
    highest_earned_reward_number: int
    next_reward_number: int
    discarded_out_of_order_rewards: int


def reward_id_for(reward_number: int) -> str:
    require_positive_int(reward_number, "reward_number")
    return f"reward-{reward_number}"


def reward_image_path(name: str) -> str:
    return f"/rewards/{reward_image_slug(name)}.png"


def create_unlocked_reward(
    reward_number: int,
    earned_at: str,
    interval: int = REWARD_UNLOCK_INTERVAL,
) -> UnlockedReward:
    """Build the canonical reward for a milestone number."""
    name = dinosaur_for_reward_number(reward_number)
    return UnlockedReward(
        reward_id=reward_id_for(reward_number),
        name=name,
        image_path=reward_image_path(name),
        earned_at=earned_at,
        milestone_solved_count=milestone_solved_count_for_reward(reward_number, interval),
    )


def _coerce_reward(entry: Any) -> Optional[UnlockedReward]:
    if isinstance(entry, UnlockedReward):
        return entry
    if isinstance(entry, Mapping):
        try:
            return UnlockedReward.model_validate(dict(entry))
        except (ValidationError, TypeError):
            return None
    return None


def contiguous_prefix(
    existing: Sequence[Any],
    interval: int = REWARD_UNLOCK_INTERVAL,
) -> list[UnlockedReward]:
    """
    Longest prefix of ``existing`` matching rewards 1, 2, 3, ... in order.

    Matching entries are returned in canonical form (deterministic id and
    image path) with their original ``earned_at``.
    """
    prefix: list[UnlockedReward] = []
    for entry in existing:
        reward = _coerce_reward(entry)
        if reward is None:
            break
        reward_number = len(prefix) + 1
        if reward.milestone_solved_count != milestone_solved_count_for_reward(reward_number, interval):
            break
        if reward.name.strip() != dinosaur_for_reward_number(reward_number):
            break
        prefix.append(create_unlocked_reward(reward_number, reward.earned_at, interval))
    return prefix


def _timestamp(clock: Clock) -> str:
    value = clock()
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, str):
        try:
            parse_iso_timestamp(value)
        except ValueError:
            pass
        else:
            return value
    raise InvalidArgumentError(
        "clock must return a datetime or an ISO-8601 string.", argument="clock", value=repr(value)
    )


def resolve_rewards(
    total_solved: int,
    existing: Any = None,
    clock: Clock = utc_now,
    interval: int = REWARD_UNLOCK_INTERVAL,
) -> RewardResolution:
    """
    Reconcile a persisted reward list with the player's solved count.

    Args:
        total_solved: Lifetime problems solved
        existing: Previously persisted rewards (models, decoded JSON, or junk)
        clock: Timestamp source for newly unlocked rewards
        interval: Solves per milestone

    Returns:
        RewardResolution with the canonical list and the newly unlocked delta

    Raises:
        InvalidArgumentError: If total_solved or interval is invalid, or the
            clock returns something that is not a timestamp
    """
    require_non_negative_int(total_solved, "total_solved")
    require_positive_int(interval, "interval")

    if existing is None:
        entries: Sequence[Any] = []
    elif isinstance(existing, Sequence) and not isinstance(existing, (str, bytes)):
        entries = existing
    else:
        logger.warning(
            "Ignoring persisted rewards of type %s; expected a list", type(existing).__name__
        )
        entries = []

    ceiling = reward_number_for_solved_count(total_solved, interval)
    unlocked = contiguous_prefix(entries, interval)[:ceiling]
    discarded = len(entries) - len(unlocked)

    if discarded:
        logger.warning(
            "Discarded %d persisted reward(s) after the valid prefix of %d (ceiling %d)",
            discarded, len(unlocked), ceiling,
        )

    newly_unlocked: list[UnlockedReward] = []
    if ceiling > len(unlocked):
        earned_at = _timestamp(clock)
        for reward_number in range(len(unlocked) + 1, ceiling + 1):
            newly_unlocked.append(create_unlocked_reward(reward_number, earned_at, interval))
        unlocked.extend(newly_unlocked)
        logger.info(
            "Unlocked %d reward(s) at %d solved: %s",
            len(newly_unlocked), total_solved, ", ".join(r.name for r in newly_unlocked),
        )

    return RewardResolution(
        unlocked_rewards=unlocked,
        newly_unlocked_rewards=newly_unlocked,
        highest_earned_reward_number=ceiling,
        next_reward_number=len(unlocked) + 1,
        discarded_out_of_order_rewards=discarded,
    )


__all__ = [
    "Clock",
    "utc_now",
    "parse_iso_timestamp",
    "UnlockedReward",
    "RewardResolution",
    "reward_id_for",
    "reward_image_path",
    "create_unlocked_reward",
    "contiguous_prefix",
    "resolve_rewards",
]
