"""
Reward service.

Reconciles persisted reward lists and reports the next artwork to prefetch.
"""

from typing import Any, Optional

from longdiv.rewards import (
    PrefetchTarget,
    RewardResolution,
    next_prefetch_target,
    resolve_rewards,
    should_prefetch_reward_artwork,
    utc_now,
)
from longdiv.rewards.milestones import Clock
from longdiv.rewards.prefetch import NEAR_MILESTONE_PREFETCH_PROBLEM_NUMBERS

from ..core.config import Settings, settings as default_settings
from ..core.errors import ValidationError
from ..core.logging import get_context_logger

logger = get_context_logger(__name__)


class RewardService:
    def __init__(self, config: Optional[Settings] = None, clock: Clock = utc_now):
        self.config = config or default_settings
        self.clock = clock

    async def resolve(self, total_solved: int, unlocked_rewards: Any = None) -> RewardResolution:
        """Reconcile a persisted reward list against a lifetime solved count"""
        if isinstance(total_solved, int) and total_solved > self.config.MAX_TOTAL_SOLVED:
            raise ValidationError(
                f"total_solved must be at most {self.config.MAX_TOTAL_SOLVED}",
                field="total_solved",
            )

        resolution = resolve_rewards(
            total_solved,
            unlocked_rewards,
            clock=self.clock,
            interval=self.config.REWARD_INTERVAL,
        )

        logger.info(
            "Rewards resolved",
            extra_data={
                "total_solved": total_solved,
                "unlocked": len(resolution.unlocked_rewards),
                "newly_unlocked": len(resolution.newly_unlocked_rewards),
                "discarded": resolution.discarded_out_of_order_rewards,
            }
        )
        return resolution

    async def prefetch_target(self, total_solved: int) -> Optional[PrefetchTarget]:
        """The upcoming reward when its artwork should be prefetched, else None"""
        interval = self.config.REWARD_INTERVAL
        numbers = tuple(n for n in NEAR_MILESTONE_PREFETCH_PROBLEM_NUMBERS if n <= interval)
        if not should_prefetch_reward_artwork(total_solved, interval, numbers):
            return None
        return next_prefetch_target(total_solved, interval)


def get_reward_service(config: Optional[Settings] = None) -> RewardService:
    """Create reward service instance"""
    return RewardService(config)
