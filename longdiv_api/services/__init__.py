"""Services package"""

from .problem_service import ProblemService, get_problem_service
from .grading_service import GradingService, get_grading_service
from .reward_service import RewardService, get_reward_service

__all__ = [
    "ProblemService",
    "get_problem_service",
    "GradingService",
    "get_grading_service",
    "RewardService",
    "get_reward_service",
]
