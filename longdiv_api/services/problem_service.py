"""
Problem service for business logic.

Wraps generation, solving and the difficulty table behind async methods.
"""

import random
from typing import Any, Mapping, Optional, Union

from longdiv.division import (
    DEFAULT_DIFFICULTY_TABLE,
    DifficultyTable,
    DivisionProblem,
    DivisionSolution,
    RemainderMode,
    generate_problem,
    level_for_solved_count,
    next_level,
    problems_until_next_tier,
    solve,
    tier_for_solved_count,
)

from ..models.domain import ProgressionSummary
from ..core.config import Settings, settings as default_settings
from ..core.errors import ValidationError
from ..core.logging import get_context_logger

logger = get_context_logger(__name__)


class ProblemService:
    """
    Service for problem operations.

    Generation is seeded per request when a seed is given, so the same
    request always yields the same problem.
    """

    def __init__(
        self,
        config: Optional[Settings] = None,
        table: DifficultyTable = DEFAULT_DIFFICULTY_TABLE,
    ):
        self.config = config or default_settings
        self.table = table

    async def generate_problem(
        self,
        difficulty_level: Optional[int] = None,
        total_solved: Optional[int] = None,
        remainder_mode: Union[RemainderMode, str, None] = None,
        seed: Optional[int] = None,
    ) -> DivisionProblem:
        """
        Generate a problem by level or by lifetime solved count.

        Args:
            difficulty_level: Explicit level (wins over total_solved)
            total_solved: Lifetime solved count to derive the level from
            remainder_mode: Remainder policy, defaults to DEFAULT_REMAINDER_MODE
            seed: Optional seed for a reproducible problem

        Raises:
            ValidationError: If neither level nor solved count is given
            InvalidArgumentError: If the engine rejects an argument
            GenerationError: If no problem fits within the attempt budget
        """
        if difficulty_level is None:
            if total_solved is None:
                raise ValidationError(
                    "Either difficulty_level or total_solved is required",
                    field="difficulty_level",
                )
            difficulty_level = level_for_solved_count(total_solved, self.table)

        mode = remainder_mode or self.config.DEFAULT_REMAINDER_MODE
        source = random.Random(seed).random if seed is not None else random.random

        problem = generate_problem(
            difficulty_level,
            remainder_mode=mode,
            random=source,
            max_attempts=self.config.GENERATION_MAX_ATTEMPTS,
            table=self.table,
        )

        logger.info(
            "Problem generated",
            extra_data={
                "problem_id": problem.id,
                "difficulty_level": difficulty_level,
                "remainder_mode": RemainderMode(mode).value,
                "seed": seed,
            }
        )
        return problem

    async def solve_problem(self, problem: Union[DivisionProblem, Mapping[str, Any]]) -> DivisionSolution:
        """Solve a problem given as a model or a plain mapping"""
        solution = solve(problem)

        logger.debug(
            "Problem solved",
            extra_data={
                "problem_id": solution.problem.id,
                "num_steps": len(solution.steps),
            }
        )
        return solution

    async def get_tiers(self) -> DifficultyTable:
        return self.table

    async def get_progression(self, total_solved: int) -> ProgressionSummary:
        """Summarize the difficulty position for a lifetime solved count"""
        return ProgressionSummary(
            total_solved=total_solved,
            difficulty_level=level_for_solved_count(total_solved, self.table),
            tier=tier_for_solved_count(total_solved, self.table),
            problems_until_next_tier=problems_until_next_tier(total_solved, self.table),
            next_level=next_level(total_solved, self.table),
        )


# Factory function for dependency injection
def get_problem_service(config: Optional[Settings] = None) -> ProblemService:
    """Create problem service instance"""
    return ProblemService(config)
