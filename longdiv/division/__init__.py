"""
longdiv.division - Long-division problem engine

Provides:
- Difficulty tier table shared by generation and progression
- Seedable problem generation with remainder policies
- Step-by-step "bus stop" solver
- Step validation with rotating hints and a pure state-machine engine
"""

from .engine import (
    EngineProgress,
    EngineStatus,
    EngineTransition,
    StepEngine,
    StepEngineState,
    engine_progress,
    reset_engine,
    start_engine,
    submit_answer,
)
from .generator import (
    generate_problem,
    generate_problem_for_solved_count,
    generate_problems,
)
from .models import (
    BringDownStep,
    DivisionProblem,
    DivisionSolution,
    MultiplyResultStep,
    QuotientDigitStep,
    RemainderMode,
    Step,
    StepKind,
    SubtractionResultStep,
)
from .progression import (
    all_levels,
    level_for_solved_count,
    next_level,
    problems_until_next_tier,
    tier_for_solved_count,
)
from .solver import quotient_from_steps, solve
from .tiers import (
    DEFAULT_DIFFICULTY_TABLE,
    DifficultyTable,
    DifficultyTier,
    ProgressionRule,
    get_difficulty_tier,
)
from .validator import Hint, StepValidationResult, normalize_answer, validate_step

__all__ = [
    # Models
    "StepKind",
    "RemainderMode",
    "DivisionProblem",
    "DivisionSolution",
    "Step",
    "QuotientDigitStep",
    "MultiplyResultStep",
    "SubtractionResultStep",
    "BringDownStep",
    # Tiers and progression
    "DifficultyTier",
    "DifficultyTable",
    "ProgressionRule",
    "DEFAULT_DIFFICULTY_TABLE",
    "get_difficulty_tier",
    "level_for_solved_count",
    "tier_for_solved_count",
    "problems_until_next_tier",
    "next_level",
    "all_levels",
    # Generation and solving
    "generate_problem",
    "generate_problem_for_solved_count",
    "generate_problems",
    "solve",
    "quotient_from_steps",
    # Validation
    "Hint",
    "StepValidationResult",
    "normalize_answer",
    "validate_step",
    # Engine
    "EngineStatus",
    "StepEngineState",
    "EngineTransition",
    "EngineProgress",
    "StepEngine",
    "start_engine",
    "submit_answer",
    "reset_engine",
    "engine_progress",
]
