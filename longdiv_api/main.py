"""
FastAPI service for the long-division engine.

This module wires:
- Service layer for generation, grading and rewards
- Repository pattern for engine sessions
- Structured logging
- Error handlers for service and engine exceptions
- Dependency injection
"""

from contextlib import asynccontextmanager
from datetime import datetime
from typing import Any, List, Optional

from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from longdiv.division import (
    DifficultyTier,
    DivisionProblem,
    DivisionSolution,
    RemainderMode,
    Step,
    StepKind,
)
from longdiv.division.engine import EngineStatus
from longdiv.rewards import PrefetchTarget, RewardResolution, UnlockedReward

from .core import (
    get_context_logger,
    register_error_handlers,
    settings,
    setup_logging,
)
from .models import EngineSession, ProgressionSummary
from .repositories import get_session_repository
from .services import GradingService, ProblemService, RewardService

setup_logging()
logger = get_context_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan management"""
    logger.info(
        "Starting long-division API",
        extra_data={
            "environment": settings.ENVIRONMENT,
            "debug": settings.DEBUG,
            "reward_interval": settings.REWARD_INTERVAL,
        }
    )
    yield
    logger.info("Shutting down long-division API")


app = FastAPI(
    title=settings.APP_NAME,
    description="Step-by-step long division with dinosaur rewards",
    version=settings.APP_VERSION,
    debug=settings.DEBUG,
    lifespan=lifespan
)

register_error_handlers(app)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=settings.CORS_ALLOW_CREDENTIALS,
    allow_methods=settings.CORS_ALLOW_METHODS,
    allow_headers=settings.CORS_ALLOW_HEADERS,
)


# Dependency injection
def get_problem_service_dep() -> ProblemService:
    return ProblemService(settings)


def get_grading_service_dep(
    problem_service: ProblemService = Depends(get_problem_service_dep),
) -> GradingService:
    return GradingService(get_session_repository(), problem_service)


def get_reward_service_dep() -> RewardService:
    return RewardService(settings)


# API Request/Response Models
class ProblemInput(BaseModel):
    """Operands for a learner-entered problem"""
    dividend: int = Field(..., ge=0)
    divisor: int = Field(..., ge=1)
    id: Optional[str] = Field(None, description="Problem identifier (derived from operands if omitted)")
    difficulty_level: int = Field(1, ge=1)

    def to_domain(self) -> DivisionProblem:
        return DivisionProblem.create(
            id=self.id or f"custom-{self.dividend}-{self.divisor}",
            dividend=self.dividend,
            divisor=self.divisor,
            difficulty_level=self.difficulty_level,
        )


class GenerateRequest(BaseModel):
    """Request to generate a problem"""
    difficulty_level: Optional[int] = Field(None, description="Explicit level; wins over total_solved")
    total_solved: Optional[int] = Field(None, description="Lifetime solved count to derive the level from")
    remainder_mode: Optional[RemainderMode] = None
    seed: Optional[int] = Field(None, description="Seed for a reproducible problem")


class StartSessionRequest(GenerateRequest):
    """Request to start a session on a given or generated problem"""
    problem: Optional[ProblemInput] = None


class SubmitRequest(BaseModel):
    value: Any = Field(..., description="Learner answer: an integer or a string of digits")


class SolutionResponse(BaseModel):
    problem: DivisionProblem
    steps: List[Step]
    quotient_digits: List[int]
    final_remainder: int

    @classmethod
    def from_domain(cls, solution: DivisionSolution) -> "SolutionResponse":
        return cls(
            problem=solution.problem,
            steps=list(solution.steps),
            quotient_digits=solution.quotient_digits,
            final_remainder=solution.final_remainder,
        )


class StepPrompt(BaseModel):
    """The step a learner must answer next, without its answer"""
    step_id: str
    kind: StepKind
    sequence_index: int
    digit_position: int


class SessionResponse(BaseModel):
    """Engine session snapshot"""
    session_id: str
    problem: DivisionProblem
    status: EngineStatus
    total_steps: int
    current_step_index: int
    current_attempts: int
    total_incorrect_attempts: int
    current_step: Optional[StepPrompt]
    completed_steps: List[Step]
    submissions: int
    created_at: datetime
    last_activity: datetime

    @classmethod
    def from_domain(cls, session: EngineSession) -> "SessionResponse":
        state = session.engine_state
        current = state.current_step
        prompt = None
        if current is not None:
            prompt = StepPrompt(
                step_id=current.id,
                kind=current.kind,
                sequence_index=current.sequence_index,
                digit_position=current.digit_position,
            )
        return cls(
            session_id=session.session_id,
            problem=session.problem,
            status=state.status,
            total_steps=len(state.steps),
            current_step_index=state.current_step_index,
            current_attempts=state.current_attempts,
            total_incorrect_attempts=state.total_incorrect_attempts,
            current_step=prompt,
            completed_steps=list(state.steps[:state.current_step_index]),
            submissions=session.submissions,
            created_at=session.created_at,
            last_activity=session.last_activity,
        )


class SubmitResponse(BaseModel):
    """Result of one step submission"""
    correct: bool
    entered_value: Optional[int]
    hint: Optional[str]
    attempt_number: Optional[int]
    next_step_index: Optional[int]
    is_complete: bool
    session: SessionResponse

    @classmethod
    def from_domain(cls, session: EngineSession) -> "SubmitResponse":
        result = session.last_result
        return cls(
            correct=result.correct,
            entered_value=result.entered_value,
            hint=result.hint.message if result.hint else None,
            attempt_number=result.hint.attempt_number if result.hint else None,
            next_step_index=result.next_step_index,
            is_complete=result.is_complete,
            session=SessionResponse.from_domain(session),
        )


class TiersResponse(BaseModel):
    max_level: int
    tiers: List[DifficultyTier]


class RewardResolveRequest(BaseModel):
    """Persisted rewards to reconcile; the list content is not trusted"""
    total_solved: int = Field(
        ..., ge=0, le=settings.MAX_TOTAL_SOLVED, description="Lifetime problems solved"
    )
    unlocked_rewards: Any = Field(None, description="Previously persisted reward list")


class RewardResolveResponse(BaseModel):
    unlocked_rewards: List[UnlockedReward]
    newly_unlocked_rewards: List[UnlockedReward]
    highest_earned_reward_number: int
    next_reward_number: int
    discarded_out_of_order_rewards: int
    prefetch: Optional[PrefetchTarget] = None

    @classmethod
    def from_domain(
        cls,
        resolution: RewardResolution,
        prefetch: Optional[PrefetchTarget] = None,
    ) -> "RewardResolveResponse":
        return cls(**resolution.model_dump(), prefetch=prefetch)


# API Routes

@app.get("/")
async def read_root():
    """API root endpoint"""
    return {
        "name": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "environment": settings.ENVIRONMENT,
        "endpoints": {
            "health": "/health",
            "tiers": "/difficulty/tiers",
            "progression": "/difficulty/progression/{total_solved}",
            "generate": "/problems/generate",
            "solve": "/problems/solve",
            "sessions": "/sessions",
            "session": "/sessions/{session_id}",
            "submit": "/sessions/{session_id}/submit",
            "reset": "/sessions/{session_id}/reset",
            "rewards": "/rewards/resolve",
        }
    }


@app.get("/health")
async def health_check():
    """Health check endpoint"""
    return {
        "status": "healthy",
        "version": settings.APP_VERSION,
        "environment": settings.ENVIRONMENT
    }


@app.get("/difficulty/tiers", response_model=TiersResponse)
async def list_tiers(service: ProblemService = Depends(get_problem_service_dep)):
    table = await service.get_tiers()
    return TiersResponse(max_level=table.max_level, tiers=list(table.tiers))


@app.get("/difficulty/progression/{total_solved}", response_model=ProgressionSummary)
async def get_progression(
    total_solved: int,
    service: ProblemService = Depends(get_problem_service_dep)
):
    """Difficulty level and distance to the next tier for a solved count"""
    return await service.get_progression(total_solved)


@app.post("/problems/generate", response_model=DivisionProblem)
async def generate_problem(
    request: GenerateRequest,
    service: ProblemService = Depends(get_problem_service_dep)
):
    """
    Generate a problem.

    Args:
        request: Level or solved count, remainder policy, optional seed

    Returns:
        The generated problem with its quotient and remainder
    """
    return await service.generate_problem(
        difficulty_level=request.difficulty_level,
        total_solved=request.total_solved,
        remainder_mode=request.remainder_mode,
        seed=request.seed,
    )


@app.post("/problems/solve", response_model=SolutionResponse)
async def solve_problem(
    request: ProblemInput,
    service: ProblemService = Depends(get_problem_service_dep)
):
    """Solve a problem and return every step"""
    solution = await service.solve_problem(request.to_domain())
    return SolutionResponse.from_domain(solution)


@app.post("/sessions", response_model=SessionResponse, status_code=201)
async def start_session(
    request: StartSessionRequest,
    problem_service: ProblemService = Depends(get_problem_service_dep),
    grading_service: GradingService = Depends(get_grading_service_dep)
):
    """Start an engine session on a posted problem or a freshly generated one"""
    if request.problem is not None:
        problem = request.problem.to_domain()
    else:
        problem = await problem_service.generate_problem(
            difficulty_level=request.difficulty_level,
            total_solved=request.total_solved if request.total_solved is not None else 0,
            remainder_mode=request.remainder_mode,
            seed=request.seed,
        )

    session = await grading_service.start_session(problem)
    return SessionResponse.from_domain(session)


@app.get("/sessions/{session_id}", response_model=SessionResponse)
async def get_session(
    session_id: str,
    grading_service: GradingService = Depends(get_grading_service_dep)
):
    session = await grading_service.get_session(session_id)
    return SessionResponse.from_domain(session)


@app.post("/sessions/{session_id}/submit", response_model=SubmitResponse)
async def submit_answer(
    session_id: str,
    request: SubmitRequest,
    grading_service: GradingService = Depends(get_grading_service_dep)
):
    """
    Submit an answer for the session's current step.

    Wrong answers return 200 with a hint; submitting to a finished session
    returns 409.
    """
    session = await grading_service.submit_answer(session_id, request.value)
    return SubmitResponse.from_domain(session)


@app.post("/sessions/{session_id}/reset", response_model=SessionResponse)
async def reset_session(
    session_id: str,
    grading_service: GradingService = Depends(get_grading_service_dep)
):
    session = await grading_service.reset_session(session_id)
    return SessionResponse.from_domain(session)


@app.post("/rewards/resolve", response_model=RewardResolveResponse)
async def resolve_rewards(
    request: RewardResolveRequest,
    service: RewardService = Depends(get_reward_service_dep)
):
    """Reconcile a persisted reward list and report any artwork to prefetch"""
    resolution = await service.resolve(request.total_solved, request.unlocked_rewards)
    prefetch = await service.prefetch_target(request.total_solved)
    return RewardResolveResponse.from_domain(resolution, prefetch)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "longdiv_api.main:app",
        host=settings.API_HOST,
        port=settings.API_PORT,
        reload=settings.DEBUG,
        log_level=settings.LOG_LEVEL.lower()
    )
