"""
Engine exceptions.

Every error raised by the engine carries a human-readable message and a
``details`` dict so the service layer can serialize it without guessing.
Incorrect learner answers are never exceptions; see
:mod:`longdiv.division.validator`.
"""

from __future__ import annotations

from typing import Any, Dict, Optional


class DivisionEngineError(Exception):
    """Base exception for engine errors"""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


class InvalidArgumentError(DivisionEngineError, ValueError):
    """Raised when a caller passes malformed input (a programming error upstream)"""

    def __init__(self, message: str, argument: Optional[str] = None, **details: Any):
        if argument:
            details = {"argument": argument, **details}
        super().__init__(message, details)
        self.argument = argument


class StepIndexError(InvalidArgumentError, IndexError):
    """Raised when a step index does not reference an existing step"""

    def __init__(self, step_index: Any, step_count: int):
        super().__init__(
            f"stepIndex {step_index} is out of bounds (0..{step_count - 1})",
            argument="step_index",
            step_index=step_index,
            step_count=step_count,
        )


class EngineCompleteError(InvalidArgumentError):
    """Raised when an answer is submitted to an engine that already finished"""

    def __init__(self, problem_id: str):
        super().__init__(
            "Problem is already complete. Reset the engine to start over.",
            problem_id=problem_id,
        )


class GenerationError(DivisionEngineError, RuntimeError):
    """Raised when the generator cannot satisfy the tier ranges"""

    def __init__(self, level: int, attempts: int):
        super().__init__(
            f"Unable to generate a division problem for difficulty level {level} "
            f"after {attempts} attempts.",
            {"level": level, "attempts": attempts},
        )


def require_non_negative_int(value: Any, argument: str) -> int:
    """Return ``value`` if it is a non-negative int, else raise InvalidArgumentError."""
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise InvalidArgumentError(
            f"{argument} must be a non-negative integer.", argument=argument, value=repr(value)
        )
    return value


def require_positive_int(value: Any, argument: str) -> int:
    """Return ``value`` if it is a positive int, else raise InvalidArgumentError."""
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise InvalidArgumentError(
            f"{argument} must be a positive integer.", argument=argument, value=repr(value)
        )
    return value
