"""
Shared pytest fixtures for the longdiv engine tests.

This module provides:
- Seeded random sources and fixed clocks for deterministic runs
- A helper for building valid problems from operands
- A helper for asserting pydantic validation failures
"""

import random
from datetime import datetime, timezone
from typing import Any, Type

import pytest
from pydantic import BaseModel, ValidationError

from longdiv.division import DivisionProblem

FIXED_TIME = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def seeded_random():
    """Factory for seeded random sources returning floats in [0, 1)."""
    def _factory(seed: int = 1234):
        return random.Random(seed).random
    return _factory


@pytest.fixture
def fixed_clock():
    """Clock that always returns the same instant and counts its calls."""
    class _Clock:
        def __init__(self):
            self.calls = 0

        def __call__(self) -> datetime:
            self.calls += 1
            return FIXED_TIME

    return _Clock()


@pytest.fixture
def make_problem():
    """Build a valid DivisionProblem from its operands."""
    def _make(dividend: int, divisor: int, problem_id: str = "test-problem", level: int = 1) -> DivisionProblem:
        return DivisionProblem.create(problem_id, dividend, divisor, difficulty_level=level)
    return _make


@pytest.fixture
def assert_validation_error():
    """Helper to assert that a ValidationError is raised for a field."""
    def _assert_validation(
        model_class: Type[BaseModel],
        data: dict[str, Any],
        expected_field: str | None = None,
    ) -> ValidationError:
        with pytest.raises(ValidationError) as exc_info:
            model_class(**data)

        error = exc_info.value
        if expected_field:
            field_errors = [e for e in error.errors() if e["loc"] and e["loc"][0] == expected_field]
            assert len(field_errors) > 0, f"Expected error for field '{expected_field}' not found"

        return error

    return _assert_validation
