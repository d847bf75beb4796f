"""
Core division records.

These are the immutable values that flow through the engine:

- DivisionProblem: the operands plus their checked quotient/remainder
- Step: a discriminated union of the four long-division step kinds
- DivisionSolution: a problem together with its ordered steps

Every model is frozen and serializes to acyclic JSON with
``model_dump(mode="json")``.
"""

from __future__ import annotations

from enum import Enum
from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, StrictInt, field_validator, model_validator


class StepKind(str, Enum):
    """Kinds of atomic long-division steps, in the order they occur in a round"""
    QUOTIENT_DIGIT = "quotient-digit"
    MULTIPLY_RESULT = "multiply-result"
    SUBTRACTION_RESULT = "subtraction-result"
    BRING_DOWN = "bring-down"


class RemainderMode(str, Enum):
    """Remainder policy for generated problems"""
    ALLOW = "allow"
    REQUIRE = "require"
    FORBID = "forbid"


class DivisionProblem(BaseModel):
    """
    A long-division problem.

    Invariants (checked on construction):
        dividend == divisor * quotient + remainder
        0 <= remainder < divisor
        allow_remainder == (remainder != 0)
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1, description="Problem identifier")
    dividend: StrictInt = Field(..., ge=0)
    divisor: StrictInt = Field(..., ge=1)
    quotient: StrictInt = Field(..., ge=0)
    remainder: StrictInt = Field(..., ge=0)
    difficulty_level: StrictInt = Field(1, ge=1)
    allow_remainder: bool = False

    @field_validator("id")
    @classmethod
    def validate_id(cls, v: str) -> str:
        """Reject blank identifiers."""
        if not v.strip():
            raise ValueError("id must be a non-empty string")
        return v

    @model_validator(mode="after")
    def check_division(self) -> "DivisionProblem":
        if self.dividend != self.divisor * self.quotient + self.remainder:
            raise ValueError("dividend must equal divisor * quotient + remainder")
        if self.remainder >= self.divisor:
            raise ValueError("remainder must be smaller than divisor")
        if self.allow_remainder != (self.remainder != 0):
            raise ValueError("allow_remainder must be true exactly when remainder is non-zero")
        return self

    @classmethod
    def create(
        cls,
        id: str,
        dividend: int,
        divisor: int,
        difficulty_level: int = 1,
    ) -> "DivisionProblem":
        """Build a problem from its operands, deriving quotient and remainder."""
        quotient, remainder = divmod(dividend, divisor) if divisor > 0 else (0, 0)
        return cls(
            id=id,
            dividend=dividend,
            divisor=divisor,
            quotient=quotient,
            remainder=remainder,
            difficulty_level=difficulty_level,
            allow_remainder=remainder != 0,
        )

    @property
    def has_remainder(self) -> bool:
        return self.remainder != 0


class _StepBase(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    problem_id: str
    sequence_index: int = Field(..., ge=0)
    expected_value: int = Field(..., ge=0)
    digit_position: int = Field(..., ge=0)


class QuotientDigitStep(_StepBase):
    """Choose the next quotient digit: floor(working number / divisor)"""
    kind: Literal["quotient-digit"] = "quotient-digit"


class MultiplyResultStep(_StepBase):
    """Multiply the divisor by the quotient digit just chosen"""
    kind: Literal["multiply-result"] = "multiply-result"


class SubtractionResultStep(_StepBase):
    """Subtract the product from the working number"""
    kind: Literal["subtraction-result"] = "subtraction-result"


class BringDownStep(_StepBase):
    """Append the next dividend digit to the running remainder"""
    kind: Literal["bring-down"] = "bring-down"
    digit_brought_down: int = Field(..., ge=0, le=9)
    new_working_number: int = Field(..., ge=0)


Step = Annotated[
    Union[QuotientDigitStep, MultiplyResultStep, SubtractionResultStep, BringDownStep],
    Field(discriminator="kind"),
]


class DivisionSolution(BaseModel):
    """A problem and the ordered steps that solve it"""

    model_config = ConfigDict(frozen=True)

    problem: DivisionProblem
    steps: tuple[Step, ...]

    @model_validator(mode="after")
    def check_steps(self) -> "DivisionSolution":
        if not self.steps:
            raise ValueError("a solution needs at least one step")
        if self.steps[-1].kind != StepKind.SUBTRACTION_RESULT:
            raise ValueError("the last step must be a subtraction-result step")
        return self

    @property
    def quotient_digits(self) -> list[int]:
        return [s.expected_value for s in self.steps if s.kind == StepKind.QUOTIENT_DIGIT]

    @property
    def final_remainder(self) -> int:
        return self.steps[-1].expected_value

    def __len__(self) -> int:
        return len(self.steps)


__all__ = [
    "StepKind",
    "RemainderMode",
    "DivisionProblem",
    "QuotientDigitStep",
    "MultiplyResultStep",
    "SubtractionResultStep",
    "BringDownStep",
    "Step",
    "DivisionSolution",
]
