"""Tests for the step-by-step long-division solver."""

import random

import pytest
from pydantic import ValidationError

from longdiv.division import (
    BringDownStep,
    DivisionProblem,
    DivisionSolution,
    StepKind,
    generate_problem,
    quotient_from_steps,
    solve,
)
from longdiv.division.solver import step_id
from longdiv.errors import InvalidArgumentError


def kinds(solution):
    return [StepKind(s.kind) for s in solution.steps]


def values(solution):
    return [s.expected_value for s in solution.steps]


Q, M, S, B = (
    StepKind.QUOTIENT_DIGIT,
    StepKind.MULTIPLY_RESULT,
    StepKind.SUBTRACTION_RESULT,
    StepKind.BRING_DOWN,
)


class TestReferenceSequences:
    """Worked examples with known step sequences."""

    def test_84_divided_by_4(self, make_problem):
        """84 ÷ 4 takes two rounds joined by one bring-down."""
        solution = solve(make_problem(84, 4))
        assert kinds(solution) == [Q, M, S, B, Q, M, S]
        assert values(solution) == [2, 8, 0, 4, 1, 4, 0]
        assert solution.quotient_digits == [2, 1]
        assert solution.final_remainder == 0

    def test_7035_divided_by_5(self, make_problem):
        """7035 ÷ 5 includes a zero quotient digit in the middle."""
        solution = solve(make_problem(7035, 5))
        assert len(solution) == 15
        assert kinds(solution) == [Q, M, S, B, Q, M, S, B, Q, M, S, B, Q, M, S]
        assert values(solution) == [1, 5, 2, 0, 4, 20, 0, 3, 0, 0, 3, 5, 7, 35, 0]
        assert solution.quotient_digits == [1, 4, 0, 7]
        assert quotient_from_steps(solution) == 1407

    def test_10000_divided_by_100(self, make_problem):
        """Leading digits are gathered until the working number reaches the divisor."""
        solution = solve(make_problem(10000, 100))
        assert len(solution) == 11
        assert solution.steps[0].digit_position == 2
        assert solution.steps[0].expected_value == 1
        assert solution.quotient_digits == [1, 0, 0]
        assert quotient_from_steps(solution) == 100

    def test_bring_down_fields(self, make_problem):
        """Bring-down steps carry the digit and the new working number."""
        solution = solve(make_problem(7035, 5))
        bring_downs = [s for s in solution.steps if isinstance(s, BringDownStep)]
        assert [s.digit_brought_down for s in bring_downs] == [0, 3, 5]
        assert [s.new_working_number for s in bring_downs] == [20, 3, 35]
        assert [s.digit_position for s in bring_downs] == [1, 2, 3]
        assert all(s.expected_value == s.digit_brought_down for s in bring_downs)

    def test_remainder_is_last_step(self, make_problem):
        """The final subtraction leaves the remainder."""
        solution = solve(make_problem(97, 4))
        assert solution.steps[-1].kind == StepKind.SUBTRACTION_RESULT
        assert solution.final_remainder == 1
        assert quotient_from_steps(solution) == 24


class TestEdgeCases:
    """Degenerate operands still produce a well-formed sequence."""

    def test_dividend_smaller_than_divisor(self, make_problem):
        """A dividend below the divisor yields a single zero round."""
        solution = solve(make_problem(3, 7))
        assert kinds(solution) == [Q, M, S]
        assert values(solution) == [0, 0, 3]
        assert quotient_from_steps(solution) == 0

    def test_zero_dividend(self, make_problem):
        """0 ÷ n is one round of zeros."""
        solution = solve(make_problem(0, 5))
        assert values(solution) == [0, 0, 0]

    def test_divisor_of_one(self, make_problem):
        """Dividing by one walks every digit."""
        solution = solve(make_problem(305, 1))
        assert solution.quotient_digits == [3, 0, 5]


class TestStepIdentity:
    """Step ids and sequence indexes are deterministic."""

    def test_step_ids(self, make_problem):
        """Each id encodes problem, index and kind."""
        solution = solve(make_problem(84, 4, problem_id="p1"))
        assert solution.steps[0].id == "p1:step:0:quotient-digit"
        assert solution.steps[3].id == "p1:step:3:bring-down"
        assert step_id("p1", 5, StepKind.MULTIPLY_RESULT) == "p1:step:5:multiply-result"

    def test_sequence_indexes(self, make_problem):
        """sequence_index matches position in the sequence."""
        solution = solve(make_problem(7035, 5))
        assert [s.sequence_index for s in solution.steps] == list(range(15))
        assert all(s.problem_id == "test-problem" for s in solution.steps)

    def test_solving_is_deterministic(self, make_problem):
        """Solving the same problem twice gives equal solutions."""
        problem = make_problem(4321, 17)
        assert solve(problem) == solve(problem)


class TestMalformedProblems:
    """Malformed input is rejected with InvalidArgumentError."""

    def test_mapping_input(self):
        """Decoded JSON is accepted when valid."""
        solution = solve({
            "id": "json-problem",
            "dividend": 84,
            "divisor": 4,
            "quotient": 21,
            "remainder": 0,
        })
        assert solution.quotient_digits == [2, 1]

    def test_zero_divisor_mapping(self):
        """A zero divisor is rejected."""
        with pytest.raises(InvalidArgumentError) as exc_info:
            solve({"id": "bad", "dividend": 8, "divisor": 0, "quotient": 0, "remainder": 0})
        assert exc_info.value.details["argument"] == "problem"
        assert exc_info.value.details["errors"]

    def test_inconsistent_quotient_mapping(self):
        """A quotient that does not match the operands is rejected."""
        with pytest.raises(InvalidArgumentError):
            solve({"id": "bad", "dividend": 84, "divisor": 4, "quotient": 20, "remainder": 0})

    def test_blank_id_mapping(self):
        """A blank id is rejected."""
        with pytest.raises(InvalidArgumentError):
            solve({"id": "  ", "dividend": 84, "divisor": 4, "quotient": 21, "remainder": 0})

    def test_unvalidated_model(self):
        """Models built with model_construct are still checked."""
        problem = DivisionProblem.model_construct(
            id="bad", dividend=-4, divisor=2, quotient=-2, remainder=0,
            difficulty_level=1, allow_remainder=False,
        )
        with pytest.raises(InvalidArgumentError):
            solve(problem)

    def test_not_a_problem(self):
        """Arbitrary objects are rejected."""
        with pytest.raises(InvalidArgumentError):
            solve("84 / 4")

    def test_is_value_error(self):
        """InvalidArgumentError is also a ValueError."""
        with pytest.raises(ValueError):
            solve({"id": "bad"})


class TestGeneratedProblems:
    """Every generated problem solves back to its own quotient and remainder."""

    @pytest.mark.parametrize("level", [1, 2, 3, 4])
    def test_quotient_digits_reassemble(self, level):
        """Concatenated quotient digits equal the quotient."""
        source = random.Random(level).random
        for _ in range(100):
            problem = generate_problem(level, random=source)
            solution = solve(problem)
            assert quotient_from_steps(solution) == problem.quotient
            assert solution.final_remainder == problem.remainder
            assert solution.steps[-1].kind == StepKind.SUBTRACTION_RESULT

    @pytest.mark.parametrize("level", [1, 2, 3, 4])
    def test_positions_never_move_left(self, level):
        """Digit positions are non-decreasing and sequence indexes count up from 0."""
        source = random.Random(100 + level).random
        for _ in range(100):
            steps = solve(generate_problem(level, random=source)).steps
            assert all(a.digit_position <= b.digit_position for a, b in zip(steps, steps[1:]))
            assert [s.sequence_index for s in steps] == list(range(len(steps)))


class TestSolutionModel:
    def test_empty_steps_rejected(self, make_problem):
        with pytest.raises(ValidationError):
            DivisionSolution(problem=make_problem(84, 4), steps=())

    def test_must_end_on_subtraction(self, make_problem):
        """A solution cut off before its final subtraction is rejected."""
        solution = solve(make_problem(84, 4))
        with pytest.raises(ValidationError):
            DivisionSolution(problem=solution.problem, steps=solution.steps[:-1])

    def test_round_trip_through_json(self, make_problem):
        solution = solve(make_problem(97, 4))
        restored = DivisionSolution.model_validate(solution.model_dump(mode="json"))
        assert restored == solution
        assert restored.final_remainder == 1
