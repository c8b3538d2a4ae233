"""Tests for the saldo allocation fold.

The fold books the diff onto payroll types in order, clamps each type at
zero and carries whatever a type can't absorb to the next one.
"""

import pytest

from pensumcalc.sdk.calculation import absorb, allocate_saldo, allocate_step
from pensumcalc.sdk.data import PayrollType, SemesterValue


# =============================================================================
# FIXTURES
# =============================================================================


@pytest.fixture
def type_a():
    return PayrollType("A", order=1)


@pytest.fixture
def type_b():
    return PayrollType("B", order=2)


def booked(result, payroll_type):
    for entry_type, value in result:
        if entry_type is payroll_type:
            return value
    raise KeyError(payroll_type.code)


# =============================================================================
# absorb / allocate_step
# =============================================================================


class TestAbsorb:

    def test_positive_diff_is_fully_booked(self):
        assert absorb(10.0, 35.0) == (45.0, 0.0)

    def test_negative_diff_within_percent(self):
        assert absorb(60.0, -20.0) == (40.0, 0.0)

    def test_negative_remainder_is_carried(self):
        assert absorb(10.0, -25.0) == (0.0, -15.0)

    def test_exact_zero_is_not_carried(self):
        assert absorb(10.0, -10.0) == (0.0, 0.0)

    def test_allocate_step_handles_semesters_independently(self):
        value, rest = allocate_step(SemesterValue(10, 10), SemesterValue(-25, 5))

        assert value == SemesterValue(0, 15)
        assert rest == SemesterValue(-15, 0)


# =============================================================================
# allocate_saldo
# =============================================================================


class TestAllocateSaldo:

    def test_overbooking_is_taken_from_first_type(self, type_a, type_b):
        """A=60, B=60, target 100: the first type gives up 20."""
        entries = [(type_a, SemesterValue(60, 60)), (type_b, SemesterValue(60, 60))]
        result, remaining = allocate_saldo(entries, SemesterValue(-20, -20))

        assert booked(result, type_a) == SemesterValue(40, 40)
        assert booked(result, type_b) == SemesterValue(60, 60)
        assert remaining == SemesterValue(0, 0)

    def test_deficit_goes_to_first_type(self, type_a, type_b):
        """A=10, B=5, target 50: the first type absorbs the missing 35."""
        entries = [(type_a, SemesterValue(10, 10)), (type_b, SemesterValue(5, 5))]
        result, remaining = allocate_saldo(entries, SemesterValue(35, 35))

        assert booked(result, type_a) == SemesterValue(45, 45)
        assert booked(result, type_b) == SemesterValue(5, 5)
        assert remaining == SemesterValue(0, 0)

    def test_overflow_carries_across_types(self, type_a, type_b):
        entries = [(type_a, SemesterValue(10, 10)), (type_b, SemesterValue(5, 5))]
        result, remaining = allocate_saldo(entries, SemesterValue(-12, -30))

        assert booked(result, type_a) == SemesterValue(0, 0)
        assert booked(result, type_b) == SemesterValue(3, 0)
        assert remaining == SemesterValue(0, -15)

    def test_result_is_never_negative(self, type_a, type_b):
        entries = [(type_a, SemesterValue(1, 2)), (type_b, SemesterValue(3, 4))]
        result, _ = allocate_saldo(entries, SemesterValue(-100, -100))

        for _, value in result:
            assert value.semester1 >= 0
            assert value.semester2 >= 0

    def test_booked_plus_remaining_equals_stored_plus_diff(self, type_a, type_b):
        entries = [(type_a, SemesterValue(20, 7)), (type_b, SemesterValue(30, 4))]
        diff = SemesterValue(-35, -20)
        result, remaining = allocate_saldo(entries, diff)

        for semester in ("semester1", "semester2"):
            stored = sum(getattr(value, semester) for _, value in entries)
            final = sum(getattr(value, semester) for _, value in result)
            assert final == pytest.approx(stored + getattr(diff, semester) - getattr(remaining, semester))

    def test_keeps_entry_order(self, type_a, type_b):
        entries = [(type_b, SemesterValue(1, 1)), (type_a, SemesterValue(1, 1))]
        result, _ = allocate_saldo(entries, SemesterValue())

        assert [payroll_type for payroll_type, _ in result] == [type_b, type_a]

    def test_input_diff_is_not_mutated(self, type_a):
        diff = SemesterValue(5, 5)
        allocate_saldo([(type_a, SemesterValue(1, 1))], diff)

        assert diff == SemesterValue(5, 5)
