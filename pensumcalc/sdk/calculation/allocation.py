"""Saldo allocation across payroll types.

The difference between the payment target and the computed workload (the
saldo) is absorbed greedily by the payroll types in a fixed order. A type's
percent never goes below zero: whatever it cannot absorb is carried to the
next type as the remaining diff. Each semester is handled independently.

The carry is threaded explicitly through the fold; nothing is mutated
behind the caller's back.
"""

from typing import List, Sequence, Tuple

from ..data import PayrollType, SEMESTERS, SemesterValue


def absorb(percent: float, diff: float) -> Tuple[float, float]:
    """Book diff onto percent.

    Returns:
        Tuple of (booked percent, remaining diff). The booked percent is
        clamped at zero; the negative remainder is carried.

    Example:
        absorb(60.0, -20.0)  # (40.0, 0.0)
        absorb(10.0, -25.0)  # (0.0, -15.0)
    """
    result = percent + diff
    if result < 0:
        return 0.0, result
    return result, 0.0


def allocate_step(percent: SemesterValue, diff: SemesterValue) -> Tuple[SemesterValue, SemesterValue]:
    """Apply `absorb` to both semesters of one payroll type.

    Returns:
        Tuple of (booked percent, remaining diff).
    """
    booked = SemesterValue()
    remaining = SemesterValue()
    for semester in SEMESTERS:
        value, rest = absorb(percent.get(semester), diff.get(semester))
        booked.set(semester, value)
        remaining.set(semester, rest)
    return booked, remaining


def allocate_saldo(
    entries: Sequence[Tuple[PayrollType, SemesterValue]],
    diff: SemesterValue,
) -> Tuple[List[Tuple[PayrollType, SemesterValue]], SemesterValue]:
    """Fold the diff over payroll types in the given order.

    Args:
        entries: (payroll type, percent) pairs, already in resolution order
        diff: payment target minus computed workload, per semester

    Returns:
        Tuple of (booked percent per type in the same order, diff left over
        after the last type). The left-over is non-zero only if the whole
        workload could not absorb a negative saldo.
    """
    remaining = diff.copy()
    result = []
    for payroll_type, percent in entries:
        booked, remaining = allocate_step(percent, remaining)
        result.append((payroll_type, booked))
    return result, remaining
