"""Semester enum and the per-semester value pair used throughout the engine."""

from enum import Enum
from typing import Callable, Optional


class Semester(Enum):
    """The two semesters of a school year."""

    FIRST = 1
    SECOND = 2

    @property
    def id(self) -> int:
        return self.value

    @classmethod
    def parse_id(cls, semester_id) -> Optional["Semester"]:
        """Look up a semester by its numeric id (1 or 2).

        Returns:
            The matching Semester, or None for unknown ids.
        """
        try:
            return cls(int(semester_id))
        except (TypeError, ValueError):
            return None


SEMESTERS = (Semester.FIRST, Semester.SECOND)


class SemesterValue:
    """A pair of floats, one per semester.

    Operations work on each semester independently unless they explicitly
    combine both (mean, total). Aggregates hand out copies so callers can't
    mutate their running totals.
    """

    __slots__ = ("semester1", "semester2")

    def __init__(self, semester1: float = 0.0, semester2: float = 0.0):
        self.semester1 = float(semester1)
        self.semester2 = float(semester2)

    def copy(self) -> "SemesterValue":
        return SemesterValue(self.semester1, self.semester2)

    def get(self, semester: Semester) -> float:
        if semester is Semester.FIRST:
            return self.semester1
        if semester is Semester.SECOND:
            return self.semester2
        raise ValueError(f"Unknown semester: {semester!r}")

    def set(self, semester: Semester, value: float) -> None:
        if semester is Semester.FIRST:
            self.semester1 = float(value)
        elif semester is Semester.SECOND:
            self.semester2 = float(value)
        else:
            raise ValueError(f"Unknown semester: {semester!r}")

    def add(self, semester: Semester, value: float) -> None:
        """Add value to one semester in place."""
        self.set(semester, self.get(semester) + value)

    def add_value(self, other: "SemesterValue") -> None:
        """Add another pair elementwise in place."""
        self.semester1 += other.semester1
        self.semester2 += other.semester2

    def map(self, action: Callable[[Semester, float], float]) -> "SemesterValue":
        """Apply action(semester, value) to both semesters, returning a new pair."""
        return SemesterValue(
            action(Semester.FIRST, self.semester1),
            action(Semester.SECOND, self.semester2),
        )

    def mean(self) -> float:
        return (self.semester1 + self.semester2) / 2.0

    def total(self) -> float:
        return self.semester1 + self.semester2

    def to_dict(self) -> dict:
        return {"semester1": self.semester1, "semester2": self.semester2}

    def __eq__(self, other) -> bool:
        if not isinstance(other, SemesterValue):
            return NotImplemented
        return self.semester1 == other.semester1 and self.semester2 == other.semester2

    def __repr__(self) -> str:
        return f"SemesterValue({self.semester1}, {self.semester2})"
