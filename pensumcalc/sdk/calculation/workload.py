"""Workload report of one employment and the per-school-year collection."""

from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional

from ..data import Employment, SchoolYear, Semester, Teacher
from .aggregates import Courses, Pool, Postings, Summary, Theses
from .payroll import Payroll

BALANCE_OPENING = "Opening balance"
BALANCE_WORKLOAD = "Workload"
BALANCE_POSTINGS = "Postings"
BALANCE_PAYMENT = "Payment"
BALANCE_CLOSING = "Closing balance"


@dataclass(frozen=True)
class BalanceLine:
    description: str
    percent: float

    def to_dict(self) -> dict:
        return {"description": self.description, "percent": self.percent}


class Workload:
    """Read-only snapshot of a finalized calculation.

    payment = mean of the final payroll percent over both semesters
    closing balance = opening balance + workload with age relief
                      + postings - payment
    """

    def __init__(self, employment: Employment, courses: Courses, pool: Pool, theses: Theses,
                 postings: Postings, summary: Summary, payroll: Payroll):
        self.employment = employment
        self.teacher: Teacher = employment.teacher
        self.school_year: SchoolYear = employment.school_year
        self.age_relief_factor1 = employment.age_relief_factor(Semester.FIRST)
        self.age_relief_factor2 = employment.age_relief_factor(Semester.SECOND)
        self.courses = courses
        self.pool = pool
        self.theses = theses
        self.postings = postings
        self.summary = summary
        self.payroll = payroll
        self.opening_balance = employment.opening_balance
        self.payment = payroll.percent().mean()
        self.closing_balance = (
            self.opening_balance
            + summary.total().percent_with_age_relief
            + postings.total_percent()
            - self.payment
        )

    def age_relief_factor(self, semester: Semester) -> float:
        return self.age_relief_factor1 if semester is Semester.FIRST else self.age_relief_factor2

    def balance(self) -> List[BalanceLine]:
        """The five balance lines renderers rely on, in fixed order."""
        return [
            BalanceLine(BALANCE_OPENING, self.opening_balance),
            BalanceLine(BALANCE_WORKLOAD, self.summary.total().percent_with_age_relief),
            BalanceLine(BALANCE_POSTINGS, self.postings.total_percent()),
            BalanceLine(BALANCE_PAYMENT, -self.payment),
            BalanceLine(BALANCE_CLOSING, self.closing_balance),
        ]

    def to_dict(self) -> dict:
        teacher = self.teacher
        return {
            "teacher": {
                "code": teacher.code,
                "first_name": teacher.first_name,
                "last_name": teacher.last_name,
            },
            "school_year": self.school_year.code,
            "age_relief_factor1": self.age_relief_factor1,
            "age_relief_factor2": self.age_relief_factor2,
            "courses": self.courses.to_dict(),
            "pool": self.pool.to_dict(),
            "theses": self.theses.to_dict(),
            "postings": self.postings.to_dict(),
            "summary": self.summary.to_dict(),
            "payroll": self.payroll.to_dict(),
            "payment": self.payment,
            "balance": [line.to_dict() for line in self.balance()],
        }


class Workloads:
    """Workloads of a school year, looked up by teacher.

    Built once and read-only afterwards.
    """

    def __init__(self, school_year: SchoolYear, workloads: Iterable[Workload]):
        self.school_year = school_year
        self._map: Dict[Teacher, Workload] = {workload.teacher: workload for workload in workloads}

    def get_workload(self, teacher: Teacher) -> Optional[Workload]:
        return self._map.get(teacher)

    def find(self, teacher_code: str) -> Optional[Workload]:
        for teacher, workload in self._map.items():
            if teacher.code == teacher_code:
                return workload
        return None

    def teachers(self) -> List[Teacher]:
        return sorted(self._map, key=lambda teacher: teacher.code)

    def __iter__(self):
        return (self._map[teacher] for teacher in self.teachers())

    def __len__(self) -> int:
        return len(self._map)
