"""Domain objects consumed by the calculation engine.

These are plain dataclasses. Loading them (from YAML, a database, ...) is
the job of the caller; the engine only reads the attributes and the
conversion helpers defined here.

Reference entities (payroll types, teachers, pool types, ...) compare by
identity, so they are declared with eq=False and stay hashable.
"""

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import List, Optional, Union

from .semester import Semester, SemesterValue


# Age relief bands: (minimum age, factor in percent), highest band first.
AGE_RELIEF_BANDS = (
    (58, 12.0),
    (54, 8.0),
    (50, 4.0),
)


def age_relief_factor_for_age(age: Optional[int]) -> float:
    """Return the age relief factor (percent) for a teacher of the given age.

    Teachers under 50 (or of unknown age) get no relief.
    """
    if age is None or age < 0:
        return 0.0
    for min_age, factor in AGE_RELIEF_BANDS:
        if age >= min_age:
            return factor
    return 0.0


def age_on(birthday: Optional[date], on: date) -> Optional[int]:
    """Age in completed years on the given date, or None without birthday."""
    if birthday is None:
        return None
    result = on.year - birthday.year
    if (birthday.month, birthday.day) > (on.month, on.day):
        result -= 1
    return result


class CalculationMode(Enum):
    """Calculation regimes a school year can be configured with.

    The value is the numeric mode id; `code` is the short code used in
    school-year files.
    """

    PERCENT = 1
    PERCENT_AGE_RELIEF_INCLUDED = 2
    LESSONS_AGE_RELIEF_INCLUDED = 3
    HISTORIC = 99

    @property
    def code(self) -> str:
        return _MODE_CODES[self]

    @classmethod
    def parse(cls, value) -> Optional["CalculationMode"]:
        """Resolve a mode from its id (int or numeric string) or its code.

        Returns:
            The CalculationMode, or None if value matches nothing.
        """
        if isinstance(value, CalculationMode):
            return value
        if isinstance(value, str):
            for mode, code in _MODE_CODES.items():
                if code == value.strip().upper():
                    return mode
            if not value.strip().isdigit():
                return None
        try:
            return cls(int(value))
        except (TypeError, ValueError):
            return None


_MODE_CODES = {
    CalculationMode.PERCENT: "P",
    CalculationMode.PERCENT_AGE_RELIEF_INCLUDED: "PAI",
    CalculationMode.LESSONS_AGE_RELIEF_INCLUDED: "LAI",
    CalculationMode.HISTORIC: "H",
}


@dataclass(eq=False)
class PayrollType:
    """A category under which workload is reported and paid.

    Lesson-based types track lessons and convert them to percent of a full
    position with `percent_per_lesson`. If no explicit factor is given it is
    derived from `weekly_lessons` (lessons of a full position).
    """

    code: str
    description: str = ""
    order: int = 0
    lesson_based: bool = False
    weekly_lessons: float = 0.0
    percent_per_lesson: Optional[float] = None
    saldo_resolving_order: Optional[int] = None

    def __post_init__(self):
        if self.percent_per_lesson is None and self.weekly_lessons:
            self.percent_per_lesson = 100.0 / self.weekly_lessons
        if self.lesson_based and not self.percent_per_lesson:
            raise ValueError(
                f"Lesson based payroll type '{self.code}' needs weekly_lessons or percent_per_lesson"
            )

    @property
    def sort_key(self) -> tuple:
        """Natural order: declared order, then code."""
        return (self.order, self.code)

    @property
    def saldo_sort_key(self) -> tuple:
        """Order used when resolving the saldo; falls back to natural order."""
        rank = self.order if self.saldo_resolving_order is None else self.saldo_resolving_order
        return (rank, self.order, self.code)

    def lessons_to_percent(self, lessons: float) -> float:
        if not self.lesson_based:
            return lessons
        return lessons * (self.percent_per_lesson or 0.0)

    def percent_to_lessons(self, percent: float) -> float:
        if not self.lesson_based or not self.percent_per_lesson:
            return 0.0
        return percent / self.percent_per_lesson

    def __repr__(self) -> str:
        return f"PayrollType({self.code!r})"


@dataclass(eq=False)
class Teacher:
    code: str
    last_name: str = ""
    first_name: str = ""
    employee_number: str = ""
    birthday: Optional[date] = None

    @property
    def display_name(self) -> str:
        name = f"{self.first_name} {self.last_name}".strip()
        return f"{name} ({self.code})" if name else self.code

    def __repr__(self) -> str:
        return f"Teacher({self.code!r})"


@dataclass(eq=False)
class SchoolYear:
    """A school year with its calculation regime and semester calendar."""

    code: str
    weeks: int
    calculation_mode: Union[CalculationMode, int, str]
    semester1_start: date
    semester2_start: date
    description: str = ""
    default_payroll_type: Optional[PayrollType] = None

    def start_of_semester(self, semester: Semester) -> date:
        return self.semester1_start if semester is Semester.FIRST else self.semester2_start

    def semester_of(self, day: Optional[date]) -> Semester:
        """Semester a date falls into. Undated entries count as semester 1."""
        if day is None or day < self.semester2_start:
            return Semester.FIRST
        return Semester.SECOND

    def age_relief_factor(self, teacher: Teacher, semester: Semester) -> float:
        return age_relief_factor_for_age(age_on(teacher.birthday, self.start_of_semester(semester)))

    def __repr__(self) -> str:
        return f"SchoolYear({self.code!r})"


@dataclass(eq=False)
class Employment:
    """A teacher's contract for one school year.

    `payment1`/`payment2` are the contractual payment targets in percent of
    a full position. Explicit age relief factors override the age bands.
    """

    teacher: Teacher
    school_year: SchoolYear
    payment1: float = 0.0
    payment2: float = 0.0
    opening_balance: float = 0.0
    age_relief_factor1: Optional[float] = None
    age_relief_factor2: Optional[float] = None

    def age_relief_factor(self, semester: Semester) -> float:
        explicit = self.age_relief_factor1 if semester is Semester.FIRST else self.age_relief_factor2
        if explicit is not None:
            return explicit
        return self.school_year.age_relief_factor(self.teacher, semester)

    def with_age_relief(self, semester: Semester, percent: float) -> float:
        return percent * (1.0 + self.age_relief_factor(semester) / 100)

    def without_age_relief(self, semester: Semester, percent: float) -> float:
        return percent / (1.0 + self.age_relief_factor(semester) / 100)

    def payment_target(self) -> SemesterValue:
        return SemesterValue(self.payment1, self.payment2)


@dataclass(eq=False)
class Course:
    """A course and the teachers sharing it in each semester.

    Lessons are split evenly between the teachers of a semester.
    """

    subject: str
    payroll_type: PayrollType
    lessons1: float = 0.0
    lessons2: float = 0.0
    teachers1: List[Teacher] = field(default_factory=list)
    teachers2: List[Teacher] = field(default_factory=list)
    grade: str = ""
    school_classes: List[str] = field(default_factory=list)
    cancelled: bool = False

    def lessons(self, semester: Semester) -> float:
        return self.lessons1 if semester is Semester.FIRST else self.lessons2

    def teachers_for(self, semester: Semester) -> List[Teacher]:
        return self.teachers1 if semester is Semester.FIRST else self.teachers2

    def contains(self, teacher: Teacher) -> bool:
        return teacher in self.teachers1 or teacher in self.teachers2

    def lessons_for(self, teacher: Teacher, semester: Semester) -> float:
        teachers = self.teachers_for(semester)
        if teacher not in teachers:
            return 0.0
        return self.lessons(semester) / len(teachers)

    def percent_for(self, teacher: Teacher, semester: Semester) -> float:
        return self.payroll_type.lessons_to_percent(self.lessons_for(teacher, semester))


@dataclass(eq=False)
class PoolType:
    code: str
    description: str
    payroll_type: PayrollType
    order: int = 0


@dataclass(eq=False)
class PoolEntry:
    teacher: Teacher
    type: PoolType
    description: str = ""
    percent1: float = 0.0
    percent2: float = 0.0

    def percent(self) -> SemesterValue:
        return SemesterValue(self.percent1, self.percent2)


@dataclass(eq=False)
class ThesisType:
    code: str
    description: str
    percent: float
    payroll_type: PayrollType


@dataclass(eq=False)
class ThesisEntry:
    teacher: Teacher
    type: ThesisType
    count: float = 0.0


@dataclass(eq=False)
class PostingType:
    """Kind of posting detail. `percent` types book percent, others lessons."""

    code: str
    description: str
    payroll_type: PayrollType
    percent: bool = False


@dataclass(eq=False)
class Posting:
    """A manual correction of a teacher's workload over a date range."""

    teacher: Teacher
    school_year: SchoolYear
    description: str = ""
    start_date: Optional[date] = None
    end_date: Optional[date] = None

    def semester(self) -> Semester:
        return self.school_year.semester_of(self.start_date)


@dataclass(eq=False)
class PostingDetail:
    posting: Posting
    type: PostingType
    value: float = 0.0
