"""Workload calculation for one employment.

A Calculation is created for one employment, fed with the teacher's
courses, pool entries, thesis entries, postings and posting details, and
finally turned into a Workload. The mode-specific behaviour lives in a
strategy selected from the school year's calculation mode (see
strategies.py); this module holds the shared skeleton.

Lifecycle:
    calculation = create_calculation(employment, payroll_types)
    for course in courses:
        calculation.add_course(course)
    ...
    workload = calculation.create_workload()

After `calculate_payroll` has run the calculation is finalized; further
contributions are rejected.
"""

import logging
from typing import Iterable, Optional

from ..data import (
    CalculationMode,
    Course,
    Employment,
    PayrollType,
    PoolEntry,
    Posting,
    PostingDetail,
    Semester,
    SemesterValue,
    ThesisEntry,
)
from .aggregates import Courses, Pool, Postings, Summary, Theses
from .payroll import Payroll
from .rounding import PERCENT_DECIMALS
from .strategies import (
    CalculationStrategy,
    HistoricStrategy,
    LessonsAgeReliefIncludedStrategy,
    PercentAgeReliefIncludedStrategy,
    PercentStrategy,
)
from .workload import Workload

logger = logging.getLogger(__name__)

SUMMARY_INSTRUCTION = "Instruction"
SUMMARY_THESES = "Theses"
SUMMARY_POOL = "Pool"


class CalculationError(Exception):
    """Raised when a calculation is used incorrectly."""
    pass


class ConfigurationError(CalculationError):
    """Raised for an unknown calculation mode or incomplete mode setup."""
    pass


class Calculation:
    """Shared calculation skeleton; mode specifics come from the strategy."""

    def __init__(self, employment: Employment, strategy: CalculationStrategy,
                 payroll_percent_decimals: int = PERCENT_DECIMALS):
        self.employment = employment
        self.strategy = strategy
        self.courses = Courses()
        self.pool = Pool(strategy.pool_title())
        self.theses = Theses()
        self.postings = Postings()
        self.payroll = Payroll(payroll_percent_decimals)
        self.remaining_diff: Optional[SemesterValue] = None
        self._finalized = False
        self._workload: Optional[Workload] = None

    @property
    def finalized(self) -> bool:
        return self._finalized

    # =========================================================================
    # Contributions
    # =========================================================================

    def add_course(self, course: Course) -> None:
        """Book the teacher's share of a course (lesson-based)."""
        self._check_open()
        teacher = self.employment.teacher
        lessons1 = course.lessons_for(teacher, Semester.FIRST)
        lessons2 = course.lessons_for(teacher, Semester.SECOND)
        percent1 = course.percent_for(teacher, Semester.FIRST)
        percent2 = course.percent_for(teacher, Semester.SECOND)

        self.courses.add_item(course, lessons1, percent1, lessons2, percent2)
        self.sum_payroll_lessons(course.payroll_type, Semester.FIRST, lessons1)
        self.sum_payroll_lessons(course.payroll_type, Semester.SECOND, lessons2)

    def add_pool_entry(self, entry: PoolEntry) -> None:
        """Book a pool entry; reported as entered, booked without age relief."""
        self._check_open()
        percent = entry.percent()
        payroll_type = entry.type.payroll_type

        self.pool.add_item(entry.description, entry.type, percent)
        percent = percent.map(self.strategy.pool_percent)
        self.sum_payroll_percent(payroll_type, Semester.FIRST, percent.semester1)
        self.sum_payroll_percent(payroll_type, Semester.SECOND, percent.semester2)

    def add_thesis_entry(self, entry: ThesisEntry) -> None:
        """Book thesis supervision: percent per thesis times count, both semesters."""
        self._check_open()
        payroll_type = entry.type.payroll_type
        percent = entry.type.percent * entry.count

        self.theses.add_item(entry.type, entry.count, percent)
        self.sum_payroll_percent(payroll_type, Semester.FIRST, percent)
        self.sum_payroll_percent(payroll_type, Semester.SECOND, percent)

    def add_posting(self, posting: Posting) -> None:
        self._check_open()
        self.postings.add_item(posting)

    def add_posting_detail(self, detail: PostingDetail) -> None:
        """Book a posting detail as lessons or percent depending on its type.

        Zero-valued details are skipped and leave the postings untouched.
        """
        self._check_open()
        payroll_type = detail.type.payroll_type
        if detail.type.percent:
            self.strategy.handle_posting_detail_percent(self.postings, detail.posting, payroll_type, detail.value)
        else:
            self.strategy.handle_posting_detail_lessons(self.postings, detail.posting, payroll_type, detail.value)

    def sum_payroll_lessons(self, payroll_type: PayrollType, semester: Semester, lessons: float) -> None:
        if not payroll_type.lesson_based:
            raise ValueError(
                f"Cannot add lessons to percent-based payroll type '{payroll_type.code}'."
            )

        self.strategy.add_to_payroll(payroll_type, semester, lessons)

    def sum_payroll_percent(self, payroll_type: PayrollType, semester: Semester, percent: float) -> None:
        value = percent
        if payroll_type.lesson_based:
            value = payroll_type.percent_to_lessons(percent)

        self.strategy.add_to_payroll(payroll_type, semester, value)

    # =========================================================================
    # Finalization
    # =========================================================================

    def calculate_payroll(self) -> Payroll:
        """Run the saldo allocation once and return the payroll result."""
        if not self._finalized:
            self.remaining_diff = self.strategy.calculate_payroll(self.payroll)
            self._finalized = True
            logger.debug(
                f"payroll for {self.employment.teacher.code} ({type(self.strategy).__name__}): "
                f"{self.payroll.percent().semester1:.3f}/{self.payroll.percent().semester2:.3f}"
            )
        return self.payroll

    def create_summary(self) -> Summary:
        employment = self.employment
        summary = Summary(
            employment.age_relief_factor(Semester.FIRST),
            employment.age_relief_factor(Semester.SECOND),
        )
        courses = self.courses.percent()
        summary.add(SUMMARY_INSTRUCTION, courses.semester1, courses.semester2)
        summary.add(SUMMARY_THESES, self.theses.percent(), self.theses.percent())
        pool = self.pool.percent().map(self.strategy.pool_percent)
        summary.add(SUMMARY_POOL, pool.semester1, pool.semester2)
        return summary

    def create_workload(self) -> Workload:
        """Finalize the calculation and wrap the result into a Workload."""
        if self._workload is None:
            summary = self.create_summary()
            payroll = self.calculate_payroll()
            self._workload = Workload(
                self.employment, self.courses, self.pool, self.theses, self.postings, summary, payroll
            )
        return self._workload

    def _check_open(self) -> None:
        if self._finalized:
            raise CalculationError("Calculation is finalized; no further contributions accepted.")


def create_strategy(employment: Employment) -> CalculationStrategy:
    """Select the strategy for the employment's school year calculation mode.

    Raises:
        ConfigurationError: For unknown modes, or the historic mode without
            a default payroll type.
    """
    school_year = employment.school_year
    mode = CalculationMode.parse(school_year.calculation_mode)
    if mode is None:
        raise ConfigurationError(
            f"Unknown calculation mode '{school_year.calculation_mode}' for school year {school_year.code}"
        )

    if mode is CalculationMode.PERCENT:
        return PercentStrategy(employment)
    if mode is CalculationMode.PERCENT_AGE_RELIEF_INCLUDED:
        return PercentAgeReliefIncludedStrategy(employment)
    if mode is CalculationMode.LESSONS_AGE_RELIEF_INCLUDED:
        return LessonsAgeReliefIncludedStrategy(employment)

    if school_year.default_payroll_type is None:
        raise ConfigurationError(
            f"Historic calculation mode needs a default payroll type (school year {school_year.code})"
        )
    return HistoricStrategy(employment, school_year.default_payroll_type)


def create_calculation(employment: Employment, payroll_types: Optional[Iterable[PayrollType]] = None) -> Calculation:
    """Create a calculation for an employment.

    Args:
        employment: The employment to calculate
        payroll_types: Optional catalog of payroll types. The first type in
            the strategy's resolution order is registered up front so the
            saldo can always be booked, even for an employment without
            contributions. The historic mode uses its default type instead.

    Returns:
        A fresh Calculation
    """
    strategy = create_strategy(employment)
    if payroll_types is not None and not isinstance(strategy, HistoricStrategy):
        ordered = sorted(payroll_types, key=strategy.order)
        if ordered:
            strategy.payroll_map.ensure_type(ordered[0])

    logger.debug(f"calculation for {employment.teacher.code}: {type(strategy).__name__}")
    return Calculation(employment, strategy)


def calculate_workload(
    employment: Employment,
    courses: Iterable[Course] = (),
    pool_entries: Iterable[PoolEntry] = (),
    postings: Iterable[Posting] = (),
    posting_details: Iterable[PostingDetail] = (),
    thesis_entries: Iterable[ThesisEntry] = (),
    payroll_types: Optional[Iterable[PayrollType]] = None,
) -> Workload:
    """Run a complete calculation for one employment.

    Contributions are fed in the order courses, pool, postings, posting
    details, theses. Cancelled courses and courses the teacher doesn't
    teach are ignored.

    Returns:
        The finalized Workload
    """
    teacher = employment.teacher
    calculation = create_calculation(employment, payroll_types)
    for course in courses:
        if course.contains(teacher) and not course.cancelled:
            calculation.add_course(course)
    for entry in pool_entries:
        calculation.add_pool_entry(entry)
    for posting in postings:
        calculation.add_posting(posting)
    for detail in posting_details:
        calculation.add_posting_detail(detail)
    for entry in thesis_entries:
        calculation.add_thesis_entry(entry)
    return calculation.create_workload()
