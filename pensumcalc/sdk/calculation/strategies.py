"""Mode-specific parts of the calculation.

Every calculation mode differs from the others in five places only:
how a contribution is booked into the payroll map, how the payroll is
finalized (saldo allocation, rounding), how lesson and percent posting
details are booked, and whether pool entries are stored with age relief.

Which stored values already include age relief:

    mode                         pool      posting percent
    ---------------------------  --------  ---------------
    PERCENT                      no        no
    PERCENT_AGE_RELIEF_INCLUDED  yes       yes
    LESSONS_AGE_RELIEF_INCLUDED  yes       yes
    HISTORIC                     yes       yes

Values that include age relief are normalized before they are booked so
the allocation always works on percent without age relief.
"""

import logging
from typing import Callable, List, Tuple

from ..data import Employment, PayrollType, Posting, Semester, SemesterValue
from .aggregates import Postings
from .allocation import allocate_saldo
from .payroll import Payroll, PayrollMap, natural_order, saldo_resolving_order
from .rounding import round_lessons, round_percent

logger = logging.getLogger(__name__)

POOL_TITLE = "Pool"
POOL_TITLE_AGE_RELIEF_INCLUDED = "Pool (incl. age relief)"


class CalculationStrategy:
    """Base strategy holding the payroll map and the computed total.

    Subclasses implement `calculate_payroll` and may override the other
    hooks. One instance serves exactly one calculation.
    """

    order: Callable[[PayrollType], tuple] = staticmethod(natural_order)
    records_weekly_lessons = False

    def __init__(self, employment: Employment):
        self.employment = employment
        self.payroll_map = PayrollMap(self.order)
        self.total_percent = SemesterValue()

    # -- hooks ---------------------------------------------------------------

    def add_to_payroll(self, payroll_type: PayrollType, semester: Semester, value: float) -> None:
        """Book a value; lesson-based types receive lessons, others percent."""
        if payroll_type.lesson_based:
            value = payroll_type.lessons_to_percent(value)

        self.total_percent.add(semester, value)
        self.payroll_map.add(payroll_type, semester, value)

    def calculate_payroll(self, payroll: Payroll) -> SemesterValue:
        """Fill payroll with the final figures.

        Returns:
            The diff left over after allocation.
        """
        raise NotImplementedError

    def handle_posting_detail_lessons(
        self, postings: Postings, posting: Posting, payroll_type: PayrollType, lessons: float
    ) -> None:
        if lessons == 0:
            logger.debug(f"skipping zero lesson detail on posting '{posting.description}'")
            return

        factor = self.employment.age_relief_factor(posting.semester())
        # posting lessons are counted over the whole year
        percent = payroll_type.lessons_to_percent(lessons) / self.employment.school_year.weeks
        age_relief = percent * factor / 100.0
        weekly_lessons = payroll_type.weekly_lessons if self.records_weekly_lessons else 0.0
        postings.add_detail(posting, payroll_type, lessons, percent, age_relief, weekly_lessons)

    def handle_posting_detail_percent(
        self, postings: Postings, posting: Posting, payroll_type: PayrollType, percent: float
    ) -> None:
        if percent == 0:
            logger.debug(f"skipping zero percent detail on posting '{posting.description}'")
            return

        semester = posting.semester()
        percent = self.posting_percent(semester, percent)
        age_relief = percent * self.employment.age_relief_factor(semester) / 100.0
        postings.add_detail(posting, payroll_type, 0.0, percent, age_relief)

    def posting_percent(self, semester: Semester, percent: float) -> float:
        """Percent of a posting detail without age relief."""
        return percent

    def pool_percent(self, semester: Semester, percent: float) -> float:
        """Percent of a pool entry without age relief."""
        return percent

    def pool_title(self) -> str:
        return POOL_TITLE

    # -- helpers -------------------------------------------------------------

    def _stored_entries(self, base: Callable[[Semester, float], float]) -> List[Tuple[PayrollType, SemesterValue]]:
        return [
            (payroll_type, self.payroll_map.get(payroll_type).map(base))
            for payroll_type in self.payroll_map.types()
        ]

    def _allocate_percent(self, payroll: Payroll, base: Callable[[Semester, float], float]) -> SemesterValue:
        """Allocate the saldo (computed with age relief) over `base` of the stored percent."""
        employment = self.employment
        diff = employment.payment_target().map(
            lambda s, payment: payment - employment.with_age_relief(s, self.total_percent.get(s))
        )
        entries = self._stored_entries(base)
        allocated, remaining = allocate_saldo(entries, diff)

        for (payroll_type, stored), (_, percent) in zip(entries, allocated):
            lessons = self._lessons_for(payroll_type, percent).map(lambda s, l: round_lessons(l))
            percent = percent.map(lambda s, p: round_percent(p))
            self._log_allocation(payroll_type, stored, percent)
            payroll.add(payroll_type, lessons, percent)

        return remaining

    def _lessons_for(self, payroll_type: PayrollType, percent: SemesterValue) -> SemesterValue:
        """Back-convert final percent (with age relief) to lessons."""
        if not payroll_type.lesson_based:
            return SemesterValue()
        return percent.map(
            lambda s, p: payroll_type.percent_to_lessons(self.employment.without_age_relief(s, p))
        )

    def _log_allocation(self, payroll_type: PayrollType, stored: SemesterValue, final: SemesterValue) -> None:
        logger.debug(
            f"allocated {payroll_type.code}: "
            f"{stored.semester1:.3f}/{stored.semester2:.3f} -> {final.semester1:.3f}/{final.semester2:.3f}"
        )


class _AgeReliefIncludedInput:
    """Mixin for modes whose pool and percent postings include age relief."""

    def posting_percent(self, semester: Semester, percent: float) -> float:
        return self.employment.without_age_relief(semester, percent)

    def pool_percent(self, semester: Semester, percent: float) -> float:
        return percent / (1.0 + self.employment.age_relief_factor(semester) / 100)

    def pool_title(self) -> str:
        if self.employment.age_relief_factor(Semester.FIRST) > 0:
            return POOL_TITLE_AGE_RELIEF_INCLUDED
        return POOL_TITLE


class PercentStrategy(CalculationStrategy):
    """Current regime: all stored values exclude age relief.

    The saldo is computed and allocated on percent including age relief.
    """

    def calculate_payroll(self, payroll: Payroll) -> SemesterValue:
        return self._allocate_percent(payroll, self.employment.with_age_relief)


class PercentAgeReliefIncludedStrategy(_AgeReliefIncludedInput, CalculationStrategy):
    """Percent regime with pool and postings entered including age relief.

    The diff includes age relief while the per-type base does not.
    """

    records_weekly_lessons = True

    def calculate_payroll(self, payroll: Payroll) -> SemesterValue:
        return self._allocate_percent(payroll, lambda s, p: p)


class LessonsAgeReliefIncludedStrategy(_AgeReliefIncludedInput, CalculationStrategy):
    """Lesson regime: lessons are the booked unit.

    Types are visited in saldo resolving order. For lesson-based types the
    percent is rebuilt from the rounded lessons so both stay consistent.
    """

    order = staticmethod(saldo_resolving_order)
    records_weekly_lessons = True

    def calculate_payroll(self, payroll: Payroll) -> SemesterValue:
        employment = self.employment
        diff = employment.payment_target().map(lambda s, payment: payment - self.total_percent.get(s))
        entries = self._stored_entries(lambda s, p: p)
        allocated, remaining = allocate_saldo(entries, diff)

        for (payroll_type, stored), (_, percent) in zip(entries, allocated):
            lessons = SemesterValue()
            if payroll_type.lesson_based:
                lessons = self._lessons_for(payroll_type, percent).map(lambda s, l: round_lessons(l))
                percent = lessons.map(
                    lambda s, l: round_percent(employment.with_age_relief(s, payroll_type.lessons_to_percent(l)))
                )
            self._log_allocation(payroll_type, stored, percent)
            payroll.add(payroll_type, lessons, percent)

        return remaining


class HistoricStrategy(_AgeReliefIncludedInput, CalculationStrategy):
    """Legacy regime: the whole saldo is booked onto one default type.

    The default type is always part of the payroll, even without inputs,
    and its percent is not clamped at zero.
    """

    def __init__(self, employment: Employment, default_type: PayrollType):
        super().__init__(employment)
        self.default_type = default_type

    def calculate_payroll(self, payroll: Payroll) -> SemesterValue:
        employment = self.employment
        self.payroll_map.ensure_type(self.default_type)
        diff = employment.payment_target().map(
            lambda s, payment: payment - employment.with_age_relief(s, self.total_percent.get(s))
        )

        for payroll_type, stored in self._stored_entries(employment.with_age_relief):
            percent = stored.copy()
            if payroll_type is self.default_type:
                percent.add_value(diff)

            lessons = self._lessons_for(payroll_type, percent).map(lambda s, l: round_lessons(l))
            percent = percent.map(lambda s, p: round_percent(p))
            self._log_allocation(payroll_type, stored, percent)
            payroll.add(payroll_type, lessons, percent)

        return SemesterValue()
