"""data - Domain objects consumed by the calculation engine.

Scope:
- Semester and SemesterValue (per-semester number pairs)
- Reference entities: payroll types, pool types, thesis types, posting types
- School year, teacher, employment and the workload contributions
  (courses, pool entries, thesis entries, postings and their details)

Constraints:
- No I/O - objects are built by a loader (see school_year.py) or by tests
- Reference entities compare by identity

Usage:
    from pensumcalc.sdk.data import PayrollType, Semester, SemesterValue

    gym = PayrollType("GYM", "Gymnasium", order=1, lesson_based=True, weekly_lessons=28)
    gym.lessons_to_percent(14)  # 50.0
"""

from .semester import Semester, SemesterValue, SEMESTERS

from .model import (
    AGE_RELIEF_BANDS,
    age_relief_factor_for_age,
    age_on,
    CalculationMode,
    PayrollType,
    Teacher,
    SchoolYear,
    Employment,
    Course,
    PoolType,
    PoolEntry,
    ThesisType,
    ThesisEntry,
    PostingType,
    Posting,
    PostingDetail,
)

__all__ = [
    # Semesters
    "Semester",
    "SemesterValue",
    "SEMESTERS",
    # Age relief
    "AGE_RELIEF_BANDS",
    "age_relief_factor_for_age",
    "age_on",
    # Entities
    "CalculationMode",
    "PayrollType",
    "Teacher",
    "SchoolYear",
    "Employment",
    "Course",
    "PoolType",
    "PoolEntry",
    "ThesisType",
    "ThesisEntry",
    "PostingType",
    "Posting",
    "PostingDetail",
]
