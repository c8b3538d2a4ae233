"""School-year files: loading and running the calculation for every employment.

A school-year file is a YAML document validated by schemas.SchoolYearFile.
Loading resolves all code references into domain objects; the engine then
runs once per employment with the contributions of that teacher.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, TypeVar, Union

import yaml
from pydantic import ValidationError

from .calculation import Workload, Workloads, calculate_workload
from .data import (
    Course,
    Employment,
    PayrollType,
    PoolEntry,
    PoolType,
    Posting,
    PostingDetail,
    PostingType,
    SchoolYear,
    Teacher,
    ThesisEntry,
    ThesisType,
)
from .schemas import SchoolYearFile

logger = logging.getLogger(__name__)

T = TypeVar("T")


class SchoolYearFileError(Exception):
    """Raised when a school-year file is unreadable, invalid or inconsistent."""
    pass


@dataclass
class SchoolYearData:
    """All objects of one school year, ready for calculation."""

    school_year: SchoolYear
    payroll_types: List[PayrollType] = field(default_factory=list)
    teachers: Dict[str, Teacher] = field(default_factory=dict)
    employments: List[Employment] = field(default_factory=list)
    courses: List[Course] = field(default_factory=list)
    pool_entries: List[PoolEntry] = field(default_factory=list)
    thesis_entries: List[ThesisEntry] = field(default_factory=list)
    postings: List[Posting] = field(default_factory=list)
    posting_details: List[PostingDetail] = field(default_factory=list)

    def get_employment(self, teacher_code: str) -> Optional[Employment]:
        for employment in self.employments:
            if employment.teacher.code == teacher_code:
                return employment
        return None

    def calculate_workload(self, employment: Employment) -> Workload:
        """Calculate one employment from the teacher's contributions."""
        teacher = employment.teacher
        return calculate_workload(
            employment,
            courses=self.courses,
            pool_entries=[e for e in self.pool_entries if e.teacher is teacher],
            postings=[p for p in self.postings if p.teacher is teacher],
            posting_details=[d for d in self.posting_details if d.posting.teacher is teacher],
            thesis_entries=[e for e in self.thesis_entries if e.teacher is teacher],
            payroll_types=self.payroll_types,
        )

    def calculate_workloads(self) -> Workloads:
        """Calculate all employments of the school year."""
        workloads = Workloads(
            self.school_year,
            [self.calculate_workload(employment) for employment in self.employments],
        )
        logger.info(f"calculated {len(workloads)} workloads for school year {self.school_year.code}")
        return workloads


def _index(items: List[T], kind: str) -> Dict[str, T]:
    result = {}
    for item in items:
        if item.code in result:
            raise SchoolYearFileError(f"Duplicate {kind} code '{item.code}'")
        result[item.code] = item
    return result


def _lookup(index: Dict[str, T], code: str, kind: str, context: str) -> T:
    try:
        return index[code]
    except KeyError:
        raise SchoolYearFileError(f"Unknown {kind} '{code}' in {context}") from None


def parse_school_year(data: dict) -> SchoolYearData:
    """Build domain objects from a parsed school-year document.

    Args:
        data: Dict as produced by yaml.safe_load

    Returns:
        SchoolYearData with every reference resolved

    Raises:
        SchoolYearFileError: On schema violations or unknown references
    """
    try:
        parsed = SchoolYearFile.model_validate(data or {})
    except ValidationError as e:
        raise SchoolYearFileError(str(e)) from e

    payroll_types = _index([
        PayrollType(
            code=p.code,
            description=p.description,
            order=p.order,
            lesson_based=p.lesson_based,
            weekly_lessons=p.weekly_lessons,
            percent_per_lesson=p.percent_per_lesson,
            saldo_resolving_order=p.saldo_resolving_order,
        )
        for p in parsed.payroll_types
    ], "payroll type")

    info = parsed.school_year
    default_type = None
    if info.default_payroll_type:
        default_type = _lookup(payroll_types, info.default_payroll_type, "payroll type", "school_year")
    school_year = SchoolYear(
        code=info.code,
        description=info.description,
        weeks=info.weeks,
        calculation_mode=info.calculation_mode,
        semester1_start=info.semester1_start,
        semester2_start=info.semester2_start,
        default_payroll_type=default_type,
    )

    pool_types = _index([
        PoolType(p.code, p.description, _lookup(payroll_types, p.payroll_type, "payroll type", f"pool type {p.code}"), p.order)
        for p in parsed.pool_types
    ], "pool type")
    thesis_types = _index([
        ThesisType(t.code, t.description, t.percent, _lookup(payroll_types, t.payroll_type, "payroll type", f"thesis type {t.code}"))
        for t in parsed.thesis_types
    ], "thesis type")
    posting_types = _index([
        PostingType(t.code, t.description, _lookup(payroll_types, t.payroll_type, "payroll type", f"posting type {t.code}"), t.percent)
        for t in parsed.posting_types
    ], "posting type")
    teachers = _index([
        Teacher(t.code, t.last_name, t.first_name, t.employee_number, t.birthday)
        for t in parsed.teachers
    ], "teacher")

    result = SchoolYearData(
        school_year=school_year,
        payroll_types=sorted(payroll_types.values(), key=lambda p: p.sort_key),
        teachers=teachers,
    )

    for e in parsed.employments:
        teacher = _lookup(teachers, e.teacher, "teacher", "employments")
        if result.get_employment(teacher.code) is not None:
            raise SchoolYearFileError(f"Duplicate employment for teacher '{teacher.code}'")
        result.employments.append(Employment(
            teacher=teacher,
            school_year=school_year,
            payment1=e.payment1,
            payment2=e.payment2,
            opening_balance=e.opening_balance,
            age_relief_factor1=e.age_relief_factor1,
            age_relief_factor2=e.age_relief_factor2,
        ))

    for c in parsed.courses:
        context = f"course {c.subject}"
        teachers1 = c.teachers1 if c.teachers1 is not None else c.teachers
        teachers2 = c.teachers2 if c.teachers2 is not None else c.teachers
        result.courses.append(Course(
            subject=c.subject,
            payroll_type=_lookup(payroll_types, c.payroll_type, "payroll type", context),
            lessons1=c.lessons1,
            lessons2=c.lessons2,
            teachers1=[_lookup(teachers, code, "teacher", context) for code in teachers1],
            teachers2=[_lookup(teachers, code, "teacher", context) for code in teachers2],
            grade=c.grade,
            school_classes=list(c.school_classes),
            cancelled=c.cancelled,
        ))

    for p in parsed.pool_entries:
        result.pool_entries.append(PoolEntry(
            teacher=_lookup(teachers, p.teacher, "teacher", "pool_entries"),
            type=_lookup(pool_types, p.type, "pool type", "pool_entries"),
            description=p.description,
            percent1=p.percent1,
            percent2=p.percent2,
        ))

    for t in parsed.thesis_entries:
        result.thesis_entries.append(ThesisEntry(
            teacher=_lookup(teachers, t.teacher, "teacher", "thesis_entries"),
            type=_lookup(thesis_types, t.type, "thesis type", "thesis_entries"),
            count=t.count,
        ))

    for p in parsed.postings:
        posting = Posting(
            teacher=_lookup(teachers, p.teacher, "teacher", "postings"),
            school_year=school_year,
            description=p.description,
            start_date=p.start_date,
            end_date=p.end_date,
        )
        result.postings.append(posting)
        for d in p.details:
            result.posting_details.append(PostingDetail(
                posting=posting,
                type=_lookup(posting_types, d.type, "posting type", f"posting '{p.description}'"),
                value=d.value,
            ))

    return result


def load_school_year(path: Union[str, Path]) -> SchoolYearData:
    """Load and resolve a school-year YAML file.

    Raises:
        SchoolYearFileError: If the file can't be read or is invalid
    """
    path = Path(path)
    try:
        with open(path, "r") as f:
            data = yaml.safe_load(f)
    except OSError as e:
        raise SchoolYearFileError(f"Cannot read {path}: {e}") from e
    except yaml.YAMLError as e:
        raise SchoolYearFileError(f"Invalid YAML in {path}: {e}") from e

    logger.debug(f"loaded school year file {path}")
    return parse_school_year(data)
