"""Report aggregators: courses, pool, theses, postings and the summary.

Each aggregator keeps its items in insertion order together with running
totals. Items are added only by the owning Calculation; everything handed
out is a copy or an immutable value.
"""

from dataclasses import dataclass, field
from datetime import date
from typing import Dict, Generic, Iterator, List, Optional, TypeVar

from ..data import (
    Course,
    PayrollType,
    PoolType,
    Posting,
    SemesterValue,
    ThesisType,
)

T = TypeVar("T")

TOTAL_DESCRIPTION = "Total"


def _date_str(day: Optional[date]) -> Optional[str]:
    return day.isoformat() if day else None


class ItemList(Generic[T]):
    """Ordered list of report items."""

    def __init__(self):
        self._items: List[T] = []

    def _add(self, item: T) -> None:
        self._items.append(item)

    def items(self) -> Iterator[T]:
        return iter(self._items)

    def is_empty(self) -> bool:
        return not self._items

    def __len__(self) -> int:
        return len(self._items)

    def to_dict(self) -> dict:
        return {"items": [item.to_dict() for item in self._items]}


# =============================================================================
# Courses
# =============================================================================


@dataclass(frozen=True)
class CourseItem:
    course: Course
    lessons1: float
    percent1: float
    lessons2: float
    percent2: float

    @property
    def subject(self) -> str:
        return self.course.subject

    @property
    def grade(self) -> str:
        return self.course.grade

    def to_dict(self) -> dict:
        return {
            "subject": self.course.subject,
            "grade": self.course.grade,
            "school_classes": list(self.course.school_classes),
            "lessons1": self.lessons1,
            "percent1": self.percent1,
            "lessons2": self.lessons2,
            "percent2": self.percent2,
        }


class Courses(ItemList[CourseItem]):

    def __init__(self):
        super().__init__()
        self._lessons = SemesterValue()
        self._percent = SemesterValue()

    def add_item(self, course: Course, lessons1: float, percent1: float, lessons2: float, percent2: float) -> None:
        self._add(CourseItem(course, lessons1, percent1, lessons2, percent2))
        self._lessons.add_value(SemesterValue(lessons1, lessons2))
        self._percent.add_value(SemesterValue(percent1, percent2))

    def lessons(self) -> SemesterValue:
        return self._lessons.copy()

    def percent(self) -> SemesterValue:
        return self._percent.copy()

    def to_dict(self) -> dict:
        result = super().to_dict()
        result["total"] = {
            "lessons1": self._lessons.semester1,
            "lessons2": self._lessons.semester2,
            "percent1": self._percent.semester1,
            "percent2": self._percent.semester2,
        }
        return result


# =============================================================================
# Pool
# =============================================================================


@dataclass(frozen=True)
class PoolItem:
    description: str
    type: Optional[PoolType]
    percent1: float
    percent2: float

    def to_dict(self) -> dict:
        result = {
            "description": self.description,
            "percent1": self.percent1,
            "percent2": self.percent2,
        }
        if self.type is not None:
            result["type"] = self.type.code
        return result


class Pool(ItemList[PoolItem]):
    """Pool entries as entered (before any age relief normalization)."""

    def __init__(self, title: str):
        super().__init__()
        self.title = title
        self._percent = SemesterValue()

    def add_item(self, description: str, pool_type: Optional[PoolType], percent: SemesterValue) -> None:
        self._add(PoolItem(description, pool_type, percent.semester1, percent.semester2))
        self._percent.add_value(percent)

    def percent(self) -> SemesterValue:
        return self._percent.copy()

    def to_dict(self) -> dict:
        result = super().to_dict()
        result["title"] = self.title
        result["total"] = {
            "description": TOTAL_DESCRIPTION,
            "percent1": self._percent.semester1,
            "percent2": self._percent.semester2,
        }
        return result


# =============================================================================
# Theses
# =============================================================================


@dataclass(frozen=True)
class ThesisItem:
    type: ThesisType
    count: float
    percent: float

    @property
    def percent_each(self) -> float:
        return self.type.percent

    def to_dict(self) -> dict:
        return {
            "description": self.type.description,
            "count": self.count,
            "percent_each": self.type.percent,
            "percent": self.percent,
        }


class Theses(ItemList[ThesisItem]):

    def __init__(self):
        super().__init__()
        self._percent = 0.0

    def add_item(self, thesis_type: ThesisType, count: float, percent: float) -> None:
        self._add(ThesisItem(thesis_type, count, percent))
        self._percent += percent

    def percent(self) -> float:
        return self._percent

    def to_dict(self) -> dict:
        result = super().to_dict()
        result["total"] = {"description": TOTAL_DESCRIPTION, "percent": self._percent}
        return result


# =============================================================================
# Postings
# =============================================================================


@dataclass(frozen=True)
class PostingDetailItem:
    """One booked posting detail.

    `percent` excludes age relief; `age_relief` is booked separately.
    """

    payroll_type: PayrollType
    lessons: float
    percent: float
    age_relief: float
    weekly_lessons: float = 0.0

    @property
    def percent_without_age_relief(self) -> float:
        return self.percent

    @property
    def percent_with_age_relief(self) -> float:
        return self.percent + self.age_relief

    def to_dict(self) -> dict:
        return {
            "payroll_type": self.payroll_type.code,
            "lessons": self.lessons,
            "percent": self.percent,
            "age_relief": self.age_relief,
            "weekly_lessons": self.weekly_lessons,
        }


@dataclass
class PostingItem:
    posting: Posting
    details: List[PostingDetailItem] = field(default_factory=list)
    total_percent: float = 0.0

    @property
    def description(self) -> str:
        return self.posting.description

    @property
    def start_date(self) -> Optional[date]:
        return self.posting.start_date

    @property
    def end_date(self) -> Optional[date]:
        return self.posting.end_date

    def _add(self, detail: PostingDetailItem) -> None:
        self.details.append(detail)
        self.total_percent += detail.percent_with_age_relief

    def to_dict(self) -> dict:
        return {
            "description": self.posting.description,
            "start_date": _date_str(self.posting.start_date),
            "end_date": _date_str(self.posting.end_date),
            "total_percent": self.total_percent,
            "details": [detail.to_dict() for detail in self.details],
        }


class Postings(ItemList[PostingItem]):

    def __init__(self):
        super().__init__()
        self._item_map: Dict[Posting, PostingItem] = {}

    def add_item(self, posting: Posting) -> None:
        item = PostingItem(posting)
        self._item_map[posting] = item
        self._add(item)

    def add_detail(
        self,
        posting: Posting,
        payroll_type: PayrollType,
        lessons: float,
        percent: float,
        age_relief: float,
        weekly_lessons: float = 0.0,
    ) -> None:
        """Book a detail on a posting, registering the posting if needed."""
        item = self._item_map.get(posting)
        if item is None:
            self.add_item(posting)
            item = self._item_map[posting]
        item._add(PostingDetailItem(payroll_type, lessons, percent, age_relief, weekly_lessons))

    def get_item(self, posting: Posting) -> Optional[PostingItem]:
        return self._item_map.get(posting)

    def total_percent(self) -> float:
        return sum(item.total_percent for item in self._items)

    def to_dict(self) -> dict:
        result = super().to_dict()
        result["total"] = {"percent": self.total_percent()}
        return result


# =============================================================================
# Summary
# =============================================================================


class SummaryItem:
    """A named workload contribution with its derived age relief."""

    def __init__(self, summary: "Summary", item_id: int, description: str, percent1: float, percent2: float):
        self._summary = summary
        self.id = item_id
        self.description = description
        self.percent1 = percent1
        self.percent2 = percent2

    @property
    def age_relief1(self) -> float:
        return self.percent1 * self._summary.age_relief_factor1 / 100

    @property
    def age_relief2(self) -> float:
        return self.percent2 * self._summary.age_relief_factor2 / 100

    @property
    def percent_with_age_relief(self) -> float:
        """Mean over both semesters of percent plus age relief."""
        return (self.percent1 + self.age_relief1 + self.percent2 + self.age_relief2) / 2.0

    def to_dict(self) -> dict:
        return {
            "description": self.description,
            "percent1": self.percent1,
            "percent2": self.percent2,
            "age_relief1": self.age_relief1,
            "age_relief2": self.age_relief2,
            "percent_with_age_relief": self.percent_with_age_relief,
        }


class Summary(ItemList[SummaryItem]):
    """Workload contributions in insertion order; the total row sorts last."""

    TOTAL_ID = 2**31 - 1

    def __init__(self, age_relief_factor1: float, age_relief_factor2: float):
        super().__init__()
        self.age_relief_factor1 = age_relief_factor1
        self.age_relief_factor2 = age_relief_factor2
        self._next_id = 1
        self._total = SummaryItem(self, self.TOTAL_ID, TOTAL_DESCRIPTION, 0.0, 0.0)

    def add(self, description: str, percent1: float, percent2: float) -> None:
        self._add(SummaryItem(self, self._next_id, description, percent1, percent2))
        self._next_id += 1
        self._total.percent1 += percent1
        self._total.percent2 += percent2

    def total(self) -> SummaryItem:
        return self._total

    def rows(self) -> List[SummaryItem]:
        """All rows including the total, sorted by insertion id."""
        return sorted([*self._items, self._total], key=lambda item: item.id)

    def to_dict(self) -> dict:
        result = super().to_dict()
        result["age_relief_factor1"] = self.age_relief_factor1
        result["age_relief_factor2"] = self.age_relief_factor2
        result["total"] = self._total.to_dict()
        return result
