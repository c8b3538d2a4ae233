"""Payroll accumulation (PayrollMap) and the finalized Payroll result."""

from typing import Callable, Dict, Iterable, List, Optional

from ..data import PayrollType, Semester, SemesterValue
from .rounding import PERCENT_DECIMALS


def natural_order(payroll_type: PayrollType) -> tuple:
    return payroll_type.sort_key


def saldo_resolving_order(payroll_type: PayrollType) -> tuple:
    return payroll_type.saldo_sort_key


class PayrollMap:
    """Accumulated percent per payroll type and semester.

    Iteration order is always an explicit sort over the types seen so far,
    never the insertion order of the underlying dict.
    """

    def __init__(self, order: Callable[[PayrollType], tuple] = natural_order):
        self._order = order
        self._values: Dict[PayrollType, SemesterValue] = {}

    def add(self, payroll_type: PayrollType, semester: Semester, value: float) -> None:
        self.ensure_type(payroll_type)
        self._values[payroll_type].add(semester, value)

    def ensure_type(self, payroll_type: PayrollType) -> None:
        """Register a type so it takes part in allocation even without inputs."""
        if payroll_type not in self._values:
            self._values[payroll_type] = SemesterValue()

    def get(self, payroll_type: PayrollType) -> SemesterValue:
        value = self._values.get(payroll_type)
        return value.copy() if value is not None else SemesterValue()

    def types(self) -> List[PayrollType]:
        return sorted(self._values, key=self._order)

    def __contains__(self, payroll_type: PayrollType) -> bool:
        return payroll_type in self._values

    def __len__(self) -> int:
        return len(self._values)


class PayrollItem:
    """Final lessons and percent of one payroll type."""

    def __init__(self, payroll_type: PayrollType):
        self.type = payroll_type
        self._lessons = SemesterValue()
        self._percent = SemesterValue()

    @property
    def description(self) -> str:
        return self.type.description

    def lessons(self) -> SemesterValue:
        return self._lessons.copy()

    def percent(self) -> SemesterValue:
        return self._percent.copy()

    def to_dict(self) -> dict:
        return {
            "payroll_type": self.type.code,
            "description": self.type.description,
            "lessons1": self._lessons.semester1,
            "percent1": self._percent.semester1,
            "lessons2": self._lessons.semester2,
            "percent2": self._percent.semester2,
        }


class Payroll:
    """Result of the allocation: one item per payroll type plus a total."""

    def __init__(self, percent_decimals: int = PERCENT_DECIMALS):
        self.percent_decimals = percent_decimals
        self._items: List[PayrollItem] = []
        self._item_map: Dict[PayrollType, PayrollItem] = {}
        self._total_percent = SemesterValue()

    def add(self, payroll_type: PayrollType, lessons: SemesterValue, percent: SemesterValue) -> None:
        item = self._item_map.get(payroll_type)
        if item is None:
            item = PayrollItem(payroll_type)
            self._items.append(item)
            self._item_map[payroll_type] = item

        item._lessons.add_value(lessons)
        item._percent.add_value(percent)
        self._total_percent.add_value(percent)

    def get_item(self, payroll_type: PayrollType) -> Optional[PayrollItem]:
        return self._item_map.get(payroll_type)

    def items(self) -> Iterable[PayrollItem]:
        return iter(self._items)

    def percent(self) -> SemesterValue:
        """Total final percent across all payroll types."""
        return self._total_percent.copy()

    def is_empty(self) -> bool:
        return not self._items

    def to_dict(self) -> dict:
        return {
            "items": [item.to_dict() for item in self._items],
            "percent_decimals": self.percent_decimals,
            "total": {
                "percent1": self._total_percent.semester1,
                "percent2": self._total_percent.semester2,
            },
        }
