"""Payroll export and balance roll-over across school years."""

import csv
import io
import logging
from dataclasses import replace
from pathlib import Path
from typing import Iterable, List, Sequence

from .calculation import Workload, Workloads, round_lessons, round_percent
from .data import PayrollType, Semester
from .school_year import SchoolYearData

logger = logging.getLogger(__name__)

PAYROLL_COLUMNS = [
    "Employee number",
    "Code",
    "Last name",
    "First name",
    "Birthday",
    "Age relief factor",
    "Payment",
]


def payroll_header(payroll_types: Sequence[PayrollType]) -> List[str]:
    """Column titles: fixed teacher columns, then lessons/percent per type."""
    header = list(PAYROLL_COLUMNS)
    for payroll_type in payroll_types:
        if payroll_type.lesson_based:
            header.append(f"{payroll_type.code} L")
        header.append(f"{payroll_type.code} %")
    return header


def payroll_row(workload: Workload, payroll_types: Sequence[PayrollType], semester: Semester) -> list:
    """One CSV row for a teacher; payroll types without an item stay empty."""
    teacher = workload.teacher
    row = [
        teacher.employee_number,
        teacher.code,
        teacher.last_name,
        teacher.first_name,
        teacher.birthday.isoformat() if teacher.birthday else "",
        workload.age_relief_factor(semester),
        round_percent(workload.payroll.percent().get(semester)),
    ]
    for payroll_type in payroll_types:
        item = workload.payroll.get_item(payroll_type)
        if payroll_type.lesson_based:
            row.append(round_lessons(item.lessons().get(semester)) if item else "")
        row.append(round_percent(item.percent().get(semester)) if item else "")
    return row


def _write_payroll_rows(writer, workloads: Workloads, payroll_types: Iterable[PayrollType],
                        semester: Semester) -> int:
    ordered = sorted(payroll_types, key=lambda p: p.sort_key)
    writer.writerow(payroll_header(ordered))
    count = 0
    for workload in workloads:
        writer.writerow(payroll_row(workload, ordered, semester))
        count += 1
    return count


def payroll_to_csv_string(workloads: Workloads, payroll_types: Iterable[PayrollType],
                          semester: Semester) -> str:
    """Render the payroll of one semester as a CSV string."""
    output = io.StringIO()
    writer = csv.writer(output)
    _write_payroll_rows(writer, workloads, payroll_types, semester)
    return output.getvalue()


def write_payroll_csv(workloads: Workloads, payroll_types: Iterable[PayrollType],
                      semester: Semester, output_path: Path) -> Path:
    """Write the payroll of one semester to a CSV file.

    Args:
        workloads: Calculated workloads of the school year
        payroll_types: Payroll type catalog; defines the per-type columns
        semester: Semester to export
        output_path: Path to output CSV file

    Returns:
        Path to the written file
    """
    with open(output_path, "w", newline="") as csvfile:
        writer = csv.writer(csvfile)
        count = _write_payroll_rows(writer, workloads, payroll_types, semester)

    logger.info(f"wrote payroll of {count} teachers (semester {semester.id}) to {output_path}")
    return output_path


def roll_balances(school_years: Sequence[SchoolYearData]) -> List[Workloads]:
    """Carry closing balances forward through consecutive school years.

    School years are processed in the given order. The closing balance of a
    teacher in one year becomes the opening balance of the same teacher's
    employment (matched by teacher code) in the next year. Teachers missing
    from the previous year keep their opening balance.

    The given SchoolYearData and their employments are left unchanged; rolled
    employments are copies.

    Returns:
        The recalculated Workloads of every school year, in input order
    """
    results: List[Workloads] = []
    previous = None
    for data in school_years:
        if previous is not None:
            employments = []
            for employment in data.employments:
                workload = previous.find(employment.teacher.code)
                if workload is not None:
                    logger.debug(
                        f"{data.school_year.code} {employment.teacher.code}: opening balance "
                        f"{employment.opening_balance:.3f} -> {workload.closing_balance:.3f}"
                    )
                    employment = replace(employment, opening_balance=workload.closing_balance)
                employments.append(employment)
            data = replace(data, employments=employments)
        previous = data.calculate_workloads()
        results.append(previous)
    return results
