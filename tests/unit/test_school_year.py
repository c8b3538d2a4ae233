"""Tests for loading school-year files and the payroll export."""

import copy
import csv
import io

import pytest
import yaml

from pensumcalc.sdk.data import CalculationMode, Semester
from pensumcalc.sdk.export import payroll_header, payroll_to_csv_string, roll_balances, write_payroll_csv
from pensumcalc.sdk.school_year import SchoolYearFileError, load_school_year, parse_school_year


SCHOOL_YEAR_YAML = """
school_year:
  code: "2024-25"
  weeks: 38
  calculation_mode: P
  semester1_start: 2024-08-19
  semester2_start: 2025-02-03
payroll_types:
  - code: GYM
    description: Gymnasium
    order: 1
    lesson_based: true
    weekly_lessons: 28
  - code: ADM
    description: Administration
    order: 2
pool_types:
  - code: LIB
    description: Library
    payroll_type: ADM
thesis_types:
  - code: MA
    description: Matura thesis
    percent: 1.5
    payroll_type: ADM
posting_types:
  - code: SUB
    description: Substitution
    payroll_type: GYM
teachers:
  - code: ABC
    first_name: Anna
    last_name: Beispiel
    employee_number: "1001"
    birthday: 1980-05-01
  - code: XYZ
    first_name: Xaver
    last_name: Zahl
    employee_number: "1002"
employments:
  - teacher: ABC
    payment1: 100
    payment2: 100
  - teacher: XYZ
    payment1: 50
    payment2: 50
    opening_balance: 5
courses:
  - subject: Mathematics
    payroll_type: GYM
    school_classes: [4a]
    lessons1: 20
    lessons2: 20
    teachers: [ABC]
  - subject: Physics
    payroll_type: GYM
    lessons1: 7
    lessons2: 7
    teachers: [XYZ]
"""


# =============================================================================
# FIXTURES
# =============================================================================


@pytest.fixture
def raw():
    return yaml.safe_load(SCHOOL_YEAR_YAML)


@pytest.fixture
def school_year_file(tmp_path):
    path = tmp_path / "2024-25.yaml"
    path.write_text(SCHOOL_YEAR_YAML)
    return path


# =============================================================================
# Loading
# =============================================================================


class TestLoadSchoolYear:

    def test_resolves_references(self, school_year_file):
        data = load_school_year(school_year_file)

        assert data.school_year.code == "2024-25"
        assert CalculationMode.parse(data.school_year.calculation_mode) is CalculationMode.PERCENT
        assert [p.code for p in data.payroll_types] == ["GYM", "ADM"]
        assert set(data.teachers) == {"ABC", "XYZ"}
        assert data.courses[0].teachers1 == [data.teachers["ABC"]]
        assert data.courses[0].payroll_type is data.payroll_types[0]
        assert data.get_employment("XYZ").opening_balance == 5

    def test_calculates_every_employment(self, school_year_file):
        data = load_school_year(school_year_file)
        workloads = data.calculate_workloads()
        gym = data.payroll_types[0]

        assert len(workloads) == 2
        assert [t.code for t in workloads.teachers()] == ["ABC", "XYZ"]

        abc = workloads.find("ABC")
        assert workloads.get_workload(data.teachers["ABC"]) is abc
        assert abc.payroll.percent().semester1 == 100.0
        xyz = workloads.find("XYZ")
        assert xyz.payroll.get_item(gym).lessons().semester1 == 14.0
        assert xyz.closing_balance == pytest.approx(-20.0)

    def test_semester_specific_teachers(self, raw):
        raw["courses"][0]["teachers2"] = ["XYZ"]
        data = parse_school_year(raw)

        course = data.courses[0]
        assert course.teachers1 == [data.teachers["ABC"]]
        assert course.teachers2 == [data.teachers["XYZ"]]

    def test_unknown_teacher_reference(self, raw):
        raw["courses"][0]["teachers"] = ["NOPE"]

        with pytest.raises(SchoolYearFileError, match="Unknown teacher 'NOPE'"):
            parse_school_year(raw)

    def test_unknown_payroll_type_reference(self, raw):
        raw["pool_types"][0]["payroll_type"] = "XXX"

        with pytest.raises(SchoolYearFileError, match="Unknown payroll type 'XXX'"):
            parse_school_year(raw)

    def test_duplicate_code(self, raw):
        raw["teachers"].append({"code": "ABC"})

        with pytest.raises(SchoolYearFileError, match="Duplicate teacher code"):
            parse_school_year(raw)

    def test_unknown_field_is_rejected(self, raw):
        raw["school_year"]["wekks"] = 39

        with pytest.raises(SchoolYearFileError, match="wekks"):
            parse_school_year(raw)

    def test_lesson_type_needs_conversion(self, raw):
        del raw["payroll_types"][0]["weekly_lessons"]

        with pytest.raises(SchoolYearFileError, match="weekly_lessons"):
            parse_school_year(raw)

    def test_semester_dates_are_checked(self, raw):
        raw["school_year"]["semester2_start"] = raw["school_year"]["semester1_start"]

        with pytest.raises(SchoolYearFileError, match="semester2_start"):
            parse_school_year(raw)

    def test_missing_file(self, tmp_path):
        with pytest.raises(SchoolYearFileError, match="Cannot read"):
            load_school_year(tmp_path / "missing.yaml")

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "broken.yaml"
        path.write_text("school_year: [unclosed")

        with pytest.raises(SchoolYearFileError, match="Invalid YAML"):
            load_school_year(path)

    def test_historic_default_type(self, raw):
        raw["school_year"]["calculation_mode"] = 99
        raw["school_year"]["default_payroll_type"] = "ADM"
        data = parse_school_year(raw)

        assert data.school_year.default_payroll_type.code == "ADM"
        xyz = data.calculate_workloads().find("XYZ")
        adm = xyz.payroll.get_item(data.school_year.default_payroll_type)
        assert adm.percent().semester1 == 25.0


# =============================================================================
# Export
# =============================================================================


class TestPayrollExport:

    def test_header(self, school_year_file):
        data = load_school_year(school_year_file)

        assert payroll_header(data.payroll_types) == [
            "Employee number", "Code", "Last name", "First name", "Birthday",
            "Age relief factor", "Payment", "GYM L", "GYM %", "ADM %",
        ]

    def test_rows(self, school_year_file):
        data = load_school_year(school_year_file)
        output = payroll_to_csv_string(data.calculate_workloads(), data.payroll_types, Semester.FIRST)
        rows = list(csv.reader(io.StringIO(output)))

        assert len(rows) == 3
        assert rows[1] == ["1001", "ABC", "Beispiel", "Anna", "1980-05-01", "0.0", "100.0", "28.0", "100.0", ""]
        assert rows[2] == ["1002", "XYZ", "Zahl", "Xaver", "", "0.0", "50.0", "14.0", "50.0", ""]

    def test_write_file(self, school_year_file, tmp_path):
        data = load_school_year(school_year_file)
        path = write_payroll_csv(data.calculate_workloads(), data.payroll_types, Semester.SECOND,
                                 tmp_path / "payroll.csv")

        with open(path, newline="") as f:
            rows = list(csv.reader(f))
        assert rows[0][1] == "Code"
        assert len(rows) == 3


class TestRollBalances:

    def test_closing_becomes_next_opening(self, raw):
        next_raw = copy.deepcopy(raw)
        next_raw["school_year"]["code"] = "2025-26"
        next_raw["school_year"]["semester1_start"] = "2025-08-18"
        next_raw["school_year"]["semester2_start"] = "2026-02-02"
        next_raw["employments"][1]["opening_balance"] = 0

        first, second = roll_balances([parse_school_year(raw), parse_school_year(next_raw)])

        abc_closing = first.find("ABC").closing_balance
        assert abc_closing == pytest.approx(20 / 28 * 100 - 100)
        assert second.find("ABC").opening_balance == pytest.approx(abc_closing)
        assert second.find("XYZ").opening_balance == pytest.approx(-20.0)
        assert second.find("XYZ").closing_balance == pytest.approx(-45.0)

    def test_new_teacher_keeps_opening_balance(self, raw):
        next_raw = copy.deepcopy(raw)
        next_raw["teachers"].append({"code": "NEW"})
        next_raw["employments"].append({"teacher": "NEW", "payment1": 10, "payment2": 10, "opening_balance": 3})

        _, second = roll_balances([parse_school_year(raw), parse_school_year(next_raw)])

        assert second.find("NEW").opening_balance == 3

    def test_input_employments_are_not_changed(self, raw):
        first = parse_school_year(raw)
        second = parse_school_year(copy.deepcopy(raw))
        employment = second.get_employment("XYZ")

        _, rolled = roll_balances([first, second])

        assert rolled.find("XYZ").opening_balance == pytest.approx(-20.0)
        assert employment.opening_balance == 5
        assert second.get_employment("XYZ") is employment
