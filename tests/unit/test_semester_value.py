"""Tests for Semester and SemesterValue."""

import pytest

from pensumcalc.sdk.data import Semester, SemesterValue


class TestSemester:

    def test_parse_id_known(self):
        assert Semester.parse_id(1) is Semester.FIRST
        assert Semester.parse_id("2") is Semester.SECOND

    def test_parse_id_unknown_returns_none(self):
        assert Semester.parse_id(3) is None
        assert Semester.parse_id("x") is None
        assert Semester.parse_id(None) is None

    def test_id(self):
        assert Semester.SECOND.id == 2


class TestSemesterValue:

    def test_add_touches_one_semester(self):
        value = SemesterValue()
        value.add(Semester.SECOND, 2.5)
        value.add(Semester.SECOND, 1.5)

        assert value.semester1 == 0.0
        assert value.semester2 == 4.0

    def test_add_value_is_elementwise(self):
        value = SemesterValue(1, 2)
        value.add_value(SemesterValue(10, 20))

        assert value == SemesterValue(11, 22)

    def test_map_returns_new_instance(self):
        value = SemesterValue(1, 2)
        mapped = value.map(lambda s, v: v * s.id)

        assert mapped == SemesterValue(1, 4)
        assert value == SemesterValue(1, 2)

    def test_copy_is_independent(self):
        value = SemesterValue(1, 2)
        copy = value.copy()
        copy.add(Semester.FIRST, 5)

        assert value.semester1 == 1.0

    def test_mean_and_total(self):
        value = SemesterValue(40, 60)
        assert value.mean() == 50.0
        assert value.total() == 100.0

    def test_get_rejects_non_semester(self):
        with pytest.raises(ValueError):
            SemesterValue().get(1)
