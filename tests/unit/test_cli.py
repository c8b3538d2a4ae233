"""Tests for the pensum-calc CLI commands."""

import csv
import io
import json
import logging

import pytest
from click.testing import CliRunner

from pensumcalc.cli.__main__ import cli


SCHOOL_YEAR_YAML = """
school_year:
  code: "{code}"
  weeks: 38
  calculation_mode: P
  semester1_start: 2024-08-19
  semester2_start: 2025-02-03
payroll_types:
  - code: GYM
    order: 1
    lesson_based: true
    weekly_lessons: 28
teachers:
  - code: ABC
    first_name: Anna
    last_name: Beispiel
    employee_number: "1001"
employments:
  - teacher: ABC
    payment1: 100
    payment2: 100
courses:
  - subject: Mathematics
    payroll_type: GYM
    lessons1: 20
    lessons2: 20
    teachers: [ABC]
"""


# =============================================================================
# FIXTURES
# =============================================================================


@pytest.fixture
def isolated_env(tmp_path, monkeypatch):
    """Isolated config dir plus a school-year directory with two years."""
    config_dir = tmp_path / "config"
    school_year_dir = tmp_path / "years"
    config_dir.mkdir()
    school_year_dir.mkdir()

    monkeypatch.setenv("PENSUM_CALC_CONFIG_PATH", str(config_dir))
    (config_dir / "settings.json").write_text(json.dumps({"school_year_dir": str(school_year_dir)}))

    for code in ("2024-25", "2025-26"):
        (school_year_dir / f"{code}.yaml").write_text(SCHOOL_YEAR_YAML.format(code=code))

    return {"config_dir": config_dir, "school_year_dir": school_year_dir}


class TestWorkloadCommand:

    def test_json_for_one_teacher(self, isolated_env):
        runner = CliRunner()
        result = runner.invoke(cli, ["workload", "2024-25", "--teacher", "ABC", "--format", "json"])

        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert data["teacher"]["code"] == "ABC"
        assert data["payroll"]["items"][0]["percent1"] == 100.0
        assert data["payroll"]["items"][0]["lessons1"] == 28.0

    def test_json_default_from_settings(self, isolated_env):
        settings_file = isolated_env["config_dir"] / "settings.json"
        settings = json.loads(settings_file.read_text())
        settings["default_output_format"] = "json"
        settings_file.write_text(json.dumps(settings))

        result = CliRunner().invoke(cli, ["workload", "2024-25"])

        assert result.exit_code == 0, result.output
        assert [w["teacher"]["code"] for w in json.loads(result.output)] == ["ABC"]

    def test_table_output(self, isolated_env):
        result = CliRunner().invoke(cli, ["workload", "2024-25"])

        assert result.exit_code == 0, result.output
        assert "Payroll" in result.output
        assert "Closing balance" in result.output

    def test_file_path_argument(self, isolated_env):
        path = isolated_env["school_year_dir"] / "2024-25.yaml"
        result = CliRunner().invoke(cli, ["workload", str(path), "--format", "json"])

        assert result.exit_code == 0, result.output

    def test_unknown_teacher(self, isolated_env):
        result = CliRunner().invoke(cli, ["workload", "2024-25", "--teacher", "NOPE"])

        assert result.exit_code != 0
        assert "No employment for teacher 'NOPE'" in result.output

    def test_unknown_school_year(self, isolated_env):
        result = CliRunner().invoke(cli, ["workload", "1999-00"])

        assert result.exit_code != 0
        assert "not found" in result.output

    def test_invalid_file(self, isolated_env):
        (isolated_env["school_year_dir"] / "bad.yaml").write_text("school_year:\n  code: x\n")
        result = CliRunner().invoke(cli, ["workload", "bad"])

        assert result.exit_code != 0
        assert "Error" in result.output


class TestPayrollCommand:

    def test_csv_to_stdout(self, isolated_env):
        result = CliRunner().invoke(cli, ["payroll", "2024-25", "--semester", "1"])

        assert result.exit_code == 0, result.output
        rows = list(csv.reader(io.StringIO(result.output)))
        assert rows[0][-2:] == ["GYM L", "GYM %"]
        assert rows[1][1] == "ABC"
        assert rows[1][-2:] == ["28.0", "100.0"]

    def test_csv_to_file(self, isolated_env, tmp_path):
        output = tmp_path / "payroll.csv"
        result = CliRunner().invoke(cli, ["payroll", "2024-25", "--semester", "2", "-o", str(output)])

        assert result.exit_code == 0, result.output
        assert output.read_text().startswith("Employee number,Code")

    def test_semester_is_required(self, isolated_env):
        result = CliRunner().invoke(cli, ["payroll", "2024-25"])

        assert result.exit_code != 0


class TestBalancesCommand:

    def test_rolls_forward(self, isolated_env):
        result = CliRunner().invoke(cli, ["balances", "2024-25", "2025-26", "--format", "json"])

        assert result.exit_code == 0, result.output
        first, second = json.loads(result.output)
        closing = first["teachers"][0]["closing_balance"]
        assert first["school_year"] == "2024-25"
        assert second["teachers"][0]["opening_balance"] == pytest.approx(closing)
        assert second["teachers"][0]["closing_balance"] == pytest.approx(2 * closing)

    def test_table_output(self, isolated_env):
        result = CliRunner().invoke(cli, ["balances", "2024-25", "2025-26"])

        assert result.exit_code == 0, result.output
        assert "2025-26" in result.output


class TestSettingsCommands:

    def test_show(self, isolated_env):
        result = CliRunner().invoke(cli, ["settings", "show"])

        assert result.exit_code == 0, result.output
        assert f"school_year_dir: {isolated_env['school_year_dir']} (settings.json)" in result.output
        assert "default_output_format: table (default)" in result.output

    def test_set_school_year_dir(self, isolated_env, tmp_path):
        target = tmp_path / "elsewhere"
        target.mkdir()
        result = CliRunner().invoke(cli, ["settings", "set", "school_year_dir", str(target)])

        assert result.exit_code == 0, result.output
        settings = json.loads((isolated_env["config_dir"] / "settings.json").read_text())
        assert settings["school_year_dir"] == str(target.resolve())

    def test_missing_school_year_dir_is_rejected(self, isolated_env, tmp_path):
        target = tmp_path / "missing"
        result = CliRunner().invoke(cli, ["settings", "set", "school_year_dir", str(target)])

        assert result.exit_code != 0
        assert "not a directory" in result.output
        assert not target.exists()

    def test_set_default_output_format(self, isolated_env):
        result = CliRunner().invoke(cli, ["settings", "set", "default_output_format", "json"])
        assert result.exit_code == 0, result.output

        result = CliRunner().invoke(cli, ["workload", "2024-25"])
        assert json.loads(result.output)[0]["teacher"]["code"] == "ABC"

    def test_invalid_output_format_is_rejected(self, isolated_env):
        result = CliRunner().invoke(cli, ["settings", "set", "default_output_format", "xml"])

        assert result.exit_code != 0
        assert "Invalid default_output_format 'xml'" in result.output

    def test_unknown_key_is_rejected(self, isolated_env):
        result = CliRunner().invoke(cli, ["settings", "set", "data_dir", "/tmp"])

        assert result.exit_code != 0

    def test_unset_reverts_to_default(self, isolated_env, monkeypatch, tmp_path):
        monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))
        result = CliRunner().invoke(cli, ["settings", "unset", "school_year_dir"])

        assert result.exit_code == 0, result.output
        assert "(default)" in result.output
        assert json.loads((isolated_env["config_dir"] / "settings.json").read_text()) == {}

    def test_broken_settings_file(self, isolated_env):
        (isolated_env["config_dir"] / "settings.json").write_text("{not json")
        result = CliRunner().invoke(cli, ["settings", "show"])

        assert result.exit_code != 0
        assert "Invalid settings file" in result.output


class TestLogging:

    def test_log_level_from_environment(self, isolated_env, monkeypatch):
        calls = []
        monkeypatch.setattr(logging, "basicConfig", lambda **kwargs: calls.append(kwargs))
        monkeypatch.setenv("LOG_LEVEL", "debug")

        result = CliRunner().invoke(cli, ["settings", "show"])

        assert result.exit_code == 0, result.output
        assert calls[0]["level"] == logging.DEBUG
