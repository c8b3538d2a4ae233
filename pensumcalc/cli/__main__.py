"""Pensum Calc CLI - Command-line interface for workload and payroll calculation."""

import json
import logging
import os
from pathlib import Path

import click
from rich.console import Console

from pensumcalc import __version__
from pensumcalc.sdk import (
    CalculationError,
    SchoolYearFileError,
    SchoolYearNotFoundError,
    SettingsError,
    Semester,
    get_default_output_format,
    load_school_year,
    payroll_to_csv_string,
    resolve_school_year_path,
    roll_balances,
    write_payroll_csv,
)

from .renderers import render_balances, render_workload
from .settings_commands import settings as settings_group


def _configure_logging():
    """Configure root logging from the LOG_LEVEL environment variable."""
    log_level = os.environ.get("LOG_LEVEL", "INFO").upper()
    logging.basicConfig(
        level=getattr(logging, log_level, logging.INFO),
        format="%(asctime)s.%(msecs)03d %(levelname)s: %(message)s",
        datefmt="%H:%M:%S"
    )


@click.group()
@click.version_option(version=__version__, prog_name="pensum-calc")
def cli():
    """Pensum Calc - Teacher workload and payroll calculation.

    Calculates the yearly workload of every teacher of a school year,
    books the difference to the contractual payment across payroll types
    and keeps the running balance.

    School years are given as a YAML file path, or as a code looked up in
    the school-year directory:

    \b
    1. PENSUM_CALC_CONFIG_PATH environment variable (config directory)
    2. settings.json 'school_year_dir' key (set via 'settings set school_year_dir')
    3. ~/.local/share/pensum-calc/school-years/ (XDG default)
    """
    _configure_logging()


cli.add_command(settings_group)


def _load(school_year: str):
    """Resolve and load a school-year argument, mapping SDK errors to CLI errors."""
    try:
        return load_school_year(resolve_school_year_path(school_year))
    except (SchoolYearNotFoundError, SchoolYearFileError, SettingsError) as e:
        raise click.ClickException(str(e))


def _output_format(output_format):
    """Explicit --format, else the default_output_format setting."""
    if output_format:
        return output_format
    try:
        return get_default_output_format()
    except SettingsError as e:
        raise click.ClickException(str(e))


@cli.command("workload")
@click.argument("school_year")
@click.option("--teacher", "teacher_code", help="Only show the workload of this teacher code.")
@click.option("--format", "output_format", type=click.Choice(["table", "json"]), default=None,
              help="Output format (default: settings default_output_format, else table)")
def workload_cmd(school_year, teacher_code, output_format):
    """Calculate and show workloads of a school year.

    SCHOOL_YEAR is a school-year YAML file or a code in the school-year
    directory.

    \b
    Examples:
      pensum-calc workload 2024-25.yaml
      pensum-calc workload 2024-25 --teacher ABC --format json
    """
    data = _load(school_year)
    output_format = _output_format(output_format)

    try:
        workloads = data.calculate_workloads()
    except (CalculationError, ValueError) as e:
        raise click.ClickException(str(e))

    selected = list(workloads)
    if teacher_code:
        workload = workloads.find(teacher_code)
        if workload is None:
            raise click.ClickException(f"No employment for teacher '{teacher_code}' in {data.school_year.code}")
        selected = [workload]

    if output_format == "json":
        result = [workload.to_dict() for workload in selected]
        click.echo(json.dumps(result[0] if teacher_code else result, indent=2))
        return

    console = Console()
    if not selected:
        click.echo(f"No employments in school year {data.school_year.code}.")
    for workload in selected:
        render_workload(console, workload.to_dict())


@cli.command("payroll")
@click.argument("school_year")
@click.option("--semester", type=click.Choice(["1", "2"]), required=True, help="Semester to export.")
@click.option("--output", "-o", "output_path", type=click.Path(dir_okay=False),
              help="Write CSV to this file instead of stdout.")
def payroll_cmd(school_year, semester, output_path):
    """Export the payroll of one semester as CSV.

    One row per teacher with lessons and percent per payroll type.

    \b
    Examples:
      pensum-calc payroll 2024-25 --semester 1
      pensum-calc payroll 2024-25 --semester 2 -o payroll-2.csv
    """
    data = _load(school_year)
    target = Semester.parse_id(int(semester))

    try:
        workloads = data.calculate_workloads()
    except (CalculationError, ValueError) as e:
        raise click.ClickException(str(e))

    if output_path:
        path = write_payroll_csv(workloads, data.payroll_types, target, Path(output_path))
        click.echo(f"Wrote {path}", err=True)
    else:
        click.echo(payroll_to_csv_string(workloads, data.payroll_types, target), nl=False)


@cli.command("balances")
@click.argument("school_years", nargs=-1, required=True)
@click.option("--format", "output_format", type=click.Choice(["table", "json"]), default=None,
              help="Output format (default: settings default_output_format, else table)")
def balances_cmd(school_years, output_format):
    """Roll closing balances forward through consecutive school years.

    SCHOOL_YEARS are given oldest first. Each teacher's closing balance
    becomes the opening balance of the following year.

    \b
    Example:
      pensum-calc balances 2022-23 2023-24 2024-25
    """
    loaded = [_load(school_year) for school_year in school_years]
    output_format = _output_format(output_format)

    try:
        rolled = roll_balances(loaded)
    except (CalculationError, ValueError) as e:
        raise click.ClickException(str(e))

    result = [
        {
            "school_year": workloads.school_year.code,
            "teachers": [
                {
                    "code": workload.teacher.code,
                    "opening_balance": workload.opening_balance,
                    "closing_balance": workload.closing_balance,
                }
                for workload in workloads
            ],
        }
        for workloads in rolled
    ]

    if output_format == "json":
        click.echo(json.dumps(result, indent=2))
    else:
        render_balances(Console(), result)


def main():
    """Entry point for the CLI."""
    cli()


if __name__ == "__main__":
    main()
