"""Pensum Calc SDK - Core functionality for workload and payroll calculation."""

from .config import (
    get_config_dir,
    get_settings_path,
    load_settings,
    update_setting,
    effective_settings,
    get_setting,
    validate_setting,
    get_school_year_dir,
    get_default_output_format,
    resolve_school_year_path,
    SchoolYearNotFoundError,
    SettingsError,
    OUTPUT_FORMATS,
    SETTING_KEYS,
)

from .data import (
    Semester,
    SemesterValue,
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

from .calculation import (
    Calculation,
    CalculationError,
    ConfigurationError,
    create_calculation,
    calculate_workload,
    BalanceLine,
    Workload,
    Workloads,
)

from .school_year import (
    SchoolYearData,
    SchoolYearFileError,
    load_school_year,
    parse_school_year,
)

from .export import (
    payroll_to_csv_string,
    write_payroll_csv,
    roll_balances,
)

__all__ = [
    # Config
    "get_config_dir",
    "get_settings_path",
    "load_settings",
    "update_setting",
    "effective_settings",
    "get_setting",
    "validate_setting",
    "get_school_year_dir",
    "get_default_output_format",
    "resolve_school_year_path",
    "SchoolYearNotFoundError",
    "SettingsError",
    "OUTPUT_FORMATS",
    "SETTING_KEYS",
    # Domain objects
    "Semester",
    "SemesterValue",
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
    # Calculation
    "Calculation",
    "CalculationError",
    "ConfigurationError",
    "create_calculation",
    "calculate_workload",
    "BalanceLine",
    "Workload",
    "Workloads",
    # School-year files
    "SchoolYearData",
    "SchoolYearFileError",
    "load_school_year",
    "parse_school_year",
    # Export
    "payroll_to_csv_string",
    "write_payroll_csv",
    "roll_balances",
]
