"""calculation - Payroll calculation engine.

Scope:
- Aggregate a teacher's courses, pool entries, theses and postings
- Reconcile the computed workload against the payment target and book the
  saldo across payroll types (allocation.py)
- Mode-specific behaviour per calculation regime (strategies.py)
- Final report with summary and balance (workload.py)

Constraints:
- Pure calculation - no I/O, no persistence
- One Calculation per employment; finalized exactly once
- Output is deterministic: payroll types are always iterated in an
  explicit sort order

Modules:
- rounding: half-away-from-zero rounding of lessons and percent
- payroll: PayrollMap (accumulation) and Payroll (result)
- aggregates: Courses, Pool, Theses, Postings, Summary
- allocation: the saldo carry fold
- strategies: Percent, PercentAgeReliefIncluded, LessonsAgeReliefIncluded, Historic
- calculation: Calculation skeleton and factory
- workload: Workload and Workloads

Usage:
    from pensumcalc.sdk.calculation import calculate_workload

    workload = calculate_workload(employment, courses=courses, pool_entries=pool)
    for line in workload.balance():
        print(line.description, line.percent)
"""

from .rounding import round_half_away, round_lessons, round_percent

from .payroll import Payroll, PayrollItem, PayrollMap

from .aggregates import (
    Courses,
    Pool,
    Theses,
    Postings,
    Summary,
)

from .allocation import absorb, allocate_step, allocate_saldo

from .strategies import (
    CalculationStrategy,
    PercentStrategy,
    PercentAgeReliefIncludedStrategy,
    LessonsAgeReliefIncludedStrategy,
    HistoricStrategy,
)

from .calculation import (
    Calculation,
    CalculationError,
    ConfigurationError,
    create_calculation,
    create_strategy,
    calculate_workload,
)

from .workload import BalanceLine, Workload, Workloads

__all__ = [
    # Rounding
    "round_half_away",
    "round_lessons",
    "round_percent",
    # Payroll
    "Payroll",
    "PayrollItem",
    "PayrollMap",
    # Aggregates
    "Courses",
    "Pool",
    "Theses",
    "Postings",
    "Summary",
    # Allocation
    "absorb",
    "allocate_step",
    "allocate_saldo",
    # Strategies
    "CalculationStrategy",
    "PercentStrategy",
    "PercentAgeReliefIncludedStrategy",
    "LessonsAgeReliefIncludedStrategy",
    "HistoricStrategy",
    # Calculation
    "Calculation",
    "CalculationError",
    "ConfigurationError",
    "create_calculation",
    "create_strategy",
    "calculate_workload",
    # Workload
    "BalanceLine",
    "Workload",
    "Workloads",
]
