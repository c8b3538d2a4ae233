"""Pensum Calc - Teacher workload and payroll calculation."""

__version__ = "0.1.0"
