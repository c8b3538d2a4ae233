"""Rich renderers for CLI output."""

from .workload_renderer import render_balances, render_workload

__all__ = ["render_balances", "render_workload"]
