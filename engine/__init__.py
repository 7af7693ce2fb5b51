"""
Projection engine — deterministic monthly P&L math + result assembly.
"""

from .projector import MonthlyProjection, project_monthly
from .result import ProjectionResult
from .runner import run_forecast, compare_scenarios

__all__ = [
    "MonthlyProjection",
    "project_monthly",
    "ProjectionResult",
    "run_forecast",
    "compare_scenarios",
]
