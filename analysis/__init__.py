"""
Analysis — post-processing of the monthly series: break-even, runway,
unit economics and capital planning.
"""

from .breakeven import find_break_even_month, estimate_runway_months
from .unit_economics import UnitEconomics, compute_unit_economics, blended_cac, lifetime_value
from .capital import CapitalInfusion, CapitalPlan, plan_capital

__all__ = [
    "find_break_even_month",
    "estimate_runway_months",
    "UnitEconomics",
    "compute_unit_economics",
    "blended_cac",
    "lifetime_value",
    "CapitalInfusion",
    "CapitalPlan",
    "plan_capital",
]
