"""
Unit economics — blended CAC, LTV, LTV/CAC and payback.

Guards: a zero churn rate falls back to a fixed lifetime (ARPU x 24 months by
default); a zero CAC reports 0 for both the ratio and the payback so no
Infinity/NaN leaks into results.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Dict

from core.utils import safe_div


@dataclass(frozen=True)
class UnitEconomics:
    blended_cac: float
    ltv: float
    ltv_cac_ratio: float
    payback_period: float  # months of ARPU needed to recover CAC

    def to_dict(self) -> Dict[str, float]:
        return asdict(self)


def blended_cac(paid_cac: float, organic_cac: float, organic_mix: float) -> float:
    """Weighted average of paid and organic CAC; organic_mix is a percentage."""
    w = organic_mix / 100.0
    return float(paid_cac) * (1.0 - w) + float(organic_cac) * w


def lifetime_value(arpu: float, churn_rate: float, *, fallback_months: int = 24) -> float:
    if churn_rate > 0:
        return float(arpu) / (churn_rate / 100.0)
    return float(arpu) * fallback_months


def compute_unit_economics(
    *,
    churn_rate: float,
    arpu: float,
    paid_cac: float,
    organic_cac: float,
    organic_mix: float,
    ltv_fallback_months: int = 24,
) -> UnitEconomics:
    cac = blended_cac(paid_cac, organic_cac, organic_mix)
    ltv = lifetime_value(arpu, churn_rate, fallback_months=ltv_fallback_months)

    if cac == 0:
        ratio = 0.0
        payback = 0.0
    else:
        ratio = safe_div(ltv, cac)
        payback = safe_div(cac, arpu)

    return UnitEconomics(
        blended_cac=cac,
        ltv=ltv,
        ltv_cac_ratio=ratio,
        payback_period=payback,
    )
