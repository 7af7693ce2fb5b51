"""
CalculationDrivers — the flat value object every projection is computed from.

Rates are plain percentages (5 means 5%), never pre-divided. Per-year drivers
hold exactly one entry per modeled year.
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Any, Dict, Mapping, Tuple

from core.schema import ALL_DRIVERS, PER_YEAR_DRIVERS


@dataclass(frozen=True)
class CalculationDrivers:
    # Revenue
    subscription_revenue: Tuple[float, ...] = (480_000.0, 1_200_000.0, 2_400_000.0)
    advertising_revenue: Tuple[float, ...] = (180_000.0, 720_000.0, 1_800_000.0)
    fill_rate: float = 65.0                 # % of ad inventory filled
    cpm: float = 22.0                       # USD per thousand impressions
    impressions: Tuple[float, ...] = (12_000_000.0, 36_000_000.0, 90_000_000.0)
    growth_rate: float = 4.0                # % per month
    churn_rate: float = 5.0                 # % per month
    arpu: float = 29.0                      # USD per account per month
    pricing_sensitivity: float = 0.0        # % price adjustment
    adoption_rate: float = 5.0              # % of accounts on premium

    # Cost
    hosting_cost_per_account: Tuple[float, ...] = (12.0, 12.0, 12.0)  # USD per account per year
    bandwidth_multiplier: float = 1.0
    inference_cost_per_unit: float = 0.5    # USD per usage unit
    usage_multiplier: float = 1.0           # usage units per active account per month
    payment_processing_fee: float = 2.9     # % of revenue

    # Operating
    base_opex: Tuple[float, ...] = (600_000.0, 900_000.0, 1_200_000.0)
    productivity_multiplier: float = 1.0
    paid_cac: float = 45.0
    organic_cac: float = 15.0
    organic_mix: float = 60.0               # % of acquisitions via organic channels
    marketing_budget: float = 15_000.0      # USD per month
    efficiency_multiplier: float = 1.0

    # Capital
    starting_cash: float = 500_000.0

    def to_dict(self) -> Dict[str, Any]:
        """JSON-safe snapshot (per-year tuples become lists)."""
        out: Dict[str, Any] = {}
        for f in fields(self):
            v = getattr(self, f.name)
            out[f.name] = [float(x) for x in v] if f.name in PER_YEAR_DRIVERS else float(v)
        return out

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "CalculationDrivers":
        unknown = [k for k in data if k not in ALL_DRIVERS]
        if unknown:
            raise ValueError(f"Unknown driver names: {unknown}")
        kwargs = {k: _coerce(k, v) for k, v in data.items()}
        return cls(**kwargs)

    @property
    def n_years(self) -> int:
        return len(self.subscription_revenue)


def _coerce(name: str, value: Any):
    if name in PER_YEAR_DRIVERS:
        return tuple(float(x) for x in value)
    return float(value)


DEFAULT_DRIVERS = CalculationDrivers()
