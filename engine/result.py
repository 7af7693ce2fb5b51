"""
ProjectionResult — the engine's sole, immutable output.

Numbers are plain floats in currency units; rounding for display is the
caller's job.
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Any, Dict, Mapping, Optional, Tuple

import pandas as pd

from core.utils import month_labels

_SERIES_FIELDS = (
    "monthly_revenue",
    "monthly_cogs",
    "monthly_opex",
    "monthly_gross_profit",
    "monthly_ebitda",
    "cumulative_ebitda",
    "yearly_revenue",
    "yearly_cogs",
    "yearly_opex",
    "yearly_gross_profit",
    "yearly_ebitda",
    "yearly_gross_margin_pct",
    "yearly_ebitda_margin_pct",
)


@dataclass(frozen=True)
class ProjectionResult:
    # Monthly (length M)
    monthly_revenue: Tuple[float, ...]
    monthly_cogs: Tuple[float, ...]
    monthly_opex: Tuple[float, ...]
    monthly_gross_profit: Tuple[float, ...]
    monthly_ebitda: Tuple[float, ...]
    cumulative_ebitda: Tuple[float, ...]

    # Yearly (length Y = M / 12)
    yearly_revenue: Tuple[float, ...]
    yearly_cogs: Tuple[float, ...]
    yearly_opex: Tuple[float, ...]
    yearly_gross_profit: Tuple[float, ...]
    yearly_ebitda: Tuple[float, ...]
    yearly_gross_margin_pct: Tuple[float, ...]
    yearly_ebitda_margin_pct: Tuple[float, ...]

    # Derived metrics
    break_even_month: Optional[int]
    runway_months: int
    ltv: float
    blended_cac: float
    ltv_cac_ratio: float
    payback_period: float
    premium_adoption_rate: float

    @property
    def n_months(self) -> int:
        return len(self.monthly_revenue)

    @property
    def n_years(self) -> int:
        return len(self.yearly_revenue)

    def to_dict(self) -> Dict[str, Any]:
        """JSON-safe payload (tuples become lists)."""
        out: Dict[str, Any] = {}
        for f in fields(self):
            v = getattr(self, f.name)
            out[f.name] = list(v) if f.name in _SERIES_FIELDS else v
        return out

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ProjectionResult":
        kwargs: Dict[str, Any] = {}
        for f in fields(cls):
            if f.name not in data:
                raise ValueError(f"Projection payload missing '{f.name}'")
            v = data[f.name]
            if f.name in _SERIES_FIELDS:
                kwargs[f.name] = tuple(float(x) for x in v)
            elif f.name == "break_even_month":
                kwargs[f.name] = None if v is None else int(v)
            elif f.name == "runway_months":
                kwargs[f.name] = int(v)
            else:
                kwargs[f.name] = float(v)
        return cls(**kwargs)

    def monthly_frame(self, start_year: int = 2025) -> pd.DataFrame:
        return pd.DataFrame({
            "month": range(1, self.n_months + 1),
            "period": month_labels(start_year, self.n_months),
            "revenue": self.monthly_revenue,
            "cogs": self.monthly_cogs,
            "opex": self.monthly_opex,
            "gross_profit": self.monthly_gross_profit,
            "ebitda": self.monthly_ebitda,
            "cumulative_ebitda": self.cumulative_ebitda,
        })

    def yearly_frame(self, start_year: int = 2025) -> pd.DataFrame:
        return pd.DataFrame({
            "year": [start_year + i for i in range(self.n_years)],
            "revenue": self.yearly_revenue,
            "cogs": self.yearly_cogs,
            "opex": self.yearly_opex,
            "gross_profit": self.yearly_gross_profit,
            "ebitda": self.yearly_ebitda,
            "gross_margin_pct": self.yearly_gross_margin_pct,
            "ebitda_margin_pct": self.yearly_ebitda_margin_pct,
        })

    def metrics(self) -> Dict[str, Any]:
        return {
            "break_even_month": self.break_even_month,
            "runway_months": self.runway_months,
            "ltv": self.ltv,
            "blended_cac": self.blended_cac,
            "ltv_cac_ratio": self.ltv_cac_ratio,
            "payback_period": self.payback_period,
            "premium_adoption_rate": self.premium_adoption_rate,
        }
