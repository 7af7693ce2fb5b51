"""
Capital plan — month-by-month cash position with dated capital infusions.

Answers the questions a finance lead asks after looking at the P&L:
  Q1: "How long does the cash last above our floor?"  → runway_months
  Q2: "When do we need to start raising?"            → next_raise_month
  Q3: "Do we make it through each plan year?"        → survives_year
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

import numpy as np
import pandas as pd


@dataclass(frozen=True)
class CapitalInfusion:
    month: int          # 1-indexed month the cash lands
    amount: float
    kind: str = "equity"  # seed | safe | convertible | equity | grant
    label: str = ""

    def __post_init__(self):
        if self.month < 1:
            raise ValueError(f"Infusion month is 1-indexed (got {self.month})")
        if not np.isfinite(self.amount) or self.amount < 0:
            raise ValueError(f"Infusion amount must be a non-negative number (got {self.amount})")


@dataclass
class CapitalPlan:
    """Structured cash-planning output."""
    cash_balance_by_month: Tuple[float, ...]
    monthly_burn: Tuple[float, ...]
    runway_months: int
    next_raise_month: Optional[int]   # 1-indexed; None when cash lasts the horizon
    survives_year: Tuple[bool, ...]
    minimum_cash_target: float
    flags: List[str] = field(default_factory=list)

    def to_dataframe(self) -> pd.DataFrame:
        n = len(self.cash_balance_by_month)
        return pd.DataFrame({
            "month": range(1, n + 1),
            "cash_balance": self.cash_balance_by_month,
            "burn": self.monthly_burn,
            "above_target": [b > self.minimum_cash_target for b in self.cash_balance_by_month],
        })


def plan_capital(
    ebitda: Sequence[float],
    starting_cash: float,
    *,
    infusions: Sequence[CapitalInfusion] = (),
    minimum_cash_target: float = 0.0,
    raise_buffer_months: int = 6,
) -> CapitalPlan:
    """
    Roll cash forward: each month adds its infusions, then its EBITDA.

    Runway counts consecutive months, from the first, that end above the
    minimum cash target. The raise month sits `raise_buffer_months` before
    the cash runs out.
    """
    values = np.asarray(ebitda, dtype=float)
    horizon = len(values)

    inflows = np.zeros(horizon, dtype=float)
    for inf in infusions:
        if inf.month <= horizon:
            inflows[inf.month - 1] += inf.amount

    balances = float(starting_cash) + np.cumsum(inflows + values)
    burn = np.maximum(-values, 0.0)

    runway = 0
    for b in balances:
        if b > minimum_cash_target:
            runway += 1
        else:
            break

    next_raise: Optional[int] = None
    if runway < horizon:
        next_raise = max(0, runway - raise_buffer_months) + 1

    survives = tuple(
        bool(balances[min(12 * y + 11, horizon - 1)] > minimum_cash_target)
        for y in range((horizon + 11) // 12)
    )

    flags = []
    if runway < 12:
        flags.append("SHORT_RUNWAY: cash falls below target within 12 months")
    if next_raise is not None:
        flags.append(f"RAISE_REQUIRED: start raising by month {next_raise}")
    if horizon and float(balances.min()) < 0:
        flags.append("NEGATIVE_CASH: balance goes below zero inside the horizon")

    return CapitalPlan(
        cash_balance_by_month=tuple(float(b) for b in balances),
        monthly_burn=tuple(float(b) for b in burn),
        runway_months=runway,
        next_raise_month=next_raise,
        survives_year=survives,
        minimum_cash_target=float(minimum_cash_target),
        flags=flags,
    )
