"""
Break-even and runway from a monthly EBITDA series.

Break-even: the first month where the running cash balance (starting cash plus
every EBITDA so far) is positive AND that month's own EBITDA is positive. A
month that is only solvent thanks to earlier surplus while still burning does
not count.

Runway: starting cash divided by the average monthly burn over the first year,
or the full horizon when the first year doesn't burn on average.
"""

from __future__ import annotations

from typing import Optional, Sequence

import numpy as np

from core.utils import excel_round


def find_break_even_month(ebitda: Sequence[float], starting_cash: float) -> Optional[int]:
    """1-indexed break-even month, or None if it never happens within the horizon."""
    balance = float(starting_cash)
    for i, e in enumerate(ebitda):
        e = float(e)
        balance += e
        if balance > 0 and e > 0:
            return i + 1
    return None


def estimate_runway_months(
    ebitda: Sequence[float],
    starting_cash: float,
    *,
    window_months: int = 12,
) -> int:
    """
    Months of runway, rounded half away from zero and capped at the horizon.
    """
    values = np.asarray(ebitda, dtype=float)
    horizon = len(values)
    if horizon == 0:
        return 0

    avg = float(np.mean(values[:window_months]))
    if avg < 0:
        runway = float(starting_cash) / abs(avg)
    else:
        runway = float(horizon)

    runway = min(runway, float(horizon))
    return int(excel_round(runway, 0))
