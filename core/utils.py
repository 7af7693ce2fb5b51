from __future__ import annotations

from datetime import date
from typing import List, Sequence

import numpy as np
from dateutil.relativedelta import relativedelta


def safe_div(numerator: float, denominator: float, default: float = 0.0) -> float:
    """Divide, returning `default` when the denominator is zero or non-finite."""
    if denominator == 0 or not np.isfinite(denominator):
        return float(default)
    return float(numerator) / float(denominator)


def excel_round(x, decimals: int = 2):
    """Excel ROUND: half away from zero (vectorized)."""
    m = 10 ** decimals
    x = np.asarray(x, dtype=float)
    return np.sign(x) * (np.floor(np.abs(x) * m + 0.5) / m)


def year_index(n_months: int) -> np.ndarray:
    """Year bucket (0-based) for each month of the horizon."""
    return np.arange(n_months, dtype=int) // 12


def rollup_yearly(monthly: Sequence[float]) -> List[float]:
    """Sum consecutive 12-month blocks. Uses a plain running sum per block."""
    values = [float(v) for v in monthly]
    out = []
    for start in range(0, len(values), 12):
        total = 0.0
        for v in values[start:start + 12]:
            total += v
        out.append(total)
    return out


def month_labels(start_year: int, n_months: int) -> List[str]:
    """'YYYY-MM' labels for each projection month, starting in January of start_year."""
    base = date(start_year, 1, 1)
    return [(base + relativedelta(months=k)).strftime("%Y-%m") for k in range(n_months)]
