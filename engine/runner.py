"""
Projection runner — validates drivers, applies the scenario to the inputs,
runs the monthly projector and assembles the immutable ProjectionResult.

Two entry points:
  1. run_forecast:          one driver set, one scenario
  2. compare_scenarios:     one driver set across a scenario table (summary frame)

Everything here is synchronous and pure: identical (drivers, scenario, config)
always produce an identical ProjectionResult.
"""

from __future__ import annotations

from typing import Iterable, Optional

import pandas as pd

from analysis.breakeven import estimate_runway_months, find_break_even_month
from analysis.unit_economics import compute_unit_economics
from core.config import ForecastConfig
from core.logging import get_logger
from core.utils import rollup_yearly, safe_div
from drivers.model import CalculationDrivers
from drivers.validators import require_valid_drivers
from scenarios.apply import apply_scenario
from scenarios.config import ScenarioConfig, neutral_scenario

from .projector import project_monthly
from .result import ProjectionResult

logger = get_logger(__name__)


def _margins(numerators, denominators):
    return tuple(safe_div(n, d) * 100.0 for n, d in zip(numerators, denominators))


def run_forecast(
    drivers: CalculationDrivers,
    scenario: Optional[ScenarioConfig] = None,
    config: Optional[ForecastConfig] = None,
) -> ProjectionResult:
    """
    Run one projection.

    Parameters
    ----------
    drivers : CalculationDrivers
        Fully resolved drivers (see drivers.resolver)
    scenario : ScenarioConfig, optional
        Multipliers to apply to the inputs; a neutral scenario when omitted
    config : ForecastConfig, optional
        Horizon and normalization constants

    Raises
    ------
    DriverValidationError
        When the drivers (before or after scenario scaling) are unusable.
    """
    cfg = config or ForecastConfig()
    scenario = scenario or neutral_scenario()

    require_valid_drivers(drivers, cfg)
    scaled = apply_scenario(drivers, scenario)
    # multipliers can push a valid input out of range (e.g. churn above 100%)
    require_valid_drivers(scaled.drivers, cfg)
    d = scaled.drivers

    monthly = project_monthly(
        d,
        cfg,
        platform_revshare_adjustment=scaled.platform_revshare_adjustment,
    )

    revenue = tuple(float(v) for v in monthly.revenue)
    cogs = tuple(float(v) for v in monthly.cogs)
    opex = tuple(float(v) for v in monthly.opex)
    gross_profit = tuple(float(v) for v in monthly.gross_profit)
    ebitda = tuple(float(v) for v in monthly.ebitda)
    cumulative = tuple(float(v) for v in monthly.cumulative_ebitda)

    y_revenue = tuple(rollup_yearly(revenue))
    y_gross_profit = tuple(rollup_yearly(gross_profit))
    y_ebitda = tuple(rollup_yearly(ebitda))

    break_even = find_break_even_month(ebitda, d.starting_cash)
    runway = estimate_runway_months(ebitda, d.starting_cash, window_months=cfg.runway_window_months)
    ue = compute_unit_economics(
        churn_rate=d.churn_rate,
        arpu=d.arpu,
        paid_cac=d.paid_cac,
        organic_cac=d.organic_cac,
        organic_mix=d.organic_mix,
        ltv_fallback_months=cfg.ltv_fallback_months,
    )

    logger.debug(
        "Projected scenario=%s months=%d break_even=%s runway=%d",
        scenario.scenario_key, cfg.horizon_months, break_even, runway,
    )

    return ProjectionResult(
        monthly_revenue=revenue,
        monthly_cogs=cogs,
        monthly_opex=opex,
        monthly_gross_profit=gross_profit,
        monthly_ebitda=ebitda,
        cumulative_ebitda=cumulative,
        yearly_revenue=y_revenue,
        yearly_cogs=tuple(rollup_yearly(cogs)),
        yearly_opex=tuple(rollup_yearly(opex)),
        yearly_gross_profit=y_gross_profit,
        yearly_ebitda=y_ebitda,
        yearly_gross_margin_pct=_margins(y_gross_profit, y_revenue),
        yearly_ebitda_margin_pct=_margins(y_ebitda, y_revenue),
        break_even_month=break_even,
        runway_months=runway,
        ltv=ue.ltv,
        blended_cac=ue.blended_cac,
        ltv_cac_ratio=ue.ltv_cac_ratio,
        payback_period=ue.payback_period,
        premium_adoption_rate=float(d.adoption_rate),
    )


def compare_scenarios(
    drivers: CalculationDrivers,
    scenarios: Iterable[ScenarioConfig],
    config: Optional[ForecastConfig] = None,
) -> pd.DataFrame:
    """One summary row per scenario: final-year revenue/EBITDA, break-even, runway, LTV/CAC."""
    cfg = config or ForecastConfig()
    rows = []
    for s in scenarios:
        r = run_forecast(drivers, s, cfg)
        rows.append({
            "scenario_key": s.scenario_key,
            "label": s.label,
            "total_revenue": sum(r.yearly_revenue),
            "final_year_revenue": r.yearly_revenue[-1],
            "final_year_ebitda": r.yearly_ebitda[-1],
            "final_year_ebitda_margin_pct": r.yearly_ebitda_margin_pct[-1],
            "break_even_month": r.break_even_month,
            "runway_months": r.runway_months,
            "ltv_cac_ratio": r.ltv_cac_ratio,
        })
    return pd.DataFrame(rows)
