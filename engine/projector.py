"""
Time-series projector — deterministic monthly P&L math.

For month m (0-based) in year y = m // 12:
  g = (1 + growth/100) ** m                 compounded growth
  r = (1 - churn/100) ** m                  compounded retention
  subscription = sub[y]/12 * g * r * (1 + pricing/100)
  advertising  = ad[y]/12 * (fill/fill_base) * (cpm/cpm_base)
                 * (impressions[y]/impressions_base[y]) * (1 + revshare_adj/100)
  revenue      = (subscription + advertising) * (1 + adoption/100 * premium_uplift)
  accounts     = sub[y]/12 * g * r / arpu
  cogs         = accounts * hosting[y]/12 * bandwidth
                 + accounts * usage * inference_cost
                 + revenue * payment_fee/100
  opex         = (base_opex[y]/12 / productivity + marketing_budget) / efficiency
  gross_profit = revenue - cogs
  ebitda       = gross_profit - opex
  cumulative   = running sum of ebitda

The projector never looks at scenarios; callers pass drivers that have already
been scaled by scenarios.apply_scenario.
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from core.config import ForecastConfig
from core.utils import year_index
from drivers.model import CalculationDrivers


@dataclass(frozen=True)
class MonthlyProjection:
    """Monthly arrays, each of shape (horizon_months,)."""
    revenue: np.ndarray
    cogs: np.ndarray
    opex: np.ndarray
    gross_profit: np.ndarray
    ebitda: np.ndarray
    cumulative_ebitda: np.ndarray

    @property
    def n_months(self) -> int:
        return len(self.revenue)


def _per_month(per_year, yi: np.ndarray) -> np.ndarray:
    return np.asarray(per_year, dtype=float)[yi]


def project_monthly(
    drivers: CalculationDrivers,
    config: ForecastConfig,
    *,
    platform_revshare_adjustment: float = 0.0,
) -> MonthlyProjection:
    """
    Walk the monthly horizon and return revenue, COGS, OpEx, gross profit,
    EBITDA and cumulative EBITDA.

    Drivers are assumed validated (see drivers.validators); the only divisor
    not covered by validation is ARPU, which maps to zero active accounts.
    """
    n_months = config.horizon_months
    months = np.arange(n_months, dtype=float)
    yi = year_index(n_months)

    # Compounding factors (exactly 1.0 everywhere when the rate is 0)
    growth = np.power(1.0 + drivers.growth_rate / 100.0, months)
    retention = np.power(1.0 - drivers.churn_rate / 100.0, months)
    cohort = growth * retention

    # --- Revenue ---
    base_sub = _per_month(drivers.subscription_revenue, yi) / 12.0
    pricing = 1.0 + drivers.pricing_sensitivity / 100.0
    subscription = base_sub * cohort * pricing

    impression_index = _per_month(drivers.impressions, yi) / _per_month(config.impressions_baseline, yi)
    ad_multiplier = (
        (drivers.fill_rate / config.fill_rate_baseline)
        * (drivers.cpm / config.cpm_baseline)
        * (1.0 + platform_revshare_adjustment / 100.0)
    )
    advertising = _per_month(drivers.advertising_revenue, yi) / 12.0 * ad_multiplier * impression_index

    premium = 1.0 + (drivers.adoption_rate / 100.0) * config.premium_uplift
    revenue = (subscription + advertising) * premium

    # --- Cost of goods ---
    if drivers.arpu > 0:
        accounts = base_sub * cohort / drivers.arpu
    else:
        accounts = np.zeros(n_months, dtype=float)
    hosting = accounts * _per_month(drivers.hosting_cost_per_account, yi) / 12.0 * drivers.bandwidth_multiplier
    inference = accounts * drivers.usage_multiplier * drivers.inference_cost_per_unit
    fees = revenue * drivers.payment_processing_fee / 100.0
    cogs = hosting + inference + fees

    # --- Operating expense ---
    base_opex = _per_month(drivers.base_opex, yi) / 12.0 / drivers.productivity_multiplier
    opex = (base_opex + drivers.marketing_budget) / drivers.efficiency_multiplier

    gross_profit = revenue - cogs
    ebitda = gross_profit - opex
    cumulative = np.cumsum(ebitda)

    return MonthlyProjection(
        revenue=revenue,
        cogs=cogs,
        opex=opex,
        gross_profit=gross_profit,
        ebitda=ebitda,
        cumulative_ebitda=cumulative,
    )
