from __future__ import annotations

from typing import Dict, Tuple

# Canonical driver names, grouped by family. The resolver, validators and
# override model all key off these names; nothing outside this list is a driver.
REVENUE_DRIVERS: Tuple[str, ...] = (
    "subscription_revenue",
    "advertising_revenue",
    "fill_rate",
    "cpm",
    "impressions",
    "growth_rate",
    "churn_rate",
    "arpu",
    "pricing_sensitivity",
    "adoption_rate",
)

COST_DRIVERS: Tuple[str, ...] = (
    "hosting_cost_per_account",
    "bandwidth_multiplier",
    "inference_cost_per_unit",
    "usage_multiplier",
    "payment_processing_fee",
)

OPERATING_DRIVERS: Tuple[str, ...] = (
    "base_opex",
    "productivity_multiplier",
    "paid_cac",
    "organic_cac",
    "organic_mix",
    "marketing_budget",
    "efficiency_multiplier",
)

CAPITAL_DRIVERS: Tuple[str, ...] = ("starting_cash",)

DRIVER_FAMILIES: Dict[str, Tuple[str, ...]] = {
    "revenue": REVENUE_DRIVERS,
    "cost": COST_DRIVERS,
    "operating": OPERATING_DRIVERS,
    "capital": CAPITAL_DRIVERS,
}

ALL_DRIVERS: Tuple[str, ...] = REVENUE_DRIVERS + COST_DRIVERS + OPERATING_DRIVERS + CAPITAL_DRIVERS

# Drivers holding one value per modeled year.
PER_YEAR_DRIVERS: Tuple[str, ...] = (
    "subscription_revenue",
    "advertising_revenue",
    "impressions",
    "hosting_cost_per_account",
    "base_opex",
)

# Currency-like and volume drivers that may never go negative.
NON_NEGATIVE_DRIVERS: Tuple[str, ...] = (
    "subscription_revenue",
    "advertising_revenue",
    "fill_rate",
    "cpm",
    "impressions",
    "arpu",
    "adoption_rate",
    "hosting_cost_per_account",
    "bandwidth_multiplier",
    "inference_cost_per_unit",
    "usage_multiplier",
    "payment_processing_fee",
    "base_opex",
    "paid_cac",
    "organic_cac",
    "organic_mix",
    "marketing_budget",
    "starting_cash",
)

# Drivers used as divisors in the monthly loop.
POSITIVE_DRIVERS: Tuple[str, ...] = (
    "productivity_multiplier",
    "efficiency_multiplier",
)
