"""
Scenario application — scale driver INPUTS, never projection outputs.

The projector is scenario-agnostic: it sees only a driver set. Every scenario
difference is expressed here, before the monthly loop, so the same monthly
algorithm serves all scenarios and can be tested in isolation.
"""

from __future__ import annotations

from dataclasses import dataclass, replace

from drivers.model import CalculationDrivers

from .config import ScenarioConfig


@dataclass(frozen=True)
class ScenarioDrivers:
    """Drivers after scenario scaling, plus the one adjustment that is not a driver."""
    drivers: CalculationDrivers
    platform_revshare_adjustment: float = 0.0


def apply_scenario(drivers: CalculationDrivers, scenario: ScenarioConfig) -> ScenarioDrivers:
    """
    Multiply the adjustable drivers by the scenario factors.

    growth, churn, CPM, fill rate and adoption scale the driver directly;
    CAC scales both the paid and organic acquisition cost; impressions scale
    every yearly impression volume.
    """
    scaled = replace(
        drivers,
        growth_rate=drivers.growth_rate * scenario.growth_multiplier,
        churn_rate=drivers.churn_rate * scenario.churn_multiplier,
        cpm=drivers.cpm * scenario.cpm_multiplier,
        fill_rate=drivers.fill_rate * scenario.fill_rate_multiplier,
        adoption_rate=drivers.adoption_rate * scenario.market_adoption_multiplier,
        paid_cac=drivers.paid_cac * scenario.cac_multiplier,
        organic_cac=drivers.organic_cac * scenario.cac_multiplier,
        impressions=tuple(v * scenario.impressions_multiplier for v in drivers.impressions),
    )
    return ScenarioDrivers(
        drivers=scaled,
        platform_revshare_adjustment=float(scenario.platform_revshare_adjustment),
    )
