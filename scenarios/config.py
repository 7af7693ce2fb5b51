"""
ScenarioConfig — one named set of multiplicative driver adjustments.

A multiplier of 1.0 leaves the driver unchanged. Churn and CAC multipliers
above 1.0 make the scenario worse; the rest make it better.
"""

from __future__ import annotations

import math
from dataclasses import asdict, dataclass
from typing import Any, Dict, Mapping


@dataclass(frozen=True)
class ScenarioConfig:
    scenario_key: str
    label: str
    growth_multiplier: float = 1.0
    churn_multiplier: float = 1.0
    cac_multiplier: float = 1.0
    impressions_multiplier: float = 1.0
    cpm_multiplier: float = 1.0
    fill_rate_multiplier: float = 1.0
    market_adoption_multiplier: float = 1.0
    platform_revshare_adjustment: float = 0.0  # percentage points on advertising revenue
    is_active: bool = True
    sort_order: int = 0

    def __post_init__(self):
        if not self.scenario_key:
            raise ValueError("scenario_key must be a non-empty string")
        for name in (
            "growth_multiplier",
            "churn_multiplier",
            "cac_multiplier",
            "impressions_multiplier",
            "cpm_multiplier",
            "fill_rate_multiplier",
            "market_adoption_multiplier",
        ):
            v = getattr(self, name)
            if not math.isfinite(v) or v < 0:
                raise ValueError(f"{name} must be a non-negative finite number (got {v})")
        if not math.isfinite(self.platform_revshare_adjustment):
            raise ValueError("platform_revshare_adjustment must be finite")

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ScenarioConfig":
        known = cls.__dataclass_fields__.keys()
        return cls(**{k: v for k, v in data.items() if k in known})


def neutral_scenario(
    scenario_key: str = "base",
    label: str = "Base",
    is_active: bool = True,
    sort_order: int = 0,
) -> ScenarioConfig:
    """Scenario with every multiplier at 1.0 and no revshare adjustment."""
    return ScenarioConfig(scenario_key=scenario_key, label=label, is_active=is_active, sort_order=sort_order)
