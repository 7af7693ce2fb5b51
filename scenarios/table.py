"""
Scenario table — the externally supplied lookup of ScenarioConfig by key.

Keys are unique. Lookups never fall back to another scenario: an unknown key
raises ScenarioNotFoundError.
"""

from __future__ import annotations

from typing import Dict, Iterable, Iterator, List, Mapping, Optional

import pandas as pd

from core.errors import DuplicateScenarioError, ScenarioNotFoundError

from .config import ScenarioConfig


# ----- Named scenario set shipped with the engine -----
DEFAULT_SCENARIOS: List[ScenarioConfig] = [
    ScenarioConfig(
        scenario_key="conservative",
        label="Conservative",
        growth_multiplier=0.8,
        churn_multiplier=1.2,
        cac_multiplier=1.15,
        impressions_multiplier=0.85,
        cpm_multiplier=0.9,
        fill_rate_multiplier=0.9,
        market_adoption_multiplier=0.8,
        platform_revshare_adjustment=-5.0,
        sort_order=0,
    ),
    ScenarioConfig(
        scenario_key="base",
        label="Base",
        sort_order=1,
    ),
    ScenarioConfig(
        scenario_key="aggressive",
        label="Aggressive",
        growth_multiplier=1.25,
        churn_multiplier=0.85,
        cac_multiplier=0.9,
        impressions_multiplier=1.2,
        cpm_multiplier=1.1,
        fill_rate_multiplier=1.05,
        market_adoption_multiplier=1.25,
        platform_revshare_adjustment=5.0,
        sort_order=2,
    ),
]


class ScenarioTable:
    """Ordered, uniquely keyed collection of scenarios."""

    def __init__(self, scenarios: Iterable[ScenarioConfig]):
        by_key: Dict[str, ScenarioConfig] = {}
        for s in scenarios:
            if s.scenario_key in by_key:
                raise DuplicateScenarioError(f"Duplicate scenario key: '{s.scenario_key}'")
            by_key[s.scenario_key] = s
        # stable ordering: sort_order, then insertion order
        ordered = sorted(enumerate(by_key.values()), key=lambda t: (t[1].sort_order, t[0]))
        self._scenarios: Dict[str, ScenarioConfig] = {s.scenario_key: s for _, s in ordered}

    def __len__(self) -> int:
        return len(self._scenarios)

    def __iter__(self) -> Iterator[ScenarioConfig]:
        return iter(self._scenarios.values())

    def __contains__(self, key: object) -> bool:
        return key in self._scenarios

    def keys(self) -> List[str]:
        return list(self._scenarios.keys())

    def get(self, scenario_key: str) -> ScenarioConfig:
        try:
            return self._scenarios[scenario_key]
        except KeyError:
            raise ScenarioNotFoundError(scenario_key, self.keys()) from None

    def active(self) -> List[ScenarioConfig]:
        return [s for s in self._scenarios.values() if s.is_active]

    def to_dataframe(self) -> pd.DataFrame:
        return pd.DataFrame([s.to_dict() for s in self._scenarios.values()])

    @classmethod
    def from_records(cls, records: Iterable[Mapping]) -> "ScenarioTable":
        return cls(ScenarioConfig.from_dict(r) for r in records)

    @classmethod
    def from_dataframe(cls, df: pd.DataFrame) -> "ScenarioTable":
        """Build from a DataFrame with one row per scenario (missing columns take defaults)."""
        if "scenario_key" not in df.columns or "label" not in df.columns:
            raise ValueError("Scenario frame needs 'scenario_key' and 'label' columns")
        records = []
        for row in df.to_dict(orient="records"):
            clean = {k: v for k, v in row.items() if not (isinstance(v, float) and pd.isna(v))}
            if "sort_order" in clean:
                clean["sort_order"] = int(clean["sort_order"])
            if "is_active" in clean:
                clean["is_active"] = bool(clean["is_active"])
            records.append(clean)
        return cls.from_records(records)


def get_default_scenarios() -> ScenarioTable:
    return ScenarioTable(DEFAULT_SCENARIOS)


class ScenarioSource:
    """Interface for the read-only scenario data source."""

    async def list_active(self) -> List[ScenarioConfig]:
        raise NotImplementedError

    async def get(self, scenario_key: str) -> ScenarioConfig:
        raise NotImplementedError


class StaticScenarioSource(ScenarioSource):
    """ScenarioSource backed by an in-memory ScenarioTable."""

    def __init__(self, table: Optional[ScenarioTable] = None):
        self.table = table if table is not None else get_default_scenarios()

    async def list_active(self) -> List[ScenarioConfig]:
        return self.table.active()

    async def get(self, scenario_key: str) -> ScenarioConfig:
        scenario = self.table.get(scenario_key)
        if not scenario.is_active:
            raise ScenarioNotFoundError(scenario_key, [s.scenario_key for s in self.table.active()])
        return scenario
