"""
Forecast service — the async boundary around the pure engine.

Fetches the scenario (and optionally reference benchmarks) from their sources,
resolves drivers, runs the projection, and saves / lists / deletes versions.
The numeric work itself stays synchronous; only the source and store calls
are awaited.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Sequence, Union

import pandas as pd

from analysis.capital import CapitalInfusion, CapitalPlan, plan_capital
from core.config import ForecastConfig
from core.logging import get_logger
from drivers.benchmarks import BenchmarkSource
from drivers.model import DEFAULT_DRIVERS, CalculationDrivers
from drivers.resolver import AssumptionTrace, OverridesLike, resolve_with_trace, to_overrides
from engine.result import ProjectionResult
from engine.runner import compare_scenarios, run_forecast
from scenarios.config import ScenarioConfig
from scenarios.table import ScenarioSource
from versioning.cache import CachedForecast, ForecastCache
from versioning.snapshot import NewVersion, VersionSnapshot
from versioning.store import VersionStore

logger = get_logger(__name__)


@dataclass(frozen=True)
class ForecastRun:
    """One computed projection plus the context needed to save or replay it."""
    scenario: ScenarioConfig
    drivers: CalculationDrivers
    result: ProjectionResult
    trace: AssumptionTrace
    benchmarks_used: int

    def driver_snapshot(self) -> Dict[str, Any]:
        return self.drivers.to_dict()

    def metadata(self) -> Dict[str, Any]:
        return {
            "scenario_key": self.scenario.scenario_key,
            "benchmarks_used": self.benchmarks_used,
            "assumptions": self.trace.counts(),
        }


class ForecastService:

    def __init__(
        self,
        scenario_source: ScenarioSource,
        version_store: VersionStore,
        *,
        benchmark_source: Optional[BenchmarkSource] = None,
        base_drivers: CalculationDrivers = DEFAULT_DRIVERS,
        config: Optional[ForecastConfig] = None,
        cache: Optional[ForecastCache] = None,
    ):
        self.scenarios = scenario_source
        self.store = version_store
        self.benchmark_source = benchmark_source
        self.base_drivers = base_drivers
        self.config = config or ForecastConfig()
        self.cache = cache

    async def list_scenarios(self) -> List[ScenarioConfig]:
        return await self.scenarios.list_active()

    async def compute_projection(self, scenario_key: str, overrides: OverridesLike = None) -> ForecastRun:
        """
        Compute a projection for one scenario.

        Overrides are parsed before any I/O so a malformed request fails fast.

        Raises
        ------
        DriverValidationError
            Unknown driver key or out-of-range value.
        ScenarioNotFoundError
            scenario_key is not an active scenario.
        """
        parsed = to_overrides(overrides)
        scenario = await self.scenarios.get(scenario_key)
        benchmarks = await self.benchmark_source.fetch() if self.benchmark_source else {}

        drivers, trace = resolve_with_trace(self.base_drivers, benchmarks, parsed)
        result = run_forecast(drivers, scenario, self.config)

        logger.info(
            "Computed projection scenario=%s overrides=%d benchmarks=%d",
            scenario_key, len(trace.overrides), len(trace.benchmarks),
        )
        if self.cache is not None:
            self.cache.put_computed(scenario_key, result)
        return ForecastRun(scenario, drivers, result, trace, len(trace.benchmarks))

    async def compare_scenarios(self, overrides: OverridesLike = None) -> pd.DataFrame:
        """
        Summary frame across every active scenario, with drivers resolved the
        same way compute_projection resolves them.
        """
        parsed = to_overrides(overrides)
        scenarios = await self.scenarios.list_active()
        benchmarks = await self.benchmark_source.fetch() if self.benchmark_source else {}
        drivers, _ = resolve_with_trace(self.base_drivers, benchmarks, parsed)
        return compare_scenarios(drivers, scenarios, self.config)

    async def save_version(
        self,
        scenario_key: str,
        label: str,
        result: ProjectionResult,
        driver_snapshot: Union[CalculationDrivers, Mapping[str, Any]],
        *,
        summary: Optional[str] = None,
        created_by: Optional[str] = None,
    ) -> VersionSnapshot:
        if isinstance(driver_snapshot, CalculationDrivers):
            driver_snapshot = driver_snapshot.to_dict()
        draft = NewVersion(
            scenario_key=scenario_key,
            label=label,
            forecast_payload=result,
            driver_snapshot=dict(driver_snapshot),
            summary=summary,
            created_by=created_by,
        )
        return await self.store.create(draft)

    async def save_run(self, run: ForecastRun, label: str, **kwargs) -> VersionSnapshot:
        return await self.save_version(
            run.scenario.scenario_key, label, run.result, run.drivers, **kwargs
        )

    async def list_versions(self) -> List[VersionSnapshot]:
        return await self.store.list()

    async def get_version(self, version_id: str) -> VersionSnapshot:
        return await self.store.get(version_id)

    async def delete_version(self, version_id: str) -> None:
        await self.store.delete(version_id)
        if self.cache is not None and self.cache.viewing is not None and self.cache.viewing.id == version_id:
            self.cache.clear_view()

    async def replay_version(self, version: VersionSnapshot) -> ProjectionResult:
        """Recompute a saved version from its driver snapshot and scenario key."""
        scenario = await self.scenarios.get(version.scenario_key)
        drivers = CalculationDrivers.from_dict(version.driver_snapshot)
        return run_forecast(drivers, scenario, self.config)

    async def reload_stored(self, scenario_key: str) -> Optional[CachedForecast]:
        if self.cache is None:
            raise RuntimeError("reload_stored needs a ForecastCache")
        versions = await self.store.list()
        return self.cache.reload_stored(scenario_key, versions)

    def plan_capital(
        self,
        run: ForecastRun,
        *,
        infusions: Sequence[CapitalInfusion] = (),
        minimum_cash_target: float = 0.0,
    ) -> CapitalPlan:
        return plan_capital(
            run.result.monthly_ebitda,
            run.drivers.starting_cash,
            infusions=infusions,
            minimum_cash_target=minimum_cash_target,
        )
