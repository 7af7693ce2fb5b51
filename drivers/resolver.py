"""
Driver resolution — merge a base driver set with ad-hoc overrides.

Pure functions: same inputs always give the same CalculationDrivers, which is
what makes cached results and version replays reproducible.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union

from core.schema import ALL_DRIVERS, PER_YEAR_DRIVERS

from .benchmarks import BenchmarkSet
from .model import CalculationDrivers
from .overrides import DriverOverrides

OverridesLike = Union[DriverOverrides, Mapping[str, Any], None]


@dataclass(frozen=True)
class AssumptionTrace:
    """Where each driver value came from."""
    overrides: List[str] = field(default_factory=list)
    benchmarks: List[str] = field(default_factory=list)
    defaults: List[str] = field(default_factory=list)

    def counts(self) -> Dict[str, int]:
        return {
            "overrides": len(self.overrides),
            "benchmarks": len(self.benchmarks),
            "defaults": len(self.defaults),
        }


def to_overrides(overrides: OverridesLike) -> DriverOverrides:
    if overrides is None:
        return DriverOverrides()
    if isinstance(overrides, DriverOverrides):
        return overrides
    return DriverOverrides.from_mapping(overrides)


def _normalize(updates: Mapping[str, Any]) -> Dict[str, Any]:
    out = {}
    for name, value in updates.items():
        out[name] = tuple(float(v) for v in value) if name in PER_YEAR_DRIVERS else float(value)
    return out


def resolve_drivers(base: CalculationDrivers, overrides: OverridesLike = None) -> CalculationDrivers:
    """
    Replace every overridden field of `base`; unlisted fields keep their base value.

    No range validation happens here (see drivers.validators).
    """
    updates = to_overrides(overrides).as_updates()
    if not updates:
        return base
    return replace(base, **_normalize(updates))


def resolve_with_trace(
    defaults: CalculationDrivers,
    benchmarks: Optional[BenchmarkSet] = None,
    overrides: OverridesLike = None,
) -> Tuple[CalculationDrivers, AssumptionTrace]:
    """
    Resolve every driver by priority: explicit override, then reference
    benchmark, then the documented default.
    """
    updates = to_overrides(overrides).as_updates()
    benchmarks = benchmarks or {}
    trace = AssumptionTrace()
    merged: Dict[str, Any] = {}

    for name in ALL_DRIVERS:
        if name in updates:
            merged[name] = updates[name]
            trace.overrides.append(name)
        elif name in benchmarks:
            merged[name] = benchmarks[name].effective_value
            trace.benchmarks.append(name)
        else:
            trace.defaults.append(name)

    drivers = replace(defaults, **_normalize(merged)) if merged else defaults
    return drivers, trace
