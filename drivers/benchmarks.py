"""
Reference benchmarks for driver values.

When the caller hasn't overridden a driver, a reference benchmark (industry
figure, research table) is preferred over the built-in default. A benchmark is
either a single value or a low/high range, in which case the midpoint is used.

Benchmarks only cover scalar drivers; per-year arrays come from the plan itself.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, Optional

from core.schema import ALL_DRIVERS, PER_YEAR_DRIVERS


@dataclass(frozen=True)
class ReferenceBenchmark:
    """A single reference value (or range) for one driver."""
    driver: str
    value: Optional[float] = None
    low: Optional[float] = None
    high: Optional[float] = None
    source: str = ""

    def __post_init__(self):
        if self.driver not in ALL_DRIVERS:
            raise ValueError(f"Unknown driver for benchmark: '{self.driver}'")
        if self.driver in PER_YEAR_DRIVERS:
            raise ValueError(f"Benchmarks are scalar; '{self.driver}' is a per-year driver")
        if self.value is None and (self.low is None or self.high is None):
            raise ValueError(f"Benchmark for '{self.driver}' needs a value or a low/high range")

    @property
    def effective_value(self) -> float:
        if self.value is not None:
            return float(self.value)
        return (float(self.low) + float(self.high)) / 2.0


BenchmarkSet = Dict[str, ReferenceBenchmark]


# ----- Creator-platform reference set -----
REFERENCE_BENCHMARKS: BenchmarkSet = {
    "growth_rate": ReferenceBenchmark(
        driver="growth_rate",
        value=4.0,
        source="Creator platform month-over-month growth survey",
    ),
    "churn_rate": ReferenceBenchmark(
        driver="churn_rate",
        value=4.5,
        source="Subscription analytics panel, SMB creator tools",
    ),
    "cpm": ReferenceBenchmark(
        driver="cpm",
        low=18.0,
        high=28.0,
        source="Host-read audio pre-roll CPM range",
    ),
    "fill_rate": ReferenceBenchmark(
        driver="fill_rate",
        value=65.0,
        source="Audio marketplace fill-rate average",
    ),
    "paid_cac": ReferenceBenchmark(
        driver="paid_cac",
        low=40.0,
        high=60.0,
        source="Paid social acquisition cost range",
    ),
    "organic_cac": ReferenceBenchmark(
        driver="organic_cac",
        value=15.0,
        source="Referral and content-led acquisition cost",
    ),
}


def get_reference_benchmarks() -> BenchmarkSet:
    return REFERENCE_BENCHMARKS.copy()


def benchmark_set(items: Iterable[ReferenceBenchmark]) -> BenchmarkSet:
    """Build a BenchmarkSet keyed by driver; later entries win."""
    return {b.driver: b for b in items}


class BenchmarkSource:
    """Interface for an external, read-only benchmark table."""

    async def fetch(self) -> BenchmarkSet:
        raise NotImplementedError


class StaticBenchmarkSource(BenchmarkSource):
    """BenchmarkSource over an in-memory BenchmarkSet (the reference set when omitted)."""

    def __init__(self, benchmarks: Optional[BenchmarkSet] = None):
        self._benchmarks = dict(benchmarks) if benchmarks is not None else get_reference_benchmarks()

    async def fetch(self) -> BenchmarkSet:
        return dict(self._benchmarks)
