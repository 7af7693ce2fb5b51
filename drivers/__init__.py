"""
Drivers — the named numeric inputs of a projection, how overrides and
benchmarks resolve into one driver set, and the checks run before projecting.
"""

from .model import CalculationDrivers, DEFAULT_DRIVERS
from .overrides import DriverOverrides
from .benchmarks import (
    ReferenceBenchmark,
    BenchmarkSet,
    BenchmarkSource,
    StaticBenchmarkSource,
    get_reference_benchmarks,
    benchmark_set,
)
from .resolver import AssumptionTrace, resolve_drivers, resolve_with_trace
from .validators import ValidationResult, validate_drivers, require_valid_drivers

__all__ = [
    "CalculationDrivers",
    "DEFAULT_DRIVERS",
    "DriverOverrides",
    "ReferenceBenchmark",
    "BenchmarkSet",
    "BenchmarkSource",
    "StaticBenchmarkSource",
    "get_reference_benchmarks",
    "benchmark_set",
    "AssumptionTrace",
    "resolve_drivers",
    "resolve_with_trace",
    "ValidationResult",
    "validate_drivers",
    "require_valid_drivers",
]
