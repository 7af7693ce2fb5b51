"""
Sanity checks for driver sets and engine configuration before they enter the projector.

Catches problems early:
- Non-finite values
- Negative currency or volume drivers
- Per-year arrays that don't match the horizon
- Rates that would break compounding (churn above 100%, growth at or below -100%)
- Zero divisors (productivity, efficiency, normalization baselines)
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import List

from core.config import ForecastConfig
from core.errors import DriverValidationError
from core.schema import ALL_DRIVERS, NON_NEGATIVE_DRIVERS, PER_YEAR_DRIVERS, POSITIVE_DRIVERS

from .model import CalculationDrivers


@dataclass
class ValidationResult:
    """Collects all validation warnings/errors for a driver set."""
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return len(self.errors) == 0

    def summary(self) -> str:
        lines = []
        if self.errors:
            lines.append(f"ERRORS ({len(self.errors)}):")
            for e in self.errors:
                lines.append(f"  ✗ {e}")
        if self.warnings:
            lines.append(f"WARNINGS ({len(self.warnings)}):")
            for w in self.warnings:
                lines.append(f"  ⚠ {w}")
        if not lines:
            lines.append("✓ All checks passed.")
        return "\n".join(lines)


def validate_config(config: ForecastConfig) -> ValidationResult:
    result = ValidationResult()

    if config.horizon_months <= 0:
        result.errors.append(f"horizon_months must be positive (got {config.horizon_months}).")
        return result
    if config.horizon_months % 12 != 0:
        result.errors.append(
            f"horizon_months must be a whole number of years (got {config.horizon_months})."
        )

    for name in ("fill_rate_baseline", "cpm_baseline"):
        v = getattr(config, name)
        if not math.isfinite(v) or v <= 0:
            result.errors.append(f"{name} must be a positive finite number (got {v}).")

    baseline = config.impressions_baseline
    if len(baseline) != config.horizon_years:
        result.errors.append(
            f"impressions_baseline has {len(baseline)} entries, expected {config.horizon_years}."
        )
    if any((not math.isfinite(v)) or v <= 0 for v in baseline):
        result.errors.append("impressions_baseline entries must be positive finite numbers.")

    if not math.isfinite(config.premium_uplift) or config.premium_uplift < 0:
        result.errors.append(f"premium_uplift must be non-negative (got {config.premium_uplift}).")
    if config.ltv_fallback_months < 0:
        result.errors.append("ltv_fallback_months must be non-negative.")
    if config.runway_window_months <= 0:
        result.errors.append("runway_window_months must be positive.")

    return result


def validate_drivers(drivers: CalculationDrivers, config: ForecastConfig) -> ValidationResult:
    """
    Run all validation checks on a resolved driver set.
    Returns a ValidationResult with errors (blocking) and warnings (informational).
    """
    result = validate_config(config)
    n_years = config.horizon_years

    # --- Finite values / per-year shapes ---
    for name in ALL_DRIVERS:
        value = getattr(drivers, name)
        values = value if name in PER_YEAR_DRIVERS else (value,)
        if name in PER_YEAR_DRIVERS and n_years > 0 and len(values) != n_years:
            result.errors.append(f"{name} has {len(values)} yearly entries, expected {n_years}.")
        if any(not math.isfinite(v) for v in values):
            result.errors.append(f"{name} contains a non-finite value.")
            continue
        if name in NON_NEGATIVE_DRIVERS and any(v < 0 for v in values):
            result.errors.append(f"{name} must not be negative.")
        if name in POSITIVE_DRIVERS and any(v <= 0 for v in values):
            result.errors.append(f"{name} must be greater than zero.")

    if not result.is_valid:
        return result

    # --- Rates ---
    if drivers.churn_rate < 0 or drivers.churn_rate > 100:
        result.errors.append(f"churn_rate must be within 0..100 (got {drivers.churn_rate}).")
    if drivers.growth_rate <= -100:
        result.errors.append(f"growth_rate must be above -100 (got {drivers.growth_rate}).")
    if drivers.pricing_sensitivity <= -100:
        result.errors.append(
            f"pricing_sensitivity must be above -100 (got {drivers.pricing_sensitivity})."
        )
    for name in ("fill_rate", "organic_mix", "adoption_rate", "payment_processing_fee"):
        v = getattr(drivers, name)
        if v > 100:
            result.errors.append(f"{name} is a percentage and must not exceed 100 (got {v}).")

    # --- Plausibility ---
    if drivers.churn_rate > 30:
        result.warnings.append(f"churn_rate of {drivers.churn_rate}% per month is unusually high.")
    if drivers.growth_rate > 50:
        result.warnings.append(f"growth_rate of {drivers.growth_rate}% per month is unusually high.")
    if drivers.arpu == 0:
        result.warnings.append("arpu is 0; active accounts and payback will be reported as 0.")

    return result


def require_valid_drivers(drivers: CalculationDrivers, config: ForecastConfig) -> ValidationResult:
    """Validate and raise DriverValidationError on any blocking error."""
    result = validate_drivers(drivers, config)
    if not result.is_valid:
        raise DriverValidationError(result.errors)
    return result
