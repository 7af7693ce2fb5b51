"""
Forecast configuration.
Engine constants live in ForecastConfig; store boundary settings in StoreSettings.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Tuple

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


@dataclass(frozen=True)
class ForecastConfig:
    horizon_months: int = 36
    start_year: int = 2025

    # reference points the advertising multipliers are normalized against;
    # keep them fixed across scenarios so results stay comparable
    fill_rate_baseline: float = 65.0
    cpm_baseline: float = 22.0
    impressions_baseline: Tuple[float, ...] = (12_000_000.0, 36_000_000.0, 90_000_000.0)

    # revenue uplift per point of premium adoption
    premium_uplift: float = 0.15

    # unit economics / runway
    ltv_fallback_months: int = 24
    runway_window_months: int = 12

    @property
    def horizon_years(self) -> int:
        return self.horizon_months // 12


class StoreSettings(BaseSettings):
    """Version store settings, overridable via FORECAST_STORE_* environment variables."""

    model_config = SettingsConfigDict(env_prefix="FORECAST_STORE_", extra="ignore")

    root: Path = Field(Path("./forecast_versions"), description="Directory for the JSON file store")
    timeout_seconds: float = Field(5.0, gt=0, description="Per-call timeout at the store boundary")
    max_retries: int = Field(3, ge=1, description="Attempts per store call (including the first)")
    backoff_base: float = Field(0.1, ge=0, description="Initial backoff in seconds")
    backoff_max: float = Field(2.0, ge=0, description="Backoff ceiling in seconds")
