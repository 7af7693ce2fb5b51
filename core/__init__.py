"""
Core package — configuration, driver schema, errors, logging and shared utilities.
No business logic lives here.
"""

from .schema import ALL_DRIVERS, DRIVER_FAMILIES, PER_YEAR_DRIVERS
from .config import ForecastConfig, StoreSettings
from .errors import (
    ForecastError,
    DriverValidationError,
    ScenarioNotFoundError,
    DuplicateScenarioError,
    StoreError,
    TransientStoreError,
    VersionNotFoundError,
)
from .utils import safe_div, excel_round, rollup_yearly, month_labels

__all__ = [
    "ALL_DRIVERS",
    "DRIVER_FAMILIES",
    "PER_YEAR_DRIVERS",
    "ForecastConfig",
    "StoreSettings",
    "ForecastError",
    "DriverValidationError",
    "ScenarioNotFoundError",
    "DuplicateScenarioError",
    "StoreError",
    "TransientStoreError",
    "VersionNotFoundError",
    "safe_div",
    "excel_round",
    "rollup_yearly",
    "month_labels",
]
