"""
Error taxonomy.

Two families: numeric-core errors (raised synchronously, same input -> same
error) and store-boundary errors (raised from awaitables, possibly transient).
"""

from __future__ import annotations

from typing import Iterable, List


class ForecastError(Exception):
    """Base exception for the forecast engine."""


class DriverValidationError(ForecastError, ValueError):
    """Raised when driver values or overrides are unusable. No partial result is produced."""

    def __init__(self, errors: Iterable[str]):
        self.errors: List[str] = list(errors)
        super().__init__("Invalid drivers: " + "; ".join(self.errors))


class ScenarioNotFoundError(ForecastError, KeyError):
    """Raised when a scenario key is absent from the scenario table."""

    def __init__(self, scenario_key: str, available: Iterable[str] = ()):
        self.scenario_key = scenario_key
        self.available = list(available)
        super().__init__(scenario_key)

    def __str__(self) -> str:
        return f"Scenario not found: '{self.scenario_key}'. Available: {self.available}"


class DuplicateScenarioError(ForecastError, ValueError):
    """Raised when a scenario table holds the same key twice."""


class StoreError(ForecastError, RuntimeError):
    """Base exception for version store failures."""


class TransientStoreError(StoreError):
    """A store failure worth retrying (timeouts, dropped connections)."""


class VersionNotFoundError(StoreError, KeyError):
    """Raised when a version id does not exist in the store."""

    def __str__(self) -> str:
        return f"Version not found: {self.args[0]!r}" if self.args else "Version not found"
