"""
Caller-side cache of the projection on display per scenario key.

One slot per key. A freshly computed result replaces whatever the slot held
and stays there until the caller explicitly reloads from stored versions.
Viewing a saved version takes precedence over the slot until it is closed
or a new result is computed.

    displayed = viewed version  >  slot (computed or reloaded)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, Optional

from engine.result import ProjectionResult

from .snapshot import VersionSnapshot

COMPUTED = "computed"
STORED = "stored"
VIEWED = "viewed"


@dataclass(frozen=True)
class CachedForecast:
    scenario_key: str
    result: ProjectionResult
    origin: str
    version_id: Optional[str] = None


class ForecastCache:
    """Single-writer cache; not shared across tasks without external locking."""

    def __init__(self):
        self._slots: Dict[str, CachedForecast] = {}
        self._viewing: Optional[VersionSnapshot] = None

    def put_computed(self, scenario_key: str, result: ProjectionResult) -> CachedForecast:
        """Store a fresh result. Any viewed version is closed so the fresh result is what shows."""
        self._viewing = None
        entry = CachedForecast(scenario_key, result, COMPUTED)
        self._slots[scenario_key] = entry
        return entry

    def reload_stored(
        self, scenario_key: str, versions: Iterable[VersionSnapshot]
    ) -> Optional[CachedForecast]:
        """
        Replace the slot with the newest stored version for scenario_key.

        `versions` is expected newest-first (VersionStore.list order). When no
        version matches, the slot is cleared.
        """
        for v in versions:
            if v.scenario_key == scenario_key:
                entry = CachedForecast(scenario_key, v.forecast_payload, STORED, v.id)
                self._slots[scenario_key] = entry
                return entry
        self._slots.pop(scenario_key, None)
        return None

    def view_version(self, snapshot: VersionSnapshot) -> None:
        self._viewing = snapshot

    def clear_view(self) -> None:
        self._viewing = None

    @property
    def viewing(self) -> Optional[VersionSnapshot]:
        return self._viewing

    def invalidate(self, scenario_key: str) -> None:
        self._slots.pop(scenario_key, None)

    def current(self, scenario_key: str) -> Optional[CachedForecast]:
        v = self._viewing
        if v is not None and v.scenario_key == scenario_key:
            return CachedForecast(scenario_key, v.forecast_payload, VIEWED, v.id)
        return self._slots.get(scenario_key)
