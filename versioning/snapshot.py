"""
Version snapshots — immutable, named copies of a computed projection plus the
driver values that produced it.

A NewVersion is what the caller hands to a store; the store answers with a
VersionSnapshot carrying the generated id and creation timestamp.
"""

from __future__ import annotations

import copy
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Mapping, Optional

from engine.result import ProjectionResult


@dataclass(frozen=True)
class NewVersion:
    scenario_key: str
    label: str
    forecast_payload: ProjectionResult
    driver_snapshot: Dict[str, Any]
    summary: Optional[str] = None
    created_by: Optional[str] = None

    def __post_init__(self):
        if not self.scenario_key:
            raise ValueError("scenario_key is required")
        if not self.label or not self.label.strip():
            raise ValueError("label is required")
        # detach from the caller's dict so later edits can't leak into the record
        object.__setattr__(self, "driver_snapshot", copy.deepcopy(dict(self.driver_snapshot)))


@dataclass(frozen=True)
class VersionSnapshot:
    id: str
    scenario_key: str
    label: str
    forecast_payload: ProjectionResult
    driver_snapshot: Dict[str, Any]
    created_at: datetime
    summary: Optional[str] = None
    created_by: Optional[str] = None

    @classmethod
    def from_new(cls, draft: NewVersion, *, id: str, created_at: datetime) -> "VersionSnapshot":
        return cls(
            id=id,
            scenario_key=draft.scenario_key,
            label=draft.label,
            forecast_payload=draft.forecast_payload,
            driver_snapshot=copy.deepcopy(draft.driver_snapshot),
            created_at=created_at,
            summary=draft.summary,
            created_by=draft.created_by,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "scenario_key": self.scenario_key,
            "label": self.label,
            "summary": self.summary,
            "forecast_payload": self.forecast_payload.to_dict(),
            "driver_snapshot": copy.deepcopy(self.driver_snapshot),
            "created_by": self.created_by,
            "created_at": self.created_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "VersionSnapshot":
        return cls(
            id=str(data["id"]),
            scenario_key=str(data["scenario_key"]),
            label=str(data["label"]),
            summary=data.get("summary"),
            forecast_payload=ProjectionResult.from_dict(data["forecast_payload"]),
            driver_snapshot=dict(data.get("driver_snapshot") or {}),
            created_by=data.get("created_by"),
            created_at=datetime.fromisoformat(data["created_at"]),
        )
