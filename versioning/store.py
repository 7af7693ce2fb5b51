"""
Version store contract.

create / list / get / delete only. Versions are append-only and delete-only,
there is no update in place. All calls are awaitable so implementations can
sit on network or disk I/O; retry and timeout policy belongs to the store
side (see versioning.retry), never to the numeric engine.
"""

from __future__ import annotations

import asyncio
import uuid
from datetime import datetime, timezone
from typing import Callable, Dict, List, Optional

from core.errors import VersionNotFoundError
from core.logging import get_logger

from .snapshot import NewVersion, VersionSnapshot

logger = get_logger(__name__)

Clock = Callable[[], datetime]


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def new_version_id() -> str:
    return f"v_{uuid.uuid4().hex[:12]}"


class VersionStore:
    """Interface for persisting version snapshots."""

    async def create(self, draft: NewVersion, *, version_id: Optional[str] = None) -> VersionSnapshot:
        """
        Persist a draft. With an explicit `version_id` the call is idempotent:
        if that id is already stored, the stored record is returned unchanged.
        """
        raise NotImplementedError

    async def list(self) -> List[VersionSnapshot]:
        """All stored versions, newest first."""
        raise NotImplementedError

    async def get(self, version_id: str) -> VersionSnapshot:
        raise NotImplementedError

    async def delete(self, version_id: str) -> None:
        raise NotImplementedError


class InMemoryVersionStore(VersionStore):
    """Process-local store. Useful for tests and single-session tools."""

    def __init__(self, *, clock: Optional[Clock] = None):
        self._clock = clock or utcnow
        self._records: Dict[str, VersionSnapshot] = {}  # insertion order = creation order
        self._lock = asyncio.Lock()

    async def create(self, draft: NewVersion, *, version_id: Optional[str] = None) -> VersionSnapshot:
        version_id = version_id or new_version_id()
        async with self._lock:
            existing = self._records.get(version_id)
            if existing is not None:
                return existing
            snap = VersionSnapshot.from_new(draft, id=version_id, created_at=self._clock())
            self._records[snap.id] = snap
        logger.info("Saved version %s (%s / %s)", snap.id, snap.scenario_key, snap.label)
        return snap

    async def list(self) -> List[VersionSnapshot]:
        async with self._lock:
            records = list(self._records.values())
        # stable sort on the reversed insertion order keeps same-timestamp records newest-first
        return sorted(reversed(records), key=lambda s: s.created_at, reverse=True)

    async def get(self, version_id: str) -> VersionSnapshot:
        async with self._lock:
            try:
                return self._records[version_id]
            except KeyError:
                raise VersionNotFoundError(version_id) from None

    async def delete(self, version_id: str) -> None:
        async with self._lock:
            if version_id not in self._records:
                raise VersionNotFoundError(version_id)
            del self._records[version_id]
        logger.info("Deleted version %s", version_id)
