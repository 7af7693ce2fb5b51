"""
JSON-file version store: one document per version under StoreSettings.root.

Disk I/O runs in a worker thread (asyncio.to_thread) so the event loop is
never blocked; OSErrors surface as TransientStoreError so the retry wrapper
can decide whether to try again.
"""

from __future__ import annotations

import asyncio
import json
import os
from datetime import datetime
from pathlib import Path
from typing import List, Optional, Tuple

from core.config import StoreSettings
from core.errors import StoreError, TransientStoreError, VersionNotFoundError
from core.logging import get_logger

from .snapshot import NewVersion, VersionSnapshot
from .store import Clock, VersionStore, new_version_id, utcnow

logger = get_logger(__name__)


class JsonFileVersionStore(VersionStore):

    def __init__(self, settings: Optional[StoreSettings] = None, *, clock: Optional[Clock] = None):
        self.settings = settings or StoreSettings()
        self.root = Path(self.settings.root).resolve()
        self._clock = clock or utcnow
        self._lock = asyncio.Lock()

    def _path(self, version_id: str) -> Path:
        if not version_id or os.sep in version_id or "/" in version_id or version_id.startswith("."):
            raise VersionNotFoundError(version_id)
        return self.root / f"{version_id}.json"

    # ── sync helpers (run in a worker thread) ──

    def _write(self, snap: VersionSnapshot, sequence: int) -> None:
        self.root.mkdir(parents=True, exist_ok=True)
        doc = snap.to_dict()
        doc["sequence"] = sequence
        path = self._path(snap.id)
        tmp = path.with_suffix(".json.tmp")
        tmp.write_text(json.dumps(doc, indent=2))
        tmp.replace(path)

    def _read_all(self) -> List[dict]:
        if not self.root.exists():
            return []
        docs = []
        for p in self.root.glob("*.json"):
            try:
                docs.append(json.loads(p.read_text()))
            except json.JSONDecodeError as exc:
                raise StoreError(f"Corrupt version file {p.name}: {exc}") from exc
        return docs

    def _read_one(self, version_id: str) -> dict:
        path = self._path(version_id)
        if not path.exists():
            raise VersionNotFoundError(version_id)
        try:
            return json.loads(path.read_text())
        except json.JSONDecodeError as exc:
            raise StoreError(f"Corrupt version file {path.name}: {exc}") from exc

    def _remove(self, version_id: str) -> None:
        path = self._path(version_id)
        try:
            path.unlink()
        except FileNotFoundError:
            raise VersionNotFoundError(version_id) from None

    async def _io(self, fn, *args):
        try:
            return await asyncio.to_thread(fn, *args)
        except (StoreError, ValueError, KeyError):
            raise
        except OSError as exc:
            raise TransientStoreError(f"Version store I/O failed: {exc}") from exc

    # ── VersionStore ──

    async def _create_locked(self, draft: NewVersion, version_id: str) -> Tuple[VersionSnapshot, bool]:
        async with self._lock:
            docs = await self._io(self._read_all)
            for d in docs:
                if d.get("id") == version_id:
                    return VersionSnapshot.from_dict(d), False
            sequence = max((int(d.get("sequence", 0)) for d in docs), default=0) + 1
            snap = VersionSnapshot.from_new(draft, id=version_id, created_at=self._clock())
            await self._io(self._write, snap, sequence)
        return snap, True

    async def create(self, draft: NewVersion, *, version_id: Optional[str] = None) -> VersionSnapshot:
        version_id = version_id or new_version_id()
        self._path(version_id)
        # the thread write can't be cancelled; shield it so the lock is held until it lands
        snap, created = await asyncio.shield(self._create_locked(draft, version_id))
        if created:
            logger.info("Saved version %s (%s / %s) to %s", snap.id, snap.scenario_key, snap.label, self.root)
        return snap

    async def list(self) -> List[VersionSnapshot]:
        docs = await self._io(self._read_all)
        docs.sort(
            key=lambda d: (datetime.fromisoformat(d["created_at"]), int(d.get("sequence", 0))),
            reverse=True,
        )
        return [VersionSnapshot.from_dict(d) for d in docs]

    async def get(self, version_id: str) -> VersionSnapshot:
        doc = await self._io(self._read_one, version_id)
        return VersionSnapshot.from_dict(doc)

    async def delete(self, version_id: str) -> None:
        async with self._lock:
            await self._io(self._remove, version_id)
        logger.info("Deleted version %s from %s", version_id, self.root)
