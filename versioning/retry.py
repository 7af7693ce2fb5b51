"""
Timeout + retry policy for a VersionStore.

Each call is bounded by StoreSettings.timeout_seconds; timeouts and
TransientStoreError are retried with exponential backoff up to
StoreSettings.max_retries attempts. Anything else (VersionNotFoundError,
corrupt documents) propagates on the first failure. create reuses one
version id across attempts, so a slow acknowledgement never stores twice.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Awaitable, Callable, List, Optional

from tenacity import (
    AsyncRetrying,
    before_sleep_log,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from core.config import StoreSettings
from core.errors import TransientStoreError
from core.logging import get_logger

from .snapshot import NewVersion, VersionSnapshot
from .store import VersionStore, new_version_id

logger = get_logger(__name__)


class RetryingVersionStore(VersionStore):

    def __init__(self, inner: VersionStore, settings: Optional[StoreSettings] = None):
        self.inner = inner
        self.settings = settings or StoreSettings()

    async def _call(self, op: str, fn: Callable[..., Awaitable[Any]], *args, **kwargs) -> Any:
        s = self.settings
        result = None
        async for attempt in AsyncRetrying(
            stop=stop_after_attempt(max(1, s.max_retries)),
            wait=wait_exponential(multiplier=s.backoff_base, max=s.backoff_max),
            retry=retry_if_exception_type(TransientStoreError),
            before_sleep=before_sleep_log(logger, logging.WARNING),
            reraise=True,
        ):
            with attempt:
                try:
                    result = await asyncio.wait_for(fn(*args, **kwargs), timeout=s.timeout_seconds)
                except asyncio.TimeoutError as exc:
                    raise TransientStoreError(
                        f"Version store {op} timed out after {s.timeout_seconds}s"
                    ) from exc
        return result

    async def create(self, draft: NewVersion, *, version_id: Optional[str] = None) -> VersionSnapshot:
        # same id on every attempt; a retry returns what an earlier attempt stored
        version_id = version_id or new_version_id()
        return await self._call("create", self.inner.create, draft, version_id=version_id)

    async def list(self) -> List[VersionSnapshot]:
        return await self._call("list", self.inner.list)

    async def get(self, version_id: str) -> VersionSnapshot:
        return await self._call("get", self.inner.get, version_id)

    async def delete(self, version_id: str) -> None:
        await self._call("delete", self.inner.delete, version_id)
