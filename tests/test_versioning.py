import asyncio
from datetime import datetime, timedelta, timezone

import pytest

from core.errors import StoreError, TransientStoreError, VersionNotFoundError
from engine.runner import run_forecast
from versioning.cache import COMPUTED, STORED, VIEWED, ForecastCache
from versioning.file_store import JsonFileVersionStore
from versioning.retry import RetryingVersionStore
from versioning.snapshot import NewVersion, VersionSnapshot
from versioning.store import InMemoryVersionStore, VersionStore


def _draft(drivers, key="base", label="Plan A"):
    result = run_forecast(drivers)
    return NewVersion(
        scenario_key=key,
        label=label,
        forecast_payload=result,
        driver_snapshot=drivers.to_dict(),
        summary="first cut",
        created_by="finance",
    )


class _TickingClock:
    def __init__(self):
        self.now = datetime(2025, 1, 1, tzinfo=timezone.utc)

    def __call__(self):
        self.now += timedelta(seconds=1)
        return self.now


# ----- snapshot -----

def test_new_version_requires_label(drivers):
    with pytest.raises(ValueError):
        _draft(drivers, label="  ")


def test_new_version_detaches_driver_snapshot(drivers):
    snapshot = drivers.to_dict()
    draft = NewVersion("base", "A", run_forecast(drivers), snapshot)
    snapshot["growth_rate"] = 99.0
    assert draft.driver_snapshot["growth_rate"] == drivers.growth_rate


def test_snapshot_dict_round_trip(drivers):
    snap = VersionSnapshot.from_new(
        _draft(drivers), id="v_1", created_at=datetime(2025, 3, 1, tzinfo=timezone.utc)
    )
    assert VersionSnapshot.from_dict(snap.to_dict()) == snap


# ----- in-memory store -----

def test_save_then_list_round_trips_payload(example_drivers, memory_store):
    draft = _draft(example_drivers)

    async def scenario():
        saved = await memory_store.create(draft)
        return saved, await memory_store.list()

    saved, listed = asyncio.run(scenario())
    assert saved.id.startswith("v_")
    assert saved.created_at.tzinfo is not None
    match = [v for v in listed if v.id == saved.id]
    assert len(match) == 1
    assert match[0].forecast_payload == draft.forecast_payload


def test_list_is_newest_first(drivers):
    store = InMemoryVersionStore(clock=_TickingClock())

    async def scenario():
        a = await store.create(_draft(drivers, label="A"))
        b = await store.create(_draft(drivers, label="B"))
        return a, b, await store.list()

    a, b, listed = asyncio.run(scenario())
    assert [v.id for v in listed] == [b.id, a.id]


def test_list_is_newest_first_on_identical_timestamps(drivers):
    fixed = datetime(2025, 1, 1, tzinfo=timezone.utc)
    store = InMemoryVersionStore(clock=lambda: fixed)

    async def scenario():
        a = await store.create(_draft(drivers, label="A"))
        b = await store.create(_draft(drivers, label="B"))
        return a, b, await store.list()

    a, b, listed = asyncio.run(scenario())
    assert [v.id for v in listed] == [b.id, a.id]


def test_delete(drivers, memory_store):
    async def scenario():
        v = await memory_store.create(_draft(drivers))
        await memory_store.delete(v.id)
        return await memory_store.list()

    assert asyncio.run(scenario()) == []
    with pytest.raises(VersionNotFoundError):
        asyncio.run(memory_store.delete("v_missing"))
    with pytest.raises(VersionNotFoundError):
        asyncio.run(memory_store.get("v_missing"))


# ----- file store -----

def test_file_store_persists_across_instances(example_drivers, store_settings):
    draft = _draft(example_drivers)
    saved = asyncio.run(JsonFileVersionStore(store_settings).create(draft))

    reopened = JsonFileVersionStore(store_settings)
    listed = asyncio.run(reopened.list())
    assert [v.id for v in listed] == [saved.id]
    assert listed[0].forecast_payload == draft.forecast_payload
    assert listed[0].driver_snapshot == example_drivers.to_dict()
    assert asyncio.run(reopened.get(saved.id)) == saved


def test_file_store_newest_first_and_delete(drivers, store_settings):
    store = JsonFileVersionStore(store_settings, clock=_TickingClock())

    async def scenario():
        a = await store.create(_draft(drivers, label="A"))
        b = await store.create(_draft(drivers, label="B"))
        first = await store.list()
        await store.delete(a.id)
        return a, b, first, await store.list()

    a, b, first, after = asyncio.run(scenario())
    assert [v.id for v in first] == [b.id, a.id]
    assert [v.id for v in after] == [b.id]
    assert not (store_settings.root / f"{a.id}.json").exists()


def test_file_store_missing_id(store_settings):
    store = JsonFileVersionStore(store_settings)
    with pytest.raises(VersionNotFoundError):
        asyncio.run(store.get("v_nope"))
    with pytest.raises(VersionNotFoundError):
        asyncio.run(store.delete("../escape"))


def test_file_store_corrupt_document(store_settings):
    store_settings.root.mkdir(parents=True)
    (store_settings.root / "v_bad.json").write_text("{not json")
    with pytest.raises(StoreError, match="Corrupt"):
        asyncio.run(JsonFileVersionStore(store_settings).list())


# ----- retry wrapper -----

class _FlakyStore(VersionStore):
    def __init__(self, failures, exc=TransientStoreError):
        self.inner = InMemoryVersionStore()
        self.failures = failures
        self.exc = exc
        self.calls = 0

    async def list(self):
        self.calls += 1
        if self.calls <= self.failures:
            raise self.exc("boom")
        return await self.inner.list()


class _SlowStore(VersionStore):
    def __init__(self):
        self.calls = 0

    async def list(self):
        self.calls += 1
        await asyncio.sleep(10)
        return []


def test_retry_recovers_from_transient_failures(store_settings):
    flaky = _FlakyStore(failures=2)
    assert asyncio.run(RetryingVersionStore(flaky, store_settings).list()) == []
    assert flaky.calls == 3


def test_retry_gives_up_after_max_attempts(store_settings):
    flaky = _FlakyStore(failures=5)
    with pytest.raises(TransientStoreError):
        asyncio.run(RetryingVersionStore(flaky, store_settings).list())
    assert flaky.calls == store_settings.max_retries


def test_permanent_errors_are_not_retried(store_settings):
    flaky = _FlakyStore(failures=5, exc=VersionNotFoundError)
    with pytest.raises(VersionNotFoundError):
        asyncio.run(RetryingVersionStore(flaky, store_settings).list())
    assert flaky.calls == 1


def test_timeouts_become_transient_errors(store_settings):
    settings = store_settings.model_copy(update={"timeout_seconds": 0.01, "max_retries": 2})
    slow = _SlowStore()
    with pytest.raises(TransientStoreError, match="timed out"):
        asyncio.run(RetryingVersionStore(slow, settings).list())
    assert slow.calls == 2


class _SlowAckStore(InMemoryVersionStore):
    """Stores the record, then takes too long to acknowledge it."""

    def __init__(self, slow_calls=1):
        super().__init__()
        self.slow_calls = slow_calls
        self.calls = 0

    async def create(self, draft, *, version_id=None):
        snap = await super().create(draft, version_id=version_id)
        self.calls += 1
        if self.calls <= self.slow_calls:
            await asyncio.sleep(0.05)
        return snap


def test_timed_out_create_is_not_stored_twice(drivers, store_settings):
    settings = store_settings.model_copy(update={"timeout_seconds": 0.01, "max_retries": 3})
    inner = _SlowAckStore()
    store = RetryingVersionStore(inner, settings)

    async def scenario():
        saved = await store.create(_draft(drivers))
        return saved, await inner.list()

    saved, listed = asyncio.run(scenario())
    assert inner.calls == 2
    assert [v.id for v in listed] == [saved.id]


def test_create_that_never_acknowledges_stores_once(drivers, store_settings):
    settings = store_settings.model_copy(update={"timeout_seconds": 0.01, "max_retries": 3})
    inner = _SlowAckStore(slow_calls=99)
    store = RetryingVersionStore(inner, settings)

    with pytest.raises(TransientStoreError, match="timed out"):
        asyncio.run(store.create(_draft(drivers)))
    assert inner.calls == 3
    assert len(asyncio.run(inner.list())) == 1


def test_memory_store_create_is_idempotent_by_id(drivers, memory_store):
    async def scenario():
        a = await memory_store.create(_draft(drivers, label="A"), version_id="v_fixed")
        b = await memory_store.create(_draft(drivers, label="B"), version_id="v_fixed")
        return a, b, await memory_store.list()

    a, b, listed = asyncio.run(scenario())
    assert b == a
    assert b.label == "A"
    assert len(listed) == 1


def test_file_store_create_is_idempotent_by_id(drivers, store_settings):
    store = JsonFileVersionStore(store_settings)

    async def scenario():
        a = await store.create(_draft(drivers, label="A"), version_id="v_fixed")
        b = await store.create(_draft(drivers, label="B"), version_id="v_fixed")
        return a, b, await store.list()

    a, b, listed = asyncio.run(scenario())
    assert b == a
    assert len(listed) == 1
    assert [p.name for p in store_settings.root.glob("*.json")] == ["v_fixed.json"]


# ----- cache -----

def _snapshot(drivers, key, version_id, label="saved"):
    return VersionSnapshot.from_new(
        _draft(drivers, key=key, label=label),
        id=version_id,
        created_at=datetime(2025, 1, 1, tzinfo=timezone.utc),
    )


def test_fresh_computation_wins_until_reload(drivers, example_drivers):
    cache = ForecastCache()
    stored = _snapshot(drivers, "base", "v_1")
    fresh = run_forecast(example_drivers)

    cache.reload_stored("base", [stored])
    assert cache.current("base").origin == STORED

    cache.put_computed("base", fresh)
    entry = cache.current("base")
    assert entry.origin == COMPUTED
    assert entry.result == fresh

    entry = cache.reload_stored("base", [stored])
    assert entry.version_id == "v_1"
    assert cache.current("base").result == stored.forecast_payload


def test_reload_picks_newest_matching_version(drivers):
    cache = ForecastCache()
    newer = _snapshot(drivers, "base", "v_2")
    older = _snapshot(drivers, "base", "v_1")
    other = _snapshot(drivers, "aggressive", "v_3")
    assert cache.reload_stored("base", [other, newer, older]).version_id == "v_2"
    assert cache.reload_stored("conservative", [other]) is None
    assert cache.current("conservative") is None


def test_viewed_version_overrides_slot(drivers, example_drivers):
    cache = ForecastCache()
    cache.put_computed("base", run_forecast(example_drivers))
    viewed = _snapshot(drivers, "base", "v_9")

    cache.view_version(viewed)
    entry = cache.current("base")
    assert entry.origin == VIEWED
    assert entry.version_id == "v_9"
    assert cache.current("aggressive") is None

    cache.clear_view()
    assert cache.current("base").origin == COMPUTED


def test_new_computation_closes_viewed_version(drivers, example_drivers):
    cache = ForecastCache()
    cache.view_version(_snapshot(drivers, "base", "v_9"))
    fresh = run_forecast(example_drivers)

    cache.put_computed("base", fresh)
    assert cache.viewing is None
    entry = cache.current("base")
    assert entry.origin == COMPUTED
    assert entry.result == fresh


def test_keys_are_independent(drivers):
    cache = ForecastCache()
    r = run_forecast(drivers)
    cache.put_computed("base", r)
    cache.put_computed("aggressive", r)
    cache.invalidate("base")
    assert cache.current("base") is None
    assert cache.current("aggressive") is not None
