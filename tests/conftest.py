import sys
from dataclasses import replace
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from core.config import ForecastConfig, StoreSettings  # noqa: E402
from drivers.model import DEFAULT_DRIVERS  # noqa: E402
from scenarios.config import neutral_scenario  # noqa: E402
from scenarios.table import StaticScenarioSource, get_default_scenarios  # noqa: E402
from versioning.store import InMemoryVersionStore  # noqa: E402


@pytest.fixture
def config():
    return ForecastConfig()


@pytest.fixture
def drivers():
    return DEFAULT_DRIVERS


@pytest.fixture
def example_drivers():
    """Documented defaults with 8% monthly growth."""
    return replace(DEFAULT_DRIVERS, growth_rate=8.0)


@pytest.fixture
def base_scenario():
    return neutral_scenario()


@pytest.fixture
def scenario_table():
    return get_default_scenarios()


@pytest.fixture
def scenario_source(scenario_table):
    return StaticScenarioSource(scenario_table)


@pytest.fixture
def memory_store():
    return InMemoryVersionStore()


@pytest.fixture
def store_settings(tmp_path):
    return StoreSettings(
        root=tmp_path / "versions",
        timeout_seconds=1.0,
        max_retries=3,
        backoff_base=0.0,
        backoff_max=0.0,
    )
