import asyncio

import pandas as pd
import pytest

from core.errors import DuplicateScenarioError, ScenarioNotFoundError
from drivers.model import DEFAULT_DRIVERS
from scenarios.apply import apply_scenario
from scenarios.config import ScenarioConfig, neutral_scenario
from scenarios.table import ScenarioTable, StaticScenarioSource


def test_default_table_order(scenario_table):
    assert scenario_table.keys() == ["conservative", "base", "aggressive"]
    assert len(scenario_table) == 3
    assert "base" in scenario_table


def test_unknown_key_does_not_fall_back(scenario_table):
    with pytest.raises(ScenarioNotFoundError) as exc:
        scenario_table.get("optimistic")
    assert exc.value.scenario_key == "optimistic"
    assert "base" in exc.value.available


def test_duplicate_keys_rejected():
    with pytest.raises(DuplicateScenarioError):
        ScenarioTable([neutral_scenario("base"), neutral_scenario("base")])


def test_sort_order_then_insertion():
    table = ScenarioTable([
        ScenarioConfig("b", "B", sort_order=1),
        ScenarioConfig("a", "A", sort_order=1),
        ScenarioConfig("z", "Z", sort_order=0),
    ])
    assert table.keys() == ["z", "b", "a"]


def test_negative_multiplier_rejected():
    with pytest.raises(ValueError, match="growth_multiplier"):
        ScenarioConfig("bad", "Bad", growth_multiplier=-1.0)


def test_from_dataframe_fills_defaults():
    df = pd.DataFrame([
        {"scenario_key": "down", "label": "Downside", "churn_multiplier": 1.5, "sort_order": 2},
        {"scenario_key": "flat", "label": "Flat", "churn_multiplier": None, "sort_order": 1},
    ])
    table = ScenarioTable.from_dataframe(df)
    assert table.keys() == ["flat", "down"]
    assert table.get("flat").churn_multiplier == 1.0
    assert table.get("down").churn_multiplier == 1.5


def test_neutral_scenario_leaves_drivers_unchanged():
    scaled = apply_scenario(DEFAULT_DRIVERS, neutral_scenario())
    assert scaled.drivers == DEFAULT_DRIVERS
    assert scaled.platform_revshare_adjustment == 0.0


def test_apply_scales_inputs():
    s = ScenarioConfig(
        "x", "X",
        growth_multiplier=2.0,
        churn_multiplier=0.5,
        cac_multiplier=2.0,
        impressions_multiplier=0.5,
        market_adoption_multiplier=2.0,
        platform_revshare_adjustment=3.0,
    )
    scaled = apply_scenario(DEFAULT_DRIVERS, s)
    d = scaled.drivers
    assert d.growth_rate == pytest.approx(8.0)
    assert d.churn_rate == pytest.approx(2.5)
    assert d.paid_cac == pytest.approx(90.0)
    assert d.organic_cac == pytest.approx(30.0)
    assert d.adoption_rate == pytest.approx(10.0)
    assert d.impressions == pytest.approx((6e6, 18e6, 45e6))
    assert d.arpu == DEFAULT_DRIVERS.arpu
    assert scaled.platform_revshare_adjustment == 3.0


def test_static_source_hides_inactive():
    table = ScenarioTable([neutral_scenario("base"), neutral_scenario("old", is_active=False)])
    source = StaticScenarioSource(table)

    active = asyncio.run(source.list_active())
    assert [s.scenario_key for s in active] == ["base"]
    with pytest.raises(ScenarioNotFoundError):
        asyncio.run(source.get("old"))
