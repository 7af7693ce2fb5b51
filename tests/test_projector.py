from dataclasses import replace

import numpy as np
import pytest

from core.config import ForecastConfig
from core.errors import DriverValidationError
from drivers.model import DEFAULT_DRIVERS
from engine.projector import project_monthly
from engine.result import ProjectionResult
from engine.runner import compare_scenarios, run_forecast
from scenarios.config import ScenarioConfig


def test_run_is_deterministic(example_drivers, base_scenario):
    a = run_forecast(example_drivers, base_scenario)
    b = run_forecast(example_drivers, base_scenario)
    assert a == b


def test_shapes(drivers):
    r = run_forecast(drivers)
    assert r.n_months == 36
    assert r.n_years == 3
    assert len(r.cumulative_ebitda) == 36
    assert len(r.yearly_ebitda_margin_pct) == 3


def test_cumulative_invariant(example_drivers):
    r = run_forecast(example_drivers)
    assert r.cumulative_ebitda[0] == r.monthly_ebitda[0]
    for i in range(1, r.n_months):
        assert r.cumulative_ebitda[i] == pytest.approx(r.cumulative_ebitda[i - 1] + r.monthly_ebitda[i])


@pytest.mark.parametrize("series", ["revenue", "cogs", "opex", "gross_profit", "ebitda"])
def test_yearly_rollup_invariant(example_drivers, series):
    r = run_forecast(example_drivers)
    monthly = getattr(r, f"monthly_{series}")
    yearly = getattr(r, f"yearly_{series}")
    for y in range(r.n_years):
        assert yearly[y] == pytest.approx(sum(monthly[12 * y: 12 * y + 12]))


def test_gross_profit_and_ebitda_identities(drivers):
    r = run_forecast(drivers)
    for i in range(r.n_months):
        assert r.monthly_gross_profit[i] == pytest.approx(r.monthly_revenue[i] - r.monthly_cogs[i])
        assert r.monthly_ebitda[i] == pytest.approx(r.monthly_gross_profit[i] - r.monthly_opex[i])


def test_concrete_base_example(example_drivers, base_scenario):
    r = run_forecast(example_drivers, base_scenario)
    premium = 1.0 + 0.05 * 0.15
    assert r.monthly_revenue[0] / premium == pytest.approx(480000 / 12 + 180000 / 12)
    assert r.monthly_revenue[0] / premium == pytest.approx(55000.0)

    be = r.break_even_month
    assert be is not None
    assert r.monthly_ebitda[be - 1] > 0
    assert example_drivers.starting_cash + r.cumulative_ebitda[be - 1] > 0


def test_zero_growth_and_churn_hold_revenue_flat_within_year(config):
    d = replace(DEFAULT_DRIVERS, growth_rate=0.0, churn_rate=0.0)
    m = project_monthly(d, config)
    assert np.allclose(m.revenue[:12], m.revenue[0])
    assert np.allclose(m.revenue[12:24], m.revenue[12])


def test_opex_formula(config):
    d = replace(DEFAULT_DRIVERS, productivity_multiplier=2.0, efficiency_multiplier=0.5)
    m = project_monthly(d, config)
    assert m.opex[0] == pytest.approx((600000 / 12 / 2.0 + 15000) / 0.5)


def test_zero_arpu_means_no_account_costs(config):
    d = replace(DEFAULT_DRIVERS, arpu=0.0)
    m = project_monthly(d, config)
    assert np.allclose(m.cogs, m.revenue * d.payment_processing_fee / 100.0)


def test_revshare_adjustment_scales_advertising(config):
    d = replace(DEFAULT_DRIVERS, subscription_revenue=(0.0, 0.0, 0.0), adoption_rate=0.0)
    plain = project_monthly(d, config)
    boosted = project_monthly(d, config, platform_revshare_adjustment=10.0)
    assert boosted.revenue[0] == pytest.approx(plain.revenue[0] * 1.1)


def test_scenario_scales_inputs_not_outputs(drivers):
    s = ScenarioConfig("cpm_up", "CPM up", cpm_multiplier=1.5)
    base = run_forecast(drivers)
    up = run_forecast(drivers, s)
    manual = run_forecast(replace(drivers, cpm=drivers.cpm * 1.5))
    assert up.monthly_revenue == manual.monthly_revenue
    assert up.monthly_revenue[0] > base.monthly_revenue[0]


def test_scenario_pushing_churn_past_100_is_rejected():
    d = replace(DEFAULT_DRIVERS, churn_rate=90.0)
    s = ScenarioConfig("harsh", "Harsh", churn_multiplier=1.2)
    with pytest.raises(DriverValidationError, match="churn_rate"):
        run_forecast(d, s)


def test_invalid_drivers_give_no_result():
    with pytest.raises(DriverValidationError):
        run_forecast(replace(DEFAULT_DRIVERS, cpm=float("inf")))


def test_zero_churn_ltv_fallback():
    r = run_forecast(replace(DEFAULT_DRIVERS, churn_rate=0.0))
    assert r.ltv == DEFAULT_DRIVERS.arpu * 24


def test_zero_cac_guard():
    r = run_forecast(replace(DEFAULT_DRIVERS, paid_cac=0.0, organic_cac=0.0))
    assert r.blended_cac == 0.0
    assert r.ltv_cac_ratio == 0.0
    assert r.payback_period == 0.0


def test_margins_are_zero_without_revenue():
    d = replace(
        DEFAULT_DRIVERS,
        subscription_revenue=(0.0, 0.0, 0.0),
        advertising_revenue=(0.0, 0.0, 0.0),
    )
    r = run_forecast(d)
    assert r.yearly_gross_margin_pct == (0.0, 0.0, 0.0)
    assert r.yearly_ebitda_margin_pct == (0.0, 0.0, 0.0)
    assert r.break_even_month is None


def test_longer_horizon():
    cfg = ForecastConfig(horizon_months=48, impressions_baseline=(1.0, 1.0, 1.0, 1.0))
    d = replace(
        DEFAULT_DRIVERS,
        subscription_revenue=(1.0, 2.0, 3.0, 4.0),
        advertising_revenue=(1.0, 2.0, 3.0, 4.0),
        impressions=(1.0, 1.0, 1.0, 1.0),
        hosting_cost_per_account=(12.0, 12.0, 12.0, 12.0),
        base_opex=(1.0, 1.0, 1.0, 1.0),
    )
    r = run_forecast(d, config=cfg)
    assert r.n_months == 48
    assert r.n_years == 4


def test_result_dict_round_trip(example_drivers):
    r = run_forecast(example_drivers)
    assert ProjectionResult.from_dict(r.to_dict()) == r


def test_frames(drivers):
    r = run_forecast(drivers)
    monthly = r.monthly_frame(2025)
    yearly = r.yearly_frame(2025)
    assert len(monthly) == 36
    assert monthly["period"].iloc[0] == "2025-01"
    assert monthly["period"].iloc[-1] == "2027-12"
    assert list(yearly["year"]) == [2025, 2026, 2027]


def test_compare_scenarios(drivers, scenario_table):
    df = compare_scenarios(drivers, scenario_table.active())
    assert list(df["scenario_key"]) == ["conservative", "base", "aggressive"]
    by_key = df.set_index("scenario_key")
    assert by_key.loc["aggressive", "total_revenue"] > by_key.loc["base", "total_revenue"]
    assert by_key.loc["base", "total_revenue"] > by_key.loc["conservative", "total_revenue"]
