from __future__ import annotations

import pytest

from business_case_app.loader import parse_case
from business_case_app.sample_data import build_recurring_sample_case, build_sample_case
from business_case_app.services.calculator import BusinessCaseCalculator


def test_sample_case_generates_results(engine_settings):
    case = build_sample_case()
    result = BusinessCaseCalculator(engine_settings).run(case)

    assert len(result.monthly) == case.meta.periods == 60
    assert result.monthly[0].revenue > 0
    assert result.monthly[0].capex == pytest.approx(-60000)
    assert result.monthly[24].capex == pytest.approx(-15000)
    assert result.metrics.total_capex == pytest.approx(75000)
    assert result.metrics.total_investment_required > 0


def test_annual_summaries_cover_every_period(engine_settings):
    result = BusinessCaseCalculator(engine_settings).run(build_sample_case())

    assert [summary.year for summary in result.annual] == [1, 2, 3, 4, 5]
    assert result.annual[-1].last_period == 60
    assert sum(summary.revenue for summary in result.annual) == pytest.approx(result.metrics.total_revenue)
    assert result.annual[-1].ending_cumulative_cash_flow == result.monthly[-1].cumulative_cash_flow


def test_partial_final_year(engine_settings, example_document):
    example_document["meta"]["periods"] = 18
    result = BusinessCaseCalculator(engine_settings).run(parse_case(example_document))

    assert len(result.annual) == 2
    assert result.annual[1].first_period == 13
    assert result.annual[1].last_period == 18


def test_recurring_sample_tracks_churn(engine_settings):
    result = BusinessCaseCalculator(engine_settings).run(build_recurring_sample_case())
    first, second = result.monthly[0], result.monthly[1]

    assert first.sales_volume == 100
    assert first.new_customers == 100
    assert second.sales_volume == 105
    assert second.existing_customers == pytest.approx(97.5)
    assert second.new_customers == pytest.approx(7.5)
    assert first.capex == pytest.approx(-200000)
    assert result.monthly[12].capex == pytest.approx(-50000)


def test_metrics_agree_with_rows(engine_settings):
    case = build_recurring_sample_case()
    rows, metrics = BusinessCaseCalculator(engine_settings).evaluate(case)

    assert metrics.net_profit == pytest.approx(sum(row.net_cash_flow for row in rows))
    assert metrics.total_revenue == pytest.approx(sum(row.revenue for row in rows))
    assert metrics.net_profit == pytest.approx(rows[-1].cumulative_cash_flow)


def test_discount_rate_defaults_from_settings(engine_settings, example_document):
    del example_document["assumptions"]["financial"]
    calculator = BusinessCaseCalculator(engine_settings)

    assert calculator.discount_rate(parse_case(example_document)) == engine_settings.default_interest_rate


def test_runs_are_deterministic(engine_settings):
    calculator = BusinessCaseCalculator(engine_settings)

    first = calculator.run(build_sample_case()).model_dump()
    second = calculator.run(build_sample_case()).model_dump()

    assert first == second


def test_long_horizon_projection_runs(engine_settings, example_document):
    example_document["meta"]["periods"] = 180
    example_document["assumptions"]["capex"] = [{"name": "Fit-out", "initial_investment": {"value": 50000}}]
    result = BusinessCaseCalculator(engine_settings).run(parse_case(example_document))

    assert len(result.monthly) == 180
    assert len(result.annual) == 15
    assert result.metrics.irr is not None
    assert result.metrics.irr_annualized > result.metrics.irr
