from __future__ import annotations

import math

import pytest

from business_case_app.loader import parse_case
from business_case_app.models.results import MonthlyRow
from business_case_app.services.metrics import (
    MetricsAggregator,
    break_even_period,
    internal_rate_of_return,
    net_present_value,
)
from business_case_app.services.statement import StatementBuilder


def make_rows(cash_flows, revenue=0.0):
    rows = []
    cumulative = 0.0
    for index, cash_flow in enumerate(cash_flows):
        cumulative += cash_flow
        rows.append(
            MonthlyRow(
                period=index + 1,
                sales_volume=0,
                new_customers=0,
                existing_customers=0,
                unit_price=0,
                revenue=revenue,
                cogs=0,
                gross_profit=revenue,
                sales_marketing=0,
                rd=0,
                ga=0,
                other_opex=0,
                cac=0,
                total_cac=0,
                total_opex=0,
                ebitda=cash_flow,
                capex=0,
                net_cash_flow=cash_flow,
                cumulative_cash_flow=cumulative,
            )
        )
    return rows


def test_npv_discounts_from_first_period():
    assert net_present_value([100, 110], 0.1) == pytest.approx(200)
    assert net_present_value([100, 100, 100], 0.0) == 300


def test_npv_decreases_as_rate_rises():
    cash_flows = [-500, 200, 200, 200, 200, 200]
    rates = [0.0, 0.01, 0.05, 0.1, 0.2]
    values = [net_present_value(cash_flows, rate) for rate in rates]

    assert all(later < earlier for earlier, later in zip(values, values[1:]))


def test_irr_zeroes_npv():
    cash_flows = [-1000, 300, 300, 300, 300]
    irr = internal_rate_of_return(cash_flows)

    assert irr == pytest.approx(0.0771, abs=1e-4)
    assert net_present_value(cash_flows, irr) == pytest.approx(0, abs=1e-3)


def test_irr_is_none_without_sign_change():
    assert internal_rate_of_return([100, 200, 300]) is None
    assert internal_rate_of_return([-100, -200]) is None
    assert internal_rate_of_return([0, 0, 0]) is None
    assert internal_rate_of_return([]) is None


def test_irr_is_none_when_root_is_outside_bracket():
    # needs a periodic rate above 1000%
    assert internal_rate_of_return([-1, 100], upper=10.0) is None


def test_npv_saturates_near_minus_one_hundred_percent():
    assert net_present_value([-1000] + [10] * 199, -0.99) == math.inf
    assert net_present_value([100] + [-1] * 199, -0.99) == -math.inf


@pytest.mark.parametrize(
    "cash_flows",
    [
        [-1000] + [10] * 199,
        [100] + [-1] * 199,
    ],
)
def test_irr_over_long_horizon_brackets_a_root(cash_flows):
    irr = internal_rate_of_return(cash_flows)

    assert isinstance(irr, float)
    below = net_present_value(cash_flows, irr - 1e-4)
    above = net_present_value(cash_flows, irr + 1e-4)
    assert below * above < 0


def test_irr_with_alternating_long_flows_never_raises():
    cash_flows = [-5000] + [40, -10] * 99 + [20]
    irr = internal_rate_of_return(cash_flows)

    assert irr is None or -0.99 <= irr <= 10.0


def test_irr_over_long_horizon_without_root_is_none():
    # root sits above the bracket; the lower end overflows to the same sign
    cash_flows = [-1, 100] + [0] * 197 + [1e-6]

    assert internal_rate_of_return(cash_flows) is None


def test_break_even_period():
    assert break_even_period([-10, -5, 0, 3]) == 3
    assert break_even_period([-10, -5]) is None
    assert break_even_period([4, -1]) == 1


def test_summary_for_investment_profile(engine_settings):
    rows = make_rows([-1000, 300, 300, 300, 300], revenue=500)
    summary = MetricsAggregator(engine_settings).summarize(rows, 0.12)

    assert summary.total_revenue == 2500
    assert summary.net_profit == 200
    assert summary.break_even_month == 5
    assert summary.payback_period == 5
    assert summary.total_investment_required == 1000
    assert summary.roa == pytest.approx(0.2)
    assert summary.irr == pytest.approx(0.0771, abs=1e-4)
    assert summary.irr_annualized == pytest.approx((1 + summary.irr) ** 12 - 1)
    assert summary.npv == pytest.approx(net_present_value([-1000, 300, 300, 300, 300], 0.01))


def test_summary_without_break_even_reports_none(engine_settings):
    rows = make_rows([-100, -50, -20])
    summary = MetricsAggregator(engine_settings).summarize(rows, 0.1)

    assert summary.break_even_month is None
    assert summary.payback_period is None
    assert summary.irr is None


def test_summary_without_funding_need_has_no_roa(engine_settings):
    summary = MetricsAggregator(engine_settings).summarize(make_rows([10, 10]), 0.1)

    assert summary.total_investment_required == 0
    assert summary.roa is None
    assert summary.break_even_month == 1


def test_break_even_is_consistent_with_cumulative(engine_settings, example_document):
    example_document["assumptions"]["capex"] = [{"name": "Launch", "initial_investment": {"value": 40000}}]
    rows = StatementBuilder(engine_settings).build(parse_case(example_document))
    summary = MetricsAggregator(engine_settings).summarize(rows, 0.12)

    month = summary.break_even_month
    assert month is not None
    assert rows[month - 1].cumulative_cash_flow >= 0
    assert all(row.cumulative_cash_flow < 0 for row in rows[: month - 1])


def test_example_npv_falls_with_discount_rate(engine_settings, example_document):
    rows = StatementBuilder(engine_settings).build(parse_case(example_document))
    aggregator = MetricsAggregator(engine_settings)

    low = aggregator.summarize(rows, 0.05).npv
    high = aggregator.summarize(rows, 0.25).npv

    assert high < low


def test_long_horizon_with_upfront_investment(engine_settings, example_document):
    example_document["meta"]["periods"] = 180
    example_document["assumptions"]["capex"] = [{"name": "Fit-out", "initial_investment": {"value": 50000}}]
    rows = StatementBuilder(engine_settings).build(parse_case(example_document))
    summary = MetricsAggregator(engine_settings).summarize(rows, 0.12)

    assert len(rows) == 180
    assert rows[0].net_cash_flow < 0
    assert isinstance(summary.irr, float)
    assert summary.irr > 0
    assert math.isfinite(summary.npv)
    assert summary.break_even_month is not None
