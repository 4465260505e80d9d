from __future__ import annotations

import logging
import math
from typing import List, Optional, Sequence

from ..config import EngineSettings, settings as default_settings
from ..models.results import MetricsSummary, MonthlyRow

logger = logging.getLogger(__name__)


def net_present_value(cash_flows: Sequence[float], periodic_rate: float) -> float:
    """Discount ``cash_flows`` with the first period at t=0.

    Rates close to -100% blow the discount factors up; the result then
    saturates to +/-inf with the sign of the latest non-zero cash flow, which
    is the one with the largest factor.
    """
    try:
        return sum(cf * (1 + periodic_rate) ** -t for t, cf in enumerate(cash_flows))
    except OverflowError:
        dominant = next((cf for cf in reversed(cash_flows) if cf != 0), 0.0)
        return math.copysign(math.inf, dominant) if dominant else 0.0


def internal_rate_of_return(
    cash_flows: Sequence[float],
    lower: float = -0.99,
    upper: float = 10.0,
    tolerance: float = 1e-7,
    max_iterations: int = 200,
) -> Optional[float]:
    """Periodic IRR by bisection over ``[lower, upper]``.

    Returns ``None`` when the flows never change sign or the NPV does not
    change sign across the bracket.
    """
    signs = {cf > 0 for cf in cash_flows if cf != 0}
    if len(signs) < 2:
        return None

    npv_lower = net_present_value(cash_flows, lower)
    npv_upper = net_present_value(cash_flows, upper)
    if npv_lower == 0:
        return lower
    if npv_upper == 0:
        return upper
    if npv_lower * npv_upper > 0:
        return None

    mid = (lower + upper) / 2
    for _ in range(max_iterations):
        mid = (lower + upper) / 2
        npv_mid = net_present_value(cash_flows, mid)
        if abs(npv_mid) < tolerance or (upper - lower) / 2 < tolerance:
            return mid
        if npv_lower * npv_mid < 0:
            upper = mid
        else:
            lower, npv_lower = mid, npv_mid
    return mid


def break_even_period(cumulative: Sequence[float]) -> Optional[int]:
    for index, value in enumerate(cumulative):
        if value >= 0:
            return index + 1
    return None


class MetricsAggregator:
    def __init__(self, engine_settings: Optional[EngineSettings] = None) -> None:
        self.settings = engine_settings or default_settings

    def summarize(self, rows: List[MonthlyRow], discount_rate_annual: float) -> MetricsSummary:
        cash_flows = [row.net_cash_flow for row in rows]
        cumulative = [row.cumulative_cash_flow for row in rows]

        total_revenue = sum(row.revenue for row in rows)
        total_costs = -sum(row.cogs + row.total_opex for row in rows)
        total_capex = -sum(row.capex for row in rows)
        net_profit = sum(cash_flows)

        npv = net_present_value(cash_flows, discount_rate_annual / 12)
        irr = internal_rate_of_return(
            cash_flows,
            lower=self.settings.irr_lower_bound,
            upper=self.settings.irr_upper_bound,
            tolerance=self.settings.irr_tolerance,
            max_iterations=self.settings.irr_max_iterations,
        )
        irr_annualized = (1 + irr) ** 12 - 1 if irr is not None else None

        break_even = break_even_period(cumulative)
        total_investment_required = max(0.0, -min(cumulative, default=0.0))
        roa = net_profit / total_investment_required if total_investment_required > 0 else None

        if irr is None:
            logger.debug("No IRR for %d cash flows", len(cash_flows))

        return MetricsSummary(
            total_revenue=total_revenue,
            total_costs=total_costs,
            total_capex=total_capex,
            net_profit=net_profit,
            npv=npv,
            irr=irr,
            irr_annualized=irr_annualized,
            payback_period=break_even,
            break_even_month=break_even,
            total_investment_required=total_investment_required,
            roa=roa,
        )
