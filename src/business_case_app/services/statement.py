from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional

from dateutil.relativedelta import relativedelta

from ..config import EngineSettings, settings as default_settings
from ..models.case import BusinessCase, PricingAssumptions
from ..models.common import BusinessModelType, Frequency, value_of
from ..models.costs import CapexItem, OpexCategory, OpexItem
from ..models.results import MonthlyRow
from .growth import GrowthExpander

logger = logging.getLogger(__name__)

_MONTHS_PER_PERIOD = {
    Frequency.MONTHLY: 1,
    Frequency.QUARTERLY: 3,
    Frequency.ANNUALLY: 12,
}


@dataclass
class VolumeSplit:
    total: List[float]
    new: List[float]
    existing: List[float]


class StatementBuilder:
    """Expands a business case into one pseudo P&L / cash flow row per period.

    Costs are carried as negative numbers so every subtotal is a plain sum.
    Missing assumptions read as zero; the builder never fails on partial input.
    """

    def __init__(self, engine_settings: Optional[EngineSettings] = None) -> None:
        self.settings = engine_settings or default_settings
        self.expander = GrowthExpander(self.settings)

    def periods_for(self, case: BusinessCase) -> int:
        return case.meta.periods or self.settings.default_periods

    def build(self, case: BusinessCase) -> List[MonthlyRow]:
        periods = self.periods_for(case)
        assumptions = case.assumptions
        volumes = self._compute_volumes(case, periods)
        prices = self._compute_prices(assumptions.pricing, periods)
        capex_schedule = self._compute_capex(assumptions.capex, periods)

        cogs_pct = value_of(assumptions.unit_economics.cogs_pct)
        cac = value_of(assumptions.unit_economics.cac)
        start_date = case.meta.start_date
        step = _MONTHS_PER_PERIOD.get(case.meta.frequency, 1)

        rows: List[MonthlyRow] = []
        cumulative = 0.0
        for index in range(periods):
            sales_volume = volumes.total[index]
            new_customers = volumes.new[index]
            unit_price = prices[index]

            revenue = sales_volume * unit_price
            cogs = -revenue * cogs_pct
            gross_profit = revenue + cogs

            subtotals = self._compute_opex(assumptions.opex, index, revenue, sales_volume)
            # only newly acquired customers cost CAC; under unit sales every sale is new
            total_cac = -new_customers * cac
            total_opex = sum(subtotals.values()) + total_cac

            ebitda = gross_profit + total_opex
            capex = capex_schedule[index]
            net_cash_flow = ebitda + capex
            cumulative += net_cash_flow

            rows.append(
                MonthlyRow(
                    period=index + 1,
                    period_start=start_date + relativedelta(months=index * step) if start_date else None,
                    sales_volume=sales_volume,
                    new_customers=new_customers,
                    existing_customers=volumes.existing[index],
                    unit_price=unit_price,
                    revenue=revenue,
                    cogs=cogs,
                    gross_profit=gross_profit,
                    sales_marketing=subtotals[OpexCategory.SALES_MARKETING],
                    rd=subtotals[OpexCategory.RD],
                    ga=subtotals[OpexCategory.GA],
                    other_opex=subtotals[OpexCategory.OTHER],
                    cac=cac,
                    total_cac=total_cac,
                    total_opex=total_opex,
                    ebitda=ebitda,
                    capex=capex,
                    net_cash_flow=net_cash_flow,
                    cumulative_cash_flow=cumulative,
                )
            )
        logger.debug("Built %d statement rows for %r", len(rows), case.meta.title)
        return rows

    def _compute_volumes(self, case: BusinessCase, periods: int) -> VolumeSplit:
        customers = case.assumptions.customers
        growth = case.assumptions.growth_settings
        recurring = case.meta.business_model == BusinessModelType.RECURRING
        default_churn = value_of(customers.churn_pct)

        total = [0.0] * periods
        new = [0.0] * periods
        existing = [0.0] * periods
        for segment in customers.segments:
            series = self.expander.expand(segment.volume, periods, growth)
            churn = value_of(segment.churn_pct, default_churn)
            for index, volume in enumerate(series):
                total[index] += volume
                if recurring and index > 0:
                    retained = min(volume, series[index - 1] * (1 - churn))
                    retained = max(0.0, retained)
                    existing[index] += retained
                    new[index] += volume - retained
                else:
                    new[index] += volume
        return VolumeSplit(total=total, new=new, existing=existing)

    def _compute_prices(self, pricing: PricingAssumptions, periods: int) -> List[float]:
        base_price = value_of(pricing.avg_unit_price) * (1 - value_of(pricing.discount_pct))
        adjustments = pricing.yearly_adjustments
        if adjustments is None:
            return [base_price] * periods
        prices = []
        for index in range(periods):
            override = adjustments.override_for(index + 1)
            if override is not None:
                prices.append(override)
            else:
                prices.append(base_price * adjustments.factor_for_year(index // 12 + 1))
        return prices

    def _compute_opex(
        self,
        opex: List[OpexItem],
        index: int,
        revenue: float,
        sales_volume: float,
    ) -> Dict[OpexCategory, float]:
        subtotals: Dict[OpexCategory, float] = {category: 0.0 for category in OpexCategory}
        for position, item in enumerate(opex):
            amount = self._opex_amount(item, position, index, revenue, sales_volume)
            subtotals[item.resolved_category()] -= amount
        return subtotals

    def _opex_amount(
        self,
        item: OpexItem,
        position: int,
        index: int,
        revenue: float,
        sales_volume: float,
    ) -> float:
        has_fixed = item.value is not None or (
            item.cost_structure is not None and item.cost_structure.fixed_component is not None
        )
        amount = item.fixed_amount()
        if has_fixed:
            if item.monthly_increase is not None:
                increase = item.monthly_increase.value
            else:
                increase = self.settings.opex_increase_for(position)
            amount += increase * index
        structure = item.cost_structure
        if structure is not None:
            amount += value_of(structure.variable_revenue_rate) * revenue
            amount += value_of(structure.variable_volume_rate) * sales_volume
        return amount

    def _compute_capex(self, items: List[CapexItem], periods: int) -> List[float]:
        schedule = [0.0] * periods
        for item in items:
            if item.initial_investment is not None and periods > 0:
                schedule[0] -= item.initial_investment.value
            if item.timeline is not None:
                amounts = self.expander.expand(item.timeline, periods, round_values=False)
                for index, amount in enumerate(amounts):
                    schedule[index] -= amount
        return schedule

