from __future__ import annotations

from typing import List, Optional, Tuple

from ..config import EngineSettings, settings as default_settings
from ..models.case import BusinessCase
from ..models.results import AnnualSummary, MetricsSummary, MonthlyRow, ProjectionResult
from .metrics import MetricsAggregator
from .statement import StatementBuilder

PERIODS_PER_YEAR = 12


class BusinessCaseCalculator:
    def __init__(self, engine_settings: Optional[EngineSettings] = None) -> None:
        self.settings = engine_settings or default_settings
        self.builder = StatementBuilder(self.settings)
        self.aggregator = MetricsAggregator(self.settings)

    def discount_rate(self, case: BusinessCase) -> float:
        interest_rate = case.assumptions.financial.interest_rate
        if interest_rate is None:
            return self.settings.default_interest_rate
        return interest_rate.value

    def evaluate(self, case: BusinessCase) -> Tuple[List[MonthlyRow], MetricsSummary]:
        rows = self.builder.build(case)
        metrics = self.aggregator.summarize(rows, self.discount_rate(case))
        return rows, metrics

    def run(self, case: BusinessCase) -> ProjectionResult:
        rows, metrics = self.evaluate(case)
        return ProjectionResult(monthly=rows, annual=self._build_annual_summaries(rows), metrics=metrics)

    def _build_annual_summaries(self, rows: List[MonthlyRow]) -> List[AnnualSummary]:
        summaries: List[AnnualSummary] = []
        for start in range(0, len(rows), PERIODS_PER_YEAR):
            year_rows = rows[start:start + PERIODS_PER_YEAR]
            summaries.append(
                AnnualSummary(
                    year=start // PERIODS_PER_YEAR + 1,
                    first_period=year_rows[0].period,
                    last_period=year_rows[-1].period,
                    sales_volume=sum(row.sales_volume for row in year_rows),
                    revenue=sum(row.revenue for row in year_rows),
                    cogs=sum(row.cogs for row in year_rows),
                    gross_profit=sum(row.gross_profit for row in year_rows),
                    total_opex=sum(row.total_opex for row in year_rows),
                    ebitda=sum(row.ebitda for row in year_rows),
                    capex=sum(row.capex for row in year_rows),
                    net_cash_flow=sum(row.net_cash_flow for row in year_rows),
                    ending_cumulative_cash_flow=year_rows[-1].cumulative_cash_flow,
                )
            )
        return summaries
