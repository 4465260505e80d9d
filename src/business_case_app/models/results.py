from __future__ import annotations

from datetime import date
from typing import List, Optional

from pydantic import BaseModel, Field


class MonthlyRow(BaseModel):
    period: int
    period_start: Optional[date] = None
    sales_volume: float
    new_customers: float
    existing_customers: float
    unit_price: float
    revenue: float
    cogs: float
    gross_profit: float
    sales_marketing: float
    rd: float
    ga: float
    other_opex: float
    cac: float
    total_cac: float
    total_opex: float
    ebitda: float
    capex: float
    net_cash_flow: float
    cumulative_cash_flow: float


class AnnualSummary(BaseModel):
    year: int
    first_period: int
    last_period: int
    sales_volume: float
    revenue: float
    cogs: float
    gross_profit: float
    total_opex: float
    ebitda: float
    capex: float
    net_cash_flow: float
    ending_cumulative_cash_flow: float


class MetricsSummary(BaseModel):
    total_revenue: float
    total_costs: float
    total_capex: float
    net_profit: float
    npv: float
    irr: Optional[float] = Field(None, description="Periodic (monthly) rate; None when cash flows never change sign")
    irr_annualized: Optional[float] = None
    payback_period: Optional[int] = None
    break_even_month: Optional[int] = None
    total_investment_required: float
    roa: Optional[float] = None


class ProjectionResult(BaseModel):
    monthly: List[MonthlyRow]
    annual: List[AnnualSummary]
    metrics: MetricsSummary


class ScenarioPoint(BaseModel):
    value: float
    total_revenue: float
    net_profit: float
    npv: float
    irr: Optional[float] = None
    payback_period: Optional[int] = None
    break_even_month: Optional[int] = None
    roa: Optional[float] = None
    impact_pct: float = Field(..., description="NPV change against the baseline, normalised by |baseline NPV|")


class SensitivityResult(BaseModel):
    driver_key: str
    path: str
    base_value: float
    scenarios: List[ScenarioPoint]


class SensitivityWarning(BaseModel):
    driver_key: str
    value: Optional[float] = None
    message: str


class SensitivityReport(BaseModel):
    baseline: MetricsSummary
    results: List[SensitivityResult]
    warnings: List[SensitivityWarning] = Field(default_factory=list)
