from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import Field

from .common import BusinessMeta, DocumentModel, ValueUnit
from .costs import CapexItem, OpexItem, UnitEconomics
from .volume import CustomerAssumptions, GrowthSettings, YearFactor


class PriceOverride(DocumentModel):
    period: int = 1
    price: float = 0.0
    rationale: str = ""


class PriceAdjustments(DocumentModel):
    pricing_factors: List[YearFactor] = Field(default_factory=list)
    price_overrides: List[PriceOverride] = Field(default_factory=list)

    def factor_for_year(self, year: int) -> float:
        factor = 1.0
        for entry in self.pricing_factors:
            if entry.year == year:
                factor *= entry.factor
        return factor

    def override_for(self, period: int) -> Optional[float]:
        for entry in self.price_overrides:
            if entry.period == period:
                return entry.price
        return None


class PricingAssumptions(DocumentModel):
    avg_unit_price: Optional[ValueUnit] = None
    discount_pct: Optional[ValueUnit] = Field(None, description="Average effective discount, ratio")
    yearly_adjustments: Optional[PriceAdjustments] = None


class FinancialAssumptions(DocumentModel):
    interest_rate: Optional[ValueUnit] = Field(None, description="Annual discount rate, ratio")


class Assumptions(DocumentModel):
    pricing: PricingAssumptions = Field(default_factory=PricingAssumptions)
    financial: FinancialAssumptions = Field(default_factory=FinancialAssumptions)
    customers: CustomerAssumptions = Field(default_factory=CustomerAssumptions)
    unit_economics: UnitEconomics = Field(default_factory=UnitEconomics)
    opex: List[OpexItem] = Field(default_factory=list)
    capex: List[CapexItem] = Field(default_factory=list)
    growth_settings: GrowthSettings = Field(default_factory=GrowthSettings)


class Driver(DocumentModel):
    key: str
    path: str
    range: List[float] = Field(default_factory=list, description="Test values, conventionally low to high")
    rationale: str = ""


class BusinessCase(DocumentModel):
    schema_version: Optional[str] = None
    meta: BusinessMeta = Field(default_factory=BusinessMeta)
    assumptions: Assumptions = Field(default_factory=Assumptions)
    drivers: List[Driver] = Field(default_factory=list)

    def to_document(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", exclude_unset=True)
