from __future__ import annotations

import re
from enum import Enum
from typing import List, Optional

from pydantic import Field

from .common import DocumentModel, ValueUnit
from .volume import VolumePattern


class OpexCategory(str, Enum):
    SALES_MARKETING = "sales_marketing"
    RD = "rd"
    GA = "ga"
    OTHER = "other"


_CATEGORY_KEYWORDS = (
    (OpexCategory.SALES_MARKETING, re.compile(r"sales|marketing|advertis|s&m", re.IGNORECASE)),
    (OpexCategory.RD, re.compile(r"r&d|research|development|engineering|product", re.IGNORECASE)),
    (OpexCategory.GA, re.compile(r"g&a|general|admin|rent|overhead", re.IGNORECASE)),
)


class UnitEconomics(DocumentModel):
    cogs_pct: Optional[ValueUnit] = Field(None, description="Cost of goods sold as a ratio of revenue")
    cac: Optional[ValueUnit] = Field(None, description="Acquisition cost per new customer or unit sale")


class CostStructure(DocumentModel):
    fixed_component: Optional[ValueUnit] = None
    variable_revenue_rate: Optional[ValueUnit] = None
    variable_volume_rate: Optional[ValueUnit] = None


class OpexItem(DocumentModel):
    name: str = ""
    category: Optional[OpexCategory] = None
    value: Optional[ValueUnit] = None
    cost_structure: Optional[CostStructure] = None
    monthly_increase: Optional[ValueUnit] = Field(None, description="Linear growth per period of the fixed amount")

    def resolved_category(self) -> OpexCategory:
        if self.category is not None:
            return self.category
        for category, pattern in _CATEGORY_KEYWORDS:
            if pattern.search(self.name):
                return category
        return OpexCategory.OTHER

    def fixed_amount(self) -> float:
        if self.value is not None:
            return self.value.value
        if self.cost_structure is not None and self.cost_structure.fixed_component is not None:
            return self.cost_structure.fixed_component.value
        return 0.0


class CapexItem(DocumentModel):
    name: str = ""
    initial_investment: Optional[ValueUnit] = Field(None, description="Lump sum landing on period 1")
    timeline: Optional[VolumePattern] = None
