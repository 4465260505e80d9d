from __future__ import annotations

from enum import Enum
from typing import List, Optional

from pydantic import Field

from .common import DocumentModel, IndexValueUnit, SeriesPoint, ValueUnit


class SeriesType(str, Enum):
    PATTERN = "pattern"
    TIME_SERIES = "time_series"


class PatternType(str, Enum):
    GEOM_GROWTH = "geom_growth"
    LINEAR_GROWTH = "linear_growth"
    SEASONAL_GROWTH = "seasonal_growth"


class YearFactor(DocumentModel):
    year: int = Field(1, description="1-based projection year")
    factor: float = 1.0
    rationale: str = ""


class VolumeOverride(DocumentModel):
    period: int = 1
    volume: float = 0.0
    rationale: str = ""


class VolumeAdjustments(DocumentModel):
    volume_factors: List[YearFactor] = Field(default_factory=list)
    volume_overrides: List[VolumeOverride] = Field(default_factory=list)

    def factor_for_year(self, year: int) -> float:
        factor = 1.0
        for entry in self.volume_factors:
            if entry.year == year:
                factor *= entry.factor
        return factor

    def override_for(self, period: int) -> Optional[float]:
        for entry in self.volume_overrides:
            if entry.period == period:
                return entry.volume
        return None


class VolumePattern(DocumentModel):
    type: SeriesType = SeriesType.PATTERN
    pattern_type: Optional[PatternType] = None
    series: List[SeriesPoint] = Field(default_factory=list)
    start: Optional[ValueUnit] = None
    monthly_growth: Optional[ValueUnit] = Field(None, description="Geometric growth per period, ratio")
    monthly_flat_increase: Optional[ValueUnit] = Field(None, description="Linear increment per period")
    base_year_total: Optional[ValueUnit] = None
    seasonality_index_12: Optional[IndexValueUnit] = Field(None, description="Twelve multipliers averaging 1.0")
    yoy_growth: Optional[ValueUnit] = None
    yearly_adjustments: Optional[VolumeAdjustments] = None

    def starting_value(self) -> Optional[float]:
        if self.start is not None:
            return self.start.value
        if self.series:
            return self.series[0].value
        return None


class Segment(DocumentModel):
    id: str = ""
    label: str = ""
    kind: Optional[str] = None
    rationale: str = ""
    churn_pct: Optional[ValueUnit] = Field(None, description="Overrides the customer-level churn for this segment")
    volume: Optional[VolumePattern] = None


class CustomerAssumptions(DocumentModel):
    churn_pct: Optional[ValueUnit] = Field(None, description="Monthly logo churn, ratio")
    segments: List[Segment] = Field(default_factory=list)


class GeomGrowthSettings(DocumentModel):
    start: Optional[ValueUnit] = None
    monthly_growth: Optional[ValueUnit] = None


class LinearGrowthSettings(DocumentModel):
    start: Optional[ValueUnit] = None
    monthly_flat_increase: Optional[ValueUnit] = None


class SeasonalGrowthSettings(DocumentModel):
    base_year_total: Optional[ValueUnit] = None
    seasonality_index_12: Optional[IndexValueUnit] = None
    yoy_growth: Optional[ValueUnit] = None


class GrowthSettings(DocumentModel):
    geom_growth: Optional[GeomGrowthSettings] = None
    linear_growth: Optional[LinearGrowthSettings] = None
    seasonal_growth: Optional[SeasonalGrowthSettings] = None
