from __future__ import annotations

import logging
import math
from typing import Dict, List, Optional

from ..config import EngineSettings, settings as default_settings
from ..models.common import IndexValueUnit, ValueUnit
from ..models.volume import GrowthSettings, PatternType, SeriesType, VolumePattern

logger = logging.getLogger(__name__)

FLAT_SEASONALITY = [1.0] * 12


def _round_half_up(value: float) -> float:
    if not math.isfinite(value):
        return value
    return float(math.floor(value + 0.5))


def _first_value(*candidates: Optional[ValueUnit]) -> Optional[float]:
    for candidate in candidates:
        if candidate is not None:
            return candidate.value
    return None


def _first_index(*candidates: Optional[IndexValueUnit]) -> List[float]:
    for candidate in candidates:
        if candidate is not None and candidate.value:
            return list(candidate.value)
    return FLAT_SEASONALITY


class GrowthExpander:
    """Turns a declared volume pattern into one value per period.

    Output is non-negative and, unless ``round_values`` is off, rounded to
    whole units. Parameters missing on the pattern fall back to the case-wide
    growth settings and then to the engine defaults.
    """

    def __init__(self, engine_settings: Optional[EngineSettings] = None) -> None:
        self.settings = engine_settings or default_settings

    def expand(
        self,
        pattern: Optional[VolumePattern],
        periods: int,
        growth_settings: Optional[GrowthSettings] = None,
        round_values: bool = True,
    ) -> List[float]:
        if pattern is None or periods <= 0:
            return [0.0] * max(periods, 0)
        growth = growth_settings or GrowthSettings()

        if pattern.type == SeriesType.TIME_SERIES:
            raw = self._time_series(pattern, periods)
        elif pattern.pattern_type == PatternType.GEOM_GROWTH:
            raw = self._geometric(pattern, periods, growth)
        elif pattern.pattern_type == PatternType.LINEAR_GROWTH:
            raw = self._linear(pattern, periods, growth)
        elif pattern.pattern_type == PatternType.SEASONAL_GROWTH:
            raw = self._seasonal(pattern, periods, growth)
        else:
            start = pattern.starting_value() or 0.0
            raw = [start] * periods

        adjusted = self._apply_adjustments(pattern, raw)
        logger.debug("Expanded %s/%s volume over %d periods", pattern.type.value, pattern.pattern_type, periods)
        if round_values:
            return [max(0.0, _round_half_up(value)) for value in adjusted]
        return [max(0.0, value) for value in adjusted]

    def _time_series(self, pattern: VolumePattern, periods: int) -> List[float]:
        by_period: Dict[int, float] = {}
        for point in pattern.series:
            by_period[point.period] = point.value
        return [by_period.get(period, 0.0) for period in range(1, periods + 1)]

    def _geometric(self, pattern: VolumePattern, periods: int, growth: GrowthSettings) -> List[float]:
        defaults = growth.geom_growth
        start = pattern.starting_value()
        if start is None:
            start = _first_value(defaults.start if defaults else None) or 0.0
        rate = _first_value(pattern.monthly_growth, defaults.monthly_growth if defaults else None)
        if rate is None:
            rate = self.settings.default_monthly_growth
        return [start * (1 + rate) ** i for i in range(periods)]

    def _linear(self, pattern: VolumePattern, periods: int, growth: GrowthSettings) -> List[float]:
        defaults = growth.linear_growth
        start = pattern.starting_value()
        if start is None:
            start = _first_value(defaults.start if defaults else None) or 0.0
        increment = _first_value(pattern.monthly_flat_increase, defaults.monthly_flat_increase if defaults else None)
        if increment is None:
            increment = self.settings.default_monthly_flat_increase
        return [start + increment * i for i in range(periods)]

    def _seasonal(self, pattern: VolumePattern, periods: int, growth: GrowthSettings) -> List[float]:
        defaults = growth.seasonal_growth
        base_year_total = _first_value(pattern.base_year_total, defaults.base_year_total if defaults else None)
        if base_year_total is None:
            base_year_total = (pattern.starting_value() or 0.0) * 12
        index = _first_index(pattern.seasonality_index_12, defaults.seasonality_index_12 if defaults else None)
        yoy = _first_value(pattern.yoy_growth, defaults.yoy_growth if defaults else None)
        if yoy is None:
            yoy = self.settings.default_yoy_growth

        monthly_base = base_year_total / 12
        values = []
        for i in range(periods):
            month = i % 12
            seasonal = index[month] if month < len(index) else 1.0
            values.append(monthly_base * seasonal * (1 + yoy) ** (i // 12))
        return values

    def _apply_adjustments(self, pattern: VolumePattern, values: List[float]) -> List[float]:
        adjustments = pattern.yearly_adjustments
        if adjustments is None:
            return values
        adjusted = []
        for i, value in enumerate(values):
            override = adjustments.override_for(i + 1)
            if override is not None:
                adjusted.append(override)
            else:
                adjusted.append(value * adjustments.factor_for_year(i // 12 + 1))
        return adjusted
