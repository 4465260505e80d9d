"""One-at-a-time sensitivity analysis over declared drivers.

Each driver test value is applied to a fresh copy of the document, the
projection is rebuilt and its metrics are compared with a single shared
baseline. Drivers are independent of each other, so they are fanned out to a
thread pool; results come back in declaration order.
"""
from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union

from pydantic import ValidationError

from ..config import EngineSettings, settings as default_settings
from ..errors import BusinessCaseError, DriverPathError
from ..loader import load_document, parse_case, validate_driver_path
from ..models.case import BusinessCase, Driver
from ..models.results import (
    MetricsSummary,
    ScenarioPoint,
    SensitivityReport,
    SensitivityResult,
    SensitivityWarning,
)
from .calculator import BusinessCaseCalculator
from .paths import get_value, set_path

logger = logging.getLogger(__name__)

ScenarioFailure = (BusinessCaseError, ValidationError, ArithmeticError, TypeError, ValueError)


def impact_pct(metrics: MetricsSummary, baseline: MetricsSummary) -> float:
    if baseline.npv == 0:
        return 0.0
    return (metrics.npv - baseline.npv) / abs(baseline.npv)


class SensitivityEngine:
    def __init__(
        self,
        engine_settings: Optional[EngineSettings] = None,
        calculator: Optional[BusinessCaseCalculator] = None,
    ) -> None:
        self.settings = engine_settings or default_settings
        self.calculator = calculator or BusinessCaseCalculator(self.settings)

    def baseline(self, case: Union[BusinessCase, Mapping[str, Any]]) -> MetricsSummary:
        if not isinstance(case, BusinessCase):
            case = parse_case(case)
        _, metrics = self.calculator.evaluate(case)
        return metrics

    def run_driver(
        self,
        case: Union[BusinessCase, Mapping[str, Any]],
        driver: Driver,
        baseline: Optional[MetricsSummary] = None,
    ) -> List[ScenarioPoint]:
        document = load_document(case)
        if baseline is None:
            baseline = self.baseline(document)
        result, _ = self._evaluate_driver(document, driver, baseline)
        return result.scenarios

    def run_all(self, case: Union[BusinessCase, Mapping[str, Any]]) -> SensitivityReport:
        document = load_document(case)
        base_case = parse_case(document)
        baseline = self.baseline(base_case)
        drivers = base_case.drivers

        workers = min(self.settings.sensitivity_max_workers, len(drivers))
        if workers > 1:
            with ThreadPoolExecutor(max_workers=workers) as executor:
                outcomes = list(executor.map(lambda driver: self._evaluate_driver(document, driver, baseline), drivers))
        else:
            outcomes = [self._evaluate_driver(document, driver, baseline) for driver in drivers]

        results = [result for result, _ in outcomes]
        warnings = [warning for _, driver_warnings in outcomes for warning in driver_warnings]
        logger.info(
            "Sensitivity run over %d drivers: %d scenarios, %d warnings",
            len(drivers),
            sum(len(result.scenarios) for result in results),
            len(warnings),
        )
        return SensitivityReport(baseline=baseline, results=results, warnings=warnings)

    def _evaluate_driver(
        self,
        document: Dict[str, Any],
        driver: Driver,
        baseline: MetricsSummary,
    ) -> Tuple[SensitivityResult, List[SensitivityWarning]]:
        warnings: List[SensitivityWarning] = []
        result = SensitivityResult(driver_key=driver.key, path=driver.path, base_value=0.0, scenarios=[])
        try:
            validate_driver_path(document, driver)
        except DriverPathError as exc:
            logger.warning("Skipping driver %r: %s", driver.key, exc)
            warnings.append(SensitivityWarning(driver_key=driver.key, message=str(exc)))
            return result, warnings

        result.base_value = get_value(document, driver.path)
        for value in driver.range:
            try:
                modified = parse_case(set_path(document, driver.path, value))
                _, metrics = self.calculator.evaluate(modified)
            except ScenarioFailure as exc:
                logger.warning("Scenario %s=%r failed: %s", driver.key, value, exc)
                warnings.append(SensitivityWarning(driver_key=driver.key, value=value, message=str(exc)))
                continue
            result.scenarios.append(
                ScenarioPoint(
                    value=value,
                    total_revenue=metrics.total_revenue,
                    net_profit=metrics.net_profit,
                    npv=metrics.npv,
                    irr=metrics.irr,
                    payback_period=metrics.payback_period,
                    break_even_month=metrics.break_even_month,
                    roa=metrics.roa,
                    impact_pct=impact_pct(metrics, baseline),
                )
            )
        return result, warnings
