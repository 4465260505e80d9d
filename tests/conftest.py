from __future__ import annotations

from typing import Any, Dict

import pytest

from business_case_app.config import EngineSettings


def vu(value: Any, unit: str = "", rationale: str = "") -> Dict[str, Any]:
    return {"value": value, "unit": unit, "rationale": rationale}


@pytest.fixture
def engine_settings() -> EngineSettings:
    return EngineSettings(sensitivity_max_workers=1)


@pytest.fixture
def example_document() -> Dict[str, Any]:
    """Twelve months, one geometric segment, one opex line, no capex."""
    return {
        "meta": {
            "title": "Example",
            "currency": "EUR",
            "periods": 12,
            "frequency": "monthly",
            "business_model": "unit_sales",
            "start_date": "2025-01-01",
        },
        "assumptions": {
            "pricing": {"avg_unit_price": vu(10, "EUR_per_unit", "list price")},
            "financial": {"interest_rate": vu(0.12, "ratio", "hurdle rate")},
            "customers": {
                "segments": [
                    {
                        "id": "core",
                        "label": "Core",
                        "volume": {
                            "type": "pattern",
                            "pattern_type": "geom_growth",
                            "start": vu(1000, "units"),
                            "monthly_growth": vu(0.05, "ratio"),
                        },
                    }
                ]
            },
            "unit_economics": {"cogs_pct": vu(0.3, "ratio")},
            "opex": [{"name": "Operations", "value": vu(1000, "EUR_per_month", "rent")}],
            "capex": [],
        },
        "drivers": [
            {
                "key": "price",
                "path": "assumptions.pricing.avg_unit_price.value",
                "range": [5, 7.5, 10, 12.5, 15],
                "rationale": "price test",
            }
        ],
    }
