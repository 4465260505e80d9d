from __future__ import annotations

import copy
from typing import Any, Dict

from .loader import load_business_case
from .models.case import BusinessCase


def _vu(value: Any, unit: str, rationale: str) -> Dict[str, Any]:
    return {"value": value, "unit": unit, "rationale": rationale}


_ICE_CREAM_SHOP: Dict[str, Any] = {
    "schema_version": "0.3",
    "meta": {
        "title": "Iconic Ice Cream Helsinki",
        "description": "Central artisanal ice cream shop with strong summer seasonality over a steady local baseline.",
        "archetype": "transactional",
        "business_model": "unit_sales",
        "currency": "EUR",
        "periods": 60,
        "frequency": "monthly",
        "start_date": "2025-01-01",
    },
    "assumptions": {
        "pricing": {
            "avg_unit_price": _vu(4.5, "EUR_per_unit", "Artisanal scoops in Helsinki sell for 4-6 EUR"),
            "discount_pct": _vu(0.05, "ratio", "Loyalty cards, group deals and promotions"),
        },
        "financial": {
            "interest_rate": _vu(0.10, "ratio", "Hurdle rate for early-stage retail food and beverage"),
        },
        "customers": {
            "segments": [
                {
                    "id": "locals",
                    "label": "Local Customers",
                    "kind": "demand",
                    "rationale": "Residents and office workers give a year-round baseline",
                    "volume": {
                        "type": "pattern",
                        "pattern_type": "seasonal_growth",
                        "seasonality_index_12": [0.6, 0.7, 0.8, 1.0, 1.1, 1.3, 1.4, 1.3, 1.0, 0.8, 0.7, 0.6],
                        "base_year_total": _vu(12000, "units", "About 1,000 scoops a month"),
                        "yoy_growth": _vu(0.02, "annual_rate", "Repeat visits and word of mouth"),
                    },
                },
                {
                    "id": "tourists",
                    "label": "Tourist Customers",
                    "kind": "demand",
                    "rationale": "Tourist traffic peaks between May and September",
                    "volume": {
                        "type": "pattern",
                        "pattern_type": "seasonal_growth",
                        "seasonality_index_12": [0.2, 0.2, 0.5, 1.0, 1.5, 2.5, 3.0, 2.5, 1.2, 0.5, 0.2, 0.1],
                        "base_year_total": _vu(12000, "units", "Roughly 70% sold in summer"),
                        "yoy_growth": _vu(0.04, "annual_rate", "Tourism demand growth"),
                    },
                },
            ]
        },
        "unit_economics": {
            "cogs_pct": _vu(0.35, "ratio", "Ingredients, cones, cups and toppings"),
            "cac": _vu(1.0, "EUR", "Mostly foot traffic, light social ads"),
        },
        "opex": [
            {"name": "Sales & Marketing", "value": _vu(2000, "EUR_per_month", "Paid social and seasonal campaigns")},
            {"name": "R&D", "value": _vu(500, "EUR_per_month", "Flavour development and pilot batches")},
            {"name": "G&A", "value": _vu(8000, "EUR_per_month", "Central rent, utilities, insurance, admin")},
        ],
        "capex": [
            {
                "name": "Shop fit-out",
                "initial_investment": _vu(60000, "EUR", "Counters, freezers and interior"),
                "timeline": {
                    "type": "time_series",
                    "series": [
                        {"period": 25, "value": 15000, "unit": "EUR", "rationale": "Freezer replacement"},
                    ],
                },
            }
        ],
    },
    "drivers": [
        {
            "key": "price",
            "path": "assumptions.pricing.avg_unit_price.value",
            "range": [3.5, 4.0, 4.5, 5.0, 5.5],
            "rationale": "Locals favour the low end, tourists tolerate the high end",
        },
        {
            "key": "cac",
            "path": "assumptions.unit_economics.cac.value",
            "range": [0.5, 1.0, 1.5, 2.0, 2.5],
            "rationale": "Organic foot traffic versus paid digital acquisition",
        },
    ],
}


_SAAS_SUBSCRIPTION: Dict[str, Any] = {
    "meta": {
        "title": "Sample SaaS Business Case",
        "description": "Subscription product with churn and opex that scales with revenue and customers",
        "business_model": "recurring",
        "currency": "EUR",
        "periods": 60,
        "frequency": "monthly",
        "start_date": "2025-01-01",
    },
    "assumptions": {
        "pricing": {
            "avg_unit_price": _vu(99, "EUR_per_month", "Monthly subscription price"),
        },
        "financial": {
            "interest_rate": _vu(0.10, "ratio", "Discount rate for NPV"),
        },
        "customers": {
            "churn_pct": _vu(0.025, "ratio", "2.5% monthly logo churn"),
            "segments": [
                {
                    "id": "main_segment",
                    "label": "Enterprise Customers",
                    "rationale": "Primary customer base with steady growth",
                    "volume": {
                        "type": "pattern",
                        "pattern_type": "geom_growth",
                        "series": [{"period": 1, "value": 100, "unit": "customers", "rationale": "Starting base"}],
                    },
                }
            ],
        },
        "unit_economics": {
            "cogs_pct": _vu(0.20, "ratio", "Hosting and infrastructure"),
            "cac": _vu(500, "EUR_per_customer", "Blended acquisition cost"),
        },
        "opex": [
            {
                "name": "Sales & Marketing",
                "cost_structure": {
                    "fixed_component": _vu(5000, "EUR_per_month", "Base marketing team and tools"),
                    "variable_revenue_rate": _vu(0.10, "ratio", "Demand generation"),
                },
            },
            {
                "name": "R&D",
                "cost_structure": {
                    "fixed_component": _vu(20000, "EUR_per_month", "Core engineering team"),
                    "variable_revenue_rate": _vu(0.08, "ratio", "Scaling R&D"),
                },
            },
            {
                "name": "G&A",
                "cost_structure": {
                    "fixed_component": _vu(3000, "EUR_per_month", "Base admin costs"),
                    "variable_volume_rate": _vu(15, "EUR_per_customer", "Support and success per customer"),
                },
            },
        ],
        "capex": [
            {
                "name": "Initial Product Development",
                "timeline": {
                    "type": "time_series",
                    "series": [
                        {"period": 1, "value": 200000, "unit": "EUR", "rationale": "Initial platform"},
                        {"period": 13, "value": 50000, "unit": "EUR", "rationale": "Year 2 enhancements"},
                    ],
                },
            }
        ],
        "growth_settings": {
            "geom_growth": {
                "start": _vu(100, "customers", "Initial customer base"),
                "monthly_growth": _vu(0.05, "ratio", "5% monthly growth"),
            }
        },
    },
    "drivers": [
        {
            "key": "price",
            "path": "assumptions.pricing.avg_unit_price.value",
            "range": [79, 89, 99, 109, 119],
            "rationale": "Price tiers tested with prospects",
        },
        {
            "key": "churn",
            "path": "assumptions.customers.churn_pct.value",
            "range": [0.01, 0.02, 0.025, 0.03, 0.05],
            "rationale": "Retention is the least proven assumption",
        },
    ],
}


def sample_document() -> Dict[str, Any]:
    return copy.deepcopy(_ICE_CREAM_SHOP)


def recurring_sample_document() -> Dict[str, Any]:
    return copy.deepcopy(_SAAS_SUBSCRIPTION)


def build_sample_case() -> BusinessCase:
    return load_business_case(sample_document())


def build_recurring_sample_case() -> BusinessCase:
    return load_business_case(recurring_sample_document())
