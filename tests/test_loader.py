from __future__ import annotations

import json

import pytest

from business_case_app.errors import DocumentLoadError, DriverPathError
from business_case_app.loader import load_business_case, load_document, parse_case
from business_case_app.models.common import BusinessModelType


def test_load_from_json_text(example_document):
    case = load_business_case(json.dumps(example_document))

    assert case.meta.periods == 12
    assert case.meta.business_model == BusinessModelType.UNIT_SALES
    assert case.assumptions.pricing.avg_unit_price.value == 10
    assert case.assumptions.pricing.avg_unit_price.unit == "EUR_per_unit"
    assert case.drivers[0].key == "price"


def test_load_from_bytes(example_document):
    document = load_document(json.dumps(example_document).encode("utf-8"))

    assert document == example_document


@pytest.mark.parametrize("source", ["{not json", "", "[1, 2, 3]", "42"])
def test_load_rejects_non_objects(source):
    with pytest.raises(DocumentLoadError):
        load_document(source)


def test_shape_errors_become_load_errors(example_document):
    example_document["meta"]["periods"] = 0
    with pytest.raises(DocumentLoadError):
        parse_case(example_document)


def test_bare_numbers_are_accepted_for_value_units(example_document):
    example_document["assumptions"]["pricing"]["avg_unit_price"] = 12
    case = parse_case(example_document)

    assert case.assumptions.pricing.avg_unit_price.value == 12


def test_unknown_fields_survive_a_round_trip(example_document):
    example_document["meta"]["owner"] = "finance"
    example_document["assumptions"]["pricing"]["avg_unit_price"]["source"] = "survey"
    case = parse_case(example_document)
    document = case.to_document()

    assert document["meta"]["owner"] == "finance"
    assert document["assumptions"]["pricing"]["avg_unit_price"]["source"] == "survey"


def test_blank_start_date_is_ignored(example_document):
    example_document["meta"]["start_date"] = ""

    assert parse_case(example_document).meta.start_date is None


def test_strict_loading_rejects_non_numeric_driver(example_document):
    example_document["drivers"][0]["path"] = "assumptions.opex[0].name"

    with pytest.raises(DriverPathError) as excinfo:
        load_business_case(example_document, strict=True)
    assert excinfo.value.driver_key == "price"


def test_strict_loading_rejects_paths_outside_assumptions(example_document):
    example_document["drivers"][0]["path"] = "meta.periods"

    with pytest.raises(DriverPathError):
        load_business_case(example_document, strict=True)


def test_lenient_loading_keeps_bad_driver(example_document):
    example_document["drivers"][0]["path"] = "assumptions.opex[0].name"
    case = load_business_case(example_document, strict=False)

    assert case.drivers[0].path == "assumptions.opex[0].name"


def test_driver_on_missing_assumption_is_accepted(example_document):
    example_document["drivers"][0]["path"] = "assumptions.pricing.discount_pct.value"

    assert load_business_case(example_document, strict=True).drivers[0].key == "price"


def test_short_driver_range_only_warns(example_document, caplog):
    example_document["drivers"][0]["range"] = [5, 10, 15]
    case = load_business_case(example_document, strict=True)

    assert case.drivers[0].range == [5, 10, 15]
    assert "3 test values" in caplog.text
