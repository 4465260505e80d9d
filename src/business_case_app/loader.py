from __future__ import annotations

import json
import logging
from typing import Any, Dict, List, Mapping, Optional, Union

from pydantic import ValidationError

from .config import settings
from .errors import DocumentLoadError, DriverPathError, PathSyntaxError
from .models.case import BusinessCase, Driver
from .services.paths import get_path, is_numeric_leaf, parse_path

logger = logging.getLogger(__name__)

DRIVER_RANGE_SIZE = 5

Source = Union[str, bytes, Mapping[str, Any], BusinessCase]


def load_document(source: Source) -> Dict[str, Any]:
    """Return the raw JSON document for any accepted source."""
    if isinstance(source, BusinessCase):
        return source.to_document()
    if isinstance(source, (str, bytes)):
        try:
            document = json.loads(source)
        except json.JSONDecodeError as exc:
            raise DocumentLoadError(f"Business case is not valid JSON: {exc}") from exc
    else:
        document = source
    if not isinstance(document, Mapping):
        raise DocumentLoadError(f"Business case must be a JSON object, got {type(document).__name__}")
    return dict(document)


def parse_case(document: Mapping[str, Any]) -> BusinessCase:
    try:
        return BusinessCase.model_validate(document)
    except ValidationError as exc:
        raise DocumentLoadError(f"Business case does not match the expected shape: {exc}") from exc


def validate_driver_path(document: Mapping[str, Any], driver: Driver) -> None:
    """Raise ``DriverPathError`` unless ``driver.path`` addresses a numeric assumption.

    A path that does not exist yet is accepted; writing a test value creates it.
    """
    try:
        tokens = parse_path(driver.path)
    except PathSyntaxError as exc:
        raise DriverPathError(driver.key, driver.path, f"cannot be parsed ({exc.reason})") from exc
    if tokens[0] != "assumptions" or len(tokens) < 2:
        raise DriverPathError(driver.key, driver.path, "must point inside 'assumptions'")
    node = get_path(document, driver.path)
    if node is not None and not is_numeric_leaf(node):
        raise DriverPathError(driver.key, driver.path, f"resolves to a non-numeric {type(node).__name__}")


def check_drivers(document: Mapping[str, Any], drivers: List[Driver], strict: bool) -> List[str]:
    problems: List[str] = []
    for driver in drivers:
        if len(driver.range) != DRIVER_RANGE_SIZE:
            message = f"Driver {driver.key!r} has {len(driver.range)} test values, expected {DRIVER_RANGE_SIZE}"
            logger.warning(message)
            problems.append(message)
        try:
            validate_driver_path(document, driver)
        except DriverPathError as exc:
            if strict:
                raise
            logger.warning(str(exc))
            problems.append(str(exc))
    return problems


def load_business_case(source: Source, strict: Optional[bool] = None) -> BusinessCase:
    """Parse a business case and check its drivers before any calculation."""
    document = load_document(source)
    case = parse_case(document)
    check_drivers(document, case.drivers, settings.strict_driver_paths if strict is None else strict)
    return case
