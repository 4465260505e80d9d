from __future__ import annotations

from datetime import date
from enum import Enum
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class BusinessModelType(str, Enum):
    RECURRING = "recurring"
    UNIT_SALES = "unit_sales"


class Frequency(str, Enum):
    MONTHLY = "monthly"
    QUARTERLY = "quarterly"
    ANNUALLY = "annually"


class DocumentModel(BaseModel):
    """Base for every node of a business case document.

    Unknown keys are kept so a document survives load/dump without losing
    provenance fields the engine does not read.
    """

    model_config = ConfigDict(extra="allow", populate_by_name=True)


class ValueUnit(DocumentModel):
    value: float = 0.0
    unit: str = ""
    rationale: str = ""

    @model_validator(mode="before")
    @classmethod
    def _accept_bare_number(cls, data: Any) -> Any:
        # drivers may overwrite a whole triple with a raw number
        if isinstance(data, (int, float)) and not isinstance(data, bool):
            return {"value": data}
        return data


class IndexValueUnit(DocumentModel):
    value: List[float] = Field(default_factory=list)
    unit: str = ""
    rationale: str = ""

    @model_validator(mode="before")
    @classmethod
    def _accept_bare_list(cls, data: Any) -> Any:
        if isinstance(data, (list, tuple)):
            return {"value": list(data)}
        return data


class SeriesPoint(DocumentModel):
    period: int = Field(1, description="1-based period number")
    value: float = 0.0
    unit: str = ""
    rationale: str = ""


class BusinessMeta(DocumentModel):
    title: str = ""
    description: str = ""
    currency: str = "EUR"
    periods: Optional[int] = Field(None, ge=1, description="Projection length; engine default applies when absent")
    frequency: Frequency = Frequency.MONTHLY
    business_model: BusinessModelType = BusinessModelType.UNIT_SALES
    archetype: Optional[str] = None
    start_date: Optional[date] = Field(None, description="Only used to label periods")

    @field_validator("start_date", mode="before")
    @classmethod
    def _blank_date(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value


def value_of(item: Optional[ValueUnit], default: float = 0.0) -> float:
    if item is None:
        return default
    return item.value
