from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from .models.results import ProjectionResult, SensitivityReport


class CaseCreateRequest(BaseModel):
    case: Dict[str, Any] = Field(..., description="Business case JSON document")
    case_id: Optional[str] = Field(default=None, description="Id to store the case under; generated when omitted")


class CaseCreateResponse(BaseModel):
    case_id: str
    warnings: List[str] = Field(default_factory=list)


class CaseListResponse(BaseModel):
    cases: List[str]


class CaseRunRequest(BaseModel):
    case_id: Optional[str] = None
    case: Optional[Dict[str, Any]] = None
    periods: Optional[int] = Field(default=None, ge=1)


class CaseRunResponse(BaseModel):
    result: ProjectionResult


class AssumptionUpdateRequest(BaseModel):
    path: str
    value: Any


class AssumptionUpdateResponse(BaseModel):
    case_id: str
    document: Dict[str, Any]


class SensitivityResponse(BaseModel):
    report: SensitivityReport


class CaseCompareResponse(BaseModel):
    case_ids: List[str]
    npv: List[float]
