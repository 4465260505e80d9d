from __future__ import annotations

import logging
import uuid
from typing import Any, Dict, Optional

from fastapi import FastAPI, HTTPException

from .config import settings
from .errors import BusinessCaseError
from .loader import check_drivers, load_document, parse_case
from .models.case import BusinessCase
from .schemas import (
    AssumptionUpdateRequest,
    AssumptionUpdateResponse,
    CaseCompareResponse,
    CaseCreateRequest,
    CaseCreateResponse,
    CaseListResponse,
    CaseRunRequest,
    CaseRunResponse,
    SensitivityResponse,
)
from .services.calculator import BusinessCaseCalculator
from .services.paths import parse_path, set_path
from .services.sensitivity import SensitivityEngine

logging.basicConfig(level=settings.log_level)
logger = logging.getLogger(__name__)

app = FastAPI(title="Business Case Engine", version="0.1.0")

# documents are replaced wholesale on every edit, never mutated in place
CASES: Dict[str, Dict[str, Any]] = {}
calculator = BusinessCaseCalculator()
sensitivity = SensitivityEngine(calculator=calculator)


def _parse(document: Dict[str, Any]) -> BusinessCase:
    try:
        return parse_case(load_document(document))
    except BusinessCaseError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc


def _stored(case_id: str) -> Dict[str, Any]:
    document = CASES.get(case_id)
    if document is None:
        raise HTTPException(status_code=404, detail=f"Case {case_id} not found")
    return document


def _resolve(case_id: Optional[str], document: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    if document is not None:
        return document
    if case_id:
        return _stored(case_id)
    raise HTTPException(status_code=422, detail="Provide either a case or a case_id")


@app.post("/cases", response_model=CaseCreateResponse)
def create_case(payload: CaseCreateRequest) -> CaseCreateResponse:
    case = _parse(payload.case)
    try:
        warnings = check_drivers(payload.case, case.drivers, settings.strict_driver_paths)
    except BusinessCaseError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    case_id = payload.case_id or uuid.uuid4().hex[:12]
    CASES[case_id] = payload.case
    logger.info("Stored case %s (%s)", case_id, case.meta.title)
    return CaseCreateResponse(case_id=case_id, warnings=warnings)


@app.get("/cases", response_model=CaseListResponse)
def list_cases() -> CaseListResponse:
    return CaseListResponse(cases=list(CASES.keys()))


@app.get("/cases/{case_id}", response_model=CaseRunResponse)
def get_case_projection(case_id: str) -> CaseRunResponse:
    case = _parse(_stored(case_id))
    return CaseRunResponse(result=calculator.run(case))


@app.patch("/cases/{case_id}/assumptions", response_model=AssumptionUpdateResponse)
def update_assumption(case_id: str, payload: AssumptionUpdateRequest) -> AssumptionUpdateResponse:
    document = _stored(case_id)
    try:
        if parse_path(payload.path)[0] != "assumptions":
            raise HTTPException(status_code=422, detail="Only paths inside 'assumptions' can be edited")
        updated = set_path(document, payload.path, payload.value)
    except BusinessCaseError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    _parse(updated)
    CASES[case_id] = updated
    return AssumptionUpdateResponse(case_id=case_id, document=updated)


@app.post("/run", response_model=CaseRunResponse)
def run_case(payload: CaseRunRequest) -> CaseRunResponse:
    document = _resolve(payload.case_id, payload.case)
    if payload.periods:
        document = set_path(document, "meta.periods", payload.periods)
    case = _parse(document)
    return CaseRunResponse(result=calculator.run(case))


@app.post("/sensitivity", response_model=SensitivityResponse)
def run_sensitivity(payload: CaseRunRequest) -> SensitivityResponse:
    document = _resolve(payload.case_id, payload.case)
    if payload.periods:
        document = set_path(document, "meta.periods", payload.periods)
    _parse(document)
    return SensitivityResponse(report=sensitivity.run_all(document))


@app.get("/cases/{case_id}/compare", response_model=CaseCompareResponse)
def compare_cases(case_id: str, ids: str) -> CaseCompareResponse:
    case_ids = [case_id] + [part for part in ids.split(",") if part]
    npvs = []
    for _id in case_ids:
        case = _parse(_stored(_id))
        _, metrics = calculator.evaluate(case)
        npvs.append(metrics.npv)
    return CaseCompareResponse(case_ids=case_ids, npv=npvs)


@app.get("/health")
def healthcheck() -> Dict[str, str]:
    return {"status": "ok"}
