from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Query

from ...config import get_settings
from ...engine.cases import summarize_violations, violation_details
from ...errors import BackendFailure, OpaLookupError
from ...log import get_logger
from ..deps import ERROR_RESPONSES, open_service, required_parcel_id
from ..schemas import CaseRowsResponse, ViolationSummaryResponse, violation_summary_payload


router = APIRouter(prefix="/violations", tags=["violations"])
logger = get_logger("api")


@router.get("/summary", response_model=ViolationSummaryResponse, responses=ERROR_RESPONSES)
def summary(opa: Optional[str] = Query(None, description="6-12 digit OPA number")):
    """Active/closed case counts, last activity and a coarse risk level."""
    parcel_id = required_parcel_id(opa)
    try:
        with open_service() as service:
            result = summarize_violations(service, parcel_id, get_settings())
    except OpaLookupError:
        raise
    except Exception as e:
        logger.error("violations summary failed: %s", e)
        raise BackendFailure(str(e)) from e
    return violation_summary_payload(result)


@router.get("/details", response_model=CaseRowsResponse, responses=ERROR_RESPONSES)
def details(
    opa: Optional[str] = Query(None, description="6-12 digit OPA number"),
    limit: Optional[str] = Query(None, description="1-500, default 200"),
):
    parcel_id = required_parcel_id(opa)
    try:
        with open_service() as service:
            rows = violation_details(service, parcel_id, limit, get_settings())
    except OpaLookupError:
        raise
    except Exception as e:
        logger.error("violations details failed: %s", e)
        raise BackendFailure(str(e)) from e
    return {"ok": True, "opa": parcel_id, "count": len(rows), "rows": rows}
