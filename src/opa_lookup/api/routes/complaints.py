from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Query

from ...config import get_settings
from ...engine.cases import complaint_details, complaint_page, summarize_complaints
from ...errors import BackendFailure, OpaLookupError
from ...log import get_logger
from ..deps import ERROR_RESPONSES, open_service, required_parcel_id
from ..schemas import ComplaintRowsResponse, ComplaintSummaryResponse, complaint_summary_payload


router = APIRouter(prefix="/complaints", tags=["complaints"])
logger = get_logger("api")


@router.get("/summary", response_model=ComplaintSummaryResponse, responses=ERROR_RESPONSES)
def summary(opa: Optional[str] = Query(None, description="6-12 digit OPA number")):
    parcel_id = required_parcel_id(opa)
    try:
        with open_service() as service:
            result = summarize_complaints(service, parcel_id, get_settings())
    except OpaLookupError:
        raise
    except Exception as e:
        logger.error("complaints summary failed: %s", e)
        raise BackendFailure(str(e)) from e
    return complaint_summary_payload(result)


@router.get("/details", response_model=ComplaintRowsResponse, responses=ERROR_RESPONSES)
def details(
    opa: Optional[str] = Query(None, description="6-12 digit OPA number"),
    limit: Optional[str] = Query(None, description="1-100, default 25"),
    offset: Optional[str] = Query(None, description="rows to skip, default 0"),
):
    """One page of 311 requests, newest first."""
    parcel_id = required_parcel_id(opa)
    lim, off = complaint_page(limit, offset)
    try:
        with open_service() as service:
            rows = complaint_details(service, parcel_id, lim, off, get_settings())
    except OpaLookupError:
        raise
    except Exception as e:
        logger.error("complaints details failed: %s", e)
        raise BackendFailure(str(e)) from e
    return {"ok": True, "opa": parcel_id, "limit": lim, "offset": off, "count": len(rows), "rows": rows}
