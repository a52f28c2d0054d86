from __future__ import annotations

import time
from typing import Optional

from fastapi import APIRouter, Query

from ...config import get_settings
from ...engine.common import clamp_limit
from ...engine.parcel import validate_parcel_id
from ...engine.resolver import resolve, resolve_parcel
from ...engine.suggest import DEFAULT_LIMIT, suggest
from ...errors import BackendFailure, InvalidInput, OpaLookupError
from ...log import get_logger
from ..deps import ERROR_RESPONSES, open_service, said
from ..schemas import (
    SuggestResponse,
    property_payload,
    search_payload,
    suggestion_payload,
)


router = APIRouter(prefix="/opa", tags=["opa"])
logger = get_logger("api")


@router.get("/_ping")
def ping():
    return {
        "ok": True,
        "route": "/api/opa/_ping",
        "build_stamp": get_settings().build_stamp,
        "ts": int(time.time() * 1000),
    }


@router.get("/suggest", response_model=SuggestResponse, responses=ERROR_RESPONSES)
def suggest_addresses(
    query: Optional[str] = Query(None, description="Partial address, e.g. '526 mar'"),
    limit: Optional[str] = Query(None, description="1-25, default 10"),
):
    if not said(query):
        raise InvalidInput("Missing ?query", code="MISSING_PARAMETER")
    lim = clamp_limit(limit, DEFAULT_LIMIT)
    try:
        with open_service() as service:
            suggestions = suggest(service, query, lim)
    except OpaLookupError:
        raise
    except Exception as e:
        logger.error("suggest failed: %s", e)
        raise BackendFailure(str(e)) from e
    return {
        "ok": True,
        "query": str(query),
        "count": len(suggestions),
        "suggestions": [suggestion_payload(s) for s in suggestions],
    }


@router.get("/search", responses=ERROR_RESPONSES)
def search(
    opa: Optional[str] = Query(None, description="6-12 digit OPA number"),
    address: Optional[str] = Query(None, description="Free-form street address"),
    limit: Optional[str] = Query(None, description="1-25, default 1"),
):
    """Resolve ``opa`` when given, otherwise ``address``."""
    if said(opa):
        validate_parcel_id(opa)
    elif not said(address):
        raise InvalidInput("Missing ?address (or provide ?opa=#########)", code="MISSING_PARAMETER")
    lim = clamp_limit(limit, 1)
    settings = get_settings()
    try:
        with open_service() as service:
            resolution = resolve(service, opa=opa, address=address, limit=lim, settings=settings)
    except OpaLookupError:
        raise
    except Exception as e:
        logger.error("search failed: %s", e)
        raise BackendFailure(str(e)) from e
    return search_payload(resolution, settings, lim)


@router.get("", responses=ERROR_RESPONSES)
def detail(opa: Optional[str] = Query(None, description="6-12 digit OPA number")):
    if not said(opa):
        raise InvalidInput("Missing ?opa=OPA_NUMBER", code="MISSING_PARAMETER")
    validate_parcel_id(opa)
    settings = get_settings()
    try:
        with open_service() as service:
            resolution = resolve_parcel(service, opa, settings)
    except OpaLookupError:
        raise
    except Exception as e:
        logger.error("detail failed: %s", e)
        raise BackendFailure(str(e)) from e
    return {"ok": True, "mode": "opa", **property_payload(resolution.records[0], settings)}
