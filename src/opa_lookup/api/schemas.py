from __future__ import annotations

from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from ..config import Settings
from ..schema import (
    ComplaintSummary,
    PropertyRecord,
    Resolution,
    Suggestion,
    ViolationSummary,
)


class TaxInfo(BaseModel):
    lookup_url: str


class PropertyResult(BaseModel):
    opa: str
    address: Optional[str] = None
    owner: Optional[str] = None
    market_value: Optional[float] = None
    sale_price: Optional[float] = None
    sale_date: Optional[str] = None
    zoning: Optional[str] = None
    tax: Optional[TaxInfo] = None


class SuggestionResult(BaseModel):
    address: str
    opa: str
    zip: Optional[str] = None


class SuggestResponse(BaseModel):
    ok: bool = True
    query: str
    count: int
    suggestions: List[SuggestionResult] = Field(default_factory=list)


class ViolationFlags(BaseModel):
    has_court: bool = False
    has_stop_work: bool = False
    has_unsafe_structure: bool = False
    has_hazardous: bool = False


class ViolationSummaryResponse(BaseModel):
    ok: bool = True
    opa: str
    active_count: int
    historical_count: int
    last_activity: Optional[str] = None
    risk_level: str
    flags: ViolationFlags


class ComplaintType(BaseModel):
    service_name: str
    cnt: int


class ComplaintSummaryResponse(BaseModel):
    ok: bool = True
    opa: str
    total_count: int
    open_count: int
    last_activity: Optional[str] = None
    risk_level: str
    top_types: List[ComplaintType] = Field(default_factory=list)


class CaseRowsResponse(BaseModel):
    """Raw case rows, newest first."""

    ok: bool = True
    opa: str
    count: int
    rows: List[Dict[str, Optional[str]]] = Field(default_factory=list)


class ComplaintRowsResponse(CaseRowsResponse):
    limit: int
    offset: int


class ErrorResponse(BaseModel):
    """Body of every non-2xx response."""

    ok: bool = False
    code: str
    message: str
    query: Optional[str] = None
    opa: Optional[str] = None
    suggestions: Optional[List[SuggestionResult]] = None


def property_payload(record: PropertyRecord, settings: Settings) -> dict:
    result = PropertyResult(**record.to_dict(), tax=TaxInfo(lookup_url=settings.tax_lookup_url))
    return result.model_dump()


def suggestion_payload(suggestion: Suggestion) -> dict:
    return SuggestionResult(**suggestion.to_dict()).model_dump()


def search_payload(resolution: Resolution, settings: Settings, limit: int) -> dict:
    """Single ``result`` for parcel lookups and ``limit=1``, else a ``results`` list."""
    if resolution.mode == "opa":
        return {"ok": True, "mode": "opa", "result": property_payload(resolution.records[0], settings)}
    if limit == 1:
        return {
            "ok": True,
            "mode": "address",
            "strategy": resolution.strategy,
            "result": property_payload(resolution.records[0], settings),
        }
    results = [property_payload(r, settings) for r in resolution.records]
    return {
        "ok": True,
        "mode": "address",
        "strategy": resolution.strategy,
        "query": resolution.query,
        "count": len(results),
        "results": results,
    }


def violation_summary_payload(summary: ViolationSummary) -> dict:
    return ViolationSummaryResponse(**summary.to_dict()).model_dump()


def complaint_summary_payload(summary: ComplaintSummary) -> dict:
    return ComplaintSummaryResponse(**summary.to_dict()).model_dump()
