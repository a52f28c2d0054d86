"""Code-enforcement history for a parcel: L&I violations and 311 complaints.

Both tables carry the parcel id in ``opa_account_num``. Summaries are computed
from plain row scans so they work the same on every query backend.
"""

from __future__ import annotations

from collections import Counter
from typing import Iterable, List, Optional, Sequence, Tuple

from ..backends.base import QueryService, Row
from ..config import Settings
from ..log import get_logger, log_event
from ..query.filters import Eq, OrderBy, Select
from ..records import clean_text
from ..schema import ComplaintSummary, ViolationSummary
from .common import clamp_limit, clamp_offset, settings_or_default


logger = get_logger("cases")

CASE_PARCEL_COLUMN = "opa_account_num"

VIOLATION_DETAIL_LIMIT = 200
VIOLATION_DETAIL_MAX = 500
COMPLAINT_DETAIL_LIMIT = 25
COMPLAINT_DETAIL_MAX = 100
TOP_COMPLAINT_TYPES = 5

VIOLATION_DETAIL_COLUMNS = (
    "casenumber",
    "casestatus",
    "caseprioritydesc",
    "casetype",
    "casecreateddate",
    "casecompleteddate",
    "violationnumber",
    "violationstatus",
    "violationdate",
    "violationresolutiondate",
    "violationresolutioncode",
    "violationcode",
    "violationcodetitle",
)

COMPLAINT_DETAIL_COLUMNS = (
    "service_request_id",
    "service_name",
    "status",
    "requested_datetime",
    "updated_datetime",
    "address",
    "agency_responsible",
    "subject",
    "description",
)

CLOSED_CASE = "CLOSED"
CLOSED_COMPLAINT_STATUSES = frozenset({"CLOSED", "RESOLVED"})


def _columns(names: Iterable[str]) -> Tuple[Tuple[str, str], ...]:
    return tuple((name, name) for name in names)


def _upper(value: Optional[str]) -> str:
    return (clean_text(value) or "").upper()


def _latest(values: Iterable[Optional[str]]) -> Optional[str]:
    present = [v for v in (clean_text(x) for x in values) if v]
    return max(present) if present else None


def risk_level_from_flags(
    active_count: int,
    *,
    has_court: bool = False,
    has_stop_work: bool = False,
    has_unsafe_structure: bool = False,
    has_hazardous: bool = False,
) -> str:
    """Severe for court or stop-work cases, High for unsafe or hazardous ones
    or two or more active cases, Moderate for one active case, else Low."""
    if has_stop_work or has_court:
        return "Severe"
    if has_unsafe_structure or has_hazardous:
        return "High"
    if active_count >= 2:
        return "High"
    if active_count == 1:
        return "Moderate"
    return "Low"


def complaint_risk_level(open_count: int, total_count: int) -> str:
    if open_count >= 3:
        return "High"
    if open_count >= 1 or total_count >= 10:
        return "Medium"
    return "Low"


def _case_select(
    table: str,
    columns: Sequence[str],
    parcel_id: str,
    order_column: Optional[str] = None,
    limit: Optional[int] = None,
    offset: Optional[int] = None,
) -> Select:
    order_by = (OrderBy(order_column, descending=True),) if order_column else ()
    return Select(
        table=table,
        columns=_columns(columns),
        where=Eq(CASE_PARCEL_COLUMN, parcel_id, ignore_case=False),
        order_by=order_by,
        limit=limit,
        offset=offset,
    )


def summarize_violations(
    service: QueryService, parcel_id: str, settings: Optional[Settings] = None
) -> ViolationSummary:
    settings = settings_or_default(settings)
    rows = service.run(
        _case_select(
            settings.table(settings.violations_table),
            (
                "casestatus",
                "caseprioritydesc",
                "violationcodetitle",
                "mostrecentinvestigation",
                "violationdate",
            ),
            parcel_id,
        )
    )

    statuses = [_upper(r.get("casestatus")) for r in rows]
    active = sum(1 for s in statuses if s and s != CLOSED_CASE)
    historical = sum(1 for s in statuses if s == CLOSED_CASE)
    flags = dict(
        has_court=any("COURT" in s for s in statuses),
        has_stop_work=any(s == "STOP WORK" for s in statuses),
        has_unsafe_structure=any(
            _upper(r.get("violationcodetitle")) == "UNSAFE STRUCTURE" for r in rows
        ),
        has_hazardous=any(_upper(r.get("caseprioritydesc")) == "HAZARDOUS" for r in rows),
    )
    summary = ViolationSummary(
        parcel_id=parcel_id,
        active_count=active,
        historical_count=historical,
        last_activity=_latest(
            r.get("mostrecentinvestigation") or r.get("violationdate") for r in rows
        ),
        risk_level=risk_level_from_flags(active, **flags),
        **flags,
    )
    log_event(logger, "violations_summary", rows=len(rows), risk=summary.risk_level)
    return summary


def violation_details(
    service: QueryService,
    parcel_id: str,
    limit: object = VIOLATION_DETAIL_LIMIT,
    settings: Optional[Settings] = None,
) -> List[Row]:
    """Violation rows for a parcel, newest violation first."""
    settings = settings_or_default(settings)
    lim = clamp_limit(limit, VIOLATION_DETAIL_LIMIT, high=VIOLATION_DETAIL_MAX)
    rows = service.run(
        _case_select(
            settings.table(settings.violations_table),
            VIOLATION_DETAIL_COLUMNS,
            parcel_id,
            order_column="violationdate",
            limit=lim,
        )
    )
    log_event(logger, "violations_details", count=len(rows), limit=lim)
    return rows


def summarize_complaints(
    service: QueryService, parcel_id: str, settings: Optional[Settings] = None
) -> ComplaintSummary:
    settings = settings_or_default(settings)
    rows = service.run(
        _case_select(
            settings.table(settings.complaints_table),
            ("service_name", "status", "requested_datetime"),
            parcel_id,
        )
    )

    open_count = sum(
        1 for r in rows if _upper(r.get("status")) not in CLOSED_COMPLAINT_STATUSES
    )
    types = Counter(clean_text(r.get("service_name")) or "Unknown" for r in rows)
    summary = ComplaintSummary(
        parcel_id=parcel_id,
        total_count=len(rows),
        open_count=open_count,
        last_activity=_latest(r.get("requested_datetime") for r in rows),
        risk_level=complaint_risk_level(open_count, len(rows)),
        top_types=tuple(types.most_common(TOP_COMPLAINT_TYPES)),
    )
    log_event(logger, "complaints_summary", rows=len(rows), risk=summary.risk_level)
    return summary


def complaint_page(limit: object, offset: object) -> Tuple[int, int]:
    return (
        clamp_limit(limit, COMPLAINT_DETAIL_LIMIT, high=COMPLAINT_DETAIL_MAX),
        clamp_offset(offset),
    )


def complaint_details(
    service: QueryService,
    parcel_id: str,
    limit: object = COMPLAINT_DETAIL_LIMIT,
    offset: object = 0,
    settings: Optional[Settings] = None,
) -> List[Row]:
    settings = settings_or_default(settings)
    lim, off = complaint_page(limit, offset)
    rows = service.run(
        _case_select(
            settings.table(settings.complaints_table),
            COMPLAINT_DETAIL_COLUMNS,
            parcel_id,
            order_column="requested_datetime",
            limit=lim,
            offset=off,
        )
    )
    log_event(logger, "complaints_details", count=len(rows), limit=lim, offset=off)
    return rows
