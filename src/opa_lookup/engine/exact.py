"""Exact and range-aware address matching against the structured table.

Street type placement is inconsistent in the source data, so the matcher runs
explicit steps in order and reports which one hit:

``designation``
    the type sits in the designation column
``suffix``
    the type sits in the suffix column
``name``
    the type is stored appended to the street name
``any``
    no type was parsed; name, number, direction and ZIP only
"""

from __future__ import annotations

from typing import List, Optional, Tuple

from ..address.house_numbers import MAX_HOUSE_NUMBER
from ..address.parser import canonical_street_type
from ..backends.base import QueryService
from ..config import Settings
from ..log import get_logger, log_event
from ..query.filters import (
    AnchoredPrefix,
    AnyOf,
    Eq,
    HouseEquals,
    HouseRangeContains,
    In,
    Predicate,
    Select,
    all_of,
)
from ..records import record_columns, record_from_row
from ..schema import ParsedAddress, PropertyRecord
from .common import settings_or_default
from .parcel import fetch_zoning


logger = get_logger("search")


def _type_variants(street_type: str) -> Tuple[str, ...]:
    canonical = canonical_street_type(street_type)
    if canonical and canonical != street_type:
        return (street_type, canonical)
    return (street_type,)


def exact_steps(
    parsed: ParsedAddress, zip_code: Optional[str], settings: Settings
) -> List[Tuple[str, Predicate]]:
    if not parsed.has_house or not parsed.has_street:
        return []
    c = settings.columns
    number = int(parsed.house_number)
    if number > MAX_HOUSE_NUMBER:
        return []
    base = all_of(
        AnyOf((HouseEquals(c.house_number, number), HouseRangeContains(c.house_number, number))),
        AnchoredPrefix(c.street_name, parsed.street_name),
        Eq(c.direction, parsed.direction) if parsed.direction else None,
        Eq(c.zip, zip_code, ignore_case=False) if zip_code else None,
    )
    if not parsed.street_type:
        return [("any", base)]

    variants = _type_variants(parsed.street_type)
    in_name = AnyOf(
        tuple(AnchoredPrefix(c.street_name, f"{parsed.street_name} {v}") for v in variants)
    )
    return [
        ("designation", all_of(base, In(c.designation, variants))),
        ("suffix", all_of(base, In(c.suffix, variants))),
        ("name", all_of(base, in_name)),
    ]


def match_exact_with_strategy(
    service: QueryService,
    parsed: ParsedAddress,
    zip_code: Optional[str] = None,
    settings: Optional[Settings] = None,
) -> Tuple[Optional[PropertyRecord], Optional[str]]:
    settings = settings_or_default(settings)
    for step, predicate in exact_steps(parsed, zip_code, settings):
        rows = service.run(
            Select(
                table=settings.structured_table,
                columns=record_columns(settings),
                where=predicate,
                limit=1,
            )
        )
        log_event(logger, "exact_step", step=step, hit=bool(rows))
        if not rows:
            continue
        row = rows[0]
        parcel_id = (row.get("parcel_id") or "").strip()
        zoning = fetch_zoning(service, parcel_id, settings) if parcel_id else None
        return record_from_row(row, zoning=zoning), step
    return None, None


def match_exact(
    service: QueryService,
    parsed: ParsedAddress,
    zip_code: Optional[str] = None,
    settings: Optional[Settings] = None,
) -> Optional[PropertyRecord]:
    record, _step = match_exact_with_strategy(service, parsed, zip_code, settings)
    return record
