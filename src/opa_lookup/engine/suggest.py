"""Candidate addresses for input that did not resolve.

Steps run in order and stop at the first non-empty result:

1. house-number prefix (or a range containing it) plus street prefix;
2. the containing hundred-block, for complete house numbers only.

Each step first requires a parsed direction, then retries without it.
"""

from __future__ import annotations

import logging
from typing import List, Optional

from ..address.house_numbers import MAX_HOUSE_NUMBER, hundred_block
from ..address.normalize import normalize
from ..address.parser import parse_suggest_query, suggestions_allowed
from ..backends.base import QueryService
from ..config import Settings
from ..log import get_logger, log_event
from ..query.filters import (
    AnyOf,
    Eq,
    HouseInBlock,
    HouseRangeContains,
    HouseStartsWith,
    OrderBy,
    Predicate,
    Select,
    WordsStartWith,
    all_of,
)
from ..records import address_columns, suggestion_from_row
from ..schema import Suggestion
from .common import clamp_limit, settings_or_default


logger = get_logger("suggest")

DEFAULT_LIMIT = 10
BLOCK_MIN_DIGITS = 3


def _fetch(
    service: QueryService, settings: Settings, where: Optional[Predicate], limit: int
) -> List[Suggestion]:
    c = settings.columns
    rows = service.run(
        Select(
            table=settings.structured_table,
            columns=((c.parcel, "parcel_id"),) + address_columns(settings),
            where=where,
            order_by=(
                OrderBy(c.street_name),
                OrderBy(c.house_number, house_number=True),
                OrderBy(c.parcel),
            ),
            limit=limit,
            distinct=True,
        )
    )
    out: List[Suggestion] = []
    seen = set()
    for row in rows:
        s = suggestion_from_row(row)
        if s is None or s.parcel_id in seen:
            continue
        seen.add(s.parcel_id)
        out.append(s)
    return out


def _with_direction_retry(
    service: QueryService,
    settings: Settings,
    where: Optional[Predicate],
    direction: Optional[str],
    limit: int,
    step: str,
) -> List[Suggestion]:
    if direction:
        found = _fetch(service, settings, all_of(where, Eq(settings.columns.direction, direction)), limit)
        log_event(logger, "suggest_step", step=step, direction=True, count=len(found))
        if found:
            return found
    found = _fetch(service, settings, where, limit)
    log_event(logger, "suggest_step", step=step, direction=False, count=len(found))
    return found


def _suggest(
    service: QueryService, raw_address: str, limit: int, settings: Settings
) -> List[Suggestion]:
    lim = clamp_limit(limit, DEFAULT_LIMIT)
    normalized = normalize(raw_address)
    query = parse_suggest_query(normalized.core)
    if not suggestions_allowed(query):
        return []

    c = settings.columns
    street = None
    if query.street_prefix:
        street = WordsStartWith((c.street_name, c.designation, c.suffix), query.street_prefix)
    zip_filter = Eq(c.zip, normalized.zip, ignore_case=False) if normalized.zip else None

    house = None
    bindable = False
    if query.house_prefix:
        bindable = int(query.house_prefix) <= MAX_HOUSE_NUMBER
        house = HouseStartsWith(c.house_number, query.house_prefix)
        if bindable:
            house = AnyOf((house, HouseRangeContains(c.house_number, int(query.house_prefix))))
    found = _with_direction_retry(
        service, settings, all_of(house, street, zip_filter), query.direction, lim, "prefix"
    )
    if found:
        return found

    if bindable and len(query.house_prefix) >= BLOCK_MIN_DIGITS and street is not None:
        low, high = hundred_block(int(query.house_prefix))
        block = HouseInBlock(c.house_number, low, high)
        found = _with_direction_retry(
            service, settings, all_of(block, street, zip_filter), query.direction, lim, "block"
        )
    return found


def suggest(
    service: QueryService,
    raw_address: str,
    limit: int = DEFAULT_LIMIT,
    settings: Optional[Settings] = None,
) -> List[Suggestion]:
    """Never raises; a failure here must not mask the caller's not-found."""
    try:
        return _suggest(service, raw_address, limit, settings_or_default(settings))
    except Exception as exc:
        log_event(logger, "suggest_failed", level=logging.WARNING, error=str(exc))
        return []
