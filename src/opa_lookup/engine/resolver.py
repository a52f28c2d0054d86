from __future__ import annotations

from typing import Any, Optional

from ..address.normalize import normalize
from ..address.parser import parse_address
from ..backends.base import QueryService
from ..config import Settings
from ..errors import AddressNotFound, InvalidInput, ParcelNotFound
from ..log import get_logger, log_event
from ..schema import Resolution
from .common import clamp_limit, settings_or_default
from .exact import match_exact_with_strategy
from .fuzzy import match_fuzzy
from .parcel import lookup_by_parcel, validate_parcel_id
from .suggest import suggest


logger = get_logger("search")


def _said(value: Any) -> bool:
    return value is not None and bool(str(value).strip())


def _address_not_found(service: QueryService, address: str, settings: Settings) -> AddressNotFound:
    suggestions = suggest(service, address, settings.not_found_suggestions, settings)
    return AddressNotFound(str(address), suggestions)


def resolve_parcel(
    service: QueryService, opa: Any, settings: Optional[Settings] = None
) -> Resolution:
    settings = settings_or_default(settings)
    parcel_id = validate_parcel_id(opa)
    record = lookup_by_parcel(service, parcel_id, settings)
    log_event(logger, "parcel_lookup", hit=record is not None)
    if record is None:
        raise ParcelNotFound(parcel_id)
    return Resolution(mode="opa", strategy="parcel", query=parcel_id, records=[record])


def resolve_address(
    service: QueryService, address: str, limit: Any = 1, settings: Optional[Settings] = None
) -> Resolution:
    """Exact match when a house number and street were given, fuzzy otherwise.

    Once a house number and street are present a miss is final: fuzzy
    matching would return a different house on the same street.
    """
    settings = settings_or_default(settings)
    lim = clamp_limit(limit, 1)
    normalized = normalize(address)
    parsed = parse_address(normalized.core)
    log_event(
        logger,
        "address_parsed",
        has_house=parsed.has_house,
        has_street=parsed.has_street,
        direction=parsed.direction,
        street_type=parsed.street_type,
        has_zip=normalized.zip is not None,
    )

    if parsed.has_house and parsed.has_street:
        record, step = match_exact_with_strategy(service, parsed, normalized.zip, settings)
        if record is None:
            raise _address_not_found(service, address, settings)
        return Resolution(mode="address", strategy=f"exact:{step}", query=str(address), records=[record])

    records = match_fuzzy(service, normalized.core, normalized.zip, lim, settings)
    log_event(logger, "fuzzy_match", count=len(records))
    if not records:
        raise _address_not_found(service, address, settings)
    return Resolution(mode="address", strategy="fuzzy", query=str(address), records=records)


def resolve(
    service: QueryService,
    *,
    opa: Any = None,
    address: Optional[str] = None,
    limit: Any = 1,
    settings: Optional[Settings] = None,
) -> Resolution:
    if _said(opa):
        return resolve_parcel(service, opa, settings)
    if not _said(address):
        raise InvalidInput("Missing ?address (or provide ?opa=#########)", code="MISSING_PARAMETER")
    return resolve_address(service, str(address), limit, settings)
