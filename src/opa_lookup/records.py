"""Mapping backend rows (all text) onto ``PropertyRecord`` and ``Suggestion``."""

from __future__ import annotations

import math
import re
from datetime import date, datetime
from typing import Iterable, Optional, Tuple

from .config import Settings
from .schema import PropertyRecord, Suggestion


_WHITESPACE_RE = re.compile(r"\s+")

ADDRESS_PARTS = ("house_number", "street_direction", "street_name", "street_designation", "suffix")


def clean_text(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    cleaned = _WHITESPACE_RE.sub(" ", str(value)).strip()
    return cleaned or None


def to_number(value: Optional[str]) -> Optional[float]:
    """Parse ``"1,250,000"`` style text; blank or unparseable is None, not 0."""
    if value is None:
        return None
    s = str(value).replace(",", "").replace(" ", "").strip()
    if not s:
        return None
    try:
        n = float(s)
    except ValueError:
        return None
    if not math.isfinite(n):
        return None
    return int(n) if n.is_integer() else n


def parse_sale_date(value: Optional[str]) -> Optional[date]:
    s = clean_text(value)
    if not s:
        return None
    candidate = s.replace(" ", "T", 1)
    if candidate.endswith("Z"):
        candidate = candidate[:-1]
    try:
        return datetime.fromisoformat(candidate).date()
    except ValueError:
        pass
    try:
        return date.fromisoformat(s[:10])
    except ValueError:
        return None


def join_owner(owner_1: Optional[str], owner_2: Optional[str]) -> Optional[str]:
    names = [n for n in (clean_text(owner_1), clean_text(owner_2)) if n]
    return " & ".join(names) or None


def join_address(parts: Iterable[Optional[str]], unit: Optional[str] = None) -> Optional[str]:
    street_line = " ".join(p for p in (clean_text(x) for x in parts) if p)
    return clean_text(" ".join(p for p in (street_line, clean_text(unit)) if p))


def address_from_row(row: dict) -> Optional[str]:
    return join_address((row.get(k) for k in ADDRESS_PARTS), row.get("unit"))


def address_columns(settings: Settings) -> Tuple[Tuple[str, str], ...]:
    c = settings.columns
    return (
        (c.house_number, "house_number"),
        (c.direction, "street_direction"),
        (c.street_name, "street_name"),
        (c.designation, "street_designation"),
        (c.suffix, "suffix"),
        (c.unit, "unit"),
        (c.zip, "zip_code"),
    )


def record_columns(settings: Settings) -> Tuple[Tuple[str, str], ...]:
    c = settings.columns
    return (
        (c.parcel, "parcel_id"),
        (c.owner_1, "owner_1"),
        (c.owner_2, "owner_2"),
        (c.market_value, "market_value"),
        (c.sale_price, "sale_price"),
        (c.sale_date, "sale_date"),
    ) + address_columns(settings)


def raw_record_columns(settings: Settings) -> Tuple[Tuple[str, str], ...]:
    c = settings.columns
    return record_columns(settings) + ((c.location, "location"), (c.zoning, "zoning"))


def record_from_row(row: dict, zoning: Optional[str] = None) -> PropertyRecord:
    """Build a record from a structured or raw row.

    Raw rows carry ``location`` and ``zoning``; structured rows get their
    address rebuilt from components and zoning from a separate lookup.
    """
    address = clean_text(row.get("location")) or address_from_row(row)
    if "zoning" in row:
        zoning = clean_text(row.get("zoning"))
    return PropertyRecord(
        parcel_id=clean_text(row.get("parcel_id")) or "",
        address=address,
        owner=join_owner(row.get("owner_1"), row.get("owner_2")),
        market_value=to_number(row.get("market_value")),
        sale_price=to_number(row.get("sale_price")),
        sale_date=parse_sale_date(row.get("sale_date")),
        zoning=clean_text(zoning),
    )


def suggestion_from_row(row: dict) -> Optional[Suggestion]:
    address = address_from_row(row)
    parcel_id = clean_text(row.get("parcel_id"))
    if not address or not parcel_id:
        return None
    return Suggestion(address=address, parcel_id=parcel_id, zip=clean_text(row.get("zip_code")))
