"""Direct parcel (OPA number) lookup plus zoning enrichment from the raw table."""

from __future__ import annotations

import re
from typing import Any, Optional

from ..backends.base import QueryService
from ..config import Settings
from ..errors import InvalidInput
from ..query.filters import Eq, Select, all_of
from ..records import clean_text, record_columns, record_from_row
from ..schema import PropertyRecord
from .common import settings_or_default


PARCEL_ID_RE = re.compile(r"^\d{6,12}$")


def validate_parcel_id(value: Any) -> str:
    parcel_id = str(value if value is not None else "").strip()
    if not PARCEL_ID_RE.match(parcel_id):
        raise InvalidInput("Invalid OPA format", code="INVALID_OPA")
    return parcel_id


def fetch_zoning(
    service: QueryService, parcel_id: str, settings: Optional[Settings] = None
) -> Optional[str]:
    settings = settings_or_default(settings)
    c = settings.columns
    rows = service.run(
        Select(
            table=settings.raw_table,
            columns=((c.zoning, "zoning"),),
            where=Eq(c.parcel, parcel_id, ignore_case=False),
            limit=1,
        )
    )
    if not rows:
        return None
    return clean_text(rows[0].get("zoning"))


def lookup_by_parcel(
    service: QueryService, parcel_id: str, settings: Optional[Settings] = None
) -> Optional[PropertyRecord]:
    settings = settings_or_default(settings)
    c = settings.columns
    partition = None
    if settings.use_partition_key:
        partition = Eq(c.partition, parcel_id[:2], ignore_case=False)
    rows = service.run(
        Select(
            table=settings.structured_table,
            columns=record_columns(settings),
            where=all_of(partition, Eq(c.parcel, parcel_id, ignore_case=False)),
            limit=1,
        )
    )
    if not rows:
        return None
    zoning = fetch_zoning(service, parcel_id, settings)
    return record_from_row(rows[0], zoning=zoning)
