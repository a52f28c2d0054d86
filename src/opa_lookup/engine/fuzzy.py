from __future__ import annotations

from typing import List, Optional

from ..backends.base import QueryService
from ..config import Settings
from ..query.filters import AnyOf, Contains, Eq, OrderBy, Select, WordsContain, all_of
from ..records import raw_record_columns, record_from_row
from ..schema import PropertyRecord
from .common import clamp_limit, settings_or_default


def match_fuzzy(
    service: QueryService,
    core: str,
    zip_code: Optional[str] = None,
    limit: int = 1,
    settings: Optional[Settings] = None,
) -> List[PropertyRecord]:
    """Substring match of ``core`` against the raw table's location text.

    The address rebuilt from the raw table's component columns is searched too,
    for rows whose ``location`` is blank or formatted differently.
    """
    settings = settings_or_default(settings)
    core = (core or "").strip()
    if not core:
        return []
    c = settings.columns
    where = all_of(
        AnyOf(
            (
                Contains(c.location, core),
                WordsContain((c.house_number, c.direction, c.street_name, c.designation), core),
            )
        ),
        Eq(c.zip, zip_code, ignore_case=False) if zip_code else None,
    )
    rows = service.run(
        Select(
            table=settings.raw_table,
            columns=raw_record_columns(settings),
            where=where,
            order_by=(OrderBy(c.location),),
            limit=clamp_limit(limit, 1),
        )
    )
    return [record_from_row(row) for row in rows]
