from __future__ import annotations

from typing import Dict, List, Optional, Protocol

from ..query.filters import Select


Row = Dict[str, Optional[str]]


class QueryService(Protocol):
    """Structured query backend over the structured and raw property tables.

    ``run`` returns rows keyed by the select aliases. Cell values are text (or
    None) regardless of the column type; callers parse numbers and dates.
    Failures surface as ``BackendFailure``.
    """

    name: str

    def run(self, select: Select) -> List[Row]:
        ...

    def close(self) -> None:
        ...


def as_text(value: object) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="replace")
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)
