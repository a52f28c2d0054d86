"""Address resolution engine: parcel lookup, exact/range and fuzzy matching, suggestions."""

from .exact import match_exact, match_exact_with_strategy
from .fuzzy import match_fuzzy
from .parcel import fetch_zoning, lookup_by_parcel, validate_parcel_id
from .resolver import resolve, resolve_address, resolve_parcel
from .suggest import suggest

__all__ = [
    "fetch_zoning",
    "lookup_by_parcel",
    "match_exact",
    "match_exact_with_strategy",
    "match_fuzzy",
    "resolve",
    "resolve_address",
    "resolve_parcel",
    "suggest",
    "validate_parcel_id",
]
