"""Address normalization and parsing.

Everything in this package is a pure function of its string input and never
raises on malformed addresses; unusable input degrades to empty fields.
"""

from .house_numbers import HouseNumberRange, parse_house_number
from .normalize import normalize
from .parser import canonical_street_type, parse_address, parse_suggest_query

__all__ = [
    "HouseNumberRange",
    "canonical_street_type",
    "normalize",
    "parse_address",
    "parse_house_number",
    "parse_suggest_query",
]
