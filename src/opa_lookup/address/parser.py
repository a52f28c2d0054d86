from __future__ import annotations

import re
from typing import Dict, List, Optional, Tuple

from ..schema import ParsedAddress, SuggestQuery


DIRECTIONS = frozenset({"N", "S", "E", "W", "NE", "NW", "SE", "SW"})

# typed form -> abbreviation stored in street_designation
STREET_TYPES: Dict[str, str] = {
    "ST": "ST",
    "STREET": "ST",
    "AVE": "AVE",
    "AV": "AVE",
    "AVENUE": "AVE",
    "RD": "RD",
    "ROAD": "RD",
    "BLVD": "BLVD",
    "BOULEVARD": "BLVD",
    "DR": "DR",
    "DRIVE": "DR",
    "LN": "LN",
    "LANE": "LN",
    "CT": "CT",
    "COURT": "CT",
    "PL": "PL",
    "PLACE": "PL",
    "PKWY": "PKWY",
    "PARKWAY": "PKWY",
    "CIR": "CIR",
    "CIRCLE": "CIR",
    "TER": "TER",
    "TERRACE": "TER",
    "WAY": "WAY",
}

UNIT_MARKERS = frozenset({"APT", "APARTMENT", "UNIT", "STE", "SUITE", "#"})

_HOUSE_RE = re.compile(r"^(\d+)\s+(\S.*)$")
_SUGGEST_RE = re.compile(r"^(\d+)\s*(.*)$")
_PUNCT_RE = re.compile(r"[^\w\s]", re.UNICODE)


def canonical_street_type(token: Optional[str]) -> Optional[str]:
    if not token:
        return None
    return STREET_TYPES.get(token.strip().upper())


def _split_unit(tokens: List[str]) -> Tuple[List[str], Optional[str]]:
    for i, tok in enumerate(tokens):
        if tok in UNIT_MARKERS or tok.startswith("#"):
            tail = tokens[i + 1 :]
            if tok.startswith("#") and len(tok) > 1:
                tail = [tok[1:]] + tail
            return tokens[:i], " ".join(tail) or None
    return tokens, None


def parse_address(core: Optional[str]) -> ParsedAddress:
    """Split an address core into house number, direction, name, type and unit.

    >>> parse_address("1539 S LAMBERT ST")
    ParsedAddress(house_number=1539, direction='S', street_name='LAMBERT', street_type='ST', unit=None)
    """
    text = " ".join(str(core or "").upper().split())
    m = _HOUSE_RE.match(text)
    if not m:
        return ParsedAddress()

    try:
        house_number = int(m.group(1))
    except ValueError:
        # past the interpreter's int-from-str digit limit
        return ParsedAddress()
    tokens, unit = _split_unit(m.group(2).split())

    direction = None
    if tokens and tokens[0] in DIRECTIONS:
        direction = tokens.pop(0)

    street_type = None
    if tokens and tokens[-1] in STREET_TYPES:
        street_type = tokens.pop()

    return ParsedAddress(
        house_number=house_number,
        direction=direction,
        street_name=" ".join(tokens) or None,
        street_type=street_type,
        unit=unit,
    )


def parse_suggest_query(core: Optional[str]) -> SuggestQuery:
    """Loose parse of partial input such as ``"526 mar"`` for autocomplete."""
    text = " ".join(str(core or "").upper().split())
    m = _SUGGEST_RE.match(text)
    if m:
        house_prefix: Optional[str] = m.group(1)
        rest = m.group(2)
    else:
        house_prefix = None
        rest = text

    tokens, _unit = _split_unit(rest.split())
    tokens = _PUNCT_RE.sub(" ", " ".join(tokens)).split()

    direction = None
    if len(tokens) > 1 and tokens[0] in DIRECTIONS:
        direction = tokens.pop(0)
    if len(tokens) > 1 and tokens[-1] in STREET_TYPES:
        tokens.pop()

    return SuggestQuery(
        house_prefix=house_prefix,
        direction=direction,
        street_prefix=" ".join(tokens),
    )


def suggestions_allowed(query: SuggestQuery) -> bool:
    """Prefix scans need a house prefix or at least three street characters."""
    return bool(query.house_prefix) or len(query.street_prefix) >= 3
