import re
from typing import Optional

from ..schema import NormalizedAddress


_CONTROL_RE = re.compile(r"[\x00-\x1f\x7f]")
_SEPARATORS_RE = re.compile(r"[\s,]+")
_CITY_STATE_RE = re.compile(r"\b(?:PHILADELPHIA|PA|PENNSYLVANIA|USA)\b")
# Whole-token ZIP or ZIP+4; the +4 extension is dropped.
_ZIP_RE = re.compile(r"(?<!\S)(\d{5})(?:-\d{4})?(?!\S)")


def collapse(value: Optional[str]) -> str:
    """Upper-case and turn commas, tabs and whitespace runs into single spaces."""
    if value is None:
        return ""
    cleaned = _CONTROL_RE.sub(" ", str(value)).upper()
    return _SEPARATORS_RE.sub(" ", cleaned).strip()


def normalize(raw: Optional[str]) -> NormalizedAddress:
    """Split free-form input into the address core and an optional ZIP.

    The first token is the house-number slot and is never read as a ZIP. When
    more than one ZIP-shaped token is present, all are removed from the core
    and the last one is kept.
    """
    text = collapse(raw)
    if not text:
        return NormalizedAddress()

    zips = [m for m in _ZIP_RE.finditer(text) if m.start() > 0]
    zip_code = zips[-1].group(1) if zips else None
    if zips:
        text = _ZIP_RE.sub(lambda m: m.group(0) if m.start() == 0 else " ", text)

    text = _CITY_STATE_RE.sub(" ", text)
    core = _SEPARATORS_RE.sub(" ", text).strip()
    return NormalizedAddress(core=core, zip=zip_code)
