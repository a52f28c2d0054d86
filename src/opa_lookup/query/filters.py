"""Filter combinators describing the predicates the engine may issue.

Predicates are plain immutable values. They carry user input verbatim; a
dialect in ``builder.py`` decides how it reaches the backend (bound parameter
or escaped literal), so no caller ever interpolates text into SQL.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Tuple, Union


@dataclass(frozen=True)
class Eq:
    column: str
    value: str
    ignore_case: bool = True


@dataclass(frozen=True)
class In:
    column: str
    values: Tuple[str, ...]
    ignore_case: bool = True


@dataclass(frozen=True)
class HouseEquals:
    """Single house number equal to ``number`` (ranges never match)."""

    column: str
    number: int


@dataclass(frozen=True)
class HouseRangeContains:
    """Hyphenated house number range whose reconstructed bounds cover ``number``."""

    column: str
    number: int


@dataclass(frozen=True)
class HouseInBlock:
    """Single house number inside ``[low, high]`` or a range overlapping it."""

    column: str
    low: int
    high: int


@dataclass(frozen=True)
class HouseStartsWith:
    column: str
    prefix: str


@dataclass(frozen=True)
class AnchoredPrefix:
    """Case-insensitive ``^TEXT(\\b|\\s)`` match."""

    column: str
    text: str


@dataclass(frozen=True)
class WordsStartWith:
    """Non-empty ``columns`` joined by single spaces start with ``prefix``."""

    columns: Tuple[str, ...]
    prefix: str


@dataclass(frozen=True)
class Contains:
    column: str
    text: str


@dataclass(frozen=True)
class WordsContain:
    columns: Tuple[str, ...]
    text: str


@dataclass(frozen=True)
class AnyOf:
    predicates: Tuple["Predicate", ...]


@dataclass(frozen=True)
class AllOf:
    predicates: Tuple["Predicate", ...]


Predicate = Union[
    Eq,
    In,
    HouseEquals,
    HouseRangeContains,
    HouseInBlock,
    HouseStartsWith,
    AnchoredPrefix,
    WordsStartWith,
    Contains,
    WordsContain,
    AnyOf,
    AllOf,
]


def all_of(*predicates: Optional[Predicate]) -> Optional[Predicate]:
    kept = tuple(p for p in predicates if p is not None)
    if not kept:
        return None
    if len(kept) == 1:
        return kept[0]
    return AllOf(kept)


@dataclass(frozen=True)
class OrderBy:
    column: str
    house_number: bool = False
    # descending puts NULLs last
    descending: bool = False


@dataclass(frozen=True)
class Select:
    table: str
    # (column, alias) pairs
    columns: Tuple[Tuple[str, str], ...]
    where: Optional[Predicate] = None
    order_by: Tuple[OrderBy, ...] = field(default_factory=tuple)
    limit: Optional[int] = None
    offset: Optional[int] = None
    distinct: bool = False
