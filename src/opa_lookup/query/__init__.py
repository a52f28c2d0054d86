from .builder import BuiltQuery, PostgresDialect, SQLiteDialect, escape_like, sql_literal
from .filters import (
    AllOf,
    AnchoredPrefix,
    AnyOf,
    Contains,
    Eq,
    HouseEquals,
    HouseInBlock,
    HouseRangeContains,
    HouseStartsWith,
    In,
    OrderBy,
    Select,
    WordsContain,
    WordsStartWith,
    all_of,
)

__all__ = [
    "AllOf",
    "AnchoredPrefix",
    "AnyOf",
    "BuiltQuery",
    "Contains",
    "Eq",
    "HouseEquals",
    "HouseInBlock",
    "HouseRangeContains",
    "HouseStartsWith",
    "In",
    "OrderBy",
    "PostgresDialect",
    "SQLiteDialect",
    "Select",
    "WordsContain",
    "WordsStartWith",
    "all_of",
    "escape_like",
    "sql_literal",
]
