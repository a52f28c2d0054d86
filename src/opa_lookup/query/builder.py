from __future__ import annotations

import re
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Sequence

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
    Predicate,
    Select,
    WordsContain,
    WordsStartWith,
)


@dataclass(frozen=True)
class BuiltQuery:
    sql: str
    params: List[Any]


_IDENT_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*(\.[A-Za-z_][A-Za-z0-9_]*)?$")
_CONTROL_RE = re.compile(r"[\x00-\x1f\x7f]")
_PG_REGEX_SPECIAL_RE = re.compile(r"([\\.^$|?*+()\[\]{}])")


def identifier(name: str) -> str:
    if not isinstance(name, str) or not _IDENT_RE.match(name):
        raise ValueError(f"Invalid identifier: {name!r}")
    return name


def escape_like(text: str) -> str:
    return text.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def sql_literal(value: Any) -> str:
    """Single-quoted SQL string literal with ``'`` doubled.

    Control characters are rejected outright rather than escaped.
    """
    text = str(value)
    if _CONTROL_RE.search(text):
        raise ValueError("control characters are not allowed in query values")
    return "'" + text.replace("'", "''") + "'"


def _int(value: Any) -> int:
    if isinstance(value, bool):
        raise ValueError("boolean is not a house number")
    return int(value)


class Dialect(ABC):
    """Renders a ``Select`` into SQL for one backend family."""

    name = "base"

    def build(self, select: Select) -> BuiltQuery:
        params: List[Any] = []
        cols = [f"{identifier(col)} AS {identifier(alias)}" for col, alias in select.columns]
        if not cols:
            raise ValueError("select requires at least one column")
        order_exprs = [self.order(o) for o in select.order_by]
        if select.distinct:
            # DISTINCT requires computed sort keys in the select list.
            cols.extend(
                f"{expr} AS sort_{i}"
                for i, (o, expr) in enumerate(zip(select.order_by, order_exprs))
                if o.house_number
            )
        parts = ["SELECT DISTINCT" if select.distinct else "SELECT", ", ".join(cols), "FROM", identifier(select.table)]
        if select.where is not None:
            parts.extend(["WHERE", self.render(select.where, params)])
        if order_exprs:
            ordering = [expr + self.direction(o) for o, expr in zip(select.order_by, order_exprs)]
            parts.extend(["ORDER BY", ", ".join(ordering)])
        if select.limit is not None:
            parts.extend(["LIMIT", str(max(1, _int(select.limit)))])
        if select.offset:
            if select.limit is None:
                raise ValueError("offset requires a limit")
            parts.extend(["OFFSET", str(max(0, _int(select.offset)))])
        return BuiltQuery(sql=" ".join(parts), params=params)

    def render(self, predicate: Predicate, params: List[Any]) -> str:
        handlers: Dict[type, Callable[[Any, List[Any]], str]] = {
            Eq: self.eq,
            In: self.in_list,
            HouseEquals: self.house_equals,
            HouseRangeContains: self.house_range_contains,
            HouseInBlock: self.house_in_block,
            HouseStartsWith: self.house_starts_with,
            AnchoredPrefix: self.anchored_prefix,
            WordsStartWith: self.words_start_with,
            Contains: self.contains,
            WordsContain: self.words_contain,
            AnyOf: self.any_of,
            AllOf: self.all_of,
        }
        handler = handlers.get(type(predicate))
        if handler is None:
            raise ValueError(f"Unsupported predicate: {type(predicate).__name__}")
        return handler(predicate, params)

    def any_of(self, p: AnyOf, params: List[Any]) -> str:
        if not p.predicates:
            return "1=0"
        return "(" + " OR ".join(self.render(x, params) for x in p.predicates) + ")"

    def all_of(self, p: AllOf, params: List[Any]) -> str:
        if not p.predicates:
            return "1=1"
        return "(" + " AND ".join(self.render(x, params) for x in p.predicates) + ")"

    # dialect hooks

    @abstractmethod
    def bind(self, value: Any, params: List[Any]) -> str:
        raise NotImplementedError

    @abstractmethod
    def text(self, column: str) -> str:
        raise NotImplementedError

    @abstractmethod
    def joined(self, columns: Sequence[str]) -> str:
        raise NotImplementedError

    @abstractmethod
    def order(self, o: OrderBy) -> str:
        raise NotImplementedError

    @abstractmethod
    def anchored_prefix(self, p: AnchoredPrefix, params: List[Any]) -> str:
        raise NotImplementedError

    @abstractmethod
    def house_equals(self, p: HouseEquals, params: List[Any]) -> str:
        raise NotImplementedError

    @abstractmethod
    def house_range_contains(self, p: HouseRangeContains, params: List[Any]) -> str:
        raise NotImplementedError

    @abstractmethod
    def house_in_block(self, p: HouseInBlock, params: List[Any]) -> str:
        raise NotImplementedError

    # shared renderings

    def direction(self, o: OrderBy) -> str:
        return " DESC" if o.descending else ""

    def eq(self, p: Eq, params: List[Any]) -> str:
        if p.ignore_case:
            return f"UPPER({self.text(p.column)}) = UPPER({self.bind(p.value, params)})"
        return f"{identifier(p.column)} = {self.bind(p.value, params)}"

    def in_list(self, p: In, params: List[Any]) -> str:
        if not p.values:
            raise ValueError("in-list must contain at least one item")
        if p.ignore_case:
            items = ", ".join(f"UPPER({self.bind(v, params)})" for v in p.values)
            return f"UPPER({self.text(p.column)}) IN ({items})"
        items = ", ".join(self.bind(v, params) for v in p.values)
        return f"{identifier(p.column)} IN ({items})"

    def house_starts_with(self, p: HouseStartsWith, params: List[Any]) -> str:
        pattern = self.bind(escape_like(p.prefix) + "%", params)
        return f"{self.text(p.column)} LIKE {pattern} ESCAPE '\\'"

    def words_start_with(self, p: WordsStartWith, params: List[Any]) -> str:
        pattern = self.bind(escape_like(p.prefix.upper()) + "%", params)
        return f"UPPER({self.joined(p.columns)}) LIKE {pattern} ESCAPE '\\'"

    def contains(self, p: Contains, params: List[Any]) -> str:
        pattern = self.bind("%" + escape_like(p.text.upper()) + "%", params)
        return f"UPPER({self.text(p.column)}) LIKE {pattern} ESCAPE '\\'"

    def words_contain(self, p: WordsContain, params: List[Any]) -> str:
        pattern = self.bind("%" + escape_like(p.text.upper()) + "%", params)
        return f"UPPER({self.joined(p.columns)}) LIKE {pattern} ESCAPE '\\'"


class SQLiteDialect(Dialect):
    """``?`` placeholders plus helper functions registered on the connection."""

    name = "sqlite"

    def bind(self, value: Any, params: List[Any]) -> str:
        if isinstance(value, str) and _CONTROL_RE.search(value):
            raise ValueError("control characters are not allowed in query values")
        params.append(value)
        return "?"

    def text(self, column: str) -> str:
        return f"CAST(COALESCE({identifier(column)}, '') AS TEXT)"

    def joined(self, columns: Sequence[str]) -> str:
        return "join_words(" + ", ".join(identifier(c) for c in columns) + ")"

    def order(self, o: OrderBy) -> str:
        if o.house_number:
            return f"house_sort_key({identifier(o.column)})"
        return identifier(o.column)

    def anchored_prefix(self, p: AnchoredPrefix, params: List[Any]) -> str:
        pattern = "^" + re.escape(p.text.upper()) + r"(\b|\s)"
        return f"{identifier(p.column)} REGEXP {self.bind(pattern, params)}"

    def house_equals(self, p: HouseEquals, params: List[Any]) -> str:
        return f"house_equals({identifier(p.column)}, {self.bind(_int(p.number), params)})"

    def house_range_contains(self, p: HouseRangeContains, params: List[Any]) -> str:
        return f"house_range_contains({identifier(p.column)}, {self.bind(_int(p.number), params)})"

    def house_in_block(self, p: HouseInBlock, params: List[Any]) -> str:
        col = identifier(p.column)
        between = f"house_between({col}, {self.bind(_int(p.low), params)}, {self.bind(_int(p.high), params)})"
        overlaps = f"house_range_overlaps({col}, {self.bind(_int(p.low), params)}, {self.bind(_int(p.high), params)})"
        return f"({between} OR {overlaps})"


class PostgresDialect(Dialect):
    """Literal-inlined PostgreSQL for HTTP SQL endpoints without bind support.

    House-number range reconstruction mirrors ``address.house_numbers``.
    """

    name = "postgres"

    _DIGITS = "'^[0-9]+$'"
    _PAIR = "'^[0-9]+-[0-9]+$'"

    def bind(self, value: Any, params: List[Any]) -> str:
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        return sql_literal(value)

    def text(self, column: str) -> str:
        return f"COALESCE(CAST({identifier(column)} AS TEXT), '')"

    def _compact(self, column: str) -> str:
        return f"regexp_replace({self.text(column)}, '[[:space:]]', '', 'g')"

    def joined(self, columns: Sequence[str]) -> str:
        parts = ", ".join(f"NULLIF(TRIM(CAST({identifier(c)} AS TEXT)), '')" for c in columns)
        return f"concat_ws(' ', {parts})"

    def order(self, o: OrderBy) -> str:
        if o.house_number:
            return f"CAST(substring(CAST({identifier(o.column)} AS TEXT) from '^[0-9]+') AS BIGINT)"
        return identifier(o.column)

    def direction(self, o: OrderBy) -> str:
        return " DESC NULLS LAST" if o.descending else ""

    def anchored_prefix(self, p: AnchoredPrefix, params: List[Any]) -> str:
        escaped = _PG_REGEX_SPECIAL_RE.sub(r"\\\1", p.text.upper())
        pattern = self.bind("^" + escaped + "(\\y|[[:space:]])", params)
        return f"{self.text(p.column)} ~* {pattern}"

    def _bounds(self, column: str) -> tuple:
        h = self._compact(column)
        lo_t = f"split_part({h}, '-', 1)"
        hi_t = f"split_part({h}, '-', 2)"
        lo = f"CAST({lo_t} AS BIGINT)"
        aligned = f"CAST(left({lo_t}, length({lo_t}) - length({hi_t})) || {hi_t} AS BIGINT)"
        hi = (
            f"(CASE WHEN length({hi_t}) >= length({lo_t}) THEN CAST({hi_t} AS BIGINT) "
            f"WHEN {aligned} < {lo} THEN {aligned} + CAST(power(10, length({hi_t})) AS BIGINT) "
            f"ELSE {aligned} END)"
        )
        return h, f"LEAST({lo}, {hi})", f"GREATEST({lo}, {hi})"

    def house_equals(self, p: HouseEquals, params: List[Any]) -> str:
        h = self._compact(p.column)
        n = self.bind(_int(p.number), params)
        return f"(CASE WHEN {h} ~ {self._DIGITS} THEN CAST({h} AS BIGINT) = {n} ELSE FALSE END)"

    def house_range_contains(self, p: HouseRangeContains, params: List[Any]) -> str:
        h, low, high = self._bounds(p.column)
        n = self.bind(_int(p.number), params)
        return f"(CASE WHEN {h} ~ {self._PAIR} THEN {n} BETWEEN {low} AND {high} ELSE FALSE END)"

    def house_in_block(self, p: HouseInBlock, params: List[Any]) -> str:
        h, low, high = self._bounds(p.column)
        lo = self.bind(_int(p.low), params)
        hi = self.bind(_int(p.high), params)
        return (
            f"(CASE WHEN {h} ~ {self._DIGITS} THEN CAST({h} AS BIGINT) BETWEEN {lo} AND {hi} "
            f"WHEN {h} ~ {self._PAIR} THEN {low} <= {hi} AND {lo} <= {high} "
            f"ELSE FALSE END)"
        )
