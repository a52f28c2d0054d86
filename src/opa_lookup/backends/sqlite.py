from __future__ import annotations

import logging
import re
import sqlite3
from functools import lru_cache
from pathlib import Path
from typing import List, Optional

from ..address import house_numbers
from ..errors import BackendFailure
from ..log import get_logger, log_event
from ..query.builder import SQLiteDialect
from ..query.filters import Select
from .base import Row, as_text


logger = get_logger("backend")


@lru_cache(maxsize=256)
def _compile(pattern: str) -> "re.Pattern[str]":
    return re.compile(pattern, re.IGNORECASE)


def _regexp(pattern: Optional[str], value: Optional[str]) -> int:
    if pattern is None or value is None:
        return 0
    return 1 if _compile(pattern).search(str(value)) else 0


def _join_words(*values: object) -> str:
    parts = [str(v).strip() for v in values if v is not None]
    return " ".join(p for p in parts if p)


def _as_flag(fn):
    def wrapper(value, *args):
        return 1 if fn(as_text(value), *args) else 0

    return wrapper


def register_functions(conn: sqlite3.Connection) -> None:
    """Install the helper SQL functions the SQLite dialect renders."""

    conn.create_function("regexp", 2, _regexp, deterministic=True)
    conn.create_function("join_words", -1, _join_words, deterministic=True)
    conn.create_function("house_equals", 2, _as_flag(house_numbers.house_equals), deterministic=True)
    conn.create_function("house_between", 3, _as_flag(house_numbers.house_between), deterministic=True)
    conn.create_function(
        "house_range_contains", 2, _as_flag(house_numbers.house_range_contains), deterministic=True
    )
    conn.create_function(
        "house_range_overlaps", 3, _as_flag(house_numbers.house_range_overlaps), deterministic=True
    )
    conn.create_function(
        "house_sort_key", 1, lambda v: house_numbers.house_sort_key(as_text(v)), deterministic=True
    )


class SQLiteQueryService:
    """Query service over a local SQLite copy of the property tables."""

    name = "sqlite"

    def __init__(self, path: str) -> None:
        self.path = Path(path)
        self.dialect = SQLiteDialect()
        if str(path) != ":memory:" and not self.path.exists():
            raise BackendFailure(f"SQLite database not found: {self.path}")
        try:
            self.conn = sqlite3.connect(str(self.path), check_same_thread=False)
        except sqlite3.Error as exc:
            raise BackendFailure(f"SQLite open failed: {exc}") from exc
        self.conn.row_factory = sqlite3.Row
        register_functions(self.conn)

    def close(self) -> None:
        if self.conn is not None:
            self.conn.close()
            self.conn = None

    def run(self, select: Select) -> List[Row]:
        if self.conn is None:
            raise BackendFailure("SQLite connection is closed")
        built = self.dialect.build(select)
        log_event(logger, "query", level=logging.DEBUG, backend=self.name, table=select.table, sql=built.sql)
        try:
            rows = self.conn.execute(built.sql, built.params).fetchall()
        except (sqlite3.Error, OverflowError) as exc:
            raise BackendFailure(f"SQLite query failed: {exc}") from exc
        aliases = [alias for _col, alias in select.columns]
        return [{alias: as_text(row[alias]) for alias in aliases} for row in rows]
