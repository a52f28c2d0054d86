"""House number fields as stored in the structured table.

A field is either a single integer ("1500") or a hyphenated pair ("1500-1510").
In the pair form the upper bound is often written as a truncated low-order
suffix of the lower bound: "1500-10" means 1500 through 1510.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional


_SINGLE_RE = re.compile(r"^\s*(\d+)\s*$")
_RANGE_RE = re.compile(r"^\s*(\d+)\s*-\s*(\d+)\s*$")
_LEADING_DIGITS_RE = re.compile(r"^\s*(\d+)")

# Largest house number a query backend can bind (signed 64-bit).
MAX_HOUSE_NUMBER = 2**63 - 1


@dataclass(frozen=True)
class HouseNumberRange:
    low: int
    high: int
    is_range: bool = False

    def contains(self, number: int) -> bool:
        return self.low <= number <= self.high

    def overlaps(self, low: int, high: int) -> bool:
        return self.low <= high and low <= self.high


def reconstruct_upper(low_text: str, high_text: str) -> int:
    """Return the real upper bound of ``low_text-high_text``.

    A shorter upper part replaces the low-order digits of the lower bound,
    carrying into the next place when the result would fall below it
    ("1598-02" is 1598 through 1602). An upper part at least as long as the
    lower one is taken literally.
    """
    low = int(low_text)
    if len(high_text) >= len(low_text):
        return int(high_text)
    width = len(high_text)
    high = int(low_text[: len(low_text) - width] + high_text)
    if high < low:
        high += 10 ** width
    return high


def parse_house_number(value: Optional[str]) -> Optional[HouseNumberRange]:
    if value is None:
        return None
    text = str(value)
    m = _SINGLE_RE.match(text)
    if m:
        n = int(m.group(1))
        return HouseNumberRange(low=n, high=n)
    m = _RANGE_RE.match(text)
    if not m:
        return None
    low = int(m.group(1))
    high = reconstruct_upper(m.group(1), m.group(2))
    if high < low:
        low, high = high, low
    return HouseNumberRange(low=low, high=high, is_range=True)


# Scalar helpers below are registered as SQL functions by the SQLite backend.


def house_equals(value: Optional[str], number: Optional[int]) -> bool:
    if number is None:
        return False
    parsed = parse_house_number(value)
    return parsed is not None and not parsed.is_range and parsed.low == int(number)


def house_between(value: Optional[str], low: Optional[int], high: Optional[int]) -> bool:
    if low is None or high is None:
        return False
    parsed = parse_house_number(value)
    return parsed is not None and not parsed.is_range and int(low) <= parsed.low <= int(high)


def house_range_contains(value: Optional[str], number: Optional[int]) -> bool:
    if number is None:
        return False
    parsed = parse_house_number(value)
    return parsed is not None and parsed.is_range and parsed.contains(int(number))


def house_range_overlaps(value: Optional[str], low: Optional[int], high: Optional[int]) -> bool:
    if low is None or high is None:
        return False
    parsed = parse_house_number(value)
    return parsed is not None and parsed.is_range and parsed.overlaps(int(low), int(high))


def house_sort_key(value: Optional[str]) -> Optional[int]:
    if value is None:
        return None
    m = _LEADING_DIGITS_RE.match(str(value))
    return int(m.group(1)) if m else None


def hundred_block(number: int) -> tuple[int, int]:
    low = (int(number) // 100) * 100
    return low, low + 99
