from __future__ import annotations

from typing import Any, Optional

from ..config import Settings, get_settings


MAX_LIMIT = 25


def clamp_limit(limit: Any, default: int, low: int = 1, high: int = MAX_LIMIT) -> int:
    try:
        n = int(limit)
    except (TypeError, ValueError):
        n = default
    return max(low, min(n, high))


def settings_or_default(settings: Optional[Settings]) -> Settings:
    return settings or get_settings()


def clamp_offset(offset: Any) -> int:
    try:
        n = int(offset)
    except (TypeError, ValueError):
        n = 0
    return max(0, n)
