from __future__ import annotations

from typing import Optional

from ..config import Settings, get_settings
from .base import QueryService


def get_query_service(settings: Optional[Settings] = None) -> QueryService:
    settings = settings or get_settings()
    backend = (settings.backend or "").strip().lower()
    if backend == "sqlite":
        from .sqlite import SQLiteQueryService

        return SQLiteQueryService(settings.sqlite_path)
    if backend == "carto":
        from .carto import CartoQueryService

        return CartoQueryService(
            settings.carto_url,
            api_key=settings.carto_api_key,
            timeout=settings.http_timeout,
        )
    raise KeyError(f"No query backend registered for {backend!r}")
