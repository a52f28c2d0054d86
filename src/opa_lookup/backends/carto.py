from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

import requests

from ..errors import BackendFailure
from ..log import get_logger, log_event
from ..query.builder import PostgresDialect
from ..query.filters import Select
from .base import Row, as_text


logger = get_logger("backend")


class CartoQueryService:
    """Query service for a CARTO-style SQL API (``GET <url>?q=<sql>``).

    The endpoint takes no bind parameters, so the PostgreSQL dialect inlines
    every value as an escaped literal.
    """

    name = "carto"

    def __init__(
        self,
        url: str,
        api_key: Optional[str] = None,
        timeout: int = 30,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.url = url
        self.api_key = api_key
        self.timeout = timeout
        self.dialect = PostgresDialect()
        self.session = session or requests.Session()

    def close(self) -> None:
        self.session.close()

    def run(self, select: Select) -> List[Row]:
        built = self.dialect.build(select)
        params: Dict[str, Any] = {"q": built.sql}
        if self.api_key:
            params["api_key"] = self.api_key
        log_event(logger, "query", level=logging.DEBUG, backend=self.name, table=select.table, sql=built.sql)
        try:
            r = self.session.get(self.url, params=params, timeout=self.timeout)
        except requests.RequestException as exc:
            raise BackendFailure(f"Query service request failed: {exc}") from exc

        try:
            data = r.json()
        except ValueError:
            data = {}
        if r.status_code >= 400:
            detail = data.get("error") if isinstance(data, dict) else None
            if isinstance(detail, list):
                detail = "; ".join(str(d) for d in detail)
            raise BackendFailure(f"Query service error ({r.status_code}): {detail or r.reason}")
        if not isinstance(data, dict) or not isinstance(data.get("rows"), list):
            raise BackendFailure("Query service returned an unexpected payload")

        aliases = [alias for _col, alias in select.columns]
        out: List[Row] = []
        for row in data["rows"]:
            if not isinstance(row, dict):
                continue
            out.append({alias: as_text(row.get(alias)) for alias in aliases})
        return out
