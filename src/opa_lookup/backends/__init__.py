from .base import QueryService, Row
from .registry import get_query_service

__all__ = ["QueryService", "Row", "get_query_service"]
