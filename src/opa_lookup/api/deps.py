from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator, Optional

from ..backends import QueryService, get_query_service
from ..engine.parcel import validate_parcel_id
from ..errors import BackendFailure, InvalidInput
from .schemas import ErrorResponse


ERROR_RESPONSES = {
    400: {"model": ErrorResponse},
    404: {"model": ErrorResponse},
    500: {"model": ErrorResponse},
}


def said(value: Optional[str]) -> bool:
    return value is not None and bool(str(value).strip())


@contextmanager
def open_service() -> Iterator[QueryService]:
    """Backend for one request; an unknown backend name is a 500."""
    try:
        service = get_query_service()
    except KeyError as exc:
        raise BackendFailure(str(exc)) from exc
    try:
        yield service
    finally:
        service.close()


def required_parcel_id(opa: Optional[str]) -> str:
    if not said(opa):
        raise InvalidInput("Query param 'opa' is required.", code="OPA_REQUIRED")
    return validate_parcel_id(opa)
