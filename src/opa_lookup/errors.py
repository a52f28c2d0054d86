"""Error kinds surfaced by the resolution engine.

Each error carries the HTTP status and machine-readable code the API layer
reports as ``{"ok": false, "code": ..., "message": ...}``.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional


class OpaLookupError(Exception):
    status_code = 500
    code = "INTERNAL_ERROR"

    def __init__(self, message: str, *, code: Optional[str] = None) -> None:
        super().__init__(message)
        self.message = message
        if code:
            self.code = code

    def to_dict(self) -> Dict[str, Any]:
        return {"ok": False, "code": self.code, "message": self.message}


class InvalidInput(OpaLookupError):
    status_code = 400
    code = "INVALID_INPUT"


class NotFound(OpaLookupError):
    status_code = 404
    code = "NOT_FOUND"


class ParcelNotFound(NotFound):
    code = "OPA_NOT_FOUND"

    def __init__(self, parcel_id: str) -> None:
        super().__init__("OPA not found")
        self.parcel_id = parcel_id

    def to_dict(self) -> Dict[str, Any]:
        payload = super().to_dict()
        payload["opa"] = self.parcel_id
        return payload


class AddressNotFound(NotFound):
    code = "ADDRESS_NOT_FOUND"

    def __init__(self, query: str, suggestions: Optional[List[Any]] = None) -> None:
        super().__init__("Address Not Found")
        self.query = query
        self.suggestions = list(suggestions or [])

    def to_dict(self) -> Dict[str, Any]:
        payload = super().to_dict()
        payload["query"] = self.query
        payload["suggestions"] = [
            s.to_dict() if hasattr(s, "to_dict") else s for s in self.suggestions
        ]
        return payload


class BackendFailure(OpaLookupError):
    status_code = 500
    code = "BACKEND_FAILURE"
