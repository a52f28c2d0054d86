from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Any, Dict, List, Optional, Tuple


@dataclass(frozen=True)
class NormalizedAddress:
    core: str = ""
    zip: Optional[str] = None


@dataclass(frozen=True)
class ParsedAddress:
    house_number: Optional[int] = None
    direction: Optional[str] = None
    street_name: Optional[str] = None
    street_type: Optional[str] = None
    unit: Optional[str] = None

    @property
    def has_house(self) -> bool:
        return self.house_number is not None and self.house_number > 0

    @property
    def has_street(self) -> bool:
        return bool(self.street_name and self.street_name.strip())


@dataclass(frozen=True)
class SuggestQuery:
    house_prefix: Optional[str] = None
    direction: Optional[str] = None
    street_prefix: str = ""


@dataclass(frozen=True)
class PropertyRecord:
    parcel_id: str
    address: Optional[str] = None
    owner: Optional[str] = None
    market_value: Optional[float] = None
    sale_price: Optional[float] = None
    sale_date: Optional[date] = None
    zoning: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "opa": self.parcel_id,
            "address": self.address,
            "owner": self.owner,
            "market_value": self.market_value,
            "sale_price": self.sale_price,
            "sale_date": self.sale_date.isoformat() if self.sale_date else None,
            "zoning": self.zoning,
        }


@dataclass(frozen=True)
class Suggestion:
    address: str
    parcel_id: str
    zip: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {"address": self.address, "opa": self.parcel_id, "zip": self.zip}


@dataclass(frozen=True)
class Resolution:
    """Outcome of one resolution request.

    ``strategy`` names the step that produced ``records`` (``parcel``,
    ``exact:<step>`` or ``fuzzy``).
    """

    mode: str
    strategy: str
    query: str
    records: List[PropertyRecord] = field(default_factory=list)

    @property
    def first(self) -> Optional[PropertyRecord]:
        return self.records[0] if self.records else None


@dataclass(frozen=True)
class ViolationSummary:
    """Code-enforcement violation counts and flags for one parcel."""

    parcel_id: str
    active_count: int = 0
    historical_count: int = 0
    last_activity: Optional[str] = None
    has_court: bool = False
    has_stop_work: bool = False
    has_unsafe_structure: bool = False
    has_hazardous: bool = False
    risk_level: str = "Low"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "opa": self.parcel_id,
            "active_count": self.active_count,
            "historical_count": self.historical_count,
            "last_activity": self.last_activity,
            "risk_level": self.risk_level,
            "flags": {
                "has_court": self.has_court,
                "has_stop_work": self.has_stop_work,
                "has_unsafe_structure": self.has_unsafe_structure,
                "has_hazardous": self.has_hazardous,
            },
        }


@dataclass(frozen=True)
class ComplaintSummary:
    parcel_id: str
    total_count: int = 0
    open_count: int = 0
    last_activity: Optional[str] = None
    risk_level: str = "Low"
    # (service name, count), most frequent first
    top_types: Tuple[Tuple[str, int], ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "opa": self.parcel_id,
            "total_count": self.total_count,
            "open_count": self.open_count,
            "last_activity": self.last_activity,
            "risk_level": self.risk_level,
            "top_types": [{"service_name": name, "cnt": cnt} for name, cnt in self.top_types],
        }
