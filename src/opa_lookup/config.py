from __future__ import annotations

import os
from dataclasses import dataclass
from datetime import datetime, timezone
from functools import lru_cache
from typing import Optional


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    v = str(raw).strip().lower()
    if v in {"1", "true", "t", "yes", "y", "on"}:
        return True
    if v in {"0", "false", "f", "no", "n", "off"}:
        return False
    return default


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not str(raw).strip():
        return default
    try:
        return int(str(raw).strip())
    except ValueError:
        return default


def _env_str(*names: str, default: str = "") -> str:
    for name in names:
        value = os.getenv(name)
        if value is not None and str(value).strip():
            return str(value).strip()
    return default


@dataclass(frozen=True)
class Columns:
    """Column names shared by the structured and raw tables."""

    parcel: str = "parcel_number"
    owner_1: str = "owner_1"
    owner_2: str = "owner_2"
    market_value: str = "market_value"
    sale_price: str = "sale_price"
    sale_date: str = "sale_date"
    house_number: str = "house_number"
    direction: str = "street_direction"
    street_name: str = "street_name"
    designation: str = "street_designation"
    suffix: str = "suffix"
    unit: str = "unit"
    zip: str = "zip_code"
    partition: str = "pn_prefix2"

    # raw table only
    location: str = "location"
    zoning: str = "zoning"


@dataclass(frozen=True)
class Settings:
    """Runtime configuration, read once from the environment.

    Defaults target the public OPA property dataset layout.
    """

    backend: str
    sqlite_path: str
    carto_url: str
    carto_api_key: Optional[str]
    http_timeout: int
    database: str
    lookup_table: str
    public_table: str
    violations_table: str
    complaints_table: str
    columns: Columns
    use_partition_key: bool
    not_found_suggestions: int
    tax_lookup_url: str
    log_level: str
    build_stamp: str

    @classmethod
    def from_env(cls) -> "Settings":
        columns = Columns(
            parcel=_env_str("OPA_COL_OPA", default="parcel_number"),
            owner_1=_env_str("OPA_COL_OWNER", default="owner_1"),
            market_value=_env_str("OPA_COL_MARKET_VALUE", default="market_value"),
            sale_price=_env_str("OPA_COL_SALE_PRICE", default="sale_price"),
            sale_date=_env_str("OPA_COL_SALE_DATE", default="sale_date"),
            zoning=_env_str("OPA_COL_ZONING", default="zoning"),
        )
        build_stamp = _env_str(
            "RENDER_GIT_COMMIT",
            "GIT_COMMIT",
            "COMMIT_SHA",
            "SOURCE_VERSION",
            default=f"local-{datetime.now(timezone.utc).isoformat()}",
        )
        return cls(
            backend=_env_str("OPA_BACKEND", default="sqlite").lower(),
            sqlite_path=_env_str("OPA_SQLITE_PATH", default="./opa.sqlite"),
            carto_url=_env_str("OPA_CARTO_URL", default="https://phl.carto.com/api/v2/sql"),
            carto_api_key=_env_str("OPA_CARTO_API_KEY") or None,
            http_timeout=_env_int("OPA_HTTP_TIMEOUT", 30),
            database=_env_str("ATHENA_DATABASE"),
            lookup_table=_env_str("OPA_LOOKUP_TABLE", "ATHENA_TABLE", default="opa_properties_lookup2"),
            public_table=_env_str("OPA_PUBLIC_TABLE", default="opa_properties_public"),
            violations_table=_env_str("OPA_VIOLATIONS_TABLE", default="violations"),
            complaints_table=_env_str("OPA_COMPLAINTS_TABLE", default="complaints"),
            columns=columns,
            use_partition_key=_env_bool("OPA_USE_PARTITION_KEY", False),
            not_found_suggestions=max(1, min(25, _env_int("OPA_NOT_FOUND_SUGGESTIONS", 5))),
            tax_lookup_url=_env_str("OPA_TAX_LOOKUP_URL", default="https://tax-services.phila.gov/_/"),
            log_level=_env_str("LOG_LEVEL", default="INFO").upper(),
            build_stamp=build_stamp,
        )

    def table(self, name: str) -> str:
        if self.database:
            return f"{self.database}.{name}"
        return name

    @property
    def structured_table(self) -> str:
        return self.table(self.lookup_table)

    @property
    def raw_table(self) -> str:
        return self.table(self.public_table)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings.from_env()


def reset_settings_cache() -> None:
    """Test helper to force env re-read."""

    get_settings.cache_clear()
