import dataclasses
from datetime import date

import pytest

from opa_lookup.engine.parcel import fetch_zoning, lookup_by_parcel, validate_parcel_id
from opa_lookup.errors import InvalidInput


@pytest.mark.parametrize("value", ["12345", "1234567890123", "88330905A", "", None, "8833 09050"])
def test_invalid_parcel_ids(value):
    with pytest.raises(InvalidInput) as exc:
        validate_parcel_id(value)
    assert exc.value.code == "INVALID_OPA"


def test_parcel_id_is_trimmed():
    assert validate_parcel_id(" 883309050 ") == "883309050"
    assert validate_parcel_id(883309050) == "883309050"


def test_lookup_joins_record_and_zoning(opa_service, opa_settings):
    record = lookup_by_parcel(opa_service, "883309050", opa_settings)
    assert record.parcel_id == "883309050"
    assert record.address == "1539 S LAMBERT ST"
    assert record.owner == "SMITH JOHN & SMITH JANE"
    assert record.market_value == 250000
    assert record.sale_price == 180000
    assert record.sale_date == date(2019, 5, 1)
    assert record.zoning == "RSA5"


def test_missing_raw_row_leaves_zoning_empty(opa_service, opa_settings):
    record = lookup_by_parcel(opa_service, "883309060", opa_settings)
    assert record is not None
    assert record.zoning is None
    assert record.sale_price is None
    assert fetch_zoning(opa_service, "883309060", opa_settings) is None


def test_unknown_parcel(opa_service, opa_settings):
    assert lookup_by_parcel(opa_service, "999999999", opa_settings) is None


def test_partition_key_narrows_the_scan(opa_service, opa_settings):
    settings = dataclasses.replace(opa_settings, use_partition_key=True)
    record = lookup_by_parcel(opa_service, "042041200", settings)
    assert record.market_value == 1250000
    assert record.sale_date == date(2015, 3, 2)
