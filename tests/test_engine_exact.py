import pytest

from opa_lookup.address import normalize, parse_address
from opa_lookup.engine.exact import exact_steps, match_exact, match_exact_with_strategy
from opa_lookup.schema import ParsedAddress


def _match(service, settings, raw):
    n = normalize(raw)
    return match_exact_with_strategy(service, parse_address(n.core), n.zip, settings)


@pytest.mark.parametrize(
    "raw,parcel_id,step",
    [
        ("1539 S Lambert St", "883309050", "designation"),
        ("1539 S Lambert St, Philadelphia, PA 19146", "883309050", "designation"),
        ("1539 Lambert St", "883309050", "designation"),
        ("1539 S Lambert", "883309050", "any"),
        ("4000 Baltimore Avenue", "272000300", "designation"),
        ("101 Kelly Dr", "781000100", "suffix"),
        ("200 Elm St", "301000200", "name"),
        ("1505 N Broad St", "151234500", "designation"),
        ("1510 N Broad St", "151234500", "designation"),
        ("500 Market St", "042041200", "designation"),
    ],
)
def test_exact_hits(opa_service, opa_settings, raw, parcel_id, step):
    record, hit_step = _match(opa_service, opa_settings, raw)
    assert record is not None
    assert record.parcel_id == parcel_id
    assert hit_step == step


@pytest.mark.parametrize(
    "raw",
    [
        "1511 N Broad St",
        "526 Market St",
        "1539 S Lambert St 19103",
        "1539 N Lambert St",
        "500 Mark St",
    ],
)
def test_exact_misses(opa_service, opa_settings, raw):
    assert _match(opa_service, opa_settings, raw) == (None, None)


def test_exact_record_carries_zoning(opa_service, opa_settings):
    record = match_exact(opa_service, parse_address("500 MARKET ST"), None, opa_settings)
    assert record.zoning == "CMX5"
    assert record.owner == "MARKET HOLDINGS LLC"


def test_no_steps_without_house_or_street(opa_settings):
    assert exact_steps(ParsedAddress(), None, opa_settings) == []
    assert exact_steps(ParsedAddress(house_number=12, direction="N"), None, opa_settings) == []


def test_step_order_with_street_type(opa_settings):
    steps = exact_steps(parse_address("4000 BALTIMORE AVENUE"), None, opa_settings)
    assert [name for name, _ in steps] == ["designation", "suffix", "name"]


def test_unbindable_house_number_has_no_steps(opa_settings):
    assert exact_steps(parse_address("99999999999999999999 MARKET ST"), None, opa_settings) == []
    assert exact_steps(parse_address("9223372036854775807 MARKET ST"), None, opa_settings) != []
