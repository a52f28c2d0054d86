from opa_lookup.engine.fuzzy import match_fuzzy


def test_location_substring(opa_service, opa_settings):
    records = match_fuzzy(opa_service, "LAMBERT", None, 5, opa_settings)
    assert [r.parcel_id for r in records] == ["883309050"]
    assert records[0].zoning == "RSA5"


def test_results_ordered_by_location_and_limited(opa_service, opa_settings):
    records = match_fuzzy(opa_service, "MARKET", None, 2, opa_settings)
    assert [r.address for r in records] == ["500 MARKET ST", "500 MARKETVIEW DR"]


def test_zip_narrows_results(opa_service, opa_settings):
    records = match_fuzzy(opa_service, "MARKET", "19115", 5, opa_settings)
    assert [r.parcel_id for r in records] == ["042099900"]


def test_blank_location_falls_back_to_components(opa_service, opa_settings):
    records = match_fuzzy(opa_service, "GREEN LN", None, 5, opa_settings)
    assert len(records) == 1
    assert records[0].parcel_id == "881000900"
    assert records[0].address == "10 GREEN LN"


def test_blank_core_returns_nothing(opa_service, opa_settings):
    assert match_fuzzy(opa_service, "  ", None, 5, opa_settings) == []
