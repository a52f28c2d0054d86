from __future__ import annotations

from opa_lookup.config import Settings, get_settings, reset_settings_cache


def _settings(monkeypatch, **env):
    for k, v in env.items():
        if v is None:
            monkeypatch.delenv(k, raising=False)
        else:
            monkeypatch.setenv(k, str(v))
    return Settings.from_env()


def test_defaults(monkeypatch):
    s = _settings(
        monkeypatch,
        OPA_BACKEND=None,
        ATHENA_DATABASE=None,
        ATHENA_TABLE=None,
        OPA_LOOKUP_TABLE=None,
        OPA_PUBLIC_TABLE=None,
        OPA_USE_PARTITION_KEY=None,
        OPA_NOT_FOUND_SUGGESTIONS=None,
        OPA_COL_OPA=None,
    )
    assert s.backend == "sqlite"
    assert s.structured_table == "opa_properties_lookup2"
    assert s.raw_table == "opa_properties_public"
    assert s.use_partition_key is False
    assert s.not_found_suggestions == 5
    assert s.columns.parcel == "parcel_number"


def test_database_qualifies_tables(monkeypatch):
    s = _settings(monkeypatch, ATHENA_DATABASE="opa", OPA_LOOKUP_TABLE=None, ATHENA_TABLE="lookup_v3")
    assert s.structured_table == "opa.lookup_v3"
    assert s.raw_table.startswith("opa.")


def test_overrides_and_clamping(monkeypatch):
    s = _settings(
        monkeypatch,
        OPA_BACKEND="CARTO",
        OPA_USE_PARTITION_KEY="yes",
        OPA_NOT_FOUND_SUGGESTIONS="100",
        OPA_COL_OPA="opa_number",
        OPA_HTTP_TIMEOUT="not-a-number",
    )
    assert s.backend == "carto"
    assert s.use_partition_key is True
    assert s.not_found_suggestions == 25
    assert s.columns.parcel == "opa_number"
    assert s.http_timeout == 30

    assert _settings(monkeypatch, OPA_NOT_FOUND_SUGGESTIONS="0").not_found_suggestions == 1


def test_settings_are_cached_until_reset(monkeypatch):
    monkeypatch.setenv("OPA_SQLITE_PATH", "/tmp/a.sqlite")
    reset_settings_cache()
    try:
        first = get_settings()
        monkeypatch.setenv("OPA_SQLITE_PATH", "/tmp/b.sqlite")
        assert get_settings() is first
        reset_settings_cache()
        assert get_settings().sqlite_path == "/tmp/b.sqlite"
    finally:
        reset_settings_cache()
