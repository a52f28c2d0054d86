import json

import pytest

from opa_lookup.__main__ import main
from opa_lookup.config import reset_settings_cache


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch):
    # main() writes the --backend/--db overrides into the environment.
    monkeypatch.setenv("OPA_BACKEND", "sqlite")
    monkeypatch.setenv("OPA_SQLITE_PATH", "./unused.sqlite")
    for name in ("ATHENA_DATABASE", "ATHENA_TABLE", "OPA_LOOKUP_TABLE", "OPA_PUBLIC_TABLE"):
        monkeypatch.delenv(name, raising=False)
    yield
    reset_settings_cache()


def test_cli_opa_lookup(opa_db, capsys):
    assert main(["--db", opa_db, "--opa", "883309050"]) == 0
    data = json.loads(capsys.readouterr().out)
    assert data["mode"] == "opa"
    assert data["result"]["zoning"] == "RSA5"


def test_cli_address_not_found(opa_db, capsys):
    assert main(["--db", opa_db, "--address", "526 Market St"]) == 1
    data = json.loads(capsys.readouterr().out)
    assert data["code"] == "ADDRESS_NOT_FOUND"
    assert data["suggestions"]


def test_cli_suggest(opa_db, capsys):
    assert main(["--db", opa_db, "--suggest", "lambert", "--limit", "1"]) == 0
    data = json.loads(capsys.readouterr().out)
    assert data["count"] == 1


def test_cli_invalid_opa(opa_db, capsys):
    assert main(["--db", opa_db, "--opa", "abc"]) == 2
    assert json.loads(capsys.readouterr().out)["code"] == "INVALID_OPA"


def test_cli_requires_an_action():
    with pytest.raises(SystemExit):
        main([])


def test_cli_huge_house_number(opa_db, capsys):
    assert main(["--db", opa_db, "--address", "99999999999999999999 Market St"]) == 1
    assert json.loads(capsys.readouterr().out)["code"] == "ADDRESS_NOT_FOUND"
