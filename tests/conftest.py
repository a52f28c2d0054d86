import dataclasses
import os
import socket
import sqlite3
import sys
import urllib.request
from pathlib import Path

import pytest


REPO_ROOT = Path(__file__).resolve().parents[1]
SRC = REPO_ROOT / "src"

# Prefer repo sources over any installed package.
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))


STRUCTURED_COLUMNS = (
    "parcel_number",
    "owner_1",
    "owner_2",
    "market_value",
    "sale_price",
    "sale_date",
    "house_number",
    "street_direction",
    "street_name",
    "street_designation",
    "suffix",
    "unit",
    "zip_code",
    "pn_prefix2",
)
RAW_COLUMNS = STRUCTURED_COLUMNS[:-1] + ("location", "zoning")

# parcel, owner_1, owner_2, market_value, sale_price, sale_date,
# house, direction, street, designation, suffix, unit, zip
PROPERTIES = [
    ("883309050", "SMITH JOHN", "SMITH JANE", "250000", "180000", "2019-05-01 00:00:00",
     "1539", "S", "LAMBERT", "ST", None, None, "19146"),
    ("883309060", "DOE MARY", None, "210000", None, None,
     "1541", "S", "LAMBERT", "ST", None, None, "19146"),
    ("042041200", "MARKET HOLDINGS LLC", None, "1,250,000", "900000", "2015-03-02",
     "500", None, "MARKET", "ST", None, None, "19106"),
    ("042041300", "MARKET PLAZA LP", None, "3000000", None, None,
     "599", None, "MARKET", "ST", None, None, "19106"),
    ("042099900", "VIEW LLC", None, "150000", None, None,
     "500", None, "MARKETVIEW", "DR", None, None, "19115"),
    ("151234500", "BROAD RANGE LLC", None, "400000", None, None,
     "1500-10", "N", "BROAD", "ST", None, None, "19121"),
    ("781000100", "KELLY TRUST", None, "500000", None, None,
     "101", None, "KELLY", None, "DR", None, "19130"),
    ("301000200", "ELM OWNER", None, "120000", None, None,
     "200", None, "ELM ST", None, None, None, "19147"),
    ("272000300", "UNIVERSITY LLC", None, "800000", None, None,
     "4000", None, "BALTIMORE", "AVE", None, None, "19104"),
]

# parcel -> (location, zoning); 883309060 has no raw row.
RAW_EXTRAS = {
    "883309050": ("1539 S LAMBERT ST", "RSA5"),
    "042041200": ("500 MARKET ST", "CMX5"),
    "042041300": ("599 MARKET ST", "CMX5"),
    "042099900": ("500 MARKETVIEW DR", "RSD3"),
    "151234500": ("1500-10 N BROAD ST", "CMX3"),
    "781000100": ("101 KELLY DR", "SP-PO-A"),
    "301000200": ("200 ELM ST", "RSA5"),
    "272000300": ("4000 BALTIMORE AVE", "CMX2"),
}

# Raw-only parcel with a blank location.
RAW_ONLY = [
    ("881000900", "GREEN OWNER", None, "90000", None, None,
     "10", None, "GREEN", "LN", None, None, "19119", "", "RSA3"),
]

VIOLATION_COLUMNS = (
    "opa_account_num",
    "casenumber",
    "casestatus",
    "caseprioritydesc",
    "casetype",
    "casecreateddate",
    "casecompleteddate",
    "violationnumber",
    "violationstatus",
    "violationdate",
    "violationresolutiondate",
    "violationresolutioncode",
    "violationcode",
    "violationcodetitle",
    "mostrecentinvestigation",
)

# opa, case, case status, priority, violation date, code title, last investigation
VIOLATIONS = [
    ("883309050", "CF-1", "IN VIOLATION", "STANDARD", "2023-02-01", "PROPERTY MAINTENANCE", "2023-06-15"),
    ("883309050", "CF-2", "CLOSED", "STANDARD", "2018-04-10", "RUBBISH", None),
    ("883309050", "CF-3", "CLOSED", "STANDARD", None, "RUBBISH", None),
    ("042041200", "CF-10", "IN COURT", "STANDARD", "2021-09-01", "FIRE CODE", None),
    ("042041200", "CF-11", "OPEN", "HAZARDOUS", "2022-01-05", "UNSAFE STRUCTURE", "2022-02-01"),
    ("042041200", "CF-12", "CLOSED", "STANDARD", "2010-05-05", "RUBBISH", None),
]

COMPLAINT_COLUMNS = (
    "opa_account_num",
    "service_request_id",
    "service_name",
    "status",
    "requested_datetime",
    "updated_datetime",
    "address",
    "agency_responsible",
    "subject",
    "description",
)

# opa, request id, service name, status, requested
COMPLAINTS = [
    ("883309050", "SR-1", "Illegal Dumping", "Open", "2024-03-01 10:00:00"),
    ("883309050", "SR-2", "Illegal Dumping", "Closed", "2023-01-01 09:00:00"),
    ("883309050", "SR-3", "Graffiti Removal", "resolved", "2022-07-04 12:00:00"),
    ("883309050", "SR-4", None, None, None),
    ("042041200", "SR-20", "Street Light Outage", "Closed", "2020-11-11 08:00:00"),
]

def seed_opa_db(path):
    conn = sqlite3.connect(str(path))
    try:
        conn.execute(
            "CREATE TABLE opa_properties_lookup2 (%s)"
            % ", ".join(f"{c} TEXT" for c in STRUCTURED_COLUMNS)
        )
        conn.execute(
            "CREATE TABLE opa_properties_public (%s)"
            % ", ".join(f"{c} TEXT" for c in RAW_COLUMNS)
        )
        for row in PROPERTIES:
            conn.execute(
                "INSERT INTO opa_properties_lookup2 VALUES (%s)" % ", ".join("?" * len(STRUCTURED_COLUMNS)),
                row + (row[0][:2],),
            )
            extras = RAW_EXTRAS.get(row[0])
            if extras:
                conn.execute(
                    "INSERT INTO opa_properties_public VALUES (%s)" % ", ".join("?" * len(RAW_COLUMNS)),
                    row + extras,
                )
        for row in RAW_ONLY:
            conn.execute(
                "INSERT INTO opa_properties_public VALUES (%s)" % ", ".join("?" * len(RAW_COLUMNS)),
                row,
            )
        _seed_cases(conn)
        conn.commit()
    finally:
        conn.close()
    return str(path)


def _seed_cases(conn):
    conn.execute("CREATE TABLE violations (%s)" % ", ".join(f"{c} TEXT" for c in VIOLATION_COLUMNS))
    for opa, case, status, priority, vdate, title, investigated in VIOLATIONS:
        row = dict.fromkeys(VIOLATION_COLUMNS)
        row.update(
            opa_account_num=opa,
            casenumber=case,
            casestatus=status,
            caseprioritydesc=priority,
            casetype="NOTICE OF VIOLATION",
            violationnumber=case + "-V",
            violationdate=vdate,
            violationcodetitle=title,
            mostrecentinvestigation=investigated,
        )
        conn.execute(
            "INSERT INTO violations VALUES (%s)" % ", ".join("?" * len(VIOLATION_COLUMNS)),
            tuple(row[c] for c in VIOLATION_COLUMNS),
        )
    conn.execute("CREATE TABLE complaints (%s)" % ", ".join(f"{c} TEXT" for c in COMPLAINT_COLUMNS))
    for opa, request_id, service_name, status, requested in COMPLAINTS:
        row = dict.fromkeys(COMPLAINT_COLUMNS)
        row.update(
            opa_account_num=opa,
            service_request_id=request_id,
            service_name=service_name,
            status=status,
            requested_datetime=requested,
            agency_responsible="Streets Department",
        )
        conn.execute(
            "INSERT INTO complaints VALUES (%s)" % ", ".join("?" * len(COMPLAINT_COLUMNS)),
            tuple(row[c] for c in COMPLAINT_COLUMNS),
        )


@pytest.fixture()
def opa_db(tmp_path):
    return seed_opa_db(tmp_path / "opa.sqlite")


@pytest.fixture()
def opa_settings(opa_db):
    from opa_lookup.config import Settings

    return dataclasses.replace(
        Settings.from_env(),
        backend="sqlite",
        sqlite_path=opa_db,
        database="",
        lookup_table="opa_properties_lookup2",
        public_table="opa_properties_public",
        violations_table="violations",
        complaints_table="complaints",
        use_partition_key=False,
        not_found_suggestions=5,
    )


@pytest.fixture()
def opa_service(opa_settings):
    from opa_lookup.backends.sqlite import SQLiteQueryService

    service = SQLiteQueryService(opa_settings.sqlite_path)
    try:
        yield service
    finally:
        service.close()


@pytest.fixture(autouse=True)
def block_network(monkeypatch):
    if os.getenv("LIVE") == "1":
        return

    real_connect = socket.socket.connect

    def guarded_connect(sock, address):
        host = address[0]
        if host not in ("127.0.0.1", "localhost"):
            raise RuntimeError("Network access blocked in tests")
        return real_connect(sock, address)

    monkeypatch.setattr(socket.socket, "connect", guarded_connect)
    monkeypatch.setattr(
        urllib.request,
        "urlopen",
        lambda *args, **kwargs: (_ for _ in ()).throw(
            RuntimeError("Network access blocked in tests")
        ),
    )
