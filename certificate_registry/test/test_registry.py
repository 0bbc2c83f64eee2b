# SPDX-FileCopyrightText: 2024 Swiss Confederation
#
# SPDX-License-Identifier: MIT

"""Tests for the http interface of the certificate registry"""

import typing

import pytest
import dotenv

from fastapi.testclient import TestClient

import common.db.database as db
import common.config as common_conf
from certificate_registry import addressing, credentials
from certificate_registry.registry import app
import certificate_registry.config as conf

ADMIN = "admin-identity-A"
ISSUER = "issuer-identity-B"
OTHER = "other-identity-C"

CERTIFICATE_HASH = "deadbeef" * 8
MAX_BULK_ENTRIES = 3


def _api_key() -> str:
    envs = dotenv.dotenv_values(".env")
    return envs.get("API_KEY", "tergum_dev_key")


def t_config() -> typing.Generator[conf.RegistryConfig, None, None]:
    """Override for Registry Config"""
    config = conf.RegistryConfig()
    config.api_key = _api_key()
    config.enable_debug_mode = True
    config.max_bulk_entries = MAX_BULK_ENTRIES
    yield config


def t_session() -> typing.Generator[db.Session, None, None]:
    """
    Override function Database Injection using the in-memory test database
    """
    session = db.session(db_connection_string="sqlite://")
    try:
        yield session
    finally:
        session.close()


@pytest.fixture(scope="module")
def client() -> TestClient:
    client = TestClient(app, headers={"x-api-key": _api_key()})
    app.dependency_overrides[db.env_session] = t_session
    app.dependency_overrides[conf.RegistryConfig] = t_config
    # Injected config & injected specialized config are not the same override
    app.dependency_overrides[common_conf.Config] = t_config
    yield client
    client.close()


def _as(identity: str) -> dict[str, str]:
    return {"x-caller-identity": identity}


@pytest.fixture()
def verified_issuer(client: TestClient) -> str:
    r = client.put("/admin", headers=_as(ADMIN))
    assert r.status_code == 201, r.text
    r = client.put("/issuers", json={"institution_name": "MIT"}, headers=_as(ISSUER))
    assert r.status_code == 201, r.text
    r = client.post(f"/issuer/{addressing.issuer_address(ISSUER)}/verify", headers=_as(ADMIN))
    assert r.status_code == 200, r.text
    return ISSUER


def _issue(client: TestClient, identity: str, certificate_id: str = "cert-1"):
    return client.put(
        "/certificates",
        json={
            "student_name": "Alice",
            "course_name": "CS101",
            "certificate_hash": CERTIFICATE_HASH,
            "certificate_id": certificate_id,
        },
        headers=_as(identity),
    )


def test_health(client: TestClient):
    r = client.get("/health/liveness")
    assert r.status_code == 200, r.text
    r = client.get("/health/readiness")
    assert r.status_code == 200, r.text
    assert r.json()["db_connectivity"] == "HEALTHY"
    r = client.get("/health/debug")
    assert r.status_code == 200, r.text
    assert r.json()["app_name"] == "Certificate Registry"


def test_addresses(client: TestClient):
    r = client.get("/address/admin")
    assert r.status_code == 200, r.text
    assert r.json()["address"] == addressing.admin_address()

    r = client.get("/address/issuer", params={"identity": ISSUER})
    assert r.json()["address"] == addressing.issuer_address(ISSUER)

    r = client.get("/address/certificate", params={"issuer_identity": ISSUER, "certificate_id": "cert-1"})
    assert r.json()["address"] == addressing.certificate_address(ISSUER, "cert-1")


def test_end_to_end(client: TestClient):
    r = client.get("/admin")
    assert r.status_code == 404, r.text
    assert r.json()["error"] == "AdminNotInitialized"

    r = client.put("/admin", headers=_as(ADMIN))
    assert r.status_code == 201, r.text
    assert r.json()["controlling_identity"] == ADMIN
    assert client.get("/admin").json()["address"] == addressing.admin_address()

    r = client.put("/issuers", json={"institution_name": "MIT"}, headers=_as(ISSUER))
    assert r.status_code == 201, r.text
    issuer = r.json()
    assert issuer["status"] == "Unverified"
    assert not issuer["is_verified"]
    assert issuer["address"] == addressing.issuer_address(ISSUER)

    r = client.post(f"/issuer/{issuer['address']}/verify", headers=_as(ADMIN))
    assert r.status_code == 200, r.text
    assert r.json()["is_verified"]

    r = _issue(client, ISSUER)
    assert r.status_code == 201, r.text
    certificate = r.json()
    assert certificate["issuer_address"] == issuer["address"]
    assert certificate["status"] == "Active"

    issuer = client.get(f"/issuer/{issuer['address']}").json()
    assert (issuer["certificates_issued"], issuer["reputation_score"]) == (1, 10)

    r = client.get(f"/issuer/{issuer['address']}/certificates")
    assert r.status_code == 200, r.text
    assert [c["address"] for c in r.json()] == [certificate["address"]]

    r = client.post(f"/certificate/{certificate['address']}/revoke", headers=_as(OTHER))
    assert r.status_code == 403, r.text
    assert r.json()["error"] == "UnauthorizedIssuer"

    r = client.post(f"/certificate/{certificate['address']}/revoke", headers=_as(ISSUER))
    assert r.status_code == 200, r.text
    assert r.json()["is_revoked"]

    r = client.post(f"/certificate/{certificate['address']}/revoke", headers=_as(ISSUER))
    assert r.status_code == 409, r.text
    assert r.json()["error"] == "CertificateAlreadyRevoked"


def test_authentication(client: TestClient):
    r = client.put("/admin", headers={"x-api-key": "wrong-key", **_as(ADMIN)})
    assert r.status_code == 401, r.text
    r = client.put("/admin")
    assert r.status_code == 401, r.text
    assert client.get("/admin").status_code == 404, "Nothing may be initialized by rejected requests"


@pytest.mark.parametrize(
    "identity,expected_status_code,expected_error",
    [
        (ADMIN, 200, None),
        (ISSUER, 403, "UnauthorizedAdmin"),
        (OTHER, 403, "UnauthorizedAdmin"),
    ],
)
def test_revoke_issuer(client: TestClient, verified_issuer: str, identity: str, expected_status_code: int, expected_error: str):
    address = addressing.issuer_address(verified_issuer)
    r = client.post(f"/issuer/{address}/revoke", headers=_as(identity))
    assert r.status_code == expected_status_code, r.text
    if expected_error:
        assert r.json()["error"] == expected_error
        assert r.headers["Cache-Control"] == "no-store"
        return
    assert r.json()["status"] == "Revoked"
    r = _issue(client, verified_issuer)
    assert r.status_code == 409, r.text
    assert r.json()["error"] == "IssuerRevoked"


def test_issue_certificate_errors(client: TestClient, verified_issuer: str):
    r = _issue(client, OTHER)
    assert r.status_code == 404, r.text
    assert r.json()["error"] == "IssuerNotFound"

    r = client.put("/issuers", json={"institution_name": "Harvard"}, headers=_as(OTHER))
    assert r.status_code == 201, r.text
    r = _issue(client, OTHER)
    assert r.status_code == 409, r.text
    assert r.json()["error"] == "IssuerNotVerified"

    assert _issue(client, verified_issuer).status_code == 201
    r = _issue(client, verified_issuer)
    assert r.status_code == 409, r.text
    assert r.json()["error"] == "AlreadyExists"

    r = _issue(client, verified_issuer, certificate_id="x" * 65)
    assert r.status_code == 400, r.text
    assert r.json()["error"] == "CertificateIdTooLong"


def test_register_issuer_errors(client: TestClient):
    r = client.put("/issuers", json={"institution_name": ""}, headers=_as(ISSUER))
    assert r.status_code == 400, r.text
    assert r.json()["error"] == "EmptyInstitutionName"

    r = client.put("/issuers", json={}, headers=_as(ISSUER))
    assert r.status_code == 400, r.text
    assert r.json()["error"] == "invalid_request"

    assert client.put("/issuers", json={"institution_name": "MIT"}, headers=_as(ISSUER)).status_code == 201
    r = client.put("/issuers", json={"institution_name": "MIT"}, headers=_as(ISSUER))
    assert r.status_code == 409, r.text
    assert r.json()["error"] == "AlreadyRegistered"

    r = client.get("/issuers")
    assert r.status_code == 200, r.text
    assert [issuer["institution_name"] for issuer in r.json()] == ["MIT"]


@pytest.mark.parametrize(
    "route",
    ["/issuer/{address}", "/issuer/{address}/certificates", "/certificate/{address}", "/certificate/{address}/check"],
)
@pytest.mark.parametrize(
    "address,expected_status_code",
    [
        (addressing.issuer_address("nobody"), 404),
        ("InvalidAddress", 422),
    ],
)
def test_faulty_get(client: TestClient, route: str, address: str, expected_status_code: int):
    """Tests that the service returns nicely 404 / 422 instead of crashing with bogus input"""
    r = client.get(route.format(address=address))
    assert r.status_code == expected_status_code, r.text


def test_check_certificate(client: TestClient, verified_issuer: str):
    address = _issue(client, verified_issuer).json()["address"]

    r = client.get(f"/certificate/{address}/check")
    assert r.status_code == 200, r.text
    check = r.json()
    assert check["is_valid"]
    assert check["hash_matches"] is None
    assert check["institution_name"] == "MIT"
    assert check["issuer_status"] == "Verified"

    r = client.get(f"/certificate/{address}/check", params={"certificate_hash": "0" * 64})
    assert r.json()["hash_matches"] is False
    assert not r.json()["is_valid"]

    r = client.get(f"/certificate/{address}/check", params={"certificate_hash": CERTIFICATE_HASH})
    assert r.json()["is_valid"]


def test_bulk_issuance(client: TestClient, verified_issuer: str):
    entries = [
        {"student_name": "Alice", "course_name": "CS101", "certificate_id": "alice-1", "data": {"grade": "A"}},
        {"student_name": "", "course_name": "CS101"},
        {"student_name": "Bob", "course_name": "CS101"},
    ]
    r = client.put("/certificates/bulk", json=entries, headers=_as(verified_issuer))
    assert r.status_code == 200, r.text
    results = r.json()
    assert results[0]["address"] == addressing.certificate_address(verified_issuer, "alice-1")
    assert results[0]["certificate_hash"] == credentials.certificate_digest(
        {"student_name": "Alice", "course_name": "CS101", "certificate_id": "alice-1", "data": {"grade": "A"}}
    )
    assert results[1]["error"] == "EmptyField"
    assert results[2]["address"] is not None

    issuer = client.get(f"/issuer/{addressing.issuer_address(verified_issuer)}").json()
    assert issuer["certificates_issued"] == 2


@pytest.mark.parametrize(
    "count,expected_error",
    [
        (0, "EmptyBulkRequest"),
        (MAX_BULK_ENTRIES + 1, "TooManyBulkEntries"),
    ],
)
def test_bulk_issuance_limits(client: TestClient, verified_issuer: str, count: int, expected_error: str):
    entries = [{"student_name": f"Student {i}", "course_name": "CS101"} for i in range(count)]
    r = client.put("/certificates/bulk", json=entries, headers=_as(verified_issuer))
    assert r.status_code == 400, r.text
    assert r.json()["error"] == expected_error
    assert r.json()["error_description"]
    issuer = client.get(f"/issuer/{addressing.issuer_address(verified_issuer)}").json()
    assert issuer["certificates_issued"] == 0
