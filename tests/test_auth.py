from datetime import timedelta

import pytest

from conftest import PASSWORD, admin_headers, agent_headers, auth_headers, mk_admin, mk_agent, mk_service, mk_vendor
from enums.user_role import UserRole
from services import auth_service
from utils.exceptions import AuthError
from utils.security import create_access_token, decode_access_token


def test_password_login_issues_role_token(client):
    mk_agent()
    r = client.post("/agent/login", json={"email": "agent@example.com", "password": PASSWORD})
    assert r.status_code == 200, r.text
    data = r.json()["data"]
    assert data["role"] == "agent"
    assert data["name"] == "Agent Smith"
    assert data["expires_at"]

    claims = decode_access_token(data["token"])
    assert claims["sub"] == "agent@example.com"
    assert claims["role"] == UserRole.AGENT
    assert claims["jti"]


def test_wrong_password_and_deleted_accounts_cannot_login(client):
    mk_admin()
    mk_vendor("gone@example.com", [mk_service("Plumbing")], deleted=True)

    r = client.post("/admin/login", json={"email": "admin@example.com", "password": "nope"})
    assert r.status_code == 401

    r = client.post("/vendor/login", json={"email": "gone@example.com", "password": PASSWORD})
    assert r.status_code == 401


def test_login_is_scoped_to_role(client):
    mk_agent()
    r = client.post("/admin/login", json={"email": "agent@example.com", "password": PASSWORD})
    assert r.status_code == 401


def test_vendor_token_is_rejected_by_admin_routes(client):
    mk_admin()
    mk_vendor("v@example.com", [mk_service("Plumbing")])

    r = client.get("/admin/admins", headers=auth_headers("v@example.com", UserRole.VENDOR))
    assert r.status_code == 401

    r = client.get("/vendor/assigned-properties", headers=admin_headers())
    assert r.status_code == 401


def test_agent_routes_require_agent_role(client):
    mk_admin()
    mk_agent()
    assert client.get("/agent/services", headers=admin_headers()).status_code == 401
    assert client.get("/agent/services", headers=agent_headers()).status_code == 200


def test_missing_or_garbage_token_is_401(client):
    assert client.get("/admin/admins").status_code == 401
    r = client.get("/admin/admins", headers={"Authorization": "Bearer not-a-jwt"})
    assert r.status_code == 401
    assert r.json()["status"] == "failure"


def test_expired_token_is_rejected(client):
    mk_admin()
    token, _ = create_access_token("admin@example.com", UserRole.ADMIN, "Admin", timedelta(seconds=-5))
    r = client.get("/auth/validate-token", headers={"Authorization": f"Bearer {token}"})
    assert r.status_code == 401


def test_validate_token_echoes_identity(client):
    mk_admin()
    r = client.get("/auth/validate-token", headers=admin_headers())
    assert r.status_code == 200
    data = r.json()["data"]
    assert data["email"] == "admin@example.com"
    assert data["role"] == "admin"
    assert data["expires_at"]


def test_token_of_deleted_account_is_rejected(client):
    mk_admin("live@example.com")
    mk_admin("gone@example.com", deleted=True)
    r = client.get("/auth/validate-token", headers=admin_headers("gone@example.com"))
    assert r.status_code == 401


def test_token_with_tampered_signature_is_rejected():
    token, _ = create_access_token("admin@example.com", UserRole.ADMIN, "Admin")
    with pytest.raises(AuthError):
        decode_access_token(token[:-2] + ("AA" if not token.endswith("AA") else "BB"))


def test_google_login_matches_existing_account(client, monkeypatch):
    mk_vendor("v@example.com", [mk_service("Plumbing")])
    monkeypatch.setattr(
        auth_service,
        "verify_google_credential",
        lambda credential: {"email": "v@example.com", "email_verified": True},
    )

    r = client.post("/auth/vendor/google-login", json={"credential": "google-id-token"})
    assert r.status_code == 200, r.text
    assert r.json()["data"]["role"] == "vendor"

    # Federated login never creates accounts
    r = client.post("/auth/agent/google-login", json={"credential": "google-id-token"})
    assert r.status_code == 401


def test_google_login_requires_verified_email(client, monkeypatch):
    mk_admin()
    monkeypatch.setattr(
        auth_service,
        "verify_google_credential",
        lambda credential: {"email": "admin@example.com", "email_verified": False},
    )
    r = client.post("/auth/admin/google-login", json={"credential": "google-id-token"})
    assert r.status_code == 401


def test_google_login_rejects_bad_token(client, monkeypatch):
    def reject(*args, **kwargs):
        raise ValueError("Wrong issuer")

    monkeypatch.setattr(auth_service.id_token, "verify_oauth2_token", reject)
    r = client.post("/auth/admin/google-login", json={"credential": "forged"})
    assert r.status_code == 401
    assert r.json()["message"] == "Invalid Google token"
