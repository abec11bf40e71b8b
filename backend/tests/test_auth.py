"""Tests for login, logout and validate endpoints"""
from datetime import datetime, timezone

from fastapi.testclient import TestClient
from prometheus_client import REGISTRY


def test_login_success(client: TestClient):
    """Test logging in with valid credentials"""
    response = client.post("/api/auth/login", json={"username": "admin", "password": "admin123"})
    assert response.status_code == 200

    data = response.json()
    assert data["username"] == "admin"
    assert data["role"] == "Admin"
    assert data["token"].count(".") == 2

    expires_at = datetime.fromisoformat(data["expiresAt"].replace("Z", "+00:00"))
    remaining = (expires_at - datetime.now(timezone.utc)).total_seconds()
    assert 8 * 3600 - 60 < remaining <= 8 * 3600


def test_login_regular_user(client: TestClient):
    response = client.post("/api/auth/login", json={"username": "user1", "password": "password1"})
    assert response.status_code == 200
    assert response.json()["role"] == "User"


def test_login_bad_password(client: TestClient):
    """Test that wrong credentials are rejected"""
    response = client.post("/api/auth/login", json={"username": "admin", "password": "wrong"})
    assert response.status_code == 401
    assert "token" not in response.json()


def test_login_username_is_case_sensitive(client: TestClient):
    response = client.post("/api/auth/login", json={"username": "Admin", "password": "admin123"})
    assert response.status_code == 401


def test_login_requires_both_fields(client: TestClient):
    response = client.post("/api/auth/login", json={"username": "admin"})
    assert response.status_code == 422


def test_login_rate_limited(client: TestClient):
    """Test that repeated logins from one client are throttled"""
    for _ in range(10):
        client.post("/api/auth/login", json={"username": "admin", "password": "wrong"})

    response = client.post("/api/auth/login", json={"username": "admin", "password": "admin123"})
    assert response.status_code == 429
    assert response.json()["error"] == "rate_limit_exceeded"


def test_validate_fresh_token(client: TestClient, login, bearer):
    token = login()

    response = client.get("/api/auth/validate", headers=bearer(token))
    assert response.status_code == 200

    data = response.json()
    assert data["isValid"] is True
    assert data["username"] == "admin"
    assert data["reason"] == "valid"


def test_validate_requires_bearer(client: TestClient):
    response = client.get("/api/auth/validate")
    assert response.status_code == 401
    assert response.headers["www-authenticate"] == "Bearer"


def test_validate_garbage_token_reports_invalid(client: TestClient, bearer):
    response = client.get("/api/auth/validate", headers=bearer("not-a-token"))
    assert response.status_code == 200

    data = response.json()
    assert data["isValid"] is False
    assert data["username"] is None
    assert data["reason"] == "bad_signature"


def test_login_validate_logout_validate(client: TestClient, login, bearer):
    """Test the full session lifecycle for one token"""
    token = login("admin", "admin123")
    assert client.get("/api/auth/validate", headers=bearer(token)).json()["isValid"] is True

    response = client.post("/api/auth/logout", headers=bearer(token))
    assert response.status_code == 200
    assert response.json()["message"]

    data = client.get("/api/auth/validate", headers=bearer(token)).json()
    assert data["isValid"] is False
    assert data["reason"] == "revoked"
    assert "revoked" in data["message"]


def test_logout_is_idempotent(client: TestClient, login, bearer):
    token = login()
    assert client.post("/api/auth/logout", headers=bearer(token)).status_code == 200
    assert client.post("/api/auth/logout", headers=bearer(token)).status_code == 200

    assert client.get("/api/auth/validate", headers=bearer(token)).json()["reason"] == "revoked"


def test_logout_requires_bearer(client: TestClient):
    response = client.post("/api/auth/logout")
    assert response.status_code == 401


def test_logout_rejects_forged_token(client: TestClient, bearer):
    response = client.post("/api/auth/logout", headers=bearer("a.b.c"))
    assert response.status_code == 401


def test_logout_revokes_only_presented_token(client: TestClient, login, bearer):
    admin_token = login("admin", "admin123")
    user_token = login("user1", "password1")

    client.post("/api/auth/logout", headers=bearer(admin_token))

    assert client.get("/api/auth/validate", headers=bearer(user_token)).json()["isValid"] is True


def test_login_activates_for_full_session_lifetime(client: TestClient, login, bearer, clock, token_config):
    token = login()

    clock.advance(token_config.lifetime_seconds - 1)
    assert client.get("/api/auth/validate", headers=bearer(token)).json()["isValid"] is True

    clock.advance(1)
    assert client.get("/api/auth/validate", headers=bearer(token)).json()["reason"] == "inactive"


def test_login_attempts_are_counted(client: TestClient):
    def count(result: str) -> float:
        return REGISTRY.get_sample_value("tokengate_logins_total", {"result": result}) or 0.0

    success_before, failure_before = count("success"), count("failure")

    client.post("/api/auth/login", json={"username": "admin", "password": "admin123"})
    client.post("/api/auth/login", json={"username": "admin", "password": "wrong"})

    assert count("success") == success_before + 1
    assert count("failure") == failure_before + 1


def test_second_login_supersedes_first(client: TestClient, login, bearer):
    """Test that only the most recent login for a user stays valid"""
    first = login()
    second = login()

    first_result = client.get("/api/auth/validate", headers=bearer(first)).json()
    assert first_result["isValid"] is False
    assert first_result["reason"] == "superseded"

    assert client.get("/api/auth/validate", headers=bearer(second)).json()["isValid"] is True


def test_logout_writes_revocation_to_ledger(client: TestClient, login, bearer, services):
    token = login()
    jti = services.validator.verify_claims(token).jti

    client.post("/api/auth/logout", headers=bearer(token))

    assert services.ledger.is_revoked(jti) is True
    assert services.ledger.is_active(jti) is False


def test_login_with_ledger_down(broken_client: TestClient):
    response = broken_client.post("/api/auth/login", json={"username": "admin", "password": "admin123"})
    assert response.status_code == 503
    assert response.json()["error"] == "service_unavailable"


def test_validate_with_ledger_down_fails_closed(broken_client: TestClient, test_settings, bearer):
    from tokengate.models.principal import Principal
    from tokengate.services import build_services

    token = build_services(test_settings).issuer.issue(Principal("admin", "Admin")).token

    data = broken_client.get("/api/auth/validate", headers=bearer(token)).json()
    assert data["isValid"] is False
    assert data["reason"] == "unavailable"
