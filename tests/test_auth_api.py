"""会话与可见性接口的集成测试。"""

from fastapi.testclient import TestClient


def test_health(client: TestClient):
    response = client.get("/health")
    assert response.json() == {"msg": "OK", "data": {"status": "healthy"}, "code": 200}


def test_me_returns_canonical_roles_and_visibility(client: TestClient, backend):
    response = client.get("/api/v1/auth/me")

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["user"]["roles"] == ["SOFTWARE_ADMIN"]
    assert "person_reporting" in data["pages"]
    assert "inbox" not in data["pages"]
    assert "provision_sections" in data["actions"]
    assert backend.calls("GET", "/api/auth/me")[0]["headers"]["cookie"] == "session=test-session"


def test_me_without_session_is_401(client: TestClient, backend):
    backend.user = None

    response = client.get("/api/v1/auth/me")

    assert response.status_code == 401
    assert response.json()["msg"] == "Not authenticated"


def test_auth_service_outage_is_502(client: TestClient, backend):
    backend.fail_transport("GET", "/api/auth/me")

    response = client.get("/api/v1/auth/me")

    assert response.status_code == 502
    assert response.json()["msg"] == "Authentication service unavailable"


def test_logout_succeeds_even_if_upstream_fails(client: TestClient, backend):
    backend.fail("POST", "/api/auth/logout", 500, {"detail": "boom"})

    response = client.post("/api/v1/auth/logout")

    assert response.status_code == 200
    assert len(backend.calls("POST", "/api/auth/logout")) == 1


def test_page_access_checks(client: TestClient, backend):
    backend.login_as("SECTION_ADMIN")
    denied = client.get("/api/v1/access/pages/person_reporting").json()["data"]
    assert denied == {"key": "person_reporting", "allowed": False}

    backend.login_as("software_admin")
    allowed = client.get("/api/v1/access/pages/person_reporting").json()["data"]
    assert allowed["allowed"] is True


def test_unknown_tab_is_denied(client: TestClient, backend):
    backend.login_as("GUEST")

    response = client.get("/api/v1/access/tabs/users")

    assert response.status_code == 200
    assert response.json()["data"]["allowed"] is False


def test_request_id_is_echoed_and_forwarded(client: TestClient, backend):
    response = client.get("/api/v1/auth/me", headers={"X-Request-ID": "req-123"})

    assert response.headers["x-request-id"] == "req-123"
    assert backend.calls("GET", "/api/auth/me")[0]["headers"]["x-request-id"] == "req-123"
