"""账号管理接口的集成测试。"""

from fastapi.testclient import TestClient


def test_list_credentials_canonicalizes_roles(client: TestClient):
    response = client.get("/api/v1/admin/users/credentials")

    assert response.status_code == 200
    roles = [item["role"] for item in response.json()["data"]]
    assert roles == ["SOFTWARE_ADMIN", "SECTION_ADMIN"]


def test_software_admin_cannot_be_deleted(client: TestClient, backend):
    response = client.delete("/api/v1/admin/users/1")

    assert response.status_code == 403
    assert response.json()["msg"] == "Cannot delete SOFTWARE_ADMIN user"
    assert backend.calls("DELETE", "/api/admin/users/1") == []


def test_delete_user(client: TestClient, backend):
    response = client.delete("/api/v1/admin/users/7")

    assert response.status_code == 200
    assert response.json()["data"] == {"user_id": 7, "username": "sec_100_admin"}
    assert len(backend.calls("DELETE", "/api/admin/users/7")) == 1


def test_delete_unknown_user_is_404(client: TestClient, backend):
    assert client.delete("/api/v1/admin/users/404").status_code == 404
    assert backend.calls("DELETE", "/api/admin/users/404") == []


def test_delete_failure_uses_upstream_detail(client: TestClient, backend):
    backend.fail("DELETE", "/api/admin/users/7", 400, {"detail": "User owns open incidents"})

    response = client.delete("/api/v1/admin/users/7")

    assert response.status_code == 400
    assert response.json()["msg"] == "User owns open incidents"


def test_recreate_section_admin(client: TestClient, backend):
    response = client.post("/api/v1/admin/sections/100/recreate-admin")

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["section_name"] == "Triage"
    assert [item["value"] for item in data["credentials"]["fields"]] == ["sec_100_admin", "N3w!secret"]


def test_recreate_admin_rejects_non_sections(client: TestClient, backend):
    response = client.post("/api/v1/admin/sections/10/recreate-admin")

    assert response.status_code == 404
    assert backend.calls("POST", "/api/admin/sections/10/recreate-admin") == []


def test_user_management_requires_software_admin(client: TestClient, backend):
    backend.login_as("COMPLAINT_SUPERVISOR")

    assert client.get("/api/v1/admin/users/credentials").status_code == 200
    assert client.delete("/api/v1/admin/users/7").status_code == 403

    backend.login_as("WORKER")
    assert client.get("/api/v1/admin/users/credentials").status_code == 403
