"""组织单元接口的集成测试。"""

from fastapi.testclient import TestClient


def _ids(response):
    return [item["id"] for item in response.json()["data"]["items"]]


def test_full_inventory(client: TestClient):
    response = client.get("/api/v1/org-units")

    assert response.status_code == 200
    assert response.json()["data"]["count"] == 6


def test_filtered_views(client: TestClient):
    assert _ids(client.get("/api/v1/org-units/leaves")) == [100, 101]
    assert _ids(client.get("/api/v1/org-units/administrations")) == [1, 2]
    assert _ids(client.get("/api/v1/org-units/departments")) == [10, 11]
    assert _ids(client.get("/api/v1/org-units/section-parents")) == [1, 2, 10, 11]
    assert _ids(client.get("/api/v1/org-units/10/children")) == [100]


def test_remote_views_use_the_prefiltered_endpoints(client: TestClient, backend):
    response = client.get("/api/v1/org-units/section-parents", params={"remote": "true"})

    assert _ids(response) == [1, 2, 10, 11]
    assert len(backend.calls("GET", "/api/org-units/section-parents")) == 1
    assert backend.calls("GET", "/api/admin/user-inventory") == []


def test_inventory_failure_is_an_error_state_not_an_empty_list(client: TestClient, backend):
    backend.fail("GET", "/api/admin/user-inventory", 500, {"detail": "db down"})

    response = client.get("/api/v1/org-units/section-parents")

    assert response.status_code == 502
    assert response.json() == {"msg": "Failed to load organizational units", "data": None, "code": 502}


def test_unknown_unit_children_is_404(client: TestClient):
    assert client.get("/api/v1/org-units/999/children").status_code == 404


def test_org_units_require_a_session(client: TestClient, backend):
    backend.user = None
    assert client.get("/api/v1/org-units").status_code == 401
