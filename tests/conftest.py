"""测试夹具：以 ``httpx.MockTransport`` 模拟上游医院接口，并为 pytest 提供共享客户端。"""

from __future__ import annotations

import asyncio
import json
import re
from typing import Any, Callable, Dict, List, Optional, Tuple

import httpx
import pytest
from fastapi.testclient import TestClient

from app.main import app
from app.packages.hierarchy.clients import upstream as upstream_module
from app.packages.hierarchy.clients.upstream import UpstreamClient
from app.packages.hierarchy.core.dependencies import get_directory, get_form_registry
from app.packages.hierarchy.services.org_unit_directory import OrgUnitDirectory
from app.packages.hierarchy.services.section_form import SectionFormRegistry

UPSTREAM_BASE_URL = "http://hospital.test"

SOFTWARE_ADMIN_USER = {
    "user_id": 1,
    "username": "root",
    "display_name": "Root Admin",
    "org_unit_id": None,
    "roles": ["software_admin"],
}

ORG_UNITS = [
    {"id": 1, "name": "Medical Administration", "unit_type": "ADMINISTRATION", "parent_id": None},
    {"id": 2, "name": "Nursing Administration", "unit_type": "ADMINISTRATION", "parent_id": None},
    {"id": 10, "name": "Emergency", "unit_type": "DEPARTMENT", "parent_id": 1},
    {"id": 11, "name": "Radiology", "unit_type": "DEPARTMENT", "parent_id": 1},
    {"id": 100, "name": "Triage", "unit_type": "SECTION", "parent_id": 10},
    {"id": 101, "name": "CT Scan", "unit_type": "SECTION", "parent_id": 11},
]

USER_CREDENTIALS = [
    {
        "user_id": 1,
        "username": "root",
        "role": "software_admin",
        "org_unit_id": None,
        "org_unit_name": None,
        "is_active": True,
        "test_password": "root-pass",
    },
    {
        "user_id": 7,
        "username": "sec_100_admin",
        "role": "SECTION_ADMIN",
        "org_unit_id": 100,
        "org_unit_name": "Triage",
        "is_active": True,
        "test_password": "triage-pass",
    },
]


class FakeHospitalBackend:
    """内存中的上游医院接口，记录每一次请求以便断言请求体与调用次数。"""

    def __init__(self) -> None:
        self.requests: List[Dict[str, Any]] = []
        self.user: Optional[Dict[str, Any]] = dict(SOFTWARE_ADMIN_USER)
        self.org_units: List[Dict[str, Any]] = [dict(item) for item in ORG_UNITS]
        self.users: List[Dict[str, Any]] = [dict(item) for item in USER_CREDENTIALS]
        self.next_section_id = 200
        self.failures: Dict[Tuple[str, str], Tuple[int, Any]] = {}
        self.unreachable: set = set()
        self.on_create: Optional[Callable[[Dict[str, Any]], None]] = None

    # -------------------
    # 测试辅助
    # -------------------
    def fail(self, method: str, path: str, status_code: int, body: Any = None) -> None:
        self.failures[(method, path)] = (status_code, body)

    def fail_transport(self, method: str, path: str) -> None:
        self.unreachable.add((method, path))

    def calls(self, method: str, path: str) -> List[Dict[str, Any]]:
        return [item for item in self.requests if item["method"] == method and item["path"] == path]

    def login_as(self, *roles: str, **extra: Any) -> None:
        self.user = {"user_id": 50, "username": "someone", "roles": list(roles), **extra}

    # -------------------
    # 路由
    # -------------------
    def handler(self, request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content) if request.content else None
        method, path = request.method, request.url.path
        self.requests.append(
            {"method": method, "path": path, "json": body, "headers": dict(request.headers)}
        )

        if path == "/api/admin/create-section-with-admin" and self.on_create is not None:
            self.on_create(body or {})
        if (method, path) in self.unreachable:
            raise httpx.ConnectError("Network Error", request=request)
        if (method, path) in self.failures:
            status_code, failure_body = self.failures[(method, path)]
            return httpx.Response(status_code, json=failure_body)

        if path == "/api/auth/me":
            if self.user is None:
                return httpx.Response(401, json={"detail": "Not authenticated"})
            return httpx.Response(200, json={"user": self.user})
        if path == "/api/auth/logout":
            return httpx.Response(200, json={"message": "Logged out"})
        if path == "/api/admin/user-inventory":
            return httpx.Response(200, json={"org_units": self.org_units})
        if path.startswith("/api/org-units/"):
            return self._remote_view(path.rsplit("/", 1)[-1])
        if path == "/api/admin/create-section-with-admin":
            return self._create_section(body or {})
        if path == "/api/admin/testing/user-credentials":
            return httpx.Response(200, json={"users": self.users})

        match = re.fullmatch(r"/api/admin/sections/(\d+)/recreate-admin", path)
        if match:
            section_id = int(match.group(1))
            return httpx.Response(200, json={"username": f"sec_{section_id}_admin", "password": "N3w!secret"})

        match = re.fullmatch(r"/api/admin/users/(\d+)", path)
        if match and method == "DELETE":
            user_id = int(match.group(1))
            self.users = [item for item in self.users if item["user_id"] != user_id]
            return httpx.Response(200, json={"message": "User deleted"})

        return httpx.Response(404, json={"detail": "Not Found"})

    def _remote_view(self, view: str) -> httpx.Response:
        types = {
            "leaves": ({"SECTION"}, "leaves"),
            "administrations": ({"ADMINISTRATION"}, "administrations"),
            "departments": ({"DEPARTMENT"}, "departments"),
            "section-parents": ({"ADMINISTRATION", "DEPARTMENT"}, "parents"),
        }
        allowed, key = types[view]
        items = [item for item in self.org_units if item["unit_type"] in allowed]
        return httpx.Response(200, json={key: items, "count": len(items)})

    def _create_section(self, body: Dict[str, Any]) -> httpx.Response:
        section_id = self.next_section_id
        self.next_section_id += 1
        self.org_units.append(
            {
                "id": section_id,
                "name": body.get("section_name"),
                "unit_type": "SECTION",
                "parent_id": body.get("parent_department_id"),
            }
        )
        return httpx.Response(
            200,
            json={"section_id": section_id, "username": f"sec_{section_id}_admin", "temp_password": "X7!ab"},
        )


@pytest.fixture()
def backend() -> FakeHospitalBackend:
    return FakeHospitalBackend()


@pytest.fixture()
def directory() -> OrgUnitDirectory:
    return OrgUnitDirectory()


@pytest.fixture()
def form_registry() -> SectionFormRegistry:
    return SectionFormRegistry(limit=10)


@pytest.fixture()
def client(backend: FakeHospitalBackend, directory: OrgUnitDirectory, form_registry: SectionFormRegistry):
    """构建 FastAPI TestClient：共享的上游客户端改走模拟传输，目录与表单仓库按用例隔离。"""
    upstream_module.init_client(transport=httpx.MockTransport(backend.handler))
    app.dependency_overrides[get_directory] = lambda: directory
    app.dependency_overrides[get_form_registry] = lambda: form_registry

    with TestClient(app, headers={"Cookie": "session=test-session"}) as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture()
def drive(backend: FakeHospitalBackend):
    """在独立事件循环中执行协程，协程的参数是指向模拟上游的 ``UpstreamClient``。"""

    def run(factory: Callable[[UpstreamClient], Any]) -> Any:
        async def main() -> Any:
            transport = httpx.MockTransport(backend.handler)
            async with httpx.AsyncClient(base_url=UPSTREAM_BASE_URL, transport=transport) as http_client:
                return await factory(UpstreamClient(http_client))

        return asyncio.run(main())

    return run
