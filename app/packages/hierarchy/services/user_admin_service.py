"""账号管理：测试凭据列表、受保护的删除以及科室管理员重建。"""

from __future__ import annotations

from typing import Any, NoReturn, Optional

from app.packages.hierarchy.clients.upstream import UpstreamClient
from app.packages.hierarchy.core.constants import (
    DELETE_USER_FALLBACK_MESSAGE,
    HTTP_STATUS_BAD_GATEWAY,
    HTTP_STATUS_NOT_FOUND,
    RECREATE_ADMIN_FALLBACK_MESSAGE,
)
from app.packages.hierarchy.core.exceptions import AppException, UpstreamError, UpstreamTransportError
from app.packages.hierarchy.core.guards import forbid_if_software_admin
from app.packages.hierarchy.core.logger import logger
from app.packages.hierarchy.models.section import resolve_secret
from app.packages.hierarchy.models.user import canonical_role
from app.packages.hierarchy.services.credential_disclosure import CredentialField, one_time_view
from app.packages.hierarchy.services.org_unit_directory import OrgUnitDirectory
from app.packages.hierarchy.services.section_provisioning import describe_error

CREDENTIALS_PATH = "/api/admin/testing/user-credentials"


def _raise_mapped(exc: BaseException, fallback: str) -> NoReturn:
    failure = describe_error(exc, fallback=fallback)
    code = failure.status_code if failure.status_code and failure.status_code < 500 else HTTP_STATUS_BAD_GATEWAY
    raise AppException(failure.message, code) from exc


def _serialize_user(raw: dict[str, Any]) -> dict[str, Any]:
    return {
        "user_id": raw.get("user_id"),
        "username": raw.get("username"),
        "display_name": raw.get("display_name"),
        "role": canonical_role(raw.get("role")),
        "org_unit_id": raw.get("org_unit_id"),
        "org_unit_name": raw.get("org_unit_name"),
        "is_active": bool(raw.get("is_active", False)),
        "test_password": raw.get("test_password"),
    }


class UserAdminService:
    async def list_user_credentials(self, upstream: UpstreamClient) -> list[dict[str, Any]]:
        """拉取测试用账号凭据；角色在此规范化，供删除保护等判定直接使用。"""
        try:
            payload = await upstream.get(CREDENTIALS_PATH)
        except (UpstreamError, UpstreamTransportError) as exc:
            logger.error("Error fetching user credentials: %s", exc)
            _raise_mapped(exc, "Failed to load users")
        users = payload.get("users") if isinstance(payload, dict) else None
        return [_serialize_user(item) for item in users or [] if isinstance(item, dict)]

    async def delete_user(self, upstream: UpstreamClient, user_id: int) -> dict[str, Any]:
        users = await self.list_user_credentials(upstream)
        target: Optional[dict[str, Any]] = next((item for item in users if item["user_id"] == user_id), None)
        if target is None:
            raise AppException("User not found", HTTP_STATUS_NOT_FOUND)

        forbid_if_software_admin(target["role"])

        try:
            await upstream.delete(f"/api/admin/users/{user_id}")
        except (UpstreamError, UpstreamTransportError) as exc:
            logger.error("Error deleting user %s: %s", user_id, exc)
            _raise_mapped(exc, DELETE_USER_FALLBACK_MESSAGE)
        logger.info("Deleted user %s (%s)", user_id, target["username"])
        return {"user_id": user_id, "username": target["username"]}

    async def recreate_section_admin(
        self,
        upstream: UpstreamClient,
        directory: OrgUnitDirectory,
        section_id: int,
    ) -> dict[str, Any]:
        """只允许针对清单中的科室；新密码通过一次性视图返回。"""
        await directory.load_inventory(upstream)
        unit = directory.get(section_id)
        if unit is None or not unit.is_section:
            raise AppException("Section not found", HTTP_STATUS_NOT_FOUND)

        try:
            payload = await upstream.post(f"/api/admin/sections/{section_id}/recreate-admin")
        except (UpstreamError, UpstreamTransportError) as exc:
            logger.error("Error recreating section admin for %s: %s", section_id, exc)
            _raise_mapped(exc, RECREATE_ADMIN_FALLBACK_MESSAGE)

        payload = payload if isinstance(payload, dict) else {}
        username = str(payload.get("username") or "")
        logger.info("Recreated admin user %s for section %s", username, section_id)
        return {
            "section_id": section_id,
            "section_name": unit.name,
            "credentials": one_time_view(
                CredentialField("username", "Username", username),
                CredentialField("secret", "Password", resolve_secret(payload) or ""),
            ),
        }


user_admin_service = UserAdminService()
