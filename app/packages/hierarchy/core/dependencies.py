"""依赖注入模块：封装 FastAPI 中复用度高的依赖函数。"""

from typing import Any, Callable

from fastapi import Depends, Request

from app.packages.hierarchy.clients.upstream import UpstreamClient, get_http_client
from app.packages.hierarchy.core import policy
from app.packages.hierarchy.core.constants import (
    HTTP_STATUS_BAD_GATEWAY,
    HTTP_STATUS_FORBIDDEN,
    HTTP_STATUS_UNAUTHORIZED,
)
from app.packages.hierarchy.core.enums import ActionKeyEnum, PageKeyEnum, SettingsTabKeyEnum
from app.packages.hierarchy.core.exceptions import AppException, UpstreamError, UpstreamTransportError
from app.packages.hierarchy.core.logger import logger
from app.packages.hierarchy.models.user import CurrentUser, ingest_user
from app.packages.hierarchy.services.org_unit_directory import OrgUnitDirectory
from app.packages.hierarchy.services.section_form import SectionFormRegistry, section_form_registry

ME_PATH = "/api/auth/me"

_directory = OrgUnitDirectory()


def get_upstream(request: Request) -> UpstreamClient:
    """构造携带调用方会话头的上游访问器。"""
    return UpstreamClient.forwarding(get_http_client(), request.headers)


def get_directory() -> OrgUnitDirectory:
    return _directory


def get_form_registry() -> SectionFormRegistry:
    return section_form_registry


async def get_current_user(upstream: UpstreamClient = Depends(get_upstream)) -> CurrentUser:
    """向上游确认会话并摄取用户；会话无效时返回 401。"""
    try:
        payload = await upstream.get(ME_PATH)
    except UpstreamError as exc:
        if exc.status_code in (401, 403):
            raise AppException("Not authenticated", HTTP_STATUS_UNAUTHORIZED) from exc
        logger.error("Auth check failed: %s", exc)
        raise AppException("Authentication service unavailable", HTTP_STATUS_BAD_GATEWAY) from exc
    except UpstreamTransportError as exc:
        logger.error("Auth check failed: %s", exc)
        raise AppException("Authentication service unavailable", HTTP_STATUS_BAD_GATEWAY) from exc

    user = ingest_user(payload.get("user") if isinstance(payload, dict) else None)
    if user is None:
        raise AppException("Not authenticated", HTTP_STATUS_UNAUTHORIZED)
    return user


def _guard(check: Callable[[Any, Any], bool], key: Any, label: str) -> Callable[..., CurrentUser]:
    async def dependency(current_user: CurrentUser = Depends(get_current_user)) -> CurrentUser:
        if not check(current_user, key):
            logger.warning("Access denied to %s %s for roles %s", label, key.value, list(current_user.roles))
            raise AppException("Access denied", HTTP_STATUS_FORBIDDEN)
        return current_user

    return dependency


def require_page(page_key: PageKeyEnum) -> Callable[..., CurrentUser]:
    return _guard(policy.can_access_page, page_key, "page")


def require_tab(tab_key: SettingsTabKeyEnum) -> Callable[..., CurrentUser]:
    return _guard(policy.can_access_tab, tab_key, "settings tab")


def require_action(action_key: ActionKeyEnum) -> Callable[..., CurrentUser]:
    return _guard(policy.can_perform, action_key, "action")
