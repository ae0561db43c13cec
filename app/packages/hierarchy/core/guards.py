"""系统保留对象保护：集中维护“软件管理员账号不可删除”的判定与拦截逻辑。"""

from __future__ import annotations

from typing import Any

from app.packages.hierarchy.core.constants import HTTP_STATUS_FORBIDDEN, PROTECTED_USER_MESSAGE
from app.packages.hierarchy.core.enums import RoleEnum
from app.packages.hierarchy.core.exceptions import AppException


def is_software_admin_role(role: Any) -> bool:
    """角色需已在摄取处规范化。"""
    return role == RoleEnum.SOFTWARE_ADMIN.value


def forbid_if_software_admin(role: Any, *, message: str = PROTECTED_USER_MESSAGE) -> None:
    """目标账号为软件管理员时直接拒绝，删除请求不会发往上游。"""
    if is_software_admin_role(role):
        raise AppException(message, HTTP_STATUS_FORBIDDEN)
