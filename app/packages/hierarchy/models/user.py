"""当前登录用户模型与会话摄取。

角色标识在此统一规范为大写下划线形式；权限判定处只做精确匹配，不再各自转换大小写。
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any, Iterable, Mapping, Optional, Tuple

_SEPARATORS = re.compile(r"[\s\-]+")


def canonical_role(value: Any) -> Optional[str]:
    """``software_admin``、``Software-Admin `` 等写法统一为 ``SOFTWARE_ADMIN``。"""
    if value is None:
        return None
    text = _SEPARATORS.sub("_", str(value).strip()).upper()
    return text or None


def canonical_roles(values: Iterable[Any]) -> Tuple[str, ...]:
    seen: list[str] = []
    for value in values:
        role = canonical_role(value)
        if role and role not in seen:
            seen.append(role)
    return tuple(seen)


@dataclass(frozen=True)
class CurrentUser:
    user_id: Optional[int]
    username: Optional[str]
    display_name: Optional[str]
    department_display_name: Optional[str] = None
    org_unit_id: Optional[int] = None
    roles: Tuple[str, ...] = field(default_factory=tuple)

    def to_dict(self) -> dict[str, Any]:
        return {
            "user_id": self.user_id,
            "username": self.username,
            "display_name": self.display_name,
            "department_display_name": self.department_display_name,
            "org_unit_id": self.org_unit_id,
            "roles": list(self.roles),
        }


def _raw_roles(raw: Mapping[str, Any]) -> list[Any]:
    roles = raw.get("roles")
    if isinstance(roles, (list, tuple)) and roles:
        return list(roles)
    if isinstance(roles, str) and roles.strip():
        return [roles]
    for key in ("role_name", "role"):
        value = raw.get(key)
        if value:
            return [value]
    return []


def _optional_int(value: Any) -> Optional[int]:
    try:
        return int(value) if value is not None else None
    except (TypeError, ValueError):
        return None


def ingest_user(raw: Optional[Mapping[str, Any]]) -> Optional[CurrentUser]:
    """会话摄取入口：把上游 ``/api/auth/me`` 或登录响应中的用户转换为 ``CurrentUser``。"""
    if not isinstance(raw, Mapping):
        return None
    username = raw.get("username")
    return CurrentUser(
        user_id=_optional_int(raw.get("user_id", raw.get("id"))),
        username=username,
        display_name=raw.get("display_name") or username,
        department_display_name=raw.get("department_display_name"),
        org_unit_id=_optional_int(raw.get("org_unit_id")),
        roles=canonical_roles(_raw_roles(raw)),
    )
