"""一次性凭据展示：持有新生成的科室 ID / 用户名 / 临时密码，关闭后即清除。"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional, Tuple

from app.packages.hierarchy.core.constants import (
    CREDENTIALS_ACKNOWLEDGE_LABEL,
    CREDENTIALS_NOTICE,
    HTTP_STATUS_NOT_FOUND,
)
from app.packages.hierarchy.core.exceptions import AppException


@dataclass(frozen=True)
class CredentialField:
    key: str
    label: str
    value: Any

    def to_dict(self) -> dict[str, Any]:
        return {"key": self.key, "label": self.label, "value": self.value, "read_only": True, "copyable": True}


class CredentialDisclosure:
    """没有“再次显示”的路径：未复制的密码只能通过其它管理操作重新签发。"""

    def __init__(self, acknowledge_label: str = CREDENTIALS_ACKNOWLEDGE_LABEL) -> None:
        self._fields: Optional[Tuple[CredentialField, ...]] = None
        self._acknowledge_label = acknowledge_label

    @property
    def held(self) -> bool:
        return self._fields is not None

    def hold(self, *fields: CredentialField) -> None:
        self._fields = tuple(fields)

    def view(self) -> Optional[dict[str, Any]]:
        if self._fields is None:
            return None
        return {
            "fields": [item.to_dict() for item in self._fields],
            "notice": CREDENTIALS_NOTICE,
            "acknowledge_label": self._acknowledge_label,
        }

    def copy(self, key: str) -> dict[str, Any]:
        """返回单个字段的值与复制提示。"""
        for item in self._fields or ():
            if item.key == key:
                return {"key": key, "value": item.value, "message": f"{item.label} copied to clipboard"}
        raise AppException(f"No credential field named '{key}' is on display", HTTP_STATUS_NOT_FOUND)

    def dismiss(self) -> None:
        self._fields = None


def section_credential_fields(result) -> Tuple[CredentialField, ...]:
    return (
        CredentialField("section_id", "Section ID", result.section_id),
        CredentialField("username", "Username", result.username),
        CredentialField("secret", "Password", result.secret),
    )


def one_time_view(*fields: CredentialField, acknowledge_label: str = "Close") -> dict[str, Any]:
    """无表单状态的场景（如重建管理员）直接生成一次性视图，不在服务端保留。"""
    disclosure = CredentialDisclosure(acknowledge_label=acknowledge_label)
    disclosure.hold(*fields)
    view = disclosure.view()
    disclosure.dismiss()
    return view
