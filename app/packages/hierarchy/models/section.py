"""科室开通相关的值对象：一次性的请求与结果。"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Optional

from app.packages.hierarchy.core.constants import WIRE_PARENT_FIELD, WIRE_SECTION_NAME_FIELD


@dataclass(frozen=True)
class SectionCreationRequest:
    """单次提交构造的请求，``section_name`` 已去除首尾空白。"""

    section_name: str
    parent_unit_id: int

    @classmethod
    def build(cls, section_name: str, parent_unit_id: int) -> "SectionCreationRequest":
        return cls(section_name=(section_name or "").strip(), parent_unit_id=int(parent_unit_id))

    def to_wire(self) -> dict[str, Any]:
        """上游请求体；父级字段固定使用 ``parent_department_id``。"""
        return {
            WIRE_SECTION_NAME_FIELD: self.section_name,
            WIRE_PARENT_FIELD: self.parent_unit_id,
        }


def resolve_secret(raw: Mapping[str, Any]) -> Optional[str]:
    """临时密码可能以 ``temp_password`` 或 ``password`` 返回，优先前者。"""
    for key in ("temp_password", "password"):
        value = raw.get(key)
        if value is not None and value != "":
            return str(value)
    return None


@dataclass(frozen=True)
class SectionCreationResult:
    """开通成功后的一次性凭据，仅保存在临时界面状态中。"""

    section_id: Optional[int]
    username: str
    secret: str

    @classmethod
    def from_wire(cls, raw: Mapping[str, Any]) -> "SectionCreationResult":
        section_id = raw.get("section_id")
        return cls(
            section_id=int(section_id) if section_id is not None else None,
            username=str(raw.get("username") or ""),
            secret=resolve_secret(raw) or "",
        )

    def __repr__(self) -> str:
        return f"SectionCreationResult(section_id={self.section_id!r}, username={self.username!r}, secret='***')"
