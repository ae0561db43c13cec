"""组织单元模型：扁平的单元列表，父子关系只通过 ``parent_id`` 表达。"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, List, Mapping, Optional

from app.packages.hierarchy.core.enums import OrgUnitTypeEnum
from app.packages.hierarchy.core.logger import logger

_ID_KEYS = ("id", "ID")
_NAME_KEYS = ("name", "Name", "NameEn", "NameAr")
_TYPE_KEYS = ("unit_type", "type", "Type", "type_name", "typeName")
_PARENT_KEYS = ("parent_id", "parentId", "ParentID")
_CHILDREN_KEYS = ("children", "Children")


@dataclass(frozen=True)
class OrgUnit:
    """组织单元：行政、部门或科室。

    - 顶级行政的 ``parent_id`` 为 ``None``；
    - ``children`` 不存储，由目录按 ``parent_id`` 分组推导。
    """

    id: int
    name: str
    unit_type: OrgUnitTypeEnum
    parent_id: Optional[int] = None

    @property
    def is_section(self) -> bool:
        return self.unit_type is OrgUnitTypeEnum.SECTION

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "unit_type": self.unit_type.value,
            "parent_id": self.parent_id,
        }


def is_section_parent(unit: OrgUnit) -> bool:
    """判断单元能否作为新科室的父级（行政或部门，永不为科室）。"""
    return unit.unit_type in (OrgUnitTypeEnum.ADMINISTRATION, OrgUnitTypeEnum.DEPARTMENT)


def _first(raw: Mapping[str, Any], keys: Iterable[str]) -> Any:
    for key in keys:
        value = raw.get(key)
        if value is not None and value != "":
            return value
    return None


def _as_int(value: Any) -> Optional[int]:
    if value is None or isinstance(value, bool):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def _as_unit_type(value: Any) -> Optional[OrgUnitTypeEnum]:
    if value is None:
        return None
    try:
        return OrgUnitTypeEnum(str(value).strip().upper())
    except ValueError:
        return None


def parse_org_units(raw_units: Any) -> List[OrgUnit]:
    """把上游返回的单元（可能带嵌套 ``Children``）展开为扁平列表。

    嵌套子单元未显式给出父级时，继承外层单元的 ID。缺少 ID 或类型未知的单元被跳过。
    """
    units: List[OrgUnit] = []
    if not isinstance(raw_units, list):
        return units

    pending: list[tuple[Any, Optional[int]]] = [(item, None) for item in reversed(raw_units)]
    while pending:
        raw, enclosing_id = pending.pop()
        if not isinstance(raw, Mapping):
            continue

        unit_id = _as_int(_first(raw, _ID_KEYS))
        unit_type = _as_unit_type(_first(raw, _TYPE_KEYS))
        if unit_id is None or unit_type is None:
            logger.warning("Skipping org unit with missing id or unknown type: %s", dict(raw))
        else:
            parent_id = _as_int(_first(raw, _PARENT_KEYS))
            if parent_id is None:
                parent_id = enclosing_id
            name = _first(raw, _NAME_KEYS)
            units.append(
                OrgUnit(
                    id=unit_id,
                    name=str(name) if name is not None else f"Unit {unit_id}",
                    unit_type=unit_type,
                    parent_id=parent_id,
                )
            )

        children = _first(raw, _CHILDREN_KEYS)
        if isinstance(children, list):
            pending.extend((child, unit_id) for child in reversed(children))
    return units
