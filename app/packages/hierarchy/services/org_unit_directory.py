"""组织单元目录：拉取并缓存完整的组织清单，派生各类过滤视图。

清单以扁平列表保存（按 ID 索引），父子视图每次按需计算，不缓存嵌套树。
刷新时整体替换快照，已交给调用方的列表不会被原地修改。
"""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from app.packages.hierarchy.clients.upstream import UpstreamClient
from app.packages.hierarchy.core.constants import INVENTORY_UNAVAILABLE_MESSAGE
from app.packages.hierarchy.core.enums import OrgUnitTypeEnum, ParentTypeEnum
from app.packages.hierarchy.core.exceptions import FetchError, UpstreamError, UpstreamTransportError
from app.packages.hierarchy.core.logger import logger
from app.packages.hierarchy.models.org_unit import OrgUnit, is_section_parent, parse_org_units

INVENTORY_PATH = "/api/admin/user-inventory"
MAX_DEPTH = 3

# 上游预过滤视图：路径 -> 响应体中的列表键
REMOTE_VIEWS = {
    "leaves": ("/api/org-units/leaves", "leaves"),
    "administrations": ("/api/org-units/administrations", "administrations"),
    "departments": ("/api/org-units/departments", "departments"),
    "section_parents": ("/api/org-units/section-parents", "parents"),
}


@dataclass(frozen=True)
class InventorySnapshot:
    """一次拉取得到的不可变清单。"""

    units: Tuple[OrgUnit, ...] = ()
    by_id: Dict[int, OrgUnit] = field(default_factory=dict)

    @classmethod
    def of(cls, units: List[OrgUnit]) -> "InventorySnapshot":
        by_id: Dict[int, OrgUnit] = {}
        for unit in units:
            if unit.id in by_id:
                logger.warning("Duplicate org unit id %s in inventory, keeping the first", unit.id)
                continue
            by_id[unit.id] = unit
        return cls(units=tuple(by_id.values()), by_id=by_id)


def check_hierarchy(units: List[OrgUnit]) -> List[str]:
    """返回违反层级约束的描述列表（仅用于诊断日志）。"""
    by_id = {unit.id: unit for unit in units}
    problems: List[str] = []

    for unit in units:
        if unit.parent_id is None:
            if unit.unit_type is not OrgUnitTypeEnum.ADMINISTRATION:
                problems.append(f"unit {unit.id} is top-level but is a {unit.unit_type.value}")
            continue

        parent = by_id.get(unit.parent_id)
        if parent is None:
            problems.append(f"unit {unit.id} references missing parent {unit.parent_id}")
            continue
        if parent.is_section:
            problems.append(f"section {parent.id} is the parent of unit {unit.id}")

        depth = 1
        seen = {unit.id}
        cursor: Optional[OrgUnit] = parent
        while cursor is not None:
            if cursor.id in seen:
                problems.append(f"unit {unit.id} is part of a parent cycle")
                break
            seen.add(cursor.id)
            depth += 1
            cursor = by_id.get(cursor.parent_id) if cursor.parent_id is not None else None
        else:
            if depth > MAX_DEPTH:
                problems.append(f"unit {unit.id} sits {depth} levels deep")
    return problems


class OrgUnitDirectory:
    """组织清单的读取方；除网络读取外不持有任何写状态。"""

    def __init__(self) -> None:
        self._snapshot = InventorySnapshot()
        self._loaded = False

    @property
    def loaded(self) -> bool:
        return self._loaded

    async def load_inventory(self, upstream: UpstreamClient) -> List[OrgUnit]:
        """拉取完整清单并替换快照；失败时抛出 ``FetchError``，原快照保持不变。"""
        try:
            payload = await upstream.get(INVENTORY_PATH)
        except (UpstreamError, UpstreamTransportError) as exc:
            logger.error("Error fetching user inventory: %s", exc)
            raise FetchError(INVENTORY_UNAVAILABLE_MESSAGE, cause=exc) from exc

        if not isinstance(payload, dict) or not isinstance(payload.get("org_units", []), list):
            logger.error("Malformed user inventory payload: %r", payload)
            raise FetchError(INVENTORY_UNAVAILABLE_MESSAGE)

        units = parse_org_units(payload.get("org_units") or [])
        for problem in check_hierarchy(units):
            logger.warning("Org hierarchy inconsistency: %s", problem)

        self._snapshot = InventorySnapshot.of(units)
        self._loaded = True
        logger.info("Loaded %s org units", len(self._snapshot.units))
        return list(self._snapshot.units)

    def units(self) -> List[OrgUnit]:
        return list(self._snapshot.units)

    def get(self, unit_id: int) -> Optional[OrgUnit]:
        return self._snapshot.by_id.get(unit_id)

    def units_of_type(self, unit_type: OrgUnitTypeEnum) -> List[OrgUnit]:
        return [unit for unit in self._snapshot.units if unit.unit_type is unit_type]

    def leaves(self) -> List[OrgUnit]:
        return self.units_of_type(OrgUnitTypeEnum.SECTION)

    def administrations(self) -> List[OrgUnit]:
        return self.units_of_type(OrgUnitTypeEnum.ADMINISTRATION)

    def departments(self) -> List[OrgUnit]:
        return self.units_of_type(OrgUnitTypeEnum.DEPARTMENT)

    def section_parents(self) -> List[OrgUnit]:
        """可作为新科室父级的单元：行政与部门的并集，按清单顺序返回。"""
        return [unit for unit in self._snapshot.units if is_section_parent(unit)]

    def parents_for_type(self, parent_type: ParentTypeEnum) -> List[OrgUnit]:
        return self.units_of_type(OrgUnitTypeEnum(parent_type.value))

    def children_of(self, unit_id: int) -> List[OrgUnit]:
        return [unit for unit in self._snapshot.units if unit.parent_id == unit_id]

    def parent_of(self, unit_id: int) -> Optional[OrgUnit]:
        unit = self.get(unit_id)
        if unit is None or unit.parent_id is None:
            return None
        return self.get(unit.parent_id)

    def path_to(self, unit_id: int) -> List[OrgUnit]:
        """从顶级单元到目标单元的路径；遇到环或缺失父级时截断。"""
        path: List[OrgUnit] = []
        seen: set[int] = set()
        cursor = self.get(unit_id)
        while cursor is not None and cursor.id not in seen:
            seen.add(cursor.id)
            path.append(cursor)
            cursor = self.get(cursor.parent_id) if cursor.parent_id is not None else None
        path.reverse()
        return path

    def children_map(self) -> Dict[Optional[int], List[OrgUnit]]:
        grouped: Dict[Optional[int], List[OrgUnit]] = defaultdict(list)
        for unit in self._snapshot.units:
            grouped[unit.parent_id].append(unit)
        return dict(grouped)


async def fetch_remote_view(upstream: UpstreamClient, view: str) -> List[OrgUnit]:
    """读取上游预过滤的视图；``section_parents`` 额外按同一判定再过滤一次。"""
    path, list_key = REMOTE_VIEWS[view]
    try:
        payload = await upstream.get(path)
    except (UpstreamError, UpstreamTransportError) as exc:
        logger.error("Error fetching %s: %s", view, exc)
        raise FetchError(INVENTORY_UNAVAILABLE_MESSAGE, cause=exc) from exc

    raw_units = payload.get(list_key) if isinstance(payload, dict) else None
    units = parse_org_units(raw_units or [])
    if view == "section_parents":
        units = [unit for unit in units if is_section_parent(unit)]
    return units
