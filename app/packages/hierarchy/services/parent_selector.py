"""父级单元选择器：父级类型与按类型过滤的单元选择组成的小型状态机。"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional

from app.packages.hierarchy.core.constants import HTTP_STATUS_BAD_REQUEST
from app.packages.hierarchy.core.enums import ParentTypeEnum
from app.packages.hierarchy.core.exceptions import AppException
from app.packages.hierarchy.models.org_unit import OrgUnit


@dataclass(frozen=True)
class ParentSelection:
    parent_type: ParentTypeEnum = ParentTypeEnum.DEPARTMENT
    parent_id: Optional[int] = None


class ParentUnitSelector:
    """初始状态为 ``DEPARTMENT`` 且未选择单元；切换类型总是清空已选单元。

    没有终止状态，可在多次提交之间复用。
    """

    def __init__(self) -> None:
        self._state = ParentSelection()

    @property
    def state(self) -> ParentSelection:
        return self._state

    @property
    def parent_type(self) -> ParentTypeEnum:
        return self._state.parent_type

    @property
    def parent_id(self) -> Optional[int]:
        return self._state.parent_id

    def set_parent_type(self, parent_type: ParentTypeEnum) -> ParentSelection:
        self._state = ParentSelection(parent_type=ParentTypeEnum(parent_type), parent_id=None)
        return self._state

    def set_parent_id(self, parent_id: int, options: Iterable[OrgUnit]) -> ParentSelection:
        """仅接受当前类型下的单元 ID；否则状态不变并抛出 400。"""
        allowed = {unit.id for unit in options if unit.unit_type.value == self._state.parent_type.value}
        if parent_id not in allowed:
            raise AppException(
                f"Unit {parent_id} is not a {self._state.parent_type.value.lower()}",
                HTTP_STATUS_BAD_REQUEST,
            )
        self._state = ParentSelection(parent_type=self._state.parent_type, parent_id=parent_id)
        return self._state

    def clear(self) -> ParentSelection:
        self._state = ParentSelection(parent_type=self._state.parent_type, parent_id=None)
        return self._state
