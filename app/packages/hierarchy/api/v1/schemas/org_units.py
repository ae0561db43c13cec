"""组织单元相关的响应模型定义。"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel

from app.packages.hierarchy.api.v1.schemas.common import ResponseEnvelope
from app.packages.hierarchy.core.enums import OrgUnitTypeEnum


class OrgUnitItem(BaseModel):
    """扁平的组织单元记录。"""

    id: int
    name: str
    unit_type: OrgUnitTypeEnum
    parent_id: Optional[int] = None


class OrgUnitListPayload(BaseModel):
    items: list[OrgUnitItem]
    count: int


OrgUnitListResponse = ResponseEnvelope[OrgUnitListPayload]
