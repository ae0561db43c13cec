"""会话与可见性相关的响应模型。"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel

from app.packages.hierarchy.api.v1.schemas.common import ResponseEnvelope


class CurrentUserItem(BaseModel):
    user_id: Optional[int] = None
    username: Optional[str] = None
    display_name: Optional[str] = None
    department_display_name: Optional[str] = None
    org_unit_id: Optional[int] = None
    roles: list[str]


class SessionPayload(BaseModel):
    """当前用户以及其可见的页面、设置标签与操作。"""

    user: CurrentUserItem
    pages: list[str]
    tabs: list[str]
    actions: list[str]


class AccessDecision(BaseModel):
    key: str
    allowed: bool


SessionResponse = ResponseEnvelope[SessionPayload]
AccessDecisionResponse = ResponseEnvelope[AccessDecision]
