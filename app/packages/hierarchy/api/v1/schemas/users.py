"""账号管理相关的响应模型。"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel

from app.packages.hierarchy.api.v1.schemas.common import ResponseEnvelope
from app.packages.hierarchy.api.v1.schemas.sections import CredentialView


class UserCredentialItem(BaseModel):
    user_id: Optional[int] = None
    username: Optional[str] = None
    display_name: Optional[str] = None
    role: Optional[str] = None
    org_unit_id: Optional[int] = None
    org_unit_name: Optional[str] = None
    is_active: bool = False
    test_password: Optional[str] = None


class DeletedUser(BaseModel):
    user_id: int
    username: Optional[str] = None


class RecreatedAdmin(BaseModel):
    section_id: int
    section_name: str
    credentials: CredentialView


UserCredentialListResponse = ResponseEnvelope[list[UserCredentialItem]]
DeletedUserResponse = ResponseEnvelope[DeletedUser]
RecreatedAdminResponse = ResponseEnvelope[RecreatedAdmin]
