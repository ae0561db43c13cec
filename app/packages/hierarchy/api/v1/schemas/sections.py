"""科室开通与创建表单的请求、响应模型。"""

from __future__ import annotations

from typing import Any, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from app.packages.hierarchy.api.v1.schemas.common import ResponseEnvelope
from app.packages.hierarchy.api.v1.schemas.org_units import OrgUnitItem
from app.packages.hierarchy.core.enums import ParentTypeEnum


class SectionCreateRequest(BaseModel):
    """一次性开通请求；长度等业务校验由校验器完成，以便逐字段返回错误。"""

    model_config = ConfigDict(populate_by_name=True)

    section_name: str = Field(default="", description="科室名称，提交前去除首尾空白")
    parent_unit_id: Optional[int] = Field(
        default=None,
        validation_alias=AliasChoices("parent_unit_id", "parentUnitId"),
        description="父级单元 ID（行政或部门）",
    )


class SectionNameUpdate(BaseModel):
    section_name: str = Field(default="", description="科室名称原始输入")


class ParentTypeUpdate(BaseModel):
    parent_type: ParentTypeEnum


class ParentUpdate(BaseModel):
    parent_id: int


class CredentialFieldItem(BaseModel):
    key: str
    label: str
    value: Any = None
    read_only: bool = True
    copyable: bool = True


class CredentialView(BaseModel):
    fields: list[CredentialFieldItem]
    notice: str
    acknowledge_label: str


class CopiedCredential(BaseModel):
    key: str
    value: Any = None
    message: str


class FieldErrors(BaseModel):
    section_name: Optional[str] = None
    parent: Optional[str] = None


class SectionFormState(BaseModel):
    form_id: str
    section_name: str
    parent_type: ParentTypeEnum
    parent_id: Optional[int] = None
    field_errors: FieldErrors
    error: Optional[str] = None
    submitting: bool
    can_submit: bool
    generation: int
    credentials: Optional[CredentialView] = None


class ParentOptions(BaseModel):
    parent_type: ParentTypeEnum
    items: list[OrgUnitItem]


class SectionCreated(BaseModel):
    section_id: Optional[int] = None
    section_name: str
    parent_unit_id: int
    credentials: CredentialView


SectionFormResponse = ResponseEnvelope[SectionFormState]
ParentOptionsResponse = ResponseEnvelope[ParentOptions]
SectionCreatedResponse = ResponseEnvelope[SectionCreated]
CopiedCredentialResponse = ResponseEnvelope[CopiedCredential]
