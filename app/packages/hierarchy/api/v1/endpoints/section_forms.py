"""科室创建表单路由：每个表单实例独立保存输入、在途状态与一次性凭据。

提交失败不会以 HTTP 错误返回，而是写入表单的 ``error`` 与 ``field_errors``，
与界面上的内联提示一致；只有“已有请求在途”返回 409。
"""

from fastapi import APIRouter, Depends

from app.packages.hierarchy.api.v1.schemas.common import ResponseEnvelope
from app.packages.hierarchy.api.v1.schemas.sections import (
    CopiedCredentialResponse,
    ParentOptionsResponse,
    ParentTypeUpdate,
    ParentUpdate,
    SectionFormResponse,
    SectionNameUpdate,
)
from app.packages.hierarchy.clients.upstream import UpstreamClient
from app.packages.hierarchy.core.constants import SECTION_CREATED_MESSAGE
from app.packages.hierarchy.core.dependencies import get_directory, get_form_registry, get_upstream, require_action
from app.packages.hierarchy.core.enums import ActionKeyEnum
from app.packages.hierarchy.core.responses import create_response
from app.packages.hierarchy.models.user import CurrentUser
from app.packages.hierarchy.services.org_unit_directory import OrgUnitDirectory
from app.packages.hierarchy.services.section_form import SectionFormRegistry
from app.packages.hierarchy.services.section_provisioning import section_provisioning_service

router = APIRouter(prefix="/section-forms", tags=["section_forms"])

can_provision = require_action(ActionKeyEnum.PROVISION_SECTIONS)


@router.post("", response_model=SectionFormResponse)
async def open_form(
    upstream: UpstreamClient = Depends(get_upstream),
    directory: OrgUnitDirectory = Depends(get_directory),
    registry: SectionFormRegistry = Depends(get_form_registry),
    _: CurrentUser = Depends(can_provision),
) -> SectionFormResponse:
    """打开新表单前先刷新组织清单；清单不可用时不创建表单。"""
    await directory.load_inventory(upstream)
    form = registry.create()
    return create_response("OK", form.to_dict())


@router.get("/{form_id}", response_model=SectionFormResponse)
async def read_form(
    form_id: str,
    registry: SectionFormRegistry = Depends(get_form_registry),
    _: CurrentUser = Depends(can_provision),
) -> SectionFormResponse:
    return create_response("OK", registry.get(form_id).to_dict())


@router.get("/{form_id}/parent-options", response_model=ParentOptionsResponse)
async def list_parent_options(
    form_id: str,
    upstream: UpstreamClient = Depends(get_upstream),
    directory: OrgUnitDirectory = Depends(get_directory),
    registry: SectionFormRegistry = Depends(get_form_registry),
    _: CurrentUser = Depends(can_provision),
) -> ParentOptionsResponse:
    """按当前父级类型列出可选单元，每次都基于最新清单。"""
    form = registry.get(form_id)
    await directory.load_inventory(upstream)
    data = {
        "parent_type": form.selector.parent_type.value,
        "items": [unit.to_dict() for unit in form.parent_options(directory)],
    }
    return create_response("OK", data)


@router.put("/{form_id}/section-name", response_model=SectionFormResponse)
async def update_section_name(
    form_id: str,
    payload: SectionNameUpdate,
    registry: SectionFormRegistry = Depends(get_form_registry),
    _: CurrentUser = Depends(can_provision),
) -> SectionFormResponse:
    form = registry.get(form_id)
    form.set_section_name(payload.section_name)
    return create_response("OK", form.to_dict())


@router.put("/{form_id}/parent-type", response_model=SectionFormResponse)
async def update_parent_type(
    form_id: str,
    payload: ParentTypeUpdate,
    registry: SectionFormRegistry = Depends(get_form_registry),
    _: CurrentUser = Depends(can_provision),
) -> SectionFormResponse:
    """切换类型会清空已选父级。"""
    form = registry.get(form_id)
    form.set_parent_type(payload.parent_type)
    return create_response("OK", form.to_dict())


@router.put("/{form_id}/parent", response_model=SectionFormResponse)
async def update_parent(
    form_id: str,
    payload: ParentUpdate,
    upstream: UpstreamClient = Depends(get_upstream),
    directory: OrgUnitDirectory = Depends(get_directory),
    registry: SectionFormRegistry = Depends(get_form_registry),
    _: CurrentUser = Depends(can_provision),
) -> SectionFormResponse:
    form = registry.get(form_id)
    if not directory.loaded:
        await directory.load_inventory(upstream)
    form.set_parent_id(payload.parent_id, directory)
    return create_response("OK", form.to_dict())


@router.post("/{form_id}/submit", response_model=SectionFormResponse)
async def submit_form(
    form_id: str,
    upstream: UpstreamClient = Depends(get_upstream),
    directory: OrgUnitDirectory = Depends(get_directory),
    registry: SectionFormRegistry = Depends(get_form_registry),
    _: CurrentUser = Depends(can_provision),
) -> SectionFormResponse:
    form = registry.get(form_id)
    created = await form.submit(upstream, directory, section_provisioning_service)
    message = SECTION_CREATED_MESSAGE if created is not None else (form.error or "OK")
    return create_response(message, form.to_dict())


@router.get("/{form_id}/credentials/{field_key}", response_model=CopiedCredentialResponse)
async def copy_credential(
    form_id: str,
    field_key: str,
    registry: SectionFormRegistry = Depends(get_form_registry),
    _: CurrentUser = Depends(can_provision),
) -> CopiedCredentialResponse:
    copied = registry.get(form_id).disclosure.copy(field_key)
    return create_response(copied["message"], copied)


@router.delete("/{form_id}/credentials", response_model=SectionFormResponse)
async def dismiss_credentials(
    form_id: str,
    registry: SectionFormRegistry = Depends(get_form_registry),
    _: CurrentUser = Depends(can_provision),
) -> SectionFormResponse:
    """关闭凭据视图后密码无法再次读取。"""
    form = registry.get(form_id)
    form.disclosure.dismiss()
    return create_response("OK", form.to_dict())


@router.delete("/{form_id}", response_model=ResponseEnvelope[None])
async def discard_form(
    form_id: str,
    registry: SectionFormRegistry = Depends(get_form_registry),
    _: CurrentUser = Depends(can_provision),
) -> ResponseEnvelope[None]:
    registry.remove(form_id)
    return create_response("Section form discarded")
