"""组织单元查询路由：完整清单及其过滤视图。"""

from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends, Query

from app.packages.hierarchy.api.v1.schemas.org_units import OrgUnitListResponse
from app.packages.hierarchy.clients.upstream import UpstreamClient
from app.packages.hierarchy.core.constants import HTTP_STATUS_NOT_FOUND
from app.packages.hierarchy.core.dependencies import get_current_user, get_directory, get_upstream
from app.packages.hierarchy.core.exceptions import AppException
from app.packages.hierarchy.core.responses import create_response
from app.packages.hierarchy.models.org_unit import OrgUnit
from app.packages.hierarchy.models.user import CurrentUser
from app.packages.hierarchy.services.org_unit_directory import OrgUnitDirectory, fetch_remote_view

router = APIRouter(prefix="/org-units", tags=["org_units"])


def _listing(units: List[OrgUnit]) -> dict:
    items = [unit.to_dict() for unit in units]
    return {"items": items, "count": len(items)}


async def _view(
    view: str,
    remote: bool,
    upstream: UpstreamClient,
    directory: OrgUnitDirectory,
) -> dict:
    """``remote=true`` 时读取上游预过滤的列表，否则基于刚刷新的完整清单派生。"""
    if remote:
        return _listing(await fetch_remote_view(upstream, view))
    await directory.load_inventory(upstream)
    return _listing(getattr(directory, view)())


@router.get("", response_model=OrgUnitListResponse)
async def list_org_units(
    upstream: UpstreamClient = Depends(get_upstream),
    directory: OrgUnitDirectory = Depends(get_directory),
    _: CurrentUser = Depends(get_current_user),
) -> OrgUnitListResponse:
    """返回完整的扁平清单；清单不可用时由全局处理器返回 502。"""
    units = await directory.load_inventory(upstream)
    return create_response("OK", _listing(units))


@router.get("/leaves", response_model=OrgUnitListResponse)
async def list_leaves(
    remote: bool = Query(False, description="是否直接读取上游的预过滤视图"),
    upstream: UpstreamClient = Depends(get_upstream),
    directory: OrgUnitDirectory = Depends(get_directory),
    _: CurrentUser = Depends(get_current_user),
) -> OrgUnitListResponse:
    return create_response("OK", await _view("leaves", remote, upstream, directory))


@router.get("/administrations", response_model=OrgUnitListResponse)
async def list_administrations(
    remote: bool = Query(False),
    upstream: UpstreamClient = Depends(get_upstream),
    directory: OrgUnitDirectory = Depends(get_directory),
    _: CurrentUser = Depends(get_current_user),
) -> OrgUnitListResponse:
    return create_response("OK", await _view("administrations", remote, upstream, directory))


@router.get("/departments", response_model=OrgUnitListResponse)
async def list_departments(
    remote: bool = Query(False),
    upstream: UpstreamClient = Depends(get_upstream),
    directory: OrgUnitDirectory = Depends(get_directory),
    _: CurrentUser = Depends(get_current_user),
) -> OrgUnitListResponse:
    return create_response("OK", await _view("departments", remote, upstream, directory))


@router.get("/section-parents", response_model=OrgUnitListResponse)
async def list_section_parents(
    remote: bool = Query(False),
    upstream: UpstreamClient = Depends(get_upstream),
    directory: OrgUnitDirectory = Depends(get_directory),
    _: CurrentUser = Depends(get_current_user),
) -> OrgUnitListResponse:
    """行政与部门的并集，不含科室。"""
    return create_response("OK", await _view("section_parents", remote, upstream, directory))


@router.get("/{unit_id}/children", response_model=OrgUnitListResponse)
async def list_children(
    unit_id: int,
    upstream: UpstreamClient = Depends(get_upstream),
    directory: OrgUnitDirectory = Depends(get_directory),
    _: CurrentUser = Depends(get_current_user),
) -> OrgUnitListResponse:
    await directory.load_inventory(upstream)
    if directory.get(unit_id) is None:
        raise AppException("Org unit not found", HTTP_STATUS_NOT_FOUND)
    return create_response("OK", _listing(directory.children_of(unit_id)))
