"""账号管理路由：测试凭据列表、受保护的删除与科室管理员重建。"""

from fastapi import APIRouter, Depends

from app.packages.hierarchy.api.v1.schemas.users import (
    DeletedUserResponse,
    RecreatedAdminResponse,
    UserCredentialListResponse,
)
from app.packages.hierarchy.clients.upstream import UpstreamClient
from app.packages.hierarchy.core.constants import ADMIN_RECREATED_MESSAGE
from app.packages.hierarchy.core.dependencies import get_directory, get_upstream, require_action, require_tab
from app.packages.hierarchy.core.enums import ActionKeyEnum, SettingsTabKeyEnum
from app.packages.hierarchy.core.responses import create_response
from app.packages.hierarchy.models.user import CurrentUser
from app.packages.hierarchy.services.org_unit_directory import OrgUnitDirectory
from app.packages.hierarchy.services.user_admin_service import user_admin_service

router = APIRouter(prefix="/admin", tags=["admin_users"])


@router.get("/users/credentials", response_model=UserCredentialListResponse)
async def list_user_credentials(
    upstream: UpstreamClient = Depends(get_upstream),
    _: CurrentUser = Depends(require_tab(SettingsTabKeyEnum.USERS)),
) -> UserCredentialListResponse:
    return create_response("OK", await user_admin_service.list_user_credentials(upstream))


@router.delete("/users/{user_id}", response_model=DeletedUserResponse)
async def delete_user(
    user_id: int,
    upstream: UpstreamClient = Depends(get_upstream),
    _: CurrentUser = Depends(require_action(ActionKeyEnum.MANAGE_USERS)),
) -> DeletedUserResponse:
    """``SOFTWARE_ADMIN`` 账号在本地即被拒绝，删除请求不会发往上游。"""
    deleted = await user_admin_service.delete_user(upstream, user_id)
    return create_response(f"User {deleted['username']} deleted", deleted)


@router.post("/sections/{section_id}/recreate-admin", response_model=RecreatedAdminResponse)
async def recreate_section_admin(
    section_id: int,
    upstream: UpstreamClient = Depends(get_upstream),
    directory: OrgUnitDirectory = Depends(get_directory),
    _: CurrentUser = Depends(require_action(ActionKeyEnum.MANAGE_USERS)),
) -> RecreatedAdminResponse:
    recreated = await user_admin_service.recreate_section_admin(upstream, directory, section_id)
    return create_response(ADMIN_RECREATED_MESSAGE, recreated)
