"""会话路由：当前用户信息与退出登录。"""

from fastapi import APIRouter, Depends

from app.packages.hierarchy.api.v1.schemas.access import SessionResponse
from app.packages.hierarchy.api.v1.schemas.common import ResponseEnvelope
from app.packages.hierarchy.clients.upstream import UpstreamClient
from app.packages.hierarchy.core import policy
from app.packages.hierarchy.core.dependencies import get_current_user, get_upstream
from app.packages.hierarchy.core.exceptions import UpstreamError, UpstreamTransportError
from app.packages.hierarchy.core.logger import logger
from app.packages.hierarchy.core.responses import create_response
from app.packages.hierarchy.models.user import CurrentUser

router = APIRouter(prefix="/auth", tags=["auth"])


@router.get("/me", response_model=SessionResponse)
async def read_current_user(current_user: CurrentUser = Depends(get_current_user)) -> SessionResponse:
    """返回规范化后的用户，以及依据角色策略计算出的可见页面、标签与操作。"""
    data = {
        "user": current_user.to_dict(),
        "pages": policy.visible_pages(current_user),
        "tabs": policy.visible_tabs(current_user),
        "actions": policy.granted_actions(current_user),
    }
    return create_response("OK", data)


@router.post("/logout", response_model=ResponseEnvelope[None])
async def logout(upstream: UpstreamClient = Depends(get_upstream)) -> ResponseEnvelope[None]:
    """通知上游清除会话；上游失败时仍视为本地退出成功。"""
    try:
        await upstream.post("/api/auth/logout")
    except (UpstreamError, UpstreamTransportError) as exc:
        logger.warning("Logout error: %s", exc)
    return create_response("Logged out")
