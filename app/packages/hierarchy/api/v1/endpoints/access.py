"""页面与设置标签的可见性查询路由。"""

from fastapi import APIRouter, Depends

from app.packages.hierarchy.api.v1.schemas.access import AccessDecisionResponse
from app.packages.hierarchy.core import policy
from app.packages.hierarchy.core.dependencies import get_current_user
from app.packages.hierarchy.core.responses import create_response
from app.packages.hierarchy.models.user import CurrentUser

router = APIRouter(prefix="/access", tags=["access"])


@router.get("/pages/{page_key}", response_model=AccessDecisionResponse)
async def check_page_access(
    page_key: str,
    current_user: CurrentUser = Depends(get_current_user),
) -> AccessDecisionResponse:
    """未知页面键同样返回 ``allowed: false``。"""
    return create_response("OK", {"key": page_key, "allowed": policy.can_access_page(current_user, page_key)})


@router.get("/tabs/{tab_key}", response_model=AccessDecisionResponse)
async def check_tab_access(
    tab_key: str,
    current_user: CurrentUser = Depends(get_current_user),
) -> AccessDecisionResponse:
    return create_response("OK", {"key": tab_key, "allowed": policy.can_access_tab(current_user, tab_key)})
