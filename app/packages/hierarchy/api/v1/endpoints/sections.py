"""科室一次性开通路由：校验、创建科室及其管理员并返回一次性凭据。"""

from fastapi import APIRouter, Depends

from app.packages.hierarchy.api.v1.schemas.sections import SectionCreatedResponse, SectionCreateRequest
from app.packages.hierarchy.clients.upstream import UpstreamClient
from app.packages.hierarchy.core.constants import (
    FIX_VALIDATION_MESSAGE,
    HTTP_STATUS_BAD_GATEWAY,
    HTTP_STATUS_UNPROCESSABLE_ENTITY,
    SECTION_CREATED_MESSAGE,
)
from app.packages.hierarchy.core.dependencies import get_directory, get_upstream, require_action
from app.packages.hierarchy.core.enums import ActionKeyEnum
from app.packages.hierarchy.core.exceptions import AppException, FetchError
from app.packages.hierarchy.core.logger import logger
from app.packages.hierarchy.core.responses import create_response
from app.packages.hierarchy.models.org_unit import is_section_parent
from app.packages.hierarchy.models.section import SectionCreationRequest
from app.packages.hierarchy.models.user import CurrentUser
from app.packages.hierarchy.services.credential_disclosure import CredentialDisclosure, section_credential_fields
from app.packages.hierarchy.services.org_unit_directory import OrgUnitDirectory
from app.packages.hierarchy.services.section_provisioning import ProvisioningError, section_provisioning_service
from app.packages.hierarchy.services.section_validator import MESSAGES, NOT_A_PARENT, validate

router = APIRouter(prefix="/sections", tags=["sections"])


@router.post("", response_model=SectionCreatedResponse)
async def create_section(
    payload: SectionCreateRequest,
    upstream: UpstreamClient = Depends(get_upstream),
    directory: OrgUnitDirectory = Depends(get_directory),
    current_user: CurrentUser = Depends(require_action(ActionKeyEnum.PROVISION_SECTIONS)),
) -> SectionCreatedResponse:
    """校验失败返回 422 与逐字段错误，且不会发出上游请求。"""
    result = validate(payload.section_name, payload.parent_unit_id)
    if not result.ok:
        raise AppException(FIX_VALIDATION_MESSAGE, HTTP_STATUS_UNPROCESSABLE_ENTITY, data=result.messages())

    # 父级必须是清单中的行政或部门，科室永远是叶子
    await directory.load_inventory(upstream)
    parent = directory.get(payload.parent_unit_id)
    if parent is None or not is_section_parent(parent):
        raise AppException(
            FIX_VALIDATION_MESSAGE,
            HTTP_STATUS_UNPROCESSABLE_ENTITY,
            data={"section_name": None, "parent": MESSAGES["parent"][NOT_A_PARENT]},
        )

    request = SectionCreationRequest.build(payload.section_name, payload.parent_unit_id)
    try:
        created = await section_provisioning_service.create_section(upstream, request)
    except ProvisioningError as exc:
        status_code = exc.failure.http_status
        if status_code >= 500:
            status_code = HTTP_STATUS_BAD_GATEWAY
        raise AppException(exc.failure.message, status_code, data={"kind": exc.failure.kind.value}) from exc

    logger.info("User %s provisioned section %s", current_user.username, created.section_id)
    try:
        await directory.load_inventory(upstream)
    except FetchError as exc:
        logger.warning("Section %s created but the inventory refresh failed: %s", created.section_id, exc)

    disclosure = CredentialDisclosure()
    disclosure.hold(*section_credential_fields(created))
    data = {
        "section_id": created.section_id,
        "section_name": request.section_name,
        "parent_unit_id": request.parent_unit_id,
        "credentials": disclosure.view(),
    }
    disclosure.dismiss()
    return create_response(SECTION_CREATED_MESSAGE, data)
