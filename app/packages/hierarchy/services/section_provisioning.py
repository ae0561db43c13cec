"""科室开通服务：发起“创建科室 + 管理员”请求，规范化结果并对失败分类。"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Mapping, Optional

from app.packages.hierarchy.clients.upstream import UpstreamClient
from app.packages.hierarchy.core.constants import (
    HTTP_STATUS_BAD_GATEWAY,
    HTTP_STATUS_FORBIDDEN,
    HTTP_STATUS_UNPROCESSABLE_ENTITY,
    SECTION_CREATION_FALLBACK_MESSAGE,
)
from app.packages.hierarchy.core.enums import ProvisioningErrorKindEnum
from app.packages.hierarchy.core.exceptions import UpstreamError, UpstreamTransportError
from app.packages.hierarchy.core.logger import logger
from app.packages.hierarchy.models.section import SectionCreationRequest, SectionCreationResult

CREATE_SECTION_PATH = "/api/admin/create-section-with-admin"


@dataclass(frozen=True)
class ProvisioningFailure:
    """归一化后的失败：一条可直接展示的消息及其分类。"""

    kind: ProvisioningErrorKindEnum
    message: str
    status_code: Optional[int] = None

    @property
    def http_status(self) -> int:
        return self.status_code or HTTP_STATUS_BAD_GATEWAY


class ProvisioningError(Exception):
    def __init__(self, failure: ProvisioningFailure) -> None:
        super().__init__(failure.message)
        self.failure = failure


def _detail_item_message(item: Any) -> str:
    if isinstance(item, Mapping):
        message = item.get("msg") or item.get("message")
        if message:
            return str(message)
        return json.dumps(item, ensure_ascii=False, default=str)
    return str(item)


def describe_error(exc: BaseException, fallback: str = SECTION_CREATION_FALLBACK_MESSAGE) -> ProvisioningFailure:
    """把上游失败映射为一条人类可读的消息。

    - 无响应：直接使用异常自身的消息；
    - 422 且 detail 为数组：拼接所有 ``msg``；
    - detail 为字符串：原样展示（400/403/404 等）；
    - detail 为单个对象：取 ``msg``/``message``；
    - 其余情况：使用固定的兜底文案。
    """
    if isinstance(exc, UpstreamTransportError):
        return ProvisioningFailure(ProvisioningErrorKindEnum.TRANSPORT, str(exc) or fallback)

    if not isinstance(exc, UpstreamError):
        return ProvisioningFailure(ProvisioningErrorKindEnum.TRANSPORT, str(exc) or fallback)

    detail = exc.detail
    status_code = exc.status_code
    if isinstance(detail, str) and detail:
        if status_code == HTTP_STATUS_FORBIDDEN:
            kind = ProvisioningErrorKindEnum.PERMISSION
        elif status_code == HTTP_STATUS_UNPROCESSABLE_ENTITY:
            kind = ProvisioningErrorKindEnum.VALIDATION
        else:
            kind = ProvisioningErrorKindEnum.BUSINESS_RULE
        return ProvisioningFailure(kind, detail, status_code)

    if isinstance(detail, list) and detail:
        message = ", ".join(_detail_item_message(item) for item in detail)
        return ProvisioningFailure(ProvisioningErrorKindEnum.VALIDATION, message, status_code)

    if isinstance(detail, Mapping) and detail:
        return ProvisioningFailure(
            ProvisioningErrorKindEnum.VALIDATION
            if status_code == HTTP_STATUS_UNPROCESSABLE_ENTITY
            else ProvisioningErrorKindEnum.BUSINESS_RULE,
            _detail_item_message(detail),
            status_code,
        )

    return ProvisioningFailure(ProvisioningErrorKindEnum.MALFORMED, fallback, status_code)


class SectionProvisioningService:
    """不做重试与去重：每次调用都发出一个独立请求。"""

    async def create_section(
        self,
        upstream: UpstreamClient,
        request: SectionCreationRequest,
    ) -> SectionCreationResult:
        body = request.to_wire()
        logger.info(
            "Creating section %r under parent unit %s",
            request.section_name,
            request.parent_unit_id,
        )
        try:
            payload = await upstream.post(CREATE_SECTION_PATH, json=body)
        except (UpstreamError, UpstreamTransportError) as exc:
            failure = describe_error(exc)
            logger.error("Error creating section with admin (%s): %s", failure.kind.value, failure.message)
            raise ProvisioningError(failure) from exc

        if not isinstance(payload, Mapping):
            failure = ProvisioningFailure(ProvisioningErrorKindEnum.MALFORMED, SECTION_CREATION_FALLBACK_MESSAGE)
            logger.error("Malformed section creation response: %r", type(payload).__name__)
            raise ProvisioningError(failure)

        try:
            result = SectionCreationResult.from_wire(payload)
        except (TypeError, ValueError) as exc:
            failure = ProvisioningFailure(ProvisioningErrorKindEnum.MALFORMED, SECTION_CREATION_FALLBACK_MESSAGE)
            logger.error("Malformed section creation response: %s", exc)
            raise ProvisioningError(failure) from exc

        if not result.secret:
            logger.warning("Section %s created without a temporary password in the response", result.section_id)
        logger.info("Section %s created with admin user %s", result.section_id, result.username)
        return result


section_provisioning_service = SectionProvisioningService()
