"""科室创建表单：按表单实例保存输入、校验结果、在途请求与一次性凭据。

每次提交都会递增 ``generation``；响应返回时只有与最新一代匹配的结果才会写回表单，
表单被丢弃后迟到的响应仅记录日志。请求在途期间拒绝再次提交。
"""

from __future__ import annotations

import threading
import uuid
from collections import OrderedDict
from typing import Any, Optional

from app.packages.hierarchy.clients.upstream import UpstreamClient
from app.packages.hierarchy.core.config import get_settings
from app.packages.hierarchy.core.constants import (
    FIX_VALIDATION_MESSAGE,
    HTTP_STATUS_CONFLICT,
    HTTP_STATUS_NOT_FOUND,
    SUBMISSION_IN_FLIGHT_MESSAGE,
)
from app.packages.hierarchy.core.enums import ParentTypeEnum
from app.packages.hierarchy.core.exceptions import AppException, FetchError
from app.packages.hierarchy.core.logger import logger
from app.packages.hierarchy.models.org_unit import OrgUnit
from app.packages.hierarchy.models.section import SectionCreationRequest, SectionCreationResult
from app.packages.hierarchy.services.credential_disclosure import CredentialDisclosure, section_credential_fields
from app.packages.hierarchy.services.org_unit_directory import OrgUnitDirectory
from app.packages.hierarchy.services.parent_selector import ParentUnitSelector
from app.packages.hierarchy.services.section_provisioning import ProvisioningError, SectionProvisioningService
from app.packages.hierarchy.services.section_validator import MESSAGES, validate, validate_section_name


def _empty_errors() -> dict[str, Optional[str]]:
    return {"section_name": None, "parent": None}


class SectionCreationForm:
    def __init__(self, form_id: Optional[str] = None) -> None:
        self.form_id = form_id or uuid.uuid4().hex
        self.section_name = ""
        self.selector = ParentUnitSelector()
        self.field_errors = _empty_errors()
        self.error: Optional[str] = None
        self.generation = 0
        self.in_flight = False
        self.discarded = False
        self.disclosure = CredentialDisclosure()

    # -------------------
    # 输入
    # -------------------
    def set_section_name(self, raw: Optional[str]) -> None:
        """保存原始输入并执行失焦校验（只校验名称字段）。"""
        self.section_name = raw or ""
        code = validate_section_name(self.section_name)
        self.field_errors["section_name"] = MESSAGES["section_name"][code] if code else None

    def set_parent_type(self, parent_type: ParentTypeEnum) -> None:
        self.selector.set_parent_type(parent_type)

    def set_parent_id(self, parent_id: int, directory: OrgUnitDirectory) -> None:
        self.selector.set_parent_id(parent_id, self.parent_options(directory))
        self.field_errors["parent"] = None

    def parent_options(self, directory: OrgUnitDirectory) -> list[OrgUnit]:
        return directory.parents_for_type(self.selector.parent_type)

    @property
    def can_submit(self) -> bool:
        return (
            not self.in_flight
            and bool(self.section_name.strip())
            and self.selector.parent_id is not None
            and not any(self.field_errors.values())
        )

    def _is_current(self, generation: int) -> bool:
        return not self.discarded and generation == self.generation

    # -------------------
    # 提交
    # -------------------
    async def submit(
        self,
        upstream: UpstreamClient,
        directory: OrgUnitDirectory,
        service: SectionProvisioningService,
    ) -> Optional[SectionCreationResult]:
        """校验 → 提交 → 规范化结果，严格按序执行；失败以内联消息呈现，不向上抛出。"""
        if self.in_flight:
            raise AppException(SUBMISSION_IN_FLIGHT_MESSAGE, HTTP_STATUS_CONFLICT)

        result = validate(self.section_name, self.selector.parent_id)
        self.field_errors = result.messages()
        if not result.ok:
            self.error = FIX_VALIDATION_MESSAGE
            return None

        request = SectionCreationRequest.build(self.section_name, self.selector.parent_id)
        self.error = None
        self.disclosure.dismiss()
        self.generation += 1
        generation = self.generation
        self.in_flight = True
        try:
            created = await service.create_section(upstream, request)
        except ProvisioningError as exc:
            if self._is_current(generation):
                self.error = exc.failure.message
            else:
                logger.warning("Dropping stale failure for section form %s: %s", self.form_id, exc.failure.message)
            return None
        finally:
            self.in_flight = False

        if not self._is_current(generation):
            logger.warning(
                "Dropping stale result for section form %s (section %s, user %s)",
                self.form_id,
                created.section_id,
                created.username,
            )
            return None

        self.disclosure.hold(*section_credential_fields(created))
        self.section_name = ""
        self.selector.clear()
        self.field_errors = _empty_errors()

        try:
            await directory.load_inventory(upstream)
        except FetchError as exc:
            logger.warning("Section %s created but the inventory refresh failed: %s", created.section_id, exc)
        return created

    def discard(self) -> None:
        self.discarded = True
        self.generation += 1
        self.disclosure.dismiss()

    def to_dict(self) -> dict[str, Any]:
        return {
            "form_id": self.form_id,
            "section_name": self.section_name,
            "parent_type": self.selector.parent_type.value,
            "parent_id": self.selector.parent_id,
            "field_errors": dict(self.field_errors),
            "error": self.error,
            "submitting": self.in_flight,
            "can_submit": self.can_submit,
            "generation": self.generation,
            "credentials": self.disclosure.view(),
        }


class SectionFormRegistry:
    """内存中的表单仓库，容量受 ``SECTION_FORM_LIMIT`` 限制，超出时淘汰最早的表单。"""

    def __init__(self, limit: Optional[int] = None) -> None:
        self._forms: "OrderedDict[str, SectionCreationForm]" = OrderedDict()
        self._lock = threading.Lock()
        self._limit = limit

    @property
    def limit(self) -> int:
        return self._limit or get_settings().section_form_limit

    def create(self) -> SectionCreationForm:
        form = SectionCreationForm()
        with self._lock:
            self._forms[form.form_id] = form
            while len(self._forms) > self.limit:
                _, evicted = self._forms.popitem(last=False)
                evicted.discard()
                logger.info("Evicted section form %s", evicted.form_id)
        return form

    def get(self, form_id: str) -> SectionCreationForm:
        with self._lock:
            form = self._forms.get(form_id)
        if form is None:
            raise AppException("Section form not found", HTTP_STATUS_NOT_FOUND)
        return form

    def remove(self, form_id: str) -> None:
        with self._lock:
            form = self._forms.pop(form_id, None)
        if form is None:
            raise AppException("Section form not found", HTTP_STATUS_NOT_FOUND)
        form.discard()

    def clear(self) -> None:
        with self._lock:
            forms = list(self._forms.values())
            self._forms.clear()
        for form in forms:
            form.discard()

    def __len__(self) -> int:
        with self._lock:
            return len(self._forms)


section_form_registry = SectionFormRegistry()
