"""模型汇总模块：统一导出组织单元、科室开通与用户相关的值对象。"""

from app.packages.hierarchy.models.org_unit import OrgUnit, is_section_parent, parse_org_units
from app.packages.hierarchy.models.section import (
    SectionCreationRequest,
    SectionCreationResult,
    resolve_secret,
)
from app.packages.hierarchy.models.user import CurrentUser, canonical_role, canonical_roles, ingest_user

__all__ = [
    "OrgUnit",
    "is_section_parent",
    "parse_org_units",
    "SectionCreationRequest",
    "SectionCreationResult",
    "resolve_secret",
    "CurrentUser",
    "canonical_role",
    "canonical_roles",
    "ingest_user",
]
