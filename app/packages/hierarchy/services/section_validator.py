"""科室名称与父级选择的校验规则，失焦和提交时共用。"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from app.packages.hierarchy.core.constants import SECTION_NAME_MAX_LENGTH, SECTION_NAME_MIN_LENGTH

REQUIRED = "required"
TOO_SHORT = "too short"
TOO_LONG = "too long"
NOT_A_PARENT = "not a parent"

MESSAGES = {
    "section_name": {
        REQUIRED: "Section name is required",
        TOO_SHORT: f"Section name must be at least {SECTION_NAME_MIN_LENGTH} characters",
        TOO_LONG: f"Section name must not exceed {SECTION_NAME_MAX_LENGTH} characters",
    },
    "parent": {
        REQUIRED: "Please select a parent unit",
        NOT_A_PARENT: "Parent unit must be an administration or a department",
    },
}


@dataclass(frozen=True)
class ValidationResult:
    section_name_error: Optional[str] = None
    parent_error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.section_name_error is None and self.parent_error is None

    def messages(self) -> dict[str, Optional[str]]:
        return {
            "section_name": MESSAGES["section_name"].get(self.section_name_error) if self.section_name_error else None,
            "parent": MESSAGES["parent"].get(self.parent_error) if self.parent_error else None,
        }


def validate_section_name(name: Optional[str]) -> Optional[str]:
    trimmed = (name or "").strip()
    if not trimmed:
        return REQUIRED
    if len(trimmed) < SECTION_NAME_MIN_LENGTH:
        return TOO_SHORT
    if len(trimmed) > SECTION_NAME_MAX_LENGTH:
        return TOO_LONG
    return None


def validate_parent(parent_id: Any) -> Optional[str]:
    if parent_id is None or parent_id == "":
        return REQUIRED
    return None


def validate(name: Optional[str], parent_id: Any) -> ValidationResult:
    """两个字段独立校验，名称错误不会掩盖父级错误。"""
    return ValidationResult(
        section_name_error=validate_section_name(name),
        parent_error=validate_parent(parent_id),
    )
