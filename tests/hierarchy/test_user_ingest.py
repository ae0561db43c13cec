"""会话用户摄取与角色规范化。"""

import pytest

from app.packages.hierarchy.core.exceptions import AppException
from app.packages.hierarchy.core.guards import forbid_if_software_admin, is_software_admin_role
from app.packages.hierarchy.models.user import canonical_role, ingest_user


def test_roles_are_canonicalized_once():
    user = ingest_user({"id": "9", "username": "amal", "roles": ["software_admin", "Section-Admin", "SOFTWARE_ADMIN"]})

    assert user.user_id == 9
    assert user.display_name == "amal"
    assert user.roles == ("SOFTWARE_ADMIN", "SECTION_ADMIN")


def test_single_role_fields_are_accepted():
    assert ingest_user({"username": "a", "role_name": "worker"}).roles == ("WORKER",)
    assert ingest_user({"username": "a", "role": " complaint department worker "}).roles == (
        "COMPLAINT_DEPARTMENT_WORKER",
    )
    assert ingest_user({"username": "a", "roles": "software_admin"}).roles == ("SOFTWARE_ADMIN",)
    assert ingest_user({"username": "a", "roles": "   "}).roles == ()
    assert ingest_user({"username": "a"}).roles == ()
    assert ingest_user(None) is None


def test_canonical_role_handles_blank_values():
    assert canonical_role("   ") is None
    assert canonical_role(None) is None


def test_software_admin_guard_compares_canonical_roles():
    assert is_software_admin_role("SOFTWARE_ADMIN") is True
    assert is_software_admin_role("SECTION_ADMIN") is False

    with pytest.raises(AppException) as exc_info:
        forbid_if_software_admin("SOFTWARE_ADMIN")
    assert exc_info.value.status_code == 403
    assert exc_info.value.detail == "Cannot delete SOFTWARE_ADMIN user"
