"""父级单元选择器的状态转换。"""

import pytest

from app.packages.hierarchy.core.enums import OrgUnitTypeEnum, ParentTypeEnum
from app.packages.hierarchy.core.exceptions import AppException
from app.packages.hierarchy.models.org_unit import OrgUnit
from app.packages.hierarchy.services.parent_selector import ParentUnitSelector

UNITS = [
    OrgUnit(1, "Medical Administration", OrgUnitTypeEnum.ADMINISTRATION),
    OrgUnit(10, "Emergency", OrgUnitTypeEnum.DEPARTMENT, 1),
    OrgUnit(100, "Triage", OrgUnitTypeEnum.SECTION, 10),
]


def test_initial_state_is_department_without_selection():
    selector = ParentUnitSelector()
    assert selector.parent_type is ParentTypeEnum.DEPARTMENT
    assert selector.parent_id is None


def test_changing_type_always_clears_the_selection():
    selector = ParentUnitSelector()
    selector.set_parent_id(10, UNITS)

    selector.set_parent_type(ParentTypeEnum.DEPARTMENT)
    assert selector.parent_id is None

    selector.set_parent_type(ParentTypeEnum.ADMINISTRATION)
    selector.set_parent_id(1, UNITS)
    assert selector.parent_id == 1
    selector.set_parent_type(ParentTypeEnum.DEPARTMENT)
    assert selector.parent_id is None


@pytest.mark.parametrize("unit_id", [1, 100, 999])
def test_units_outside_the_current_type_are_rejected(unit_id):
    selector = ParentUnitSelector()
    selector.set_parent_id(10, UNITS)

    with pytest.raises(AppException) as exc_info:
        selector.set_parent_id(unit_id, UNITS)

    assert exc_info.value.status_code == 400
    assert selector.parent_id == 10
