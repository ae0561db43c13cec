"""组织清单摄取、层级诊断与过滤视图。"""

import pytest

from app.packages.hierarchy.core.enums import OrgUnitTypeEnum, ParentTypeEnum
from app.packages.hierarchy.core.exceptions import FetchError
from app.packages.hierarchy.models.org_unit import OrgUnit, parse_org_units
from app.packages.hierarchy.services.org_unit_directory import (
    OrgUnitDirectory,
    check_hierarchy,
    fetch_remote_view,
)


def _load(drive, directory):
    async def factory(upstream):
        return await directory.load_inventory(upstream)

    return drive(factory)


def test_section_parents_exclude_sections(drive, backend):
    """两个单元：行政 1 与其下的科室 2，只有行政可以作为父级。"""
    backend.org_units = [
        {"id": 1, "name": "Admin", "unit_type": "ADMINISTRATION"},
        {"id": 2, "name": "Section", "unit_type": "SECTION", "parent_id": 1},
    ]
    directory = OrgUnitDirectory()
    _load(drive, directory)

    assert [unit.id for unit in directory.section_parents()] == [1]


def test_section_parents_equal_administrations_plus_departments(drive, directory):
    _load(drive, directory)

    parents = {unit.id for unit in directory.section_parents()}
    expected = {unit.id for unit in directory.administrations()} | {unit.id for unit in directory.departments()}
    assert parents == expected
    assert all(unit.unit_type is not OrgUnitTypeEnum.SECTION for unit in directory.section_parents())
    assert [unit.id for unit in directory.leaves()] == [100, 101]


def test_relationship_accessors(drive, directory):
    _load(drive, directory)

    assert [unit.id for unit in directory.children_of(1)] == [10, 11]
    assert directory.parent_of(100).id == 10
    assert directory.parent_of(1) is None
    assert [unit.id for unit in directory.path_to(100)] == [1, 10, 100]
    assert [unit.id for unit in directory.parents_for_type(ParentTypeEnum.ADMINISTRATION)] == [1, 2]
    assert [unit.id for unit in directory.children_map()[None]] == [1, 2]


def test_failed_fetch_keeps_previous_snapshot(drive, backend, directory):
    _load(drive, directory)
    backend.fail("GET", "/api/admin/user-inventory", 500, {"detail": "boom"})

    with pytest.raises(FetchError) as exc_info:
        _load(drive, directory)

    assert str(exc_info.value) == "Failed to load organizational units"
    assert len(directory.units()) == 6


def test_malformed_payload_is_a_fetch_error(drive, backend, directory):
    backend.fail("GET", "/api/admin/user-inventory", 200, {"org_units": "nope"})

    with pytest.raises(FetchError):
        _load(drive, directory)
    assert directory.loaded is False


def test_refresh_replaces_the_snapshot(drive, backend, directory):
    first = _load(drive, directory)
    backend.org_units.append({"id": 300, "name": "Lab", "unit_type": "SECTION", "parent_id": 11})
    _load(drive, directory)

    assert len(first) == 6
    assert directory.get(300).name == "Lab"


def test_parse_accepts_aliases_and_flattens_children():
    raw = [
        {
            "ID": "1",
            "NameEn": "Admin",
            "Type": "administration",
            "Children": [
                {"id": 10, "Name": "Dept", "typeName": "DEPARTMENT", "children": [{"id": 100, "type": "SECTION"}]},
            ],
        },
        {"name": "no id", "unit_type": "SECTION"},
        {"id": 5, "name": "odd", "unit_type": "WARD"},
    ]

    units = parse_org_units(raw)

    assert units == [
        OrgUnit(1, "Admin", OrgUnitTypeEnum.ADMINISTRATION, None),
        OrgUnit(10, "Dept", OrgUnitTypeEnum.DEPARTMENT, 1),
        OrgUnit(100, "Unit 100", OrgUnitTypeEnum.SECTION, 10),
    ]


def test_check_hierarchy_reports_violations():
    units = [
        OrgUnit(1, "Admin", OrgUnitTypeEnum.ADMINISTRATION),
        OrgUnit(2, "Orphan dept", OrgUnitTypeEnum.DEPARTMENT),
        OrgUnit(100, "Section", OrgUnitTypeEnum.SECTION, 1),
        OrgUnit(101, "Nested", OrgUnitTypeEnum.SECTION, 100),
        OrgUnit(102, "Dangling", OrgUnitTypeEnum.SECTION, 999),
    ]

    problems = check_hierarchy(units)

    assert "unit 2 is top-level but is a DEPARTMENT" in problems
    assert "section 100 is the parent of unit 101" in problems
    assert "unit 102 references missing parent 999" in problems
    assert check_hierarchy(parse_org_units([{"id": 1, "unit_type": "ADMINISTRATION"}])) == []


def test_check_hierarchy_detects_cycles():
    units = [
        OrgUnit(10, "A", OrgUnitTypeEnum.DEPARTMENT, 11),
        OrgUnit(11, "B", OrgUnitTypeEnum.DEPARTMENT, 10),
    ]
    assert "unit 10 is part of a parent cycle" in check_hierarchy(units)


def test_remote_section_parents_are_filtered_again(drive, backend):
    backend.fail(
        "GET",
        "/api/org-units/section-parents",
        200,
        {"parents": [{"id": 1, "unit_type": "ADMINISTRATION"}, {"id": 100, "unit_type": "SECTION"}]},
    )

    units = drive(lambda upstream: fetch_remote_view(upstream, "section_parents"))

    assert [unit.id for unit in units] == [1]
