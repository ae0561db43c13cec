"""科室名称与父级校验规则。"""

from app.packages.hierarchy.services.section_validator import (
    REQUIRED,
    TOO_LONG,
    TOO_SHORT,
    validate,
    validate_section_name,
)


def test_short_name_without_parent_reports_both_fields():
    result = validate("A", None)

    assert result.ok is False
    assert result.section_name_error == TOO_SHORT
    assert result.parent_error == REQUIRED
    assert result.messages() == {
        "section_name": "Section name must be at least 2 characters",
        "parent": "Please select a parent unit",
    }


def test_whitespace_only_name_is_required_not_too_short():
    assert validate_section_name("     ") == REQUIRED
    assert validate_section_name(None) == REQUIRED


def test_length_bounds_apply_to_the_trimmed_name():
    assert validate_section_name("  ab  ") is None
    assert validate_section_name(" a ") == TOO_SHORT
    assert validate_section_name("x" * 100) is None
    assert validate_section_name("x" * 101) == TOO_LONG
    assert validate_section_name("  " + "x" * 100 + "  ") is None


def test_valid_input_passes():
    result = validate("Cardiology Annex", 42)
    assert result.ok is True
    assert result.messages() == {"section_name": None, "parent": None}
