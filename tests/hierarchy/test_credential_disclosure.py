"""一次性凭据展示。"""

import pytest

from app.packages.hierarchy.core.exceptions import AppException
from app.packages.hierarchy.models.section import SectionCreationResult
from app.packages.hierarchy.services.credential_disclosure import (
    CredentialDisclosure,
    CredentialField,
    one_time_view,
    section_credential_fields,
)


@pytest.fixture()
def disclosure():
    result = SectionCreationResult(section_id=101, username="sec_101_admin", secret="X7!ab")
    holder = CredentialDisclosure()
    holder.hold(*section_credential_fields(result))
    return holder


def test_view_lists_three_read_only_fields(disclosure):
    view = disclosure.view()

    assert [item["label"] for item in view["fields"]] == ["Section ID", "Username", "Password"]
    assert all(item["read_only"] and item["copyable"] for item in view["fields"])
    assert view["fields"][2]["value"] == "X7!ab"
    assert view["acknowledge_label"] == "Create Another Section"
    assert "shown once" in view["notice"]


def test_copy_returns_value_and_confirmation(disclosure):
    copied = disclosure.copy("secret")
    assert copied == {"key": "secret", "value": "X7!ab", "message": "Password copied to clipboard"}


def test_dismiss_makes_the_secret_unreachable(disclosure):
    disclosure.dismiss()

    assert disclosure.held is False
    assert disclosure.view() is None
    with pytest.raises(AppException) as exc_info:
        disclosure.copy("secret")
    assert exc_info.value.status_code == 404


def test_one_time_view_is_not_retained():
    view = one_time_view(CredentialField("username", "Username", "u"), CredentialField("secret", "Password", "p"))
    assert [item["key"] for item in view["fields"]] == ["username", "secret"]
    assert view["acknowledge_label"] == "Close"
