"""Domain Types — identifiers and the role enum with its label table."""

import uuid

import pytest

from catalog.core.domain_types import ROLE_LABELS, SortOrder, UserRole, new_id


def test_new_id_is_unique_uuid_string():
    first, second = new_id(), new_id()
    assert first != second
    assert str(uuid.UUID(first)) == first


def test_role_set_is_closed():
    assert UserRole.values() == ["admin", "author", "member"]
    with pytest.raises(ValueError):
        UserRole("superuser")


def test_every_role_has_a_label():
    assert set(ROLE_LABELS) == set(UserRole)
    assert UserRole.ADMIN.label == "Administrator"
    assert UserRole("member").label == "Member"


def test_sort_order_values():
    assert {o.value for o in SortOrder} == {"asc", "desc"}
