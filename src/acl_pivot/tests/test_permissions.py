"""Unit tests for the rwx permission model."""

import pytest

from acl_pivot.exceptions import UnrecognizedRoleError
from acl_pivot.permissions import (
    Permission,
    PrincipalType,
    entity_type_to_principal_type,
    format_permission,
    is_expandable,
    role_to_permission,
)


def test_reader_maps_to_read_only() -> None:
    assert role_to_permission("READER") == Permission.READ


@pytest.mark.parametrize("role", ["WRITER", "OWNER"])
def test_writer_and_owner_map_to_full_access(role: str) -> None:
    assert role_to_permission(role) == Permission.READ | Permission.WRITE | Permission.EXECUTE


def test_iam_role_names_are_accepted() -> None:
    assert role_to_permission("roles/bigquery.dataViewer") == Permission.READ
    assert role_to_permission("roles/bigquery.dataOwner") == role_to_permission("OWNER")


@pytest.mark.parametrize("role", ["VIEW", "reader", "", "roles/bigquery.jobUser"])
def test_unknown_role_raises(role: str) -> None:
    with pytest.raises(UnrecognizedRoleError) as exc_info:
        role_to_permission(role)
    assert exc_info.value.role == role


def test_entity_types_map_one_to_one() -> None:
    assert entity_type_to_principal_type("userByEmail") is PrincipalType.USER
    assert entity_type_to_principal_type("groupByEmail") is PrincipalType.GROUP
    assert entity_type_to_principal_type("specialGroup") is PrincipalType.SPECIAL_GROUP


@pytest.mark.parametrize("entity_type", ["view", "domain", "routine", "dataset", "iamMember"])
def test_unhandled_entity_types_are_not_found(entity_type: str) -> None:
    assert entity_type_to_principal_type(entity_type) is None


def test_only_users_are_atomic() -> None:
    assert not is_expandable(PrincipalType.USER)
    assert is_expandable(PrincipalType.GROUP)
    assert is_expandable(PrincipalType.SPECIAL_GROUP)


@pytest.mark.parametrize(
    "bits,expected",
    [(0, "---"), (1, "r--"), (2, "-w-"), (4, "--x"), (3, "rw-"), (5, "r-x"), (7, "rwx")],
)
def test_permission_string_reflects_bits(bits: int, expected: str) -> None:
    assert format_permission(bits) == expected
    assert str(Permission(bits)) == expected
