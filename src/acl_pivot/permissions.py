# src/acl_pivot/permissions.py

from enum import Enum, IntFlag
from typing import Dict, Optional

from google.cloud.bigquery.enums import EntityTypes

from acl_pivot.exceptions import UnrecognizedRoleError


class Permission(IntFlag):
    """Unix-style (rwx) access to a resource"""
    READ = 1
    WRITE = 2
    EXECUTE = 4

    def __str__(self) -> str:
        return format_permission(self)


class PrincipalType(Enum):
    """Principal kinds, independent of the warehouse API"""
    USER = "User"
    GROUP = "Group"
    SPECIAL_GROUP = "SpecialGroup"

    @property
    def is_expandable(self) -> bool:
        return self is not PrincipalType.USER


FULL_ACCESS = Permission.READ | Permission.WRITE | Permission.EXECUTE

# Dataset-level roles. Newer API versions may report the IAM role names.
ROLE_PERMISSIONS: Dict[str, Permission] = {
    "READER": Permission.READ,
    "WRITER": FULL_ACCESS,
    "OWNER": FULL_ACCESS,
    "roles/bigquery.dataViewer": Permission.READ,
    "roles/bigquery.dataEditor": FULL_ACCESS,
    "roles/bigquery.dataOwner": FULL_ACCESS,
}

# Views, domains, routines, datasets and IAM members are not modelled.
ENTITY_PRINCIPAL_TYPES: Dict[str, PrincipalType] = {
    EntityTypes.USER_BY_EMAIL.value: PrincipalType.USER,
    EntityTypes.GROUP_BY_EMAIL.value: PrincipalType.GROUP,
    EntityTypes.SPECIAL_GROUP.value: PrincipalType.SPECIAL_GROUP,
}


def role_to_permission(role: str) -> Permission:
    """Map a BigQuery dataset role to its permission bits.

    Raises:
        UnrecognizedRoleError: if the role is not one of the known roles
    """
    try:
        return ROLE_PERMISSIONS[role]
    except KeyError:
        raise UnrecognizedRoleError(role) from None


def entity_type_to_principal_type(entity_type: str) -> Optional[PrincipalType]:
    """Map a BigQuery entity type to a PrincipalType, None if not handled"""
    return ENTITY_PRINCIPAL_TYPES.get(entity_type)


def is_expandable(principal_type: PrincipalType) -> bool:
    return principal_type.is_expandable


def format_permission(permission: int) -> str:
    """Render permission bits as a fixed-width 'rwx' string"""
    return "".join(
        char if permission & bit else "-"
        for bit, char in ((Permission.READ, "r"), (Permission.WRITE, "w"), (Permission.EXECUTE, "x"))
    )
