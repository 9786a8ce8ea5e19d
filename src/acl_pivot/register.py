# src/acl_pivot/register.py

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, Iterator, List, Optional, Tuple

from acl_pivot.exceptions import PrincipalTypeConflictError, UnrecognizedRoleError
from acl_pivot.permissions import (
    Permission,
    PrincipalType,
    entity_type_to_principal_type,
    format_permission,
    role_to_permission,
)
from acl_pivot.report import format_register

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ResourceAccess:
    """Accumulated permission of a principal on a single resource"""
    resource: str
    permission: Permission


@dataclass(frozen=True)
class Grant:
    """A single access entry as reported by the warehouse"""
    principal: str
    entity_type: str
    role: str


@dataclass
class DatasetAccess:
    """A dataset and the access entries attached to it"""
    dataset_id: str
    grants: List[Grant] = field(default_factory=list)


class AccessRegister:
    """Per-principal register of resource access.

    Each principal holds at most one ResourceAccess per resource, kept in the
    order the resource was first observed. The register also remembers the
    principal type observed for every principal, including principals whose
    grants were all skipped.
    """

    def __init__(self):
        self._entries: Dict[str, List[ResourceAccess]] = {}
        self.principal_types: Dict[str, PrincipalType] = {}

    def principals(self) -> List[str]:
        """Principals holding at least one resource access, sorted"""
        return sorted(p for p, entries in self._entries.items() if entries)

    def entries(self, principal: str) -> List[ResourceAccess]:
        return list(self._entries.get(principal, []))

    def permission(self, principal: str, resource: str) -> Optional[Permission]:
        for entry in self._entries.get(principal, []):
            if entry.resource == resource:
                return entry.permission
        return None

    def items(self) -> Iterator[Tuple[str, List[ResourceAccess]]]:
        for principal in self.principals():
            yield principal, self.entries(principal)

    def as_dict(self) -> Dict[str, List[Tuple[str, str]]]:
        """Plain mapping of principal to (resource, 'rwx') pairs"""
        return {
            principal: [(e.resource, format_permission(e.permission)) for e in entries]
            for principal, entries in self.items()
        }

    def copy(self) -> "AccessRegister":
        other = AccessRegister()
        other._entries = {p: list(entries) for p, entries in self._entries.items()}
        other.principal_types = dict(self.principal_types)
        return other

    def _access_sets(self) -> Dict[str, Dict[str, Permission]]:
        return {
            principal: {e.resource: e.permission for e in entries}
            for principal, entries in self._entries.items()
            if entries
        }

    def __eq__(self, other) -> bool:
        if not isinstance(other, AccessRegister):
            return NotImplemented
        # Principals without any access are only tracked for type conflicts
        access = self._access_sets()
        if access != other._access_sets():
            return False
        return all(self.principal_types.get(p) is other.principal_types.get(p) for p in access)

    def __len__(self) -> int:
        return len(self.principals())

    def __contains__(self, principal: str) -> bool:
        return bool(self._entries.get(principal))

    def __str__(self) -> str:
        return format_register(self)


def _observe_principal(register: AccessRegister, principal: str, principal_type: PrincipalType) -> None:
    known = register.principal_types.get(principal)
    if known is None:
        register.principal_types[principal] = principal_type
    elif known is not principal_type:
        raise PrincipalTypeConflictError(principal, known, principal_type)


def _widen(register: AccessRegister, principal: str, resource: str, permission: Permission) -> None:
    entries = register._entries.setdefault(principal, [])
    for idx, existing in enumerate(entries):
        if existing.resource == resource:
            entries[idx] = ResourceAccess(resource, existing.permission | permission)
            return
    entries.append(ResourceAccess(resource, permission))


def record_fact(
    register: AccessRegister,
    principal: str,
    principal_type: PrincipalType,
    resource: str,
    role: str,
) -> None:
    """Fold a single (principal, resource, role) fact into the register.

    Permissions on a resource already held by the principal are widened,
    never replaced. Facts with an unrecognized role are skipped.

    Raises:
        PrincipalTypeConflictError: if the principal was previously observed
            with a different principal type
    """
    _observe_principal(register, principal, principal_type)

    try:
        permission = role_to_permission(role)
    except UnrecognizedRoleError:
        logger.debug(f"Skipping {principal} on {resource}: unrecognized role {role!r}")
        return

    _widen(register, principal, resource, permission)


def build_register(datasets: Iterable[DatasetAccess]) -> AccessRegister:
    """Build an access register from a sequence of datasets.

    Datasets are consumed in order. The first principal type conflict or
    metadata error aborts the build and is re-raised as is.
    """
    register = AccessRegister()
    dataset_count = 0

    for dataset in datasets:
        dataset_count += 1
        for grant in dataset.grants:
            principal_type = entity_type_to_principal_type(grant.entity_type)
            if principal_type is None:
                logger.debug(
                    f"Skipping {grant.entity_type} entry {grant.principal!r} on {dataset.dataset_id}"
                )
                continue
            record_fact(register, grant.principal, principal_type, dataset.dataset_id, grant.role)

    logger.info(f"Built access register for {len(register)} principals over {dataset_count} datasets")
    return register


def merge_registers(a: AccessRegister, b: AccessRegister) -> AccessRegister:
    """Union two registers into a new one.

    Neither input is modified. Permissions on the same (principal, resource)
    pair are OR-ed together.

    Raises:
        PrincipalTypeConflictError: if a principal has different types in a and b
    """
    merged = AccessRegister()
    for source in (a, b):
        for principal, principal_type in source.principal_types.items():
            _observe_principal(merged, principal, principal_type)
        for principal, entries in source._entries.items():
            for entry in entries:
                _widen(merged, principal, entry.resource, entry.permission)
    return merged


def expand_groups(register: AccessRegister, expander) -> AccessRegister:
    """Copy the access of expandable principals onto their members.

    Returns a new register. Group entries are kept; every member known to
    the expander additionally receives the group's resource accesses, OR-ed
    with whatever the member already holds. Only one level of membership is
    followed.

    Args:
        register: finished register to expand
        expander: object with a members(principal) method returning a list of
            (member, PrincipalType) pairs, or None when the group is unknown
    """
    expanded = register.copy()

    for principal in sorted(register.principal_types):
        if not register.principal_types[principal].is_expandable:
            continue

        members = expander.members(principal)
        if members is None:
            logger.debug(f"No membership known for {principal}, reporting it as is")
            continue

        group_entries = register.entries(principal)
        for member, member_type in members:
            _observe_principal(expanded, member, member_type)
            for entry in group_entries:
                _widen(expanded, member, entry.resource, entry.permission)
        logger.info(f"Expanded {principal} into {len(members)} members")

    return expanded
