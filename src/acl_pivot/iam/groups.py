# src/acl_pivot/iam/groups.py

import logging
from typing import Any, Dict, List, Optional, Tuple

from acl_pivot.exceptions import ConfigurationError
from acl_pivot.permissions import PrincipalType

logger = logging.getLogger(__name__)

Member = Tuple[str, PrincipalType]


class StaticGroupExpander:
    """Group membership taken from the `groups` section of the config.

    Members are listed either as plain identities, which are treated as
    users, or as mappings with an explicit type:

        groups:
          projectReaders:
            - alice@example.com
            - {id: analysts@example.com, type: Group}
    """

    def __init__(self, groups: Optional[Dict[str, List[Any]]] = None):
        self._groups: Dict[str, List[Member]] = {}
        for group, members in (groups or {}).items():
            self._groups[group] = [self._parse_member(group, m) for m in members or []]
        logger.debug(f"Loaded membership of {len(self._groups)} groups")

    @staticmethod
    def _parse_member(group: str, member: Any) -> Member:
        if isinstance(member, str):
            return member, PrincipalType.USER
        if isinstance(member, dict) and "id" in member:
            type_name = member.get("type", PrincipalType.USER.value)
            try:
                return member["id"], PrincipalType(type_name)
            except ValueError:
                raise ConfigurationError(
                    f"Invalid principal type {type_name!r} for member {member['id']} of {group}"
                ) from None
        raise ConfigurationError(f"Invalid member entry for group {group}: {member!r}")

    def members(self, principal: str) -> Optional[List[Member]]:
        """Members of a group, or None if the group is unknown"""
        members = self._groups.get(principal)
        return list(members) if members is not None else None
