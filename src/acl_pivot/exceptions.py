# src/acl_pivot/exceptions.py

"""Exceptions raised while building and reporting access registers."""


class AclPivotError(Exception):
    """Base exception for acl_pivot."""

    pass


class ConfigurationError(AclPivotError):
    """Configuration is missing or cannot be read."""

    pass


class UnrecognizedRoleError(AclPivotError):
    """Role has no counterpart in the rwx permission scheme."""

    def __init__(self, role: str):
        self.role = role
        super().__init__(f"unrecognized role: {role!r}")


class PrincipalTypeConflictError(AclPivotError):
    """The same principal was observed with two different principal types."""

    def __init__(self, principal: str, existing, observed):
        self.principal = principal
        self.existing = existing
        self.observed = observed
        super().__init__(
            f"encountered principal type mismatch for {principal}: "
            f"{observed.value} <> {existing.value}"
        )
