from acl_pivot.permissions import Permission, PrincipalType
from acl_pivot.register import (
    AccessRegister,
    DatasetAccess,
    Grant,
    ResourceAccess,
    build_register,
    expand_groups,
    merge_registers,
    record_fact,
)

__version__ = "0.1"
