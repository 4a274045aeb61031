"""Role-based access control for ops (staff) accounts."""

from enum import Enum
from typing import Any, Callable

from fastapi import Depends

from app.api.deps import get_current_ops_user
from app.core.exceptions import AuthorizationError
from app.domain.identity import OpsIdentity


class OpsRole(str, Enum):
    """Staff roles."""

    OPERATOR = "operator"
    ADMIN = "admin"


class Permission(str, Enum):
    """Ops permissions."""

    VIEW_QUEUE = "view_queue"
    UPDATE_BOOKING_STATUS = "update_booking_status"
    MESSAGE_GUEST = "message_guest"
    VIEW_STATS = "view_stats"
    MANAGE_OPS_USERS = "manage_ops_users"


# Role to permissions mapping
ROLE_PERMISSIONS: dict[OpsRole, set[Permission]] = {
    OpsRole.OPERATOR: {
        Permission.VIEW_QUEUE,
        Permission.UPDATE_BOOKING_STATUS,
        Permission.MESSAGE_GUEST,
        Permission.VIEW_STATS,
    },
    OpsRole.ADMIN: {
        # Admins have all permissions
        perm for perm in Permission
    },
}


def has_permission(role: str, permission: Permission) -> bool:
    """Check if a role has a specific permission."""
    try:
        ops_role = OpsRole(role)
    except ValueError:
        return False
    return permission in ROLE_PERMISSIONS.get(ops_role, set())


def require_permission(permission: Permission) -> Callable[..., Any]:
    """Dependency to require a specific permission from the ops user."""

    async def permission_checker(
        ops_user: OpsIdentity = Depends(get_current_ops_user),
    ) -> OpsIdentity:
        if not has_permission(ops_user.role, permission):
            raise AuthorizationError(f"Permission '{permission.value}' is required for this action")
        return ops_user

    return permission_checker


# Convenience dependencies
require_queue_access = require_permission(Permission.VIEW_QUEUE)
require_status_update = require_permission(Permission.UPDATE_BOOKING_STATUS)
require_guest_messaging = require_permission(Permission.MESSAGE_GUEST)
require_stats_access = require_permission(Permission.VIEW_STATS)
require_ops_admin = require_permission(Permission.MANAGE_OPS_USERS)
