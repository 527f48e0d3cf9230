# app/security.py
"""
Request authentication and role-based authorization.

Every protected route depends on get_current_principal (Bearer JWT) and,
where a role matters, on require_permission(Permission.X). Resource-level
checks (e.g. "only the space owner") go through ensure_owner_or_permission.
"""

import enum
from dataclasses import dataclass
from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from app.exceptions import ForbiddenError, UnauthorizedError
from app.models.user import Role
from app.services.auth_service import ACCESS, decode_token


@dataclass(frozen=True)
class Principal:
    user_id: int
    role: Role


class Permission(str, enum.Enum):
    REVIEW_WRITE = "review:write"
    REVIEW_MODERATE = "review:moderate"
    FAVORITE_WRITE = "favorite:write"
    SPACE_CREATE = "space:create"
    SPACE_MANAGE_OWN = "space:manage_own"
    SPACE_MANAGE_ANY = "space:manage_any"
    OCCUPANCY_REPORT_OWN = "occupancy:report_own"
    OCCUPANCY_REPORT_ANY = "occupancy:report_any"
    USER_ADMIN = "user:admin"


_USER_PERMISSIONS = frozenset({Permission.REVIEW_WRITE, Permission.FAVORITE_WRITE})
_OWNER_PERMISSIONS = _USER_PERMISSIONS | {
    Permission.SPACE_CREATE,
    Permission.SPACE_MANAGE_OWN,
    Permission.OCCUPANCY_REPORT_OWN,
}

ROLE_PERMISSIONS = {
    Role.USER: _USER_PERMISSIONS,
    Role.OWNER: frozenset(_OWNER_PERMISSIONS),
    Role.ADMIN: frozenset(Permission),
}


def has_permission(role: Role, permission: Permission) -> bool:
    return permission in ROLE_PERMISSIONS.get(role, frozenset())


def check_permission(principal: Principal, permission: Permission) -> None:
    if not has_permission(principal.role, permission):
        raise ForbiddenError(f"Role {principal.role.value} may not perform {permission.value}")


def ensure_owner_or_permission(principal: Principal, owner_id: int,
                               own_permission: Permission, any_permission: Permission) -> None:
    """Allow owners holding own_permission, or anyone holding any_permission."""
    if has_permission(principal.role, any_permission):
        return
    if principal.user_id == owner_id and has_permission(principal.role, own_permission):
        return
    raise ForbiddenError("You do not have access to this resource")


bearer_scheme = HTTPBearer(auto_error=False)


def get_current_principal(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> Principal:
    """FastAPI dependency: maps `Authorization: Bearer <token>` to a Principal."""
    if credentials is None or not credentials.credentials:
        raise UnauthorizedError("Missing bearer token")

    claims = decode_token(credentials.credentials, expected_type=ACCESS)
    try:
        return Principal(user_id=int(claims["sub"]), role=Role(claims["role"]))
    except ValueError:
        raise UnauthorizedError("Invalid token claims")


def require_permission(permission: Permission):
    """Dependency factory: the caller must hold `permission`."""
    def _dependency(principal: Principal = Depends(get_current_principal)) -> Principal:
        check_permission(principal, permission)
        return principal
    return _dependency
