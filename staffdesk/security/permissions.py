"""Role to capability matrix. Pure functions, no storage access."""

from __future__ import annotations

import enum
from typing import TYPE_CHECKING

from staffdesk.models.enums import Role

if TYPE_CHECKING:
    from collections.abc import Iterable


class Permission(enum.StrEnum):
    TENANT_CREATE = "tenant:create"
    TENANT_READ = "tenant:read"
    TENANT_UPDATE = "tenant:update"
    TENANT_DELETE = "tenant:delete"
    TENANT_LIST = "tenant:list"
    USER_CREATE = "user:create"
    USER_READ = "user:read"
    USER_UPDATE = "user:update"
    USER_DELETE = "user:delete"
    USER_LIST = "user:list"
    USER_INVITE = "user:invite"
    TIMESHEET_CREATE = "timesheet:create"
    TIMESHEET_READ = "timesheet:read"
    TIMESHEET_UPDATE = "timesheet:update"
    TIMESHEET_DELETE = "timesheet:delete"
    TIMESHEET_APPROVE = "timesheet:approve"
    BILLING_READ = "billing:read"
    BILLING_UPDATE = "billing:update"
    BILLING_MANAGE = "billing:manage"
    REPORTS_BASIC = "reports:basic"
    REPORTS_ADVANCED = "reports:advanced"
    SYSTEM_ADMIN = "system:admin"
    ADVERTISEMENTS_MANAGE = "advertisements:manage"


# Permission matrix (tenant roles are not strictly nested: MANAGER lacks
# timesheet:delete and billing:*, which TENANT_ADMIN holds).
ROLE_PERMISSIONS: dict[Role, frozenset[Permission]] = {
    Role.SUPERUSER: frozenset(Permission),
    Role.TENANT_ADMIN: frozenset(
        {
            Permission.USER_CREATE,
            Permission.USER_READ,
            Permission.USER_UPDATE,
            Permission.USER_DELETE,
            Permission.USER_LIST,
            Permission.USER_INVITE,
            Permission.TIMESHEET_CREATE,
            Permission.TIMESHEET_READ,
            Permission.TIMESHEET_UPDATE,
            Permission.TIMESHEET_DELETE,
            Permission.TIMESHEET_APPROVE,
            Permission.BILLING_READ,
            Permission.BILLING_UPDATE,
            Permission.BILLING_MANAGE,
            Permission.REPORTS_BASIC,
            Permission.REPORTS_ADVANCED,
        }
    ),
    Role.MANAGER: frozenset(
        {
            Permission.USER_READ,
            Permission.USER_LIST,
            Permission.TIMESHEET_CREATE,
            Permission.TIMESHEET_READ,
            Permission.TIMESHEET_UPDATE,
            Permission.TIMESHEET_APPROVE,
            Permission.REPORTS_BASIC,
            Permission.REPORTS_ADVANCED,
        }
    ),
    Role.USER: frozenset(
        {
            Permission.TIMESHEET_CREATE,
            Permission.TIMESHEET_READ,
            Permission.TIMESHEET_UPDATE,
            Permission.REPORTS_BASIC,
        }
    ),
}

# Tenant-scoped hierarchy, lowest first. SUPERUSER sits above every tenant role.
_ROLE_RANK: dict[Role, int] = {
    Role.USER: 0,
    Role.MANAGER: 1,
    Role.TENANT_ADMIN: 2,
    Role.SUPERUSER: 3,
}


def permissions_for(role: Role) -> frozenset[Permission]:
    return ROLE_PERMISSIONS[role]


def has_permission(role: Role, permission: Permission) -> bool:
    return permission in ROLE_PERMISSIONS[role]


def has_any_permission(role: Role, permissions: Iterable[Permission]) -> bool:
    return any(has_permission(role, p) for p in permissions)


def has_all_permissions(role: Role, permissions: Iterable[Permission]) -> bool:
    return all(has_permission(role, p) for p in permissions)


def is_higher_role(role: Role, other: Role) -> bool:
    """True when ``role`` ranks strictly above ``other``."""
    return _ROLE_RANK[role] > _ROLE_RANK[other]


def role_dominates(actor: Role, target: Role) -> bool:
    """Whether ``actor`` may manage a user holding ``target``.

    TENANT_ADMIN manages anyone in its tenant, MANAGER only USER-level
    members, USER nobody.
    """
    if actor in (Role.SUPERUSER, Role.TENANT_ADMIN):
        return True
    if actor == Role.MANAGER:
        return target == Role.USER
    return False


def can_manage_role(actor: Role, target: Role) -> bool:
    """Whether ``actor`` may grant or revoke ``target`` on a membership."""
    if actor == Role.SUPERUSER:
        return True
    if actor == Role.TENANT_ADMIN:
        return target in (Role.MANAGER, Role.USER)
    if actor == Role.MANAGER:
        return target == Role.USER
    return False
