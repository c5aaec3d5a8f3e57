"""Unit tests for the role/permission matrix and role hierarchy helpers."""

from __future__ import annotations

import pytest

from staffdesk.models.enums import Role
from staffdesk.security.permissions import (
    ROLE_PERMISSIONS,
    Permission,
    can_manage_role,
    has_all_permissions,
    has_any_permission,
    has_permission,
    is_higher_role,
    permissions_for,
    role_dominates,
)

# ---------------------------------------------------------------------------
# Matrix
# ---------------------------------------------------------------------------


def test_superuser_holds_every_permission() -> None:
    assert permissions_for(Role.SUPERUSER) == frozenset(Permission)


def test_every_role_has_an_entry() -> None:
    assert set(ROLE_PERMISSIONS) == set(Role)


@pytest.mark.parametrize(
    ("role", "permission", "expected"),
    [
        (Role.USER, Permission.TIMESHEET_CREATE, True),
        (Role.USER, Permission.TIMESHEET_APPROVE, False),
        (Role.USER, Permission.USER_LIST, False),
        (Role.MANAGER, Permission.TIMESHEET_APPROVE, True),
        (Role.MANAGER, Permission.TIMESHEET_DELETE, False),
        (Role.MANAGER, Permission.BILLING_READ, False),
        (Role.TENANT_ADMIN, Permission.TIMESHEET_DELETE, True),
        (Role.TENANT_ADMIN, Permission.BILLING_MANAGE, True),
        (Role.TENANT_ADMIN, Permission.SYSTEM_ADMIN, False),
        (Role.TENANT_ADMIN, Permission.TENANT_LIST, False),
    ],
)
def test_has_permission(role: Role, permission: Permission, expected: bool) -> None:
    assert has_permission(role, permission) is expected


def test_no_tenant_role_has_system_admin() -> None:
    for role in (Role.USER, Role.MANAGER, Role.TENANT_ADMIN):
        assert Permission.SYSTEM_ADMIN not in permissions_for(role)


def test_has_any_and_all() -> None:
    perms = [Permission.TIMESHEET_READ, Permission.TIMESHEET_APPROVE]
    assert has_any_permission(Role.USER, perms)
    assert not has_all_permissions(Role.USER, perms)
    assert has_all_permissions(Role.MANAGER, perms)
    assert not has_any_permission(Role.USER, [])
    assert has_all_permissions(Role.USER, [])


# ---------------------------------------------------------------------------
# Hierarchy
# ---------------------------------------------------------------------------


def test_is_higher_role_is_strict() -> None:
    assert is_higher_role(Role.SUPERUSER, Role.TENANT_ADMIN)
    assert is_higher_role(Role.TENANT_ADMIN, Role.MANAGER)
    assert is_higher_role(Role.MANAGER, Role.USER)
    assert not is_higher_role(Role.MANAGER, Role.MANAGER)
    assert not is_higher_role(Role.USER, Role.MANAGER)


@pytest.mark.parametrize("target", list(Role))
def test_user_dominates_nobody(target: Role) -> None:
    assert not role_dominates(Role.USER, target)


def test_manager_only_dominates_users() -> None:
    assert role_dominates(Role.MANAGER, Role.USER)
    assert not role_dominates(Role.MANAGER, Role.MANAGER)
    assert not role_dominates(Role.MANAGER, Role.TENANT_ADMIN)


def test_admin_and_superuser_dominate_everyone() -> None:
    for target in Role:
        assert role_dominates(Role.TENANT_ADMIN, target)
        assert role_dominates(Role.SUPERUSER, target)


def test_domination_is_monotonic_in_rank() -> None:
    """A higher role can manage at least everyone a lower role can."""
    ordered = [Role.USER, Role.MANAGER, Role.TENANT_ADMIN, Role.SUPERUSER]
    for lower, higher in zip(ordered, ordered[1:], strict=False):
        for target in Role:
            if role_dominates(lower, target):
                assert role_dominates(higher, target)


def test_can_manage_role() -> None:
    assert can_manage_role(Role.TENANT_ADMIN, Role.MANAGER)
    assert can_manage_role(Role.TENANT_ADMIN, Role.USER)
    assert not can_manage_role(Role.TENANT_ADMIN, Role.TENANT_ADMIN)
    assert can_manage_role(Role.MANAGER, Role.USER)
    assert not can_manage_role(Role.MANAGER, Role.MANAGER)
    assert not can_manage_role(Role.USER, Role.USER)
    assert can_manage_role(Role.SUPERUSER, Role.TENANT_ADMIN)
