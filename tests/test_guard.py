"""Tests for AccessGuard tenant, capability and resource checks."""

from __future__ import annotations

import uuid
from typing import TYPE_CHECKING

import pytest

from staffdesk.exceptions import AccessDenied, AuthenticationRequired, NotFound, PermissionDenied
from staffdesk.models.enums import ResourceType, Role
from staffdesk.security.guard import AccessGuard
from staffdesk.security.permissions import Permission
from tests.factories import add_timesheet

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

    from tests.factories import World


def _guard(session: AsyncSession, world: World, who, tenant=None) -> AccessGuard:
    return AccessGuard(session, world.context(who, tenant))


# ---------------------------------------------------------------------------
# Context and tenant checks
# ---------------------------------------------------------------------------


async def test_missing_context_requires_authentication(db_session: AsyncSession) -> None:
    guard = AccessGuard(db_session, None)
    with pytest.raises(AuthenticationRequired):
        guard.require_context()
    with pytest.raises(AuthenticationRequired):
        guard.require_permission(Permission.TIMESHEET_READ)


async def test_tenant_match_passes(db_session: AsyncSession, world: World) -> None:
    context = _guard(db_session, world, world.user).require_tenant_access(world.t1.id)
    assert context.tenant_id == world.t1.id


async def test_tenant_mismatch_denied(db_session: AsyncSession, world: World) -> None:
    with pytest.raises(AccessDenied, match="tenant mismatch"):
        _guard(db_session, world, world.admin).require_tenant_access(world.t2.id)


async def test_superuser_is_rescoped_to_requested_tenant(db_session: AsyncSession, world: World) -> None:
    context = _guard(db_session, world, world.superuser).require_tenant_access(world.t2.id)
    assert context.tenant_id == world.t2.id
    assert context.is_superuser


# ---------------------------------------------------------------------------
# Capability checks
# ---------------------------------------------------------------------------


async def test_permission_denied_for_missing_capability(db_session: AsyncSession, world: World) -> None:
    with pytest.raises(PermissionDenied, match="timesheet:approve"):
        _guard(db_session, world, world.user).require_permission(Permission.TIMESHEET_APPROVE)


async def test_superuser_passes_any_capability(db_session: AsyncSession, world: World) -> None:
    guard = _guard(db_session, world, world.superuser)
    for permission in Permission:
        assert guard.require_permission(permission).role == Role.SUPERUSER


# ---------------------------------------------------------------------------
# Timesheet resources
# ---------------------------------------------------------------------------


async def test_owner_can_access_own_timesheet(db_session: AsyncSession, world: World) -> None:
    ts = await add_timesheet(db_session, world.t1, world.user)
    guard = _guard(db_session, world, world.user)
    await guard.require_resource_access(ResourceType.TIMESHEET, ts.id, Permission.TIMESHEET_READ)


async def test_user_cannot_access_colleague_timesheet(db_session: AsyncSession, world: World) -> None:
    ts = await add_timesheet(db_session, world.t1, world.colleague)
    guard = _guard(db_session, world, world.user)
    with pytest.raises(AccessDenied):
        await guard.require_resource_access(ResourceType.TIMESHEET, ts.id, Permission.TIMESHEET_READ)


async def test_manager_can_access_member_timesheet(db_session: AsyncSession, world: World) -> None:
    ts = await add_timesheet(db_session, world.t1, world.user)
    guard = _guard(db_session, world, world.manager)
    await guard.require_resource_access(ResourceType.TIMESHEET, ts.id, Permission.TIMESHEET_APPROVE)


@pytest.mark.parametrize("who", ["user", "manager", "admin"])
async def test_foreign_tenant_timesheet_denied_for_every_role(
    db_session: AsyncSession, world: World, who: str
) -> None:
    ts = await add_timesheet(db_session, world.t2, world.outsider)
    guard = _guard(db_session, world, getattr(world, who))
    with pytest.raises(AccessDenied):
        await guard.require_resource_access(ResourceType.TIMESHEET, ts.id, Permission.TIMESHEET_READ)


async def test_unknown_timesheet_not_found(db_session: AsyncSession, world: World) -> None:
    guard = _guard(db_session, world, world.admin)
    with pytest.raises(NotFound):
        await guard.require_resource_access(ResourceType.TIMESHEET, uuid.uuid4(), Permission.TIMESHEET_READ)


async def test_capability_checked_before_resource(db_session: AsyncSession, world: World) -> None:
    ts = await add_timesheet(db_session, world.t1, world.user)
    guard = _guard(db_session, world, world.user)
    with pytest.raises(PermissionDenied):
        await guard.require_resource_access(ResourceType.TIMESHEET, ts.id, Permission.TIMESHEET_DELETE)


# ---------------------------------------------------------------------------
# User and tenant resources
# ---------------------------------------------------------------------------


async def test_manager_can_read_user(db_session: AsyncSession, world: World) -> None:
    guard = _guard(db_session, world, world.manager)
    await guard.require_resource_access(ResourceType.USER, world.user.id, Permission.USER_READ)


async def test_manager_cannot_read_admin(db_session: AsyncSession, world: World) -> None:
    guard = _guard(db_session, world, world.manager)
    with pytest.raises(AccessDenied):
        await guard.require_resource_access(ResourceType.USER, world.admin.id, Permission.USER_READ)


async def test_admin_cannot_reach_other_tenant_user(db_session: AsyncSession, world: World) -> None:
    guard = _guard(db_session, world, world.admin)
    with pytest.raises(AccessDenied):
        await guard.require_resource_access(ResourceType.USER, world.outsider.id, Permission.USER_READ)


async def test_self_access_always_allowed(db_session: AsyncSession, world: World) -> None:
    guard = _guard(db_session, world, world.manager)
    await guard.require_resource_access(ResourceType.USER, world.manager.id, Permission.USER_READ)


async def test_tenant_resource_is_superuser_administration(db_session: AsyncSession, world: World) -> None:
    await _guard(db_session, world, world.superuser).require_resource_access(
        ResourceType.TENANT, world.t2.id, Permission.TENANT_READ
    )
    with pytest.raises(PermissionDenied):
        await _guard(db_session, world, world.admin).require_resource_access(
            ResourceType.TENANT, world.t1.id, Permission.TENANT_READ
        )


async def test_selected_tenant_superuser_matches_tenant_admin(db_session: AsyncSession, world: World) -> None:
    """A superuser acting in T1 passes every check a T1 admin passes."""
    ts = await add_timesheet(db_session, world.t1, world.user)
    for guard in (_guard(db_session, world, world.admin), _guard(db_session, world, world.superuser, world.t1)):
        await guard.require_resource_access(ResourceType.TIMESHEET, ts.id, Permission.TIMESHEET_APPROVE)
        await guard.require_resource_access(ResourceType.USER, world.manager.id, Permission.USER_UPDATE)
