"""Tests for resolving the acting context from a session principal."""

from __future__ import annotations

import uuid
from typing import TYPE_CHECKING

from staffdesk.models.enums import Role
from staffdesk.schemas.auth import SessionPrincipal
from staffdesk.security.context import resolve_acting_context

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

    from tests.factories import World


async def test_no_principal_fails_closed(db_session: AsyncSession) -> None:
    assert await resolve_acting_context(db_session, None) is None


async def test_member_gets_membership_role(db_session: AsyncSession, world: World) -> None:
    principal = SessionPrincipal(user_id=world.manager.id, tenant_id=world.t1.id)
    context = await resolve_acting_context(db_session, principal)
    assert context is not None
    assert context.tenant_id == world.t1.id
    assert context.user_id == world.manager.id
    assert context.role == Role.MANAGER
    assert not context.is_superuser


async def test_role_claim_is_ignored(db_session: AsyncSession, world: World) -> None:
    """The role comes from the membership row, never from the session claim."""
    principal = SessionPrincipal(user_id=world.user.id, tenant_id=world.t1.id, role=Role.TENANT_ADMIN)
    context = await resolve_acting_context(db_session, principal)
    assert context is not None
    assert context.role == Role.USER


async def test_non_member_gets_no_context(db_session: AsyncSession, world: World) -> None:
    principal = SessionPrincipal(user_id=world.outsider.id, tenant_id=world.t1.id)
    assert await resolve_acting_context(db_session, principal) is None


async def test_missing_session_tenant_gets_no_context(db_session: AsyncSession, world: World) -> None:
    principal = SessionPrincipal(user_id=world.user.id)
    assert await resolve_acting_context(db_session, principal) is None


async def test_deactivated_membership_applies_immediately(db_session: AsyncSession, world: World) -> None:
    from staffdesk.security.context import get_membership

    principal = SessionPrincipal(user_id=world.user.id, tenant_id=world.t1.id)
    assert await resolve_acting_context(db_session, principal) is not None

    membership = await get_membership(db_session, world.t1.id, world.user.id)
    assert membership is not None
    membership.is_active = False
    await db_session.commit()

    assert await resolve_acting_context(db_session, principal) is None


async def test_platform_role_on_membership_fails_closed(db_session: AsyncSession, world: World) -> None:
    """SUPERUSER is not a tenant role; a membership row carrying it grants nothing."""
    from staffdesk.security.context import get_membership

    membership = await get_membership(db_session, world.t1.id, world.colleague.id)
    assert membership is not None
    membership.role = Role.SUPERUSER.value
    await db_session.commit()

    principal = SessionPrincipal(user_id=world.colleague.id, tenant_id=world.t1.id)
    assert await resolve_acting_context(db_session, principal) is None


async def test_non_member_selector_is_ignored(db_session: AsyncSession, world: World) -> None:
    """Only superusers may switch tenants; a regular user's selector has no effect."""
    principal = SessionPrincipal(user_id=world.user.id, tenant_id=world.t1.id)
    context = await resolve_acting_context(db_session, principal, world.t2.id)
    assert context is not None
    assert context.tenant_id == world.t1.id


# ---------------------------------------------------------------------------
# Superusers
# ---------------------------------------------------------------------------


async def test_superuser_without_tenant_is_global(db_session: AsyncSession, world: World) -> None:
    principal = SessionPrincipal(user_id=world.superuser.id, is_superuser=True)
    context = await resolve_acting_context(db_session, principal)
    assert context is not None
    assert context.tenant_id is None
    assert context.role == Role.SUPERUSER
    assert context.is_global


async def test_superuser_selector_wins(db_session: AsyncSession, world: World) -> None:
    principal = SessionPrincipal(user_id=world.superuser.id, tenant_id=world.t1.id, is_superuser=True)
    context = await resolve_acting_context(db_session, principal, world.t2.id)
    assert context is not None
    assert context.tenant_id == world.t2.id
    assert not context.is_global


async def test_superuser_falls_back_to_session_tenant(db_session: AsyncSession, world: World) -> None:
    principal = SessionPrincipal(user_id=world.superuser.id, tenant_id=world.t1.id, is_superuser=True)
    context = await resolve_acting_context(db_session, principal)
    assert context is not None
    assert context.tenant_id == world.t1.id


async def test_unbacked_superuser_claim_fails_closed(db_session: AsyncSession, world: World) -> None:
    forged = SessionPrincipal(user_id=world.admin.id, tenant_id=world.t1.id, is_superuser=True)
    assert await resolve_acting_context(db_session, forged) is None

    unknown = SessionPrincipal(user_id=uuid.uuid4(), is_superuser=True)
    assert await resolve_acting_context(db_session, unknown) is None
