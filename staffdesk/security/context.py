"""Resolve the acting context (tenant, user, role) for a request."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from sqlalchemy import select
from sqlmodel import col

from staffdesk.models.enums import Role
from staffdesk.models.tenant import TenantUser, User
from staffdesk.schemas.auth import ActingContext

if TYPE_CHECKING:
    import uuid

    from sqlalchemy.ext.asyncio import AsyncSession

    from staffdesk.schemas.auth import SessionPrincipal

logger = logging.getLogger(__name__)


async def get_membership(session: AsyncSession, tenant_id: uuid.UUID, user_id: uuid.UUID) -> TenantUser | None:
    """Fetch the (tenant, user) membership row, active or not."""
    result = await session.execute(
        select(TenantUser).where(
            col(TenantUser.tenant_id) == tenant_id,
            col(TenantUser.user_id) == user_id,
        )
    )
    return result.scalar_one_or_none()


async def resolve_acting_context(
    session: AsyncSession,
    principal: SessionPrincipal | None,
    selected_tenant_id: uuid.UUID | None = None,
) -> ActingContext | None:
    """Build the ActingContext for ``principal`` or return None to fail closed.

    Superusers may pick a tenant through ``selected_tenant_id``; without one
    they fall back to the session tenant, and without that to the global view.
    Everyone else needs an active membership in the session tenant, re-read on
    every call so that revocations and role changes apply immediately.
    """
    if principal is None:
        return None

    if principal.is_superuser:
        user = await session.get(User, principal.user_id)
        if user is None or not user.is_active or not user.is_superuser:
            logger.warning("Superuser claim for %s not backed by an active superuser account", principal.user_id)
            return None
        return ActingContext(
            tenant_id=selected_tenant_id or principal.tenant_id,
            user_id=principal.user_id,
            role=Role.SUPERUSER,
            is_superuser=True,
        )

    if principal.tenant_id is None:
        return None

    membership = await get_membership(session, principal.tenant_id, principal.user_id)
    if membership is None or not membership.is_active:
        logger.info(
            "No active membership for user %s in tenant %s; refusing context",
            principal.user_id,
            principal.tenant_id,
        )
        return None

    role = Role(membership.role)
    if role == Role.SUPERUSER:
        logger.warning(
            "Membership of user %s in tenant %s carries the platform role %s; refusing context",
            principal.user_id,
            principal.tenant_id,
            role.value,
        )
        return None

    return ActingContext(
        tenant_id=principal.tenant_id,
        user_id=principal.user_id,
        role=role,
        is_superuser=False,
    )
