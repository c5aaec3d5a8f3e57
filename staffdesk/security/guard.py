"""Authorization decisions for an acting context.

Three escalating entry points: tenant match, capability, and resource-level
checks (tenant, ownership and role hierarchy). Handlers call one of them
before touching storage.
"""

from __future__ import annotations

import uuid
from typing import TYPE_CHECKING

from sqlalchemy import select
from sqlmodel import col

from staffdesk.exceptions import AccessDenied, AuthenticationRequired, NotFound, PermissionDenied
from staffdesk.models.enums import ResourceType, Role
from staffdesk.models.timesheet import Timesheet
from staffdesk.security.context import get_membership
from staffdesk.security.permissions import has_permission, role_dominates

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

    from staffdesk.schemas.auth import ActingContext
    from staffdesk.security.permissions import Permission


class AccessGuard:
    """Access checks bound to one request's context."""

    def __init__(self, session: AsyncSession, context: ActingContext | None) -> None:
        self._session = session
        self._context = context

    @property
    def context(self) -> ActingContext | None:
        return self._context

    def require_context(self) -> ActingContext:
        if self._context is None:
            raise AuthenticationRequired()
        return self._context

    def require_tenant_access(self, tenant_id: uuid.UUID) -> ActingContext:
        """Superusers pass for any tenant (and are re-scoped to it); others must match."""
        context = self.require_context()
        if context.is_superuser:
            return context.model_copy(update={"tenant_id": tenant_id})
        if context.tenant_id != tenant_id:
            raise AccessDenied("Access denied: tenant mismatch")
        return context

    def require_permission(self, permission: Permission) -> ActingContext:
        context = self.require_context()
        if context.is_superuser:
            return context
        if not has_permission(context.role, permission):
            raise PermissionDenied(f"Permission denied: {permission.value}")
        return context

    async def require_resource_access(
        self,
        resource_type: ResourceType,
        resource_id: uuid.UUID,
        permission: Permission,
    ) -> ActingContext:
        context = self.require_permission(permission)
        if context.is_superuser:
            return context

        if resource_type == ResourceType.TIMESHEET:
            await self._require_timesheet_access(context, resource_id)
        elif resource_type == ResourceType.USER:
            await self._require_user_access(context, resource_id)
        elif resource_type == ResourceType.TENANT:
            self.require_tenant_access(resource_id)
        else:
            raise ValueError(f"Unknown resource type: {resource_type}")
        return context

    async def _require_timesheet_access(self, context: ActingContext, timesheet_id: uuid.UUID) -> None:
        result = await self._session.execute(
            select(col(Timesheet.tenant_id), col(Timesheet.user_id)).where(col(Timesheet.id) == timesheet_id)
        )
        row = result.one_or_none()
        if row is None:
            raise NotFound("Timesheet not found")
        tenant_id, owner_id = row
        if tenant_id != context.tenant_id:
            raise AccessDenied("Access denied to this timesheet")
        # Approvers are exempt from ownership, never from the tenant check.
        if context.role == Role.USER and owner_id != context.user_id:
            raise AccessDenied("Access denied to this timesheet")

    async def _require_user_access(self, context: ActingContext, user_id: uuid.UUID) -> None:
        if user_id == context.user_id:
            return
        if context.tenant_id is None:
            raise AccessDenied("Access denied to this user")
        membership = await get_membership(self._session, context.tenant_id, user_id)
        if membership is None or not membership.is_active:
            raise AccessDenied("User not found in this tenant")
        if not role_dominates(context.role, Role(membership.role)):
            raise AccessDenied("Access denied to this user")
