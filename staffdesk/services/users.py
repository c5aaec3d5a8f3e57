"""Tenant members: lookups, listing and role changes."""

from __future__ import annotations

import uuid
from typing import TYPE_CHECKING

from sqlmodel import col

from staffdesk.exceptions import AccessDenied, NotFound, ValidationFailed
from staffdesk.models.enums import AuditAction, AuditResource, ResourceType, Role
from staffdesk.models.tenant import TenantUser, User
from staffdesk.schemas.base import Pagination
from staffdesk.schemas.users import MemberListResponse, MemberResponse
from staffdesk.security.permissions import Permission, can_manage_role

if TYPE_CHECKING:
    from collections.abc import Iterable

    from staffdesk.schemas.users import RoleUpdatePayload
    from staffdesk.security.guard import AccessGuard
    from staffdesk.services.audit import AuditStore
    from staffdesk.services.tenant_db import TenantScopedDB


async def load_users(db: TenantScopedDB, user_ids: Iterable[uuid.UUID]) -> dict[uuid.UUID, User]:
    """Fetch the given users visible in the current tenant, keyed by id."""
    wanted = set(user_ids)
    if not wanted:
        return {}
    users = await db.users.find_many(col(User.id).in_(wanted))
    return {u.id: u for u in users}


async def _memberships_by_user(db: TenantScopedDB, user_ids: Iterable[uuid.UUID]) -> dict[uuid.UUID, TenantUser]:
    rows = await db.memberships.find_many(col(TenantUser.user_id).in_(set(user_ids)))
    return {m.user_id: m for m in rows}


def _build_member_response(user: User, membership: TenantUser | None) -> MemberResponse:
    return MemberResponse(
        id=user.id,
        email=user.email,
        name=user.name,
        role=Role(membership.role) if membership is not None else None,
        is_active=user.is_active and (membership is None or membership.is_active),
    )


async def list_members(guard: AccessGuard, db: TenantScopedDB, *, page: int = 1, limit: int = 10) -> MemberListResponse:
    guard.require_permission(Permission.USER_LIST)
    total = await db.users.count()
    users = await db.users.find_many(
        order_by=(col(User.email).asc(),),
        offset=(page - 1) * limit,
        limit=limit,
    )
    memberships = await _memberships_by_user(db, [u.id for u in users])
    return MemberListResponse(
        items=[_build_member_response(u, memberships.get(u.id)) for u in users],
        pagination=Pagination.build(page, limit, total),
    )


async def get_member(guard: AccessGuard, db: TenantScopedDB, user_id: uuid.UUID) -> MemberResponse:
    """Read a member; anyone may read themselves, others need a dominating role."""
    context = guard.require_context()
    if user_id != context.user_id:
        await guard.require_resource_access(ResourceType.USER, user_id, Permission.USER_READ)
    user = await db.users.find_one(user_id)
    if user is None:
        raise NotFound("User not found")
    memberships = await _memberships_by_user(db, [user.id])
    return _build_member_response(user, memberships.get(user.id))


async def change_role(
    guard: AccessGuard,
    db: TenantScopedDB,
    audit: AuditStore,
    user_id: uuid.UUID,
    payload: RoleUpdatePayload,
) -> MemberResponse:
    context = await guard.require_resource_access(ResourceType.USER, user_id, Permission.USER_UPDATE)
    if context.tenant_id is None:
        raise ValidationFailed("No tenant context")
    if payload.role == Role.SUPERUSER:
        raise ValidationFailed("SUPERUSER is not a tenant role")
    if user_id == context.user_id and not context.is_superuser:
        raise AccessDenied("Cannot change your own role")
    if not can_manage_role(context.role, payload.role):
        raise AccessDenied(f"Role {context.role.value} cannot assign {payload.role.value}")

    memberships = await _memberships_by_user(db, [user_id])
    membership = memberships.get(user_id)
    if membership is None:
        raise NotFound("User not found in this tenant")

    user = await db.users.find_one(user_id)
    if user is None:
        raise NotFound("User not found")

    old_role = membership.role
    updated = await db.memberships.update(membership.id, role=payload.role.value)
    response = _build_member_response(user, updated)
    await audit.append(
        AuditAction.USER_ROLE_UPDATE,
        AuditResource.TENANT_USER,
        updated.id,
        {"role": old_role},
        {"role": updated.role},
    )
    return response
