# ruff: noqa: TC003
from __future__ import annotations

import uuid

from fastapi import APIRouter

from staffdesk.api.deps import AuditDep, GuardDep, LimitDep, PageDep, TenantDBDep
from staffdesk.schemas.users import (
    MemberListResponse,
    MemberResponse,
    RoleUpdatePayload,
    TenantListResponse,
    TenantResponse,
)
from staffdesk.services import tenants as tenant_service
from staffdesk.services import users as user_service

users_router = APIRouter(prefix="/users", tags=["users"])
tenants_router = APIRouter(prefix="/tenants", tags=["tenants"])


@users_router.get("", response_model=MemberListResponse)
async def list_members(guard: GuardDep, db: TenantDBDep, page: PageDep, limit: LimitDep) -> MemberListResponse:
    """List the active members of the current tenant."""
    return await user_service.list_members(guard, db, page=page, limit=limit)


@users_router.get("/{user_id}", response_model=MemberResponse)
async def get_member(user_id: uuid.UUID, guard: GuardDep, db: TenantDBDep) -> MemberResponse:
    return await user_service.get_member(guard, db, user_id)


@users_router.patch("/{user_id}/role", response_model=MemberResponse)
async def change_role(
    user_id: uuid.UUID,
    payload: RoleUpdatePayload,
    guard: GuardDep,
    db: TenantDBDep,
    audit: AuditDep,
) -> MemberResponse:
    """Change a member's tenant role."""
    return await user_service.change_role(guard, db, audit, user_id, payload)


@tenants_router.get("", response_model=TenantListResponse)
async def list_tenants(guard: GuardDep, db: TenantDBDep) -> TenantListResponse:
    """List tenants (superuser administration)."""
    return await tenant_service.list_tenants(guard, db)


@tenants_router.get("/{tenant_id}", response_model=TenantResponse)
async def get_tenant(tenant_id: uuid.UUID, guard: GuardDep, db: TenantDBDep) -> TenantResponse:
    return await tenant_service.get_tenant(guard, db, tenant_id)
