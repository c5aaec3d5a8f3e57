from __future__ import annotations

from typing import TYPE_CHECKING

from sqlmodel import col

from staffdesk.exceptions import NotFound
from staffdesk.models.enums import ResourceType
from staffdesk.models.tenant import Tenant
from staffdesk.schemas.users import TenantListResponse, TenantResponse
from staffdesk.security.permissions import Permission

if TYPE_CHECKING:
    import uuid

    from staffdesk.security.guard import AccessGuard
    from staffdesk.services.tenant_db import TenantScopedDB


def _build_tenant_response(tenant: Tenant) -> TenantResponse:
    return TenantResponse(id=tenant.id, name=tenant.name, slug=tenant.slug, is_active=tenant.is_active)


async def list_tenants(guard: AccessGuard, db: TenantScopedDB) -> TenantListResponse:
    """All tenants for the global superuser view; only the selected tenant otherwise."""
    guard.require_permission(Permission.TENANT_LIST)
    tenants = await db.tenants.find_many(order_by=(col(Tenant.name).asc(),))
    return TenantListResponse(items=[_build_tenant_response(t) for t in tenants], total=len(tenants))


async def get_tenant(guard: AccessGuard, db: TenantScopedDB, tenant_id: uuid.UUID) -> TenantResponse:
    await guard.require_resource_access(ResourceType.TENANT, tenant_id, Permission.TENANT_READ)
    tenant = await db.tenants.find_one(tenant_id)
    if tenant is None:
        raise NotFound("Tenant not found")
    return _build_tenant_response(tenant)
