"""Superuser tenant administration and tenant selection."""

from __future__ import annotations

from typing import TYPE_CHECKING

from tests.factories import add_timesheet

if TYPE_CHECKING:
    from httpx import AsyncClient
    from sqlalchemy.ext.asyncio import AsyncSession

    from tests.factories import World

TENANTS_URL = "/tenants"


async def test_global_superuser_lists_all_tenants(async_client: AsyncClient, world: World) -> None:
    resp = await async_client.get(TENANTS_URL, headers=world.headers(world.superuser))
    assert resp.status_code == 200
    data = resp.json()
    assert data["total"] == 2
    assert [t["slug"] for t in data["items"]] == ["acme", "globex"]


async def test_selected_tenant_narrows_superuser(async_client: AsyncClient, world: World) -> None:
    resp = await async_client.get(TENANTS_URL, headers=world.headers(world.superuser, select=world.t2))
    assert [t["slug"] for t in resp.json()["items"]] == ["globex"]


async def test_tenant_admin_cannot_list_tenants(async_client: AsyncClient, world: World) -> None:
    resp = await async_client.get(TENANTS_URL, headers=world.headers(world.admin))
    assert resp.status_code == 403


async def test_superuser_reads_single_tenant(async_client: AsyncClient, world: World) -> None:
    resp = await async_client.get(f"{TENANTS_URL}/{world.t2.id}", headers=world.headers(world.superuser))
    assert resp.status_code == 200
    assert resp.json()["name"] == "Globex"
    assert resp.json()["isActive"] is True


async def test_forged_superuser_header_fails_closed(async_client: AsyncClient, world: World) -> None:
    headers = {"X-User-Id": str(world.admin.id), "X-Superuser": "true"}
    resp = await async_client.get(TENANTS_URL, headers=headers)
    assert resp.status_code == 401


async def test_superuser_in_tenant_behaves_like_tenant_admin(
    async_client: AsyncClient, db_session: AsyncSession, world: World
) -> None:
    """With a selected tenant, a superuser gets the same resource answers as that tenant's admin."""
    own = await add_timesheet(db_session, world.t1, world.user)
    foreign = await add_timesheet(db_session, world.t2, world.outsider)
    su_headers = world.headers(world.superuser, select=world.t1)
    admin_headers = world.headers(world.admin)

    for path in (f"/timesheets/{own.id}", f"/users/{world.manager.id}", "/timesheets", "/approvals"):
        su = await async_client.get(path, headers=su_headers)
        admin = await async_client.get(path, headers=admin_headers)
        assert su.status_code == admin.status_code == 200
        if "items" in admin.json():
            assert su.json()["items"] == admin.json()["items"]

    # Rows of another tenant stay out of reach while T1 is selected.
    su = await async_client.get(f"/timesheets/{foreign.id}", headers=su_headers)
    admin = await async_client.get(f"/timesheets/{foreign.id}", headers=admin_headers)
    assert admin.status_code == 403
    assert su.status_code == 403
