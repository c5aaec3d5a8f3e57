"""Integration tests for vacation, tijd-voor-tijd and sick-leave requests."""

from __future__ import annotations

from typing import TYPE_CHECKING
from unittest.mock import AsyncMock, patch

import pytest
from sqlalchemy import select
from sqlalchemy.exc import OperationalError

from staffdesk.models import AuditLog
from staffdesk.services.leave import count_days

if TYPE_CHECKING:
    from httpx import AsyncClient
    from sqlalchemy.ext.asyncio import AsyncSession

    from tests.factories import World

VACATIONS_URL = "/vacations"
SICK_LEAVES_URL = "/sick-leaves"


def _vacation(start: str = "2025-01-10", end: str = "2025-01-12", leave_type: str = "vacation") -> dict:
    return {"startDate": start, "endDate": end, "description": "trip", "type": leave_type}


async def _entries(session: AsyncSession) -> list[AuditLog]:
    return list((await session.execute(select(AuditLog))).scalars().all())


# ---------------------------------------------------------------------------
# Vacation
# ---------------------------------------------------------------------------


async def test_vacation_creates_one_audit_entry(
    async_client: AsyncClient, db_session: AsyncSession, world: World
) -> None:
    resp = await async_client.post(VACATIONS_URL, json=_vacation(), headers=world.headers(world.user))
    assert resp.status_code == 201
    data = resp.json()
    assert data["success"] is True
    assert data["request"]["type"] == "vacation"
    assert data["request"]["totalDays"] == 3
    assert data["request"]["status"] == "pending"
    assert data["request"]["employeeName"] == "Uma User"

    entries = await _entries(db_session)
    assert len(entries) == 1
    entry = entries[0]
    assert entry.action == "VACATION_REQUEST"
    assert entry.tenant_id == world.t1.id
    assert entry.user_id == world.user.id
    assert entry.new_values["status"] == "pending"
    assert entry.new_values["totalDays"] == 3
    assert str(entry.id) == data["request"]["id"]


async def test_tijd_voor_tijd_uses_its_own_action(
    async_client: AsyncClient, db_session: AsyncSession, world: World
) -> None:
    resp = await async_client.post(
        VACATIONS_URL, json=_vacation(leave_type="tijd-voor-tijd"), headers=world.headers(world.user)
    )
    assert resp.status_code == 201
    assert resp.json()["request"]["type"] == "tijd-voor-tijd"
    assert [e.action for e in await _entries(db_session)] == ["TIJD_VOOR_TIJD_REQUEST"]


async def test_vacation_end_before_start_rejected(async_client: AsyncClient, world: World) -> None:
    resp = await async_client.post(
        VACATIONS_URL, json=_vacation(start="2025-01-12", end="2025-01-10"), headers=world.headers(world.user)
    )
    assert resp.status_code == 400
    assert resp.json()["error"] == "ValidationFailed"


async def test_vacation_requires_authentication(async_client: AsyncClient, world: World) -> None:
    resp = await async_client.post(VACATIONS_URL, json=_vacation())
    assert resp.status_code == 401


async def test_vacation_without_tenant_rejected(async_client: AsyncClient, world: World) -> None:
    resp = await async_client.post(VACATIONS_URL, json=_vacation(), headers=world.headers(world.superuser))
    assert resp.status_code == 400


async def test_lost_audit_write_fails_the_request(
    async_client: AsyncClient, db_session: AsyncSession, world: World
) -> None:
    """The audit entry is the request itself, so losing it must not look like success."""
    failing = AsyncMock(side_effect=OperationalError("INSERT", {}, Exception("disk full")))
    with patch.object(db_session, "commit", failing):
        resp = await async_client.post(VACATIONS_URL, json=_vacation(), headers=world.headers(world.user))
    assert resp.status_code == 500
    assert resp.json()["error"] == "InternalError"


async def test_list_vacations_narrowed_for_user(async_client: AsyncClient, world: World) -> None:
    await async_client.post(VACATIONS_URL, json=_vacation(), headers=world.headers(world.user))
    await async_client.post(VACATIONS_URL, json=_vacation(), headers=world.headers(world.colleague))
    await async_client.post(VACATIONS_URL, json=_vacation(), headers=world.headers(world.outsider))

    mine = await async_client.get(VACATIONS_URL, headers=world.headers(world.user))
    assert mine.json()["pagination"]["total"] == 1

    tenant = await async_client.get(VACATIONS_URL, headers=world.headers(world.manager))
    assert tenant.json()["pagination"]["total"] == 2


async def test_list_vacations_type_filter(async_client: AsyncClient, world: World) -> None:
    headers = world.headers(world.user)
    await async_client.post(VACATIONS_URL, json=_vacation(), headers=headers)
    await async_client.post(VACATIONS_URL, json=_vacation(leave_type="tijd-voor-tijd"), headers=headers)

    resp = await async_client.get(VACATIONS_URL, params={"type": "tijd-voor-tijd"}, headers=headers)
    items = resp.json()["items"]
    assert [i["type"] for i in items] == ["tijd-voor-tijd"]


# ---------------------------------------------------------------------------
# Sick leave
# ---------------------------------------------------------------------------


async def test_single_day_sick_leave(async_client: AsyncClient, db_session: AsyncSession, world: World) -> None:
    resp = await async_client.post(
        SICK_LEAVES_URL,
        json={"startDate": "2025-02-03", "reason": "flu", "medicalNote": True},
        headers=world.headers(world.user),
    )
    assert resp.status_code == 201
    data = resp.json()
    assert data["uwvReportingRequired"] is False
    assert data["request"]["type"] == "sick-leave"
    assert data["request"]["endDate"] == "2025-02-03"
    assert data["request"]["totalDays"] == 1
    assert data["request"]["medicalNote"] is True

    (entry,) = await _entries(db_session)
    assert entry.action == "SICK_LEAVE_REQUEST"
    assert entry.new_values["status"] == "pending"


async def test_long_sick_leave_requires_uwv_report(async_client: AsyncClient, world: World) -> None:
    resp = await async_client.post(
        SICK_LEAVES_URL,
        json={"startDate": "2025-02-03", "endDate": "2025-02-07", "reason": "surgery"},
        headers=world.headers(world.user),
    )
    data = resp.json()
    assert data["request"]["totalDays"] == 5
    assert data["uwvReportingRequired"] is True


async def test_list_sick_leaves_status_filter(async_client: AsyncClient, world: World) -> None:
    headers = world.headers(world.user)
    await async_client.post(SICK_LEAVES_URL, json={"startDate": "2025-02-03"}, headers=headers)

    pending = await async_client.get(SICK_LEAVES_URL, params={"status": "PENDING"}, headers=headers)
    approved = await async_client.get(SICK_LEAVES_URL, params={"status": "approved"}, headers=headers)
    assert pending.json()["pagination"]["total"] == 1
    assert approved.json()["pagination"]["total"] == 0


@pytest.mark.parametrize(
    ("start", "end", "expected"),
    [("2025-01-10", "2025-01-10", 1), ("2025-01-10", "2025-01-12", 3), ("2024-12-30", "2025-01-02", 4)],
)
def test_count_days_is_inclusive(start: str, end: str, expected: int) -> None:
    from datetime import date

    assert count_days(date.fromisoformat(start), date.fromisoformat(end)) == expected
