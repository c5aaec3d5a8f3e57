# ruff: noqa: B008, TC003
from __future__ import annotations

import uuid

from fastapi import APIRouter, Query, status

from staffdesk.api.deps import AuditDep, GuardDep, LimitDep, PageDep, TenantDBDep
from staffdesk.schemas.timesheet import (
    DeleteResponse,
    TimesheetClockOutPayload,
    TimesheetCreatePayload,
    TimesheetListResponse,
    TimesheetReplacePayload,
    TimesheetResponse,
)
from staffdesk.services import timesheet as timesheet_service

timesheets_router = APIRouter(prefix="/timesheets", tags=["timesheets"])


@timesheets_router.get("", response_model=TimesheetListResponse)
async def list_timesheets(
    guard: GuardDep,
    db: TenantDBDep,
    page: PageDep,
    limit: LimitDep,
    status_filter: str | None = Query(default=None, alias="status"),
    user_id: uuid.UUID | None = Query(default=None, alias="userId"),
) -> TimesheetListResponse:
    """List timesheets in the current tenant."""
    return await timesheet_service.list_timesheets(
        guard, db, status_filter=status_filter, user_id=user_id, page=page, limit=limit
    )


@timesheets_router.post("", response_model=TimesheetResponse, status_code=status.HTTP_201_CREATED)
async def create_timesheet(
    payload: TimesheetCreatePayload,
    guard: GuardDep,
    db: TenantDBDep,
    audit: AuditDep,
) -> TimesheetResponse:
    return await timesheet_service.create_timesheet(guard, db, audit, payload)


@timesheets_router.put("", response_model=TimesheetResponse)
async def replace_timesheet(
    payload: TimesheetReplacePayload,
    guard: GuardDep,
    db: TenantDBDep,
    audit: AuditDep,
) -> TimesheetResponse:
    """Replace the hours of a pending timesheet."""
    return await timesheet_service.replace_timesheet(guard, db, audit, payload)


@timesheets_router.get("/{timesheet_id}", response_model=TimesheetResponse)
async def get_timesheet(timesheet_id: uuid.UUID, guard: GuardDep, db: TenantDBDep) -> TimesheetResponse:
    return await timesheet_service.get_timesheet(guard, db, timesheet_id)


@timesheets_router.patch("/{timesheet_id}", response_model=TimesheetResponse)
async def clock_out(
    timesheet_id: uuid.UUID,
    payload: TimesheetClockOutPayload,
    guard: GuardDep,
    db: TenantDBDep,
    audit: AuditDep,
) -> TimesheetResponse:
    """Clock out of an open timesheet (owner only)."""
    return await timesheet_service.clock_out(guard, db, audit, timesheet_id, payload)


@timesheets_router.delete("/{timesheet_id}", response_model=DeleteResponse)
async def delete_timesheet(
    timesheet_id: uuid.UUID,
    guard: GuardDep,
    db: TenantDBDep,
    audit: AuditDep,
) -> DeleteResponse:
    """Delete a pending timesheet."""
    return await timesheet_service.delete_timesheet(guard, db, audit, timesheet_id)
