# ruff: noqa: TC003
from __future__ import annotations

import uuid
from datetime import UTC, date, datetime, time, timedelta
from typing import TYPE_CHECKING

from sqlmodel import col

from staffdesk.exceptions import AccessDenied, NotFound, ValidationFailed
from staffdesk.models.enums import AuditAction, AuditResource, ResourceType, Role, TimesheetStatus
from staffdesk.models.timesheet import Timesheet
from staffdesk.schemas.base import Pagination
from staffdesk.schemas.timesheet import DeleteResponse, TimesheetListResponse, TimesheetResponse
from staffdesk.security.permissions import Permission
from staffdesk.services.audit import model_to_audit_dict

if TYPE_CHECKING:
    from staffdesk.schemas.timesheet import (
        TimesheetClockOutPayload,
        TimesheetCreatePayload,
        TimesheetReplacePayload,
    )
    from staffdesk.security.guard import AccessGuard
    from staffdesk.services.audit import AuditStore
    from staffdesk.services.tenant_db import TenantScopedDB

_AUDIT_FIELDS = ("work_date", "start_time", "end_time", "break_minutes", "description", "status")


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _build_timesheet_response(timesheet: Timesheet) -> TimesheetResponse:
    """Map a timesheet model to its response schema."""
    return TimesheetResponse(
        id=timesheet.id,
        tenant_id=timesheet.tenant_id,
        user_id=timesheet.user_id,
        work_date=timesheet.work_date,
        start_time=timesheet.start_time,
        end_time=timesheet.end_time,
        status=timesheet.status,
        break_minutes=timesheet.break_minutes,
        description=timesheet.description,
        created_at=timesheet.created_at,
        updated_at=timesheet.updated_at,
    )


def _at(day: date, hhmm: str) -> datetime:
    hours, minutes = (int(part) for part in hhmm.split(":"))
    if hours > 23 or minutes > 59:
        raise ValidationFailed(f"Invalid time of day: {hhmm}")
    return datetime.combine(day, time(hours, minutes), tzinfo=UTC)


def shift_bounds(day: date, start: str, end: str) -> tuple[datetime, datetime]:
    """Turn HH:MM strings into datetimes; an end at or before the start is the next day."""
    start_at = _at(day, start)
    end_at = _at(day, end)
    if end_at <= start_at:
        end_at += timedelta(days=1)
    return start_at, end_at


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


async def list_timesheets(
    guard: AccessGuard,
    db: TenantScopedDB,
    *,
    status_filter: str | None = None,
    user_id: uuid.UUID | None = None,
    page: int = 1,
    limit: int = 10,
) -> TimesheetListResponse:
    """List timesheets in the tenant, newest work date first.

    USER-role callers only ever get their own rows; ``user_id`` is honoured
    for approvers.
    """
    context = guard.require_permission(Permission.TIMESHEET_READ)
    filters = []
    if status_filter is not None:
        filters.append(col(Timesheet.status) == status_filter.upper())
    if user_id is not None and context.role != Role.USER:
        filters.append(col(Timesheet.user_id) == user_id)

    total = await db.timesheets.count(*filters)
    rows = await db.timesheets.find_many(
        *filters,
        order_by=(col(Timesheet.work_date).desc(), col(Timesheet.id).desc()),
        offset=(page - 1) * limit,
        limit=limit,
    )
    return TimesheetListResponse(
        items=[_build_timesheet_response(t) for t in rows],
        pagination=Pagination.build(page, limit, total),
    )


async def get_timesheet(guard: AccessGuard, db: TenantScopedDB, timesheet_id: uuid.UUID) -> TimesheetResponse:
    await guard.require_resource_access(ResourceType.TIMESHEET, timesheet_id, Permission.TIMESHEET_READ)
    timesheet = await db.timesheets.find_one(timesheet_id)
    if timesheet is None:
        raise NotFound("Timesheet not found")
    return _build_timesheet_response(timesheet)


async def create_timesheet(
    guard: AccessGuard,
    db: TenantScopedDB,
    audit: AuditStore,
    payload: TimesheetCreatePayload,
) -> TimesheetResponse:
    context = guard.require_permission(Permission.TIMESHEET_CREATE)
    if context.tenant_id is None:
        raise ValidationFailed("No tenant context")
    if payload.user_id is not None and payload.user_id != context.user_id and context.role != Role.USER:
        await guard.require_resource_access(ResourceType.USER, payload.user_id, Permission.TIMESHEET_CREATE)

    start_at, end_at = shift_bounds(payload.work_date, payload.start_time, payload.end_time)
    timesheet = await db.timesheets.create(
        user_id=payload.user_id,
        work_date=payload.work_date,
        start_time=start_at,
        end_time=end_at,
        break_minutes=payload.break_minutes,
        description=payload.description,
        status=TimesheetStatus.PENDING.value,
    )
    response = _build_timesheet_response(timesheet)
    await audit.append(
        AuditAction.TIMESHEET_CREATE,
        AuditResource.TIMESHEET,
        timesheet.id,
        None,
        model_to_audit_dict(timesheet, _AUDIT_FIELDS),
    )
    return response


async def clock_out(
    guard: AccessGuard,
    db: TenantScopedDB,
    audit: AuditStore,
    timesheet_id: uuid.UUID,
    payload: TimesheetClockOutPayload,
) -> TimesheetResponse:
    """Owner-only partial update of the clock-out fields."""
    context = await guard.require_resource_access(ResourceType.TIMESHEET, timesheet_id, Permission.TIMESHEET_UPDATE)
    timesheet = await db.timesheets.find_one(timesheet_id)
    if timesheet is None:
        raise NotFound("Timesheet not found")
    if timesheet.user_id != context.user_id:
        raise AccessDenied("Only the owner can clock out a timesheet")
    if timesheet.status != TimesheetStatus.PENDING.value:
        raise ValidationFailed("Only pending timesheets can be changed")

    before = model_to_audit_dict(timesheet, _AUDIT_FIELDS)
    changes: dict[str, object] = {}
    if payload.end_time is not None:
        _, changes["end_time"] = shift_bounds(
            timesheet.work_date, timesheet.start_time.strftime("%H:%M"), payload.end_time
        )
    if payload.description is not None:
        changes["description"] = payload.description
    if payload.break_minutes is not None:
        changes["break_minutes"] = payload.break_minutes
    timesheet.touch()
    changes["updated_at"] = timesheet.updated_at

    updated = await db.timesheets.update(timesheet_id, **changes)
    response = _build_timesheet_response(updated)
    await audit.append(
        AuditAction.TIMESHEET_UPDATE,
        AuditResource.TIMESHEET,
        updated.id,
        before,
        model_to_audit_dict(updated, _AUDIT_FIELDS),
    )
    return response


async def replace_timesheet(
    guard: AccessGuard,
    db: TenantScopedDB,
    audit: AuditStore,
    payload: TimesheetReplacePayload,
) -> TimesheetResponse:
    """Full replacement of a pending timesheet's hours; owner and status are kept."""
    await guard.require_resource_access(ResourceType.TIMESHEET, payload.id, Permission.TIMESHEET_UPDATE)
    timesheet = await db.timesheets.find_one(payload.id)
    if timesheet is None:
        raise NotFound("Timesheet not found")
    if timesheet.status != TimesheetStatus.PENDING.value:
        raise ValidationFailed("Only pending timesheets can be changed")

    before = model_to_audit_dict(timesheet, _AUDIT_FIELDS)
    start_at, end_at = shift_bounds(payload.work_date, payload.start_time, payload.end_time)
    timesheet.touch()
    updated = await db.timesheets.update(
        payload.id,
        work_date=payload.work_date,
        start_time=start_at,
        end_time=end_at,
        break_minutes=payload.break_minutes,
        description=payload.description,
        updated_at=timesheet.updated_at,
    )
    response = _build_timesheet_response(updated)
    await audit.append(
        AuditAction.TIMESHEET_UPDATE,
        AuditResource.TIMESHEET,
        updated.id,
        before,
        model_to_audit_dict(updated, _AUDIT_FIELDS),
    )
    return response


async def delete_timesheet(
    guard: AccessGuard,
    db: TenantScopedDB,
    audit: AuditStore,
    timesheet_id: uuid.UUID,
) -> DeleteResponse:
    """Delete a timesheet while it is still pending.

    Owners may delete their own; approvers any in the tenant.
    """
    await guard.require_resource_access(ResourceType.TIMESHEET, timesheet_id, Permission.TIMESHEET_READ)
    timesheet = await db.timesheets.find_one(timesheet_id)
    if timesheet is None:
        raise NotFound("Timesheet not found")
    if timesheet.status != TimesheetStatus.PENDING.value:
        raise ValidationFailed("Only pending timesheets can be deleted")

    before = model_to_audit_dict(timesheet, _AUDIT_FIELDS)
    await db.timesheets.delete(timesheet_id)
    await audit.append(AuditAction.TIMESHEET_DELETE, AuditResource.TIMESHEET, timesheet_id, before, None)
    return DeleteResponse(message="Timesheet deleted")
