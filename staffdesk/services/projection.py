"""Pure projections of stored rows into approval queue items."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import TYPE_CHECKING

from staffdesk.models.enums import AuditAction
from staffdesk.schemas.approval import (
    SickLeaveApprovalItem,
    TijdVoorTijdApprovalItem,
    TimesheetApprovalItem,
    VacationApprovalItem,
)

if TYPE_CHECKING:
    from staffdesk.models.audit import AuditLog
    from staffdesk.models.tenant import User
    from staffdesk.models.timesheet import Timesheet
    from staffdesk.schemas.approval import LeaveApprovalItem

UNKNOWN_EMPLOYEE = "Unknown"


def as_utc(value: datetime) -> datetime:
    """Attach UTC to naive timestamps (SQLite drops the offset on read)."""
    return value if value.tzinfo is not None else value.replace(tzinfo=UTC)


def employee_name(user: User | None) -> str:
    if user is None:
        return UNKNOWN_EMPLOYEE
    return user.name or user.email or UNKNOWN_EMPLOYEE


def project_timesheet(timesheet: Timesheet, user: User | None) -> TimesheetApprovalItem:
    start = as_utc(timesheet.start_time)
    end = as_utc(timesheet.end_time)
    worked_minutes = (end - start).total_seconds() / 60 - timesheet.break_minutes
    return TimesheetApprovalItem(
        id=timesheet.id,
        employee_id=timesheet.user_id,
        employee_name=employee_name(user),
        submitted_at=as_utc(timesheet.created_at),
        status=timesheet.status,
        work_date=timesheet.work_date,
        start_time=start,
        end_time=end,
        break_minutes=timesheet.break_minutes,
        hours=round(max(worked_minutes, 0) / 60, 2),
        description=timesheet.description,
    )


def project_leave_entry(entry: AuditLog, user: User | None) -> LeaveApprovalItem:
    """Project a leave or sick-leave audit entry 1:1 into its queue item.

    The item id is the entity id recorded on the entry (``resource_id``),
    which equals the entry id for entries written by this service.
    """
    values = entry.new_values or {}
    common = {
        "id": entry.resource_id or entry.id,
        "employee_id": entry.user_id,
        "employee_name": employee_name(user),
        "submitted_at": as_utc(entry.created_at),
        "status": str(values.get("status", "pending")).lower(),
        "start_date": values.get("startDate"),
        "end_date": values.get("endDate"),
        "total_days": values.get("totalDays"),
    }
    if entry.action == AuditAction.SICK_LEAVE_REQUEST:
        return SickLeaveApprovalItem(
            **common,
            reason=values.get("reason"),
            medical_note=bool(values.get("medicalNote", False)),
            uwv_reported=bool(values.get("uwvReported", False)),
            expected_return_date=values.get("expectedReturnDate"),
        )
    if entry.action == AuditAction.TIJD_VOOR_TIJD_REQUEST:
        return TijdVoorTijdApprovalItem(**common, description=values.get("description"))
    if entry.action == AuditAction.VACATION_REQUEST:
        return VacationApprovalItem(**common, description=values.get("description"))
    raise ValueError(f"Audit action {entry.action} does not store a leave request")
