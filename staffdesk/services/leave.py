"""Vacation, tijd-voor-tijd and sick-leave requests.

These requests are virtual entities: each one is a single audit entry whose
``new_values`` hold the request, including ``status``. There is no update
path; approving or rejecting them is not implemented here.
"""

from __future__ import annotations

import uuid
from typing import TYPE_CHECKING, Any

from staffdesk.exceptions import InternalError, ValidationFailed
from staffdesk.models.enums import (
    SICK_LEAVE_ACTIONS,
    VACATION_ACTIONS,
    AuditAction,
    AuditResource,
    LeaveStatus,
    LeaveType,
    Role,
)
from staffdesk.schemas.base import Pagination
from staffdesk.schemas.leave import (
    SickLeaveCreateResponse,
    SickLeaveListResponse,
    VacationCreateResponse,
    VacationListResponse,
)
from staffdesk.services.audit import to_json_value
from staffdesk.services.projection import project_leave_entry
from staffdesk.services.users import load_users

if TYPE_CHECKING:
    from datetime import date

    from staffdesk.models.audit import AuditLog
    from staffdesk.schemas.auth import ActingContext
    from staffdesk.schemas.leave import SickLeaveCreatePayload, VacationCreatePayload
    from staffdesk.security.guard import AccessGuard
    from staffdesk.services.audit import AuditStore
    from staffdesk.services.tenant_db import TenantScopedDB

# Sick leave longer than this many days has to be reported to the UWV.
UWV_REPORTING_THRESHOLD_DAYS = 4

_LEAVE_ACTION_BY_TYPE: dict[LeaveType, AuditAction] = {
    LeaveType.VACATION: AuditAction.VACATION_REQUEST,
    LeaveType.TIJD_VOOR_TIJD: AuditAction.TIJD_VOOR_TIJD_REQUEST,
}


def count_days(start: date, end: date) -> int:
    """Calendar days covered by ``start``..``end``, both inclusive."""
    return (end - start).days + 1


def _require_tenant(context: ActingContext) -> None:
    if context.tenant_id is None:
        raise ValidationFailed("No tenant context")


def _owner_filter(context: ActingContext) -> uuid.UUID | None:
    return context.user_id if context.role == Role.USER else None


async def _store(audit: AuditStore, action: AuditAction, values: dict[str, Any]) -> AuditLog:
    entity_id = uuid.uuid4()
    entry = await audit.append(action, AuditResource.LEAVE_REQUEST, entity_id, None, values, entry_id=entity_id)
    if entry is None:
        # The entry is the request itself, so a lost write means nothing was stored.
        raise InternalError("Could not store the request")
    return entry


# ---------------------------------------------------------------------------
# Vacation / tijd-voor-tijd
# ---------------------------------------------------------------------------


async def create_vacation(
    guard: AccessGuard,
    db: TenantScopedDB,
    audit: AuditStore,
    payload: VacationCreatePayload,
) -> VacationCreateResponse:
    context = guard.require_context()
    _require_tenant(context)

    values = {
        "type": payload.type.value,
        "startDate": to_json_value(payload.start_date),
        "endDate": to_json_value(payload.end_date),
        "description": payload.description,
        "totalDays": count_days(payload.start_date, payload.end_date),
        "status": LeaveStatus.PENDING.value,
    }
    entry = await _store(audit, _LEAVE_ACTION_BY_TYPE[payload.type], values)
    users = await load_users(db, [entry.user_id])
    item = project_leave_entry(entry, users.get(entry.user_id))
    return VacationCreateResponse(request=item)  # type: ignore[arg-type]


async def list_vacations(
    guard: AccessGuard,
    db: TenantScopedDB,
    audit: AuditStore,
    *,
    status_filter: str | None = None,
    leave_type: LeaveType | None = None,
    page: int = 1,
    limit: int = 10,
) -> VacationListResponse:
    context = guard.require_context()
    actions = (_LEAVE_ACTION_BY_TYPE[leave_type],) if leave_type is not None else VACATION_ACTIONS
    entries = await audit.find_entries(actions, status=status_filter, user_id=_owner_filter(context))
    window = entries[(page - 1) * limit : page * limit]
    users = await load_users(db, [e.user_id for e in window])
    return VacationListResponse(
        items=[project_leave_entry(e, users.get(e.user_id)) for e in window],  # type: ignore[misc]
        pagination=Pagination.build(page, limit, len(entries)),
    )


# ---------------------------------------------------------------------------
# Sick leave
# ---------------------------------------------------------------------------


async def create_sick_leave(
    guard: AccessGuard,
    db: TenantScopedDB,
    audit: AuditStore,
    payload: SickLeaveCreatePayload,
) -> SickLeaveCreateResponse:
    context = guard.require_context()
    _require_tenant(context)

    end_date = payload.end_date or payload.start_date
    total_days = count_days(payload.start_date, end_date)
    values = {
        "startDate": to_json_value(payload.start_date),
        "endDate": to_json_value(end_date),
        "reason": payload.reason,
        "medicalNote": payload.medical_note,
        "uwvReported": payload.uwv_reported,
        "expectedReturnDate": to_json_value(payload.expected_return_date) if payload.expected_return_date else None,
        "totalDays": total_days,
        "status": LeaveStatus.PENDING.value,
    }
    entry = await _store(audit, AuditAction.SICK_LEAVE_REQUEST, values)
    users = await load_users(db, [entry.user_id])
    return SickLeaveCreateResponse(
        request=project_leave_entry(entry, users.get(entry.user_id)),  # type: ignore[arg-type]
        uwv_reporting_required=total_days > UWV_REPORTING_THRESHOLD_DAYS,
    )


async def list_sick_leaves(
    guard: AccessGuard,
    db: TenantScopedDB,
    audit: AuditStore,
    *,
    status_filter: str | None = None,
    page: int = 1,
    limit: int = 10,
) -> SickLeaveListResponse:
    context = guard.require_context()
    entries = await audit.find_entries(SICK_LEAVE_ACTIONS, status=status_filter, user_id=_owner_filter(context))
    window = entries[(page - 1) * limit : page * limit]
    users = await load_users(db, [e.user_id for e in window])
    return SickLeaveListResponse(
        items=[project_leave_entry(e, users.get(e.user_id)) for e in window],  # type: ignore[misc]
        pagination=Pagination.build(page, limit, len(entries)),
    )
