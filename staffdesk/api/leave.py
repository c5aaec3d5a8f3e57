# ruff: noqa: B008
from __future__ import annotations

from fastapi import APIRouter, Query, status

from staffdesk.api.deps import AuditDep, GuardDep, LimitDep, PageDep, TenantDBDep
from staffdesk.models.enums import LeaveType
from staffdesk.schemas.leave import (
    SickLeaveCreatePayload,
    SickLeaveCreateResponse,
    SickLeaveListResponse,
    VacationCreatePayload,
    VacationCreateResponse,
    VacationListResponse,
)
from staffdesk.services import leave as leave_service

vacations_router = APIRouter(prefix="/vacations", tags=["leave"])
sick_leaves_router = APIRouter(prefix="/sick-leaves", tags=["leave"])


@vacations_router.post("", response_model=VacationCreateResponse, status_code=status.HTTP_201_CREATED)
async def create_vacation(
    payload: VacationCreatePayload,
    guard: GuardDep,
    db: TenantDBDep,
    audit: AuditDep,
) -> VacationCreateResponse:
    """Request vacation or tijd-voor-tijd leave."""
    return await leave_service.create_vacation(guard, db, audit, payload)


@vacations_router.get("", response_model=VacationListResponse)
async def list_vacations(
    guard: GuardDep,
    db: TenantDBDep,
    audit: AuditDep,
    page: PageDep,
    limit: LimitDep,
    status_filter: str | None = Query(default=None, alias="status"),
    leave_type: LeaveType | None = Query(default=None, alias="type"),
) -> VacationListResponse:
    """List leave requests; USER-role callers only see their own."""
    return await leave_service.list_vacations(
        guard, db, audit, status_filter=status_filter, leave_type=leave_type, page=page, limit=limit
    )


@sick_leaves_router.post("", response_model=SickLeaveCreateResponse, status_code=status.HTTP_201_CREATED)
async def create_sick_leave(
    payload: SickLeaveCreatePayload,
    guard: GuardDep,
    db: TenantDBDep,
    audit: AuditDep,
) -> SickLeaveCreateResponse:
    """Report sick leave."""
    return await leave_service.create_sick_leave(guard, db, audit, payload)


@sick_leaves_router.get("", response_model=SickLeaveListResponse)
async def list_sick_leaves(
    guard: GuardDep,
    db: TenantDBDep,
    audit: AuditDep,
    page: PageDep,
    limit: LimitDep,
    status_filter: str | None = Query(default=None, alias="status"),
) -> SickLeaveListResponse:
    return await leave_service.list_sick_leaves(
        guard, db, audit, status_filter=status_filter, page=page, limit=limit
    )
