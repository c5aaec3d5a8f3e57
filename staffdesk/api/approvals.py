# ruff: noqa: B008
from __future__ import annotations

from fastapi import APIRouter, Query

from staffdesk.api.deps import AuditDep, GuardDep, LimitDep, PageDep, TenantDBDep
from staffdesk.config import get_settings
from staffdesk.db import SessionDep
from staffdesk.models.enums import ApprovalTypeFilter
from staffdesk.schemas.approval import ApprovalActionPayload, ApprovalActionResponse, ApprovalListResponse
from staffdesk.services.approval import DEFAULT_STATUS, ApprovalAggregator

approvals_router = APIRouter(prefix="/approvals", tags=["approvals"])


@approvals_router.get("", response_model=ApprovalListResponse)
async def list_approvals(
    session: SessionDep,
    guard: GuardDep,
    db: TenantDBDep,
    audit: AuditDep,
    page: PageDep,
    limit: LimitDep,
    type_filter: ApprovalTypeFilter = Query(default=ApprovalTypeFilter.ALL, alias="type"),
    status: str = Query(default=DEFAULT_STATUS),
) -> ApprovalListResponse:
    """Merged approval queue of timesheets, leave and sick-leave requests."""
    aggregator = ApprovalAggregator(session, guard, db, audit, get_settings().approval_source_cap)
    return await aggregator.list_queue(type_filter, status, page, limit)


@approvals_router.post("", response_model=ApprovalActionResponse)
async def decide_approvals(
    payload: ApprovalActionPayload,
    session: SessionDep,
    guard: GuardDep,
    db: TenantDBDep,
    audit: AuditDep,
) -> ApprovalActionResponse:
    """Approve or reject a batch of pending timesheets."""
    aggregator = ApprovalAggregator(session, guard, db, audit, get_settings().approval_source_cap)
    return await aggregator.bulk_transition(payload)
