"""Approval queue: timesheets plus leave requests read from the audit log.

Listing merges the sources into one paginated queue. Bulk decisions only
act on timesheets; ids of leave or sick-leave requests are skipped like
unknown ids, because those requests have no status update path.
"""

from __future__ import annotations

import logging
import uuid
from typing import TYPE_CHECKING

from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import col

from staffdesk.exceptions import AppError
from staffdesk.models.enums import (
    SICK_LEAVE_ACTIONS,
    VACATION_ACTIONS,
    ApprovalAction,
    ApprovalTypeFilter,
    AuditAction,
    AuditResource,
    TimesheetStatus,
)
from staffdesk.models.timesheet import Timesheet
from staffdesk.schemas.approval import ApprovalActionResponse, ApprovalListResponse
from staffdesk.schemas.base import Pagination
from staffdesk.security.permissions import Permission, has_permission
from staffdesk.services.projection import project_leave_entry, project_timesheet
from staffdesk.services.users import load_users

if TYPE_CHECKING:
    from collections.abc import Sequence

    from sqlalchemy.ext.asyncio import AsyncSession

    from staffdesk.models.audit import AuditLog
    from staffdesk.schemas.approval import ApprovalActionPayload, ApprovalItem
    from staffdesk.schemas.auth import ActingContext
    from staffdesk.security.guard import AccessGuard
    from staffdesk.services.audit import AuditStore
    from staffdesk.services.tenant_db import TenantScopedDB

logger = logging.getLogger(__name__)

DEFAULT_STATUS = TimesheetStatus.PENDING.value

_DECISIONS: dict[ApprovalAction, tuple[TimesheetStatus, AuditAction]] = {
    ApprovalAction.APPROVE: (TimesheetStatus.APPROVED, AuditAction.TIMESHEET_APPROVE),
    ApprovalAction.REJECT: (TimesheetStatus.REJECTED, AuditAction.TIMESHEET_REJECT),
}


def sort_key(item: ApprovalItem) -> tuple[object, str]:
    """Newest first; equal timestamps fall back to the id so pages stay stable."""
    return (item.submitted_at, str(item.id))


class ApprovalAggregator:
    """Builds the approval queue and applies bulk decisions for one request."""

    def __init__(
        self,
        session: AsyncSession,
        guard: AccessGuard,
        db: TenantScopedDB,
        audit: AuditStore,
        source_cap: int = 100,
    ) -> None:
        self._session = session
        self._guard = guard
        self._db = db
        self._audit = audit
        self._source_cap = source_cap

    # ------------------------------------------------------------------
    # Queue
    # ------------------------------------------------------------------

    def _queue_context(self) -> tuple[ActingContext, uuid.UUID | None]:
        """Return the context and the owner to narrow to, if any.

        Approvers see the whole tenant queue. A context that can read but not
        approve only sees its own submissions.
        """
        context = self._guard.require_context()
        if context.is_superuser or has_permission(context.role, Permission.TIMESHEET_APPROVE):
            return context, None
        self._guard.require_permission(Permission.TIMESHEET_READ)
        return context, context.user_id

    async def list_queue(
        self,
        type_filter: ApprovalTypeFilter = ApprovalTypeFilter.ALL,
        status: str = DEFAULT_STATUS,
        page: int = 1,
        limit: int = 10,
    ) -> ApprovalListResponse:
        _, owner_id = self._queue_context()
        offset = (page - 1) * limit

        if type_filter == ApprovalTypeFilter.TIMESHEET:
            items, total = await self._timesheet_items(status, offset=offset, limit=limit)
            return self._response(items, page, limit, total)

        if type_filter in (ApprovalTypeFilter.VACATION, ApprovalTypeFilter.SICKLEAVE):
            actions = VACATION_ACTIONS if type_filter == ApprovalTypeFilter.VACATION else SICK_LEAVE_ACTIONS
            entries = await self._audit.find_entries(actions, status=status, user_id=owner_id)
            items = await self._leave_items(entries[offset : offset + limit])
            return self._response(items, page, limit, len(entries))

        # all: cap every source, merge, sort, then paginate in memory.
        timesheet_items, timesheet_total = await self._timesheet_items(status, offset=0, limit=self._source_cap)
        vacation_entries = await self._audit.find_entries(VACATION_ACTIONS, status=status, user_id=owner_id)
        sick_entries = await self._audit.find_entries(SICK_LEAVE_ACTIONS, status=status, user_id=owner_id)
        leave_items = await self._leave_items(
            vacation_entries[: self._source_cap] + sick_entries[: self._source_cap]
        )

        merged: list[ApprovalItem] = [*timesheet_items, *leave_items]
        merged.sort(key=sort_key, reverse=True)
        total = timesheet_total + len(vacation_entries) + len(sick_entries)
        return self._response(merged[offset : offset + limit], page, limit, total)

    async def _timesheet_items(self, status: str, *, offset: int, limit: int) -> tuple[list[ApprovalItem], int]:
        # USER-role callers are narrowed to their own rows by the scoped wrapper.
        where = col(Timesheet.status) == status.upper()
        total = await self._db.timesheets.count(where)
        rows = await self._db.timesheets.find_many(
            where,
            order_by=(col(Timesheet.created_at).desc(), col(Timesheet.id).desc()),
            offset=offset,
            limit=limit,
        )
        users = await load_users(self._db, [t.user_id for t in rows])
        return [project_timesheet(t, users.get(t.user_id)) for t in rows], total

    async def _leave_items(self, entries: Sequence[AuditLog]) -> list[ApprovalItem]:
        users = await load_users(self._db, [e.user_id for e in entries])
        return [project_leave_entry(e, users.get(e.user_id)) for e in entries]

    @staticmethod
    def _response(items: list[ApprovalItem], page: int, limit: int, total: int) -> ApprovalListResponse:
        return ApprovalListResponse(items=items, pagination=Pagination.build(page, limit, total))

    # ------------------------------------------------------------------
    # Bulk decisions
    # ------------------------------------------------------------------

    async def bulk_transition(self, payload: ApprovalActionPayload) -> ApprovalActionResponse:
        """Approve or reject each timesheet id independently.

        Ids that are malformed, unknown, outside the tenant, not timesheets or
        no longer pending are skipped; the response lists what was processed.
        """
        self._guard.require_permission(Permission.TIMESHEET_APPROVE)
        new_status, audit_action = _DECISIONS[payload.action]
        processed_ids: list[str] = []

        for raw_id in payload.ids:
            try:
                timesheet_id = uuid.UUID(raw_id)
            except ValueError:
                logger.warning("Skipping malformed approval id %r", raw_id)
                continue

            try:
                updated = await self._db.timesheets.transition_status(timesheet_id, new_status)
            except AppError as exc:
                logger.warning("Skipping approval id %s: %s", timesheet_id, exc.message)
                continue
            except SQLAlchemyError:
                logger.exception("Failed to update timesheet %s", timesheet_id)
                await self._session.rollback()
                continue

            if updated is None:
                logger.warning("Timesheet %s not found or not pending", timesheet_id)
                continue

            await self._audit.append(
                audit_action,
                AuditResource.TIMESHEET,
                timesheet_id,
                {"status": TimesheetStatus.PENDING.value},
                {"status": new_status.value, "comment": payload.comment},
            )
            processed_ids.append(raw_id)

        verb = "approved" if payload.action == ApprovalAction.APPROVE else "rejected"
        return ApprovalActionResponse(
            success=True,
            message=f"{len(processed_ids)} items {verb}",
            processed_ids=processed_ids,
        )
