# ruff: noqa: TC003
from __future__ import annotations

import uuid
from datetime import date, datetime
from typing import Annotated, Literal

from pydantic import Field

from staffdesk.models.enums import ApprovalAction
from staffdesk.schemas.base import CamelModel, Pagination

# ---------------------------------------------------------------------------
# Queue items
# ---------------------------------------------------------------------------


class ApprovalItemBase(CamelModel):
    """Fields shared by every approval queue variant."""

    id: uuid.UUID
    employee_id: uuid.UUID
    employee_name: str
    submitted_at: datetime
    status: str


class TimesheetApprovalItem(ApprovalItemBase):
    type: Literal["timesheet"] = "timesheet"
    work_date: date = Field(alias="date")
    start_time: datetime
    end_time: datetime
    break_minutes: int
    hours: float
    description: str | None = None


class _LeaveApprovalFields(ApprovalItemBase):
    start_date: date | None = None
    end_date: date | None = None
    total_days: int | None = None
    description: str | None = None


class VacationApprovalItem(_LeaveApprovalFields):
    type: Literal["vacation"] = "vacation"


class TijdVoorTijdApprovalItem(_LeaveApprovalFields):
    type: Literal["tijd-voor-tijd"] = "tijd-voor-tijd"


class SickLeaveApprovalItem(ApprovalItemBase):
    type: Literal["sick-leave"] = "sick-leave"
    start_date: date | None = None
    end_date: date | None = None
    total_days: int | None = None
    reason: str | None = None
    medical_note: bool = False
    uwv_reported: bool = False
    expected_return_date: date | None = None


ApprovalItem = Annotated[
    TimesheetApprovalItem | VacationApprovalItem | TijdVoorTijdApprovalItem | SickLeaveApprovalItem,
    Field(discriminator="type"),
]

LeaveApprovalItem = VacationApprovalItem | TijdVoorTijdApprovalItem | SickLeaveApprovalItem


# ---------------------------------------------------------------------------
# Queue responses and bulk actions
# ---------------------------------------------------------------------------


class ApprovalListResponse(CamelModel):
    items: list[ApprovalItem]
    pagination: Pagination


class ApprovalActionPayload(CamelModel):
    """Request body for bulk approve/reject."""

    ids: list[str]
    action: ApprovalAction
    comment: str | None = Field(default=None, max_length=1000)


class ApprovalActionResponse(CamelModel):
    success: bool
    message: str
    processed_ids: list[str]
