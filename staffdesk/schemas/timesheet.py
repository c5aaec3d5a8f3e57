# ruff: noqa: TC003
from __future__ import annotations

import uuid
from datetime import date, datetime

from pydantic import Field

from staffdesk.schemas.base import CamelModel, Pagination

_TIME_PATTERN = r"^\d{2}:\d{2}$"

# ---------------------------------------------------------------------------
# Request payloads
# ---------------------------------------------------------------------------


class TimesheetCreatePayload(CamelModel):
    """Request body for a new timesheet. ``user_id`` is ignored for USER-role callers."""

    work_date: date = Field(alias="date")
    start_time: str = Field(pattern=_TIME_PATTERN)
    end_time: str = Field(pattern=_TIME_PATTERN)
    description: str | None = None
    break_minutes: int = Field(default=0, ge=0, le=480, alias="breakDuration")
    user_id: uuid.UUID | None = None


class TimesheetReplacePayload(TimesheetCreatePayload):
    """Request body for PUT: full replacement of a pending timesheet."""

    id: uuid.UUID


class TimesheetClockOutPayload(CamelModel):
    """Partial update used when the owner clocks out."""

    end_time: str | None = Field(default=None, pattern=_TIME_PATTERN)
    description: str | None = None
    break_minutes: int | None = Field(default=None, ge=0, le=480, alias="breakDuration")


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------


class TimesheetResponse(CamelModel):
    id: uuid.UUID
    tenant_id: uuid.UUID
    user_id: uuid.UUID
    work_date: date = Field(alias="date")
    start_time: datetime
    end_time: datetime
    status: str
    break_minutes: int
    description: str | None
    created_at: datetime
    updated_at: datetime


class TimesheetListResponse(CamelModel):
    items: list[TimesheetResponse]
    pagination: Pagination


class DeleteResponse(CamelModel):
    success: bool = True
    message: str
