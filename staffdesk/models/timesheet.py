# ruff: noqa: TC003
from __future__ import annotations

import uuid
from datetime import date, datetime

import sqlalchemy as sa
from sqlmodel import Field

from staffdesk.models.base import TimestampMixin, UpdatedAtMixin, UUIDBase
from staffdesk.models.enums import TimesheetStatus


class Timesheet(UUIDBase, TimestampMixin, UpdatedAtMixin, table=True):
    """Worked hours for one day, owned by the submitting user."""

    __tablename__ = "timesheet"
    __table_args__ = (sa.Index("ix_timesheet_tenant_status", "tenant_id", "status"),)

    tenant_id: uuid.UUID = Field(index=True)
    user_id: uuid.UUID = Field(index=True)
    work_date: date
    start_time: datetime = Field(sa_type=sa.DateTime(timezone=True))  # ty: ignore[invalid-argument-type]
    # At or before start_time means the shift crossed midnight; stored as the next day.
    end_time: datetime = Field(sa_type=sa.DateTime(timezone=True))  # ty: ignore[invalid-argument-type]
    status: str = Field(
        default=TimesheetStatus.PENDING, max_length=50, index=True, sa_column_kwargs={"server_default": "PENDING"}
    )
    break_minutes: int = Field(default=0)
    description: str | None = None
