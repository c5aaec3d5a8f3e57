# ruff: noqa: TC003
from __future__ import annotations

from datetime import date
from typing import Self

from pydantic import Field, model_validator

from staffdesk.models.enums import LeaveType
from staffdesk.schemas.approval import SickLeaveApprovalItem, TijdVoorTijdApprovalItem, VacationApprovalItem
from staffdesk.schemas.base import CamelModel, Pagination


class VacationCreatePayload(CamelModel):
    """Request body for a vacation or tijd-voor-tijd request."""

    start_date: date
    end_date: date
    description: str | None = Field(default=None, max_length=2000)
    type: LeaveType

    @model_validator(mode="after")
    def _validate_dates(self) -> Self:
        if self.end_date < self.start_date:
            msg = "endDate must not be before startDate"
            raise ValueError(msg)
        return self


class SickLeaveCreatePayload(CamelModel):
    """Request body for a sick-leave report. A missing end date means a single day."""

    start_date: date
    end_date: date | None = None
    reason: str | None = Field(default=None, max_length=2000)
    medical_note: bool = False
    uwv_reported: bool = False
    expected_return_date: date | None = None

    @model_validator(mode="after")
    def _validate_dates(self) -> Self:
        if self.end_date is not None and self.end_date < self.start_date:
            msg = "endDate must not be before startDate"
            raise ValueError(msg)
        return self


class VacationCreateResponse(CamelModel):
    success: bool = True
    request: VacationApprovalItem | TijdVoorTijdApprovalItem


class SickLeaveCreateResponse(CamelModel):
    success: bool = True
    request: SickLeaveApprovalItem
    # Dutch sick-leave rule: absences longer than four days are reported to the UWV.
    uwv_reporting_required: bool


class VacationListResponse(CamelModel):
    items: list[VacationApprovalItem | TijdVoorTijdApprovalItem]
    pagination: Pagination


class SickLeaveListResponse(CamelModel):
    items: list[SickLeaveApprovalItem]
    pagination: Pagination
