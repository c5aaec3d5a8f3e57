from __future__ import annotations

import enum


class Role(enum.StrEnum):
    """Role of a user within one tenant, plus the tenant-less platform role."""

    USER = "USER"
    MANAGER = "MANAGER"
    TENANT_ADMIN = "TENANT_ADMIN"
    SUPERUSER = "SUPERUSER"


class TimesheetStatus(enum.StrEnum):
    """State machine for timesheets: PENDING is the only non-terminal state."""

    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"


class LeaveStatus(enum.StrEnum):
    """Status embedded in the payload of a leave request audit entry."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class LeaveType(enum.StrEnum):
    VACATION = "vacation"
    TIJD_VOOR_TIJD = "tijd-voor-tijd"


class AuditAction(enum.StrEnum):
    """Action recorded in the audit log."""

    TIMESHEET_CREATE = "TIMESHEET_CREATE"
    TIMESHEET_UPDATE = "TIMESHEET_UPDATE"
    TIMESHEET_DELETE = "TIMESHEET_DELETE"
    TIMESHEET_APPROVE = "TIMESHEET_APPROVE"
    TIMESHEET_REJECT = "TIMESHEET_REJECT"
    VACATION_REQUEST = "VACATION_REQUEST"
    TIJD_VOOR_TIJD_REQUEST = "TIJD_VOOR_TIJD_REQUEST"
    SICK_LEAVE_REQUEST = "SICK_LEAVE_REQUEST"
    USER_ROLE_UPDATE = "USER_ROLE_UPDATE"


class AuditResource(enum.StrEnum):
    """Resource name recorded in the audit log."""

    TIMESHEET = "Timesheet"
    LEAVE_REQUEST = "LeaveRequest"
    TENANT_USER = "TenantUser"


VACATION_ACTIONS: tuple[AuditAction, ...] = (AuditAction.VACATION_REQUEST, AuditAction.TIJD_VOOR_TIJD_REQUEST)
SICK_LEAVE_ACTIONS: tuple[AuditAction, ...] = (AuditAction.SICK_LEAVE_REQUEST,)


class ApprovalTypeFilter(enum.StrEnum):
    """Source selector for the approval queue."""

    ALL = "all"
    TIMESHEET = "timesheet"
    VACATION = "vacation"
    SICKLEAVE = "sickleave"


class ApprovalAction(enum.StrEnum):
    APPROVE = "approve"
    REJECT = "reject"


class ResourceType(enum.StrEnum):
    """Resource kinds understood by the access guard."""

    TIMESHEET = "timesheet"
    USER = "user"
    TENANT = "tenant"
