from sqlmodel import SQLModel

from staffdesk.models.audit import AuditLog
from staffdesk.models.base import TimestampMixin, UpdatedAtMixin, UUIDBase
from staffdesk.models.enums import (
    ApprovalAction,
    ApprovalTypeFilter,
    AuditAction,
    AuditResource,
    LeaveStatus,
    LeaveType,
    ResourceType,
    Role,
    TimesheetStatus,
)
from staffdesk.models.tenant import Tenant, TenantUser, User
from staffdesk.models.timesheet import Timesheet

__all__ = [
    "ApprovalAction",
    "ApprovalTypeFilter",
    "AuditAction",
    "AuditLog",
    "AuditResource",
    "LeaveStatus",
    "LeaveType",
    "ResourceType",
    "Role",
    "SQLModel",
    "Tenant",
    "TenantUser",
    "Timesheet",
    "TimestampMixin",
    "User",
    "UUIDBase",
    "UpdatedAtMixin",
]
