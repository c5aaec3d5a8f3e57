# ruff: noqa: TC003
from __future__ import annotations

import uuid
from datetime import datetime
from typing import Any

import sqlalchemy as sa
from sqlmodel import Field

from staffdesk.models.base import UUIDBase, _now_utc


class AuditLog(UUIDBase, table=True):
    """Append-only record of a domain event.

    Leave and sick-leave requests have no table of their own: the entry created
    for them is the entity, with its state embedded in ``new_values``.
    """

    __tablename__ = "audit_log"
    __table_args__ = (sa.Index("ix_audit_tenant_action", "tenant_id", "action"),)

    tenant_id: uuid.UUID | None = Field(default=None, index=True)
    user_id: uuid.UUID = Field(index=True)
    action: str = Field(max_length=50)
    resource: str = Field(max_length=50)
    resource_id: uuid.UUID | None = None
    old_values: dict[str, Any] | None = Field(default=None, sa_type=sa.JSON)
    new_values: dict[str, Any] | None = Field(default=None, sa_type=sa.JSON)
    ip_address: str | None = Field(default=None, max_length=64)
    created_at: datetime = Field(
        default_factory=_now_utc,
        index=True,
        sa_type=sa.DateTime(timezone=True),  # ty: ignore[invalid-argument-type]
        sa_column_kwargs={"server_default": sa.func.now()},
    )
