"""Append-only audit store.

Besides recording change history, the log is the only persistence for leave
and sick-leave requests: the entry created for such a request *is* the
request, and its state lives in ``new_values["status"]``.
"""

from __future__ import annotations

import logging
import uuid
from datetime import date, datetime
from typing import TYPE_CHECKING, Any

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import col

from staffdesk.models.audit import AuditLog

if TYPE_CHECKING:
    from collections.abc import Sequence

    from sqlalchemy.ext.asyncio import AsyncSession
    from sqlmodel import SQLModel

    from staffdesk.models.enums import AuditAction, AuditResource
    from staffdesk.schemas.auth import ActingContext

logger = logging.getLogger(__name__)


def model_to_audit_dict(model: SQLModel, fields: Sequence[str] | None = None) -> dict[str, Any]:
    """Serialize a SQLModel instance to a JSON-safe dict for audit logging."""
    data: dict[str, Any] = {}
    for key, value in model.model_dump(include=set(fields) if fields else None).items():
        data[key] = to_json_value(value)
    return data


def to_json_value(value: Any) -> Any:
    if isinstance(value, uuid.UUID):
        return str(value)
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    return value


def embedded_status(entry: AuditLog) -> str | None:
    """Status stored inside a virtual-entity entry, lowercased."""
    status = (entry.new_values or {}).get("status")
    return str(status).lower() if status is not None else None


class AuditStore:
    """Audit log access bound to one acting context."""

    def __init__(self, session: AsyncSession, context: ActingContext, ip_address: str | None = None) -> None:
        self._session = session
        self._context = context
        self._ip_address = ip_address

    async def append(
        self,
        action: AuditAction,
        resource: AuditResource,
        resource_id: uuid.UUID | None = None,
        old_values: dict[str, Any] | None = None,
        new_values: dict[str, Any] | None = None,
        *,
        entry_id: uuid.UUID | None = None,
    ) -> AuditLog | None:
        """Insert one entry and commit it on its own.

        Callers commit their primary write first. A failure here is logged and
        reported as None; it never reaches the caller as an exception.
        """
        entry = AuditLog(
            tenant_id=self._context.tenant_id,
            user_id=self._context.user_id,
            action=action.value,
            resource=resource.value,
            resource_id=resource_id,
            old_values=old_values,
            new_values=new_values,
            ip_address=self._ip_address,
        )
        if entry_id is not None:
            entry.id = entry_id
        try:
            self._session.add(entry)
            await self._session.commit()
        except SQLAlchemyError:
            logger.exception("Failed to write audit log entry %s for %s %s", action.value, resource.value, resource_id)
            await self._session.rollback()
            return None
        return entry

    async def find_entries(
        self,
        actions: Sequence[AuditAction],
        *,
        status: str | None = None,
        user_id: uuid.UUID | None = None,
    ) -> list[AuditLog]:
        """Entries with one of ``actions`` in the current tenant, newest first.

        ``status`` is compared against the JSON-embedded status after the rows
        are fetched, case-insensitively.
        """
        query = select(AuditLog).where(col(AuditLog.action).in_([a.value for a in actions]))
        if not self._context.is_global:
            query = query.where(col(AuditLog.tenant_id) == self._context.tenant_id)
        if user_id is not None:
            query = query.where(col(AuditLog.user_id) == user_id)
        query = query.order_by(col(AuditLog.created_at).desc(), col(AuditLog.id).desc())

        result = await self._session.execute(query)
        entries = list(result.scalars().all())
        if status is None:
            return entries
        wanted = status.lower()
        return [e for e in entries if embedded_status(e) == wanted]
