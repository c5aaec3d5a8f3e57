# ruff: noqa: TC003
from __future__ import annotations

import uuid

from pydantic import BaseModel, ConfigDict

from staffdesk.models.enums import Role


class SessionPrincipal(BaseModel):
    """Identity claims handed over by the session provider.

    ``tenant_id`` and ``role`` are claims only: for regular users the context
    resolver re-reads the membership and ignores the role claim.
    """

    user_id: uuid.UUID
    tenant_id: uuid.UUID | None = None
    role: Role = Role.USER
    is_superuser: bool = False


class ActingContext(BaseModel):
    """Resolved identity and scope for one request."""

    model_config = ConfigDict(frozen=True)

    tenant_id: uuid.UUID | None
    user_id: uuid.UUID
    role: Role
    is_superuser: bool = False

    @property
    def is_global(self) -> bool:
        """Superuser acting without a selected tenant."""
        return self.is_superuser and self.tenant_id is None
