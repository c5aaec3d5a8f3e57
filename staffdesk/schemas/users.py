# ruff: noqa: TC003
from __future__ import annotations

import uuid

from staffdesk.models.enums import Role
from staffdesk.schemas.base import CamelModel, Pagination


class MemberResponse(CamelModel):
    """A user as seen from inside one tenant."""

    id: uuid.UUID
    email: str
    name: str | None
    role: Role | None
    is_active: bool


class MemberListResponse(CamelModel):
    items: list[MemberResponse]
    pagination: Pagination


class RoleUpdatePayload(CamelModel):
    role: Role


class TenantResponse(CamelModel):
    id: uuid.UUID
    name: str
    slug: str
    is_active: bool


class TenantListResponse(CamelModel):
    items: list[TenantResponse]
    total: int
