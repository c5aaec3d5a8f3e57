# ruff: noqa: TC003
from __future__ import annotations

import uuid

import sqlalchemy as sa
from sqlmodel import Field

from staffdesk.models.base import TimestampMixin, UUIDBase
from staffdesk.models.enums import Role


class Tenant(UUIDBase, TimestampMixin, table=True):
    """An isolated customer organization."""

    __tablename__ = "tenant"

    name: str = Field(max_length=255)
    slug: str = Field(max_length=100, unique=True, index=True)
    is_active: bool = Field(default=True)


class User(UUIDBase, TimestampMixin, table=True):
    """A login account. Tenant roles live on TenantUser, not here."""

    __tablename__ = "app_user"

    email: str = Field(max_length=255, unique=True, index=True)
    name: str | None = Field(default=None, max_length=255)
    is_superuser: bool = Field(default=False)
    is_active: bool = Field(default=True)


class TenantUser(UUIDBase, TimestampMixin, table=True):
    """Membership of a user in a tenant with a tenant-specific role."""

    __tablename__ = "tenant_user"
    __table_args__ = (sa.UniqueConstraint("tenant_id", "user_id", name="uq_tenant_user"),)

    tenant_id: uuid.UUID = Field(
        sa_column=sa.Column(sa.Uuid, sa.ForeignKey("tenant.id", ondelete="CASCADE"), nullable=False, index=True),
    )
    user_id: uuid.UUID = Field(
        sa_column=sa.Column(sa.Uuid, sa.ForeignKey("app_user.id", ondelete="CASCADE"), nullable=False, index=True),
    )
    role: str = Field(default=Role.USER, max_length=50, sa_column_kwargs={"server_default": "USER"})
    is_active: bool = Field(default=True)
