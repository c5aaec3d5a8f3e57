"""Tenant-scoped CRUD facade.

Every call re-resolves the acting context through the injected source and
rewrites the query before it reaches the database: an implicit tenant
conjunct, ownership narrowing for USER-role callers where the entity has an
owner, and a re-check of every row loaded by id. Nothing is cached.
"""

from __future__ import annotations

import abc
import uuid
from typing import TYPE_CHECKING, Any, ClassVar, Generic, TypeVar

from sqlalchemy import func, select, update
from sqlmodel import SQLModel, col

from staffdesk.exceptions import AccessDenied, AuthenticationRequired, NotFound, PermissionDenied
from staffdesk.models.enums import Role, TimesheetStatus
from staffdesk.models.tenant import Tenant, TenantUser, User
from staffdesk.models.timesheet import Timesheet

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable, Sequence

    from sqlalchemy.ext.asyncio import AsyncSession
    from sqlalchemy.sql.elements import ColumnElement

    from staffdesk.schemas.auth import ActingContext

    ContextSource = Callable[[], Awaitable[ActingContext | None]]

ModelT = TypeVar("ModelT", bound=SQLModel)


class _ReadScope(abc.ABC, Generic[ModelT]):
    """find_many / find_one / count for one entity kind."""

    model: ClassVar[type[SQLModel]]
    label: ClassVar[str]

    def __init__(self, session: AsyncSession, context_source: ContextSource) -> None:
        self._session = session
        self._context_source = context_source

    async def _context(self) -> ActingContext:
        context = await self._context_source()
        if context is None:
            raise AuthenticationRequired("No tenant context available")
        return context

    @abc.abstractmethod
    def _scope(self, context: ActingContext) -> list[ColumnElement[bool]]:
        """Implicit predicates added to every list and count query."""

    @abc.abstractmethod
    async def _check_row(self, context: ActingContext, row: ModelT) -> None:
        """Raise AccessDenied if ``row`` is outside the context's reach."""

    async def find_many(
        self,
        *where: ColumnElement[bool],
        order_by: Sequence[Any] = (),
        offset: int | None = None,
        limit: int | None = None,
    ) -> list[ModelT]:
        context = await self._context()
        query = select(self.model).where(*where, *self._scope(context))
        if order_by:
            query = query.order_by(*order_by)
        if offset:
            query = query.offset(offset)
        if limit is not None:
            query = query.limit(limit)
        result = await self._session.execute(query)
        return list(result.scalars().all())  # type: ignore[arg-type]

    async def find_one(self, row_id: uuid.UUID) -> ModelT | None:
        """Load by primary key, then verify the loaded row against the context."""
        context = await self._context()
        row = await self._session.get(self.model, row_id, populate_existing=True)
        if row is None:
            return None
        await self._check_row(context, row)  # type: ignore[arg-type]
        return row  # type: ignore[return-value]

    async def count(self, *where: ColumnElement[bool]) -> int:
        context = await self._context()
        result = await self._session.execute(
            select(func.count()).select_from(self.model).where(*where, *self._scope(context))
        )
        return int(result.scalar_one())


class _CrudScope(_ReadScope[ModelT]):
    """Adds create / update / delete; each commits on its own."""

    async def _prepare_create(self, context: ActingContext, values: dict[str, Any]) -> dict[str, Any]:
        return values

    async def create(self, **values: Any) -> ModelT:
        context = await self._context()
        row = self.model(**await self._prepare_create(context, dict(values)))
        self._session.add(row)
        await self._session.commit()
        await self._session.refresh(row)
        return row  # type: ignore[return-value]

    async def update(self, row_id: uuid.UUID, **values: Any) -> ModelT:
        row = await self.find_one(row_id)
        if row is None:
            raise NotFound(f"{self.label} not found")
        for key, value in values.items():
            setattr(row, key, value)
        await self._session.commit()
        await self._session.refresh(row)
        return row

    async def delete(self, row_id: uuid.UUID) -> ModelT:
        row = await self.find_one(row_id)
        if row is None:
            raise NotFound(f"{self.label} not found")
        await self._session.delete(row)
        await self._session.commit()
        return row


# ---------------------------------------------------------------------------
# Entity scopes
# ---------------------------------------------------------------------------


class TimesheetScope(_CrudScope[Timesheet]):
    """Timesheets: tenant-scoped, and owner-scoped for USER-role callers."""

    model = Timesheet
    label = "Timesheet"

    def _scope(self, context: ActingContext) -> list[ColumnElement[bool]]:
        clauses: list[ColumnElement[bool]] = []
        if not context.is_global:
            clauses.append(col(Timesheet.tenant_id) == context.tenant_id)
        if context.role == Role.USER:
            clauses.append(col(Timesheet.user_id) == context.user_id)
        return clauses

    async def _check_row(self, context: ActingContext, row: Timesheet) -> None:
        if not context.is_global and row.tenant_id != context.tenant_id:
            raise AccessDenied("Access denied to this timesheet")
        if context.role == Role.USER and row.user_id != context.user_id:
            raise AccessDenied("Access denied to this timesheet")

    async def _prepare_create(self, context: ActingContext, values: dict[str, Any]) -> dict[str, Any]:
        if context.tenant_id is None:
            raise AccessDenied("No tenant selected")
        values["tenant_id"] = context.tenant_id
        # A USER can only ever create rows for itself, whatever the caller passed.
        if context.role == Role.USER or values.get("user_id") is None:
            values["user_id"] = context.user_id
        return values

    async def transition_status(
        self,
        row_id: uuid.UUID,
        new_status: TimesheetStatus,
        expected_status: TimesheetStatus = TimesheetStatus.PENDING,
    ) -> Timesheet | None:
        """Atomically move a timesheet from ``expected_status`` to ``new_status``.

        Returns the updated row, or None when the row is missing or was no
        longer in ``expected_status`` (already processed).
        """
        row = await self.find_one(row_id)
        if row is None:
            return None
        result = await self._session.execute(
            update(Timesheet)
            .where(col(Timesheet.id) == row_id, col(Timesheet.status) == expected_status.value)
            .values(status=new_status.value)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:  # type: ignore[attr-defined]
            await self._session.commit()
            return None
        await self._session.commit()
        await self._session.refresh(row)
        return row


class MembershipScope(_CrudScope[TenantUser]):
    """Tenant memberships of the current tenant."""

    model = TenantUser
    label = "Tenant user"

    def _scope(self, context: ActingContext) -> list[ColumnElement[bool]]:
        if context.is_global:
            return []
        return [col(TenantUser.tenant_id) == context.tenant_id]

    async def _check_row(self, context: ActingContext, row: TenantUser) -> None:
        if not context.is_global and row.tenant_id != context.tenant_id:
            raise AccessDenied("Access denied to this tenant user")

    async def _prepare_create(self, context: ActingContext, values: dict[str, Any]) -> dict[str, Any]:
        if not context.is_global:
            values["tenant_id"] = context.tenant_id
        return values


class UserScope(_ReadScope[User]):
    """Accounts with an active membership in the current tenant."""

    model = User
    label = "User"

    def _scope(self, context: ActingContext) -> list[ColumnElement[bool]]:
        if context.is_global:
            return []
        members = select(col(TenantUser.user_id)).where(
            col(TenantUser.tenant_id) == context.tenant_id,
            col(TenantUser.is_active).is_(True),
        )
        return [col(User.id).in_(members)]

    async def _check_row(self, context: ActingContext, row: User) -> None:
        if context.is_global:
            return
        result = await self._session.execute(
            select(TenantUser).where(
                col(TenantUser.tenant_id) == context.tenant_id,
                col(TenantUser.user_id) == row.id,
            )
        )
        membership = result.scalar_one_or_none()
        if membership is None or not membership.is_active:
            raise AccessDenied("Access denied to this user")


class TenantScope(_CrudScope[Tenant]):
    """Tenants: a non-global context only ever sees its own tenant."""

    model = Tenant
    label = "Tenant"

    def _scope(self, context: ActingContext) -> list[ColumnElement[bool]]:
        if context.is_global:
            return []
        return [col(Tenant.id) == context.tenant_id]

    async def _check_row(self, context: ActingContext, row: Tenant) -> None:
        if not context.is_global and row.id != context.tenant_id:
            raise AccessDenied("Access denied to this tenant")

    async def create(self, **values: Any) -> Tenant:
        context = await self._context()
        if not context.is_superuser:
            raise PermissionDenied("Only superusers can create tenants")
        return await super().create(**values)

    async def delete(self, row_id: uuid.UUID) -> Tenant:
        context = await self._context()
        if not context.is_superuser:
            raise PermissionDenied("Only superusers can delete tenants")
        return await super().delete(row_id)


class TenantScopedDB:
    """Per-request facade over the entity scopes."""

    def __init__(self, session: AsyncSession, context_source: ContextSource) -> None:
        self.timesheets = TimesheetScope(session, context_source)
        self.memberships = MembershipScope(session, context_source)
        self.users = UserScope(session, context_source)
        self.tenants = TenantScope(session, context_source)
