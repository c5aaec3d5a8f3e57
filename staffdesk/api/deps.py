# ruff: noqa: B008, TC003
from __future__ import annotations

import logging
import uuid
from typing import TYPE_CHECKING, Annotated

from fastapi import Depends, Query, Request

from staffdesk.config import get_settings
from staffdesk.db import SessionDep
from staffdesk.exceptions import AuthenticationRequired
from staffdesk.schemas.auth import ActingContext, SessionPrincipal
from staffdesk.security.context import resolve_acting_context
from staffdesk.security.guard import AccessGuard
from staffdesk.services.audit import AuditStore
from staffdesk.services.identity import IdentityProvider, get_identity_provider
from staffdesk.services.tenant_db import TenantScopedDB

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from sqlalchemy.ext.asyncio import AsyncSession

logger = logging.getLogger(__name__)


async def get_session_principal(
    request: Request,
    provider: IdentityProvider = Depends(get_identity_provider),
) -> SessionPrincipal | None:
    """Ask the identity provider who is calling; None when unauthenticated."""
    return await provider.get_principal(request)


PrincipalDep = Annotated[SessionPrincipal | None, Depends(get_session_principal)]


def _selected_tenant(request: Request) -> uuid.UUID | None:
    raw = request.headers.get(get_settings().tenant_selector_header)
    if not raw:
        return None
    try:
        return uuid.UUID(raw)
    except ValueError:
        logger.info("Ignoring malformed tenant selector %r", raw)
        return None


async def get_acting_context(
    request: Request,
    session: SessionDep,
    principal: PrincipalDep,
) -> ActingContext | None:
    """Resolve the acting context for the request, or None to fail closed."""
    return await resolve_acting_context(session, principal, _selected_tenant(request))


ContextDep = Annotated[ActingContext | None, Depends(get_acting_context)]


async def get_access_guard(session: SessionDep, context: ContextDep) -> AccessGuard:
    return AccessGuard(session, context)


GuardDep = Annotated[AccessGuard, Depends(get_access_guard)]


def _context_source(
    session: AsyncSession, request: Request, principal: SessionPrincipal | None
) -> Callable[[], Awaitable[ActingContext | None]]:
    selected = _selected_tenant(request)

    async def _resolve() -> ActingContext | None:
        return await resolve_acting_context(session, principal, selected)

    return _resolve


async def get_tenant_db(request: Request, session: SessionDep, principal: PrincipalDep) -> TenantScopedDB:
    """Scoped data access whose context is re-resolved on every call."""
    return TenantScopedDB(session, _context_source(session, request, principal))


TenantDBDep = Annotated[TenantScopedDB, Depends(get_tenant_db)]


async def get_audit_store(request: Request, session: SessionDep, context: ContextDep) -> AuditStore:
    if context is None:
        raise AuthenticationRequired()
    ip_address = request.client.host if request.client is not None else None
    return AuditStore(session, context, ip_address)


AuditDep = Annotated[AuditStore, Depends(get_audit_store)]


def get_page(page: int = Query(default=1, ge=1)) -> int:
    return page


def get_limit(limit: int | None = Query(default=None, ge=1)) -> int:
    """Page size, defaulting to and clamped by the configured bounds."""
    settings = get_settings()
    if limit is None:
        return settings.default_page_size
    return min(limit, settings.max_page_size)


PageDep = Annotated[int, Depends(get_page)]
LimitDep = Annotated[int, Depends(get_limit)]
