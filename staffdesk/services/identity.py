from __future__ import annotations

import logging
import uuid
from typing import TYPE_CHECKING, Protocol, runtime_checkable

from pydantic import ValidationError

from staffdesk.models.enums import Role
from staffdesk.schemas.auth import SessionPrincipal

if TYPE_CHECKING:
    from fastapi import Request

logger = logging.getLogger(__name__)

_TRUTHY = {"1", "true", "yes"}


@runtime_checkable
class IdentityProvider(Protocol):
    """Interface for the session/identity provider."""

    async def get_principal(self, request: Request) -> SessionPrincipal | None:
        """Return the authenticated principal, or None when unauthenticated."""
        ...


class HeaderIdentityProvider:
    """Development provider reading identity claims from request headers.

    ``X-User-Id`` is required; ``X-Session-Tenant-Id``, ``X-Role`` and
    ``X-Superuser`` are optional claims.
    """

    async def get_principal(self, request: Request) -> SessionPrincipal | None:
        raw_user = request.headers.get("x-user-id")
        if not raw_user:
            return None
        try:
            return SessionPrincipal(
                user_id=uuid.UUID(raw_user),
                tenant_id=_optional_uuid(request.headers.get("x-session-tenant-id")),
                role=Role(request.headers.get("x-role", Role.USER).upper()),
                is_superuser=request.headers.get("x-superuser", "").lower() in _TRUTHY,
            )
        except (ValueError, ValidationError):
            logger.info("Rejecting malformed identity headers")
            return None


def _optional_uuid(value: str | None) -> uuid.UUID | None:
    return uuid.UUID(value) if value else None


_identity_provider: IdentityProvider = HeaderIdentityProvider()


def get_identity_provider() -> IdentityProvider:
    """FastAPI dependency for the identity provider."""
    return _identity_provider


def set_identity_provider(provider: IdentityProvider) -> None:
    """Override the provider (for testing or production wiring)."""
    global _identity_provider
    _identity_provider = provider
