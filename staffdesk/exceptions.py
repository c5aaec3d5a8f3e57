import logging
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel

logger = logging.getLogger(__name__)


class FieldError(BaseModel):
    """A single field-level validation problem."""

    field: str
    message: str


class ErrorResponse(BaseModel):
    """Standard error response schema."""

    error: str
    detail: str | None = None
    status_code: int
    details: list[FieldError] | None = None


class AppError(Exception):
    """Base application exception."""

    def __init__(self, message: str, status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR) -> None:
        self.message = message
        self.status_code = status_code
        super().__init__(self.message)


class AuthenticationRequired(AppError):
    """No resolvable acting context for the request."""

    def __init__(self, message: str = "Authentication required") -> None:
        super().__init__(message, status_code=status.HTTP_401_UNAUTHORIZED)


class PermissionDenied(AppError):
    """The acting role lacks the requested capability."""

    def __init__(self, message: str = "Permission denied") -> None:
        super().__init__(message, status_code=status.HTTP_403_FORBIDDEN)


class AccessDenied(AppError):
    """Tenant or ownership mismatch between the acting context and a resource."""

    def __init__(self, message: str = "Access denied") -> None:
        super().__init__(message, status_code=status.HTTP_403_FORBIDDEN)


class NotFound(AppError):
    def __init__(self, message: str = "Not found") -> None:
        super().__init__(message, status_code=status.HTTP_404_NOT_FOUND)


class ValidationFailed(AppError):
    """Input was well-formed JSON but violates a business rule."""

    def __init__(self, message: str = "Validation failed", details: list[FieldError] | None = None) -> None:
        self.details = details
        super().__init__(message, status_code=status.HTTP_400_BAD_REQUEST)


class InternalError(AppError):
    def __init__(self, message: str = "Internal server error") -> None:
        super().__init__(message, status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)


def _field_errors(errors: list[dict[str, Any]]) -> list[FieldError]:
    """Flatten pydantic error dicts into ``field``/``message`` pairs."""
    result: list[FieldError] = []
    for err in errors:
        # Drop the leading "body"/"query" segment FastAPI prepends.
        loc = [str(part) for part in err.get("loc", ())][1:]
        result.append(FieldError(field=".".join(loc) or "body", message=err.get("msg", "Invalid value")))
    return result


async def _app_exception_handler(request: Request, exc: AppError) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content=ErrorResponse(
            error=type(exc).__name__,
            detail=exc.message,
            status_code=exc.status_code,
            details=getattr(exc, "details", None),
        ).model_dump(exclude_none=True),
    )


async def _validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=ErrorResponse(
            error="ValidationFailed",
            detail="Validation failed",
            status_code=status.HTTP_400_BAD_REQUEST,
            details=_field_errors(list(exc.errors())),
        ).model_dump(),
    )


async def _unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=ErrorResponse(
            error="InternalError",
            detail="Internal server error",
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        ).model_dump(exclude_none=True),
    )


def setup_exception_handlers(app: FastAPI) -> None:
    """Register exception handlers on the application."""
    app.add_exception_handler(AppError, _app_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, _validation_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(Exception, _unhandled_exception_handler)
