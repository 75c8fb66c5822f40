"""Service error taxonomy and its HTTP rendering."""

from enum import Enum
from typing import Any, Dict, Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
import structlog

from app.config import settings

logger = structlog.get_logger(__name__)


class ErrorKind(str, Enum):
    """Error kinds surfaced to API callers."""

    INVALID_ARGUMENT = "invalid-argument"
    UNAUTHENTICATED = "unauthenticated"
    PERMISSION_DENIED = "permission-denied"
    NOT_FOUND = "not-found"
    ALREADY_EXISTS = "already-exists"
    FAILED_PRECONDITION = "failed-precondition"
    DEADLINE_EXCEEDED = "deadline-exceeded"
    RESOURCE_EXHAUSTED = "resource-exhausted"
    INTERNAL = "internal"


HTTP_STATUS_BY_KIND = {
    ErrorKind.INVALID_ARGUMENT: status.HTTP_400_BAD_REQUEST,
    ErrorKind.UNAUTHENTICATED: status.HTTP_401_UNAUTHORIZED,
    ErrorKind.PERMISSION_DENIED: status.HTTP_403_FORBIDDEN,
    ErrorKind.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorKind.ALREADY_EXISTS: status.HTTP_409_CONFLICT,
    ErrorKind.FAILED_PRECONDITION: status.HTTP_409_CONFLICT,
    ErrorKind.DEADLINE_EXCEEDED: status.HTTP_410_GONE,
    ErrorKind.RESOURCE_EXHAUSTED: status.HTTP_429_TOO_MANY_REQUESTS,
    ErrorKind.INTERNAL: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


class ServiceError(Exception):
    """Base error raised by services; carries a kind for the API layer."""

    kind: ErrorKind = ErrorKind.INTERNAL

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    @property
    def http_status(self) -> int:
        return HTTP_STATUS_BY_KIND[self.kind]

    def to_dict(self) -> Dict[str, Any]:
        body = {"error": self.kind.value, "detail": self.message}
        if self.details:
            body["details"] = self.details
        return body


class InvalidArgument(ServiceError):
    kind = ErrorKind.INVALID_ARGUMENT


class Unauthenticated(ServiceError):
    kind = ErrorKind.UNAUTHENTICATED


class PermissionDenied(ServiceError):
    kind = ErrorKind.PERMISSION_DENIED


class NotFound(ServiceError):
    kind = ErrorKind.NOT_FOUND


class AlreadyExists(ServiceError):
    kind = ErrorKind.ALREADY_EXISTS


class FailedPrecondition(ServiceError):
    kind = ErrorKind.FAILED_PRECONDITION


class DeadlineExceeded(ServiceError):
    kind = ErrorKind.DEADLINE_EXCEEDED


class ResourceExhausted(ServiceError):
    kind = ErrorKind.RESOURCE_EXHAUSTED


class InternalError(ServiceError):
    kind = ErrorKind.INTERNAL


async def service_error_handler(request: Request, exc: ServiceError) -> JSONResponse:
    """Render a ServiceError as {"error": kind, "detail": message}."""
    if exc.kind == ErrorKind.INTERNAL:
        logger.error("service_error", kind=exc.kind.value, detail=exc.message, path=request.url.path)
    else:
        logger.info("service_error", kind=exc.kind.value, detail=exc.message, path=request.url.path)
    return JSONResponse(status_code=exc.http_status, content=exc.to_dict())


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Render body, query and path validation failures as invalid-argument."""
    problems = []
    for error in exc.errors():
        field = ".".join(str(p) for p in error.get("loc", ()) if p not in ("body", "query", "path"))
        problems.append({"field": field, "message": error.get("msg", "Invalid value")})

    first = problems[0] if problems else {"field": "", "message": "Invalid request"}
    message = f"{first['field']}: {first['message']}" if first["field"] else first["message"]
    return await service_error_handler(request, InvalidArgument(message, details={"errors": problems}))


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Global exception handler."""
    logger.error("unhandled_error", path=request.url.path, exc_info=exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "error": ErrorKind.INTERNAL.value,
            "detail": str(exc) if settings.DEBUG else "Unexpected error",
        },
    )


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ServiceError, service_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
