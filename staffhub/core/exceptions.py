"""
Custom exceptions for StaffHub API.
One taxonomy for every failure: raised by the backend client and services,
converted to HTTP responses by the handlers registered in main.
"""
import logging
from typing import List, Optional

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class StaffHubException(Exception):
    """Base exception for StaffHub"""
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    kind = "error"

    def __init__(self, message: str = "An error occurred"):
        self.message = message
        super().__init__(self.message)


class NotFoundError(StaffHubException):
    """Resource not found"""
    status_code = status.HTTP_404_NOT_FOUND
    kind = "not_found"

    def __init__(self, resource: str = "Resource", resource_id: Optional[str] = None):
        message = f"{resource} not found"
        if resource_id:
            message = f"{resource} with id '{resource_id}' not found"
        super().__init__(message)


class AlreadyExistsError(StaffHubException):
    """Resource already exists"""
    status_code = status.HTTP_409_CONFLICT
    kind = "already_exists"

    def __init__(self, resource: str = "Resource", field: Optional[str] = None, value: Optional[str] = None):
        if field and value:
            message = f"{resource} with {field} '{value}' already exists"
        else:
            message = f"{resource} already exists"
        super().__init__(message)


class UnauthorizedError(StaffHubException):
    """Authentication failed"""
    status_code = status.HTTP_401_UNAUTHORIZED
    kind = "unauthorized"

    def __init__(self, message: str = "Could not validate credentials"):
        super().__init__(message)


class ForbiddenError(StaffHubException):
    """Access denied"""
    status_code = status.HTTP_403_FORBIDDEN
    kind = "forbidden"

    def __init__(self, message: str = "You don't have permission to access this resource"):
        super().__init__(message)


class ValidationError(StaffHubException):
    """Validation failed"""
    status_code = status.HTTP_422_UNPROCESSABLE_ENTITY
    kind = "validation"

    def __init__(self, message: str = "Validation failed", field: Optional[str] = None):
        if field:
            message = f"Validation failed for field '{field}': {message}"
        self.field = field
        super().__init__(message)


class UpstreamUnavailableError(StaffHubException):
    """Hosted backend call failed or could not be made"""
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    kind = "upstream_unavailable"

    def __init__(
        self,
        service: str = "Backend",
        message: Optional[str] = None,
        upstream_status: Optional[int] = None
    ):
        msg = f"{service} call failed"
        if message:
            msg = f"{msg}: {message}"
        self.upstream_status = upstream_status
        super().__init__(msg)


class ConfigurationError(StaffHubException):
    """Required configuration is missing or invalid"""
    kind = "configuration"

    def __init__(self, message: str = "Invalid configuration", missing: Optional[List[str]] = None):
        self.missing = missing or []
        super().__init__(message)


# HTTP helpers
def raise_not_found(resource: str = "Resource", resource_id: Optional[str] = None):
    """Raise NotFoundError (404)"""
    raise NotFoundError(resource, resource_id)


def raise_unauthorized(message: str = "Could not validate credentials"):
    """Raise UnauthorizedError (401)"""
    raise UnauthorizedError(message)


def raise_forbidden(message: str = "You don't have permission to access this resource"):
    """Raise ForbiddenError (403)"""
    raise ForbiddenError(message)


def raise_validation_error(message: str = "Validation failed", field: Optional[str] = None):
    """Raise ValidationError (422)"""
    raise ValidationError(message, field)


def register_exception_handlers(app: FastAPI) -> None:
    """Map the StaffHub taxonomy onto JSON error responses."""

    @app.exception_handler(StaffHubException)
    async def handle_staffhub_exception(request: Request, exc: StaffHubException):
        if exc.status_code >= 500:
            logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
        headers = None
        if isinstance(exc, UnauthorizedError):
            headers = {"WWW-Authenticate": "Bearer"}
        return JSONResponse(
            status_code=exc.status_code,
            content={"detail": exc.message, "error": exc.kind},
            headers=headers,
        )

    @app.exception_handler(Exception)
    async def handle_unexpected_exception(request: Request, exc: Exception):
        logger.exception(f"Unhandled error on {request.method} {request.url.path}")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"detail": "Something went wrong", "error": "internal"},
        )
