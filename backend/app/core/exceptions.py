"""
Domain exceptions with safe (non-leaky) messages.

Repositories and route guards raise these; `app.api.exception_handlers`
turns them into the `{success: false, message}` envelope with the matching
HTTP status. Anything that is not an `AppError` becomes a generic 500.
"""
import logging

from fastapi import status

logger = logging.getLogger(__name__)


class AppError(Exception):
    """Base class for errors that carry an HTTP status and a client-safe message."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = "Internal server error"
    log_level: int = logging.ERROR

    def __init__(self, message: str | None = None, reason: str = ""):
        self.message = message or self.default_message
        # Internal detail for the server log only, never sent to the client
        self.reason = reason
        super().__init__(self.message)

    def log(self) -> None:
        detail = f"{self.message} ({self.reason})" if self.reason else self.message
        logger.log(self.log_level, f"{type(self).__name__}: {detail}")


class ValidationFailed(AppError):
    """400 for missing or invalid input. Safe to echo back: the caller caused it."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid input"
    log_level = logging.INFO


class Unauthenticated(AppError):
    """
    401 for every authentication failure.

    Missing, unknown and expired tokens all look the same to the caller.
    """

    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Invalid or expired session"
    log_level = logging.WARNING


class Forbidden(AppError):
    """403 for role or ownership mismatch."""

    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Access denied"
    log_level = logging.WARNING


class NotFound(AppError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Resource not found"
    log_level = logging.INFO


class Conflict(AppError):
    """409 for duplicate unique keys and rows still referenced elsewhere."""

    status_code = status.HTTP_409_CONFLICT
    default_message = "Resource already exists"
    log_level = logging.INFO


class InvalidTransition(AppError):
    """400 when a command is not in the state the requested transition starts from."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid state transition"
    log_level = logging.INFO


class InsufficientStock(AppError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Cannot remove more units than available in stock"
    log_level = logging.INFO
