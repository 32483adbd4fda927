"""
Map every failure onto the {success: false, message} envelope.

Client errors keep their message; anything unexpected becomes a generic 500
with the real error only in the server log.
"""
import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.api.response import err
from app.core.audit import AuditLog
from app.core.exceptions import AppError, Forbidden, Unauthenticated

logger = logging.getLogger(__name__)


def _validation_message(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Invalid input"
    first = errors[0]
    msg = str(first.get("msg", "Invalid input"))
    if msg.startswith("Value error, "):
        msg = msg[len("Value error, "):]
    # Drop the "body"/"query"/"path" prefix and list or byte positions; keep the field name
    loc = [
        part for part in first.get("loc", ())
        if isinstance(part, str) and part not in ("body", "query", "path")
    ]
    if loc and first.get("type") != "value_error":
        return f"{'.'.join(loc)}: {msg}"
    return msg


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
        exc.log()
        if isinstance(exc, Forbidden) and exc.reason:
            AuditLog.log_access_denied(
                request.method,
                request.url.path,
                None,
                getattr(request.state, "identity", None),
                exc.reason,
            )
        headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, Unauthenticated) else None
        return err(exc.message, status_code=exc.status_code, headers=headers)

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        # exc.detail can be str/dict/list
        message = exc.detail if isinstance(exc.detail, str) else "Request failed"
        return err(message, status_code=exc.status_code)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        message = _validation_message(exc)
        logger.info(f"Bad request on {request.method} {request.url.path}: {message}")
        return err(message, status_code=status.HTTP_400_BAD_REQUEST)

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        # Never expose stack traces, SQL errors, or internal paths to users
        logger.error(
            f"Internal server error on {request.method} {request.url.path}: {type(exc).__name__}: {exc}",
            exc_info=exc,
        )
        return err("Internal server error", status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)
