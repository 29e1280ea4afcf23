"""Translate application errors into JSON responses."""

from datetime import datetime, timezone
from typing import Any, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from ..config import Settings, get_settings
from .errors import AppError, DatabaseError, ErrorKind, InternalError, ValidationError
from .logging import get_logger

logger = get_logger("errors")

_KIND_BY_STATUS = {
    400: ErrorKind.BAD_REQUEST,
    401: ErrorKind.AUTHENTICATION,
    403: ErrorKind.FORBIDDEN,
    404: ErrorKind.NOT_FOUND,
    405: ErrorKind.BAD_REQUEST,
    409: ErrorKind.CONFLICT,
    429: ErrorKind.RATE_LIMITED,
}


def _settings_for(request: Request) -> Settings:
    # honour test overrides of the settings dependency
    factory = request.app.dependency_overrides.get(get_settings, get_settings)
    return factory()


def _error_body(
    code: str, kind: str, message: str, details: Optional[dict[str, Any]]
) -> dict[str, Any]:
    return {
        "error": code,
        "kind": kind,
        "message": message,
        "details": details,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


def _respond(request: Request, exc: AppError, cause: Optional[BaseException] = None):
    status_code = exc.status_code
    details = exc.details
    log_extra = {
        "path": request.url.path,
        "method": request.method,
        "error_code": exc.code,
        "status_code": status_code,
    }

    if status_code >= 500:
        logger.error(exc.message, extra=log_extra, exc_info=cause or exc)
        if _settings_for(request).debug:
            source = cause or exc
            details = {
                **(details or {}),
                "exception_type": type(source).__name__,
                "exception_message": str(source),
            }
        else:
            details = None
    elif status_code in (401, 403):
        logger.warning(exc.message, extra=log_extra)
    else:
        logger.info(exc.message, extra=log_extra)

    headers = {"WWW-Authenticate": "Bearer"} if status_code == 401 else None
    return JSONResponse(
        status_code=status_code,
        content=_error_body(exc.code, exc.kind.value, exc.message, details),
        headers=headers,
    )


async def app_error_handler(request: Request, exc: AppError):
    return _respond(request, exc, exc.__cause__)


async def request_validation_handler(request: Request, exc: RequestValidationError):
    fields = [
        {
            "field": ".".join(str(part) for part in err.get("loc", ()) if part != "body"),
            "message": err.get("msg", "invalid value"),
        }
        for err in exc.errors()
    ]
    return _respond(request, ValidationError(details={"fields": fields}))


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    kind = _KIND_BY_STATUS.get(exc.status_code, ErrorKind.INTERNAL)
    error = AppError(
        message=str(exc.detail),
        code=kind.value.upper(),
        status_code=exc.status_code,
    )
    error.kind = kind
    return _respond(request, error)


async def database_error_handler(request: Request, exc: SQLAlchemyError):
    return _respond(request, DatabaseError(), exc)


async def unhandled_error_handler(request: Request, exc: Exception):
    return _respond(request, InternalError(), exc)


def register_error_handlers(app: FastAPI) -> None:
    """Attach the error handlers to the application."""
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(SQLAlchemyError, database_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
