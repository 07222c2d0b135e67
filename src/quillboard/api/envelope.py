"""Exception handlers — every failure leaves as an error envelope.

Learn: Routes and services raise; they never build error responses.
Four handlers registered on the app translate what was raised:
- AppError (our domain errors) → its own status and client-safe message
- RequestValidationError (bad body, query or path) → 400 with details
- Starlette HTTPException (unknown route, wrong method) → 404 / 405
- anything else → 500, logged with traceback, message kept generic

401s carry WWW-Authenticate: Bearer so clients know which scheme to use.
"""

from typing import Any, Optional, Sequence

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from quillboard.errors import AppError, ConfigurationError
from quillboard.schemas.common import ErrorEnvelope

logger = structlog.get_logger()

_LOCATIONS = ("body", "query", "path", "header", "cookie")


def error_response(
    status_code: int,
    message: str,
    details: Optional[list[dict[str, Any]]] = None,
    headers: Optional[dict[str, str]] = None,
) -> JSONResponse:
    body = ErrorEnvelope(error=message, details=details).model_dump(exclude_none=True)
    if status_code == 401:
        headers = {**(headers or {}), "WWW-Authenticate": "Bearer"}
    return JSONResponse(status_code=status_code, content=body, headers=headers)


def _field_name(loc: Sequence[Any]) -> str:
    parts = list(loc)
    if len(parts) > 1 and parts[0] in _LOCATIONS:
        parts = parts[1:]
    return ".".join(str(p) for p in parts)


# ─── Handlers ────────────────────────────────────────────


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("request.app_error", path=request.url.path, error=exc.message)
    return error_response(exc.status_code, exc.message, exc.details)


async def configuration_error_handler(request: Request, exc: ConfigurationError) -> JSONResponse:
    logger.error("request.misconfigured", path=request.url.path, error=str(exc))
    return error_response(500, "Internal server error")


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    details = [
        {"field": _field_name(err.get("loc", ())), "message": err.get("msg", "Invalid value")}
        for err in exc.errors()
    ]
    logger.info("request.validation_failed", path=request.url.path, fields=[d["field"] for d in details])
    return error_response(400, "Validation failed", details)


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    if exc.status_code == 405:
        message = "Method not allowed"
    elif exc.status_code == 404 and exc.detail == "Not Found":
        message = "Not found"
    else:
        message = str(exc.detail)
    return error_response(exc.status_code, message, headers=getattr(exc, "headers", None))


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("request.unhandled_error", method=request.method, path=request.url.path)
    return error_response(500, "Internal server error")


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(ConfigurationError, configuration_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
