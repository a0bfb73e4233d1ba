from __future__ import annotations

import logging
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from user_directory.services.accounts import AccountError
from user_directory.services.media import MediaStorageError

logger = logging.getLogger(__name__)


def error_response(status_code: int, message: str, error: Any = None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"success": False, "message": message, "error": error},
    )


def _request_id(request: Request) -> str:
    return getattr(request.state, "request_id", None) or "-"


def _describe_validation_error(exc: RequestValidationError) -> str:
    parts: list[str] = []
    for err in exc.errors():
        loc = ".".join(str(x) for x in err.get("loc", ()) if x not in ("body", "query", "path"))
        msg = err.get("msg") or "invalid"
        parts.append(f"{loc}: {msg}" if loc else msg)
    return "; ".join(parts) or "Invalid request"


async def account_error_handler(request: Request, exc: AccountError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(
            "[%s] %s %s failed: %s", _request_id(request), request.method, request.url.path, exc.message
        )
    return error_response(exc.status_code, exc.message, exc.code)


async def media_error_handler(request: Request, exc: MediaStorageError) -> JSONResponse:
    logger.error(
        "[%s] %s %s media storage error: %s", _request_id(request), request.method, request.url.path, exc
    )
    return error_response(exc.status_code, "Failed to upload image", str(exc))


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:  # noqa: ARG001
    return error_response(400, _describe_validation_error(exc), "invalid_input")


async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:  # noqa: ARG001
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "message": str(exc.detail), "error": None},
        headers=getattr(exc, "headers", None),
    )


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(
        "[%s] Server error on %s %s: %s",
        _request_id(request),
        request.method,
        request.url.path,
        exc,
        exc_info=exc,
    )
    return error_response(500, "Internal server error", str(exc))


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AccountError, account_error_handler)
    app.add_exception_handler(MediaStorageError, media_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
