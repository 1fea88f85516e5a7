"""
sso_gateway.api.errors

Error rendering shared by exception handlers and the gateway middleware.

Responsibilities:
- Render `GatewayError` as `{success: false, message, reason}` with its status.
- Give framework HTTP errors (unknown API path, bad method) the same shape.
- Report a malformed login body as an ordinary credential failure.
"""

from __future__ import annotations

from fastapi import FastAPI, Request
from fastapi.exception_handlers import request_validation_exception_handler
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from sso_gateway.errors import GatewayError, InvalidCredentials
from sso_gateway.observability.logging import get_logger

log = get_logger(__name__)

_HTTP_REASONS = {
    401: "unauthenticated",
    404: "not_found",
    405: "method_not_allowed",
}


def error_body(*, message: str, reason: str) -> dict[str, object]:
    return {"success": False, "message": message, "reason": reason}


def error_response(exc: GatewayError) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(message=exc.message, reason=exc.reason),
        headers=exc.headers,
    )


async def _gateway_error_handler(_: Request, exc: GatewayError) -> JSONResponse:
    return error_response(exc)


async def _http_error_handler(_: Request, exc: StarletteHTTPException) -> JSONResponse:
    reason = _HTTP_REASONS.get(exc.status_code, "http_error")
    message = "Not found" if exc.status_code == 404 else str(exc.detail)
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(message=message, reason=reason),
        headers=getattr(exc, "headers", None),
    )


async def _validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    settings = request.app.state.settings
    if request.url.path == f"{settings.auth_prefix}/login":
        # Missing or non-string fields must look like any other failed login.
        log.info("login_failed", cause="malformed_request")
        return error_response(InvalidCredentials())
    return await request_validation_exception_handler(request, exc)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(GatewayError, _gateway_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(StarletteHTTPException, _http_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, _validation_error_handler)  # type: ignore[arg-type]
