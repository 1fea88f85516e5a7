"""
sso_gateway.routing.middleware

Gateway dispatch: every request passes through here first.

Responsibilities:
- Resolve the caller's session (skipped for delegated paths).
- Ask the Route Classifier for a disposition and carry it out.
- Render failures with the same error shape as the API handlers.
"""

from __future__ import annotations

import asyncio

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import FileResponse, Response

from sso_gateway.api.errors import error_response
from sso_gateway.auth.deps import resolve_session
from sso_gateway.errors import GatewayError, MethodNotAllowed, NotFound, Unauthenticated
from sso_gateway.observability.logging import get_logger
from sso_gateway.routing.classifier import (
    Delegate,
    Proxy,
    Reject,
    RejectReason,
    RouteClassifier,
    SpaFallback,
    StaticAsset,
)

log = get_logger(__name__)


class GatewayMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next) -> Response:
        state = request.app.state
        classifier: RouteClassifier = state.classifier
        path = request.url.path

        # Session endpoints resolve the session themselves via FastAPI dependencies.
        if classifier.delegates(path):
            return await call_next(request)

        try:
            session = await resolve_session(
                request,
                store=state.session_store,
                cookie_name=state.settings.session_cookie_name,
            )
            # Path resolution touches the filesystem; keep it off the event loop.
            result = await asyncio.to_thread(
                classifier.classify, path, session, method=request.method
            )

            if isinstance(result, Delegate):
                return await call_next(request)
            if isinstance(result, StaticAsset):
                return FileResponse(result.resource)
            if isinstance(result, SpaFallback):
                if not await asyncio.to_thread(result.shell.is_file):
                    log.error("spa_shell_missing", shell=str(result.shell))
                    raise NotFound()
                return FileResponse(result.shell, media_type="text/html")
            if isinstance(result, Proxy):
                return await state.forwarder.forward(request, result.rule, result.session)
            if isinstance(result, Reject):
                if result.reason is RejectReason.unauthenticated:
                    raise Unauthenticated()
                if result.reason is RejectReason.method_not_allowed:
                    raise MethodNotAllowed(headers={"Allow": ", ".join(result.allow)})
                raise NotFound()
            raise AssertionError(f"unhandled classification {result!r}")
        except GatewayError as e:
            return error_response(e)


# --- Module Notes -----------------------------------------------------------
# Exception handlers registered on the app do not see errors raised in middleware,
# hence the local rendering through `api.errors.error_response`.
