"""
sso_gateway.proxy.forwarder

HTTP forwarding for the `Proxy` disposition.

Responsibilities:
- Build the outbound request (method, body, query preserved) to the rule's backend.
- Strip hop-by-hop headers and any client-supplied copy of a trust header.
- Set X-Forwarded-* and X-Request-ID from what the gateway itself observed.
- Inject the rule's trust headers, rendered against the session principal.
- Relay status, headers and body back; map backend request failures to BackendUnavailable.
"""

from __future__ import annotations

import time

import httpx
from starlette.requests import Request
from starlette.responses import Response

from sso_gateway.auth.models import Session
from sso_gateway.errors import BackendUnavailable
from sso_gateway.observability.logging import get_logger
from sso_gateway.routing.rules import RouteRule

log = get_logger(__name__)

HOP_BY_HOP_HEADERS = frozenset(
    {
        "connection",
        "keep-alive",
        "proxy-authenticate",
        "proxy-authorization",
        "te",
        "trailer",
        "trailers",
        "transfer-encoding",
        "upgrade",
    }
)


def _connection_tokens(headers: httpx.Headers) -> set[str]:
    # Headers listed in `Connection` are hop-by-hop for this hop only.
    tokens: set[str] = set()
    for value in headers.get_list("connection"):
        tokens.update(t.strip().lower() for t in value.split(",") if t.strip())
    return tokens


def _without_cookie(cookie_header: str, name: str) -> str:
    kept = [
        part.strip()
        for part in cookie_header.split(";")
        if part.strip() and part.split("=", 1)[0].strip() != name
    ]
    return "; ".join(kept)


class ProxyForwarder:
    """
    One attempt per request; backends are not assumed idempotent.
    """

    def __init__(
        self,
        *,
        http: httpx.AsyncClient,
        session_cookie_name: str,
        timeout_seconds: float,
    ) -> None:
        self._http = http
        self._session_cookie_name = session_cookie_name
        self._timeout_seconds = timeout_seconds

    def outbound_headers(
        self, request: Request, rule: RouteRule, session: Session | None
    ) -> list[tuple[str, str]]:
        inbound = httpx.Headers(request.headers.raw)
        dropped = (
            HOP_BY_HOP_HEADERS
            | _connection_tokens(inbound)
            | rule.injected_header_names()
            | {"host", "content-length", "x-request-id"}
        )

        headers: list[tuple[str, str]] = []
        for name, value in inbound.multi_items():
            lname = name.lower()
            if lname in dropped or lname.startswith("x-forwarded-"):
                continue
            if lname == "cookie":
                # The gateway session is a gateway credential; backends never see it.
                value = _without_cookie(value, self._session_cookie_name)
                if not value:
                    continue
            headers.append((name, value))

        if request.client is not None:
            headers.append(("X-Forwarded-For", request.client.host))
        headers.append(("X-Forwarded-Host", request.headers.get("host", "")))
        headers.append(("X-Forwarded-Proto", request.url.scheme))
        request_id = getattr(request.state, "request_id", None)
        if request_id:
            headers.append(("X-Request-ID", request_id))

        values = session.principal.template_values() if session is not None else None
        headers.extend(rule.render_headers(values))
        return headers

    @staticmethod
    def inbound_headers(upstream: httpx.Response, content_length: int) -> list[tuple[bytes, bytes]]:
        # httpx hands back the decoded body, so the upstream encoding/length no longer apply.
        dropped = (
            HOP_BY_HOP_HEADERS
            | _connection_tokens(upstream.headers)
            | {"content-length", "content-encoding"}
        )
        raw = [
            (name.lower(), value)
            for name, value in upstream.headers.raw
            if name.decode("latin-1").lower() not in dropped
        ]
        raw.append((b"content-length", str(content_length).encode("latin-1")))
        return raw

    async def forward(self, request: Request, rule: RouteRule, session: Session | None) -> Response:
        url = rule.target_url(request.url.path, request.url.query)
        body = await request.body()
        outbound = self._http.build_request(
            request.method,
            url,
            headers=self.outbound_headers(request, rule, session),
            content=body,
            timeout=rule.timeout_seconds or self._timeout_seconds,
        )

        started = time.perf_counter()
        try:
            upstream = await self._http.send(outbound)
            content = upstream.content
        except httpx.RequestError as e:
            # Transport failures and undecodable bodies alike; the caller only sees a 502.
            log.warning(
                "proxy_backend_unavailable",
                route=rule.name,
                target=rule.backend_target,
                error_type=type(e).__name__,
                duration_ms=round((time.perf_counter() - started) * 1000, 2),
            )
            raise BackendUnavailable() from e

        log.info(
            "proxy_forwarded",
            route=rule.name,
            status=upstream.status_code,
            username=session.principal.username if session is not None else None,
            duration_ms=round((time.perf_counter() - started) * 1000, 2),
        )
        response = Response(content=content, status_code=upstream.status_code)
        response.raw_headers = self.inbound_headers(upstream, len(content))
        return response


# --- Module Notes -----------------------------------------------------------
# The shared AsyncClient is created once at startup (see api.app); each request
# awaits its own backend call, so one slow backend never stalls unrelated requests.
