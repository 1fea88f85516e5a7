"""
sso_gateway.routing.rules

Route Rule configuration and the Route Table.

Responsibilities:
- Validate rules at load time (pattern syntax, backend URL, header templates).
- Compile glob path patterns into anchored regular expressions.
- Render trust-header templates against a principal.
- Match a request path/method to the first applicable rule.
"""

from __future__ import annotations

import re
import string
from collections.abc import Mapping, Sequence
from typing import Any

import httpx
from pydantic import BaseModel, ConfigDict, Field, field_validator

# Placeholders a header value template may reference (see Principal.template_values).
TEMPLATE_FIELDS = frozenset({"id", "username", "email", "role"})

_formatter = string.Formatter()


def template_fields(template: str) -> set[str]:
    return {field for _, field, _, _ in _formatter.parse(template) if field is not None}


def compile_pattern(pattern: str) -> re.Pattern[str]:
    """
    Translate a path glob into an anchored regex.

    `**` spans segments, `*` stays within one segment, `?` is one non-slash
    character. A trailing `/**` also matches the bare prefix.
    """

    tail = ""
    if pattern.endswith("/**"):
        pattern = pattern[: -len("/**")]
        tail = "(?:/.*)?"

    out: list[str] = []
    i = 0
    while i < len(pattern):
        ch = pattern[i]
        if pattern.startswith("**", i):
            out.append(".*")
            i += 2
            continue
        if ch == "*":
            out.append("[^/]*")
        elif ch == "?":
            out.append("[^/]")
        else:
            out.append(re.escape(ch))
        i += 1
    return re.compile("".join(out) + tail + r"\Z")


class RouteRule(BaseModel):
    """
    Maps a path pattern to a backend target and a header-injection policy.
    """

    model_config = ConfigDict(frozen=True)

    name: str = Field(min_length=1)
    path_pattern: str
    backend_target: str
    injected_headers: tuple[tuple[str, str], ...] = ()
    requires_auth: bool = True
    methods: frozenset[str] | None = None
    strip_prefix: str | None = None
    timeout_seconds: float | None = Field(default=None, gt=0)

    @field_validator("path_pattern")
    @classmethod
    def _pattern_is_absolute(cls, v: str) -> str:
        if not v.startswith("/"):
            raise ValueError("path_pattern must start with '/'")
        return v

    @field_validator("backend_target")
    @classmethod
    def _target_is_http(cls, v: str) -> str:
        url = httpx.URL(v)
        if url.scheme not in ("http", "https") or not url.host:
            raise ValueError("backend_target must be an absolute http(s) URL")
        return v.rstrip("/")

    @field_validator("injected_headers")
    @classmethod
    def _templates_are_known(cls, v: tuple[tuple[str, str], ...]) -> tuple[tuple[str, str], ...]:
        for name, template in v:
            if not name or not name.strip():
                raise ValueError("injected header name must not be blank")
            try:
                unknown = template_fields(template) - TEMPLATE_FIELDS
            except ValueError as e:
                raise ValueError(f"malformed template for header {name!r}: {e}") from e
            if unknown:
                raise ValueError(
                    f"header {name!r} references unknown fields: {', '.join(sorted(unknown))}"
                )
        return v

    @field_validator("methods")
    @classmethod
    def _upper_methods(cls, v: frozenset[str] | None) -> frozenset[str] | None:
        if v is None:
            return None
        return frozenset(m.upper() for m in v)

    def injected_header_names(self) -> frozenset[str]:
        return frozenset(name.lower() for name, _ in self.injected_headers)

    def render_headers(self, values: Mapping[str, Any] | None) -> list[tuple[str, str]]:
        """
        Resolve header templates in configured order.

        With no principal values, headers that reference principal fields are
        omitted and literal headers are kept.
        """

        rendered: list[tuple[str, str]] = []
        for name, template in self.injected_headers:
            if template_fields(template):
                if values is None:
                    continue
                rendered.append((name, template.format_map(values)))
            else:
                # Literal value; unescape "{{" / "}}" the same way format would.
                rendered.append((name, template.format()))
        return rendered

    def target_url(self, path: str, query: str = "") -> str:
        if self.strip_prefix and path.startswith(self.strip_prefix):
            path = path[len(self.strip_prefix) :] or "/"
            if not path.startswith("/"):
                path = "/" + path
        url = f"{self.backend_target}{path}"
        return f"{url}?{query}" if query else url


class RouteTable:
    """
    Immutable, ordered collection of Route Rules; first match wins.
    """

    def __init__(self, rules: Sequence[RouteRule], *, api_prefix: str) -> None:
        seen: set[str] = set()
        for rule in rules:
            if rule.name in seen:
                raise ValueError(f"duplicate route name {rule.name!r}")
            seen.add(rule.name)
            # API-prefixed paths are delegated before rules are consulted.
            if rule.path_pattern.startswith(api_prefix):
                raise ValueError(
                    f"route {rule.name!r} pattern {rule.path_pattern!r} lies under the API "
                    f"prefix {api_prefix!r} and can never match"
                )
        self._rules: tuple[tuple[RouteRule, re.Pattern[str]], ...] = tuple(
            (rule, compile_pattern(rule.path_pattern)) for rule in rules
        )

    def __len__(self) -> int:
        return len(self._rules)

    def __iter__(self):
        return (rule for rule, _ in self._rules)

    def match_path(self, path: str) -> RouteRule | None:
        # First rule whose pattern claims the path, whatever its method filter.
        for rule, regex in self._rules:
            if regex.match(path):
                return rule
        return None

    def allowed_methods(self, path: str) -> frozenset[str]:
        # Union over every rule claiming the path; None means any method.
        allowed: set[str] = set()
        for rule, regex in self._rules:
            if regex.match(path) and rule.methods is not None:
                allowed |= rule.methods
        return frozenset(allowed)

    def match(self, path: str, method: str = "GET") -> RouteRule | None:
        method = method.upper()
        for rule, regex in self._rules:
            if rule.methods is not None and method not in rule.methods:
                continue
            if regex.match(path):
                return rule
        return None
