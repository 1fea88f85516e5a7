"""
sso_gateway.routing.classifier

The Route Classifier: one ordered decision list per request.

Responsibilities:
- Decide between delegate / static asset / proxy / SPA fallback / reject.
- Enforce the session requirement of a rule before returning `Proxy`.
- Resolve static resources strictly inside the asset root.
"""

from __future__ import annotations

import enum
import os
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

from sso_gateway.auth.models import Session
from sso_gateway.routing.rules import RouteRule, RouteTable


class RejectReason(enum.StrEnum):
    unauthenticated = "unauthenticated"
    not_found = "not_found"
    method_not_allowed = "method_not_allowed"


@dataclass(frozen=True, slots=True)
class Delegate:
    # API and operational paths: handled by the application router.
    path: str


@dataclass(frozen=True, slots=True)
class StaticAsset:
    resource: Path


@dataclass(frozen=True, slots=True)
class SpaFallback:
    shell: Path


@dataclass(frozen=True, slots=True)
class Proxy:
    rule: RouteRule
    session: Session | None


@dataclass(frozen=True, slots=True)
class Reject:
    reason: RejectReason
    # Methods the rules claiming the path accept; only set for method_not_allowed.
    allow: tuple[str, ...] = ()


ClassificationResult = Delegate | StaticAsset | SpaFallback | Proxy | Reject


class AssetResolver:
    def __init__(self, root: Path, *, index_document: str = "index.html") -> None:
        self._root = root.resolve()
        self.shell = self._root / index_document

    def resolve(self, path: str) -> Path | None:
        relative = path.lstrip("/")
        if not relative or "\x00" in relative:
            return None
        candidate = (self._root / relative).resolve()
        # Reject `..` and symlinks escaping the root.
        if not candidate.is_relative_to(self._root):
            return None
        if candidate.is_file() and os.access(candidate, os.R_OK):
            return candidate
        return None


class RouteClassifier:
    def __init__(
        self,
        *,
        routes: RouteTable,
        assets: AssetResolver,
        api_prefix: str = "/api/",
        operational_prefixes: Sequence[str] = (),
    ) -> None:
        self._routes = routes
        self._assets = assets
        self._api_prefix = api_prefix
        self._operational_prefixes = tuple(operational_prefixes)

    def delegates(self, path: str) -> bool:
        if path.startswith(self._api_prefix):
            return True
        # `/docs` and `/docs/...` are delegated, `/docsearch` is not.
        return any(
            path == prefix or path.startswith(prefix.rstrip("/") + "/")
            for prefix in self._operational_prefixes
        )

    def classify(
        self,
        path: str,
        session: Session | None = None,
        *,
        has_extension: bool | None = None,
        method: str = "GET",
    ) -> ClassificationResult:
        """
        First match wins; the order below is part of the contract.

        1. API prefix              -> Delegate
        2. operational prefix      -> Delegate
        3. readable file under root -> StaticAsset
        4. Route Rule match        -> Proxy, or Reject(unauthenticated) without a session,
                                      or Reject(method_not_allowed) for a filtered method
        5. no extension            -> SpaFallback
        6. otherwise               -> Reject(not_found)
        """

        if has_extension is None:
            has_extension = "." in path

        if self.delegates(path):
            return Delegate(path)

        resource = self._assets.resolve(path)
        if resource is not None:
            return StaticAsset(resource)

        rule = self._routes.match(path, method)
        claimed = rule or self._routes.match_path(path)
        if claimed is not None:
            if claimed.requires_auth and session is None:
                return Reject(RejectReason.unauthenticated)
            if rule is None:
                # A backend route never falls through to the SPA shell.
                allow = tuple(sorted(self._routes.allowed_methods(path)))
                return Reject(RejectReason.method_not_allowed, allow)
            return Proxy(rule, session)

        # `/` lands here too: not a file, no extension, so it gets the shell.
        if not has_extension:
            return SpaFallback(self._assets.shell)

        return Reject(RejectReason.not_found)
