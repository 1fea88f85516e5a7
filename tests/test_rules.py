from __future__ import annotations

import pytest
from pydantic import ValidationError

from sso_gateway.routing.rules import RouteRule, RouteTable, compile_pattern


@pytest.mark.parametrize(
    ("pattern", "path", "expected"),
    [
        ("/svc/users/**", "/svc/users", True),
        ("/svc/users/**", "/svc/users/42", True),
        ("/svc/users/**", "/svc/users/42/orders", True),
        ("/svc/users/**", "/svc/usersx", False),
        ("/svc/*/health", "/svc/billing/health", True),
        ("/svc/*/health", "/svc/a/b/health", False),
        ("/files/**/*.pdf", "/files/a/b/report.pdf", True),
        ("/v?/items", "/v1/items", True),
        ("/v?/items", "/v10/items", False),
        ("/exact", "/exact", True),
        ("/exact", "/exact/more", False),
        ("/a.b", "/aXb", False),
    ],
)
def test_compile_pattern(pattern: str, path: str, expected: bool) -> None:
    assert bool(compile_pattern(pattern).match(path)) is expected


def _rule(**kw) -> RouteRule:
    base = {
        "name": "users",
        "path_pattern": "/svc/users/**",
        "backend_target": "http://users.internal:8082/",
    }
    base.update(kw)
    return RouteRule(**base)


def test_rule_defaults_and_normalization() -> None:
    rule = _rule(methods=["get", "Post"])
    assert rule.requires_auth is True
    assert rule.backend_target == "http://users.internal:8082"
    assert rule.methods == frozenset({"GET", "POST"})


@pytest.mark.parametrize(
    "kw",
    [
        {"path_pattern": "svc/users"},
        {"backend_target": "users.internal"},
        {"backend_target": "ftp://users.internal"},
        {"injected_headers": [("X-User", "{password}")]},
        {"injected_headers": [("X-User", "{username.upper}")]},
        {"injected_headers": [("X-User", "{username")]},
        {"injected_headers": [(" ", "static")]},
        {"name": ""},
        {"timeout_seconds": 0},
    ],
)
def test_rule_rejects_bad_configuration(kw) -> None:
    with pytest.raises(ValidationError):
        _rule(**kw)


def test_rule_parses_json_shape() -> None:
    rule = RouteRule.model_validate_json(
        '{"name": "users", "path_pattern": "/svc/users/**",'
        ' "backend_target": "http://localhost:8082",'
        ' "injected_headers": [["X-Gateway", "SSO-Proxy"], ["X-User", "{username}"]]}'
    )
    assert rule.injected_headers == (("X-Gateway", "SSO-Proxy"), ("X-User", "{username}"))


def test_render_headers_in_order() -> None:
    rule = _rule(
        injected_headers=[
            ("X-Auth-User", "{username}"),
            ("X-Auth-Role", "{role}"),
            ("X-Gateway", "SSO-Proxy"),
            ("X-Literal", "{{braces}}"),
        ]
    )
    values = {"id": 7, "username": "admin", "email": "admin@example.com", "role": "ADMIN"}
    assert rule.render_headers(values) == [
        ("X-Auth-User", "admin"),
        ("X-Auth-Role", "ADMIN"),
        ("X-Gateway", "SSO-Proxy"),
        ("X-Literal", "{braces}"),
    ]


def test_render_headers_without_principal_keeps_literals_only() -> None:
    rule = _rule(
        requires_auth=False,
        injected_headers=[("X-Auth-User", "{username}"), ("X-Gateway", "SSO-Proxy")],
    )
    assert rule.render_headers(None) == [("X-Gateway", "SSO-Proxy")]


def test_target_url() -> None:
    assert _rule().target_url("/svc/users/42", "a=1") == "http://users.internal:8082/svc/users/42?a=1"
    stripped = _rule(strip_prefix="/svc")
    assert stripped.target_url("/svc/users/42") == "http://users.internal:8082/users/42"
    assert _rule(strip_prefix="/svc/users").target_url("/svc/users") == "http://users.internal:8082/"


def test_route_table_first_match_wins() -> None:
    table = RouteTable(
        [
            _rule(name="narrow", path_pattern="/svc/users/admin/**"),
            _rule(name="wide", path_pattern="/svc/**"),
        ],
        api_prefix="/api/",
    )
    assert table.match("/svc/users/admin/1").name == "narrow"
    assert table.match("/svc/other").name == "wide"
    assert table.match("/elsewhere") is None


def test_route_table_respects_methods() -> None:
    table = RouteTable([_rule(methods=["GET"])], api_prefix="/api/")
    assert table.match("/svc/users/1", "get") is not None
    assert table.match("/svc/users/1", "DELETE") is None


def test_route_table_path_claims_ignore_methods() -> None:
    table = RouteTable(
        [_rule(name="reads", methods=["GET"]), _rule(name="writes", methods=["POST"])],
        api_prefix="/api/",
    )
    assert table.match("/svc/users/1", "DELETE") is None
    assert table.match_path("/svc/users/1").name == "reads"
    assert table.allowed_methods("/svc/users/1") == frozenset({"GET", "POST"})
    assert table.allowed_methods("/elsewhere") == frozenset()


def test_route_table_rejects_duplicate_names() -> None:
    with pytest.raises(ValueError, match="duplicate"):
        RouteTable([_rule(), _rule(path_pattern="/other/**")], api_prefix="/api/")


def test_route_table_rejects_rules_under_api_prefix() -> None:
    with pytest.raises(ValueError, match="API prefix"):
        RouteTable([_rule(path_pattern="/api/example/**")], api_prefix="/api/")


def test_empty_route_table() -> None:
    table = RouteTable([], api_prefix="/api/")
    assert len(table) == 0
    assert table.match("/anything") is None
