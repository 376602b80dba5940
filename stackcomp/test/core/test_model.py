from __future__ import annotations

import json

from stackcomp.core.capabilities import OriginClass
from stackcomp.core.model import (
    AccessGrant,
    ActionTable,
    Compute,
    Context,
    DirectFetch,
    Entrypoint,
    FirewallRule,
    Origin,
    PrivateNetworkOrigin,
    ResolutionResult,
    ResolvedOrigin,
    RewriteRule,
    RouteTable,
    RouteTableEntry,
    SignedOriginAccess,
    Stack,
    Storage,
    resource_kind,
)


class TestRewriteRule:
    def test_strips_prefix(self) -> None:
        assert RewriteRule("/api").apply("/api/users") == "/users"

    def test_prefix_with_trailing_slash_keeps_leading_slash(self) -> None:
        assert RewriteRule("/api/").apply("/api/v1/users") == "/v1/users"

    def test_exact_prefix_becomes_root(self) -> None:
        assert RewriteRule("/api").apply("/api") == "/"

    def test_non_matching_unchanged(self) -> None:
        assert RewriteRule("/api").apply("/static/app.js") == "/static/app.js"

    def test_root_prefix_never_strips(self) -> None:
        assert RewriteRule("/").apply("/index.html") == "/index.html"


def _table() -> RouteTable:
    return RouteTable(
        entrypoint="site",
        entries=(
            RouteTableEntry("/api/v2/*", "api-v2", RewriteRule("/api/v2/")),
            RouteTableEntry("/api/*", "api", RewriteRule("/api/")),
            RouteTableEntry("*", "static"),
        ),
        origins=(
            ResolvedOrigin("api-v2", "/api/v2/", "", OriginClass.OTHER, DirectFetch()),
            ResolvedOrigin("api", "/api/", "fn.aws", OriginClass.FUNCTION, SignedOriginAccess("s1-site-lambda-oac", "lambda")),
            ResolvedOrigin("static", "/", "", OriginClass.OBJECT_STORAGE, SignedOriginAccess("s1-site-s3-oac", "s3")),
        ),
    )


class TestRouteTable:
    def test_match_most_specific(self) -> None:
        assert _table().match("/api/v2/items") == ("api-v2", "/items")

    def test_match_shorter_prefix(self) -> None:
        assert _table().match("/api/users") == ("api", "/users")

    def test_match_falls_back_to_default(self) -> None:
        assert _table().match("/index.html") == ("static", "/index.html")

    def test_default_origin_is_last_entry(self) -> None:
        assert _table().default_origin == "static"

    def test_origin_lookup(self) -> None:
        table = _table()
        api = table.origin("api")
        assert api is not None
        assert api.origin_class is OriginClass.FUNCTION
        assert table.origin("missing") is None

    def test_to_dict(self) -> None:
        data = _table().to_dict()
        assert data["entries"][0] == {
            "path_pattern": "/api/v2/*",
            "target_origin_id": "api-v2",
            "strip_prefix": "/api/v2/",
        }
        assert data["entries"][-1]["strip_prefix"] is None
        assert data["origins"][1]["access"] == {
            "strategy": "signed",
            "credential_id": "s1-site-lambda-oac",
            "origin_type": "lambda",
        }


def test_private_network_access_to_dict() -> None:
    origin = ResolvedOrigin(
        "svc",
        "/svc/",
        "svc.internal",
        OriginClass.LOAD_BALANCED,
        PrivateNetworkOrigin("s1-site-svc-vpc-origin", "arn:lb", FirewallRule(80, "pl-1")),
    )
    assert origin.to_dict()["access"] == {
        "strategy": "private_network",
        "binding_id": "s1-site-svc-vpc-origin",
        "load_balancer": "arn:lb",
        "firewall": {"protocol": "tcp", "port": 80, "source_prefix_list": "pl-1"},
    }


def test_action_table_unknown_intent() -> None:
    table = ActionTable(kind="bucket", read=("s3:GetObject",), write=(), delete=())
    assert table.actions_for("read") == ("s3:GetObject",)
    assert table.actions_for("admin") is None


def test_resource_kind_and_find() -> None:
    stack = Stack("acme", "s1", (Storage("files"), Compute("api"), Entrypoint("site")))
    assert [resource_kind(r) for r in stack.resources] == ["storage", "compute", "entrypoint"]
    assert stack.find("api") == Compute("api")
    assert stack.find("missing") is None


def test_origin_is_default() -> None:
    assert Origin("static", "/").is_default
    assert not Origin("api", "/api/").is_default


def test_context_to_dict_only_compute_has_environment() -> None:
    storage = Context("files", "storage", "s1", "s1-files")
    compute = Context("api", "compute", "s1", "s1-api", environment={"STACK_ID": "s1"})
    assert "environment" not in storage.to_dict()
    assert compute.to_dict()["environment"] == {"STACK_ID": "s1"}
    assert compute.to_dict()["schedules"] == []


def test_to_json_is_canonical() -> None:
    grant = AccessGrant("files", "api", "role/api", "s1-files", frozenset({"s3:PutObject", "s3:GetObject"}))
    result = ResolutionResult(
        stack_id="s1",
        contexts={"files": Context("files", "storage", "s1", "s1-files", grants=(grant,))},
        grants=(grant,),
        route_tables={},
        schedules={},
    )
    text = result.to_json()
    assert text.endswith("\n")
    data = json.loads(text)
    assert data["grants"][0]["actions"] == ["s3:GetObject", "s3:PutObject"]
    assert text == json.dumps(data, indent=2, sort_keys=True) + "\n"
