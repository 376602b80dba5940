"""Stack graph and resolution output types.

Declared types (Stack, Storage, Compute, Entrypoint, Consumer, ScheduleSpec,
Origin) come from the external planner. Everything else is derived by a
resolution pass and owned by its ResolutionResult.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Literal

from .capabilities import OriginClass

__all__ = [
    "INTENTS",
    "AccessGrant",
    "ActionTable",
    "Compute",
    "Consumer",
    "Context",
    "DirectFetch",
    "Entrypoint",
    "FirewallRule",
    "Origin",
    "OriginAccess",
    "PrivateNetworkOrigin",
    "ResolutionResult",
    "ResolvedOrigin",
    "ResolvedSchedule",
    "Resource",
    "ResourceKind",
    "RewriteRule",
    "RouteTable",
    "RouteTableEntry",
    "ScheduleSpec",
    "SignedOriginAccess",
    "Stack",
    "Storage",
    "resource_kind",
]

INTENTS: tuple[str, ...] = ("read", "write", "delete")

ResourceKind = Literal["storage", "compute", "entrypoint"]

DEFAULT_PATH = "/"
DEFAULT_PATTERN = "*"


# -----------------------------------------------------------------------------
# Declared stack graph
# -----------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Consumer:
    """An identity holder requesting access to a storage resource."""

    name: str
    identity: str
    intents: frozenset[str] = frozenset()


@dataclass(frozen=True, slots=True)
class ScheduleSpec:
    name: str
    cron_expression: str
    target_path: str


@dataclass(frozen=True, slots=True)
class Origin:
    """A routable destination behind an entrypoint.

    Attributes:
        name: Origin id, unique within the entrypoint.
        path_prefix: Requests starting with this prefix go here ("/" = default).
        domain_name: Host the edge forwards to.
        base_path: Prefix stripped before forwarding; defaults to path_prefix.
        capability_keys: Discovered capability key -> provider handle.
    """

    name: str
    path_prefix: str
    domain_name: str = ""
    base_path: str | None = None
    capability_keys: dict[str, str] = field(default_factory=dict)

    @property
    def is_default(self) -> bool:
        return self.path_prefix == DEFAULT_PATH


@dataclass(frozen=True, slots=True)
class Storage:
    name: str
    kind: str = "bucket"
    consumers: tuple[Consumer, ...] = ()
    tags: dict[str, str] = field(default_factory=dict)
    exports: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class Compute:
    name: str
    schedules: tuple[ScheduleSpec, ...] = ()
    tags: dict[str, str] = field(default_factory=dict)
    exports: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class Entrypoint:
    name: str
    origins: tuple[Origin, ...] = ()
    domain: str | None = None
    tags: dict[str, str] = field(default_factory=dict)
    exports: dict[str, str] = field(default_factory=dict)


Resource = Storage | Compute | Entrypoint


def resource_kind(resource: Resource) -> ResourceKind:
    match resource:
        case Storage():
            return "storage"
        case Compute():
            return "compute"
        case Entrypoint():
            return "entrypoint"
    raise AssertionError(f"unexpected resource: {resource!r}")


@dataclass(frozen=True, slots=True)
class Stack:
    name: str
    stack_id: str
    resources: tuple[Resource, ...] = ()

    def find(self, name: str) -> Resource | None:
        for r in self.resources:
            if r.name == name:
                return r
        return None


@dataclass(frozen=True, slots=True)
class ActionTable:
    """Provider actions granted for each intent on one kind of storage."""

    kind: str
    read: tuple[str, ...]
    write: tuple[str, ...]
    delete: tuple[str, ...]

    def actions_for(self, intent: str) -> tuple[str, ...] | None:
        match intent:
            case "read":
                return self.read
            case "write":
                return self.write
            case "delete":
                return self.delete
            case _:
                return None


# -----------------------------------------------------------------------------
# Derived values
# -----------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class AccessGrant:
    resource_ref: str
    consumer_ref: str
    identity: str
    resource_id: str
    actions: frozenset[str]

    def to_dict(self) -> dict[str, object]:
        return {
            "resource": self.resource_ref,
            "consumer": self.consumer_ref,
            "identity": self.identity,
            "resource_id": self.resource_id,
            "actions": sorted(self.actions),
        }


@dataclass(frozen=True, slots=True)
class ResolvedSchedule:
    name: str
    physical_id: str
    cron_expression: str
    provider_expression: str
    target_path: str

    def to_dict(self) -> dict[str, object]:
        return {
            "name": self.name,
            "physical_id": self.physical_id,
            "cron_expression": self.cron_expression,
            "expression": self.provider_expression,
            "target_path": self.target_path,
        }


@dataclass(frozen=True, slots=True)
class SignedOriginAccess:
    """Signed origin-access credential shared by one origin class."""

    credential_id: str
    origin_type: Literal["s3", "lambda"]


@dataclass(frozen=True, slots=True)
class FirewallRule:
    """Inbound rule admitting only the edge network's address range."""

    port: int
    source_prefix_list: str
    protocol: str = "tcp"


@dataclass(frozen=True, slots=True)
class PrivateNetworkOrigin:
    binding_id: str
    load_balancer: str
    firewall: FirewallRule


@dataclass(frozen=True, slots=True)
class DirectFetch:
    """No origin access control; the edge fetches the origin directly."""


OriginAccess = SignedOriginAccess | PrivateNetworkOrigin | DirectFetch


def _access_to_dict(access: OriginAccess) -> dict[str, object]:
    match access:
        case SignedOriginAccess(credential_id=credential_id, origin_type=origin_type):
            return {"strategy": "signed", "credential_id": credential_id, "origin_type": origin_type}
        case PrivateNetworkOrigin(binding_id=binding_id, load_balancer=lb, firewall=fw):
            return {
                "strategy": "private_network",
                "binding_id": binding_id,
                "load_balancer": lb,
                "firewall": {
                    "protocol": fw.protocol,
                    "port": fw.port,
                    "source_prefix_list": fw.source_prefix_list,
                },
            }
        case DirectFetch():
            return {"strategy": "direct"}
    raise AssertionError(f"unexpected access strategy: {access!r}")


@dataclass(frozen=True, slots=True)
class ResolvedOrigin:
    origin_id: str
    path_prefix: str
    domain_name: str
    origin_class: OriginClass
    access: OriginAccess

    def to_dict(self) -> dict[str, object]:
        return {
            "origin_id": self.origin_id,
            "path_prefix": self.path_prefix,
            "domain_name": self.domain_name,
            "class": str(self.origin_class),
            "access": _access_to_dict(self.access),
        }


@dataclass(frozen=True, slots=True)
class RewriteRule:
    """Strip a prefix from the forwarded path; an empty remainder becomes "/"."""

    strip_prefix: str

    def apply(self, uri: str) -> str:
        prefix = self.strip_prefix
        if prefix == DEFAULT_PATH or not uri.startswith(prefix):
            return uri
        rest = uri[len(prefix) :]
        if not rest:
            return DEFAULT_PATH
        return rest if rest.startswith("/") else "/" + rest


@dataclass(frozen=True, slots=True)
class RouteTableEntry:
    path_pattern: str
    target_origin_id: str
    rewrite: RewriteRule | None = None

    def matches(self, path: str) -> bool:
        return path.startswith(self.path_pattern.removesuffix("*"))

    def to_dict(self) -> dict[str, object]:
        return {
            "path_pattern": self.path_pattern,
            "target_origin_id": self.target_origin_id,
            "strip_prefix": self.rewrite.strip_prefix if self.rewrite else None,
        }


@dataclass(frozen=True, slots=True)
class RouteTable:
    """Ordered routes for one entrypoint; the default entry is always last.

    `rewrite_prefixes` lists the non-default strip prefixes in declaration
    order, for an edge rewrite function that tries them first to last.
    """

    entrypoint: str
    entries: tuple[RouteTableEntry, ...]
    origins: tuple[ResolvedOrigin, ...]
    credentials: tuple[SignedOriginAccess, ...] = ()
    rewrite_prefixes: tuple[str, ...] = ()

    @property
    def default_origin(self) -> str:
        return self.entries[-1].target_origin_id

    def origin(self, origin_id: str) -> ResolvedOrigin | None:
        for o in self.origins:
            if o.origin_id == origin_id:
                return o
        return None

    def match(self, path: str) -> tuple[str, str]:
        """Return (target origin id, forwarded path) for a request path."""
        for entry in self.entries:
            if entry.matches(path):
                forwarded = entry.rewrite.apply(path) if entry.rewrite else path
                return entry.target_origin_id, forwarded
        raise AssertionError("route table without a default entry")

    def to_dict(self) -> dict[str, object]:
        return {
            "entrypoint": self.entrypoint,
            "entries": [e.to_dict() for e in self.entries],
            "origins": [o.to_dict() for o in self.origins],
            "credentials": [
                {"credential_id": c.credential_id, "origin_type": c.origin_type}
                for c in self.credentials
            ],
            "rewrite_prefixes": list(self.rewrite_prefixes),
        }


@dataclass(frozen=True, slots=True)
class Context:
    """Everything the provisioning layer needs to build one resource."""

    resource: str
    kind: ResourceKind
    stack_id: str
    physical_id: str
    grants: tuple[AccessGrant, ...] = ()
    route_table: RouteTable | None = None
    schedules: tuple[ResolvedSchedule, ...] = ()
    environment: dict[str, str] = field(default_factory=dict)
    tags: dict[str, str] = field(default_factory=dict)

    def to_dict(self) -> dict[str, object]:
        out: dict[str, object] = {
            "resource": self.resource,
            "kind": self.kind,
            "stack_id": self.stack_id,
            "physical_id": self.physical_id,
            "grants": [g.to_dict() for g in self.grants],
            "tags": dict(self.tags),
        }
        if self.route_table is not None:
            out["route_table"] = self.route_table.to_dict()
        if self.kind == "compute":
            out["schedules"] = [s.to_dict() for s in self.schedules]
            out["environment"] = dict(self.environment)
        return out


@dataclass(frozen=True, slots=True)
class ResolutionResult:
    stack_id: str
    contexts: dict[str, Context]
    grants: tuple[AccessGrant, ...]
    route_tables: dict[str, RouteTable]
    schedules: dict[str, str]

    def to_dict(self) -> dict[str, object]:
        return {
            "stack_id": self.stack_id,
            "contexts": {name: c.to_dict() for name, c in self.contexts.items()},
            "grants": [g.to_dict() for g in self.grants],
            "route_tables": {name: t.to_dict() for name, t in self.route_tables.items()},
            "schedules": dict(self.schedules),
        }

    def to_json(self) -> str:
        """Canonical rendering: identical stacks give byte-identical text."""
        return json.dumps(self.to_dict(), indent=2, sort_keys=True) + "\n"
