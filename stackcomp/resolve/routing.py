"""Origin classification and path routing for one entrypoint.

Steps, each failing fast:

1. classify every origin by its capability keys;
2. reject repeated origin names and path prefixes, then pick the single
   default origin (path prefix "/");
3. give each origin exactly one access strategy: a signed-access credential
   shared by its class (object storage, functions), a private-network binding
   with an edge-only firewall rule (load balancers), or direct fetch;
4. build the route table: prefixed routes most-specific first, default last.
   The rewrite prefixes handed to the edge keep declaration order.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Literal

from stackcomp.core.capabilities import DOMAIN_NAME_KEY, LOAD_BALANCER_KEY, OriginClass, classify
from stackcomp.core.config import ResolverConfig
from stackcomp.core.errors import (
    AmbiguousOrigin,
    DuplicateOrigin,
    DuplicatePathPrefix,
    MissingDefaultOrigin,
    ResolveError,
)
from stackcomp.core.model import (
    DEFAULT_PATH,
    DEFAULT_PATTERN,
    DirectFetch,
    Entrypoint,
    FirewallRule,
    Origin,
    OriginAccess,
    PrivateNetworkOrigin,
    ResolvedOrigin,
    RewriteRule,
    RouteTable,
    RouteTableEntry,
    SignedOriginAccess,
)
from stackcomp.core.result import Err, Ok, Result
from stackcomp.resolve.naming import normalize

__all__ = [
    "ClassifiedOrigins",
    "build_route_table",
    "classify_origins",
    "rewrite_path",
    "select_access",
    "select_default",
]


@dataclass(frozen=True, slots=True)
class ClassifiedOrigins:
    """Disjoint partition of an entrypoint's origins."""

    object_storage: tuple[Origin, ...] = ()
    function: tuple[Origin, ...] = ()
    load_balanced: tuple[Origin, ...] = ()
    edge_fetched: tuple[Origin, ...] = ()

    def class_of(self, origin_name: str) -> OriginClass:
        groups = (
            (OriginClass.OBJECT_STORAGE, self.object_storage),
            (OriginClass.FUNCTION, self.function),
            (OriginClass.LOAD_BALANCED, self.load_balanced),
        )
        for cls, origins in groups:
            if any(o.name == origin_name for o in origins):
                return cls
        return OriginClass.OTHER


def classify_origins(entrypoint: Entrypoint) -> Result[ClassifiedOrigins, AmbiguousOrigin]:
    groups: dict[OriginClass, list[Origin]] = {cls: [] for cls in OriginClass}

    for origin in entrypoint.origins:
        result = classify(origin.capability_keys, entrypoint=entrypoint.name, origin=origin.name)
        if isinstance(result, Err):
            return result
        groups[result.value].append(origin)

    return Ok(
        ClassifiedOrigins(
            object_storage=tuple(groups[OriginClass.OBJECT_STORAGE]),
            function=tuple(groups[OriginClass.FUNCTION]),
            load_balanced=tuple(groups[OriginClass.LOAD_BALANCED]),
            edge_fetched=tuple(groups[OriginClass.OTHER]),
        )
    )


def select_default(entrypoint: Entrypoint) -> Result[Origin, MissingDefaultOrigin]:
    """Return the one origin routed at "/"; none or several is an error."""
    defaults = [o for o in entrypoint.origins if o.is_default]
    if len(defaults) != 1:
        return Err(
            MissingDefaultOrigin(
                entrypoint=entrypoint.name,
                defaults=tuple(o.name for o in defaults),
            )
        )
    return Ok(defaults[0])


def _credential(
    stack_id: str,
    entrypoint: Entrypoint,
    origin_type: Literal["s3", "lambda"],
) -> Result[SignedOriginAccess, ResolveError]:
    match normalize(stack_id, f"{entrypoint.name}-{origin_type}-oac"):
        case Ok(value=credential_id):
            return Ok(SignedOriginAccess(credential_id=credential_id, origin_type=origin_type))
        case Err() as err:
            return err


def select_access(
    stack_id: str,
    entrypoint: Entrypoint,
    classified: ClassifiedOrigins,
    config: ResolverConfig,
) -> Result[tuple[dict[str, OriginAccess], tuple[SignedOriginAccess, ...]], ResolveError]:
    """Assign one access strategy per origin.

    Returns the strategy by origin name, plus the shared credentials created
    for this entrypoint (at most one per class, only for non-empty classes).
    """
    access: dict[str, OriginAccess] = {}
    credentials: list[SignedOriginAccess] = []

    signed_classes: tuple[tuple[tuple[Origin, ...], Literal["s3", "lambda"]], ...] = (
        (classified.object_storage, "s3"),
        (classified.function, "lambda"),
    )
    for members, origin_type in signed_classes:
        if not members:
            continue
        result = _credential(stack_id, entrypoint, origin_type)
        if isinstance(result, Err):
            return result
        credentials.append(result.value)
        for origin in members:
            access[origin.name] = result.value

    firewall = FirewallRule(
        port=config.edge.load_balancer_port,
        source_prefix_list=config.edge.origin_facing_prefix_list,
    )
    for origin in classified.load_balanced:
        binding = normalize(stack_id, f"{entrypoint.name}-{origin.name}-vpc-origin")
        if isinstance(binding, Err):
            return binding
        access[origin.name] = PrivateNetworkOrigin(
            binding_id=binding.value,
            load_balancer=origin.capability_keys[LOAD_BALANCER_KEY],
            firewall=firewall,
        )

    for origin in classified.edge_fetched:
        access[origin.name] = DirectFetch()

    return Ok((access, tuple(credentials)))


def rewrite_path(prefixes: Sequence[str], uri: str) -> str:
    """Strip the first matching prefix from a request path.

    Prefixes are tried in the given order and "/" never matches. Whatever is
    left keeps a leading slash; an empty remainder becomes "/".

        rewrite_path(["/api/", "/"], "/api/v1/users") -> "/v1/users"
        rewrite_path(["/api/", "/"], "/index.html") -> "/index.html"
    """
    for prefix in prefixes:
        if prefix != DEFAULT_PATH and uri.startswith(prefix):
            return RewriteRule(prefix).apply(uri)
    return uri


def _strip_prefix(origin: Origin) -> str:
    return origin.base_path if origin.base_path is not None else origin.path_prefix


def _check_unique(entrypoint: Entrypoint) -> Result[None, DuplicateOrigin | DuplicatePathPrefix]:
    """Origin names and non-default prefixes must each be unique."""
    names: set[str] = set()
    for origin in entrypoint.origins:
        if origin.name in names:
            return Err(DuplicateOrigin(entrypoint=entrypoint.name, origin=origin.name))
        names.add(origin.name)

    seen: dict[str, str] = {}
    for origin in entrypoint.origins:
        if origin.is_default:
            continue
        first = seen.get(origin.path_prefix)
        if first is not None:
            return Err(
                DuplicatePathPrefix(
                    entrypoint=entrypoint.name,
                    path_prefix=origin.path_prefix,
                    origins=(first, origin.name),
                )
            )
        seen[origin.path_prefix] = origin.name
    return Ok(None)


def build_route_table(
    stack_id: str,
    entrypoint: Entrypoint,
    config: ResolverConfig | None = None,
) -> Result[RouteTable, ResolveError]:
    """Resolve an entrypoint's origins into its route table."""
    config = config or ResolverConfig()

    classified = classify_origins(entrypoint)
    if isinstance(classified, Err):
        return classified

    unique = _check_unique(entrypoint)
    if isinstance(unique, Err):
        return unique

    default = select_default(entrypoint)
    if isinstance(default, Err):
        return default

    selected = select_access(stack_id, entrypoint, classified.value, config)
    if isinstance(selected, Err):
        return selected
    access, credentials = selected.value

    origins = tuple(
        ResolvedOrigin(
            origin_id=o.name,
            path_prefix=o.path_prefix,
            domain_name=o.domain_name or o.capability_keys.get(DOMAIN_NAME_KEY, ""),
            origin_class=classified.value.class_of(o.name),
            access=access[o.name],
        )
        for o in entrypoint.origins
    )

    # Longest prefix first; sorted() keeps declaration order among equals.
    prefixed = sorted(
        (o for o in entrypoint.origins if not o.is_default),
        key=lambda o: len(o.path_prefix),
        reverse=True,
    )
    entries = [
        RouteTableEntry(
            path_pattern=origin.path_prefix + "*",
            target_origin_id=origin.name,
            rewrite=RewriteRule(_strip_prefix(origin)),
        )
        for origin in prefixed
    ]
    entries.append(RouteTableEntry(path_pattern=DEFAULT_PATTERN, target_origin_id=default.value.name))

    return Ok(
        RouteTable(
            entrypoint=entrypoint.name,
            entries=tuple(entries),
            origins=origins,
            credentials=credentials,
            rewrite_prefixes=tuple(
                _strip_prefix(o) for o in entrypoint.origins if not o.is_default
            ),
        )
    )
