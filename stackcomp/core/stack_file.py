"""JSON boundary for planner output and resolution results.

A stack file looks like:

    {
      "schema": 1,
      "name": "acme",
      "stack_id": "acme-dev-7f3",
      "resources": [
        {"name": "files", "kind": "storage", "storage_kind": "bucket",
         "consumers": [{"name": "api", "identity": "role/api", "intents": ["read"]}]},
        {"name": "api", "kind": "compute",
         "schedules": [{"name": "nightly", "cron": "0 0 * * *", "target_path": "/jobs"}],
         "exports": {"aws_lambda_function:arn": "arn:...", "domain_name": "api.example"}},
        {"name": "site", "kind": "entrypoint", "routes": {"/api/": "api", "/": "files"}}
      ]
    }

Entrypoints either list `origins` explicitly or give `routes`, a mapping of
path prefix to resource name; each route becomes an origin carrying the
target resource's exports as its capability keys.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path

from stackcomp.platform.files import atomic_write_text

from .capabilities import DOMAIN_NAME_KEY
from .model import (
    Compute,
    Consumer,
    Entrypoint,
    Origin,
    ResolutionResult,
    Resource,
    ScheduleSpec,
    Stack,
    Storage,
)
from .result import Err, Ok, Result
from .structured import (
    StrDict,
    as_str_dict,
    get_int,
    get_list,
    get_str,
    get_str_list,
    get_str_map,
    get_table,
)

__all__ = [
    "STACK_SCHEMA",
    "StackFileError",
    "read_stack_file",
    "stack_from_dict",
    "write_result_file",
]

STACK_SCHEMA = 1


@dataclass(frozen=True, slots=True)
class StackFileError:
    message: str
    path: Path | None = None


def _tables(data: StrDict, key: str, owner: str) -> Result[list[StrDict], StackFileError]:
    items = get_list(data, key)
    if items is None:
        if key in data:
            return Err(StackFileError(f"{owner}: {key} must be a list"))
        return Ok([])
    out: list[StrDict] = []
    for item in items:
        d = as_str_dict(item)
        if d is None:
            return Err(StackFileError(f"{owner}: every {key} item must be an object"))
        out.append(d)
    return Ok(out)


def _consumers(data: StrDict, owner: str) -> Result[tuple[Consumer, ...], StackFileError]:
    tables = _tables(data, "consumers", owner)
    if isinstance(tables, Err):
        return tables

    consumers: list[Consumer] = []
    for d in tables.value:
        name = get_str(d, "name")
        if name is None:
            return Err(StackFileError(f"{owner}: consumer without a name"))
        intents = get_str_list(d, "intents")
        if intents is None and "intents" in d:
            return Err(StackFileError(f"{owner}: intents of {name!r} must be a list of strings"))
        consumers.append(
            Consumer(
                name=name,
                identity=get_str(d, "identity") or name,
                intents=frozenset(intents or ()),
            )
        )
    return Ok(tuple(consumers))


def _schedules(data: StrDict, owner: str) -> Result[tuple[ScheduleSpec, ...], StackFileError]:
    tables = _tables(data, "schedules", owner)
    if isinstance(tables, Err):
        return tables

    schedules: list[ScheduleSpec] = []
    for d in tables.value:
        name = get_str(d, "name")
        cron = d.get("cron")
        if name is None or not isinstance(cron, str):
            return Err(StackFileError(f"{owner}: schedules need a name and a cron expression"))
        schedules.append(
            ScheduleSpec(name=name, cron_expression=cron, target_path=get_str(d, "target_path") or "/")
        )
    return Ok(tuple(schedules))


def _explicit_origins(data: StrDict, owner: str) -> Result[list[Origin], StackFileError]:
    tables = _tables(data, "origins", owner)
    if isinstance(tables, Err):
        return tables

    origins: list[Origin] = []
    for d in tables.value:
        name = get_str(d, "name")
        prefix = get_str(d, "path_prefix")
        if name is None or prefix is None:
            return Err(StackFileError(f"{owner}: origins need a name and a path_prefix"))
        base_path = d.get("base_path")
        origins.append(
            Origin(
                name=name,
                path_prefix=prefix,
                domain_name=get_str(d, "domain_name") or "",
                base_path=base_path if isinstance(base_path, str) else None,
                capability_keys=get_str_map(d, "capability_keys"),
            )
        )
    return Ok(origins)


def _route_origins(
    data: StrDict,
    owner: str,
    exports_by_name: dict[str, dict[str, str]],
) -> Result[list[Origin], StackFileError]:
    routes = get_table(data, "routes")
    if routes is None:
        if "routes" in data:
            return Err(StackFileError(f"{owner}: routes must be an object"))
        return Ok([])

    origins: list[Origin] = []
    for prefix, target in routes.items():
        if not isinstance(target, str):
            return Err(StackFileError(f"{owner}: route {prefix!r} must name a resource"))
        exports = exports_by_name.get(target)
        if exports is None:
            return Err(StackFileError(f"{owner}: route {prefix!r} targets unknown resource {target!r}"))
        origins.append(
            Origin(
                name=target,
                path_prefix=prefix,
                domain_name=exports.get(DOMAIN_NAME_KEY, ""),
                capability_keys=dict(exports),
            )
        )
    return Ok(origins)


def stack_from_dict(data: StrDict) -> Result[Stack, StackFileError]:
    """Build a Stack from a parsed stack file."""
    schema = get_int(data, "schema")
    if schema is not None and schema != STACK_SCHEMA:
        return Err(StackFileError(f"unsupported stack schema: {schema}"))

    stack_id = get_str(data, "stack_id")
    if stack_id is None:
        return Err(StackFileError("missing stack_id"))

    tables = _tables(data, "resources", "stack")
    if isinstance(tables, Err):
        return tables

    exports_by_name: dict[str, dict[str, str]] = {}
    for d in tables.value:
        name = get_str(d, "name")
        if name is None:
            return Err(StackFileError("resource without a name"))
        exports_by_name[name] = get_str_map(d, "exports")

    resources: list[Resource] = []
    for d in tables.value:
        name = get_str(d, "name") or ""
        kind = get_str(d, "kind")
        tags = get_str_map(d, "tags")
        exports = exports_by_name[name]

        match kind:
            case "storage":
                consumers = _consumers(d, name)
                if isinstance(consumers, Err):
                    return consumers
                resources.append(
                    Storage(
                        name=name,
                        kind=get_str(d, "storage_kind") or "bucket",
                        consumers=consumers.value,
                        tags=tags,
                        exports=exports,
                    )
                )
            case "compute":
                schedules = _schedules(d, name)
                if isinstance(schedules, Err):
                    return schedules
                resources.append(
                    Compute(name=name, schedules=schedules.value, tags=tags, exports=exports)
                )
            case "entrypoint":
                explicit = _explicit_origins(d, name)
                if isinstance(explicit, Err):
                    return explicit
                routed = _route_origins(d, name, exports_by_name)
                if isinstance(routed, Err):
                    return routed
                resources.append(
                    Entrypoint(
                        name=name,
                        origins=tuple(explicit.value + routed.value),
                        domain=get_str(d, "domain"),
                        tags=tags,
                        exports=exports,
                    )
                )
            case _:
                return Err(StackFileError(f"{name}: unknown resource kind {kind!r}"))

    return Ok(Stack(name=get_str(data, "name") or stack_id, stack_id=stack_id, resources=tuple(resources)))


def read_stack_file(path: Path) -> Result[Stack, StackFileError]:
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        return Err(StackFileError(f"failed to read stack file: {e}", path=path))
    except UnicodeDecodeError as e:
        return Err(StackFileError(f"stack file is not valid UTF-8: {e}", path=path))

    try:
        obj: object = json.loads(text)
    except json.JSONDecodeError as e:
        return Err(StackFileError(f"invalid JSON in stack file: {e}", path=path))

    data = as_str_dict(obj)
    if data is None:
        return Err(StackFileError("stack file root must be a JSON object", path=path))

    result = stack_from_dict(data)
    if isinstance(result, Err):
        return Err(StackFileError(result.error.message, path=path))
    return result


def write_result_file(path: Path, result: ResolutionResult) -> Result[None, StackFileError]:
    """Write the canonical JSON rendering of a resolution result."""
    try:
        atomic_write_text(path, result.to_json(), encoding="utf-8")
    except OSError as e:
        return Err(StackFileError(f"failed to write result file: {e}", path=path))
    return Ok(None)
