"""Composition resolver: one pure pass over a stack graph.

Pass order is naming, grants, route tables, schedules, then per-resource
contexts. The first structural error aborts the pass; no partial result is
ever returned. Nothing here touches the network, the filesystem or any
module-level state, so concurrent calls on the same stack are safe.
"""

from __future__ import annotations

from dataclasses import replace

from stackcomp.core.config import ResolverConfig
from stackcomp.core.errors import ResolveError
from stackcomp.core.model import (
    AccessGrant,
    Compute,
    Context,
    Entrypoint,
    ResolutionResult,
    ResolvedSchedule,
    RouteTable,
    Stack,
    Storage,
    resource_kind,
)
from stackcomp.core.result import Err, Ok, Result
from stackcomp.resolve.naming import check_collisions, env_var_name
from stackcomp.resolve.permissions import action_table_for, synthesize
from stackcomp.resolve.routing import build_route_table
from stackcomp.resolve.schedule import translate

__all__ = ["resolve"]


def _declared_names(stack: Stack) -> list[str]:
    # Schedules are provisioned as stack resources too, so they share the namespace.
    names: list[str] = []
    for resource in stack.resources:
        names.append(resource.name)
        if isinstance(resource, Compute):
            names.extend(s.name for s in resource.schedules)
    return names


def _resolve_grants(
    stack: Stack,
    ids: dict[str, str],
    config: ResolverConfig,
) -> Result[tuple[AccessGrant, ...], ResolveError]:
    grants: list[AccessGrant] = []
    for resource in stack.resources:
        if not isinstance(resource, Storage):
            continue
        table = action_table_for(resource, config)
        if isinstance(table, Err):
            return table
        result = synthesize(resource, ids[resource.name], table.value)
        if isinstance(result, Err):
            return result
        grants.extend(result.value)
    return Ok(tuple(grants))


def _resolve_route_tables(
    stack: Stack,
    config: ResolverConfig,
) -> Result[dict[str, RouteTable], ResolveError]:
    tables: dict[str, RouteTable] = {}
    for resource in stack.resources:
        if not isinstance(resource, Entrypoint):
            continue
        result = build_route_table(stack.stack_id, resource, config)
        if isinstance(result, Err):
            return result
        tables[resource.name] = result.value
    return Ok(tables)


def _resolve_schedules(
    stack: Stack,
    ids: dict[str, str],
) -> Result[dict[str, tuple[ResolvedSchedule, ...]], ResolveError]:
    """Translate schedules, grouped by the compute resource that owns them."""
    by_owner: dict[str, tuple[ResolvedSchedule, ...]] = {}
    for resource in stack.resources:
        if not isinstance(resource, Compute):
            continue
        resolved: list[ResolvedSchedule] = []
        for spec in resource.schedules:
            result = translate(spec.cron_expression)
            if isinstance(result, Err):
                return Err(replace(result.error, schedule=spec.name))
            resolved.append(
                ResolvedSchedule(
                    name=spec.name,
                    physical_id=ids[spec.name],
                    cron_expression=spec.cron_expression,
                    provider_expression=result.value,
                    target_path=spec.target_path,
                )
            )
        by_owner[resource.name] = tuple(resolved)
    return Ok(by_owner)


def _environment(
    stack: Stack,
    compute: Compute,
    grants: tuple[AccessGrant, ...],
    config: ResolverConfig,
) -> Result[dict[str, str], ResolveError]:
    env = {config.runtime.stack_id_env: stack.stack_id}
    for grant in grants:
        if grant.consumer_ref != compute.name:
            continue
        storage = stack.find(grant.resource_ref)
        kind = storage.kind if isinstance(storage, Storage) else "bucket"
        name = env_var_name(grant.resource_ref, kind)
        if isinstance(name, Err):
            return name
        env[name.value] = grant.resource_id
    return Ok(env)


def resolve(stack: Stack, config: ResolverConfig | None = None) -> Result[ResolutionResult, ResolveError]:
    """Resolve a stack into per-resource contexts, grants, routes and schedules.

    Args:
        stack: The stack graph produced by the planner.
        config: Resolver settings; defaults apply when omitted.

    Returns:
        Ok(ResolutionResult), or Err with the first structural error found.
    """
    config = config or ResolverConfig()

    named = check_collisions(stack.stack_id, _declared_names(stack))
    if isinstance(named, Err):
        return named
    ids = named.value

    grants = _resolve_grants(stack, ids, config)
    if isinstance(grants, Err):
        return grants

    tables = _resolve_route_tables(stack, config)
    if isinstance(tables, Err):
        return tables

    schedules = _resolve_schedules(stack, ids)
    if isinstance(schedules, Err):
        return schedules

    contexts: dict[str, Context] = {}
    for resource in stack.resources:
        context = Context(
            resource=resource.name,
            kind=resource_kind(resource),
            stack_id=stack.stack_id,
            physical_id=ids[resource.name],
            grants=tuple(g for g in grants.value if g.resource_ref == resource.name),
            route_table=tables.value.get(resource.name),
            tags=dict(resource.tags),
        )
        if isinstance(resource, Compute):
            env = _environment(stack, resource, grants.value, config)
            if isinstance(env, Err):
                return env
            context = replace(
                context,
                schedules=schedules.value[resource.name],
                environment=env.value,
            )
        contexts[resource.name] = context

    return Ok(
        ResolutionResult(
            stack_id=stack.stack_id,
            contexts=contexts,
            grants=grants.value,
            route_tables=tables.value,
            schedules={
                s.name: s.provider_expression
                for owned in schedules.value.values()
                for s in owned
            },
        )
    )
