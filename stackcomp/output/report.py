"""Rendering of resolution outcomes for collaborators that talk to users."""

from __future__ import annotations

from typing import TYPE_CHECKING

from stackcomp.core.errors import (
    AmbiguousOrigin,
    DuplicateOrigin,
    DuplicatePathPrefix,
    InvalidCronFormat,
    InvalidName,
    MissingDefaultOrigin,
    NameCollision,
    ResolveError,
    UnknownIntent,
    UnknownStorageKind,
    describe_error,
)
from stackcomp.core.model import ResolutionResult
from stackcomp.output.console import Style

if TYPE_CHECKING:
    from stackcomp.output.console import ConsoleProtocol

__all__ = ["error_hint", "print_resolution", "print_resolve_error"]


def error_hint(error: ResolveError) -> str | None:
    match error:
        case InvalidName():
            return "Use letters, digits, spaces, '_' or '-' in resource names."
        case NameCollision():
            return "Rename one of the resources; names are compared after normalization."
        case InvalidCronFormat():
            return "Expected 5 fields: minute hour day-of-month month day-of-week."
        case UnknownIntent():
            return "Allowed intents: read, write, delete."
        case UnknownStorageKind():
            return "Add a [permissions.<kind>] table to the resolver config."
        case MissingDefaultOrigin(defaults=defaults) if len(defaults) > 1:
            return "Keep exactly one route for '/'."
        case MissingDefaultOrigin():
            return "Add a route for '/'."
        case AmbiguousOrigin():
            return "An origin may export only one of the storage, function or load balancer keys."
        case DuplicatePathPrefix():
            return "Each path prefix may be routed once per entrypoint."
        case DuplicateOrigin():
            return "Give every origin of an entrypoint its own name."
    return None


def print_resolve_error(error: ResolveError, console: ConsoleProtocol) -> None:
    """Print a resolution error to console with a hint."""
    console.error(describe_error(error))
    hint = error_hint(error)
    if hint:
        console.print(f"hint: {hint}", Style.DIM)


def print_resolution(result: ResolutionResult, console: ConsoleProtocol) -> None:
    """Print a short summary of a resolution result."""
    console.header(f"Stack {result.stack_id}")
    for context in result.contexts.values():
        console.print(f"{context.kind:<10} {context.resource} -> {context.physical_id}")

    if result.grants:
        console.header("Grants")
        for grant in result.grants:
            actions = ", ".join(sorted(grant.actions))
            console.print(f"{grant.consumer_ref} on {grant.resource_ref}: {actions}")

    for name, table in result.route_tables.items():
        console.header(f"Routes for {name}")
        for entry in table.entries:
            console.print(f"{entry.path_pattern:<16} -> {entry.target_origin_id}")

    if result.schedules:
        console.header("Schedules")
        for name, expression in result.schedules.items():
            console.print(f"{name}: {expression}")

    console.success(f"resolved {len(result.contexts)} resources")
