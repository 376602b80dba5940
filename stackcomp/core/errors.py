"""Structural errors raised by a resolution pass.

None of these are transient: the pass does no I/O, so retrying an unchanged
stack always fails the same way. Each error names the resource, entrypoint or
schedule that triggered it.
"""

from __future__ import annotations

from dataclasses import dataclass

__all__ = [
    "AmbiguousOrigin",
    "DuplicateOrigin",
    "DuplicatePathPrefix",
    "InvalidCronFormat",
    "InvalidName",
    "MissingDefaultOrigin",
    "NameCollision",
    "ResolveError",
    "UnknownIntent",
    "UnknownStorageKind",
    "describe_error",
]


@dataclass(frozen=True, slots=True)
class InvalidName:
    name: str
    reason: str


@dataclass(frozen=True, slots=True)
class NameCollision:
    first: str
    second: str
    physical_id: str


@dataclass(frozen=True, slots=True)
class InvalidCronFormat:
    expression: str
    schedule: str | None = None


@dataclass(frozen=True, slots=True)
class UnknownIntent:
    intent: str
    resource: str
    consumer: str


@dataclass(frozen=True, slots=True)
class UnknownStorageKind:
    kind: str
    resource: str
    available: tuple[str, ...]


@dataclass(frozen=True, slots=True)
class MissingDefaultOrigin:
    """No origin, or more than one, claims the root path.

    `defaults` lists the origins that declared "/"; empty means none did.
    """

    entrypoint: str
    defaults: tuple[str, ...] = ()

    @property
    def ambiguous(self) -> bool:
        return len(self.defaults) > 1


@dataclass(frozen=True, slots=True)
class AmbiguousOrigin:
    entrypoint: str
    origin: str
    classes: tuple[str, ...]


@dataclass(frozen=True, slots=True)
class DuplicateOrigin:
    entrypoint: str
    origin: str


@dataclass(frozen=True, slots=True)
class DuplicatePathPrefix:
    entrypoint: str
    path_prefix: str
    origins: tuple[str, str]


ResolveError = (
    InvalidName
    | NameCollision
    | InvalidCronFormat
    | UnknownIntent
    | UnknownStorageKind
    | MissingDefaultOrigin
    | AmbiguousOrigin
    | DuplicatePathPrefix
    | DuplicateOrigin
)


def describe_error(error: ResolveError) -> str:
    """Return a one-line description naming the offending element."""
    match error:
        case InvalidName(name=name, reason=reason):
            return f"invalid name {name!r}: {reason}"
        case NameCollision(first=first, second=second, physical_id=physical_id):
            return f"{first!r} and {second!r} both normalize to {physical_id!r}"
        case InvalidCronFormat(expression=expression, schedule=schedule):
            where = f" in schedule {schedule!r}" if schedule else ""
            return f"invalid cron expression{where}: {expression!r} (expected 5 fields)"
        case UnknownIntent(intent=intent, resource=resource, consumer=consumer):
            return f"unknown intent {intent!r} declared by {consumer!r} on {resource!r}"
        case UnknownStorageKind(kind=kind, resource=resource, available=available):
            return (
                f"unknown storage kind {kind!r} for {resource!r} "
                f"(available: {', '.join(available)})"
            )
        case MissingDefaultOrigin(entrypoint=entrypoint, defaults=defaults):
            if len(defaults) > 1:
                return f"entrypoint {entrypoint!r} has several default origins: {', '.join(defaults)}"
            return f"entrypoint {entrypoint!r} has no origin for path '/'"
        case AmbiguousOrigin(entrypoint=entrypoint, origin=origin, classes=classes):
            return (
                f"origin {origin!r} of entrypoint {entrypoint!r} matches several "
                f"capability classes: {', '.join(classes)}"
            )
        case DuplicatePathPrefix(entrypoint=entrypoint, path_prefix=prefix, origins=origins):
            return (
                f"entrypoint {entrypoint!r} routes {prefix!r} to both "
                f"{origins[0]!r} and {origins[1]!r}"
            )
        case DuplicateOrigin(entrypoint=entrypoint, origin=origin):
            return f"entrypoint {entrypoint!r} declares origin {origin!r} more than once"
    raise AssertionError(f"unexpected error type: {error!r}")
