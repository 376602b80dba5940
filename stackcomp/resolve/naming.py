"""Deterministic physical identifier derivation.

The provisioning pass and the runtime access layer are deployed and versioned
separately, yet must both arrive at the same physical id for a resource. The
only thing they share is this rule:

    physical_id = stack_id + "-" + normalized(logical_name)

where the logical name is lower-cased and spaces, underscores and camelCase
boundaries become single hyphens. Changing the rule renames every deployed
resource, so treat it like a wire format.
"""

from __future__ import annotations

import re
from collections.abc import Iterable

from stackcomp.core.errors import InvalidName, NameCollision, ResolveError
from stackcomp.core.result import Err, Ok, Result

__all__ = ["check_collisions", "env_var_name", "normalize", "normalize_name"]

_ALLOWED_RE = re.compile(r"^[A-Za-z0-9 _-]+$")
_ACRONYM_RE = re.compile(r"([A-Z]+)([A-Z][a-z])")
_CAMEL_RE = re.compile(r"([a-z0-9])([A-Z])")
_SEPARATORS_RE = re.compile(r"[ _-]+")


def normalize_name(logical_name: str) -> Result[str, InvalidName]:
    """Return the lowercase hyphen-separated form of a logical name."""
    name = logical_name.strip()
    if not name:
        return Err(InvalidName(name=logical_name, reason="name is empty"))

    if _ALLOWED_RE.match(name) is None:
        bad = sorted({c for c in name if not (c.isascii() and (c.isalnum() or c in " _-"))})
        return Err(
            InvalidName(
                name=logical_name,
                reason=f"disallowed characters: {''.join(bad)!r}",
            )
        )

    name = _ACRONYM_RE.sub(r"\1-\2", name)
    name = _CAMEL_RE.sub(r"\1-\2", name)
    name = _SEPARATORS_RE.sub("-", name.lower()).strip("-")
    if not name:
        return Err(InvalidName(name=logical_name, reason="name has no letters or digits"))
    return Ok(name)


def normalize(stack_id: str, logical_name: str) -> Result[str, InvalidName]:
    """Derive the physical id for a resource of a stack.

    Example:
        normalize("acme-dev-7f3", "User Uploads") -> Ok("acme-dev-7f3-user-uploads")
    """
    if not stack_id.strip():
        return Err(InvalidName(name=logical_name, reason="stack id is empty"))

    match normalize_name(logical_name):
        case Ok(value=name):
            return Ok(f"{stack_id}-{name}")
        case Err() as err:
            return err


def check_collisions(stack_id: str, names: Iterable[str]) -> Result[dict[str, str], ResolveError]:
    """Map each logical name to its physical id, rejecting collisions.

    Two names collide when they normalize to the same physical id, including
    the trivial case of the same name declared twice.
    """
    by_physical: dict[str, str] = {}
    out: dict[str, str] = {}

    for name in names:
        result = normalize(stack_id, name)
        if isinstance(result, Err):
            return result
        physical_id = result.value

        first = by_physical.get(physical_id)
        if first is not None:
            return Err(NameCollision(first=first, second=name, physical_id=physical_id))

        by_physical[physical_id] = name
        out[name] = physical_id

    return Ok(out)


_ENV_SUFFIXES = {
    "bucket": "_BUCKET_NAME",
    "kv": "_TABLE_NAME",
}


def env_var_name(logical_name: str, kind: str = "bucket") -> Result[str, InvalidName]:
    """Name of the environment variable carrying a resource's physical id.

        env_var_name("files") -> Ok("FILES_BUCKET_NAME")
        env_var_name("user sessions", "kv") -> Ok("USER_SESSIONS_TABLE_NAME")
    """
    match normalize_name(logical_name):
        case Ok(value=name):
            suffix = _ENV_SUFFIXES.get(kind, f"_{kind.upper()}_NAME")
            return Ok(name.upper().replace("-", "_") + suffix)
        case Err() as err:
            return err
