"""Request-time lookup of provisioned resource names.

Deployed services call this to find the bucket or table they were granted.
It depends on nothing but the naming rule. The service may run a different
release than the one that provisioned the stack, and both must agree on every
physical id.

Lookup order:
1. the resource's own variable (e.g. FILES_BUCKET_NAME), injected at deploy;
2. the stack id variable (STACK_ID by default) plus the naming rule;
3. an explicit local stack id, for running outside a deployment.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass

from stackcomp.core.config import DEFAULT_STACK_ID_ENV
from stackcomp.core.errors import InvalidName
from stackcomp.core.result import Err, Ok, Result
from stackcomp.resolve.naming import env_var_name, normalize

__all__ = ["AccessError", "StackIdUnavailable", "resource_name", "stack_id_from_env"]


@dataclass(frozen=True, slots=True)
class StackIdUnavailable:
    env_var: str
    hint: str = "Set the stack id variable or pass local_stack_id for local runs."


AccessError = InvalidName | StackIdUnavailable


def stack_id_from_env(
    environ: Mapping[str, str],
    *,
    stack_id_env: str = DEFAULT_STACK_ID_ENV,
    local_stack_id: str | None = None,
) -> Result[str, StackIdUnavailable]:
    value = environ.get(stack_id_env, "").strip()
    if value:
        return Ok(value)
    if local_stack_id:
        return Ok(local_stack_id)
    return Err(StackIdUnavailable(env_var=stack_id_env))


def resource_name(
    logical_name: str,
    kind: str = "bucket",
    environ: Mapping[str, str] | None = None,
    *,
    stack_id_env: str = DEFAULT_STACK_ID_ENV,
    local_stack_id: str | None = None,
) -> Result[str, AccessError]:
    """Return the physical name of a resource as seen from a running service.

    Args:
        logical_name: Name the resource was declared with.
        kind: Storage kind ("bucket", "kv", ...), selects the variable suffix.
        environ: Environment to read; defaults to os.environ.
        stack_id_env: Variable holding the stack id.
        local_stack_id: Stack id to fall back to outside a deployment.
    """
    env = os.environ if environ is None else environ

    var = env_var_name(logical_name, kind)
    if isinstance(var, Err):
        return var

    explicit = env.get(var.value, "").strip()
    if explicit:
        return Ok(explicit)

    stack_id = stack_id_from_env(env, stack_id_env=stack_id_env, local_stack_id=local_stack_id)
    if isinstance(stack_id, Err):
        return stack_id

    return normalize(stack_id.value, logical_name)
