"""Runtime access to provisioned resources."""

from .access import AccessError, StackIdUnavailable, resource_name, stack_id_from_env

__all__ = [
    "AccessError",
    "StackIdUnavailable",
    "resource_name",
    "stack_id_from_env",
]
