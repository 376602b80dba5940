"""Resolution components: naming, schedules, permissions, routing."""

from .naming import check_collisions, env_var_name, normalize, normalize_name
from .permissions import BUCKET_ACTIONS, KV_ACTIONS, action_table_for, synthesize
from .resolver import resolve
from .routing import (
    ClassifiedOrigins,
    build_route_table,
    classify_origins,
    rewrite_path,
    select_access,
    select_default,
)
from .schedule import translate

__all__ = [
    # naming
    "check_collisions",
    "env_var_name",
    "normalize",
    "normalize_name",
    # permissions
    "BUCKET_ACTIONS",
    "KV_ACTIONS",
    "action_table_for",
    "synthesize",
    # resolver
    "resolve",
    # routing
    "ClassifiedOrigins",
    "build_route_table",
    "classify_origins",
    "rewrite_path",
    "select_access",
    "select_default",
    # schedule
    "translate",
]
