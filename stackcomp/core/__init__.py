"""Core domain types, errors and configuration."""

from .capabilities import OriginClass, classify
from .config import ConfigError, ResolverConfig, load_config, load_config_or_default
from .errors import ResolveError, describe_error
from .model import (
    AccessGrant,
    Compute,
    Consumer,
    Context,
    Entrypoint,
    Origin,
    ResolutionResult,
    RouteTable,
    ScheduleSpec,
    Stack,
    Storage,
)
from .result import Err, Ok, Result, is_err, is_ok
from .stack_file import StackFileError, read_stack_file, stack_from_dict, write_result_file

__all__ = [
    # capabilities
    "OriginClass",
    "classify",
    # config
    "ConfigError",
    "ResolverConfig",
    "load_config",
    "load_config_or_default",
    # errors
    "ResolveError",
    "describe_error",
    # model
    "AccessGrant",
    "Compute",
    "Consumer",
    "Context",
    "Entrypoint",
    "Origin",
    "ResolutionResult",
    "RouteTable",
    "ScheduleSpec",
    "Stack",
    "Storage",
    # result
    "Err",
    "Ok",
    "Result",
    "is_err",
    "is_ok",
    # stack file
    "StackFileError",
    "read_stack_file",
    "stack_from_dict",
    "write_result_file",
]
