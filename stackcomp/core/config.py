"""Typed resolver configuration.

Settings are read from an optional TOML file and passed explicitly into
`resolve()`; nothing here is consulted implicitly.

    [runtime]
    stack_id_env = "STACK_ID"

    [edge]
    origin_facing_prefix_list = "com.amazonaws.global.cloudfront.origin-facing"
    load_balancer_port = 80

    [permissions.queue]
    read = ["sqs:ReceiveMessage"]
    write = ["sqs:SendMessage"]
    delete = ["sqs:DeleteMessage"]

A permissions table replaces the built-in one for its kind, so it must list
all three rows; `[]` grants nothing for that intent.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path

from .model import INTENTS, ActionTable
from .result import Err, Ok, Result
from .structured import StrDict, as_str_dict, get_int, get_str, get_str_list, get_table

__all__ = [
    "ConfigError",
    "EdgeConfig",
    "ResolverConfig",
    "RuntimeConfig",
    "load_config",
    "load_config_or_default",
    "DEFAULT_STACK_ID_ENV",
    "ORIGIN_FACING_PREFIX_LIST",
    "LOAD_BALANCER_PORT",
]

DEFAULT_STACK_ID_ENV = "STACK_ID"

# Managed prefix list covering the edge network's origin-facing addresses.
ORIGIN_FACING_PREFIX_LIST = "com.amazonaws.global.cloudfront.origin-facing"
LOAD_BALANCER_PORT = 80


@dataclass(frozen=True, slots=True)
class ConfigError:
    """Error when config cannot be loaded or parsed."""

    message: str
    path: Path | None = None


@dataclass(frozen=True, slots=True)
class RuntimeConfig:
    stack_id_env: str = DEFAULT_STACK_ID_ENV


@dataclass(frozen=True, slots=True)
class EdgeConfig:
    origin_facing_prefix_list: str = ORIGIN_FACING_PREFIX_LIST
    load_balancer_port: int = LOAD_BALANCER_PORT


def _port(edge: StrDict) -> int:
    if "load_balancer_port" not in edge:
        return LOAD_BALANCER_PORT
    port = get_int(edge, "load_balancer_port")
    if port is None or not 1 <= port <= 65535:
        raise ValueError("edge.load_balancer_port must be an integer between 1 and 65535")
    return port


@dataclass(frozen=True, slots=True)
class ResolverConfig:
    """Main configuration container.

    Attributes:
        runtime: Names shared with the runtime access layer.
        edge: Settings for load-balanced origins behind an entrypoint.
        permissions: Extra or overriding action tables, keyed by storage kind.
    """

    runtime: RuntimeConfig = field(default_factory=RuntimeConfig)
    edge: EdgeConfig = field(default_factory=EdgeConfig)
    permissions: dict[str, ActionTable] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Mapping[str, object]) -> ResolverConfig:
        """Create ResolverConfig from a mapping (parsed TOML)."""
        runtime: StrDict = get_table(data, "runtime") or {}
        edge: StrDict = get_table(data, "edge") or {}
        permissions: StrDict = get_table(data, "permissions") or {}

        tables: dict[str, ActionTable] = {}
        for kind in sorted(permissions):
            table = as_str_dict(permissions[kind])
            if table is None:
                raise ValueError(f"permissions.{kind} must be a table")
            rows: dict[str, tuple[str, ...]] = {}
            for intent in INTENTS:
                actions = get_str_list(table, intent)
                if actions is None:
                    raise ValueError(f"permissions.{kind}.{intent} must be a list of strings")
                rows[intent] = tuple(actions)
            tables[kind] = ActionTable(kind=kind, **rows)

        return cls(
            runtime=RuntimeConfig(
                stack_id_env=get_str(runtime, "stack_id_env") or DEFAULT_STACK_ID_ENV,
            ),
            edge=EdgeConfig(
                origin_facing_prefix_list=get_str(edge, "origin_facing_prefix_list")
                or ORIGIN_FACING_PREFIX_LIST,
                load_balancer_port=_port(edge),
            ),
            permissions=tables,
        )


def _parse_toml(path: Path) -> Result[StrDict, ConfigError]:
    """Parse a TOML file, handling read and parse errors."""
    import tomllib

    try:
        content = path.read_bytes()
        data_obj: object = tomllib.loads(content.decode("utf-8"))
        data = as_str_dict(data_obj)
        if data is None:
            return Err(ConfigError("Config root must be a TOML table", path=path))
        return Ok(data)
    except FileNotFoundError:
        return Err(ConfigError(f"Config file not found: {path}", path=path))
    except PermissionError:
        return Err(ConfigError(f"Permission denied reading: {path}", path=path))
    except tomllib.TOMLDecodeError as e:
        return Err(ConfigError(f"Invalid TOML syntax: {e}", path=path))
    except UnicodeDecodeError as e:
        return Err(ConfigError(f"Error reading config: {e}", path=path))


def load_config(path: Path) -> Result[ResolverConfig, ConfigError]:
    """Load and parse resolver configuration from a TOML file.

    Args:
        path: Path to the config file

    Returns:
        Ok(ResolverConfig) on success, Err(ConfigError) on failure
    """
    result = _parse_toml(path)
    if isinstance(result, Err):
        return result

    try:
        return Ok(ResolverConfig.from_dict(result.value))
    except (KeyError, TypeError, ValueError) as e:
        return Err(ConfigError(f"Invalid config structure: {e}", path=path))


def load_config_or_default(path: Path) -> ResolverConfig:
    """Load config from file, or return the defaults if it can't be loaded."""
    result = load_config(path)
    if isinstance(result, Ok):
        return result.value
    return ResolverConfig()
