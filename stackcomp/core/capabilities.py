"""Capability key vocabulary shared by independently-built resolvers.

A resource advertises what backs it by exporting one of these keys paired
with a provider handle. Consumers of the stack classify by key presence only,
never by resource name or a declared type field.
"""

from __future__ import annotations

from collections.abc import Mapping
from enum import Enum

from .errors import AmbiguousOrigin
from .result import Err, Ok, Result

__all__ = [
    "DOMAIN_NAME_KEY",
    "FUNCTION_KEY",
    "LOAD_BALANCER_KEY",
    "OBJECT_STORAGE_KEY",
    "OriginClass",
    "classify",
]

OBJECT_STORAGE_KEY = "aws_s3_bucket:arn"
FUNCTION_KEY = "aws_lambda_function:arn"
LOAD_BALANCER_KEY = "aws_lb:arn"

# Not a class marker: carries the host name an origin is reachable at.
DOMAIN_NAME_KEY = "domain_name"


class OriginClass(Enum):
    """How the edge layer reaches an origin."""

    OBJECT_STORAGE = "object_storage"
    FUNCTION = "function"
    LOAD_BALANCED = "load_balanced"
    OTHER = "other"

    def __str__(self) -> str:
        return self.value


_CLASS_KEYS: tuple[tuple[OriginClass, str], ...] = (
    (OriginClass.OBJECT_STORAGE, OBJECT_STORAGE_KEY),
    (OriginClass.FUNCTION, FUNCTION_KEY),
    (OriginClass.LOAD_BALANCED, LOAD_BALANCER_KEY),
)


def classify(
    capability_keys: Mapping[str, str],
    *,
    entrypoint: str = "",
    origin: str = "",
) -> Result[OriginClass, AmbiguousOrigin]:
    """Classify an origin by the capability keys it exports.

    An origin exporting none of the class keys is fetched directly by the
    edge (OTHER). Exporting more than one is a configuration error.
    """
    matched = [cls for cls, key in _CLASS_KEYS if key in capability_keys]
    if len(matched) > 1:
        return Err(
            AmbiguousOrigin(
                entrypoint=entrypoint,
                origin=origin,
                classes=tuple(str(c) for c in matched),
            )
        )
    if matched:
        return Ok(matched[0])
    return Ok(OriginClass.OTHER)
