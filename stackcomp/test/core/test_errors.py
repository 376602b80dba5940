from __future__ import annotations

import pytest

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


@pytest.mark.parametrize(
    ("error", "fragments"),
    [
        (InvalidName("a.b", "disallowed characters: '.'"), ["'a.b'", "disallowed"]),
        (NameCollision("User Uploads", "user-uploads", "s1-user-uploads"), ["'User Uploads'", "'s1-user-uploads'"]),
        (InvalidCronFormat("0 12 * *", schedule="nightly"), ["'nightly'", "'0 12 * *'"]),
        (UnknownIntent("admin", "files", "api"), ["'admin'", "'api'", "'files'"]),
        (UnknownStorageKind("queue", "jobs", ("bucket", "kv")), ["'queue'", "'jobs'", "bucket, kv"]),
        (MissingDefaultOrigin("site"), ["'site'", "'/'"]),
        (MissingDefaultOrigin("site", defaults=("a", "b")), ["several default origins", "a, b"]),
        (AmbiguousOrigin("site", "mixed", ("function", "load_balanced")), ["'mixed'", "function, load_balanced"]),
        (DuplicatePathPrefix("site", "/api/", ("api", "legacy")), ["'/api/'", "'api'", "'legacy'"]),
        (DuplicateOrigin("site", "static"), ["'site'", "'static'", "more than once"]),
    ],
)
def test_describe_error_names_offender(error: ResolveError, fragments: list[str]) -> None:
    message = describe_error(error)
    for fragment in fragments:
        assert fragment in message


def test_cron_error_without_schedule() -> None:
    assert describe_error(InvalidCronFormat("bad")) == "invalid cron expression: 'bad' (expected 5 fields)"


def test_missing_default_ambiguous_flag() -> None:
    assert not MissingDefaultOrigin("site").ambiguous
    assert not MissingDefaultOrigin("site", defaults=("a",)).ambiguous
    assert MissingDefaultOrigin("site", defaults=("a", "b")).ambiguous


def test_errors_are_frozen() -> None:
    error = InvalidName("x", "bad")
    with pytest.raises(AttributeError):
        error.name = "y"  # type: ignore[misc]
