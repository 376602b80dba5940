"""Tests for stackcomp.core.result module."""

import pytest

from stackcomp.core.result import Err, Ok, Result, is_err, is_ok


class TestOk:
    def test_unwrap(self) -> None:
        assert Ok(42).unwrap() == 42

    def test_unwrap_or_ignores_default(self) -> None:
        assert Ok(42).unwrap_or(0) == 42

    def test_flags(self) -> None:
        assert Ok(1).is_ok() and not Ok(1).is_err()


class TestErr:
    def test_unwrap_raises(self) -> None:
        with pytest.raises(ValueError, match="called unwrap on Err"):
            Err("boom").unwrap()

    def test_unwrap_or(self) -> None:
        assert Err("boom").unwrap_or(7) == 7

    def test_flags(self) -> None:
        assert Err("boom").is_err() and not Err("boom").is_ok()

    def test_repr(self) -> None:
        assert repr(Err("boom")) == "Err('boom')"


def test_type_guards() -> None:
    assert is_ok(Ok(1)) and not is_err(Ok(1))
    assert is_err(Err(1)) and not is_ok(Err(1))


def test_pattern_matching() -> None:
    result: Result[int, str] = Ok(3)
    match result:
        case Ok(value=v):
            assert v == 3
        case Err():
            pytest.fail("expected Ok")
