from __future__ import annotations

import json
from pathlib import Path

import pytest

from stackcomp.core.errors import InvalidName
from stackcomp.core.result import Err, Ok
from stackcomp.runtime.access import StackIdUnavailable, resource_name, stack_id_from_env

_VECTORS = json.loads(
    (Path(__file__).resolve().parents[1] / "data" / "naming_vectors.json").read_text(encoding="utf-8")
)


@pytest.mark.parametrize("vector", _VECTORS["valid"])
def test_golden_vectors_from_stack_id(vector: dict[str, str]) -> None:
    environ = {"STACK_ID": vector["stack_id"]}
    assert resource_name(vector["logical_name"], environ=environ) == Ok(vector["physical_id"])


@pytest.mark.parametrize("vector", _VECTORS["valid"])
def test_golden_vectors_from_local_stack_id(vector: dict[str, str]) -> None:
    result = resource_name(vector["logical_name"], environ={}, local_stack_id=vector["stack_id"])
    assert result == Ok(vector["physical_id"])


def test_explicit_variable_wins() -> None:
    environ = {"FILES_BUCKET_NAME": "legacy-files", "STACK_ID": "s1"}
    assert resource_name("files", environ=environ) == Ok("legacy-files")


def test_blank_explicit_variable_is_ignored() -> None:
    environ = {"FILES_BUCKET_NAME": "  ", "STACK_ID": "s1"}
    assert resource_name("files", environ=environ) == Ok("s1-files")


def test_kv_kind_reads_table_variable() -> None:
    environ = {"SESSIONS_TABLE_NAME": "prod-sessions"}
    assert resource_name("sessions", "kv", environ) == Ok("prod-sessions")


def test_custom_stack_id_variable() -> None:
    environ = {"APP_STACK": "test-api-dev-local"}
    result = resource_name("files", environ=environ, stack_id_env="APP_STACK")
    assert result == Ok("test-api-dev-local-files")


def test_stack_id_env_beats_local_fallback() -> None:
    result = resource_name("files", environ={"STACK_ID": "prod-1"}, local_stack_id="dev")
    assert result == Ok("prod-1-files")


def test_missing_stack_id() -> None:
    result = resource_name("files", environ={})
    assert isinstance(result, Err)
    assert result.error == StackIdUnavailable(env_var="STACK_ID")


def test_invalid_logical_name() -> None:
    result = resource_name("files!", environ={"STACK_ID": "s1"})
    assert isinstance(result, Err)
    assert isinstance(result.error, InvalidName)


def test_defaults_to_process_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("FILES_BUCKET_NAME", raising=False)
    monkeypatch.setenv("STACK_ID", "from-env")
    assert resource_name("files") == Ok("from-env-files")


def test_stack_id_from_env_strips() -> None:
    assert stack_id_from_env({"STACK_ID": " s1 "}) == Ok("s1")
