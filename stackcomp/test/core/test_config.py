"""Tests for stackcomp.core.config module."""

from __future__ import annotations

from pathlib import Path

import pytest

from stackcomp.core.config import (
    EdgeConfig,
    ResolverConfig,
    RuntimeConfig,
    load_config,
    load_config_or_default,
)
from stackcomp.core.model import ActionTable
from stackcomp.core.result import Err, Ok


class TestDefaults:
    def test_runtime(self) -> None:
        assert RuntimeConfig().stack_id_env == "STACK_ID"

    def test_edge(self) -> None:
        edge = EdgeConfig()
        assert edge.origin_facing_prefix_list == "com.amazonaws.global.cloudfront.origin-facing"
        assert edge.load_balancer_port == 80

    def test_no_permission_overrides(self) -> None:
        assert ResolverConfig().permissions == {}

    def test_frozen(self) -> None:
        config = ResolverConfig()
        with pytest.raises(AttributeError):
            config.edge = EdgeConfig()  # type: ignore[misc]


class TestFromDict:
    def test_empty(self) -> None:
        assert ResolverConfig.from_dict({}) == ResolverConfig()

    def test_sections(self) -> None:
        config = ResolverConfig.from_dict(
            {
                "runtime": {"stack_id_env": "APP_STACK"},
                "edge": {"origin_facing_prefix_list": "pl-42", "load_balancer_port": 8443},
            }
        )
        assert config.runtime.stack_id_env == "APP_STACK"
        assert config.edge == EdgeConfig(origin_facing_prefix_list="pl-42", load_balancer_port=8443)

    def test_permissions(self) -> None:
        config = ResolverConfig.from_dict(
            {
                "permissions": {
                    "queue": {"read": ["sqs:ReceiveMessage"], "write": ["sqs:SendMessage"], "delete": []}
                }
            }
        )
        assert config.permissions == {
            "queue": ActionTable(
                kind="queue",
                read=("sqs:ReceiveMessage",),
                write=("sqs:SendMessage",),
                delete=(),
            )
        }

    def test_permissions_table_must_list_every_row(self) -> None:
        with pytest.raises(ValueError, match="permissions.bucket.write"):
            ResolverConfig.from_dict({"permissions": {"bucket": {"read": ["s3:GetObject"]}}})

    def test_permissions_row_must_hold_strings(self) -> None:
        with pytest.raises(ValueError, match="permissions.bucket.delete"):
            ResolverConfig.from_dict(
                {"permissions": {"bucket": {"read": [], "write": [], "delete": [1]}}}
            )

    @pytest.mark.parametrize("port", [0, -1, 65536, "80", True])
    def test_invalid_load_balancer_port(self, port: object) -> None:
        with pytest.raises(ValueError, match="load_balancer_port"):
            ResolverConfig.from_dict({"edge": {"load_balancer_port": port}})

    def test_permissions_entry_must_be_table(self) -> None:
        with pytest.raises(ValueError, match="permissions.queue"):
            ResolverConfig.from_dict({"permissions": {"queue": "all"}})


class TestLoadConfig:
    def test_load(self, tmp_path: Path) -> None:
        path = tmp_path / "stackcomp.toml"
        path.write_text(
            '[runtime]\nstack_id_env = "APP_STACK"\n\n'
            "[edge]\nload_balancer_port = 8080\n\n"
            '[permissions.bucket]\nread = ["s3:GetObject"]\nwrite = []\ndelete = []\n',
            encoding="utf-8",
        )
        result = load_config(path)
        assert isinstance(result, Ok)
        assert result.value.runtime.stack_id_env == "APP_STACK"
        assert result.value.edge.load_balancer_port == 8080
        assert result.value.permissions["bucket"].read == ("s3:GetObject",)
        assert result.value.permissions["bucket"].write == ()

    def test_partial_permissions_table(self, tmp_path: Path) -> None:
        path = tmp_path / "stackcomp.toml"
        path.write_text('[permissions.bucket]\nread = ["s3:GetObject"]\n', encoding="utf-8")
        result = load_config(path)
        assert isinstance(result, Err)
        assert "permissions.bucket.write" in result.error.message

    def test_zero_port(self, tmp_path: Path) -> None:
        path = tmp_path / "stackcomp.toml"
        path.write_text("[edge]\nload_balancer_port = 0\n", encoding="utf-8")
        result = load_config(path)
        assert isinstance(result, Err)
        assert "load_balancer_port" in result.error.message

    def test_missing_file(self, tmp_path: Path) -> None:
        result = load_config(tmp_path / "missing.toml")
        assert isinstance(result, Err)
        assert "not found" in result.error.message

    def test_invalid_toml(self, tmp_path: Path) -> None:
        path = tmp_path / "bad.toml"
        path.write_text("[edge\n", encoding="utf-8")
        result = load_config(path)
        assert isinstance(result, Err)
        assert "Invalid TOML" in result.error.message
        assert result.error.path == path

    def test_invalid_structure(self, tmp_path: Path) -> None:
        path = tmp_path / "bad.toml"
        path.write_text('[permissions]\nqueue = "all"\n', encoding="utf-8")
        result = load_config(path)
        assert isinstance(result, Err)
        assert "Invalid config structure" in result.error.message

    def test_or_default(self, tmp_path: Path) -> None:
        assert load_config_or_default(tmp_path / "missing.toml") == ResolverConfig()
