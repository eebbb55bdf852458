"""Tests for regpub.core.config module."""

from __future__ import annotations

from pathlib import Path

from regpub.core.config import (
    CONFIG_FILE_NAME,
    PublishConfig,
    load_config,
    load_config_or_default,
)
from regpub.core.result import Err, Ok


class TestPublishConfig:
    def test_defaults(self) -> None:
        config = PublishConfig()
        assert config.npm == "npm"
        assert config.build_dir == "build/node_modules"
        assert config.propagation_delay == 5.0

    def test_from_dict_reads_publish_table(self) -> None:
        config = PublishConfig.from_dict(
            {"publish": {"npm": "pnpm", "build_dir": "out/pkgs", "propagation_delay": 2}}
        )
        assert config == PublishConfig(npm="pnpm", build_dir="out/pkgs", propagation_delay=2.0)

    def test_from_dict_empty_uses_defaults(self) -> None:
        assert PublishConfig.from_dict({}) == PublishConfig()

    def test_zero_delay_is_kept(self) -> None:
        config = PublishConfig.from_dict({"publish": {"propagation_delay": 0}})
        assert config.propagation_delay == 0.0


class TestLoadConfig:
    def test_valid_file(self, tmp_path: Path) -> None:
        path = tmp_path / "custom.toml"
        path.write_text('[publish]\nnpm = "/opt/node/bin/npm"\n', encoding="utf-8")

        result = load_config(path)

        assert isinstance(result, Ok)
        assert result.value.npm == "/opt/node/bin/npm"

    def test_missing_file(self, tmp_path: Path) -> None:
        result = load_config(tmp_path / "nope.toml")

        assert isinstance(result, Err)
        assert "not found" in result.error.message

    def test_invalid_toml(self, tmp_path: Path) -> None:
        path = tmp_path / "bad.toml"
        path.write_text("[publish\n", encoding="utf-8")

        result = load_config(path)

        assert isinstance(result, Err)
        assert "Invalid TOML" in result.error.message
        assert result.error.path == path

    def test_negative_delay_rejected(self, tmp_path: Path) -> None:
        path = tmp_path / "neg.toml"
        path.write_text("[publish]\npropagation_delay = -1\n", encoding="utf-8")

        result = load_config(path)

        assert isinstance(result, Err)
        assert "propagation_delay" in result.error.message


class TestLoadConfigOrDefault:
    def test_no_file_gives_defaults(self, tmp_path: Path) -> None:
        assert load_config_or_default(tmp_path) == Ok(PublishConfig())

    def test_reads_file_from_cwd(self, tmp_path: Path) -> None:
        (tmp_path / CONFIG_FILE_NAME).write_text(
            "[publish]\npropagation_delay = 0.5\n", encoding="utf-8"
        )

        result = load_config_or_default(tmp_path)

        assert isinstance(result, Ok)
        assert result.value.propagation_delay == 0.5

    def test_broken_file_is_still_an_error(self, tmp_path: Path) -> None:
        (tmp_path / CONFIG_FILE_NAME).write_text("not toml at all =", encoding="utf-8")

        assert isinstance(load_config_or_default(tmp_path), Err)
