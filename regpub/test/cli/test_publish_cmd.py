from __future__ import annotations

import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

from regpub import __version__
from regpub.cli.app import app
from regpub.cli.commands._helpers import failure_exit_code
from regpub.core.errors import ErrorCode
from regpub.core.result import Ok
from regpub.services.publish import npm as npm_mod
from regpub.services.publish import service as service_mod
from regpub.services.publish.errors import PublishError, PublishFailure

runner = CliRunner()


def _build(root: Path, name: str, version: str) -> None:
    pkg = root / "build" / "node_modules" / name
    pkg.mkdir(parents=True)
    (pkg / "package.json").write_text(json.dumps({"version": version}), encoding="utf-8")


@pytest.fixture
def npm_calls(monkeypatch: pytest.MonkeyPatch) -> list[list[str]]:
    calls: list[list[str]] = []
    registry = {"react": {"latest": "2.0.0"}, "scheduler": {"latest": "0.1.0"}}

    def fake_run(cmd: list[str], *, cwd: Path, timeout: float | None = None):
        del cwd
        del timeout
        calls.append(cmd)
        if cmd[1] == "info":
            return Ok(json.dumps(registry[cmd[2]]))
        return Ok("")

    monkeypatch.setattr(npm_mod, "run_process", fake_run)
    monkeypatch.setattr(service_mod, "sleep", lambda seconds: None)
    monkeypatch.setattr(service_mod, "ensure_npm_available", lambda npm: Ok(None))
    return calls


def test_version_flag() -> None:
    result = runner.invoke(app, ["--version"])
    assert result.exit_code == 0
    assert __version__ in result.output


def test_publish_success(tmp_path: Path, npm_calls: list[list[str]]) -> None:
    _build(tmp_path, "react", "2.0.0")

    result = runner.invoke(
        app, ["publish", "--version", "2.0.0", "--package", "react", "--cwd", str(tmp_path)]
    )

    assert result.exit_code == 0, result.output
    assert "react@2.0.0 -> latest (next updated)" in result.output
    assert ["npm", "dist-tag", "add", "react@2.0.0", "next"] in npm_calls


def test_publish_mismatch_exits_with_network_error(
    tmp_path: Path, npm_calls: list[list[str]]
) -> None:
    _build(tmp_path, "react", "2.0.0")
    _build(tmp_path, "scheduler", "0.2.0")

    result = runner.invoke(
        app,
        [
            "publish",
            "-v",
            "2.0.0",
            "-p",
            "react",
            "-p",
            "scheduler",
            "--cwd",
            str(tmp_path),
        ],
    )

    assert result.exit_code == int(ErrorCode.NETWORK_ERROR)
    assert "Published version 0.2.0 for scheduler but NPM shows 0.1.0" in result.output


def test_latest_with_prerelease_is_user_error(
    tmp_path: Path, npm_calls: list[list[str]]
) -> None:
    result = runner.invoke(
        app,
        [
            "publish",
            "--version",
            "2.0.0-rc.1",
            "--package",
            "react",
            "--tag",
            "latest",
            "--cwd",
            str(tmp_path),
        ],
    )

    assert result.exit_code == int(ErrorCode.USER_ERROR)
    assert npm_calls == []


def test_dry_run_prints_commands_only(tmp_path: Path, npm_calls: list[list[str]]) -> None:
    _build(tmp_path, "react", "2.0.0")

    result = runner.invoke(
        app,
        [
            "publish",
            "--version",
            "2.0.0",
            "--package",
            "react",
            "--otp",
            "999111",
            "--dry-run",
            "--cwd",
            str(tmp_path),
        ],
    )

    assert result.exit_code == 0, result.output
    assert "npm publish --tag latest --otp ***" in result.output
    assert "999111" not in result.output
    assert "[dry run]" in result.output
    assert npm_calls == []


def test_invalid_config_is_user_error(tmp_path: Path, npm_calls: list[list[str]]) -> None:
    (tmp_path / "regpub.toml").write_text("[publish\n", encoding="utf-8")

    result = runner.invoke(
        app, ["publish", "--version", "1.0.0", "--package", "react", "--cwd", str(tmp_path)]
    )

    assert result.exit_code == int(ErrorCode.USER_ERROR)
    assert npm_calls == []


def test_failure_exit_code_mapping() -> None:
    def failure(*kinds: str) -> PublishFailure:
        return PublishFailure(
            errors=tuple(PublishError(kind=k, message=k) for k in kinds)  # type: ignore[arg-type]
        )

    assert failure_exit_code(failure("invalid_version")) == ErrorCode.USER_ERROR
    assert failure_exit_code(failure("npm_missing")) == ErrorCode.ENV_ERROR
    assert failure_exit_code(failure("manifest_unreadable")) == ErrorCode.IO_ERROR
    assert (
        failure_exit_code(failure("manifest_unreadable", "version_mismatch"))
        == ErrorCode.NETWORK_ERROR
    )
    assert failure_exit_code(failure("unexpected")) == ErrorCode.NETWORK_ERROR
