from __future__ import annotations

from pathlib import Path

import typer

from regpub.cli.commands._helpers import exit_on_failure
from regpub.cli.context import build_context
from regpub.core.result import Err
from regpub.services.publish.model import PublishRequest
from regpub.services.publish.service import publish_to_npm


def publish(
    version: str = typer.Option(..., "--version", "-v", help="Version being released (semver)"),
    packages: list[str] = typer.Option(
        ..., "--package", "-p", help="Package to publish (repeatable)"
    ),
    tag: str | None = typer.Option(
        None, "--tag", help="Dist-tag (default: latest for stable, next for prereleases)"
    ),
    otp: str | None = typer.Option(
        None, "--otp", envvar="NPM_OTP", help="One-time password for two-factor auth"
    ),
    dry_run: bool = typer.Option(False, "--dry-run", help="Print npm commands without running them"),
    cwd: Path = typer.Option(Path("."), "--cwd", help="Directory containing build/node_modules"),
    config_path: Path | None = typer.Option(
        None, "--config", help="TOML config (default: regpub.toml in --cwd, if present)"
    ),
) -> None:
    """Publish built packages to npm and verify the registry dist-tags."""
    ctx = build_context(cwd=cwd, config_path=config_path)
    request = PublishRequest(
        cwd=ctx.cwd,
        version=version,
        packages=tuple(dict.fromkeys(packages)),
        tag=tag,
        otp=otp,
        dry_run=dry_run,
    )

    result = publish_to_npm(request, console=ctx.console, config=ctx.config)
    if isinstance(result, Err):
        exit_on_failure(result.error, ctx.console)

    for pkg in result.value:
        line = f"{pkg.name}@{pkg.version} -> {pkg.tag}"
        if pkg.next_advanced:
            line += " (next updated)"
        if dry_run:
            line += " [dry run]"
        ctx.console.success(line)
