from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import typer

from regpub.core.config import PublishConfig, load_config, load_config_or_default
from regpub.core.errors import ErrorCode
from regpub.core.result import Err
from regpub.output.console import ConsoleProtocol, RichConsole


@dataclass(frozen=True, slots=True)
class CLIContext:
    cwd: Path
    config: PublishConfig
    console: ConsoleProtocol


def build_context(*, cwd: Path, config_path: Path | None = None) -> CLIContext:
    try:
        root = cwd.expanduser().resolve()
    except OSError as e:
        typer.echo(f"error: invalid --cwd: {e}", err=True)
        raise typer.Exit(code=int(ErrorCode.USER_ERROR))

    if not root.is_dir():
        typer.echo(f"error: --cwd '{root}' is not a directory", err=True)
        raise typer.Exit(code=int(ErrorCode.USER_ERROR))

    config_result = (
        load_config(config_path) if config_path is not None else load_config_or_default(root)
    )
    if isinstance(config_result, Err):
        typer.echo(f"error: {config_result.error.message}", err=True)
        raise typer.Exit(code=int(ErrorCode.USER_ERROR))

    return CLIContext(cwd=root, config=config_result.value, console=RichConsole())
