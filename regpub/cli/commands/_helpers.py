"""Shared helpers for CLI commands."""

from __future__ import annotations

from typing import NoReturn

import typer

from regpub.core.errors import ErrorCode
from regpub.output.console import ConsoleProtocol, Style
from regpub.services.publish.errors import PublishErrorKind, PublishFailure

_USER_KINDS: frozenset[PublishErrorKind] = frozenset({"invalid_tag", "invalid_version"})
_IO_KINDS: frozenset[PublishErrorKind] = frozenset({"manifest_unreadable"})


def failure_exit_code(failure: PublishFailure) -> ErrorCode:
    """Map the captured failures to one exit code, most specific first."""
    kinds = failure.kinds()
    if kinds & _USER_KINDS:
        return ErrorCode.USER_ERROR
    if "npm_missing" in kinds:
        return ErrorCode.ENV_ERROR
    if kinds <= _IO_KINDS:
        return ErrorCode.IO_ERROR
    # Everything else, "unexpected" included, happened while talking to npm:
    # the package may or may not be on the registry.
    return ErrorCode.NETWORK_ERROR


def exit_on_failure(failure: PublishFailure, console: ConsoleProtocol) -> NoReturn:
    console.newline()
    console.print("Failure publishing to NPM", Style.ERROR)
    for error in failure.errors:
        console.newline()
        console.print(error.message, Style.BOLD)
        if error.hint:
            console.print(error.hint, Style.DIM)
    raise typer.Exit(code=int(failure_exit_code(failure)))
