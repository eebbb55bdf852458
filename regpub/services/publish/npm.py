"""Thin wrappers over the npm command line."""

from __future__ import annotations

import json
import shutil
from pathlib import Path

from regpub.core.config import DEFAULT_NPM
from regpub.core.result import Err, Ok, Result
from regpub.core.structured import as_str_dict, str_values
from regpub.output.console import ConsoleProtocol, Style
from regpub.platform.process import ProcessError
from regpub.platform.process import run as run_process
from regpub.services.publish.errors import PublishError, PublishErrorKind
from regpub.services.publish.model import DistTag
from regpub.services.publish.timeouts import NPM_PUBLISH_TIMEOUT_SECONDS, NPM_TIMEOUT_SECONDS

_OTP_FLAG = "--otp"


def ensure_npm_available(npm: str = DEFAULT_NPM) -> Result[None, PublishError]:
    if shutil.which(npm) is None:
        return Err(
            PublishError(
                kind="npm_missing",
                message=f"{npm}: missing",
                hint="Install Node.js (npm ships with it): https://nodejs.org/",
            )
        )
    return Ok(None)


def otp_args(otp: str | None) -> list[str]:
    # https://docs.npmjs.com/configuring-two-factor-authentication
    if otp is None or not otp.strip():
        return []
    return [_OTP_FLAG, otp.strip()]


def display_command(cmd: list[str]) -> str:
    """Render a command line for the console, with the OTP value masked."""
    shown: list[str] = []
    mask_next = False
    for arg in cmd:
        shown.append("***" if mask_next else arg)
        mask_next = arg == _OTP_FLAG
    return " ".join(shown)


def _failure_hint(error: ProcessError) -> str | None:
    if error.timed_out:
        # npm was killed; the registry may or may not have taken the change.
        return f"{error.stderr}; check `npm info <package> dist-tags` before retrying"
    return error.stderr.strip() or error.stdout.strip() or None


def _exec_unless_dry(
    cmd: list[str],
    *,
    cwd: Path,
    console: ConsoleProtocol,
    dry_run: bool,
    timeout: float,
    kind: PublishErrorKind,
    message: str,
    package: str,
) -> Result[None, PublishError]:
    console.print(display_command(cmd), Style.DIM)
    if dry_run:
        return Ok(None)

    result = run_process(cmd, cwd=cwd, timeout=timeout)
    if isinstance(result, Err):
        return Err(
            PublishError(
                kind=kind,
                message=message,
                hint=_failure_hint(result.error),
                package=package,
            )
        )
    return Ok(None)


def publish_package(
    *,
    package: str,
    package_dir: Path,
    tag: DistTag,
    otp: str | None,
    console: ConsoleProtocol,
    dry_run: bool,
    npm: str = DEFAULT_NPM,
) -> Result[None, PublishError]:
    return _exec_unless_dry(
        [npm, "publish", "--tag", tag, *otp_args(otp)],
        cwd=package_dir,
        console=console,
        dry_run=dry_run,
        timeout=NPM_PUBLISH_TIMEOUT_SECONDS,
        kind="publish_failed",
        message=f"npm publish failed for {package}",
        package=package,
    )


def add_dist_tag(
    *,
    package: str,
    version: str,
    tag: DistTag,
    otp: str | None,
    cwd: Path,
    console: ConsoleProtocol,
    dry_run: bool,
    npm: str = DEFAULT_NPM,
) -> Result[None, PublishError]:
    return _exec_unless_dry(
        [npm, "dist-tag", "add", f"{package}@{version}", tag, *otp_args(otp)],
        cwd=cwd,
        console=console,
        dry_run=dry_run,
        timeout=NPM_TIMEOUT_SECONDS,
        kind="dist_tag_failed",
        message=f"Failed to point {tag} at {package}@{version}",
        package=package,
    )


def fetch_dist_tags(
    *,
    package: str,
    cwd: Path,
    npm: str = DEFAULT_NPM,
) -> Result[dict[DistTag, str], PublishError]:
    """Return the registry's current tag -> version mapping for ``package``."""
    result = run_process(
        [npm, "info", package, "dist-tags", "--json"],
        cwd=cwd,
        timeout=NPM_TIMEOUT_SECONDS,
    )
    if isinstance(result, Err):
        return Err(
            PublishError(
                kind="registry_query_failed",
                message=f"npm info failed for {package}",
                hint=_failure_hint(result.error),
                package=package,
            )
        )

    try:
        obj: object = json.loads(result.value)
    except json.JSONDecodeError as e:
        return Err(
            PublishError(
                kind="registry_query_failed",
                message=f"npm info returned invalid JSON for {package}: {e}",
                package=package,
            )
        )

    data = as_str_dict(obj)
    if data is None:
        return Err(
            PublishError(
                kind="registry_query_failed",
                message=f"unexpected dist-tags payload for {package}",
                hint=result.value.strip() or None,
                package=package,
            )
        )
    return Ok(str_values(data))
