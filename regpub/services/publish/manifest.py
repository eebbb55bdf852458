"""Access to the built packages under the build output directory."""

from __future__ import annotations

import json
from pathlib import Path

from regpub.core.config import DEFAULT_BUILD_DIR
from regpub.core.result import Err, Ok, Result
from regpub.core.structured import as_str_dict, get_str
from regpub.services.publish.errors import PublishError

MANIFEST_NAME = "package.json"


def package_dir(cwd: Path, package: str, *, build_dir: str = DEFAULT_BUILD_DIR) -> Path:
    # "@scope/name" lands in a nested directory, like node_modules does.
    return cwd.joinpath(build_dir, *package.split("/"))


def read_manifest_version(
    cwd: Path,
    package: str,
    *,
    build_dir: str = DEFAULT_BUILD_DIR,
) -> Result[str, PublishError]:
    path = package_dir(cwd, package, build_dir=build_dir) / MANIFEST_NAME
    try:
        obj: object = json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        return Err(
            PublishError(
                kind="manifest_unreadable",
                message=f"Missing {MANIFEST_NAME} for {package}",
                hint=str(path),
                package=package,
            )
        )
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
        return Err(
            PublishError(
                kind="manifest_unreadable",
                message=f"Cannot read {MANIFEST_NAME} for {package}: {e}",
                hint=str(path),
                package=package,
            )
        )

    data = as_str_dict(obj)
    version = get_str(data, "version") if data is not None else None
    if version is None:
        return Err(
            PublishError(
                kind="manifest_unreadable",
                message=f"No version in {MANIFEST_NAME} for {package}",
                hint=str(path),
                package=package,
            )
        )
    return Ok(version)
