"""Publish a set of built packages and verify each one on the registry.

Every package is published on its own worker. A failing package never stops
its siblings; all outcomes are collected and folded into one result once the
fan-out is complete.
"""

from __future__ import annotations

import traceback
from concurrent.futures import ThreadPoolExecutor
from time import sleep

from regpub.core.config import PublishConfig
from regpub.core.result import Err, Ok, Result
from regpub.output.action import run_action
from regpub.output.console import ConsoleProtocol
from regpub.services.publish.errors import PublishError, PublishFailure
from regpub.services.publish.manifest import package_dir, read_manifest_version
from regpub.services.publish.model import DistTag, PublishedPackage, PublishRequest
from regpub.services.publish.npm import (
    add_dist_tag,
    ensure_npm_available,
    fetch_dist_tags,
    publish_package,
)
from regpub.services.publish.tags import NEXT, resolve_tag, should_advance_next

PUBLISH_ACTION_LABEL = "Publishing packages to NPM"


def verify_dist_tag(
    *,
    package: str,
    tag: DistTag,
    expected: str,
    dist_tags: dict[DistTag, str],
) -> Result[None, PublishError]:
    remote = dist_tags.get(tag)
    if remote is None:
        known = ", ".join(f"{k}={v}" for k, v in sorted(dist_tags.items()))
        return Err(
            PublishError(
                kind="tag_missing",
                message=f"Published version {expected} for {package} but NPM has no `{tag}` tag",
                hint=f"dist-tags: {known}" if known else None,
                package=package,
            )
        )
    if remote != expected:
        return Err(
            PublishError(
                kind="version_mismatch",
                message=f"Published version {expected} for {package} but NPM shows {remote}",
                package=package,
            )
        )
    return Ok(None)


def _publish_one(
    *,
    package: str,
    request: PublishRequest,
    tag: DistTag,
    config: PublishConfig,
    console: ConsoleProtocol,
) -> Result[PublishedPackage, PublishError]:
    pkg_dir = package_dir(request.cwd, package, build_dir=config.build_dir)

    published = publish_package(
        package=package,
        package_dir=pkg_dir,
        tag=tag,
        otp=request.otp,
        console=console,
        dry_run=request.dry_run,
        npm=config.npm,
    )
    if isinstance(published, Err):
        return published

    version_r = read_manifest_version(request.cwd, package, build_dir=config.build_dir)
    if isinstance(version_r, Err):
        return version_r
    version = version_r.value

    if request.dry_run:
        return Ok(PublishedPackage(name=package, version=version, tag=tag))

    sleep(config.propagation_delay)

    dist_tags = fetch_dist_tags(package=package, cwd=pkg_dir, npm=config.npm)
    if isinstance(dist_tags, Err):
        return dist_tags

    verified = verify_dist_tag(
        package=package, tag=tag, expected=version, dist_tags=dist_tags.value
    )
    if isinstance(verified, Err):
        return verified

    if not should_advance_next(request):
        return Ok(PublishedPackage(name=package, version=version, tag=tag))

    advanced = add_dist_tag(
        package=package,
        version=version,
        tag=NEXT,
        otp=request.otp,
        cwd=pkg_dir,
        console=console,
        dry_run=request.dry_run,
        npm=config.npm,
    )
    if isinstance(advanced, Err):
        return advanced

    return Ok(PublishedPackage(name=package, version=version, tag=tag, next_advanced=True))


def _publish_one_isolated(
    *,
    package: str,
    request: PublishRequest,
    tag: DistTag,
    config: PublishConfig,
    console: ConsoleProtocol,
) -> Result[PublishedPackage, PublishError]:
    try:
        return _publish_one(
            package=package, request=request, tag=tag, config=config, console=console
        )
    except Exception as e:  # a crash in one worker is that package's failure
        return Err(
            PublishError(
                kind="unexpected",
                message=f"{package}: {type(e).__name__}: {e}",
                hint=traceback.format_exc().rstrip(),
                package=package,
            )
        )


def publish_packages(
    request: PublishRequest,
    *,
    console: ConsoleProtocol,
    config: PublishConfig | None = None,
) -> Result[tuple[PublishedPackage, ...], PublishFailure]:
    """Publish, verify and (for stable auto-tagged runs) advance ``next``.

    Returns the published packages in request order, or every captured
    failure. Tag validation happens before anything is published.
    """
    cfg = config or PublishConfig()

    tag_r = resolve_tag(version=request.version, tag=request.tag)
    if isinstance(tag_r, Err):
        return Err(PublishFailure(errors=(tag_r.error,)))
    tag = tag_r.value

    if not request.packages:
        return Ok(())

    if not request.dry_run:
        npm_r = ensure_npm_available(cfg.npm)
        if isinstance(npm_r, Err):
            return Err(PublishFailure(errors=(npm_r.error,)))

    with ThreadPoolExecutor(max_workers=len(request.packages)) as pool:
        futures = [
            pool.submit(
                _publish_one_isolated,
                package=package,
                request=request,
                tag=tag,
                config=cfg,
                console=console,
            )
            for package in request.packages
        ]
        outcomes = [future.result() for future in futures]

    errors = tuple(o.error for o in outcomes if isinstance(o, Err))
    if errors:
        return Err(PublishFailure(errors=errors))
    return Ok(tuple(o.value for o in outcomes if isinstance(o, Ok)))


def publish_to_npm(
    request: PublishRequest,
    *,
    console: ConsoleProtocol,
    config: PublishConfig | None = None,
) -> Result[tuple[PublishedPackage, ...], PublishFailure]:
    """Entry point for the release pipeline: one named action around the run."""
    return run_action(
        console,
        PUBLISH_ACTION_LABEL,
        lambda: publish_packages(request, console=console, config=config),
    )
