"""Dist-tag selection for a publish run."""

from __future__ import annotations

from regpub.core.result import Err, Ok, Result
from regpub.services.publish.errors import PublishError
from regpub.services.publish.model import DistTag, PublishRequest
from regpub.services.publish.semver import parse_version

LATEST: DistTag = "latest"
NEXT: DistTag = "next"


def resolve_tag(*, version: str, tag: DistTag | None) -> Result[DistTag, PublishError]:
    """Pick the dist-tag to publish under.

    Without an explicit tag, stable versions go to ``latest`` and prereleases
    to ``next``. ``latest`` is refused for prereleases.
    """
    parsed = parse_version(version)
    if parsed is None:
        return Err(
            PublishError(
                kind="invalid_version",
                message=f"Invalid version: {version!r}",
                hint="Expected a semantic version such as 1.2.3 or 1.2.3-rc.1",
            )
        )

    if tag is None:
        return Ok(NEXT if parsed.is_prerelease else LATEST)

    tag = tag.strip()
    if not tag:
        return Err(PublishError(kind="invalid_tag", message="The tag must not be empty."))
    if tag == LATEST and parsed.is_prerelease:
        return Err(
            PublishError(
                kind="invalid_tag",
                message="The tag `latest` can only be used for stable versions.",
                hint=f"{version} is a prerelease; omit --tag or pick another tag",
            )
        )
    return Ok(tag)


def should_advance_next(request: PublishRequest) -> bool:
    """Stable auto-tagged publishes also move ``next`` so it never lags ``latest``.

    An explicit tag always opts out.
    """
    if request.tag is not None:
        return False
    parsed = parse_version(request.version)
    return parsed is not None and not parsed.is_prerelease
