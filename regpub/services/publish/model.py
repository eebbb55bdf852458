from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

DistTag = str


@dataclass(frozen=True, slots=True)
class PublishRequest:
    """Input of one publish run, as handed over by the release pipeline."""

    cwd: Path
    version: str
    packages: tuple[str, ...]
    tag: DistTag | None = None  # None: pick latest/next from the version
    otp: str | None = None
    dry_run: bool = False


@dataclass(frozen=True, slots=True)
class PublishedPackage:
    name: str
    version: str
    tag: DistTag
    next_advanced: bool = False
