from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

PublishErrorKind = Literal[
    "invalid_tag",
    "invalid_version",
    "npm_missing",
    "publish_failed",
    "manifest_unreadable",
    "registry_query_failed",
    "tag_missing",
    "version_mismatch",
    "dist_tag_failed",
    "unexpected",
]


@dataclass(frozen=True, slots=True)
class PublishError:
    """One failure, either of the whole request or of a single package."""

    kind: PublishErrorKind
    message: str
    hint: str | None = None
    package: str | None = None

    def pretty(self) -> str:
        if self.hint:
            return f"{self.message}\n{self.hint}"
        return self.message


@dataclass(frozen=True, slots=True)
class PublishFailure:
    """Aggregate of every failure captured during one publish run."""

    errors: tuple[PublishError, ...]

    @property
    def message(self) -> str:
        details = "\n\n".join(e.pretty() for e in self.errors)
        return f"Failure publishing to NPM\n\n{details}"

    @property
    def packages(self) -> tuple[str, ...]:
        return tuple(e.package for e in self.errors if e.package is not None)

    def kinds(self) -> frozenset[PublishErrorKind]:
        return frozenset(e.kind for e in self.errors)

    def __str__(self) -> str:
        return self.message
