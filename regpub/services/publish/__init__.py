"""Publish built packages to npm and verify their dist-tags."""

from .errors import PublishError, PublishFailure
from .model import PublishedPackage, PublishRequest
from .service import publish_to_npm

__all__ = [
    "PublishError",
    "PublishFailure",
    "PublishRequest",
    "PublishedPackage",
    "publish_to_npm",
]
