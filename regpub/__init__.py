"""Publish pre-built npm packages and verify their dist-tags."""

__version__ = "0.3.0"
