"""Command line interface for thinkchat."""

from .app import app

__all__ = ["app"]
