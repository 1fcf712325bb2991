"""Flask JSON API for playing against the tree-search AI."""

from .app import create_app

__all__ = ["create_app"]
