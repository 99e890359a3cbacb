"""Web surface: the republish page, its assets and the tracking pixel."""

from republish.web.app import create_app

__all__ = ["create_app"]
