"""HTTP surface for the redirect service."""

from waypoint.server.app import create_app

__all__ = ["create_app"]
