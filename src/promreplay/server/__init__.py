"""HTTP surface of promreplay."""

from promreplay.server._app import create_app

__all__ = ["create_app"]
