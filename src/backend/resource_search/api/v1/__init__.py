"""Version 1 HTTP routers."""

from . import health, search

__all__ = ["health", "search"]
