"""API package."""

from sweetbite.api.middleware import LoggingMiddleware
from sweetbite.api.routes import get_store, router

__all__ = [
    "router",
    "get_store",
    "LoggingMiddleware",
]
