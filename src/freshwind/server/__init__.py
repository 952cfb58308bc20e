"""HTTP side of freshwind: subscriber registry, routes and app assembly."""

from freshwind.server.registry import RELOAD_MESSAGE, ReloadRegistry, Subscriber
from freshwind.server.app import create_app, serve

__all__ = [
    "RELOAD_MESSAGE",
    "ReloadRegistry",
    "Subscriber",
    "create_app",
    "serve",
]
