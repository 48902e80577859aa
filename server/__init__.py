"""
Gate API server.

Exposes pending permission requests, express mode and the operating mode
to the UI, and streams gate events over SSE.
"""

from .app import app
from .routes import register_routes
from .state import (
    get_broker,
    get_mode_state,
    get_registry,
    set_broker,
    set_mode_state,
    set_registry,
)

# Register all routes with the app
register_routes(app)

__all__ = [
    "app",
    "set_broker",
    "get_broker",
    "set_registry",
    "get_registry",
    "set_mode_state",
    "get_mode_state",
]
