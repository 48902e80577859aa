"""
Core business logic package.

This package contains the transport-agnostic permission protocol: events,
errors and the broker tool handlers ask before performing side effects.
The server package provides HTTP bindings around these core operations.
"""

from .events import (
    EXPRESS_CHANGED,
    MODE_CHANGED,
    PERMISSION_ASKED,
    PERMISSION_REPLIED,
    Event,
    EventBus,
    NullEventBus,
)
from .exceptions import (
    CoreError,
    InvalidOperationError,
    ModeRestrictionError,
    NotFoundError,
    PermissionDeniedError,
    SecurityError,
    ToolValidationError,
)
from .ids import gen_id

__all__ = [
    # Exceptions
    "CoreError",
    "NotFoundError",
    "InvalidOperationError",
    "ToolValidationError",
    "PermissionDeniedError",
    "SecurityError",
    "ModeRestrictionError",
    # Events
    "Event",
    "EventBus",
    "NullEventBus",
    "PERMISSION_ASKED",
    "PERMISSION_REPLIED",
    "MODE_CHANGED",
    "EXPRESS_CHANGED",
    # Ids
    "gen_id",
]
