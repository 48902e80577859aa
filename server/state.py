"""
Server-side state management.

The lifespan handler builds the gating objects and installs them here;
routes read them through the getters.
"""

from agent.modes import ModeState
from agent.tools import ToolRegistry
from core.permissions import PermissionBroker


# =============================================================================
# Permission Management
# =============================================================================

_broker: PermissionBroker | None = None


def set_broker(broker: PermissionBroker | None) -> None:
    """Set the permission broker instance."""
    global _broker
    _broker = broker


def get_broker() -> PermissionBroker | None:
    """Get the current permission broker instance."""
    return _broker


# =============================================================================
# Tool Management
# =============================================================================

_registry: ToolRegistry | None = None


def set_registry(registry: ToolRegistry | None) -> None:
    """Set the tool registry instance."""
    global _registry
    _registry = registry


def get_registry() -> ToolRegistry | None:
    """Get the current tool registry instance."""
    return _registry


# =============================================================================
# Mode Management
# =============================================================================

_mode_state: ModeState | None = None


def set_mode_state(mode_state: ModeState | None) -> None:
    """Set the orchestrator's mode state."""
    global _mode_state
    _mode_state = mode_state


def get_mode_state() -> ModeState | None:
    """Get the orchestrator's mode state."""
    return _mode_state
