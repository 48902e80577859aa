"""
Agent-side execution gating: modes, path sanitizing, tool dispatch.
Exports the gate objects and the tool context the orchestrator builds.
"""
from .context import DEFAULT_SESSION_ID, ToolContext, get_tool_context, use_tool_context
from .modes import (
    DEFAULT_MODE,
    MODE_POLICIES,
    Mode,
    ModeGate,
    ModePolicy,
    ModeState,
    VisibilityClass,
    WriteScope,
    validate_write_path,
)
from .paths import is_within, sanitize_path
from .registry import (
    BUILTIN_SUBAGENTS,
    SubagentConfig,
    SubagentOutcome,
    SubagentRegistry,
    SubagentRunner,
)

__all__ = [
    # Modes
    "Mode",
    "DEFAULT_MODE",
    "MODE_POLICIES",
    "ModeGate",
    "ModePolicy",
    "ModeState",
    "VisibilityClass",
    "WriteScope",
    "validate_write_path",
    # Paths
    "sanitize_path",
    "is_within",
    # Context
    "ToolContext",
    "DEFAULT_SESSION_ID",
    "get_tool_context",
    "use_tool_context",
    # Subagents
    "SubagentConfig",
    "SubagentOutcome",
    "SubagentRegistry",
    "SubagentRunner",
    "BUILTIN_SUBAGENTS",
]
