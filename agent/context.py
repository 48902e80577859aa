"""
Per-dispatch execution context for tool handlers.

The orchestrator builds a ToolContext before each dispatch: the session,
the mode captured for this turn, the project root, and the gate objects.
It travels through a ContextVar so handlers read it without having it
threaded through every call, and concurrent sessions never see each
other's mode.
"""

from __future__ import annotations

import os
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Iterator

from core.permissions import PermissionBroker, ToolRef

from .modes import DEFAULT_MODE, Mode, ModeGate

if TYPE_CHECKING:
    from .registry import SubagentRunner

# Session used when a tool runs outside any orchestrated session
DEFAULT_SESSION_ID = "current"


@dataclass
class ToolContext:
    """Everything a tool handler may consult before performing an effect."""

    broker: PermissionBroker
    session_id: str = DEFAULT_SESSION_ID
    mode: Mode = DEFAULT_MODE
    base_dir: str = field(default_factory=os.getcwd)
    gate: ModeGate = field(default_factory=ModeGate)
    message_id: str | None = None
    call_id: str | None = None
    subagent_runner: SubagentRunner | None = None

    @property
    def tool_ref(self) -> ToolRef | None:
        """Reference to the triggering tool call, if known."""
        if self.message_id is None or self.call_id is None:
            return None
        return ToolRef(message_id=self.message_id, call_id=self.call_id)

    async def ask(
        self,
        permission: str,
        patterns: list[str],
        message: str,
        metadata: dict | None = None,
    ) -> None:
        """Ask the broker for permission on behalf of this session."""
        await self.broker.ask(
            session_id=self.session_id,
            permission=permission,
            patterns=patterns,
            message=message,
            metadata=metadata,
            tool=self.tool_ref,
        )

    def check_write_path(self, file_path: str) -> None:
        """Raise ModeRestrictionError if this turn's mode forbids the write."""
        self.gate.check_write_path(self.mode, file_path, self.base_dir)


_current_context: ContextVar[ToolContext | None] = ContextVar("current_tool_context", default=None)


def get_tool_context() -> ToolContext:
    """
    Get the context of the tool call being executed.

    Raises:
        RuntimeError: If no context is set
    """
    context = _current_context.get()
    if context is None:
        raise RuntimeError("No tool context set for this call")
    return context


@contextmanager
def use_tool_context(context: ToolContext) -> Iterator[ToolContext]:
    """Make a context current for the duration of a block."""
    token = _current_context.set(context)
    try:
        yield context
    finally:
        _current_context.reset(token)
