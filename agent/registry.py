"""
Subagent registry.

Subagents are launched by the task tool. Each one only ever sees its own
tool allowlist, whatever the parent agent may use.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Awaitable, Callable, Protocol

if TYPE_CHECKING:
    from .tools.registry import ToolResult


@dataclass
class SubagentConfig:
    """A subagent type and the tools it may call."""

    name: str
    description: str
    tools: list[str] = field(default_factory=list)

    def is_tool_enabled(self, tool_name: str) -> bool:
        """Check if a tool is on this subagent's allowlist."""
        return tool_name in self.tools


@dataclass
class SubagentOutcome:
    """What a subagent run produced."""

    success: bool
    output: str
    actions: list[str] = field(default_factory=list)


# Executes one tool call on behalf of a subagent: (tool name, raw input)
ToolExecutor = Callable[[str, Any], Awaitable["ToolResult"]]


class SubagentRunner(Protocol):
    """Drives a subagent's conversation loop against the model."""

    async def __call__(
        self,
        subagent: SubagentConfig,
        prompt: str,
        description: str,
        execute: ToolExecutor,
    ) -> SubagentOutcome:
        ...


BUILTIN_SUBAGENTS: dict[str, SubagentConfig] = {
    "explore": SubagentConfig(
        name="explore",
        description="Fast agent for codebase search and analysis with read-only tools",
        tools=["file_read", "glob", "grep"],
    ),
    "general": SubagentConfig(
        name="general",
        description="General-purpose agent for complex multi-step tasks",
        tools=["file_read", "file_write", "file_edit", "bash"],
    ),
}


class SubagentRegistry:
    """Registry of subagent types."""

    def __init__(self) -> None:
        self._subagents: dict[str, SubagentConfig] = BUILTIN_SUBAGENTS.copy()

    def register(self, config: SubagentConfig) -> None:
        """Register or replace a subagent type."""
        self._subagents[config.name] = config

    def get(self, name: str) -> SubagentConfig | None:
        return self._subagents.get(name)

    def list_names(self) -> list[str]:
        return list(self._subagents.keys())
