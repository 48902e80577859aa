"""
Task tool: launch a subagent for a self-contained piece of work.

The subagent runs with its own tool allowlist. Every tool call it makes
goes back through the registry with the parent's context, so mode gating
and permission prompts still apply.
"""
import dataclasses
import logging
from typing import Any

from pydantic import BaseModel, Field

from core.exceptions import CoreError
from core.permissions import PermissionKind

from ..context import get_tool_context
from ..registry import SubagentRegistry
from .registry import ToolRegistry, ToolResult

logger = logging.getLogger(__name__)

# Subagent types that only read and so launch without a prompt
READ_ONLY_SUBAGENTS = {"explore"}

TASK_DESCRIPTION = """Launch a subagent to handle a task on its own.

subagent_type selects the agent: "explore" for read-only codebase search,
"general" for multi-step work that may modify files. The subagent's final
answer is returned as this tool's output."""


class TaskInput(BaseModel):
    description: str = Field(min_length=1, max_length=100, description="Short description of the task")
    prompt: str = Field(min_length=1, description="Instructions for the subagent")
    subagent_type: str = Field(default="general", description="Type of subagent to launch")


def format_outcome(actions: list[str], output: str) -> str:
    if not actions:
        return output
    lines = ["Actions taken:"]
    lines.extend(f"  - {action}" for action in actions)
    lines.extend(["", "Result:", output])
    return "\n".join(lines)


def make_task_handler(tools: ToolRegistry, subagents: SubagentRegistry | None = None):
    """
    Build the task tool handler.

    Args:
        tools: Registry the subagent's tool calls are dispatched through
        subagents: Available subagent types (built-ins if omitted)

    Returns:
        Async handler taking a TaskInput
    """
    subagents = subagents or SubagentRegistry()

    async def task(params: TaskInput) -> ToolResult:
        ctx = get_tool_context()

        subagent = subagents.get(params.subagent_type)
        if subagent is None:
            available = ", ".join(subagents.list_names())
            return ToolResult.failure(f"Unknown subagent type: {params.subagent_type}. Available: {available}")

        try:
            ctx.gate.check_subagent(ctx.mode, subagent.name)
            if subagent.name not in READ_ONLY_SUBAGENTS:
                await ctx.ask(
                    PermissionKind.TASK,
                    [subagent.name],
                    f"Launch {subagent.name} subagent: {params.description}",
                    metadata={"subagent_type": subagent.name, "description": params.description},
                )
        except CoreError as e:
            return ToolResult.failure(str(e))

        if ctx.subagent_runner is None:
            return ToolResult.failure("No subagent runner configured")

        async def execute(tool_name: str, raw_input: Any) -> ToolResult:
            if not subagent.is_tool_enabled(tool_name):
                return ToolResult.failure(f'Tool "{tool_name}" is not allowed for {subagent.name} subagent')
            return await tools.execute(tool_name, raw_input, dataclasses.replace(ctx))

        logger.info("Launching %s subagent: %s", subagent.name, params.description)
        outcome = await ctx.subagent_runner(subagent, params.prompt, params.description, execute)

        return ToolResult(
            success=outcome.success,
            output=format_outcome(outcome.actions, outcome.output),
            metadata={
                "type": "task",
                "agent_type": subagent.name,
                "description": params.description,
                "action_count": len(outcome.actions),
                "actions": outcome.actions,
            },
        )

    return task
