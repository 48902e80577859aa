"""Tools for the agent."""

from ..modes import VisibilityClass
from ..registry import SubagentRegistry
from .bash import BASH_DESCRIPTION, BashInput, bash, needs_permission
from .file_edit import FILE_EDIT_DESCRIPTION, FileEditInput, file_edit
from .file_read import FILE_READ_DESCRIPTION, FileReadInput, file_read
from .file_write import FILE_WRITE_DESCRIPTION, FileWriteInput, file_write
from .registry import ToolDefinition, ToolRegistry, ToolResult, strip_none_values
from .search import GLOB_DESCRIPTION, GREP_DESCRIPTION, GlobInput, GrepInput, glob, grep
from .set_mode import SET_MODE_DESCRIPTION, SetModeInput, set_mode
from .task import TASK_DESCRIPTION, TaskInput, make_task_handler


def register_builtin_tools(registry: ToolRegistry, subagents: SubagentRegistry | None = None) -> ToolRegistry:
    """Register the built-in tools with their visibility classes."""
    registry.register("file_read", FILE_READ_DESCRIPTION, FileReadInput, file_read, VisibilityClass.READ_ONLY)
    registry.register("glob", GLOB_DESCRIPTION, GlobInput, glob, VisibilityClass.READ_ONLY)
    registry.register("grep", GREP_DESCRIPTION, GrepInput, grep, VisibilityClass.READ_ONLY)
    registry.register("file_write", FILE_WRITE_DESCRIPTION, FileWriteInput, file_write, VisibilityClass.GATED)
    registry.register("file_edit", FILE_EDIT_DESCRIPTION, FileEditInput, file_edit, VisibilityClass.GATED)
    registry.register("bash", BASH_DESCRIPTION, BashInput, bash, VisibilityClass.GATED)
    registry.register(
        "task", TASK_DESCRIPTION, TaskInput, make_task_handler(registry, subagents), VisibilityClass.GATED
    )
    registry.register("set_mode", SET_MODE_DESCRIPTION, SetModeInput, set_mode, VisibilityClass.ALWAYS)
    return registry


__all__ = [
    "ToolRegistry",
    "ToolDefinition",
    "ToolResult",
    "strip_none_values",
    "register_builtin_tools",
    # Handlers
    "file_read",
    "file_write",
    "file_edit",
    "glob",
    "grep",
    "bash",
    "needs_permission",
    "set_mode",
    "make_task_handler",
    # Inputs
    "FileReadInput",
    "FileWriteInput",
    "FileEditInput",
    "GlobInput",
    "GrepInput",
    "BashInput",
    "SetModeInput",
    "TaskInput",
]
