"""
Tool listing endpoints.
"""

from fastapi import APIRouter, HTTPException, Query

from agent.modes import Mode
from agent.tools import ToolDefinition, ToolRegistry

from ..state import get_mode_state, get_registry


router = APIRouter()


def _require_registry() -> ToolRegistry:
    registry = get_registry()
    if registry is None:
        raise HTTPException(status_code=500, detail="Tool registry not initialized")
    return registry


def get_tool_info(registry: ToolRegistry, tool: ToolDefinition) -> dict:
    """Describe a tool with its effective visibility class and input schema."""
    visibility = registry.visibility_of(tool.name)
    return {
        "id": tool.name,
        "description": tool.description,
        "visibility": visibility.value if visibility else None,
        "parameters": tool.parameters_schema(),
    }


@router.get("/tools")
async def list_tools(mode: Mode | None = Query(None)) -> list[dict]:
    """
    List the tools exposed in a mode.

    Defaults to the current mode; without mode state every tool is listed.
    """
    registry = _require_registry()
    mode_state = get_mode_state()
    if mode is None and mode_state is not None:
        mode = mode_state.get_current_mode()
    tools = registry.get_visible_tools(mode) if mode is not None else registry.get_all()
    return [get_tool_info(registry, tool) for tool in tools]


@router.get("/tools/{toolId}")
async def get_tool(toolId: str) -> dict:
    """Get a specific tool's schema."""
    registry = _require_registry()
    tool = registry.get(toolId)
    if tool is None:
        raise HTTPException(status_code=404, detail="Tool not found")
    return get_tool_info(registry, tool)
