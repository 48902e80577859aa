"""
Mode switch tool.

The model asks to change mode; the request is published as an event and
the orchestrator decides whether and when to apply it.
"""
from pydantic import BaseModel, Field

from core.events import MODE_CHANGED, Event

from ..context import get_tool_context
from ..modes import Mode
from .registry import ToolResult

SET_MODE_DESCRIPTION = """Request a switch to another operating mode.

Modes: AUTO, EXPLORE (read-only), AGENT (full access), PLANNER (writes to
docs/ only), PLAN-PRD (writes the PRD file only), DEBUG. The switch takes
effect from the next turn."""


class SetModeInput(BaseModel):
    mode: Mode = Field(description="Mode to switch to")
    reason: str = Field(default="", max_length=100, description="Why the switch is needed")


async def set_mode(params: SetModeInput) -> ToolResult:
    ctx = get_tool_context()
    await ctx.broker.event_bus.publish(
        Event(
            type=MODE_CHANGED,
            properties={
                "session_id": ctx.session_id,
                "from": Mode(ctx.mode).value,
                "to": params.mode.value,
                "reason": params.reason,
                "requested": True,
            },
        )
    )
    return ToolResult(
        success=True,
        output=f"Mode switch to {params.mode.value} requested",
        metadata={"type": "set_mode", "from": Mode(ctx.mode).value, "to": params.mode.value},
    )
