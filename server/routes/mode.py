"""Operating mode endpoints."""

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel

from agent.modes import Mode, ModeState
from core.events import MODE_CHANGED, Event

from ..state import get_broker, get_mode_state

router = APIRouter()


class ModeUpdate(BaseModel):
    mode: Mode


def _require_mode_state() -> ModeState:
    mode_state = get_mode_state()
    if mode_state is None:
        raise HTTPException(status_code=500, detail="Mode state not initialized")
    return mode_state


@router.get("/mode")
async def get_mode() -> dict:
    """Current operating mode and the modes available."""
    return {
        "mode": _require_mode_state().get_current_mode().value,
        "available": [mode.value for mode in Mode],
    }


@router.put("/mode")
async def set_mode(update: ModeUpdate) -> dict:
    """Switch the operating mode; applies from the next turn."""
    previous = _require_mode_state().set_current_mode(update.mode)
    broker = get_broker()
    if broker is not None and previous != update.mode:
        await broker.event_bus.publish(
            Event(type=MODE_CHANGED, properties={"from": previous.value, "to": update.mode.value})
        )
    return {"mode": update.mode.value, "previous": previous.value}
