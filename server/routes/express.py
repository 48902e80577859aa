"""Express mode endpoints."""

from fastapi import APIRouter

from core.events import EXPRESS_CHANGED, Event
from core.permissions import ExpressToggle

from .permissions import require_broker

router = APIRouter()


@router.get("/express")
async def get_express() -> dict:
    """Current express mode flags."""
    return require_broker().express.model_dump()


@router.post("/express/toggle")
async def toggle_express() -> ExpressToggle:
    """
    Flip express mode.

    needs_warning is set the first time express mode is enabled, until the
    client acknowledges the warning.
    """
    broker = require_broker()
    result = broker.express.toggle()
    await broker.event_bus.publish(Event(type=EXPRESS_CHANGED, properties=result.model_dump()))
    return result


@router.post("/express/acknowledge")
async def acknowledge_express() -> dict:
    """Record that the user has seen the express mode warning."""
    broker = require_broker()
    broker.express.acknowledge()
    return {"success": True}
