"""
Health check endpoint.
"""

from fastapi import APIRouter

from ..state import get_broker, get_registry


router = APIRouter()


@router.get("/health")
async def health() -> dict:
    """Health check endpoint."""
    broker = get_broker()
    return {
        "status": "ok",
        "broker_configured": broker is not None,
        "tools_registered": len(get_registry().get_all()) if get_registry() else 0,
        "pending_permissions": len(broker.list_pending()) if broker else 0,
    }
