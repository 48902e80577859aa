"""Permission request and approval endpoints."""

import logging

from fastapi import APIRouter, HTTPException, Query

from core.exceptions import InvalidOperationError
from core.permissions import PermissionBroker, ProjectApprovalStore, Reply

from ..state import get_broker

logger = logging.getLogger(__name__)

router = APIRouter()


def require_broker() -> PermissionBroker:
    broker = get_broker()
    if broker is None:
        raise HTTPException(status_code=500, detail="Permission broker not initialized")
    return broker


def _require_project_store() -> ProjectApprovalStore:
    store = require_broker().project_store
    if store is None:
        raise HTTPException(status_code=500, detail="Project permissions not configured")
    return store


@router.get("/permission")
async def list_permissions() -> list[dict]:
    """List permission requests waiting for a decision."""
    broker = require_broker()
    return [request.model_dump(mode="json") for request in broker.list_pending()]


@router.post("/permission/{permissionID}/reply")
async def reply_to_permission(permissionID: str, reply: Reply) -> dict:
    """
    Answer a pending permission request.

    Args:
        permissionID: The permission request ID
        reply: The user's decision

    Returns:
        Success confirmation
    """
    broker = require_broker()
    try:
        found = await broker.respond(permissionID, reply.response, reply.message, reply.wildcard)
    except InvalidOperationError as e:
        raise HTTPException(status_code=400, detail=str(e))

    if not found:
        raise HTTPException(status_code=404, detail=f"Permission request not found: {permissionID}")

    logger.info("Permission %s answered: %s", permissionID, reply.response)
    return {"success": True}


@router.get("/session/{sessionID}/permissions")
async def get_session_permissions(sessionID: str) -> dict:
    """Patterns approved for a session, by permission kind."""
    broker = require_broker()
    return {"session_id": sessionID, "approved": broker.cache.get_session(sessionID)}


@router.delete("/session/{sessionID}/permissions")
async def clear_session_permissions(sessionID: str) -> dict:
    """
    Forget every approval granted for a session.

    Returns:
        Whether the session had any approvals
    """
    broker = require_broker()
    cleared = broker.clear_session_approvals(sessionID)
    return {"success": True, "cleared": cleared}


@router.get("/project/permissions")
async def get_project_permissions() -> dict:
    """Persisted project approvals, by permission kind."""
    return {"approved": _require_project_store().as_dict()}


@router.delete("/project/permissions")
async def clear_project_approvals() -> dict:
    """Remove every persisted project approval."""
    _require_project_store().clear()
    logger.info("Cleared project approvals")
    return {"success": True}


@router.delete("/project/permissions/{permission}")
async def remove_project_approval(permission: str, pattern: str = Query(...)) -> dict:
    """Remove a single persisted approval."""
    if not _require_project_store().remove(permission, pattern):
        raise HTTPException(status_code=404, detail=f"Approval not found: {permission} {pattern}")
    logger.info("Removed project approval: %s %s", permission, pattern)
    return {"success": True}
