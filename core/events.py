"""
Gate events and the EventBus protocol.

The broker and tools publish through an EventBus without knowing who
listens. The server's SSE bus forwards events to the UI, which answers
permission requests through the broker.

Event payloads:
    permission.asked    the PermissionRequest (id, session_id, permission,
                        patterns, message, metadata, tool, requested_at)
    permission.replied  session_id, permission_id, response, message
    mode.changed        from, to (plus session_id, reason when requested
                        by the model)
    express.changed     enabled, needs_warning
"""

from typing import Any, Protocol

from pydantic import BaseModel, Field


PERMISSION_ASKED = "permission.asked"
PERMISSION_REPLIED = "permission.replied"
MODE_CHANGED = "mode.changed"
EXPRESS_CHANGED = "express.changed"


class Event(BaseModel):
    """A typed event with a JSON-serializable payload."""

    type: str
    properties: dict[str, Any] = Field(default_factory=dict)


class EventBus(Protocol):
    async def publish(self, event: Event) -> None:
        """Deliver an event to the current subscribers."""
        ...


class NullEventBus:
    """Drops every event; for callers that nobody observes."""

    async def publish(self, event: Event) -> None:
        return None
