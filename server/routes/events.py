"""
Global event SSE endpoint.
"""

import json
from typing import AsyncGenerator

from fastapi import APIRouter, Query
from sse_starlette.sse import EventSourceResponse

from ..event_bus import get_event_bus


router = APIRouter()

# Seconds between keep-alive comments on an idle stream
PING_INTERVAL_SECONDS = 15


@router.get("/global/event")
async def global_event(
    types: str | None = Query(None, description="Comma-separated event types to receive"),
    session: str | None = Query(None, description="Only events for this session ID"),
) -> EventSourceResponse:
    """Stream permission, mode and express events via SSE."""
    event_bus = get_event_bus()
    wanted = {t.strip() for t in types.split(",") if t.strip()} if types else None
    # Subscribed before the response starts so nothing published meanwhile is lost
    queue = event_bus.subscribe()

    async def event_generator() -> AsyncGenerator[dict, None]:
        try:
            while True:
                event = await queue.get()
                if wanted is not None and event["type"] not in wanted:
                    continue
                event_session = event["properties"].get("session_id")
                if session is not None and event_session not in (None, session):
                    continue
                yield {"event": event["type"], "data": json.dumps(event)}
        finally:
            event_bus.unsubscribe(queue)

    return EventSourceResponse(event_generator(), ping=PING_INTERVAL_SECONDS)
