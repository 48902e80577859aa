"""
Gate server entry point.
"""
import logging
import os
from contextlib import asynccontextmanager
from pathlib import Path

import uvicorn
from fastapi import FastAPI

from config import (
    create_broker,
    create_gate,
    create_mode_state,
    create_registry,
    get_working_directory,
    load_config,
    resolve_base_dir,
)
from core.logging_config import setup_logging
from server import app, set_broker, set_mode_state, set_registry
from server.event_bus import get_event_bus

# Initialize logging before anything else
setup_logging()
logger = logging.getLogger(__name__)

# Constants
DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 8000


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Build the broker, mode state and tool registry for the project."""
    working_dir = resolve_base_dir(get_working_directory())
    config = load_config(Path(working_dir))

    logger.info("Starting gate server")
    logger.info("Working directory: %s", working_dir)
    logger.info("Default mode: %s", config.default_mode.value)

    broker = create_broker(config, get_event_bus(), working_dir)
    registry = create_registry(config, create_gate(config))
    set_broker(broker)
    set_registry(registry)
    set_mode_state(create_mode_state(config))
    logger.info("Registered %d tools", len(registry.get_all()))

    yield

    pending = broker.list_pending()
    if pending:
        logger.warning("Shutting down with %d unanswered permission request(s)", len(pending))
    set_broker(None)
    set_registry(None)
    set_mode_state(None)


app.router.lifespan_context = lifespan


def main() -> None:
    """Start the gate server."""
    host = os.environ.get("HOST", DEFAULT_HOST)
    port = int(os.environ.get("PORT", str(DEFAULT_PORT)))

    logger.info("Server listening on %s:%d", host, port)
    uvicorn.run(app, host=host, port=port)


if __name__ == "__main__":
    main()
