"""
Route registration for the gate API.
"""

from fastapi import FastAPI

from . import events, express, health, mode, permissions, tools


def register_routes(app: FastAPI) -> None:
    """Register all routes with the FastAPI application."""
    for module in (events, express, health, mode, permissions, tools):
        app.include_router(module.router)
