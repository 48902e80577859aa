"""Build the gating objects from a loaded Config."""

import logging
import os
from pathlib import Path

from agent.modes import ModeGate, ModeState
from agent.registry import SubagentRegistry
from agent.tools import ToolRegistry, register_builtin_tools
from core.events import EventBus
from core.permissions import ExpressModeState, PermissionBroker, ProjectApprovalStore

from .main_config import Config

logger = logging.getLogger(__name__)


def create_gate(config: Config) -> ModeGate:
    """Mode gate with the configured planning targets."""
    return ModeGate(docs_dir=config.modes.docs_dir, single_file=config.modes.single_file)


def create_broker(config: Config, event_bus: EventBus, base_dir: str) -> PermissionBroker:
    """
    Permission broker for a project.

    Express mode enabled from configuration counts as acknowledged: the
    user opted in explicitly, so no warning is due.
    """
    project_file = Path(base_dir) / config.permissions.project_file
    express = ExpressModeState(enabled=config.permissions.express, acknowledged=config.permissions.express)
    if express.enabled:
        logger.warning("Express mode enabled by configuration")
    return PermissionBroker(
        event_bus,
        project_store=ProjectApprovalStore(project_file),
        express=express,
        persist_always=config.permissions.persist_always,
    )


def create_registry(
    config: Config,
    gate: ModeGate | None = None,
    subagents: SubagentRegistry | None = None,
) -> ToolRegistry:
    """Tool registry with the built-in tools and configured visibility."""
    registry = ToolRegistry(
        gate=gate or create_gate(config),
        visibility_overrides=config.tools.visibility,
        default_timeout=config.tools.default_timeout,
    )
    return register_builtin_tools(registry, subagents)


def create_mode_state(config: Config) -> ModeState:
    return ModeState(config.default_mode)


def resolve_base_dir(base_dir: str) -> str:
    """Canonical project root; tools compare sanitized paths against it."""
    return os.path.realpath(base_dir)
