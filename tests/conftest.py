"""
Shared pytest fixtures for all tests.
"""
import asyncio
import os
from pathlib import Path

import pytest

from agent.context import ToolContext
from agent.modes import Mode, ModeGate
from agent.tools import ToolRegistry, register_builtin_tools
from core.events import PERMISSION_ASKED, Event
from core.permissions import PermissionBroker


class RecordingEventBus:
    """EventBus that keeps every published event for inspection."""

    def __init__(self) -> None:
        self.events: list[Event] = []

    async def publish(self, event: Event) -> None:
        self.events.append(event)

    def of_type(self, event_type: str) -> list[Event]:
        return [event for event in self.events if event.type == event_type]

    async def wait_for(self, event_type: str, count: int = 1) -> Event:
        """Yield to the loop until the count-th event of a type arrives."""
        for _ in range(500):
            matching = self.of_type(event_type)
            if len(matching) >= count:
                return matching[count - 1]
            await asyncio.sleep(0.001)
        raise AssertionError(f"No {event_type} event published")


class AutoReplyEventBus(RecordingEventBus):
    """Answers every permission request as soon as it is published."""

    def __init__(self, response: str, message: str | None = None) -> None:
        super().__init__()
        self.response = response
        self.message = message
        self.broker: PermissionBroker | None = None

    async def publish(self, event: Event) -> None:
        await super().publish(event)
        if event.type == PERMISSION_ASKED and self.broker is not None:
            await self.broker.respond(event.properties["id"], self.response, self.message)


def make_broker(response: str, message: str | None = None) -> PermissionBroker:
    """Broker whose every request is answered with the given decision."""
    bus = AutoReplyEventBus(response, message)
    broker = PermissionBroker(bus)
    bus.broker = broker
    return broker


@pytest.fixture
def event_bus() -> RecordingEventBus:
    return RecordingEventBus()


@pytest.fixture
def broker(event_bus: RecordingEventBus) -> PermissionBroker:
    return PermissionBroker(event_bus)


@pytest.fixture
def project_dir(tmp_path: Path) -> Path:
    """A canonical project root with a docs directory and a source file."""
    root = Path(os.path.realpath(tmp_path)) / "project"
    (root / "docs").mkdir(parents=True)
    (root / "src").mkdir()
    (root / "src" / "main.py").write_text("def main():\n    return 1\n")
    return root


@pytest.fixture
def approving_broker() -> PermissionBroker:
    return make_broker("once")


@pytest.fixture
def rejecting_broker() -> PermissionBroker:
    return make_broker("reject", "not now")


@pytest.fixture
def registry() -> ToolRegistry:
    return register_builtin_tools(ToolRegistry(ModeGate()))


def make_context(broker: PermissionBroker, project_dir: Path, mode: Mode = Mode.AGENT, **kwargs) -> ToolContext:
    return ToolContext(broker=broker, session_id="ses_test", mode=mode, base_dir=str(project_dir), **kwargs)
