"""Permission system models."""

import time
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class PermissionKind(str, Enum):
    """Built-in permission kinds.

    Kinds are open strings on the wire; tools may ask under any other name.
    """

    EDIT = "edit"
    WRITE = "write"
    BASH = "bash"
    TASK = "task"


PERMISSION_LABELS: dict[str, str] = {
    PermissionKind.EDIT.value: "Edit file",
    PermissionKind.WRITE.value: "Create file",
    PermissionKind.BASH.value: "Execute command",
    PermissionKind.TASK.value: "Launch subagent",
}


def permission_label(permission: str) -> str:
    """Human-readable label for a permission kind (unknown kinds label as themselves)."""
    key = getattr(permission, "value", permission)
    return PERMISSION_LABELS.get(key, key)


class Decision(str, Enum):
    """Built-in responses to a permission request."""

    APPROVE_ONCE = "once"
    APPROVE_SESSION = "session"
    APPROVE_ALWAYS = "always"
    REJECT = "reject"


class ToolRef(BaseModel):
    """The tool call that triggered a permission request."""

    model_config = ConfigDict(frozen=True)

    message_id: str
    call_id: str


class PermissionRequest(BaseModel):
    """Permission request for a side-effecting operation."""

    model_config = ConfigDict(frozen=True)

    id: str
    session_id: str
    permission: str  # "edit", "write", "bash", "task", ...
    patterns: tuple[str, ...]  # file paths, command lines
    message: str
    metadata: dict[str, Any] = Field(default_factory=dict)
    tool: ToolRef | None = None
    requested_at: float = Field(default_factory=time.time)


class Reply(BaseModel):
    """A response to a pending permission request."""

    response: str
    message: str | None = None
    wildcard: bool = False
