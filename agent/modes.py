"""
Operating modes and the mode gate.

Each mode maps to a policy row: which tool visibility classes it exposes,
which tools it allows or denies by name, where it may write, and which
subagents the task tool may launch. Write checks compare paths as
strings and never read or create files.
"""

from __future__ import annotations

import logging
import ntpath
import os
from dataclasses import dataclass, field
from enum import Enum

from core.exceptions import ModeRestrictionError

logger = logging.getLogger(__name__)


class Mode(str, Enum):
    """Agent operating mode."""

    AUTO = "AUTO"  # Default, unrestricted
    EXPLORE = "EXPLORE"  # Read-only
    AGENT = "AGENT"  # Full execution
    PLANNER = "PLANNER"  # Research, writes limited to the docs directory
    PLAN_PRD = "PLAN-PRD"  # Writes limited to a single PRD file
    DEBUG = "DEBUG"  # Full execution, debugging workflow


DEFAULT_MODE = Mode.AUTO


class VisibilityClass(str, Enum):
    """How a tool is exposed across modes."""

    ALWAYS = "always"  # Utilities visible in every mode
    READ_ONLY = "read_only"  # No side effects
    GATED = "gated"  # Writes or executes


class WriteScope(str, Enum):
    """Where a mode may write."""

    ANYWHERE = "anywhere"
    NOWHERE = "nowhere"
    DOCS_DIR = "docs_dir"
    SINGLE_FILE = "single_file"


@dataclass(frozen=True)
class ModePolicy:
    """Policy row for one mode."""

    unrestricted: bool = False
    classes: frozenset[VisibilityClass] = frozenset()
    allow: frozenset[str] = frozenset()
    deny: frozenset[str] = frozenset()
    write_scope: WriteScope = WriteScope.NOWHERE
    # None means any subagent type may be launched
    subagents: frozenset[str] | None = None


_READ_CLASSES = frozenset({VisibilityClass.ALWAYS, VisibilityClass.READ_ONLY})
_PLANNING_ALLOW = frozenset({"file_write", "task"})
_PLANNING_DENY = frozenset({"bash", "file_edit"})
_EXPLORE_ONLY = frozenset({"explore"})

MODE_POLICIES: dict[Mode, ModePolicy] = {
    Mode.AUTO: ModePolicy(unrestricted=True, write_scope=WriteScope.ANYWHERE),
    Mode.AGENT: ModePolicy(unrestricted=True, write_scope=WriteScope.ANYWHERE),
    Mode.DEBUG: ModePolicy(unrestricted=True, write_scope=WriteScope.ANYWHERE),
    Mode.EXPLORE: ModePolicy(
        classes=_READ_CLASSES,
        deny=_PLANNING_DENY,
        write_scope=WriteScope.NOWHERE,
        subagents=_EXPLORE_ONLY,
    ),
    Mode.PLANNER: ModePolicy(
        classes=_READ_CLASSES,
        allow=_PLANNING_ALLOW,
        deny=_PLANNING_DENY,
        write_scope=WriteScope.DOCS_DIR,
        subagents=_EXPLORE_ONLY,
    ),
    Mode.PLAN_PRD: ModePolicy(
        classes=_READ_CLASSES,
        allow=_PLANNING_ALLOW,
        deny=_PLANNING_DENY,
        write_scope=WriteScope.SINGLE_FILE,
        subagents=_EXPLORE_ONLY,
    ),
}


def _normalize(path: str) -> str:
    return path.replace("\\", "/").lower()


def _relative_to_root(normalized: str, base_dir: str) -> str:
    # Sanitized paths have symlinks resolved, so try the resolved root too
    for root in (base_dir, os.path.realpath(base_dir)):
        prefix = _normalize(root).rstrip("/") + "/"
        if normalized.startswith(prefix):
            return normalized[len(prefix):]
    return normalized


@dataclass
class ModeGate:
    """
    Enforces per-mode tool visibility and write-path restrictions.

    Attributes:
        docs_dir: Project-relative directory the PLANNER mode may write to
        single_file: File name the PLAN-PRD mode may write
        policies: Policy table, keyed by mode
    """

    docs_dir: str = "docs"
    single_file: str = "PRD.md"
    policies: dict[Mode, ModePolicy] = field(default_factory=lambda: dict(MODE_POLICIES))

    def policy(self, mode: Mode | str) -> ModePolicy:
        """Look up the policy row for a mode."""
        return self.policies[Mode(mode)]

    def is_tool_visible(self, mode: Mode | str, tool_name: str, visibility: VisibilityClass | None) -> bool:
        """
        Check if a tool is exposed in a mode.

        Tools without an explicit visibility class are only exposed by
        unrestricted modes or by name in an allowlist.

        Args:
            mode: The operating mode
            tool_name: The tool's registered name
            visibility: The tool's class, None if unclassified

        Returns:
            True if the tool should be offered to the model
        """
        policy = self.policy(mode)
        if tool_name in policy.deny:
            return False
        if policy.unrestricted or tool_name in policy.allow:
            return True
        return visibility is not None and visibility in policy.classes

    def can_write_files(self, mode: Mode | str) -> bool:
        """Check if a mode may write anywhere."""
        return self.policy(mode).write_scope == WriteScope.ANYWHERE

    def validate_write_path(self, mode: Mode | str, file_path: str, base_dir: str | None = None) -> str | None:
        """
        Validate a write target against the mode's write scope.

        The path is expected to be sanitized already.

        Args:
            mode: The operating mode
            file_path: Path about to be written
            base_dir: Project root used to compute the relative form

        Returns:
            None if the write is allowed, otherwise the denial message
        """
        mode = Mode(mode)
        scope = self.policy(mode).write_scope

        if scope == WriteScope.ANYWHERE:
            return None

        if scope == WriteScope.NOWHERE:
            return f"{mode.value} mode is read-only. Switch to AGENT mode to write files."

        normalized = _normalize(file_path)

        if scope == WriteScope.DOCS_DIR:
            relative = _relative_to_root(normalized, base_dir if base_dir is not None else os.getcwd())
            docs = _normalize(self.docs_dir).strip("/") + "/"
            if relative.startswith(docs):
                return None
            return (
                f"{mode.value} mode can only write to {self.docs_dir}/. "
                f"Requested path: {file_path}. Switch to AGENT mode to write elsewhere."
            )

        # SINGLE_FILE: ntpath.basename splits on both separator styles
        if ntpath.basename(normalized) == self.single_file.lower():
            return None
        return (
            f"{mode.value} mode can only write {self.single_file}. "
            f"Requested path: {file_path}. Switch to AGENT mode to write elsewhere."
        )

    def check_write_path(self, mode: Mode | str, file_path: str, base_dir: str | None = None) -> None:
        """
        Raise if the mode forbids writing to a path.

        Raises:
            ModeRestrictionError: With the denial message from validate_write_path()
        """
        error = self.validate_write_path(mode, file_path, base_dir)
        if error:
            logger.info("Write blocked by %s mode: %s", Mode(mode).value, file_path)
            raise ModeRestrictionError(error, Mode(mode).value)

    def check_subagent(self, mode: Mode | str, subagent_type: str) -> None:
        """
        Raise if the mode forbids launching a subagent type.

        Raises:
            ModeRestrictionError: If the subagent type is not permitted
        """
        mode = Mode(mode)
        allowed = self.policy(mode).subagents
        if allowed is None or subagent_type in allowed:
            return
        names = ", ".join(f'"{name}"' for name in sorted(allowed))
        raise ModeRestrictionError(
            f'{mode.value} mode can only launch {names} subagents, not "{subagent_type}". '
            f"Switch to AGENT mode to launch other subagents.",
            mode.value,
        )


_default_gate = ModeGate()


def validate_write_path(mode: Mode | str, file_path: str, base_dir: str | None = None) -> str | None:
    """validate_write_path() with the default docs directory and PRD file."""
    return _default_gate.validate_write_path(mode, file_path, base_dir)


class ModeState:
    """
    The current mode, owned by the orchestrator.

    Set before each model turn; tool handlers read the mode captured in
    their ToolContext, never this object directly.
    """

    def __init__(self, mode: Mode | str = DEFAULT_MODE):
        self._mode = Mode(mode)

    def get_current_mode(self) -> Mode:
        """Get the current mode."""
        return self._mode

    def set_current_mode(self, mode: Mode | str) -> Mode:
        """Set the current mode; returns the previous one."""
        previous, self._mode = self._mode, Mode(mode)
        if previous != self._mode:
            logger.info("Mode changed: %s -> %s", previous.value, self._mode.value)
        return previous
