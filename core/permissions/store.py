"""Approval storage: in-memory session approvals and persisted project approvals."""

import json
import logging
from pathlib import Path
from typing import Dict, Set

from .patterns import is_pattern_covered

logger = logging.getLogger(__name__)


class ApprovalCache:
    """
    Session-scoped approved patterns.

    Maps session ID -> permission kind -> set of approved patterns. Entries
    only grow until the whole session is dropped with clear_session().
    """

    def __init__(self):
        """Initialize the approval cache."""
        self._sessions: Dict[str, Dict[str, Set[str]]] = {}

    def is_approved(self, session_id: str, permission: str, pattern: str) -> bool:
        """
        Check if a pattern is approved for a session.

        Args:
            session_id: The session ID
            permission: The permission kind
            pattern: The pattern to check

        Returns:
            True on an exact match or a "*" approval
        """
        approved = self._sessions.get(session_id, {}).get(permission)
        if not approved:
            return False
        return is_pattern_covered(approved, pattern)

    def add(self, session_id: str, permission: str, pattern: str) -> None:
        """
        Approve a pattern for the rest of a session.

        Args:
            session_id: The session ID
            permission: The permission kind
            pattern: The approved pattern ("*" approves the whole kind)
        """
        session = self._sessions.setdefault(session_id, {})
        session.setdefault(permission, set()).add(pattern)
        logger.info("Approved %s pattern for session %s: %s", permission, session_id, pattern)

    def get_session(self, session_id: str) -> dict[str, list[str]]:
        """
        Get a snapshot of a session's approvals.

        Args:
            session_id: The session ID

        Returns:
            Mapping of permission kind to sorted approved patterns
        """
        session = self._sessions.get(session_id, {})
        return {permission: sorted(patterns) for permission, patterns in session.items()}

    def clear_session(self, session_id: str) -> bool:
        """
        Drop every approval for a session.

        Args:
            session_id: The session ID

        Returns:
            True if the session had approvals
        """
        if session_id in self._sessions:
            del self._sessions[session_id]
            logger.info("Cleared approvals for session: %s", session_id)
            return True
        return False


class ProjectApprovalStore:
    """
    Project-scoped approved patterns, persisted as JSON.

    The file maps permission kind -> list of patterns. It is loaded lazily on
    first use and rewritten after every change.
    """

    def __init__(self, path: Path):
        """
        Initialize the store.

        Args:
            path: Location of the permissions JSON file
        """
        self.path = path
        self._approvals: Dict[str, Set[str]] | None = None

    def _load(self) -> Dict[str, Set[str]]:
        if self._approvals is not None:
            return self._approvals

        self._approvals = {}
        if not self.path.exists():
            return self._approvals

        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (json.JSONDecodeError, OSError) as e:
            logger.error("Failed to load project permissions from %s: %s", self.path, e)
            return self._approvals

        if not isinstance(data, dict):
            logger.error("Ignoring malformed project permissions file: %s", self.path)
            return self._approvals

        for permission, patterns in data.items():
            if isinstance(patterns, list):
                self._approvals[permission] = {str(p) for p in patterns}
        return self._approvals

    def _save(self) -> bool:
        approvals = self._load()
        data = {permission: sorted(patterns) for permission, patterns in approvals.items()}
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(json.dumps(data, indent=2), encoding="utf-8")
        except OSError as e:
            logger.error("Failed to save project permissions to %s: %s", self.path, e)
            return False
        return True

    def is_approved(self, permission: str, pattern: str) -> bool:
        """Check if a pattern is approved at project level."""
        approved = self._load().get(permission)
        if not approved:
            return False
        return is_pattern_covered(approved, pattern)

    def add(self, permission: str, pattern: str) -> None:
        """Persist a project-level approval."""
        self._load().setdefault(permission, set()).add(pattern)
        if self._save():
            logger.info("Persisted %s approval: %s", permission, pattern)

    def remove(self, permission: str, pattern: str) -> bool:
        """
        Remove a project-level approval.

        Returns:
            True if the pattern was present
        """
        approvals = self._load()
        patterns = approvals.get(permission)
        if not patterns or pattern not in patterns:
            return False

        patterns.discard(pattern)
        if not patterns:
            del approvals[permission]
        self._save()
        return True

    def clear(self) -> None:
        """Remove every project-level approval."""
        self._approvals = {}
        self._save()

    def as_dict(self) -> dict[str, list[str]]:
        """Snapshot of project approvals for display."""
        return {permission: sorted(patterns) for permission, patterns in self._load().items()}
