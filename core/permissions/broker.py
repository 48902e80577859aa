"""Permission broker implementation."""

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable

from core.events import PERMISSION_ASKED, PERMISSION_REPLIED, Event, EventBus
from core.exceptions import InvalidOperationError, PermissionDeniedError
from core.ids import gen_id

from .express import ExpressModeState
from .models import Decision, PermissionRequest, ToolRef
from .patterns import WILDCARD
from .store import ApprovalCache, ProjectApprovalStore

logger = logging.getLogger(__name__)

DEFAULT_DENIAL_MESSAGE = "Permission denied by user"


@dataclass
class PendingApproval:
    """A permission request waiting for its single decision."""

    request: PermissionRequest
    future: asyncio.Future


# Applies a decision to a pending request. Returns the error to fail the
# caller with, or None to approve it.
DecisionHandler = Callable[[PendingApproval, str | None, bool], Exception | None]


class PermissionBroker:
    """
    Mediates tool side effects through an approve/deny protocol.

    Tool handlers await ask(); the UI sees a permission.asked event and
    answers through respond(). Approved patterns are memoized per session.
    """

    def __init__(
        self,
        event_bus: EventBus,
        cache: ApprovalCache | None = None,
        project_store: ProjectApprovalStore | None = None,
        express: ExpressModeState | None = None,
        persist_always: bool = False,
    ):
        """
        Initialize the permission broker.

        Args:
            event_bus: Event bus for publishing permission events
            cache: Session approval cache (a fresh one if omitted)
            project_store: Persisted project approvals, consulted by ask()
            express: Express mode state (a fresh, disabled one if omitted)
            persist_always: Also persist "always" decisions to project_store
        """
        self.event_bus = event_bus
        self.cache = cache or ApprovalCache()
        self.project_store = project_store
        self.express = express or ExpressModeState()
        self.persist_always = persist_always
        self._pending: Dict[str, PendingApproval] = {}
        self._decisions: Dict[str, DecisionHandler] = {
            Decision.APPROVE_ONCE.value: self._approve_once,
            Decision.APPROVE_SESSION.value: self._approve_session,
            Decision.APPROVE_ALWAYS.value: self._approve_always,
            Decision.REJECT.value: self._reject,
        }

    # -------------------------------------------------------------------------
    # Decisions
    # -------------------------------------------------------------------------

    def register_decision(self, name: str, handler: DecisionHandler) -> None:
        """
        Add or replace a decision the UI may send.

        Args:
            name: Decision name as it appears in respond()
            handler: Applies the decision; returns an exception to deny
        """
        self._decisions[name] = handler

    @property
    def decisions(self) -> list[str]:
        """Names of the accepted decisions."""
        return list(self._decisions)

    def _approve_once(self, pending: PendingApproval, message: str | None, wildcard: bool) -> None:
        return None

    def _approve_session(self, pending: PendingApproval, message: str | None, wildcard: bool) -> None:
        request = pending.request
        patterns: Iterable[str] = [WILDCARD] if wildcard else request.patterns
        for pattern in patterns:
            self.cache.add(request.session_id, request.permission, pattern)
        return None

    def _approve_always(self, pending: PendingApproval, message: str | None, wildcard: bool) -> None:
        self._approve_session(pending, message, wildcard)
        if self.persist_always and self.project_store is not None:
            request = pending.request
            patterns: Iterable[str] = [WILDCARD] if wildcard else request.patterns
            for pattern in patterns:
                self.project_store.add(request.permission, pattern)
        return None

    def _reject(self, pending: PendingApproval, message: str | None, wildcard: bool) -> Exception:
        if message:
            return PermissionDeniedError(f"Permission denied: {message}")
        return PermissionDeniedError(DEFAULT_DENIAL_MESSAGE)

    # -------------------------------------------------------------------------
    # Protocol
    # -------------------------------------------------------------------------

    def is_approved(self, session_id: str, permission: str, pattern: str) -> bool:
        """
        Check if a pattern is already approved for a session.

        Project approvals are checked first, then the session cache.
        """
        if self.project_store is not None and self.project_store.is_approved(permission, pattern):
            return True
        return self.cache.is_approved(session_id, permission, pattern)

    async def ask(
        self,
        session_id: str,
        permission: str,
        patterns: list[str],
        message: str,
        metadata: dict[str, Any] | None = None,
        tool: ToolRef | None = None,
    ) -> None:
        """
        Ask for permission and wait for the decision.

        Returns immediately when express mode is on or every pattern is
        already approved. Otherwise publishes a permission.asked event and
        suspends until respond() is called for it. There is no timeout.

        Args:
            session_id: The session ID
            permission: Permission kind ("edit", "bash", ...)
            patterns: Concrete targets of the action (paths, command lines)
            message: Human-readable description
            metadata: Tool-specific data for the UI
            tool: The tool call that triggered the request

        Raises:
            PermissionDeniedError: If the request is rejected
        """
        permission = getattr(permission, "value", permission)

        if self.express.enabled:
            logger.debug("Express mode: auto-approved %s %s", permission, patterns)
            return

        uncovered = [p for p in patterns if not self.is_approved(session_id, permission, p)]
        if not uncovered:
            logger.debug("Already approved for session %s: %s %s", session_id, permission, patterns)
            return

        request = PermissionRequest(
            id=gen_id("perm_"),
            session_id=session_id,
            permission=permission,
            patterns=tuple(uncovered),
            message=message,
            metadata=metadata or {},
            tool=tool,
        )

        future: asyncio.Future = asyncio.get_running_loop().create_future()
        # Registered before publishing so a subscriber may answer synchronously
        self._pending[request.id] = PendingApproval(request=request, future=future)
        logger.debug("Permission requested: %s (%s %s)", request.id, permission, list(uncovered))

        try:
            await self.event_bus.publish(
                Event(type=PERMISSION_ASKED, properties=request.model_dump(mode="json"))
            )
            await future
        finally:
            # Withdraws the request if the caller was cancelled
            self._pending.pop(request.id, None)

    async def respond(
        self,
        permission_id: str,
        response: Decision | str,
        message: str | None = None,
        wildcard: bool = False,
    ) -> bool:
        """
        Answer a pending permission request.

        Each request is resolved at most once; answering an unknown or
        already-answered request only logs a warning.

        Args:
            permission_id: The request ID
            response: The decision ("once", "session", "always", "reject", ...)
            message: Feedback, used as the denial reason on reject
            wildcard: Approve every pattern of this kind ("*") for the session

        Returns:
            True if a pending request was resolved

        Raises:
            InvalidOperationError: If the decision is not registered
        """
        decision = getattr(response, "value", response)
        handler = self._decisions.get(decision)
        if handler is None:
            raise InvalidOperationError(f"Unknown permission response: {decision}")

        pending = self._pending.pop(permission_id, None)
        if pending is None:
            logger.warning("Permission %s not found", permission_id)
            return False

        try:
            await self.event_bus.publish(
                Event(
                    type=PERMISSION_REPLIED,
                    properties={
                        "session_id": pending.request.session_id,
                        "permission_id": permission_id,
                        "response": decision,
                        "message": message,
                    },
                )
            )
        finally:
            # The caller is resolved even if publishing the reply fails
            try:
                error = handler(pending, message, wildcard)
            except Exception as e:
                logger.exception("Failed to apply %s to permission %s", decision, permission_id)
                error = e
            self._resolve(pending, error)
        logger.debug("Permission response received: %s -> %s", permission_id, decision)
        return True

    @staticmethod
    def _resolve(pending: PendingApproval, error: Exception | None) -> None:
        if pending.future.done():
            return
        if error is None:
            pending.future.set_result(None)
        else:
            pending.future.set_exception(error)

    def list_pending(self) -> list[PermissionRequest]:
        """Snapshot of all outstanding permission requests."""
        return [pending.request for pending in self._pending.values()]

    def get_pending(self, permission_id: str) -> PermissionRequest | None:
        """Get an outstanding permission request by ID."""
        pending = self._pending.get(permission_id)
        return pending.request if pending else None

    def clear_session_approvals(self, session_id: str) -> bool:
        """
        Forget every session approval, e.g. when the session ends.

        Returns:
            True if the session had approvals
        """
        return self.cache.clear_session(session_id)
