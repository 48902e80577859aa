"""
Permission system for runtime approval prompts.

Tool side effects are approved once, for the session, or always - or rejected -
through the PermissionBroker. Express mode bypasses every prompt.
"""

from .broker import DEFAULT_DENIAL_MESSAGE, PendingApproval, PermissionBroker
from .dangerous import is_dangerous_bash_command
from .express import ExpressModeState, ExpressToggle
from .models import (
    PERMISSION_LABELS,
    Decision,
    PermissionKind,
    PermissionRequest,
    Reply,
    ToolRef,
    permission_label,
)
from .patterns import WILDCARD, is_pattern_covered
from .store import ApprovalCache, ProjectApprovalStore

__all__ = [
    # Kinds and decisions
    "PermissionKind",
    "Decision",
    "PERMISSION_LABELS",
    "permission_label",
    # Models
    "PermissionRequest",
    "ToolRef",
    "Reply",
    "ExpressModeState",
    "ExpressToggle",
    "PendingApproval",
    # Functions
    "is_pattern_covered",
    "is_dangerous_bash_command",
    "WILDCARD",
    "DEFAULT_DENIAL_MESSAGE",
    # Classes
    "PermissionBroker",
    "ApprovalCache",
    "ProjectApprovalStore",
]
