"""Pattern matching logic for cached approvals."""

from typing import Collection

# Approves every pattern under a permission kind
WILDCARD = "*"


def is_pattern_covered(approved: Collection[str], pattern: str) -> bool:
    """
    Check if a pattern is covered by a set of approved patterns.

    Approvals are exact: "git status" covers only "git status". The only
    wildcard is the bare "*", which covers everything.

    Args:
        approved: Patterns approved so far
        pattern: The pattern to check

    Returns:
        True if the pattern is covered, False otherwise
    """
    return WILDCARD in approved or pattern in approved
