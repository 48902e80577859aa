"""Express mode: process-wide bypass of all permission prompts."""

import logging

from pydantic import BaseModel

logger = logging.getLogger(__name__)


class ExpressToggle(BaseModel):
    """Result of toggling express mode."""

    enabled: bool
    needs_warning: bool


class ExpressModeState(BaseModel):
    """
    Express mode flags.

    While enabled, the broker approves everything without asking.
    `acknowledged` records that the user saw the one-time warning; it stays
    set across toggles for the lifetime of the process.
    """

    enabled: bool = False
    acknowledged: bool = False

    def enable(self) -> bool:
        """
        Enable express mode.

        Returns:
            True if the warning has not been acknowledged yet
        """
        needs_warning = not self.acknowledged
        self.enabled = True
        logger.warning("EXPRESS MODE ENABLED - permission prompts are bypassed")
        return needs_warning

    def disable(self) -> None:
        """Disable express mode."""
        self.enabled = False
        logger.info("Express mode disabled")

    def acknowledge(self) -> None:
        """Record that the user has seen the express mode warning."""
        self.acknowledged = True

    def toggle(self) -> ExpressToggle:
        """Flip express mode."""
        if self.enabled:
            self.disable()
            return ExpressToggle(enabled=False, needs_warning=False)
        needs_warning = self.enable()
        return ExpressToggle(enabled=True, needs_warning=needs_warning)
