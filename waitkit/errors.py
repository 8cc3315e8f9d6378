"""
================================================================================
Wait Engine Errors
================================================================================

Error taxonomy for the polling wait engine.

    - ConfigurationError: invalid policy or configuration, never retried
    - TransientProbeError: state not settled yet, retried up to the deadline
    - FatalProbeError: the wait can never succeed, propagated immediately
    - WaitTimeoutError: raised only when a caller unwraps a timed-out outcome
    - WaitCancelledError: caller aborted the wait during suspension

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .outcome import WaitTimedOut


class WaitKitError(Exception):
    """Base class for all waitkit errors."""
    pass


class ConfigurationError(WaitKitError, ValueError):
    """Raised when a wait policy or configuration value is invalid."""
    pass


class TransientProbeError(WaitKitError):
    """Remote state is temporarily unavailable; polling should continue."""
    pass


class NotFoundError(TransientProbeError):
    """No node matched the locator (yet)."""

    def __init__(self, locator: str, message: str = ""):
        self.locator = locator
        super().__init__(message or f"No element matches locator: {locator}")


class DetachedError(TransientProbeError):
    """A node handle no longer refers to live state."""
    pass


class NotEnabledError(TransientProbeError):
    """A node exists and is visible but is not interactable yet."""
    pass


class FatalProbeError(WaitKitError):
    """The probe can no longer answer queries (e.g. session terminated)."""
    pass


class WaitTimeoutError(WaitKitError, TimeoutError):
    """
    Raised when a timed-out outcome is unwrapped.

    Attributes:
        outcome: The WaitTimedOut result that triggered the error
    """

    def __init__(self, outcome: "WaitTimedOut"):
        self.outcome = outcome
        super().__init__(outcome.message)


class WaitCancelledError(WaitKitError):
    """Raised when a wait is cancelled while suspended between polls."""
    pass


__all__ = [
    "WaitKitError",
    "ConfigurationError",
    "TransientProbeError",
    "NotFoundError",
    "DetachedError",
    "NotEnabledError",
    "FatalProbeError",
    "WaitTimeoutError",
    "WaitCancelledError",
]
