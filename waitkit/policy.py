# ================================================================================
# Wait Policy Module
# ================================================================================
#
# This module defines how long and how often the wait engine polls, and which
# error kinds it swallows as transient regardless of the condition's own view.
#
# Key Features:
#   - Validated, immutable policy objects
#   - Pre-configured scenarios for common UI waits
#   - Union semantics for ignored error kinds
#
# Usage:
#   policy = WaitPolicy(timeout=10, poll_interval=0.25)
#   policy = get_wait_policy("spinner").ignoring(DetachedError)
#
# ================================================================================

import numbers
from dataclasses import dataclass, field, replace
from typing import Dict, Tuple, Type

from loguru import logger

from .errors import ConfigurationError


def _require_positive(name: str, value) -> None:
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        raise ConfigurationError(
            f"{name} must be a number of seconds, got {value!r}"
        )
    if not value > 0:
        raise ConfigurationError(f"{name} must be positive, got {value!r}")


@dataclass(frozen=True)
class WaitPolicy:
    """
    Configuration for a single wait.

    Attributes:
        timeout: Total wall-clock budget in seconds
        poll_interval: Delay between evaluations in seconds
        ignored_errors: Exception types always treated as transient

    Raises:
        ConfigurationError: If timeout or poll_interval is not positive
    """
    timeout: float = 10.0
    poll_interval: float = 0.5
    ignored_errors: Tuple[Type[BaseException], ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        _require_positive("timeout", self.timeout)
        _require_positive("poll_interval", self.poll_interval)

        ignored = tuple(self.ignored_errors)
        for error_type in ignored:
            if not (isinstance(error_type, type) and issubclass(error_type, BaseException)):
                raise ConfigurationError(
                    f"ignored_errors must contain exception types, got {error_type!r}"
                )
        object.__setattr__(self, "ignored_errors", ignored)

        if self.poll_interval > self.timeout:
            logger.debug(
                f"poll_interval ({self.poll_interval}s) exceeds timeout "
                f"({self.timeout}s); waits will make a single attempt"
            )

    @property
    def single_attempt(self) -> bool:
        """True when the interval is longer than the whole budget."""
        return self.poll_interval > self.timeout

    def ignores(self, error: BaseException) -> bool:
        return bool(self.ignored_errors) and isinstance(error, self.ignored_errors)

    def with_overrides(self, **changes) -> "WaitPolicy":
        """Return a new, re-validated policy with the given fields replaced."""
        return replace(self, **changes)

    def ignoring(self, *error_types: Type[BaseException]) -> "WaitPolicy":
        """Return a copy that additionally swallows ``error_types``."""
        merged = self.ignored_errors + tuple(
            e for e in error_types if e not in self.ignored_errors
        )
        return replace(self, ignored_errors=merged)


# Pre-configured wait policies for common scenarios
WAIT_SCENARIOS: Dict[str, WaitPolicy] = {
    # Default configuration
    "default": WaitPolicy(),

    # Quick checks against an already-rendered page
    "fast": WaitPolicy(timeout=3.0, poll_interval=0.1),

    # Single element appearing or becoming interactable
    "element": WaitPolicy(timeout=10.0, poll_interval=0.25),

    # Full navigation or SPA route change
    "page_load": WaitPolicy(timeout=30.0, poll_interval=0.5),

    # Loading indicators going away
    "spinner": WaitPolicy(timeout=60.0, poll_interval=0.5),

    # Backend-driven state changes surfacing in the UI
    "slow_backend": WaitPolicy(timeout=180.0, poll_interval=2.0),
}


def get_wait_policy(scenario: str) -> WaitPolicy:
    """
    Get the wait policy for a named scenario.

    Args:
        scenario: Scenario name (e.g., "element", "spinner")

    Returns:
        WaitPolicy for the scenario, or the default if not found
    """
    policy = WAIT_SCENARIOS.get(scenario)
    if policy is None:
        logger.debug(f"Unknown wait scenario '{scenario}', using default")
        return WAIT_SCENARIOS["default"]
    return policy


__all__ = [
    "WaitPolicy",
    "WAIT_SCENARIOS",
    "get_wait_policy",
]
