"""
================================================================================
waitkit
================================================================================

Explicit-wait engine for UI automation.

Components:
    - engine: bounded polling (WaitEngine, AsyncWaitEngine, wait_until)
    - conditions: standard conditions (presence, visibility, clickable, ...)
    - policy: timeout/interval/ignored-error policies and named scenarios
    - playwright_probe: Playwright page adapter
    - pages: page objects built on explicit waits
    - config_loader / logging_setup / reporting: ambient tooling

Author: Automation Team
License: MIT
================================================================================
"""

from .clock import CancellationToken, SystemClock
from .conditions import (
    Condition,
    all_of,
    any_of,
    attribute_equals,
    clickable,
    count_equals,
    custom_predicate,
    gone,
    invisibility,
    presence,
    text_contains,
    text_equals,
    visibility,
)
from .engine import AsyncWaitEngine, WaitEngine, wait_until
from .errors import (
    ConfigurationError,
    DetachedError,
    FatalProbeError,
    NotEnabledError,
    NotFoundError,
    TransientProbeError,
    WaitCancelledError,
    WaitKitError,
    WaitTimeoutError,
)
from .outcome import NOT_YET, Ready, WaitSuccess, WaitTimedOut
from .policy import WAIT_SCENARIOS, WaitPolicy, get_wait_policy

__version__ = "1.0.0"

__all__ = [
    "CancellationToken",
    "SystemClock",
    "Condition",
    "all_of",
    "any_of",
    "attribute_equals",
    "clickable",
    "count_equals",
    "custom_predicate",
    "gone",
    "invisibility",
    "presence",
    "text_contains",
    "text_equals",
    "visibility",
    "AsyncWaitEngine",
    "WaitEngine",
    "wait_until",
    "ConfigurationError",
    "DetachedError",
    "FatalProbeError",
    "NotEnabledError",
    "NotFoundError",
    "TransientProbeError",
    "WaitCancelledError",
    "WaitKitError",
    "WaitTimeoutError",
    "NOT_YET",
    "Ready",
    "WaitSuccess",
    "WaitTimedOut",
    "WAIT_SCENARIOS",
    "WaitPolicy",
    "get_wait_policy",
]
