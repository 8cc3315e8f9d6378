"""
================================================================================
Allure Report Utilities
================================================================================

Helpers for attaching wait diagnostics to Allure reports.

Features:
- JSON and text attachment helpers
- Wait outcome attachment (condition, elapsed time, attempts, last error)

================================================================================
"""

import json
from typing import Any, Optional, Union

import allure

from .outcome import WaitSuccess, WaitTimedOut


# ================================================================================
# Attachment Helpers
# ================================================================================

def attach_json(data: Any, name: str = "Data"):
    """
    Attach JSON data to Allure report.

    Args:
        data: Data to attach (will be JSON serialized)
        name: Attachment name
    """
    json_str = json.dumps(data, indent=2, default=str)
    allure.attach(
        json_str,
        name=name,
        attachment_type=allure.attachment_type.JSON
    )


def attach_text(text: str, name: str = "Text"):
    """
    Attach text content to Allure report.

    Args:
        text: Text to attach
        name: Attachment name
    """
    allure.attach(
        text,
        name=name,
        attachment_type=allure.attachment_type.TEXT
    )


def attach_outcome(
    outcome: Union[WaitSuccess, WaitTimedOut],
    name: Optional[str] = None
):
    """
    Attach a wait outcome to the current Allure step.

    Timeouts also get their human-readable message attached, which is what
    a reviewer looks at first when a wait fails.

    Args:
        outcome: Result returned by a wait engine
        name: Attachment name (defaults to one derived from the status)
    """
    status = "✅ Wait succeeded" if outcome.succeeded else "⏱️ Wait timed out"
    attach_json(outcome.to_dict(), name=name or status)

    if isinstance(outcome, WaitTimedOut):
        attach_text(outcome.message, name="❌ Timeout details")


__all__ = [
    "attach_json",
    "attach_text",
    "attach_outcome",
]
