"""
================================================================================
Playwright Probe
================================================================================

Adapter exposing a Playwright page as a read-only probe for the wait engine.

Error mapping:
    - empty query result                  -> NotFoundError (transient)
    - "not attached to the DOM" errors    -> DetachedError (transient)
    - page/context/browser closed errors  -> FatalProbeError
    - anything else                       -> propagated unchanged (fatal)

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

from typing import Any, Callable, List, Optional, TypeVar

from loguru import logger
from playwright.sync_api import ElementHandle, Error as PlaywrightError, Page

from .errors import DetachedError, FatalProbeError, NotFoundError


T = TypeVar("T")

DETACHED_MARKERS = (
    "not attached to the dom",
    "element is detached",
    "execution context was destroyed",
)

CLOSED_MARKERS = (
    "target page, context or browser has been closed",
    "target closed",
    "browser has been closed",
    "connection closed",
)


def translate_error(error: PlaywrightError) -> Exception:
    """Map a Playwright error onto the wait engine's error taxonomy."""
    message = (error.message or str(error)).lower()
    if any(marker in message for marker in DETACHED_MARKERS):
        return DetachedError(error.message)
    if any(marker in message for marker in CLOSED_MARKERS):
        return FatalProbeError(error.message)
    return error


def _call(fn: Callable[..., T], *args: Any) -> T:
    try:
        return fn(*args)
    except PlaywrightError as e:
        translated = translate_error(e)
        if translated is e:
            raise
        raise translated from e


class PlaywrightNode:
    """
    Node handle backed by a Playwright ElementHandle.

    Reads are what conditions use; ``click`` and ``fill`` are there for page
    objects acting on a node after a wait returned it.
    """

    def __init__(self, handle: ElementHandle, locator: str = ""):
        self.handle = handle
        self.locator = locator

    def is_visible(self) -> bool:
        return _call(self.handle.is_visible)

    def is_enabled(self) -> bool:
        return _call(self.handle.is_enabled)

    def text(self) -> str:
        return _call(self.handle.inner_text)

    def attribute(self, name: str) -> Optional[str]:
        return _call(self.handle.get_attribute, name)

    def click(self) -> None:
        _call(self.handle.click)

    def fill(self, value: str) -> None:
        _call(self.handle.fill, value)

    def __repr__(self) -> str:
        return f"PlaywrightNode({self.locator!r})"


class PlaywrightProbe:
    """
    Read-only probe over a synchronous Playwright page.

    Usage:
        >>> probe = PlaywrightProbe(page)
        >>> engine = WaitEngine(probe)
        >>> engine.run(visibility("[data-testid='btn-login']"), policy)
    """

    def __init__(self, page: Page):
        """
        Initialize probe.

        Args:
            page: Playwright Page object owned by the calling worker
        """
        self.page = page

    def query(self, locator: str) -> List[PlaywrightNode]:
        """
        Return handles for every element matching ``locator``.

        Raises:
            NotFoundError: If nothing matches
        """
        handles = _call(self.page.query_selector_all, locator)
        if not handles:
            raise NotFoundError(locator)
        logger.debug(f"Probe matched {len(handles)} element(s) for: {locator}")
        return [PlaywrightNode(handle, locator) for handle in handles]


__all__ = [
    "PlaywrightProbe",
    "PlaywrightNode",
    "translate_error",
]
