"""
Time source and suspension primitives used by the wait engines.

The engines only ever call ``now()`` and one of the sleep methods, which keeps
them deterministic under a fake clock in tests.
"""

from __future__ import annotations

import asyncio
import threading
import time
from typing import Optional, Protocol

from .errors import WaitCancelledError


class CancellationToken:
    """
    Cooperative cancellation signal shared between a waiter and its owner.

    Usage:
        >>> token = CancellationToken()
        >>> # in another thread: token.cancel()
        >>> engine.run(condition, policy, cancel_token=token)
    """

    def __init__(self) -> None:
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def wait(self, seconds: float) -> bool:
        """Block up to ``seconds``; return True if cancelled meanwhile."""
        return self._event.wait(seconds)

    def raise_if_cancelled(self) -> None:
        if self.cancelled:
            raise WaitCancelledError("Wait cancelled by caller")


class Clock(Protocol):
    def now(self) -> float: ...

    def sleep(self, seconds: float, cancel_token: Optional[CancellationToken] = None) -> None: ...

    async def sleep_async(self, seconds: float) -> None: ...


class SystemClock:
    """Monotonic wall clock backed by ``time.monotonic``."""

    def now(self) -> float:
        return time.monotonic()

    def sleep(self, seconds: float, cancel_token: Optional[CancellationToken] = None) -> None:
        """
        Suspend the calling thread.

        Raises:
            WaitCancelledError: If ``cancel_token`` fires during the sleep
        """
        if seconds <= 0:
            return
        if cancel_token is None:
            time.sleep(seconds)
            return
        if cancel_token.wait(seconds):
            raise WaitCancelledError("Wait cancelled by caller")

    async def sleep_async(self, seconds: float) -> None:
        await asyncio.sleep(max(seconds, 0))


__all__ = [
    "CancellationToken",
    "Clock",
    "SystemClock",
]
