# ================================================================================
# Wait Engine Module
# ================================================================================
#
# This module implements bounded polling against a remote, asynchronously
# mutating state (a browser page, usually).
#
# Key Features:
#   - Immediate first evaluation, no up-front sleep
#   - Transient errors retried up to the deadline, fatal errors re-raised
#   - Timeouts returned as WaitTimedOut results, not raised
#   - Cancellable suspension between polls
#   - Sync (WaitEngine) and asyncio (AsyncWaitEngine) flavours
#   - Allure step per wait, loguru logging per attempt
#
# Usage:
#   engine = WaitEngine(PlaywrightProbe(page))
#   outcome = engine.run(visibility("#banner"), WaitPolicy(timeout=5))
#   node = wait_until(probe, clickable("#submit"), scenario="element")
#
# ================================================================================

import asyncio
import inspect
from typing import Any, Callable, Optional, Set, Type, TypeVar, Union

import allure
from loguru import logger

from .clock import CancellationToken, Clock, SystemClock
from .errors import ConfigurationError, WaitCancelledError
from .outcome import NotYet, Ready, WaitSuccess, WaitTimedOut
from .policy import WaitPolicy, get_wait_policy
from .probe import RemoteStateProbe
from .reporting import attach_outcome


T = TypeVar("T")

WaitResult = Union[WaitSuccess, WaitTimedOut]


def describe_condition(condition: Callable) -> str:
    """Human-readable name for a condition or a bare callable."""
    description = getattr(condition, "description", None)
    if description:
        return str(description)
    return getattr(condition, "__name__", repr(condition))


def _check_policy(policy: Optional[WaitPolicy]) -> WaitPolicy:
    if policy is None:
        return get_wait_policy("default")
    if not isinstance(policy, WaitPolicy):
        raise ConfigurationError(
            f"policy must be a WaitPolicy, got {type(policy).__name__}"
        )
    return policy


class _PollState:
    """
    Bookkeeping for one run: deadline, attempt count, last transient error.

    Created fresh for every run so concurrent waits never share state.
    """

    def __init__(self, condition: Callable, policy: WaitPolicy, clock: Clock):
        self.condition = condition
        self.policy = policy
        self.clock = clock
        self.description = describe_condition(condition)
        self.start = clock.now()
        self.deadline = self.start + policy.timeout
        self.attempts = 0
        self.last_error: Optional[BaseException] = None
        self._reported: Set[Type[BaseException]] = set()

    def elapsed(self) -> float:
        return self.clock.now() - self.start

    def is_transient(self, error: BaseException) -> bool:
        if self.policy.ignores(error):
            return True
        classify = getattr(self.condition, "is_transient", None)
        return bool(classify and classify(error))

    def accept(self, result: Any) -> Optional[WaitSuccess]:
        """Turn one evaluation into a success, or None to keep polling."""
        if isinstance(result, Ready):
            elapsed = self.elapsed()
            logger.info(
                f"Wait successful after {self.attempts} attempts "
                f"({elapsed:.2f}s): {self.description}"
            )
            return WaitSuccess(
                value=result.value,
                elapsed=elapsed,
                attempts=self.attempts,
                description=self.description,
            )
        if isinstance(result, NotYet):
            logger.debug(f"Attempt {self.attempts}: not met yet: {self.description}")
            return None
        raise TypeError(
            f"Condition '{self.description}' returned {result!r}; "
            f"expected NOT_YET or Ready(value)"
        )

    def absorb(self, error: BaseException) -> bool:
        """
        Record a transient error and return True, or annotate a fatal one
        and return False so the caller re-raises it untouched.
        """
        if self.is_transient(error):
            self.last_error = error
            if type(error) not in self._reported:
                self._reported.add(type(error))
                logger.warning(
                    f"Attempt {self.attempts} hit transient {type(error).__name__}: "
                    f"{error}. Still waiting for: {self.description}"
                )
            else:
                logger.debug(f"Attempt {self.attempts} transient: {error}")
            return True

        context = (
            f"while waiting for {self.description} "
            f"(elapsed={self.elapsed():.2f}s, attempts={self.attempts})"
        )
        logger.error(f"Fatal {type(error).__name__} {context}: {error}")
        error.add_note(context)
        return False

    def next_delay(self) -> Optional[float]:
        """Seconds to suspend before the next attempt, or None when out of budget."""
        now = self.clock.now()
        if now >= self.deadline or self.policy.single_attempt:
            return None
        return min(self.policy.poll_interval, self.deadline - now)

    def timed_out(self) -> WaitTimedOut:
        outcome = WaitTimedOut(
            last_error=self.last_error,
            attempts=self.attempts,
            elapsed=self.elapsed(),
            timeout=self.policy.timeout,
            description=self.description,
        )
        logger.warning(outcome.message)
        attach_outcome(outcome)
        return outcome

    def cancelled(self) -> None:
        logger.warning(
            f"Wait cancelled after {self.attempts} attempts "
            f"({self.elapsed():.2f}s): {self.description}"
        )


class WaitEngine:
    """
    Blocking polling engine bound to one probe.

    One engine per worker: the probe belongs to the caller and is only read.
    The engine itself holds no per-run state, so ``run`` is re-entrant.

    Usage:
        >>> engine = WaitEngine(probe)
        >>> outcome = engine.run(presence("#banner"), WaitPolicy(timeout=5))
        >>> if outcome.succeeded:
        ...     node = outcome.value
    """

    def __init__(self, probe: RemoteStateProbe, clock: Optional[Clock] = None):
        """
        Initialize engine.

        Args:
            probe: Read-only view of the remote state
            clock: Time source; SystemClock if not given
        """
        self.probe = probe
        self.clock = clock or SystemClock()

    def run(
        self,
        condition: Callable,
        policy: Optional[WaitPolicy] = None,
        cancel_token: Optional[CancellationToken] = None,
    ) -> WaitResult:
        """
        Poll ``condition`` until it is ready or the policy's budget runs out.

        Args:
            condition: Condition (or callable) returning NOT_YET or Ready(value)
            policy: Timeout/interval/ignored errors; default scenario if None
            cancel_token: Optional token that aborts the wait when cancelled

        Returns:
            WaitSuccess with the produced value, or WaitTimedOut

        Raises:
            ConfigurationError: If policy is not a WaitPolicy
            WaitCancelledError: If cancel_token fires
            Exception: Any fatal error raised by the condition, unchanged
        """
        policy = _check_policy(policy)
        state = _PollState(condition, policy, self.clock)

        with allure.step(f"Wait for: {state.description}"):
            logger.info(
                f"Starting wait: {state.description} "
                f"(timeout={policy.timeout}s, poll={policy.poll_interval}s)"
            )
            try:
                while True:
                    if cancel_token is not None:
                        cancel_token.raise_if_cancelled()

                    state.attempts += 1
                    try:
                        result = condition(self.probe)
                    except Exception as e:
                        if not state.absorb(e):
                            raise
                    else:
                        success = state.accept(result)
                        if success is not None:
                            return success

                    delay = state.next_delay()
                    if delay is None:
                        return state.timed_out()
                    self.clock.sleep(delay, cancel_token)
            except WaitCancelledError:
                state.cancelled()
                raise


class AsyncWaitEngine:
    """
    Async-compatible engine for asyncio-based tests.

    Conditions may be plain or return awaitables. Suspension uses the
    clock's ``sleep_async``, so cancelling the surrounding task interrupts
    the wait at the next poll boundary with ``asyncio.CancelledError``.
    """

    def __init__(self, probe: RemoteStateProbe, clock: Optional[Clock] = None):
        self.probe = probe
        self.clock = clock or SystemClock()

    async def run(
        self,
        condition: Callable,
        policy: Optional[WaitPolicy] = None,
        cancel_token: Optional[CancellationToken] = None,
    ) -> WaitResult:
        """
        Async twin of ``WaitEngine.run`` with identical semantics.

        Raises:
            asyncio.CancelledError: If the awaiting task is cancelled
        """
        policy = _check_policy(policy)
        state = _PollState(condition, policy, self.clock)

        with allure.step(f"Wait for: {state.description}"):
            logger.info(
                f"Starting async wait: {state.description} "
                f"(timeout={policy.timeout}s, poll={policy.poll_interval}s)"
            )
            try:
                while True:
                    if cancel_token is not None:
                        cancel_token.raise_if_cancelled()

                    state.attempts += 1
                    try:
                        result = condition(self.probe)
                        if inspect.isawaitable(result):
                            result = await result
                    except Exception as e:
                        if not state.absorb(e):
                            raise
                    else:
                        success = state.accept(result)
                        if success is not None:
                            return success

                    delay = state.next_delay()
                    if delay is None:
                        return state.timed_out()
                    await self.clock.sleep_async(delay)
            except (WaitCancelledError, asyncio.CancelledError):
                state.cancelled()
                raise


def wait_until(
    probe: RemoteStateProbe,
    condition: Callable,
    policy: Optional[WaitPolicy] = None,
    scenario: str = "default",
    cancel_token: Optional[CancellationToken] = None,
) -> Any:
    """
    Run a wait and return the condition's value.

    Args:
        probe: Read-only view of the remote state
        condition: Condition to wait for
        policy: Explicit policy (overrides scenario)
        scenario: Predefined scenario name used when policy is None

    Returns:
        Value produced by the condition

    Raises:
        WaitTimeoutError: If the condition never became ready

    Example:
        banner = wait_until(probe, visibility("#banner"), scenario="element")
    """
    if policy is None:
        policy = get_wait_policy(scenario)
    outcome = WaitEngine(probe).run(condition, policy, cancel_token=cancel_token)
    return outcome.unwrap()


__all__ = [
    "WaitEngine",
    "AsyncWaitEngine",
    "wait_until",
    "describe_condition",
]
