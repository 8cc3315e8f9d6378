"""
================================================================================
Standard Wait Conditions
================================================================================

Reusable conditions evaluated by the wait engine.

Each condition is a pure composition over the probe capabilities (query,
is_visible, is_enabled, text, attribute). Nothing is cached between calls:
every evaluation re-queries the probe, since the remote state may have
changed since the previous poll.

Usage:
    >>> engine.run(visibility("#banner"), policy)
    >>> engine.run(text_equals("#status", "DONE"), policy)
    >>> engine.run(gone(".spinner"), get_wait_policy("spinner"))

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

import inspect
from typing import Any, Awaitable, Callable, Generic, Optional, Sequence, Tuple, Type, TypeVar

from .errors import DetachedError, NotEnabledError, NotFoundError
from .outcome import NOT_YET, Evaluation, NotYet, Ready
from .probe import NodeHandle, RemoteStateProbe


T = TypeVar("T")

ErrorTypes = Tuple[Type[BaseException], ...]


class Condition(Generic[T]):
    """
    A named, repeatable predicate over remote state.

    Attributes:
        description: Human-readable text used in logs and timeout messages
        transient_errors: Exception types this condition considers transient

    Calling the condition with a probe returns ``NOT_YET`` or ``Ready(value)``,
    or raises. Raised errors are classified by ``is_transient``.
    """

    def __init__(
        self,
        evaluate: Callable[[RemoteStateProbe], Evaluation],
        description: str,
        transient_errors: Sequence[Type[BaseException]] = (),
    ):
        self._evaluate = evaluate
        self.description = description
        self.transient_errors: ErrorTypes = tuple(transient_errors)

    def __call__(self, probe: RemoteStateProbe) -> Evaluation:
        return self._evaluate(probe)

    def is_transient(self, error: BaseException) -> bool:
        return bool(self.transient_errors) and isinstance(error, self.transient_errors)

    def __str__(self) -> str:
        return self.description

    def __repr__(self) -> str:
        return f"Condition({self.description!r})"


def _merge_transient(conditions: Sequence[Condition]) -> ErrorTypes:
    return tuple(dict.fromkeys(t for c in conditions for t in c.transient_errors))


def _first_visible(nodes: Sequence[NodeHandle]) -> Optional[NodeHandle]:
    for node in nodes:
        if node.is_visible():
            return node
    return None


def presence(locator: str) -> Condition[NodeHandle]:
    """Ready with the first node once at least one node matches."""

    def evaluate(probe: RemoteStateProbe) -> Evaluation:
        nodes = probe.query(locator)
        return Ready(nodes[0]) if nodes else NOT_YET

    return Condition(evaluate, f"element '{locator}' present", (NotFoundError,))


def visibility(locator: str) -> Condition[NodeHandle]:
    """Ready with the first matching node that is rendered with nonzero extent."""

    def evaluate(probe: RemoteStateProbe) -> Evaluation:
        node = _first_visible(probe.query(locator))
        return Ready(node) if node is not None else NOT_YET

    return Condition(
        evaluate,
        f"element '{locator}' visible",
        (NotFoundError, DetachedError),
    )


def clickable(locator: str) -> Condition[NodeHandle]:
    """Ready with the first node that is both visible and enabled."""

    def evaluate(probe: RemoteStateProbe) -> Evaluation:
        for node in probe.query(locator):
            if node.is_visible() and node.is_enabled():
                return Ready(node)
        return NOT_YET

    return Condition(
        evaluate,
        f"element '{locator}' clickable",
        (NotFoundError, DetachedError, NotEnabledError),
    )


def text_equals(locator: str, expected: str) -> Condition[NodeHandle]:
    """Ready with the first visible node whose text equals ``expected``."""

    def evaluate(probe: RemoteStateProbe) -> Evaluation:
        for node in probe.query(locator):
            if node.is_visible() and node.text() == expected:
                return Ready(node)
        return NOT_YET

    return Condition(
        evaluate,
        f"text of element '{locator}' to equal {expected!r}",
        (NotFoundError, DetachedError),
    )


def text_contains(locator: str, fragment: str) -> Condition[NodeHandle]:
    """Ready with the first visible node whose text contains ``fragment``."""

    def evaluate(probe: RemoteStateProbe) -> Evaluation:
        for node in probe.query(locator):
            if node.is_visible() and fragment in (node.text() or ""):
                return Ready(node)
        return NOT_YET

    return Condition(
        evaluate,
        f"text of element '{locator}' to contain {fragment!r}",
        (NotFoundError, DetachedError),
    )


def count_equals(locator: str, expected_count: int) -> Condition[int]:
    """
    Ready with the count once exactly ``expected_count`` nodes match.

    A locator that matches nothing counts as zero, so ``count_equals(x, 0)``
    is satisfied by an empty result rather than treating it as an error.
    """

    def evaluate(probe: RemoteStateProbe) -> Evaluation:
        try:
            count = len(probe.query(locator))
        except NotFoundError:
            count = 0
        return Ready(count) if count == expected_count else NOT_YET

    return Condition(evaluate, f"{expected_count} element(s) matching '{locator}'")


def attribute_equals(locator: str, name: str, value: str) -> Condition[NodeHandle]:
    """Ready with the first node whose attribute ``name`` equals ``value``."""

    def evaluate(probe: RemoteStateProbe) -> Evaluation:
        for node in probe.query(locator):
            if node.attribute(name) == value:
                return Ready(node)
        return NOT_YET

    return Condition(
        evaluate,
        f"attribute {name!r} of element '{locator}' to equal {value!r}",
        (NotFoundError,),
    )


def gone(locator: str) -> Condition[bool]:
    """
    Ready once nothing matches ``locator`` any more.

    A node that detaches while being inspected also counts as gone.
    """

    def evaluate(probe: RemoteStateProbe) -> Evaluation:
        try:
            nodes = probe.query(locator)
        except NotFoundError:
            return Ready(True)
        if not nodes:
            return Ready(True)
        try:
            nodes[0].is_visible()
        except DetachedError:
            return Ready(True)
        return NOT_YET

    return Condition(evaluate, f"element '{locator}' gone")


def invisibility(locator: str) -> Condition[bool]:
    """Ready once no matching node is visible (absent nodes count as invisible)."""

    def evaluate(probe: RemoteStateProbe) -> Evaluation:
        try:
            nodes = probe.query(locator)
        except NotFoundError:
            return Ready(True)
        for node in nodes:
            try:
                if node.is_visible():
                    return NOT_YET
            except DetachedError:
                continue
        return Ready(True)

    return Condition(evaluate, f"element '{locator}' invisible")


def custom_predicate(
    fn: Callable[[RemoteStateProbe], Any],
    description: Optional[str] = None,
    transient: Sequence[Type[BaseException]] = (),
) -> Condition[bool]:
    """
    Wrap a caller-supplied predicate.

    Args:
        fn: Callable taking the probe and returning a truthy value when satisfied
        description: Text for logs; defaults to the function name
        transient: Exception types the caller wants retried

    ``fn`` may be a coroutine function; the awaited result is then judged
    the same way, so the condition works with AsyncWaitEngine.
    """

    async def settle(pending: Awaitable[Any]) -> Evaluation:
        return Ready(True) if await pending else NOT_YET

    def evaluate(probe: RemoteStateProbe) -> Evaluation:
        result = fn(probe)
        if inspect.isawaitable(result):
            return settle(result)
        return Ready(True) if result else NOT_YET

    name = description or getattr(fn, "__name__", "custom predicate")
    return Condition(evaluate, name, transient)


def any_of(*conditions: Condition) -> Condition[Any]:
    """
    Ready with the value of the first component that is ready.

    A component that raises does not stop the others from being evaluated.
    When none is ready, the first error its own component does not classify
    as transient is re-raised, so the engine can still apply the policy's
    ignored errors to it. Otherwise, if every component raised, the last
    transient error is re-raised for the engine to record.
    """
    if not conditions:
        raise ValueError("any_of() needs at least one condition")

    def evaluate(probe: RemoteStateProbe) -> Evaluation:
        unclassified: Optional[BaseException] = None
        last_transient: Optional[BaseException] = None
        pending = False
        for condition in conditions:
            try:
                result = condition(probe)
            except Exception as e:
                if condition.is_transient(e):
                    last_transient = e
                elif unclassified is None:
                    unclassified = e
                continue
            if isinstance(result, Ready):
                return result
            pending = True
        if unclassified is not None:
            raise unclassified
        if not pending and last_transient is not None:
            raise last_transient
        return NOT_YET

    transient = _merge_transient(conditions)
    return Condition(
        evaluate,
        "any of: " + "; ".join(c.description for c in conditions),
        transient,
    )


def all_of(*conditions: Condition) -> Condition[Tuple[Any, ...]]:
    """Ready with a tuple of component values once every component is ready."""
    if not conditions:
        raise ValueError("all_of() needs at least one condition")

    def evaluate(probe: RemoteStateProbe) -> Evaluation:
        values = []
        for condition in conditions:
            result = condition(probe)
            if isinstance(result, NotYet):
                return NOT_YET
            values.append(result.value)
        return Ready(tuple(values))

    transient = _merge_transient(conditions)
    return Condition(
        evaluate,
        "all of: " + "; ".join(c.description for c in conditions),
        transient,
    )


__all__ = [
    "Condition",
    "presence",
    "visibility",
    "clickable",
    "text_equals",
    "text_contains",
    "count_equals",
    "attribute_equals",
    "gone",
    "invisibility",
    "custom_predicate",
    "any_of",
    "all_of",
]
