"""
================================================================================
Wait Outcomes
================================================================================

Value types produced by conditions and by the wait engine.

    - NOT_YET / Ready: what a single condition evaluation returns
    - WaitSuccess / WaitTimedOut: what a whole wait returns

Timeouts are results, not exceptions. Callers that treat a timeout as a
failure call ``unwrap()``; callers that treat absence as meaningful inspect
``succeeded``.

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Generic, Optional, TypeVar, Union

from .errors import WaitTimeoutError


T = TypeVar("T")


class NotYet:
    """Condition not satisfied yet; keep polling."""

    _instance: Optional["NotYet"] = None

    def __new__(cls) -> "NotYet":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "NOT_YET"

    def __bool__(self) -> bool:
        return False


NOT_YET = NotYet()


@dataclass(frozen=True)
class Ready(Generic[T]):
    """Condition satisfied; polling stops and ``value`` is returned."""
    value: T


Evaluation = Union[NotYet, Ready[T]]


def _describe_error(error: Optional[BaseException]) -> Optional[str]:
    if error is None:
        return None
    return f"{type(error).__name__}: {error}"


@dataclass(frozen=True)
class WaitSuccess(Generic[T]):
    """
    The condition became ready within the budget.

    Attributes:
        value: Value produced by the condition
        elapsed: Seconds from start of the wait to the ready evaluation
        attempts: Number of condition evaluations performed
        description: Human-readable condition description
    """
    value: T
    elapsed: float
    attempts: int = 1
    description: str = ""

    @property
    def succeeded(self) -> bool:
        return True

    def unwrap(self) -> T:
        return self.value

    def to_dict(self) -> Dict[str, Any]:
        return {
            "status": "success",
            "description": self.description,
            "elapsed": round(self.elapsed, 3),
            "attempts": self.attempts,
            "value": repr(self.value),
        }


@dataclass(frozen=True)
class WaitTimedOut:
    """
    The budget ran out before the condition became ready.

    Attributes:
        last_error: Last transient error observed, if any
        attempts: Number of condition evaluations performed
        elapsed: Seconds spent waiting
        timeout: Budget of the policy that was applied
        description: Human-readable condition description
    """
    last_error: Optional[BaseException]
    attempts: int
    elapsed: float = 0.0
    timeout: float = 0.0
    description: str = ""

    @property
    def succeeded(self) -> bool:
        return False

    @property
    def message(self) -> str:
        text = (
            f"waited {self.elapsed:.1f}s (timeout={self.timeout}s) for "
            f"{self.description or 'condition'}; {self.attempts} attempts"
        )
        if self.last_error is not None:
            text += f"; last error: {_describe_error(self.last_error)}"
        return text

    def unwrap(self):
        raise WaitTimeoutError(self)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "status": "timed_out",
            "description": self.description,
            "elapsed": round(self.elapsed, 3),
            "timeout": self.timeout,
            "attempts": self.attempts,
            "last_error": _describe_error(self.last_error),
        }


WaitOutcome = Union[WaitSuccess[T], WaitTimedOut]


__all__ = [
    "NotYet",
    "NOT_YET",
    "Ready",
    "Evaluation",
    "WaitSuccess",
    "WaitTimedOut",
    "WaitOutcome",
]
