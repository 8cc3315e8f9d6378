"""
Read-only interfaces the wait engine polls through.

A probe is owned by one worker (one browser session per thread or task) and is
passed into the engine explicitly. Conditions only read from it.

By convention:
    - ``RemoteStateProbe.query`` may raise ``NotFoundError``
    - ``NodeHandle`` methods may raise ``DetachedError``
    - anything else a probe raises is treated as fatal
"""

from __future__ import annotations

from typing import List, Optional, Protocol, runtime_checkable


@runtime_checkable
class NodeHandle(Protocol):
    def is_visible(self) -> bool: ...

    def is_enabled(self) -> bool: ...

    def text(self) -> str: ...

    def attribute(self, name: str) -> Optional[str]: ...


@runtime_checkable
class RemoteStateProbe(Protocol):
    def query(self, locator: str) -> List[NodeHandle]: ...


__all__ = [
    "NodeHandle",
    "RemoteStateProbe",
]
