"""
Repository-level pytest configuration.

Why this exists:
  - Expose the repository root and the bundled configuration to tests
  - Keep wait-related environment overrides from leaking into unit runs
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Generator

import pytest


@pytest.fixture(scope="session")
def project_root() -> Path:
    """Return repo root path."""
    return Path(__file__).parent


@pytest.fixture(scope="session")
def bundled_config_path(project_root: Path) -> Path:
    """Return the path of the configuration file shipped with the repo."""
    return project_root / "config" / "config.yaml"


@pytest.fixture(scope="session", autouse=True)
def _isolate_wait_env() -> Generator[None, None, None]:
    """
    Drop WAIT_* overrides inherited from the shell for the test session.

    Unit tests assert exact timings, so a stray WAIT_TIMEOUT would make
    them flaky. Original values are restored afterwards.
    """
    saved = {k: v for k, v in os.environ.items() if k.startswith("WAIT_")}
    for key in saved:
        del os.environ[key]

    yield

    os.environ.update(saved)
