"""
================================================================================
Root Pytest Configuration
================================================================================

This module provides the pytest configuration for the test suites.
It initialises logging, registers common markers and tags tests by directory.

================================================================================
"""

import pytest

from waitkit.logging_setup import init_logger


def pytest_configure(config):
    """Configure logging from config/config.yaml and register custom markers."""
    init_logger()

    # Priority markers
    config.addinivalue_line(
        "markers", "P0: Critical priority tests - must pass for release"
    )
    config.addinivalue_line(
        "markers", "P1: High priority tests - important functionality"
    )

    # Test type markers
    config.addinivalue_line(
        "markers", "unit: Fast tests against fakes, no browser"
    )
    config.addinivalue_line(
        "markers", "timing: Tests that sleep on the real clock"
    )


def pytest_collection_modifyitems(config, items):
    """Auto-add the 'unit' marker to tests in the unit directory."""
    for item in items:
        if "unit" in str(item.fspath):
            item.add_marker(pytest.mark.unit)


def pytest_report_header(config):
    """Add custom header to pytest output."""
    return [
        "",
        "=" * 60,
        "waitkit - Explicit Wait Engine Test Suite",
        "=" * 60,
        "",
    ]
