"""
================================================================================
Suite Pytest Configuration
================================================================================

Registers project-wide markers and tags tests by directory.

================================================================================
"""

import pytest


def pytest_configure(config):
    """Configure pytest with project-wide custom markers."""

    # Priority markers
    config.addinivalue_line(
        "markers", "P0: Critical priority tests - must pass for deployment"
    )
    config.addinivalue_line(
        "markers", "P1: High priority tests - important functionality"
    )
    config.addinivalue_line(
        "markers", "P2: Medium priority tests - edge cases and minor features"
    )
    config.addinivalue_line(
        "markers", "P3: Low priority tests - extensive validation"
    )

    # Test type markers
    config.addinivalue_line("markers", "smoke: Quick verification tests")
    config.addinivalue_line("markers", "regression: Full regression test suite")
    config.addinivalue_line("markers", "e2e: End-to-end tests simulating user flows")

    # Domain markers
    config.addinivalue_line("markers", "api: API-specific tests")
    config.addinivalue_line("markers", "ui: UI-specific tests")
    config.addinivalue_line("markers", "unit: Offline tests against fakes")


def pytest_collection_modifyitems(config, items):
    """Add domain markers based on where a test lives."""
    for item in items:
        path = str(item.fspath).replace("\\", "/")
        if "api_testing" in path:
            item.add_marker(pytest.mark.api)
        if "ui_testing" in path:
            item.add_marker(pytest.mark.ui)
        if "/unit/" in path:
            item.add_marker(pytest.mark.unit)


def pytest_report_header(config):
    """Add custom header to pytest output."""
    return [
        "",
        "=" * 60,
        "pomsuite - Page Object UI & API Test Suite",
        "=" * 60,
        "",
    ]
