"""
Repository-level pytest configuration.

Initializes Loguru once per test session from `logging.*` in
config/config.yaml and exposes the repository root.
"""

from __future__ import annotations

from pathlib import Path

import pytest

from pomsuite.common.logging_setup import init_logger


def pytest_sessionstart(session):
    """Configure logging before any test module is imported."""
    init_logger()


@pytest.fixture(scope="session")
def project_root() -> Path:
    """Return repo root path."""
    return Path(__file__).parent
