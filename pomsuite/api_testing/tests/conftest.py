"""
================================================================================
API Testing Pytest Configuration
================================================================================

Fixtures for the live API contract tests (https://jsonplaceholder.typicode.com).

These tests need network access and only run with RUN_LIVE_API=1.

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

import os
import uuid
from typing import Any, Dict, Generator

import pytest

from pomsuite.api_testing.framework import HttpClient
from pomsuite.common.config_loader import ConfigLoader


def pytest_collection_modifyitems(config, items):
    """Skip every live API test unless explicitly enabled."""
    if os.getenv("RUN_LIVE_API") == "1":
        return
    skip_live = pytest.mark.skip(reason="Set RUN_LIVE_API=1 to run live API tests")
    for item in items:
        if "api_testing" in str(item.fspath):
            item.add_marker(skip_live)


@pytest.fixture(scope="session")
def config() -> ConfigLoader:
    """Session-scoped so configuration is loaded only once."""
    return ConfigLoader()


@pytest.fixture
def http_client(config: ConfigLoader) -> Generator[HttpClient, None, None]:
    with HttpClient(config) as client:
        yield client


@pytest.fixture
def new_user() -> Dict[str, Any]:
    suffix = uuid.uuid4().hex[:8]
    return {
        "name": f"Automation User {suffix}",
        "username": f"auto_{suffix}",
        "email": f"auto_{suffix}@example.com",
    }
