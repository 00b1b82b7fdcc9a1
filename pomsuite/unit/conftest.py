"""
Fixtures for the offline unit tests.

Pages are built against `FakeDriver` with short deadlines so timeout
paths finish in milliseconds.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict

import pytest

from pomsuite.ui_testing.framework.page_base import Timeouts

from .fake_driver import FakeDriver


class DummyConfig:
    def __init__(self, data: Dict[str, Any]):
        self.data = data

    def get(self, key, default=None):
        return self.data.get(key, default)


FAST_TIMEOUTS = Timeouts(action=200, navigation=200, expect=200, poll_interval=10)


@pytest.fixture
def config(tmp_path: Path) -> DummyConfig:
    return DummyConfig(
        {
            "ui.base_url": "https://app.example.test",
            "ui.screenshot_dir": str(tmp_path / "screenshots"),
            "ui.stale_check": True,
        }
    )


@pytest.fixture
def driver() -> FakeDriver:
    return FakeDriver(url="https://app.example.test/")


@pytest.fixture
def page_kwargs(config: DummyConfig) -> Dict[str, Any]:
    """Keyword arguments shared by every page object under test."""
    return {"config": config, "timeouts": FAST_TIMEOUTS}
