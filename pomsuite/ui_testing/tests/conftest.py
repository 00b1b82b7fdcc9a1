"""
================================================================================
UI Testing Pytest Configuration
================================================================================

Browser fixtures for the live UI tests.

Key Features:
- Chromium launched per test; tests skip when no browser can be launched
- Local HTML fixtures served over file:// (no network needed)
- Page Object fixtures bound to the live page
- Screenshot capture on failure

The public TodoMVC demo tests additionally require RUN_LIVE_UI=1.

================================================================================
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import AsyncGenerator, Dict

import allure
import pytest
from loguru import logger
from playwright.async_api import Browser, BrowserContext, Page, async_playwright

from pomsuite.ui_testing.framework.driver import PlaywrightDriver
from pomsuite.ui_testing.pages import HomePage, LoginPage, TodoPage


SITE_DIR = Path(__file__).parent / "site"


# ================================================================================
# Browser Fixtures
# ================================================================================

@pytest.fixture
async def browser() -> AsyncGenerator[Browser, None]:
    """Headless Chromium, or skip when Playwright browsers are not installed."""
    async with async_playwright() as playwright:
        try:
            browser = await playwright.chromium.launch(headless=True)
        except Exception as e:
            pytest.skip(f"Chromium cannot be launched: {e}")
        yield browser
        await browser.close()


@pytest.fixture
async def context(browser: Browser) -> AsyncGenerator[BrowserContext, None]:
    """Fresh browser context per test for isolation."""
    context = await browser.new_context(viewport={"width": 1280, "height": 800})
    yield context
    await context.close()


@pytest.fixture
async def page(context: BrowserContext) -> AsyncGenerator[Page, None]:
    page = await context.new_page()
    yield page
    await page.close()


@pytest.fixture
def driver(page: Page) -> PlaywrightDriver:
    return PlaywrightDriver(page)


@pytest.fixture(scope="session")
def site_urls() -> Dict[str, str]:
    """file:// URLs of the local HTML fixtures."""
    return {path.stem: path.resolve().as_uri() for path in SITE_DIR.glob("*.html")}


@pytest.fixture
def live_ui_enabled() -> None:
    if os.getenv("RUN_LIVE_UI") != "1":
        pytest.skip("Set RUN_LIVE_UI=1 to run tests against public demo sites")


# ================================================================================
# Page Object Fixtures
# ================================================================================

@pytest.fixture
def login_page(page: Page) -> LoginPage:
    return LoginPage(page)


@pytest.fixture
def home_page(page: Page) -> HomePage:
    return HomePage(page)


@pytest.fixture
def todo_page(page: Page) -> TodoPage:
    return TodoPage(page)


# ================================================================================
# Test Lifecycle Hooks
# ================================================================================

@pytest.hookimpl(hookwrapper=True)
def pytest_runtest_makereport(item, call):
    """Record which URL a failed UI test was on (screenshots are taken in-test)."""
    outcome = yield
    report = outcome.get_result()

    if report.when == "call" and report.failed:
        page = getattr(item, "funcargs", {}).get("page")
        if page is not None:
            allure.attach(
                page.url,
                name="URL at failure",
                attachment_type=allure.attachment_type.TEXT,
            )
            logger.warning(f"{item.name} failed at {page.url}")
