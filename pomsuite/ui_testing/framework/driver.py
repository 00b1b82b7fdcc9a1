"""
================================================================================
Driver Capability
================================================================================

The browser capability the page-object layer is built on.

`Driver` is the small, selector-driven surface page objects call through.
`PlaywrightDriver` implements it on top of an async Playwright `Page` and
translates Playwright failures into the page-object error taxonomy, so the
rest of the framework never imports Playwright directly.

Conventions:
    - Timeouts are integer milliseconds (Playwright convention)
    - Actions target the FIRST element matching a selector
    - `is_visible` never raises for a selector with zero matches

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Optional, Protocol, Union, runtime_checkable

from loguru import logger
from playwright.async_api import Error as PlaywrightError
from playwright.async_api import Page
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from .errors import (
    ActionTimeoutError,
    ElementNotFoundError,
    ElementNotInteractableError,
    NavigationError,
)


@runtime_checkable
class Driver(Protocol):
    """
    Browser/page handle consumed by BasePage.

    One driver represents one live tab. It is owned by the test runner;
    page objects only hold a reference to it.
    """

    @property
    def url(self) -> str:
        """Current location as tracked by the driver (no suspension)."""
        ...

    async def goto(self, url: str, timeout: int, wait_until: str = "commit") -> None:
        ...

    async def count(self, selector: str) -> int:
        ...

    async def is_visible(self, selector: str) -> bool:
        ...

    async def click(self, selector: str, timeout: int) -> None:
        ...

    async def dblclick(self, selector: str, timeout: int) -> None:
        ...

    async def hover(self, selector: str, timeout: int) -> None:
        ...

    async def check(self, selector: str, timeout: int) -> None:
        ...

    async def clear(self, selector: str, timeout: int) -> None:
        ...

    async def fill(self, selector: str, text: str, timeout: int) -> None:
        ...

    async def press(self, selector: str, key: str, timeout: int) -> None:
        ...

    async def scroll_into_view(self, selector: str, timeout: int) -> None:
        ...

    async def text_content(self, selector: str, timeout: int) -> Optional[str]:
        ...

    async def get_attribute(self, selector: str, name: str, timeout: int) -> Optional[str]:
        ...

    async def wait_for(self, selector: str, state: str, timeout: int) -> None:
        ...

    async def wait_for_load_state(self, state: str, timeout: int) -> None:
        ...

    async def screenshot(self, path: Union[str, Path], full_page: bool = False) -> None:
        ...


class PlaywrightDriver:
    """
    Driver implementation backed by `playwright.async_api.Page`.

    Usage:
        >>> driver = PlaywrightDriver(page)
        >>> await driver.goto("https://example.com/login", timeout=30000)
        >>> await driver.fill("#username", "student", timeout=10000)
    """

    def __init__(self, page: Page):
        self.page = page

    @property
    def url(self) -> str:
        return self.page.url

    async def goto(self, url: str, timeout: int, wait_until: str = "commit") -> None:
        try:
            await self.page.goto(url, timeout=timeout, wait_until=wait_until)
        except PlaywrightTimeoutError as e:
            raise ActionTimeoutError(
                f"Navigation to {url} not committed within {timeout}ms"
            ) from e
        except PlaywrightError as e:
            raise NavigationError(f"Navigation to {url} failed: {e.message}") from e
        logger.debug(f"Navigated to: {url}")

    async def count(self, selector: str) -> int:
        return await self.page.locator(selector).count()

    async def is_visible(self, selector: str) -> bool:
        return await self.page.locator(selector).first.is_visible()

    async def click(self, selector: str, timeout: int) -> None:
        await self._act(selector, "click", timeout=timeout)

    async def dblclick(self, selector: str, timeout: int) -> None:
        await self._act(selector, "dblclick", timeout=timeout)

    async def hover(self, selector: str, timeout: int) -> None:
        await self._act(selector, "hover", timeout=timeout)

    async def check(self, selector: str, timeout: int) -> None:
        await self._act(selector, "check", timeout=timeout)

    async def clear(self, selector: str, timeout: int) -> None:
        await self._act(selector, "clear", timeout=timeout)

    async def fill(self, selector: str, text: str, timeout: int) -> None:
        await self._act(selector, "fill", text, timeout=timeout)

    async def press(self, selector: str, key: str, timeout: int) -> None:
        await self._act(selector, "press", key, timeout=timeout)

    async def scroll_into_view(self, selector: str, timeout: int) -> None:
        await self._act(selector, "scroll_into_view_if_needed", timeout=timeout)

    async def text_content(self, selector: str, timeout: int) -> Optional[str]:
        try:
            return await self.page.locator(selector).first.text_content(timeout=timeout)
        except PlaywrightTimeoutError as e:
            raise ElementNotFoundError(
                f"No element matches '{selector}' after {timeout}ms"
            ) from e
        except PlaywrightError as e:
            raise ElementNotInteractableError(
                f"Cannot read text of '{selector}': {e.message}"
            ) from e

    async def get_attribute(self, selector: str, name: str, timeout: int) -> Optional[str]:
        try:
            return await self.page.locator(selector).first.get_attribute(name, timeout=timeout)
        except PlaywrightTimeoutError as e:
            raise ElementNotFoundError(
                f"No element matches '{selector}' after {timeout}ms"
            ) from e
        except PlaywrightError as e:
            raise ElementNotInteractableError(
                f"Cannot read '{name}' of '{selector}': {e.message}"
            ) from e

    async def wait_for(self, selector: str, state: str, timeout: int) -> None:
        try:
            await self.page.locator(selector).first.wait_for(state=state, timeout=timeout)
        except PlaywrightTimeoutError as e:
            raise ActionTimeoutError(
                f"'{selector}' did not become {state} within {timeout}ms"
            ) from e
        except PlaywrightError as e:
            raise ElementNotInteractableError(
                f"Waiting for '{selector}' to become {state} failed: {e.message}"
            ) from e

    async def wait_for_load_state(self, state: str, timeout: int) -> None:
        try:
            await self.page.wait_for_load_state(state, timeout=timeout)
        except PlaywrightTimeoutError as e:
            raise ActionTimeoutError(
                f"Page did not reach '{state}' within {timeout}ms"
            ) from e
        except PlaywrightError as e:
            raise NavigationError(f"Page failed while waiting for '{state}': {e.message}") from e

    async def screenshot(self, path: Union[str, Path], full_page: bool = False) -> None:
        await self.page.screenshot(path=str(path), full_page=full_page)

    async def _act(self, selector: str, action: str, *args: Any, timeout: int) -> None:
        """Run a locator action on the first match, classifying timeouts."""
        locator = self.page.locator(selector).first
        try:
            await getattr(locator, action)(*args, timeout=timeout)
        except PlaywrightTimeoutError as e:
            # Playwright reports "absent" and "not actionable" the same way
            if await self.page.locator(selector).count() == 0:
                raise ElementNotFoundError(
                    f"No element matches '{selector}' after {timeout}ms"
                ) from e
            raise ElementNotInteractableError(
                f"'{selector}' is present but not actionable ({action})"
            ) from e
        except PlaywrightError as e:
            raise ElementNotInteractableError(
                f"'{selector}' is present but not actionable ({action}): {e.message}"
            ) from e


__all__ = [
    "Driver",
    "PlaywrightDriver",
]
