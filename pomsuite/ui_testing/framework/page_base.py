"""
================================================================================
Base Page
================================================================================

Selector-driven primitives every page object composes.

Provides:
    - Navigation and URL handling
    - Element interaction (ad-hoc selectors or named SmartLocators)
    - Wait strategies
    - Screenshot capture for diagnostics
    - Stale page detection

Every element operation accepts either a raw selector string or a
SmartLocator, and an optional timeout in milliseconds that defaults to the
configured value. Failures propagate unchanged; `take_screenshot` is the
only operation that reports its own failure instead of raising.

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Any, Optional, Tuple, Union
from urllib.parse import urlsplit

import allure
from loguru import logger

from pomsuite.common.config_loader import ConfigLoader

from .driver import Driver
from .errors import ActionTimeoutError, ElementNotFoundError, StalePageError
from .smart_locator import LocatorHealthTracker, SmartLocator


DEFAULT_BASE_URL = "https://practicetestautomation.com"

Target = Union[str, SmartLocator]


@dataclass(frozen=True)
class Timeouts:
    """
    Deadlines (ms) threaded into every suspending operation.

    Attributes:
        action: click / fill / press / text reads
        navigation: goto and network idle waits
        expect: waiting for an element the test expects to appear
        poll_interval: fallback chain re-resolution interval
    """
    action: int = 10000
    navigation: int = 30000
    expect: int = 5000
    poll_interval: int = 100

    @classmethod
    def from_config(cls, config: Any) -> "Timeouts":
        """Read `ui.timeouts.*`, falling back to the class defaults."""
        return cls(
            action=int(config.get("ui.timeouts.action", cls.action)),
            navigation=int(config.get("ui.timeouts.navigation", cls.navigation)),
            expect=int(config.get("ui.timeouts.expect", cls.expect)),
            poll_interval=int(config.get("ui.timeouts.poll_interval", cls.poll_interval)),
        )


def location_key(url: str) -> Tuple[str, str, str]:
    """Scheme, host and path of a URL; query string and fragment are ignored."""
    parts = urlsplit(url or "")
    return parts.scheme, parts.netloc, parts.path.rstrip("/") or "/"


class BasePage:
    """
    Primitive operation vocabulary over one driver handle.

    The driver is shared, not owned: BasePage never closes it. All page
    state lives in the browser document; the only thing BasePage remembers
    is which location it was bound to.

    Usage:
        >>> base = BasePage(driver)
        >>> await base.navigate("/practice-test-login/")
        >>> await base.fill("#username", "student")
        >>> await base.click("#submit")
        >>> await base.is_visible("#error")
        False
    """

    def __init__(
        self,
        driver: Driver,
        base_url: Optional[str] = None,
        timeouts: Optional[Timeouts] = None,
        config: Optional[Any] = None,
    ):
        """
        Initialize base page.

        Args:
            driver: Live driver handle (owned by the caller)
            base_url: Base URL for relative navigation. Defaults to `ui.base_url`.
            timeouts: Operation deadlines. Defaults to `ui.timeouts.*`.
            config: Configuration source. Uses the shared ConfigLoader if None.
        """
        if config is None:
            config = ConfigLoader()

        self.driver = driver
        self.base_url = (base_url or config.get("ui.base_url", DEFAULT_BASE_URL)).rstrip("/")
        self.timeouts = timeouts or Timeouts.from_config(config)
        self.screenshot_dir = Path(config.get("ui.screenshot_dir", "test-results"))
        self.stale_check = bool(config.get("ui.stale_check", True))
        self.health = LocatorHealthTracker()
        self._bound_key: Optional[Tuple[str, str, str]] = None

    # =========================================================================
    # Lifecycle
    # =========================================================================

    def bind(self) -> "BasePage":
        """Bind this page to the driver's current location."""
        self._bound_key = location_key(self.driver.url)
        logger.debug(f"Page bound to: {self.driver.url}")
        return self

    @property
    def is_bound(self) -> bool:
        return self._bound_key is not None

    def is_current(self) -> bool:
        """True when unbound or when the driver is still at the bound location."""
        return self._bound_key is None or location_key(self.driver.url) == self._bound_key

    def _ensure_current(self) -> None:
        if not self.stale_check:
            return
        if self._bound_key is None:
            # First element operation binds to wherever the caller put the driver
            self.bind()
            return
        if not self.is_current():
            scheme, host, path = self._bound_key
            raise StalePageError(
                f"Page bound to {scheme}://{host}{path} used after the driver "
                f"moved to {self.driver.url}"
            )

    @staticmethod
    def _timeout(timeout: Optional[int], default: int) -> int:
        """Explicit timeouts win, including 0 (no deadline)."""
        return default if timeout is None else timeout

    def absolute_url(self, url: str) -> str:
        """Join a relative path onto the base URL; absolute URLs pass through."""
        if urlsplit(url).scheme:
            return url
        return f"{self.base_url}/{url.lstrip('/')}"

    # =========================================================================
    # Navigation
    # =========================================================================

    async def navigate(self, url: str, timeout: Optional[int] = None) -> None:
        """
        Load `url` and bind the page to it.

        Suspends until the navigation is committed, not until full load.

        Raises:
            NavigationError: Target unreachable
            ActionTimeoutError: Navigation not committed in time
        """
        full_url = self.absolute_url(url)
        with allure.step(f"Navigate to {url}"):
            await self.driver.goto(
                full_url,
                timeout=self._timeout(timeout, self.timeouts.navigation),
                wait_until="commit",
            )
            self.bind()

    async def wait_for_navigation(self, timeout: Optional[int] = None) -> None:
        """
        Wait for network quiescence.

        Best-effort barrier: pages with persistent background traffic
        (polling, websockets, analytics) may never go idle and will time out.
        """
        await self.driver.wait_for_load_state(
            "networkidle", timeout=self._timeout(timeout, self.timeouts.navigation)
        )

    def get_current_url(self) -> str:
        """Current location as tracked by the driver."""
        return self.driver.url

    # =========================================================================
    # Resolution
    # =========================================================================

    async def _resolve(self, target: Target, timeout: int) -> Tuple[str, int]:
        """
        Return the selector for `target` and the milliseconds left of `timeout`.

        `timeout=0` resolves the chain in a single pass and hands the driver 0.
        """
        self._ensure_current()
        if not isinstance(target, SmartLocator):
            return target, timeout

        loop = asyncio.get_running_loop()
        started = loop.time()
        try:
            resolved = await target.resolve(self.driver, timeout, self.timeouts.poll_interval)
        except ElementNotFoundError as e:
            logger.error(str(e))
            raise
        self.health.record(resolved)
        if timeout == 0:
            return resolved.selector, 0

        elapsed = int((loop.time() - started) * 1000)
        return resolved.selector, max(timeout - elapsed, 1)

    async def resolve(self, target: Target, timeout: Optional[int] = None) -> str:
        """Selector that `target` currently resolves to."""
        selector, _ = await self._resolve(target, self._timeout(timeout, self.timeouts.action))
        return selector

    async def _probe(self, target: Target) -> Optional[str]:
        """Single-pass resolution; None when nothing matches."""
        self._ensure_current()
        if not isinstance(target, SmartLocator):
            return target
        try:
            resolved = await target.resolve(self.driver, 0, self.timeouts.poll_interval)
        except ElementNotFoundError:
            return None
        self.health.record(resolved)
        return resolved.selector

    # =========================================================================
    # Waits
    # =========================================================================

    async def wait_for_element(
        self,
        target: Target,
        state: str = "visible",
        timeout: Optional[int] = None,
    ) -> None:
        """
        Wait for element to reach specified state.

        Args:
            target: Selector or SmartLocator
            state: 'visible', 'hidden', 'attached' or 'detached'
            timeout: Deadline in milliseconds (default: expect timeout)

        Raises:
            ActionTimeoutError: State not reached before the deadline
        """
        timeout = self._timeout(timeout, self.timeouts.expect)

        with allure.step(f"Wait for {target} to be {state}"):
            if state in ("hidden", "detached") and isinstance(target, SmartLocator):
                selector = await self._probe(target)
                if selector is None:
                    return
                await self.driver.wait_for(selector, state, timeout)
                return

            try:
                selector, remaining = await self._resolve(target, timeout)
            except ElementNotFoundError as e:
                raise ActionTimeoutError(
                    f"'{target}' did not become {state} within {timeout}ms"
                ) from e
            await self.driver.wait_for(selector, state, remaining)

    # =========================================================================
    # Actions
    # =========================================================================

    async def click(self, target: Target, timeout: Optional[int] = None) -> None:
        with allure.step(f"Click: {target}"):
            selector, remaining = await self._resolve(target, self._timeout(timeout, self.timeouts.action))
            await self.driver.click(selector, timeout=remaining)

    async def double_click(self, target: Target, timeout: Optional[int] = None) -> None:
        with allure.step(f"Double click: {target}"):
            selector, remaining = await self._resolve(target, self._timeout(timeout, self.timeouts.action))
            await self.driver.dblclick(selector, timeout=remaining)

    async def hover(self, target: Target, timeout: Optional[int] = None) -> None:
        with allure.step(f"Hover: {target}"):
            selector, remaining = await self._resolve(target, self._timeout(timeout, self.timeouts.action))
            await self.driver.hover(selector, timeout=remaining)

    async def check(self, target: Target, timeout: Optional[int] = None) -> None:
        with allure.step(f"Check: {target}"):
            selector, remaining = await self._resolve(target, self._timeout(timeout, self.timeouts.action))
            await self.driver.check(selector, timeout=remaining)

    async def fill(self, target: Target, text: str, timeout: Optional[int] = None) -> None:
        """
        Fill input element.

        Values of password fields are masked in the Allure step title.
        """
        shown = "*" * len(text) if "password" in str(target).lower() else text
        with allure.step(f"Fill {target}: {shown}"):
            selector, remaining = await self._resolve(target, self._timeout(timeout, self.timeouts.action))
            await self.driver.fill(selector, text, timeout=remaining)

    async def clear(self, target: Target, timeout: Optional[int] = None) -> None:
        with allure.step(f"Clear: {target}"):
            selector, remaining = await self._resolve(target, self._timeout(timeout, self.timeouts.action))
            await self.driver.clear(selector, timeout=remaining)

    async def press(self, target: Target, key: str, timeout: Optional[int] = None) -> None:
        with allure.step(f"Press {key} on {target}"):
            selector, remaining = await self._resolve(target, self._timeout(timeout, self.timeouts.action))
            await self.driver.press(selector, key, timeout=remaining)

    async def scroll_to_element(self, target: Target, timeout: Optional[int] = None) -> None:
        """Scroll element into view; no-op when it is already visible."""
        selector, remaining = await self._resolve(target, self._timeout(timeout, self.timeouts.action))
        await self.driver.scroll_into_view(selector, timeout=remaining)

    # =========================================================================
    # Queries
    # =========================================================================

    async def get_text(self, target: Target, timeout: Optional[int] = None) -> Optional[str]:
        """
        Trimmed text content of the first matching element.

        Returns None when the driver reports no text content at all, and ""
        for an element whose text is empty; the two are not normalized.
        """
        selector, remaining = await self._resolve(target, self._timeout(timeout, self.timeouts.action))
        text = await self.driver.text_content(selector, timeout=remaining)
        return text.strip() if text is not None else None

    async def get_attribute(
        self,
        target: Target,
        name: str,
        timeout: Optional[int] = None,
    ) -> Optional[str]:
        selector, remaining = await self._resolve(target, self._timeout(timeout, self.timeouts.action))
        return await self.driver.get_attribute(selector, name, timeout=remaining)

    async def count(self, target: Target) -> int:
        """Number of elements currently matching (0 when nothing matches)."""
        selector = await self._probe(target)
        if selector is None:
            return 0
        return await self.driver.count(selector)

    async def is_visible(self, target: Target) -> bool:
        """
        Check if element is visible.

        Never raises for absence: zero matches means False.
        """
        selector = await self._probe(target)
        if selector is None:
            return False
        return await self.driver.is_visible(selector)

    # =========================================================================
    # Diagnostics
    # =========================================================================

    async def take_screenshot(self, name: str, full_page: bool = False) -> Optional[Path]:
        """
        Take screenshot and attach it to Allure.

        Failures are logged and swallowed so a diagnostic capture never
        masks the outcome of the operation being diagnosed.

        Returns:
            Path to the saved screenshot, or None when capture failed
        """
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        filepath = self.screenshot_dir / f"{name}_{timestamp}.png"

        try:
            self.screenshot_dir.mkdir(parents=True, exist_ok=True)
            await self.driver.screenshot(filepath, full_page=full_page)
            allure.attach.file(
                str(filepath),
                name=name,
                attachment_type=allure.attachment_type.PNG,
            )
        except Exception as e:
            logger.warning(f"Screenshot '{name}' failed: {e}")
            return None

        logger.debug(f"Screenshot saved: {filepath}")
        return filepath

    def get_locator_health_report(self) -> str:
        """Get smart locator health report."""
        return self.health.get_health_report()


__all__ = [
    "BasePage",
    "Target",
    "Timeouts",
    "location_key",
]
