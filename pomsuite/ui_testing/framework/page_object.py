"""
================================================================================
Page Object
================================================================================

Declarative base for concrete pages.

A concrete page declares its elements as class attributes and composes
BasePage primitives into user-level actions:

    class LoginPage(PageObject):
        URL_PATH = "/login"
        LOADED_WHEN = ("username", "password", "submit")

        username = Element("#username", "input[name='username']")
        password = Element("#password", "input[type='password']")
        submit = Element("#submit", "button[type='submit']")

        async def login(self, username: str, password: str) -> None:
            await self.fill(self.username, username)
            await self.fill(self.password, password)
            await self.click(self.submit)

The page holds a BasePage (`self.base`) instead of inheriting from it; the
BasePage vocabulary is reachable on the page by delegation.

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

import json
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional, Tuple, Union

import allure
from loguru import logger
from playwright.async_api import Page

from .driver import Driver, PlaywrightDriver
from .page_base import BasePage, Timeouts
from .smart_locator import SmartLocator


def text_literal(text: str) -> str:
    """Quote `text` for use inside `:has-text(...)` (JSON string escaping)."""
    return json.dumps(text, ensure_ascii=False)


class Element:
    """
    Class-level declaration of one element's fallback chain.

    Accessed on a page instance it returns the SmartLocator built for that
    instance at construction.
    """

    def __init__(self, *selectors: str, name: Optional[str] = None):
        if not selectors:
            raise ValueError("Element needs at least one selector")
        self.selectors: Tuple[str, ...] = selectors
        self.name = name
        self.attr: Optional[str] = None

    def __set_name__(self, owner: type, attr: str) -> None:
        self.attr = attr
        if self.name is None:
            self.name = attr

    def __get__(self, instance: Optional["PageObject"], owner: type) -> Any:
        if instance is None:
            return self
        return instance.locators[self.attr]

    def build(self) -> SmartLocator:
        return SmartLocator(self.name or self.attr or "element", self.selectors)

    def __repr__(self) -> str:
        return f"Element({', '.join(repr(s) for s in self.selectors)}, name={self.name!r})"


class PageObject:
    """
    Base class for concrete page objects.

    Override in subclasses:
        URL_PATH: Path opened by `open()` (relative to base URL, or absolute)
        LOADED_WHEN: Names of the elements that must all be visible for
            `is_loaded()` to be True
    """

    URL_PATH: str = "/"
    LOADED_WHEN: Tuple[str, ...] = ()

    # BasePage operations reachable directly on the page object
    _DELEGATED = frozenset({
        "navigate",
        "wait_for_navigation",
        "get_current_url",
        "wait_for_element",
        "click",
        "double_click",
        "hover",
        "check",
        "fill",
        "clear",
        "press",
        "scroll_to_element",
        "get_text",
        "get_attribute",
        "count",
        "is_visible",
        "resolve",
        "take_screenshot",
        "get_locator_health_report",
        "bind",
        "is_current",
    })

    def __init__(
        self,
        driver: Union[Driver, Page],
        base_url: Optional[str] = None,
        config: Optional[Any] = None,
        timeouts: Optional[Timeouts] = None,
    ):
        """
        Initialize page object.

        Args:
            driver: Driver handle, or a raw Playwright Page to wrap
            base_url: Base URL for the application. Defaults to `ui.base_url`.
            config: Configuration source. Uses the shared ConfigLoader if None.
            timeouts: Operation deadlines. Defaults to `ui.timeouts.*`.
        """
        if isinstance(driver, Page):
            driver = PlaywrightDriver(driver)

        self.base = BasePage(driver, base_url=base_url, timeouts=timeouts, config=config)

        elements = self._declared_elements()
        missing = [name for name in self.LOADED_WHEN if name not in elements]
        if missing:
            raise ValueError(
                f"{type(self).__name__}.LOADED_WHEN names undeclared elements: {missing}"
            )

        # Built once; never modified for the lifetime of the page
        self.locators: Mapping[str, SmartLocator] = MappingProxyType(
            {attr: element.build() for attr, element in elements.items()}
        )
        logger.debug(f"{type(self).__name__} built with {len(self.locators)} locators")

    @classmethod
    def _declared_elements(cls) -> Dict[str, Element]:
        elements: Dict[str, Element] = {}
        for klass in reversed(cls.__mro__):
            for attr, value in vars(klass).items():
                if isinstance(value, Element):
                    elements[attr] = value
        return elements

    def __getattr__(self, name: str) -> Any:
        if name in PageObject._DELEGATED:
            return getattr(self.base, name)
        raise AttributeError(f"{type(self).__name__!r} object has no attribute {name!r}")

    @property
    def driver(self) -> Driver:
        return self.base.driver

    @property
    def url(self) -> str:
        """Full URL of this page."""
        return self.base.absolute_url(self.URL_PATH)

    async def open(self) -> "PageObject":
        """Navigate to this page."""
        await self.base.navigate(self.URL_PATH)
        return self

    async def is_loaded(self) -> bool:
        """
        True only when every element named in LOADED_WHEN is visible.

        No partial credit: one missing or hidden element makes it False.
        """
        if not self.LOADED_WHEN:
            raise NotImplementedError(f"{type(self).__name__} declares no LOADED_WHEN elements")

        with allure.step(f"Verify {type(self).__name__} loaded"):
            for name in self.LOADED_WHEN:
                if not await self.base.is_visible(self.locators[name]):
                    logger.debug(f"{type(self).__name__} not loaded: '{name}' not visible")
                    return False
            return True


__all__ = [
    "Element",
    "PageObject",
    "text_literal",
]
