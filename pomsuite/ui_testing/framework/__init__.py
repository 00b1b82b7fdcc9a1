"""
================================================================================
UI Testing Framework
================================================================================

Playwright-based page-object layer.

Components:
    - driver: Driver capability and its Playwright implementation
    - errors: Error taxonomy raised by every layer below the tests
    - smart_locator: Fallback-chain locators and locator health tracking
    - page_base: BasePage primitives (navigate, wait, click, fill, read)
    - page_object: Declarative base for concrete pages

Author: Automation Team
License: MIT
================================================================================
"""

from .driver import Driver, PlaywrightDriver
from .errors import (
    ActionTimeoutError,
    ElementNotFoundError,
    ElementNotInteractableError,
    NavigationError,
    PageObjectError,
    StalePageError,
)
from .page_base import BasePage, Timeouts
from .page_object import Element, PageObject, text_literal
from .smart_locator import LocatorHealthTracker, SmartLocator

__all__ = [
    "Driver",
    "PlaywrightDriver",
    "PageObjectError",
    "NavigationError",
    "ElementNotFoundError",
    "ElementNotInteractableError",
    "ActionTimeoutError",
    "StalePageError",
    "BasePage",
    "Timeouts",
    "Element",
    "PageObject",
    "text_literal",
    "SmartLocator",
    "LocatorHealthTracker",
]
