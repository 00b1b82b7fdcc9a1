"""
================================================================================
Page Object Errors
================================================================================

Error taxonomy shared by the driver adapter, locators and page objects.

The page-object layer never recovers from these; they propagate to the test,
which decides whether the failure is the expected outcome or a real defect.

Author: Automation Team
License: MIT
================================================================================
"""


class PageObjectError(Exception):
    """Base class for every failure raised by the page-object layer."""
    pass


class NavigationError(PageObjectError):
    """Raised when the driver reports the target URL unreachable."""
    pass


class ElementNotFoundError(PageObjectError):
    """Raised when zero elements match after the implicit wait."""
    pass


class ElementNotInteractableError(PageObjectError):
    """Raised when an element exists but is hidden, disabled or obscured."""
    pass


class ActionTimeoutError(PageObjectError, TimeoutError):
    """
    Raised when a suspending operation exceeds its deadline.

    The driver handle stays usable after a timeout.
    """
    pass


class StalePageError(PageObjectError):
    """Raised when a page object is used after the handle navigated away."""
    pass


__all__ = [
    "PageObjectError",
    "NavigationError",
    "ElementNotFoundError",
    "ElementNotInteractableError",
    "ActionTimeoutError",
    "StalePageError",
]
