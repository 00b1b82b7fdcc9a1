"""
================================================================================
Smart Locator with Fallback Chains
================================================================================

Declarative element references resolved lazily against the live document.

Features:
    - Ordered fallback strategies per element (first match wins)
    - Re-resolution on every operation (no cached element handles)
    - Locator health tracking for maintenance insights

A SmartLocator never changes after its page object is built. Which strategy
matched is recorded by `LocatorHealthTracker`, not on the locator.

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from loguru import logger

from .driver import Driver
from .errors import ElementNotFoundError


@dataclass(frozen=True)
class SmartLocator:
    """
    Named fallback chain of selector strategies.

    Attributes:
        name: Human-readable element name (used in logs and Allure steps)
        strategies: Selectors tried in order; the first with a match wins

    Usage:
        >>> username = SmartLocator("username_input", ("#username", "input[name='username']"))
        >>> resolved = await username.resolve(driver, timeout=5000)
        >>> resolved.selector
        '#username'
    """

    name: str
    strategies: Tuple[str, ...]

    def __post_init__(self) -> None:
        if isinstance(self.strategies, str):
            strategies: Tuple[str, ...] = (self.strategies,)
        else:
            strategies = tuple(self.strategies)
        if not strategies:
            raise ValueError(f"Locator '{self.name}' needs at least one selector strategy")
        # Frozen dataclass: normalize lists passed by callers
        object.__setattr__(self, "strategies", strategies)

    @property
    def primary(self) -> str:
        """The preferred selector."""
        return self.strategies[0]

    async def resolve(
        self,
        driver: Driver,
        timeout: int = 0,
        poll_interval: int = 100,
    ) -> "ResolvedLocator":
        """
        Resolve against the driver's current document.

        Each pass tries the strategies in order and stops at the first one
        matching at least one element. Passes repeat every `poll_interval`
        ms until `timeout` ms have elapsed; `timeout=0` makes a single pass.

        Raises:
            ElementNotFoundError: When no strategy matched before the deadline
        """
        loop = asyncio.get_running_loop()
        deadline = loop.time() + timeout / 1000

        while True:
            for index, selector in enumerate(self.strategies):
                if await driver.count(selector) > 0:
                    return ResolvedLocator(self, index)

            remaining = deadline - loop.time()
            if remaining <= 0:
                break
            await asyncio.sleep(min(poll_interval / 1000, remaining))

        raise ElementNotFoundError(
            f"All locators failed for '{self.name}' after {timeout}ms:\n"
            + "\n".join(f"  - {selector}" for selector in self.strategies)
        )

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class ResolvedLocator:
    """Outcome of one resolution: which strategy of the chain matched."""

    locator: SmartLocator
    index: int

    @property
    def selector(self) -> str:
        return self.locator.strategies[self.index]

    @property
    def used_fallback(self) -> bool:
        return self.index > 0


@dataclass
class LocatorHealth:
    """
    Tracks locator health and usage statistics.

    Attributes:
        element_name: Human-readable element name
        primary_selector: The preferred selector
        fallback_selector: The fallback selector that matched
        fallback_index: Position of the fallback in the chain
        hits: How many resolutions went through the fallback
    """
    element_name: str
    primary_selector: str
    fallback_selector: str
    fallback_index: int
    hits: int = 1


@dataclass
class LocatorHealthTracker:
    """Collects fallback usage across every resolution of a page."""

    fallbacks: Dict[str, LocatorHealth] = field(default_factory=dict)
    resolutions: int = 0

    def record(self, resolved: ResolvedLocator) -> None:
        self.resolutions += 1
        locator = resolved.locator

        if not resolved.used_fallback:
            logger.debug(f"Element '{locator.name}' found: {resolved.selector}")
            return

        logger.warning(
            f"Element '{locator.name}' used fallback #{resolved.index}: {resolved.selector}"
        )
        health = self.fallbacks.get(locator.name)
        if health is None or health.fallback_selector != resolved.selector:
            self.fallbacks[locator.name] = LocatorHealth(
                element_name=locator.name,
                primary_selector=locator.primary,
                fallback_selector=resolved.selector,
                fallback_index=resolved.index,
            )
        else:
            health.hits += 1

    def get_health_report(self) -> str:
        """
        Generate locator health report.

        Lists elements that resolved through a fallback strategy
        (candidates for updating the primary selector).
        """
        if not self.fallbacks:
            return "All elements used primary locators. No maintenance needed."

        report_lines: List[str] = [
            "Locator Health Report - Fallbacks Used:",
            "",
            "The following elements used fallback locators.",
            "Consider updating the primary selectors:",
            "",
        ]
        for element_name, health in self.fallbacks.items():
            report_lines.extend([
                f"  [{element_name}]",
                f"    Failed primary: {health.primary_selector}",
                f"    Used: fallback_{health.fallback_index} -> {health.fallback_selector} "
                f"({health.hits}x)",
                "",
            ])
        return "\n".join(report_lines)

    def fallback_for(self, element_name: str) -> Optional[LocatorHealth]:
        return self.fallbacks.get(element_name)


__all__ = [
    "SmartLocator",
    "ResolvedLocator",
    "LocatorHealth",
    "LocatorHealthTracker",
]
