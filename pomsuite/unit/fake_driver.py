"""
In-memory Driver used by the offline unit tests.

The "document" is a mapping of exact selector strings to element lists.
Actions (goto, click, fill, ...) are recorded in `actions`; queries
(count, is_visible, text_content, wait_for, ...) are recorded in `queries`
so tests can assert on exactly which side effects a page object caused.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Set, Tuple, Union
from urllib.parse import urlsplit

from pomsuite.ui_testing.framework.errors import (
    ActionTimeoutError,
    ElementNotFoundError,
    ElementNotInteractableError,
    NavigationError,
)


@dataclass
class FakeElement:
    text: Optional[str] = ""
    visible: bool = True
    enabled: bool = True
    value: str = ""
    checked: bool = False
    attributes: Dict[str, str] = field(default_factory=dict)


Handler = Callable[["FakeDriver"], None]


class FakeDriver:
    """Driver double with a scriptable document."""

    def __init__(self, url: str = "about:blank"):
        self._url = url
        self.elements: Dict[str, List[FakeElement]] = {}
        self.actions: List[Tuple[Any, ...]] = []
        self.queries: List[Tuple[Any, ...]] = []
        self.handlers: Dict[Tuple[str, str], Handler] = {}
        self.unreachable_hosts: Set[str] = set()
        self.network_idle = True
        self.screenshot_error: Optional[Exception] = None

    # -- document scripting -------------------------------------------------

    def add(self, selector: str, **kwargs: Any) -> FakeElement:
        element = FakeElement(**kwargs)
        self.elements.setdefault(selector, []).append(element)
        return element

    def remove(self, selector: str) -> None:
        self.elements.pop(selector, None)

    def show(self, selector: str, text: Optional[str] = None) -> None:
        for element in self.elements.get(selector, []):
            element.visible = True
            if text is not None:
                element.text = text

    def on(self, action: str, selector: str, handler: Handler) -> None:
        self.handlers[(action, selector)] = handler

    def value_of(self, selector: str) -> str:
        return self.elements[selector][0].value

    def set_url(self, url: str) -> None:
        self._url = url

    # -- Driver protocol ----------------------------------------------------

    @property
    def url(self) -> str:
        return self._url

    async def goto(self, url: str, timeout: int, wait_until: str = "commit") -> None:
        if urlsplit(url).netloc in self.unreachable_hosts:
            raise NavigationError(f"Navigation to {url} failed: net::ERR_NAME_NOT_RESOLVED")
        self.actions.append(("goto", url))
        self._url = url

    async def count(self, selector: str) -> int:
        self.queries.append(("count", selector))
        return len(self.elements.get(selector, []))

    async def is_visible(self, selector: str) -> bool:
        self.queries.append(("is_visible", selector))
        matches = self.elements.get(selector, [])
        return bool(matches) and matches[0].visible

    async def click(self, selector: str, timeout: int) -> None:
        self._actionable(selector)
        self._record("click", selector)

    async def dblclick(self, selector: str, timeout: int) -> None:
        self._actionable(selector)
        self._record("dblclick", selector)

    async def hover(self, selector: str, timeout: int) -> None:
        self._actionable(selector)
        self._record("hover", selector)

    async def check(self, selector: str, timeout: int) -> None:
        self._actionable(selector).checked = True
        self._record("check", selector)

    async def clear(self, selector: str, timeout: int) -> None:
        self._actionable(selector).value = ""
        self._record("clear", selector)

    async def fill(self, selector: str, text: str, timeout: int) -> None:
        self._actionable(selector).value = text
        self._record("fill", selector, text)

    async def press(self, selector: str, key: str, timeout: int) -> None:
        self._actionable(selector)
        self._record("press", selector, key)

    async def scroll_into_view(self, selector: str, timeout: int) -> None:
        self._first(selector)
        self._record("scroll_into_view", selector)

    async def text_content(self, selector: str, timeout: int) -> Optional[str]:
        self.queries.append(("text_content", selector))
        return self._first(selector).text

    async def get_attribute(self, selector: str, name: str, timeout: int) -> Optional[str]:
        self.queries.append(("get_attribute", selector, name))
        return self._first(selector).attributes.get(name)

    async def wait_for(self, selector: str, state: str, timeout: int) -> None:
        self.queries.append(("wait_for", selector, state))
        loop = asyncio.get_running_loop()
        deadline = loop.time() + timeout / 1000
        while not self._in_state(selector, state):
            if loop.time() >= deadline:
                raise ActionTimeoutError(f"'{selector}' did not become {state} within {timeout}ms")
            await asyncio.sleep(0.005)

    async def wait_for_load_state(self, state: str, timeout: int) -> None:
        self.queries.append(("wait_for_load_state", state))
        if not self.network_idle:
            raise ActionTimeoutError(f"Page did not reach '{state}' within {timeout}ms")

    async def screenshot(self, path: Union[str, Path], full_page: bool = False) -> None:
        if self.screenshot_error is not None:
            raise self.screenshot_error
        Path(path).write_bytes(b"\x89PNG\r\n\x1a\n")
        self.actions.append(("screenshot", str(path)))

    # -- helpers ------------------------------------------------------------

    def _first(self, selector: str) -> FakeElement:
        matches = self.elements.get(selector)
        if not matches:
            raise ElementNotFoundError(f"No element matches '{selector}'")
        return matches[0]

    def _actionable(self, selector: str) -> FakeElement:
        element = self._first(selector)
        if not (element.visible and element.enabled):
            raise ElementNotInteractableError(f"'{selector}' is present but not actionable")
        return element

    def _record(self, action: str, selector: str, *args: Any) -> None:
        self.actions.append((action, selector, *args))
        handler = self.handlers.get((action, selector))
        if handler is not None:
            handler(self)

    def _in_state(self, selector: str, state: str) -> bool:
        matches = self.elements.get(selector, [])
        if state == "attached":
            return bool(matches)
        if state == "detached":
            return not matches
        visible = bool(matches) and matches[0].visible
        return visible if state == "visible" else not visible
