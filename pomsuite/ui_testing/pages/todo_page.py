"""
================================================================================
TodoMVC Page Object
================================================================================

Page object for the public TodoMVC demo (https://demo.playwright.dev/todomvc).

Individual todos are addressed by zero-based index; the item selector is
resolved through the `todo_items` fallback chain and narrowed with
Playwright's `>> nth=` chaining.

================================================================================
"""

from __future__ import annotations

from typing import Iterable, Optional

import allure

from pomsuite.ui_testing.framework.page_object import Element, PageObject, text_literal


class TodoPage(PageObject):
    """TodoMVC page object (async)."""

    URL_PATH = "https://demo.playwright.dev/todomvc/"
    LOADED_WHEN = ("new_todo",)

    new_todo = Element(".new-todo", "input[placeholder='What needs to be done?']")
    todo_items = Element(".todo-list li", "[data-testid='todo-item']")
    todo_count = Element(".todo-count", "[data-testid='todo-count']")
    clear_completed_button = Element(".clear-completed", "button:has-text('Clear completed')")

    async def _item(self, index: int) -> str:
        selector = await self.resolve(self.todo_items)
        return f"{selector} >> nth={index}"

    @allure.step("Add todo '{text}'")
    async def add_todo(self, text: str) -> None:
        await self.fill(self.new_todo, text)
        await self.press(self.new_todo, "Enter")

    async def add_todos(self, texts: Iterable[str]) -> None:
        for text in texts:
            await self.add_todo(text)

    async def get_todo_count(self) -> int:
        return await self.count(self.todo_items)

    async def get_todo_text(self, index: int) -> Optional[str]:
        item = await self._item(index)
        return await self.get_text(f"{item} >> label")

    @allure.step("Toggle todo #{index}")
    async def toggle_todo(self, index: int) -> None:
        item = await self._item(index)
        await self.click(f"{item} >> input.toggle")

    async def is_completed(self, index: int) -> bool:
        item = await self._item(index)
        classes = await self.get_attribute(item, "class") or ""
        return "completed" in classes.split()

    @allure.step("Delete todo #{index}")
    async def delete_todo(self, index: int) -> None:
        """Hover the item to reveal its destroy button, then click it."""
        item = await self._item(index)
        await self.hover(item)
        await self.click(f"{item} >> button.destroy")

    @allure.step("Edit todo #{index}")
    async def edit_todo(self, index: int, text: str) -> None:
        item = await self._item(index)
        await self.double_click(f"{item} >> label")
        await self.fill(f"{item} >> input.edit", text)
        await self.press(f"{item} >> input.edit", "Enter")

    @allure.step("Filter by '{name}'")
    async def filter_by(self, name: str) -> None:
        await self.click(f".filters a:has-text({text_literal(name)})")

    async def clear_completed(self) -> None:
        await self.click(self.clear_completed_button)

    async def get_remaining_count_text(self) -> Optional[str]:
        return await self.get_text(self.todo_count)
