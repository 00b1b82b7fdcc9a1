"""
================================================================================
Home Page Object
================================================================================

Landing page after login: greeting, navigation menu, search box, user
profile menu with logout, and the notification badge.

================================================================================
"""

from __future__ import annotations

from typing import Optional

import allure

from pomsuite.ui_testing.framework.page_object import Element, PageObject, text_literal


class HomePage(PageObject):
    """Home page object (async)."""

    URL_PATH = "/"
    LOADED_WHEN = ("welcome_message", "navigation_menu")

    welcome_message = Element(".welcome-message", "h1", ".greeting")
    navigation_menu = Element("nav", ".navbar")
    search_box = Element("input[type='search']", "input[placeholder*='Search']")
    user_profile = Element(".user-profile", ".account-menu")
    logout_button = Element("button:has-text('Logout')", "a:has-text('Logout')")
    notification_badge = Element(".notification-badge", ".bell-icon .badge")

    async def get_welcome_message(self) -> Optional[str]:
        return await self.get_text(self.welcome_message)

    async def is_user_logged_in(self) -> bool:
        return await self.is_visible(self.user_profile)

    @allure.step("Search for '{term}'")
    async def search(self, term: str) -> None:
        await self.fill(self.search_box, term)
        await self.press(self.search_box, "Enter")

    @allure.step("Open menu item '{name}'")
    async def click_menu_item(self, name: str) -> None:
        await self.click(f"nav a:has-text({text_literal(name)})")

    @allure.step("Logout")
    async def logout(self) -> None:
        """Open the profile menu, then click logout."""
        await self.click(self.user_profile)
        await self.click(self.logout_button)

    async def has_notifications(self) -> bool:
        return await self.is_visible(self.notification_badge)
