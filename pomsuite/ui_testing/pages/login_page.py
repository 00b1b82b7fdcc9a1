"""
================================================================================
Login Page Object
================================================================================

Login form: username, password, submit, optional "remember me" and a
"forgot password" link, plus the error banner shown on a rejected login.

Actions never wait on their outcome; tests assert on the resulting
navigation or error state themselves.

================================================================================
"""

from __future__ import annotations

from typing import Optional

import allure

from pomsuite.ui_testing.framework.page_object import Element, PageObject


class LoginPage(PageObject):
    """Login page object (async)."""

    URL_PATH = "/practice-test-login/"
    LOADED_WHEN = ("username", "password", "submit")

    username = Element("#username", "input[name='username']", "input[type='email']")
    password = Element("#password", "input[name='password']", "input[type='password']")
    submit = Element(
        "#submit",
        "button[type='submit']",
        "button:has-text('Login')",
        "button:has-text('Sign In')",
    )
    error_message = Element("#error", ".error-message", ".alert-danger", "[role='alert']")
    remember_me = Element("input[type='checkbox'][name='remember']", "#remember-me")
    forgot_password = Element("a:has-text('Forgot Password')", "a[href*='forgot']")

    @allure.step("Login (username={username})")
    async def login(self, username: str, password: str) -> None:
        """Fill username, fill password, click submit. Nothing else."""
        await self.fill(self.username, username)
        await self.fill(self.password, password)
        await self.click(self.submit)

    @allure.step("Login with remember me (username={username})")
    async def login_with_remember_me(self, username: str, password: str) -> None:
        await self.fill(self.username, username)
        await self.fill(self.password, password)
        await self.check(self.remember_me)
        await self.click(self.submit)

    async def get_error_message(self, timeout: Optional[int] = None) -> Optional[str]:
        """
        Wait for the error banner and return its text.

        Only call this when an error is expected.

        Raises:
            ActionTimeoutError: No error became visible before the deadline
        """
        await self.wait_for_element(self.error_message, "visible", timeout=timeout)
        return await self.get_text(self.error_message)

    async def is_error_displayed(self) -> bool:
        return await self.is_visible(self.error_message)

    @allure.step("Click forgot password")
    async def click_forgot_password(self) -> None:
        await self.click(self.forgot_password)

    async def clear_form(self) -> None:
        await self.clear(self.username)
        await self.clear(self.password)
