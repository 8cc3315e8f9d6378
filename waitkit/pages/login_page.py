"""
Login page object.

Locators are private to the page; tests interact only through the actions.
"""

from __future__ import annotations

from typing import Optional

import allure
from loguru import logger

from .base_page import BasePage


class LoginPage(BasePage):
    """Page object for the login form."""

    _USERNAME_INPUT = "#username"
    _PASSWORD_INPUT = "#password"
    _LOGIN_BUTTON = "#login-button"
    _ERROR_BANNER = "[data-testid='login-error']"
    _LOADING_SPINNER = ".login-spinner"

    def enter_username(self, username: str) -> None:
        self.fill(self._USERNAME_INPUT, username)

    def enter_password(self, password: str) -> None:
        self.fill(self._PASSWORD_INPUT, password)

    def click_login(self) -> None:
        self.click(self._LOGIN_BUTTON)

    def login(self, username: str, password: str) -> None:
        """
        Fill the form, submit, and wait for the loading spinner to clear.

        Args:
            username: Username to log in with
            password: Password to log in with
        """
        with allure.step(f"Login as {username}"):
            self.enter_username(username)
            self.enter_password(password)
            self.click_login()
            self.wait_gone(self._LOADING_SPINNER)
            logger.info(f"Submitted login form for: {username}")

    def error_message(self) -> Optional[str]:
        """Return the login error text, or None when no error is shown."""
        if not self.is_displayed(self._ERROR_BANNER):
            return None
        return self.text_of(self._ERROR_BANNER)


__all__ = ["LoginPage"]
