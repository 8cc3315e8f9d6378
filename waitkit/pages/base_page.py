"""
================================================================================
Base Page Object
================================================================================

Foundation class for Page Object Model implementation on top of the wait
engine.

Provides:
    - Explicit waits for every interaction (no implicit waits anywhere)
    - Click/fill helpers that wait for the right element state first
    - Boolean "is displayed" checks driven by timed-out outcomes

Author: Automation Team
License: MIT
================================================================================
"""

from __future__ import annotations

from typing import Any, Optional

import allure
from loguru import logger
from playwright.sync_api import Page

from ..conditions import Condition, clickable, gone, text_equals, visibility
from ..config_loader import ConfigLoader, policy_from_config
from ..engine import WaitEngine
from ..playwright_probe import PlaywrightNode, PlaywrightProbe
from ..policy import WaitPolicy, get_wait_policy


class BasePage:
    """
    Base class for all page objects.

    Locators stay private to the page subclass; tests only see actions.

    Usage:
        class SettingsPage(BasePage):
            _SAVE_BUTTON = "[data-testid='btn-save']"

            def save(self) -> None:
                self.click(self._SAVE_BUTTON)
    """

    def __init__(
        self,
        page: Page,
        engine: Optional[WaitEngine] = None,
        scenario: str = "element",
        config: Optional[ConfigLoader] = None,
    ):
        """
        Initialize page object.

        Args:
            page: Playwright Page object owned by the current worker
            engine: Wait engine; one over a PlaywrightProbe(page) if not given
            scenario: Wait scenario used when a call does not name one
            config: Optional configuration supplying scenario overrides
        """
        self.page = page
        self.engine = engine or WaitEngine(PlaywrightProbe(page))
        self.scenario = scenario
        self.config = config

    def policy(self, scenario: Optional[str] = None) -> WaitPolicy:
        name = scenario or self.scenario
        if self.config is not None:
            return policy_from_config(self.config, name)
        return get_wait_policy(name)

    def wait_for(self, condition: Condition, scenario: Optional[str] = None) -> Any:
        """
        Wait for a condition and return its value.

        Raises:
            WaitTimeoutError: If the condition never became ready
        """
        return self.engine.run(condition, self.policy(scenario)).unwrap()

    def wait_visible(self, locator: str, scenario: Optional[str] = None) -> PlaywrightNode:
        return self.wait_for(visibility(locator), scenario)

    def wait_clickable(self, locator: str, scenario: Optional[str] = None) -> PlaywrightNode:
        return self.wait_for(clickable(locator), scenario)

    def wait_gone(self, locator: str, scenario: str = "spinner") -> None:
        self.wait_for(gone(locator), scenario)

    def wait_text(self, locator: str, expected: str, scenario: Optional[str] = None) -> PlaywrightNode:
        return self.wait_for(text_equals(locator, expected), scenario)

    @allure.step("Click element: {locator}")
    def click(self, locator: str, scenario: Optional[str] = None) -> None:
        node = self.wait_clickable(locator, scenario)
        node.click()
        logger.debug(f"Successfully clicked: {locator}")

    @allure.step("Fill input: {locator}")
    def fill(self, locator: str, value: str, scenario: Optional[str] = None) -> None:
        node = self.wait_visible(locator, scenario)
        node.fill(value)
        logger.debug(f"Successfully filled: {locator}")

    def text_of(self, locator: str, scenario: Optional[str] = None) -> str:
        return self.wait_visible(locator, scenario).text()

    def is_displayed(self, locator: str, scenario: str = "fast") -> bool:
        """
        Check whether an element becomes visible within a short budget.

        A timeout here is an answer, not a failure.
        """
        outcome = self.engine.run(visibility(locator), self.policy(scenario))
        return outcome.succeeded


__all__ = ["BasePage"]
