"""
Bounded wait primitives for browser automation.

Every wait in the booking flow goes through this module so that no suspension
point is unbounded. Timeouts come in four step classes (probe, mutation,
navigation, confirmation) with one configurable default each.

The settle behaviour after a mutating action is chosen by WAIT_MODE:
- FIXED: sleep a fixed duration (most reliable, slowest)
- EVENT_DRIVEN: rely on element waits only (fastest, less reliable)
- HYBRID: element waits plus a small buffer sleep (balanced)
"""

import logging
import time as time_module
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from selenium.common.exceptions import TimeoutException
from selenium.webdriver.remote.webdriver import WebDriver
from selenium.webdriver.support import expected_conditions
from selenium.webdriver.support.ui import WebDriverWait

from golfbot.config import WaitMode, settings

logger = logging.getLogger(__name__)

HYBRID_BUFFER_SECONDS = 0.3
POLL_INTERVAL_SECONDS = 0.25


@dataclass(frozen=True)
class StepTimeouts:
    """Upper bound, in seconds, for each class of wait."""

    probe: float = 5.0
    mutation: float = 10.0
    navigation: float = 10.0
    confirmation: float = 10.0

    @classmethod
    def from_settings(cls) -> "StepTimeouts":
        return cls(
            probe=settings.probe_timeout_seconds,
            mutation=settings.mutation_timeout_seconds,
            navigation=settings.navigation_timeout_seconds,
            confirmation=settings.confirmation_timeout_seconds,
        )


class WaitStrategy:
    """
    Provides wait methods that behave differently based on the configured wait mode.

    Usage:
        wait_strategy = WaitStrategy()
        element = wait_strategy.wait_for_element(driver, (By.CSS_SELECTOR, ".x"), timeout=5.0)
        wait_strategy.simple_wait(fixed_duration=1.0)
    """

    def __init__(self, mode: WaitMode | None = None) -> None:
        """
        Initialize the wait strategy.

        Args:
            mode: The wait mode to use. If None, uses the configured setting.
        """
        self.mode = mode or settings.wait_mode
        logger.debug(f"WaitStrategy initialized with mode: {self.mode.value}")

    def wait_for_element(
        self,
        driver: WebDriver,
        locator: tuple[str, str],
        timeout: float,
        fixed_duration: float = 1.0,
    ) -> Any | None:
        """
        Wait for an element to become visible, bounded by ``timeout``.

        In FIXED mode the page is given ``fixed_duration`` to settle and is then
        checked once; otherwise WebDriverWait polls until it is visible.

        Args:
            driver: The WebDriver instance
            locator: Tuple of (By.*, selector) for the element
            timeout: Maximum wait time in seconds
            fixed_duration: Duration to sleep in FIXED mode

        Returns:
            The element if found, None on timeout
        """
        if self.mode == WaitMode.FIXED:
            logger.debug(f"FIXED mode: sleeping {fixed_duration}s for element {locator}")
            time_module.sleep(min(fixed_duration, timeout))
            timeout = 0.0

        element = None
        try:
            element = WebDriverWait(driver, timeout, poll_frequency=POLL_INTERVAL_SECONDS).until(
                expected_conditions.visibility_of_element_located(locator)
            )
            logger.debug(f"{self.mode.value} mode: element {locator} found")
        except TimeoutException:
            logger.debug(f"{self.mode.value} mode: timeout waiting for element {locator}")

        if element is not None and self.mode == WaitMode.HYBRID:
            time_module.sleep(HYBRID_BUFFER_SECONDS)

        return element

    def wait_for_elements(
        self,
        driver: WebDriver,
        locator: tuple[str, str],
        timeout: float,
    ) -> list[Any]:
        """Wait until at least one element matches; return all matches in DOM order."""
        try:
            return WebDriverWait(driver, timeout, poll_frequency=POLL_INTERVAL_SECONDS).until(
                expected_conditions.presence_of_all_elements_located(locator)
            )
        except TimeoutException:
            logger.debug(f"{self.mode.value} mode: no elements for {locator} within {timeout}s")
            return []

    def wait_until(self, driver: WebDriver, predicate: Callable[[], bool], timeout: float) -> bool:
        """Poll ``predicate`` until it holds or ``timeout`` passes. Exceptions it raises propagate."""
        try:
            WebDriverWait(driver, timeout, poll_frequency=POLL_INTERVAL_SECONDS).until(
                lambda _driver: predicate()
            )
            return True
        except TimeoutException:
            logger.debug(f"{self.mode.value} mode: condition not met within {timeout}s")
            return False

    def simple_wait(self, fixed_duration: float, event_driven_duration: float = 0.0) -> None:
        """
        Let the page settle after an action.

        Args:
            fixed_duration: Duration to sleep in FIXED mode
            event_driven_duration: Duration to sleep in EVENT_DRIVEN mode (default 0)
        """
        if self.mode == WaitMode.FIXED:
            logger.debug(f"FIXED mode: simple sleep {fixed_duration}s")
            time_module.sleep(fixed_duration)
        elif self.mode == WaitMode.EVENT_DRIVEN:
            if event_driven_duration > 0:
                logger.debug(f"EVENT_DRIVEN mode: simple sleep {event_driven_duration}s")
                time_module.sleep(event_driven_duration)
        else:
            logger.debug(f"HYBRID mode: simple sleep {HYBRID_BUFFER_SECONDS}s")
            time_module.sleep(HYBRID_BUFFER_SECONDS)

