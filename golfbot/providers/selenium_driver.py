import logging
import os
from collections.abc import Callable
from datetime import datetime

from selenium import webdriver
from selenium.common.exceptions import (
    ElementClickInterceptedException,
    StaleElementReferenceException,
    WebDriverException,
)
from selenium.webdriver.chrome.options import Options
from selenium.webdriver.chrome.service import Service
from selenium.webdriver.common.by import By
from webdriver_manager.chrome import ChromeDriverManager

from golfbot.config import settings
from golfbot.exceptions import DriverError, DriverTimeout
from golfbot.providers.base import ElementHandle, UIDriver
from golfbot.providers.teeitup_dom_schema import DOM
from golfbot.providers.wait_helper import WaitStrategy

logger = logging.getLogger(__name__)


def locator_for(stable_id: str) -> tuple[str, str]:
    """Map a stable identifier to a Selenium locator. XPath ids start with '/'."""
    if stable_id.startswith("/"):
        return (By.XPATH, stable_id)
    return (By.CSS_SELECTOR, stable_id)


class SeleniumUIDriver(UIDriver):
    """
    Chrome/Selenium implementation of the UIDriver capability.

    One instance drives one browser session: ``launch`` creates it and
    ``close`` quits it. All Selenium errors are translated into DriverError /
    DriverTimeout so the booking flow never sees Selenium types.
    """

    def __init__(
        self,
        headless: bool | None = None,
        wait_strategy: WaitStrategy | None = None,
        diagnostics_dir: str = "/tmp",
    ) -> None:
        self.headless = settings.headless if headless is None else headless
        self.wait_strategy = wait_strategy or WaitStrategy()
        self.diagnostics_dir = diagnostics_dir
        self._driver: webdriver.Chrome | None = None

    @property
    def driver(self) -> webdriver.Chrome:
        if self._driver is None:
            raise DriverError("Browser session has not been launched")
        return self._driver

    def _create_driver(self) -> webdriver.Chrome:
        """Create a Chrome WebDriver instance."""
        options = Options()
        if self.headless:
            options.add_argument("--headless=new")
        options.add_argument("--no-sandbox")
        options.add_argument("--disable-setuid-sandbox")
        options.add_argument("--disable-dev-shm-usage")
        options.add_argument("--disable-gpu")
        options.add_argument("--window-size=1920,1080")
        options.add_argument("--disable-blink-features=AutomationControlled")
        options.add_experimental_option("excludeSwitches", ["enable-automation"])
        options.add_experimental_option("useAutomationExtension", False)

        # Check for ChromeDriver path from settings/environment first,
        # then fall back to ChromeDriverManager for automatic version management
        chromedriver_path = settings.chromedriver_path or os.environ.get("CHROMEDRIVER_PATH")
        if chromedriver_path and os.path.exists(chromedriver_path):
            service = Service(chromedriver_path)
        else:
            service = Service(ChromeDriverManager().install())
        driver = webdriver.Chrome(service=service, options=options)

        driver.execute_cdp_cmd(
            "Page.addScriptToEvaluateOnNewDocument",
            {
                "source": """
                Object.defineProperty(navigator, 'webdriver', {
                    get: () => undefined
                })
            """
            },
        )

        return driver

    def launch(self) -> None:
        if self._driver is not None:
            return
        logger.info(f"Launching Chrome (headless={self.headless})")
        try:
            self._driver = self._create_driver()
        except WebDriverException as e:
            raise DriverError(f"Could not start browser: {e.msg or e}") from e

    def navigate(self, url: str) -> None:
        logger.debug(f"Navigating to {url}")
        try:
            self.driver.get(url)
        except WebDriverException as e:
            raise DriverError(f"Navigation to {url} failed: {e.msg or e}") from e

    def locate(self, stable_id: str, timeout: float) -> ElementHandle:
        try:
            element = self.wait_strategy.wait_for_element(
                self.driver, locator_for(stable_id), timeout=timeout
            )
        except WebDriverException as e:
            raise DriverError(f"Could not locate {stable_id}: {e.msg or e}") from e
        if element is None:
            raise DriverTimeout(stable_id, timeout)
        return element

    def locate_all(self, stable_id: str, timeout: float) -> list[ElementHandle]:
        try:
            return self.wait_strategy.wait_for_elements(
                self.driver, locator_for(stable_id), timeout=timeout
            )
        except WebDriverException as e:
            raise DriverError(f"Could not locate {stable_id}: {e.msg or e}") from e

    def is_present(self, stable_id: str) -> bool:
        try:
            elements = self.driver.find_elements(*locator_for(stable_id))
            return any(element.is_displayed() for element in elements)
        except StaleElementReferenceException:
            return False
        except WebDriverException as e:
            raise DriverError(f"Could not probe {stable_id}: {e.msg or e}") from e

    def is_enabled(self, handle: ElementHandle) -> bool:
        try:
            if not handle.is_displayed() or not handle.is_enabled():
                return False
            if (handle.get_attribute("aria-disabled") or "").lower() == "true":
                return False
            classes = handle.get_attribute("class") or ""
            return "disabled" not in classes.lower()
        except StaleElementReferenceException:
            return False
        except WebDriverException as e:
            raise DriverError(f"Could not read element state: {e.msg or e}") from e

    def click(self, handle: ElementHandle) -> None:
        try:
            handle.click()
        except ElementClickInterceptedException:
            # An overlay is on top; dispatch the click directly
            logger.debug("Click intercepted, retrying via JavaScript")
            try:
                self.driver.execute_script("arguments[0].click();", handle)
            except WebDriverException as e:
                raise DriverError(f"Click failed: {e.msg or e}") from e
        except StaleElementReferenceException as e:
            raise DriverError("Element went stale before click") from e
        except WebDriverException as e:
            raise DriverError(f"Click failed: {e.msg or e}") from e

    def fill(self, handle: ElementHandle, value: str) -> None:
        self.click(handle)
        try:
            handle.clear()
            handle.send_keys(value)
        except StaleElementReferenceException as e:
            raise DriverError("Element went stale while filling") from e
        except WebDriverException as e:
            raise DriverError(f"Fill failed: {e.msg or e}") from e

    def check(self, handle: ElementHandle) -> None:
        try:
            if handle.is_selected():
                return
        except WebDriverException as e:
            raise DriverError(f"Could not read checkbox state: {e.msg or e}") from e
        self.click(handle)

    def choose_option(self, stable_id: str, option_text: str, timeout: float) -> None:
        combobox = self.locate(stable_id, timeout)
        self.click(combobox)
        option = self.locate(DOM.PAYMENT.option(option_text), timeout)
        self.click(option)

    def wait_for(self, predicate: Callable[[], bool], timeout: float) -> bool:
        return self.wait_strategy.wait_until(self.driver, predicate, timeout)

    def current_url(self) -> str:
        try:
            return self.driver.current_url
        except WebDriverException as e:
            raise DriverError(f"Could not read current URL: {e.msg or e}") from e

    def go_back(self) -> None:
        try:
            self.driver.back()
        except WebDriverException as e:
            raise DriverError(f"Back navigation failed: {e.msg or e}") from e

    def close(self) -> None:
        if self._driver is None:
            return
        try:
            self._driver.quit()
        except WebDriverException as e:
            logger.warning(f"Error while closing browser: {e}")
        finally:
            self._driver = None

    def capture_diagnostics(self, context: str) -> None:
        """
        Capture diagnostic information (screenshot and page source) on failure.

        Args:
            context: Description of what operation failed
        """
        if self._driver is None:
            return
        try:
            timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
            screenshot_path = os.path.join(self.diagnostics_dir, f"golfbot_{context}_{timestamp}.png")
            html_path = os.path.join(self.diagnostics_dir, f"golfbot_{context}_{timestamp}.html")

            self._driver.save_screenshot(screenshot_path)
            logger.info(f"Saved debug screenshot to {screenshot_path}")

            with open(html_path, "w", encoding="utf-8") as f:
                f.write(self._driver.page_source)
            logger.info(f"Saved debug HTML to {html_path}")

        except (OSError, WebDriverException) as e:
            logger.warning(f"Failed to capture diagnostic info: {e}")
