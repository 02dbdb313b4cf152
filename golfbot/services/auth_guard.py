import logging
from collections.abc import Mapping

from golfbot.exceptions import DriverError, LoginFailed, MissingCredentials
from golfbot.models.schemas import Credentials
from golfbot.providers.base import UIDriver
from golfbot.providers.teeitup_dom_schema import DOM
from golfbot.providers.wait_helper import StepTimeouts

logger = logging.getLogger(__name__)


class AuthGuard:
    """
    Checks secrets before a browser is opened and logs in once per run.
    """

    def __init__(self, timeouts: StepTimeouts | None = None) -> None:
        self.timeouts = timeouts or StepTimeouts.from_settings()
        self.logged_in = False

    @staticmethod
    def ensure_ready(required: Mapping[str, str | None]) -> None:
        """
        Verify every required secret has a value.

        Args:
            required: Mapping of environment variable name to its configured value.

        Raises:
            MissingCredentials: Naming every missing secret, in the given order.
        """
        missing = [name for name, value in required.items() if not value or not value.strip()]
        if missing:
            raise MissingCredentials(missing)

    def login(self, driver: UIDriver, credentials: Credentials) -> None:
        """
        Log in through the venue's login dialog.

        The driver must already be on a venue page. Does nothing if this guard
        has already logged in.

        Raises:
            LoginFailed: If any login step fails or the dialog does not close in time.
        """
        if self.logged_in:
            logger.debug("Already logged in for this run")
            return

        logger.info(f"Logging in as {credentials.identity}")
        try:
            driver.click(driver.locate(DOM.LOGIN.open_dialog, self.timeouts.navigation))
            driver.fill(
                driver.locate(DOM.LOGIN.email_input, self.timeouts.mutation), credentials.identity
            )
            driver.fill(
                driver.locate(DOM.LOGIN.password_input, self.timeouts.mutation),
                credentials.secret,
            )
            driver.click(driver.locate(DOM.LOGIN.submit_button, self.timeouts.mutation))

            closed = driver.wait_for(
                lambda: not driver.is_present(DOM.LOGIN.email_input),
                self.timeouts.navigation,
            )
        except DriverError as e:
            raise LoginFailed(f"Login failed: {e}") from e

        if not closed:
            raise LoginFailed(
                f"Login did not complete within {self.timeouts.navigation:g}s "
                "(login form still visible)"
            )

        self.logged_in = True
        logger.info("Logged in successfully")
