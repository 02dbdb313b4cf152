"""
Booking service: the sequential fallback booking orchestrator.

A run logs in, finds the earliest tee time for the target date and then walks
the quantity ladder (largest party first), running the checkout pipeline for
each player count until one succeeds. Between failed attempts the browser is
navigated back one page. A failure at or after the submit step stops the run
as indeterminate, since the reservation may already exist.
"""

import asyncio
import logging
from collections.abc import Callable

from golfbot.config import settings
from golfbot.exceptions import DriverError, LoginFailed, NoAvailability, QuantityUnavailable, StepFailed
from golfbot.models.schemas import (
    AttemptOutcome,
    AttemptResult,
    BookingOutcome,
    BookingRequest,
    CheckoutStep,
    RunStatus,
    Slot,
)
from golfbot.providers.base import UIDriver
from golfbot.providers.selenium_driver import SeleniumUIDriver
from golfbot.providers.wait_helper import StepTimeouts, WaitStrategy
from golfbot.services.auth_guard import AuthGuard
from golfbot.services.availability import AvailabilityScanner, select_earliest
from golfbot.services.checkout import SETTLE_SECONDS, CheckoutPipeline

logger = logging.getLogger(__name__)


class FallbackController:
    """Runs the checkout pipeline over the quantity ladder, stopping at the first success."""

    def __init__(
        self,
        driver: UIDriver,
        pipeline: CheckoutPipeline,
        wait_strategy: WaitStrategy | None = None,
    ) -> None:
        self.driver = driver
        self.pipeline = pipeline
        self.wait_strategy = wait_strategy or WaitStrategy()

    def run(self, slot: Slot, request: BookingRequest) -> BookingOutcome:
        ladder = request.quantity_ladder
        attempts: list[AttemptResult] = []

        for index, quantity in enumerate(ladder):
            is_last = index == len(ladder) - 1
            try:
                result = self.pipeline.attempt(slot, quantity, request.payment)
            except QuantityUnavailable as e:
                # Nothing was changed on the page, so there is nothing to roll back
                attempts.append(
                    AttemptResult(
                        quantity=quantity,
                        outcome=AttemptOutcome.QUANTITY_UNAVAILABLE,
                        step=CheckoutStep.QUANTITY_CHECK,
                        cause=str(e),
                    )
                )
                continue
            except StepFailed as e:
                step = CheckoutStep(e.step)
                if e.committed:
                    attempts.append(
                        AttemptResult(
                            quantity=quantity,
                            outcome=AttemptOutcome.INDETERMINATE,
                            step=step,
                            cause=str(e.cause),
                        )
                    )
                    logger.error(
                        f"Booking for {quantity} player(s) may have been submitted; "
                        "stopping without further attempts"
                    )
                    return BookingOutcome(
                        status=RunStatus.INDETERMINATE,
                        target_date=request.target_date,
                        attempts=attempts,
                        message=(
                            f"Reservation for {quantity} player(s) may have been made "
                            f"(failed at '{step.value}'). Verify manually before re-running."
                        ),
                    )

                attempts.append(
                    AttemptResult(
                        quantity=quantity,
                        outcome=AttemptOutcome.STEP_FAILED,
                        step=step,
                        cause=str(e.cause),
                    )
                )
                logger.warning(f"Failed to book for {quantity} player(s): {e}")
                if not is_last:
                    self.recover()
                continue

            attempts.append(result)
            logger.info(f"Booked tee time for {quantity} player(s)")
            return BookingOutcome(
                status=RunStatus.SUCCEEDED,
                target_date=request.target_date,
                committed_quantity=quantity,
                attempts=attempts,
            )

        return BookingOutcome(
            status=RunStatus.ALL_QUANTITIES_EXHAUSTED,
            target_date=request.target_date,
            attempts=attempts,
            message="Could not book for any player count",
        )

    def recover(self) -> bool:
        """
        Navigate back one page so the next attempt can start over.

        Best effort: a failure is logged and the next attempt re-probes from
        whatever state the page is in.
        """
        logger.info("Going back to try next player count...")
        try:
            self.driver.go_back()
            self.wait_strategy.simple_wait(SETTLE_SECONDS)
        except DriverError as e:
            logger.warning(f"Could not go back, continuing: {e}")
            return False
        return True


class BookingOrchestrator:
    """
    Owns one browser session per run: login, scan, pick the earliest slot and
    hand it to the fallback controller.
    """

    def __init__(
        self,
        driver_factory: Callable[[], UIDriver] = SeleniumUIDriver,
        base_url: str | None = None,
        timeouts: StepTimeouts | None = None,
        wait_strategy: WaitStrategy | None = None,
    ) -> None:
        self.driver_factory = driver_factory
        self.base_url = base_url or settings.teeitup_base_url
        self.timeouts = timeouts or StepTimeouts.from_settings()
        self.wait_strategy = wait_strategy or WaitStrategy()

    async def book(self, request: BookingRequest) -> BookingOutcome:
        """Run the booking in a worker thread so the event loop is not blocked."""
        return await asyncio.to_thread(self.run, request)

    def run(self, request: BookingRequest) -> BookingOutcome:
        """
        Execute one booking run.

        Returns:
            The BookingOutcome; NO_AVAILABILITY outcomes carry zero attempts.

        Raises:
            LoginFailed: If the login sequence does not complete.
            DriverError: If the browser cannot be started or the venue not reached.
        """
        logger.info(
            f"=== Starting booking run === date={request.target_date} "
            f"({request.target_date.strftime('%A')}), ladder={list(request.quantity_ladder)}"
        )
        driver = self.driver_factory()
        try:
            driver.launch()
            scanner = AvailabilityScanner(driver, self.base_url, self.timeouts)
            driver.navigate(scanner.url_for(request))

            try:
                AuthGuard(self.timeouts).login(driver, request.credentials)
            except LoginFailed:
                driver.capture_diagnostics("login_failed")
                raise

            try:
                slots = scanner.scan(request)
            except NoAvailability as e:
                return BookingOutcome(
                    status=RunStatus.NO_AVAILABILITY,
                    target_date=request.target_date,
                    message=str(e),
                    ambiguous=e.ambiguous,
                )

            slot = select_earliest(slots)
            pipeline = CheckoutPipeline(
                driver, self.timeouts, self.wait_strategy, tee_sheet_url=scanner.url_for(request)
            )
            controller = FallbackController(driver, pipeline, self.wait_strategy)
            outcome = controller.run(slot, request)

            if not outcome.succeeded:
                driver.capture_diagnostics(outcome.status.value)
            return outcome
        finally:
            logger.debug("=== Booking run complete - closing browser ===")
            driver.close()


def format_outcome(outcome: BookingOutcome) -> str:
    """Human-readable final status of a run."""
    day = outcome.target_date.strftime("%A, %B %d, %Y")

    if outcome.succeeded:
        lines = [f"SUCCESS: Booked tee time on {day} for {outcome.committed_quantity} player(s)"]
        if not outcome.confirmed:
            lines.append("Confirmation page was not seen; check your email for the receipt.")
    elif outcome.status == RunStatus.INDETERMINATE:
        lines = [
            f"INDETERMINATE: Booking on {day} may have been made.",
            "Verify your reservations manually before running the bot again.",
        ]
    else:
        lines = [f"NOT BOOKED: {day}"]
        if outcome.message:
            lines.append(f"Reason: {outcome.message}")

    for attempt in outcome.attempts:
        lines.append(f"  - {attempt.describe()}")
    return "\n".join(lines)
