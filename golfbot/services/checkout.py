"""
Checkout pipeline for a single player-count attempt.

Steps run in a fixed order, each bounded by a step-class timeout:

    quantity_check -> select_quantity -> add_to_cart -> checkout ->
    payment_details -> accept_terms -> submit -> confirmation

Clicking "make your reservation" (submit) is the commit point. A failure
before it is safe to retry at a smaller player count; a failure at or after it
means the reservation may exist and must not be retried. A missing
confirmation page after a successful submit is only logged.
"""

import logging
from collections.abc import Callable
from typing import Any

from golfbot.exceptions import DriverError, DriverTimeout, QuantityUnavailable, StepFailed
from golfbot.models.schemas import AttemptOutcome, AttemptResult, CheckoutStep, PaymentDetails, Slot
from golfbot.providers.base import ElementHandle, UIDriver
from golfbot.providers.teeitup_dom_schema import DOM
from golfbot.providers.wait_helper import StepTimeouts, WaitStrategy

logger = logging.getLogger(__name__)

SETTLE_SECONDS = 1.0


class CheckoutPipeline:
    def __init__(
        self,
        driver: UIDriver,
        timeouts: StepTimeouts | None = None,
        wait_strategy: WaitStrategy | None = None,
        tee_sheet_url: str | None = None,
    ) -> None:
        self.driver = driver
        self.timeouts = timeouts or StepTimeouts.from_settings()
        self.wait_strategy = wait_strategy or WaitStrategy()
        # Where to reload the tee sheet from when recovery has navigated away from it
        self.tee_sheet_url = tee_sheet_url

    def attempt(self, slot: Slot, quantity: int, payment: PaymentDetails) -> AttemptResult:
        """
        Try to book ``slot`` for ``quantity`` players.

        Returns:
            A successful AttemptResult; ``confirmed`` tells whether the
            confirmation page was seen.

        Raises:
            QuantityUnavailable: The player count cannot be selected. Nothing changed.
            StepFailed: A step failed; ``committed`` is True from the submit step on.
        """
        logger.info(f"Trying to book for {quantity} player(s)")

        radio = self._run_step(CheckoutStep.QUANTITY_CHECK, self._probe_quantity, slot, quantity)
        self._run_step(CheckoutStep.SELECT_QUANTITY, self._select_quantity, radio, quantity)
        self._run_step(CheckoutStep.ADD_TO_CART, self._add_to_cart)
        self._run_step(CheckoutStep.CHECKOUT, self._proceed_to_checkout)
        self._run_step(CheckoutStep.PAYMENT_DETAILS, self._fill_payment, payment)
        self._run_step(CheckoutStep.ACCEPT_TERMS, self._accept_terms)
        self._run_step(CheckoutStep.SUBMIT, self._submit)

        confirmed = self._await_confirmation()
        return AttemptResult(
            quantity=quantity,
            outcome=AttemptOutcome.SUCCESS,
            confirmed=confirmed,
        )

    def _run_step(self, step: CheckoutStep, action: Callable[..., Any], *args: Any) -> Any:
        logger.debug(f"Checkout step '{step.value}'")
        try:
            return action(*args)
        except DriverError as e:
            if step.is_post_commit:
                logger.error(f"Step '{step.value}' failed after the reservation may have been made: {e}")
            else:
                logger.warning(f"Step '{step.value}' failed: {e}")
            raise StepFailed(step.value, e, committed=step.is_post_commit) from e

    def _probe_quantity(self, slot: Slot, quantity: int) -> ElementHandle:
        """
        Find an enabled control for ``quantity`` players.

        The page state after a previous attempt is unknown, so the player panel
        is re-opened from the tee sheet if it is not showing.
        """
        if not self.driver.is_present(DOM.GOLFERS.any_golfer_radio):
            self._open_slot(slot)
            if not self.driver.wait_for(
                lambda: self.driver.is_present(DOM.GOLFERS.any_golfer_radio),
                self.timeouts.navigation,
            ):
                raise DriverTimeout("player count options", self.timeouts.navigation)

        radio_id = DOM.GOLFERS.golfer_radio(quantity)
        if not self.driver.wait_for(lambda: self.driver.is_present(radio_id), self.timeouts.probe):
            logger.info(f"{quantity} players option not shown")
            raise QuantityUnavailable(quantity)

        radio = self.driver.locate(radio_id, self.timeouts.probe)
        if not self.driver.is_enabled(radio):
            logger.info(f"{quantity} players option is disabled")
            raise QuantityUnavailable(quantity)

        logger.info(f"{quantity} players option is available")
        return radio

    def _open_slot(self, slot: Slot) -> None:
        try:
            self.driver.click(slot.handle)
        except DriverError:
            # Handle went stale (e.g. after back navigation); find it again by position
            logger.debug(f"Re-locating tee time at position {slot.position}")
            handles = self.driver.locate_all(
                DOM.TEE_SHEET.choose_rate_button, self.timeouts.navigation
            )
            if len(handles) <= slot.position and self.tee_sheet_url:
                logger.info("Tee sheet not showing, reloading it")
                self.driver.navigate(self.tee_sheet_url)
                handles = self.driver.locate_all(
                    DOM.TEE_SHEET.choose_rate_button, self.timeouts.navigation
                )
            if len(handles) <= slot.position:
                raise DriverError(f"Tee time at position {slot.position} is no longer listed")
            slot.handle = handles[slot.position]
            self.driver.click(slot.handle)
        logger.info("Selected earliest tee time")

    def _select_quantity(self, radio: ElementHandle, quantity: int) -> None:
        self.driver.check(radio)
        self.wait_strategy.simple_wait(SETTLE_SECONDS)
        logger.info(f"Selected {quantity} players")

    def _add_to_cart(self) -> None:
        self.driver.click(self.driver.locate(DOM.GOLFERS.add_to_cart_button, self.timeouts.mutation))
        self.wait_strategy.simple_wait(SETTLE_SECONDS)
        logger.info("Added to cart")

    def _proceed_to_checkout(self) -> None:
        self.driver.click(self.driver.locate(DOM.CART.checkout_button, self.timeouts.navigation))
        self.wait_strategy.simple_wait(SETTLE_SECONDS)
        logger.info("Proceeded to checkout")

    def _fill_payment(self, payment: PaymentDetails) -> None:
        selectors = DOM.PAYMENT
        mutation = self.timeouts.mutation

        # The card field is the first thing on the checkout page, so allow for the page load
        self._fill(selectors.card_number, payment.card_number, self.timeouts.navigation)
        self.driver.choose_option(selectors.exp_month_combobox, f"{payment.exp_month:02d}", mutation)
        self.driver.choose_option(selectors.exp_year_combobox, str(payment.exp_year), mutation)
        self._fill(selectors.cvv, payment.cvv, mutation)
        self._fill(selectors.billing_address, payment.billing_address, mutation)
        self._fill(selectors.postal_code, payment.postal_code, mutation)
        self.driver.choose_option(selectors.country_combobox, payment.country, mutation)
        logger.info("Payment information filled")

    def _fill(self, stable_id: str, value: str, timeout: float) -> None:
        self.driver.fill(self.driver.locate(stable_id, timeout), value)

    def _accept_terms(self) -> None:
        self.driver.check(self.driver.locate(DOM.PAYMENT.terms_checkbox, self.timeouts.mutation))
        logger.info("Terms agreed")

    def _submit(self) -> None:
        self.driver.click(
            self.driver.locate(DOM.CONFIRMATION.submit_button, self.timeouts.mutation)
        )
        logger.info("Booking submitted")

    def _await_confirmation(self) -> bool:
        fragment = DOM.CONFIRMATION.confirmation_url_fragment
        try:
            confirmed = self.driver.wait_for(
                lambda: fragment in self.driver.current_url(),
                self.timeouts.confirmation,
            )
        except DriverError as e:
            logger.warning(f"Could not check for the confirmation page: {e}")
            confirmed = False

        if confirmed:
            logger.info("Booking confirmed")
        else:
            logger.warning("Could not verify confirmation page, but booking may have succeeded")
        return confirmed
