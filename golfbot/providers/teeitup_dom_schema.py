"""
Centralized DOM schema for the TeeItUp booking site.

All selectors used by the booking flow are defined here as named constants,
grouped by funnel screen. The site exposes most controls through
``data-testid`` attributes; the payment fields that have no test id are
addressed by their accessible label instead.

When the TeeItUp markup changes, update selectors ONLY in this file.
"""

from dataclasses import dataclass


def by_test_id(value: str) -> str:
    """CSS selector for an element carrying ``data-testid=value``."""
    return f'[data-testid="{value}"]'


@dataclass(frozen=True)
class LoginSelectors:
    """Selectors for the login/sign-up dialog."""

    open_dialog: str = by_test_id("core-login-signup")
    email_input: str = by_test_id("login-email-component")
    password_input: str = by_test_id("login-password-component")
    submit_button: str = by_test_id("login-button")


@dataclass(frozen=True)
class TeeSheetSelectors:
    """Selectors for the date-scoped tee sheet listing."""

    no_results_header: str = by_test_id("no-records-found-header")
    # One per bookable tee time, rendered earliest first
    choose_rate_button: str = by_test_id("teetimes_choose_rate_button")


@dataclass(frozen=True)
class GolferSelectors:
    """Selectors for the player count panel shown after a tee time is chosen."""

    # Any of the golfer radios; used to tell whether the panel is open
    any_golfer_radio: str = '[data-testid^="golfer-select-radio-"]'
    golfer_radio_template: str = '[data-testid="golfer-select-radio-{quantity}"]'
    add_to_cart_button: str = by_test_id("add-to-cart-button")

    def golfer_radio(self, quantity: int) -> str:
        return self.golfer_radio_template.format(quantity=quantity)


@dataclass(frozen=True)
class CartSelectors:
    checkout_button: str = by_test_id("shopping-cart-drawer-checkout-btn")


@dataclass(frozen=True)
class PaymentSelectors:
    """Selectors for the checkout payment form."""

    card_number: str = f'{by_test_id("credit-card-number")} input, input{by_test_id("credit-card-number")}'
    exp_month_combobox: str = f'{by_test_id("credit-card-exp-month")} [role="combobox"]'
    exp_year_combobox: str = f'{by_test_id("credit-card-exp-year")} [role="combobox"]'
    cvv: str = 'input[aria-label="CVV"]'
    billing_address: str = 'input[aria-label="Billing Address"]'
    postal_code: str = 'input[aria-label="Postal Code"]'
    country_combobox: str = '[role="combobox"][aria-label^="Opens list of countries"]'
    # Options of whichever combobox is open
    option_xpath_template: str = "//*[@role='option' and normalize-space(.)='{text}']"
    terms_checkbox: str = 'input[type="checkbox"][aria-label^="I agree to the Terms"]'

    def option(self, text: str) -> str:
        return self.option_xpath_template.format(text=text)


@dataclass(frozen=True)
class ConfirmationSelectors:
    submit_button: str = by_test_id("make-your-reservation-btn")
    # Fragment of the URL the site redirects to once the reservation is made
    confirmation_url_fragment: str = "/confirmation"


@dataclass(frozen=True)
class TeeItUpDOMSchema:
    """Top-level container grouping all selector categories."""

    LOGIN: LoginSelectors = LoginSelectors()
    TEE_SHEET: TeeSheetSelectors = TeeSheetSelectors()
    GOLFERS: GolferSelectors = GolferSelectors()
    CART: CartSelectors = CartSelectors()
    PAYMENT: PaymentSelectors = PaymentSelectors()
    CONFIRMATION: ConfirmationSelectors = ConfirmationSelectors()


# Single import point: `from golfbot.providers.teeitup_dom_schema import DOM`
DOM = TeeItUpDOMSchema()


def tee_sheet_url(base_url: str, course_id: int, date_str: str, holes: int) -> str:
    """URL of the tee sheet scoped to one date."""
    return (
        f"{base_url.rstrip('/')}/teetimes"
        f"?course={course_id}&date={date_str}&holes={holes}&max=999999"
    )
