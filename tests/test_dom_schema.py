"""
DOM schema tests against representative TeeItUp markup.

These tests validate that the CSS selectors in the DOM schema match the
structure of the booking site's pages, without needing live access.
"""

import pytest
from bs4 import BeautifulSoup

from golfbot.providers.teeitup_dom_schema import DOM, by_test_id, tee_sheet_url

TEE_SHEET_HTML = """
<html><body>
  <header><button data-testid="core-login-signup">Log In</button></header>
  <div role="dialog">
    <input data-testid="login-email-component" type="email" />
    <input data-testid="login-password-component" type="password" />
    <button data-testid="login-button">Log In</button>
  </div>
  <ul class="teetimes">
    <li><span>6:30 AM</span><button data-testid="teetimes_choose_rate_button">Choose Rate</button></li>
    <li><span>6:40 AM</span><button data-testid="teetimes_choose_rate_button">Choose Rate</button></li>
  </ul>
  <div class="golfers">
    <input type="radio" data-testid="golfer-select-radio-1" />
    <input type="radio" data-testid="golfer-select-radio-2" />
    <input type="radio" data-testid="golfer-select-radio-3" disabled />
    <input type="radio" data-testid="golfer-select-radio-4" aria-disabled="true" />
    <button data-testid="add-to-cart-button">Add to Cart</button>
  </div>
  <aside><button data-testid="shopping-cart-drawer-checkout-btn">Checkout</button></aside>
</body></html>
"""

NO_RESULTS_HTML = """
<html><body>
  <h2 data-testid="no-records-found-header">No tee times found</h2>
</body></html>
"""

CHECKOUT_HTML = """
<html><body>
  <div data-testid="credit-card-number"><input type="text" /></div>
  <div data-testid="credit-card-exp-month"><div role="combobox">MM</div></div>
  <div data-testid="credit-card-exp-year"><div role="combobox">YYYY</div></div>
  <input aria-label="CVV" type="text" />
  <input aria-label="Billing Address" type="text" />
  <input aria-label="Postal Code" type="text" />
  <div role="combobox" aria-label="Opens list of countries for billing">United States</div>
  <input type="checkbox" aria-label="I agree to the Terms and Conditions" />
  <button data-testid="make-your-reservation-btn">Make Your Reservation</button>
</body></html>
"""


@pytest.fixture
def tee_sheet() -> BeautifulSoup:
    return BeautifulSoup(TEE_SHEET_HTML, "html.parser")


@pytest.fixture
def checkout_page() -> BeautifulSoup:
    return BeautifulSoup(CHECKOUT_HTML, "html.parser")


class TestLoginSelectors:
    """Tests for the login dialog selectors."""

    def test_all_login_controls_match(self, tee_sheet: BeautifulSoup) -> None:
        for selector in (
            DOM.LOGIN.open_dialog,
            DOM.LOGIN.email_input,
            DOM.LOGIN.password_input,
            DOM.LOGIN.submit_button,
        ):
            assert len(tee_sheet.select(selector)) == 1, selector


class TestTeeSheetSelectors:
    """Tests for the tee sheet selectors."""

    def test_slots_in_rendered_order(self, tee_sheet: BeautifulSoup) -> None:
        """Test that every tee time button is found, earliest first."""
        buttons = tee_sheet.select(DOM.TEE_SHEET.choose_rate_button)
        assert len(buttons) == 2
        assert buttons[0].find_previous_sibling("span").get_text() == "6:30 AM"

    def test_no_results_header(self) -> None:
        page = BeautifulSoup(NO_RESULTS_HTML, "html.parser")
        assert page.select_one(DOM.TEE_SHEET.no_results_header) is not None
        assert page.select(DOM.TEE_SHEET.choose_rate_button) == []

    def test_no_results_absent_on_listing(self, tee_sheet: BeautifulSoup) -> None:
        assert tee_sheet.select_one(DOM.TEE_SHEET.no_results_header) is None


class TestGolferSelectors:
    """Tests for the player count panel selectors."""

    @pytest.mark.parametrize("quantity", [1, 2, 3, 4])
    def test_golfer_radio(self, tee_sheet: BeautifulSoup, quantity: int) -> None:
        radio = tee_sheet.select_one(DOM.GOLFERS.golfer_radio(quantity))
        assert radio is not None
        assert radio["data-testid"] == f"golfer-select-radio-{quantity}"

    def test_any_golfer_radio(self, tee_sheet: BeautifulSoup) -> None:
        """Test that the panel-open probe matches every radio."""
        assert len(tee_sheet.select(DOM.GOLFERS.any_golfer_radio)) == 4

    def test_golfer_radio_template(self) -> None:
        assert DOM.GOLFERS.golfer_radio(3) == '[data-testid="golfer-select-radio-3"]'

    def test_cart_buttons(self, tee_sheet: BeautifulSoup) -> None:
        assert tee_sheet.select_one(DOM.GOLFERS.add_to_cart_button) is not None
        assert tee_sheet.select_one(DOM.CART.checkout_button) is not None


class TestPaymentSelectors:
    """Tests for the checkout form selectors."""

    def test_card_number_targets_the_input(self, checkout_page: BeautifulSoup) -> None:
        """Test that the card selector resolves to the input inside its wrapper."""
        matches = checkout_page.select(DOM.PAYMENT.card_number)
        assert len(matches) == 1
        assert matches[0].name == "input"

    @pytest.mark.parametrize(
        "selector",
        [
            DOM.PAYMENT.exp_month_combobox,
            DOM.PAYMENT.exp_year_combobox,
            DOM.PAYMENT.cvv,
            DOM.PAYMENT.billing_address,
            DOM.PAYMENT.postal_code,
            DOM.PAYMENT.country_combobox,
            DOM.PAYMENT.terms_checkbox,
            DOM.CONFIRMATION.submit_button,
        ],
    )
    def test_each_field_matches_once(self, checkout_page: BeautifulSoup, selector: str) -> None:
        assert len(checkout_page.select(selector)) == 1

    def test_option_xpath(self) -> None:
        assert DOM.PAYMENT.option("2027") == "//*[@role='option' and normalize-space(.)='2027']"


class TestSchemaHelpers:
    """Tests for the schema helpers and immutability."""

    def test_by_test_id(self) -> None:
        assert by_test_id("login-button") == '[data-testid="login-button"]'

    def test_schema_is_frozen(self) -> None:
        with pytest.raises(AttributeError):
            DOM.LOGIN.open_dialog = "#other"  # type: ignore[misc]

    def test_tee_sheet_url(self) -> None:
        url = tee_sheet_url("https://venue.example.com/", 1241, "2025-10-31", 18)
        assert url == "https://venue.example.com/teetimes?course=1241&date=2025-10-31&holes=18&max=999999"

    def test_confirmation_fragment(self) -> None:
        assert DOM.CONFIRMATION.confirmation_url_fragment in "https://venue.example.com/confirmation?id=1"
