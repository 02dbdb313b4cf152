"""
Tests for golfbot/services/auth_guard.py.
"""

import pytest

from golfbot.exceptions import LoginFailed, MissingCredentials
from golfbot.models.schemas import Credentials
from golfbot.providers.teeitup_dom_schema import DOM
from golfbot.providers.wait_helper import StepTimeouts
from golfbot.services.auth_guard import AuthGuard
from tests.fixtures.fake_venue import BASE_URL, FakeVenue


@pytest.fixture
def credentials() -> Credentials:
    return Credentials(identity="golfer@example.com", secret="hunter2")


@pytest.fixture
def venue() -> FakeVenue:
    venue = FakeVenue()
    venue.navigate(f"{BASE_URL}/teetimes?date=2025-10-31")
    return venue


class TestEnsureReady:
    """Tests for the secret presence check."""

    def test_all_present(self) -> None:
        """Test that nothing is raised when every secret has a value."""
        AuthGuard.ensure_ready({"GOLF_EMAIL": "a@example.com", "GOLF_PASSWORD": "pw"})

    def test_reports_every_missing_name(self) -> None:
        """Test that all missing names are reported in order."""
        with pytest.raises(MissingCredentials) as exc_info:
            AuthGuard.ensure_ready(
                {"GOLF_EMAIL": "a@example.com", "GOLF_PASSWORD": "", "CVV": None, "CREDIT_CARD": "  "}
            )
        assert exc_info.value.names == ["GOLF_PASSWORD", "CVV", "CREDIT_CARD"]
        assert "GOLF_PASSWORD, CVV, CREDIT_CARD" in str(exc_info.value)


class TestLogin:
    """Tests for the login sequence."""

    def test_login_fills_and_submits(self, venue: FakeVenue, credentials: Credentials) -> None:
        """Test that the dialog is opened, filled and submitted."""
        guard = AuthGuard(StepTimeouts())
        guard.login(venue, credentials)

        assert guard.logged_in is True
        assert venue.logged_in is True
        assert venue.fields[DOM.LOGIN.email_input] == "golfer@example.com"
        assert venue.fields[DOM.LOGIN.password_input] == "hunter2"

    def test_login_runs_once(self, venue: FakeVenue, credentials: Credentials) -> None:
        """Test that a second login call is a no-op."""
        guard = AuthGuard(StepTimeouts())
        guard.login(venue, credentials)
        clicks = len([a for a in venue.actions if a.startswith("click:")])

        guard.login(venue, credentials)
        assert len([a for a in venue.actions if a.startswith("click:")]) == clicks

    def test_rejected_login_raises(self, venue: FakeVenue, credentials: Credentials) -> None:
        """Test that a login form that never closes raises LoginFailed."""
        venue.login_ok = False
        guard = AuthGuard(StepTimeouts())
        with pytest.raises(LoginFailed, match="still visible"):
            guard.login(venue, credentials)
        assert guard.logged_in is False

    def test_missing_login_button_raises(self, credentials: Credentials) -> None:
        """Test that a driver timeout during login becomes LoginFailed."""
        venue = FakeVenue()
        guard = AuthGuard(StepTimeouts())
        with pytest.raises(LoginFailed):
            guard.login(venue, credentials)
