"""
Tests for golfbot/services/target_resolver.py.
"""

from datetime import date
from unittest.mock import patch

import pytest

from golfbot.config import DefaultDatePolicy
from golfbot.exceptions import InvalidDateFormat
from golfbot.services.target_resolver import (
    days_ahead,
    default_target_date,
    next_weekday,
    parse_target_date,
    resolve,
)

# A Sunday
TODAY = date(2025, 10, 26)


class TestParseTargetDate:
    """Tests for strict YYYY-MM-DD parsing."""

    def test_valid_date(self) -> None:
        """Test that a well formed date is parsed."""
        assert parse_target_date("2025-10-31") == date(2025, 10, 31)

    @pytest.mark.parametrize("raw", [" 2025-10-31 ", "2025-10-31\n", "\t2025-10-31"])
    def test_surrounding_whitespace_rejected(self, raw: str) -> None:
        """Test that only the bare YYYY-MM-DD shape is accepted."""
        with pytest.raises(InvalidDateFormat):
            parse_target_date(raw)

    @pytest.mark.parametrize(
        "raw",
        ["31-10-2025", "2025/10/31", "2025-1-31", "20251031", "tomorrow", "", "2025-10-31T08:00"],
    )
    def test_bad_shape_rejected(self, raw: str) -> None:
        """Test that anything but YYYY-MM-DD is rejected."""
        with pytest.raises(InvalidDateFormat):
            parse_target_date(raw)

    def test_impossible_calendar_date_rejected(self) -> None:
        """Test that a well shaped but impossible date is rejected."""
        with pytest.raises(InvalidDateFormat):
            parse_target_date("2025-02-30")

    def test_error_message_mentions_format(self) -> None:
        """Test that the error tells the user the expected format."""
        with pytest.raises(InvalidDateFormat) as exc_info:
            parse_target_date("31-10-2025")
        assert "YYYY-MM-DD" in str(exc_info.value)
        assert exc_info.value.raw == "31-10-2025"


class TestDefaultPolicies:
    """Tests for the default date policies."""

    def test_days_ahead(self) -> None:
        """Test today + 7 days."""
        assert days_ahead(TODAY, 7) == date(2025, 11, 2)

    def test_next_friday_from_sunday(self) -> None:
        """Test the next Friday after a Sunday."""
        assert next_weekday(TODAY, 4) == date(2025, 10, 31)

    def test_next_friday_from_friday_is_a_week_later(self) -> None:
        """Test that the next Friday from a Friday is strictly in the future."""
        assert next_weekday(date(2025, 10, 31), 4) == date(2025, 11, 7)

    def test_invalid_weekday(self) -> None:
        """Test that weekday must be 0-6."""
        with pytest.raises(ValueError):
            next_weekday(TODAY, 7)

    def test_policy_selection(self) -> None:
        """Test that the named policy decides the default date."""
        with patch("golfbot.services.target_resolver.settings") as mock_settings:
            mock_settings.days_in_advance = 7
            mock_settings.default_weekday = 4
            assert default_target_date(DefaultDatePolicy.DAYS_AHEAD, TODAY) == date(2025, 11, 2)
            assert default_target_date(DefaultDatePolicy.NEXT_WEEKDAY, TODAY) == date(2025, 10, 31)

    def test_policy_from_settings(self) -> None:
        """Test that the configured policy is used when none is passed."""
        with patch("golfbot.services.target_resolver.settings") as mock_settings:
            mock_settings.default_date_policy = DefaultDatePolicy.NEXT_WEEKDAY
            mock_settings.default_weekday = 4
            assert default_target_date(today=TODAY) == date(2025, 10, 31)

    def test_default_is_deterministic(self) -> None:
        """Test that computing the default twice for the same instant gives the same date."""
        first = default_target_date(DefaultDatePolicy.DAYS_AHEAD, TODAY)
        second = default_target_date(DefaultDatePolicy.DAYS_AHEAD, TODAY)
        assert first == second

    def test_default_uses_venue_today(self) -> None:
        """Test that the default policy reads today from the venue timezone."""
        with patch(
            "golfbot.services.target_resolver.today_in_timezone", return_value=TODAY
        ) as mock_today:
            assert default_target_date(DefaultDatePolicy.DAYS_AHEAD) == days_ahead(TODAY, 7)
            mock_today.assert_called_once()


class TestResolve:
    """Tests for resolve."""

    def test_explicit_date_wins(self) -> None:
        """Test that an explicit date is used as given."""
        assert resolve("2025-12-25", today=TODAY) == date(2025, 12, 25)

    def test_missing_date_uses_default(self) -> None:
        """Test that no input falls back to the default policy."""
        assert resolve(None, DefaultDatePolicy.NEXT_WEEKDAY, TODAY) == date(2025, 10, 31)

    def test_empty_string_uses_default(self) -> None:
        """Test that an empty string counts as no input."""
        assert resolve("", DefaultDatePolicy.DAYS_AHEAD, TODAY) == date(2025, 11, 2)

    def test_invalid_date_raises(self) -> None:
        """Test that an invalid date raises InvalidDateFormat."""
        with pytest.raises(InvalidDateFormat):
            resolve("31-10-2025")
