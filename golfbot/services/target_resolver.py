"""
Target date resolution.

The booking date comes from the CLI, the TARGET_DATE setting, or a default
policy. Both default policies are pure functions of "today" so they can be
tested without a clock.
"""

import re
from datetime import date, datetime, timedelta

import pytz

from golfbot.config import DefaultDatePolicy, settings
from golfbot.exceptions import InvalidDateFormat

DATE_PATTERN = re.compile(r"\d{4}-\d{2}-\d{2}")


def today_in_timezone(timezone: str | None = None) -> date:
    """Today's date at the venue."""
    tz = pytz.timezone(timezone or settings.timezone)
    return datetime.now(tz).date()


def days_ahead(today: date, days: int = 7) -> date:
    return today + timedelta(days=days)


def next_weekday(today: date, weekday: int = 4) -> date:
    """Next occurrence of ``weekday`` (Monday == 0) strictly after ``today``."""
    if not 0 <= weekday <= 6:
        raise ValueError(f"weekday must be between 0 and 6, got {weekday}")
    delta = (weekday - today.weekday()) % 7
    return today + timedelta(days=delta or 7)


def default_target_date(
    policy: DefaultDatePolicy | None = None,
    today: date | None = None,
) -> date:
    policy = policy or settings.default_date_policy
    today = today or today_in_timezone()
    if policy == DefaultDatePolicy.NEXT_WEEKDAY:
        return next_weekday(today, settings.default_weekday)
    return days_ahead(today, settings.days_in_advance)


def parse_target_date(raw: str) -> date:
    """Parse a strict YYYY-MM-DD string into a real calendar date."""
    if not DATE_PATTERN.fullmatch(raw):
        raise InvalidDateFormat(raw)
    try:
        return date.fromisoformat(raw)
    except ValueError as e:
        raise InvalidDateFormat(raw) from e


def resolve(
    raw_date: str | None = None,
    policy: DefaultDatePolicy | None = None,
    today: date | None = None,
) -> date:
    """
    Resolve the booking target date.

    Args:
        raw_date: User supplied date (YYYY-MM-DD). Empty or None selects the default.
        policy: Default date policy override.
        today: Reference date for the default policy; venue-local today if None.

    Returns:
        The target date.

    Raises:
        InvalidDateFormat: If raw_date is not a valid YYYY-MM-DD date.
    """
    if raw_date:
        return parse_target_date(raw_date)
    return default_target_date(policy=policy, today=today)
