"""
Early tee time checker.

Polls the partner reservation API for a window of days, keeps tee times that
start before a cutoff hour and texts a summary for every day that has some.
Meant to be run on a schedule; scheduling itself is left to cron or similar.
"""

import asyncio
import logging
from datetime import date, timedelta

from golfbot.config import settings
from golfbot.exceptions import AuthenticationExpired, CheckerError, RateLimited
from golfbot.models.schemas import AvailabilityStatus, DayAvailability, TeeTimeSlot
from golfbot.providers.jcgolf_client import JCGolfClient
from golfbot.providers.sms_base import SMSProvider, SMSResult
from golfbot.services.availability import classify_availability

logger = logging.getLogger(__name__)

RULE_WIDTH = 60


def format_summary(found: list[DayAvailability], days_checked: int) -> str:
    """
    Build the end-of-run report for a checker run.

    Lists the total number of early tee times, how many of the checked days
    had any, a count per course and every tee time per date in start order.
    """
    lines = ["=" * RULE_WIDTH, "TEE TIME CHECK SUMMARY", "=" * RULE_WIDTH]

    if not found:
        lines.append(f"No early tee times found in {days_checked} day(s) checked")
        lines.append("=" * RULE_WIDTH)
        return "\n".join(lines)

    total = sum(len(day.slots) for day in found)
    lines.append(f"Total early tee times found: {total}")
    lines.append(f"Days with early times: {len(found)}/{days_checked}")
    lines.append("")

    per_course: dict[str, int] = {}
    for day in found:
        for slot in day.slots:
            per_course[slot.course_name] = per_course.get(slot.course_name, 0) + 1
    lines.append("Course breakdown:")
    for course, count in per_course.items():
        lines.append(f"  {course}: {count} early tee time(s)")

    for day in sorted(found, key=lambda d: d.date):
        lines.append("")
        lines.append(f"{day.date.strftime('%A, %B %d, %Y')} ({len(day.slots)}):")
        for slot in sorted(day.slots, key=lambda s: s.start_time):
            lines.append(f"  - {slot.describe()}")

    lines.append("=" * RULE_WIDTH)
    return "\n".join(lines)


class TeeTimeChecker:
    def __init__(
        self,
        client: JCGolfClient,
        sms_provider: SMSProvider,
        notify_to: str | None = None,
        request_delay: float | None = None,
        rate_limit_delay: float | None = None,
    ) -> None:
        self.client = client
        self.sms_provider = sms_provider
        self.notify_to = notify_to if notify_to is not None else settings.notify_phone_number
        self.request_delay = (
            settings.request_delay_seconds if request_delay is None else request_delay
        )
        self.rate_limit_delay = (
            settings.rate_limit_delay_seconds if rate_limit_delay is None else rate_limit_delay
        )
        self.auth_failed = False

    async def check_day(self, search_date: date, cutoff_hour: int) -> DayAvailability:
        """Fetch one day and keep only tee times starting before ``cutoff_hour``."""
        slots = await asyncio.to_thread(self.client.fetch_tee_times, search_date)
        early = [slot for slot in slots if slot.start_time.hour < cutoff_hour]
        status = classify_availability(no_results_seen=not slots, slot_count=len(early))
        logger.info(
            f"Found {len(early)} early tee times (before {cutoff_hour}:00) "
            f"for {search_date.isoformat()}"
        )
        return DayAvailability(date=search_date, slots=early, status=status)

    async def scan_window(
        self, start_date: date, days: int, cutoff_hour: int
    ) -> list[DayAvailability]:
        """
        Check ``days`` consecutive dates starting at ``start_date``.

        Returns only the days that have early tee times. An authentication
        failure stops the scan (every later request would fail too) and sets
        ``auth_failed``; other per-day errors are logged and skipped.
        """
        self.auth_failed = False
        found: list[DayAvailability] = []

        for offset in range(days):
            search_date = start_date + timedelta(days=offset)
            try:
                day = await self.check_day(search_date, cutoff_hour)
            except AuthenticationExpired as e:
                logger.error(f"{e} - stopping further checks. Please update your bearer token.")
                self.auth_failed = True
                break
            except RateLimited:
                logger.warning(
                    f"Rate limited - waiting {self.rate_limit_delay:g} seconds before continuing..."
                )
                await asyncio.sleep(self.rate_limit_delay)
                continue
            except CheckerError as e:
                logger.error(f"Error checking date {search_date.isoformat()}: {e}")
                continue

            if day.status == AvailabilityStatus.FOUND:
                found.append(day)
            else:
                logger.info(f"No early tee times found for {search_date.isoformat()}")

            if offset < days - 1 and self.request_delay > 0:
                await asyncio.sleep(self.request_delay)

        return found

    async def notify(self, slots: list[TeeTimeSlot], search_date: date) -> SMSResult:
        result = await self.sms_provider.send_early_tee_times(self.notify_to, search_date, slots)
        if result.success:
            logger.info(f"Notification sent to {self.notify_to} for {search_date.isoformat()}")
        else:
            logger.error(f"Failed to send notification: {result.error_message}")
        return result

    async def run(
        self,
        start_date: date,
        days: int | None = None,
        cutoff_hour: int | None = None,
    ) -> list[DayAvailability]:
        """Scan the window and notify for every day with early tee times."""
        days = settings.search_days_ahead if days is None else days
        cutoff_hour = settings.max_tee_hour if cutoff_hour is None else cutoff_hour
        logger.info(
            f"Starting tee time check: {days} day(s) from {start_date.isoformat()}, "
            f"before {cutoff_hour}:00"
        )

        found = await self.scan_window(start_date, days, cutoff_hour)
        logger.info(f"\n{format_summary(found, days)}")

        for day in found:
            await self.notify(day.slots, day.date)

        if found:
            logger.info(f"Found early tee times on {len(found)} day(s)!")
        elif self.auth_failed:
            await self.sms_provider.send_checker_error(
                self.notify_to, "authentication failed", start_date
            )
            raise AuthenticationExpired(
                "Check failed due to authentication error. "
                "Please update JC_GOLF_BEARER_TOKEN."
            )
        else:
            logger.info(f"No early tee times found in the next {days} days")
        return found
