"""
Command line entry points.

    golfbot-book [DATE]      book the earliest tee time on DATE (YYYY-MM-DD)
    golfbot-check            look for early tee times and text a summary

Exit codes for golfbot-book: 0 booked, 1 not booked or error, 2 the booking
may have been made and needs manual verification.
"""

import argparse
import asyncio
import logging
import sys
from datetime import date

from pydantic import ValidationError

from golfbot.config import settings
from golfbot.exceptions import GolfBotError
from golfbot.models.schemas import (
    BookingOutcome,
    BookingRequest,
    Credentials,
    PaymentDetails,
    RunStatus,
)
from golfbot.providers.jcgolf_client import JCGolfClient
from golfbot.providers.twilio_provider import TwilioSMSProvider
from golfbot.services.auth_guard import AuthGuard
from golfbot.services.booking_service import BookingOrchestrator, format_outcome
from golfbot.services.target_resolver import resolve, today_in_timezone
from golfbot.services.tee_time_checker import TeeTimeChecker

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_INDETERMINATE = 2


def configure_logging(verbose: bool = False) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )
    # Selenium and urllib3 are chatty at DEBUG
    for noisy in ("selenium", "urllib3", "WDM"):
        logging.getLogger(noisy).setLevel(logging.WARNING)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="golfbot-book",
        description=(
            "Book the earliest available tee time, trying 4 players first and "
            "falling back to 3, 2 and 1."
        ),
        epilog="Example: golfbot-book 2025-10-31",
    )
    parser.add_argument(
        "date",
        nargs="?",
        help="Target date in YYYY-MM-DD format (default: TARGET_DATE or the default date policy)",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    return parser


def build_request(target_date: date) -> BookingRequest:
    """Build the immutable request for a run from settings. Secrets must already be checked."""
    return BookingRequest(
        target_date=target_date,
        credentials=Credentials(identity=settings.golf_email, secret=settings.golf_password),
        payment=PaymentDetails(
            card_number=settings.credit_card,
            exp_month=settings.card_exp_month,
            exp_year=settings.card_exp_year,
            cvv=settings.cvv,
            billing_address=settings.billing_address,
            postal_code=settings.postal_code,
            country=settings.billing_country,
        ),
        quantity_ladder=tuple(settings.quantity_ladder),
        course_id=settings.course_id,
        holes=settings.holes,
    )


def exit_code_for(outcome: BookingOutcome) -> int:
    if outcome.status == RunStatus.SUCCEEDED:
        return EXIT_OK
    if outcome.status == RunStatus.INDETERMINATE:
        return EXIT_INDETERMINATE
    return EXIT_FAILED


def main(argv: list[str] | None = None, orchestrator: BookingOrchestrator | None = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(args.verbose)

    try:
        target_date = resolve(args.date or settings.target_date or None)
        AuthGuard.ensure_ready(settings.booking_secrets())
        request = build_request(target_date)
    except GolfBotError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_FAILED
    except ValidationError as e:
        print(f"Error: invalid booking configuration: {e}", file=sys.stderr)
        return EXIT_FAILED

    logger.info(f"Target date: {target_date.isoformat()}")
    orchestrator = orchestrator or BookingOrchestrator()
    try:
        outcome = asyncio.run(orchestrator.book(request))
    except GolfBotError as e:
        print(f"Error: Booking failed: {e}", file=sys.stderr)
        return EXIT_FAILED

    report = format_outcome(outcome)
    code = exit_code_for(outcome)
    if code == EXIT_OK:
        print(report)
        return code

    print(report, file=sys.stderr)
    try:
        outcome.raise_for_status()
    except GolfBotError as e:
        print(f"Error: {e}", file=sys.stderr)
    return code


def build_check_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="golfbot-check",
        description="Look for early tee times and send a text message when some are found.",
    )
    parser.add_argument(
        "--days",
        type=int,
        default=settings.search_days_ahead,
        help="Number of days to check, starting today (default: %(default)s)",
    )
    parser.add_argument(
        "--cutoff-hour",
        type=int,
        default=settings.max_tee_hour,
        help="Only report tee times starting before this hour (default: %(default)s)",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    return parser


async def check_for_early_tee_times(days: int, cutoff_hour: int) -> int:
    checker = TeeTimeChecker(JCGolfClient(), TwilioSMSProvider())
    found = await checker.run(today_in_timezone(), days=days, cutoff_hour=cutoff_hour)
    return len(found)


def check_main(argv: list[str] | None = None) -> int:
    args = build_check_parser().parse_args(argv)
    configure_logging(args.verbose)

    try:
        AuthGuard.ensure_ready(settings.checker_secrets())
        asyncio.run(check_for_early_tee_times(args.days, args.cutoff_hour))
    except GolfBotError as e:
        print(f"Error: Tee time check failed: {e}", file=sys.stderr)
        return EXIT_FAILED
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
