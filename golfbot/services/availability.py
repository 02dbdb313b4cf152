"""
Availability scanning and slot selection.

``classify_availability`` is the single place that decides between "found",
"empty" and "ambiguous"; both the browser scanner and the REST checker use it.
"""

import logging

from golfbot.exceptions import NoAvailability
from golfbot.models.schemas import AvailabilityStatus, BookingRequest, Slot
from golfbot.providers.base import UIDriver
from golfbot.providers.teeitup_dom_schema import DOM, tee_sheet_url
from golfbot.providers.wait_helper import StepTimeouts

logger = logging.getLogger(__name__)


def classify_availability(
    no_results_seen: bool,
    slot_count: int,
    timed_out: bool = False,
) -> AvailabilityStatus:
    """
    Classify a query result.

    Args:
        no_results_seen: The venue explicitly said there is nothing available.
        slot_count: Number of bookable slots observed.
        timed_out: Neither an answer nor slots appeared before the deadline.
    """
    if no_results_seen:
        return AvailabilityStatus.EMPTY
    if slot_count > 0:
        return AvailabilityStatus.FOUND
    if timed_out:
        return AvailabilityStatus.AMBIGUOUS
    return AvailabilityStatus.EMPTY


class AvailabilityScanner:
    """Reads the date-scoped tee sheet and returns bookable slots earliest first."""

    def __init__(
        self,
        driver: UIDriver,
        base_url: str,
        timeouts: StepTimeouts | None = None,
    ) -> None:
        self.driver = driver
        self.base_url = base_url
        self.timeouts = timeouts or StepTimeouts.from_settings()

    def url_for(self, request: BookingRequest) -> str:
        return tee_sheet_url(
            self.base_url, request.course_id, request.target_date.isoformat(), request.holes
        )

    def scan(self, request: BookingRequest) -> list[Slot]:
        """
        Load the tee sheet for the request's date and collect the bookable slots.

        Raises:
            NoAvailability: If the venue reports no results, lists no slots, or
                neither appears in time (``ambiguous=True``).
        """
        target = request.target_date.isoformat()
        self.driver.navigate(self.url_for(request))
        logger.info(f"Loaded tee sheet for {target}")

        no_results = self.driver.wait_for(
            lambda: self.driver.is_present(DOM.TEE_SHEET.no_results_header),
            self.timeouts.probe,
        )
        handles = []
        if not no_results:
            handles = self.driver.locate_all(
                DOM.TEE_SHEET.choose_rate_button, self.timeouts.navigation
            )

        status = classify_availability(no_results, len(handles), timed_out=not handles)
        if status == AvailabilityStatus.EMPTY:
            logger.info(f"No tee times available for {target}")
            raise NoAvailability(target)
        if status == AvailabilityStatus.AMBIGUOUS:
            logger.warning(
                f"Neither tee times nor a 'no results' message appeared for {target} "
                f"within {self.timeouts.navigation:g}s"
            )
            raise NoAvailability(target, ambiguous=True)

        logger.info(f"Found {len(handles)} available tee times for {target}")
        return [Slot(handle=handle, position=index) for index, handle in enumerate(handles)]


def select_earliest(slots: list[Slot]) -> Slot:
    """
    Pick the earliest slot. The tee sheet renders chronologically, so this is
    simply the first one; later slots are never tried.
    """
    if not slots:
        raise ValueError("no slots to select from")
    return min(slots, key=lambda slot: slot.position)
