"""
REST client for the JC Golf online reservation API.

Only the tee time search endpoint is used. The bearer token is supplied by the
caller; acquiring or refreshing it is handled outside this package.
"""

import logging
from datetime import date, datetime
from typing import Any

import requests

from golfbot.config import settings
from golfbot.exceptions import AccessForbidden, AuthenticationExpired, CheckerError, RateLimited
from golfbot.models.schemas import TeeTimeSlot

logger = logging.getLogger(__name__)

REQUEST_TIMEOUT_SECONDS = 30

# Fixed client identification headers expected by the reservation API
API_HEADERS = {
    "x-componentid": "1",
    "x-ismobile": "false",
    "x-moduleid": "7",
    "x-productid": "1",
    "x-siteid": "16",
    "x-terminalid": "3",
    "x-timezone-offset": "420",
    "x-timezoneid": "America/Los_Angeles",
    "Content-Type": "application/json",
}


class JCGolfClient:
    def __init__(
        self,
        bearer_token: str | None = None,
        base_url: str | None = None,
        session: requests.Session | None = None,
        timeout: float = REQUEST_TIMEOUT_SECONDS,
    ) -> None:
        token = bearer_token if bearer_token is not None else settings.jc_golf_bearer_token
        self.base_url = (base_url or settings.jc_golf_api_base_url).rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update(API_HEADERS)
        if token:
            self.session.headers["Authorization"] = (
                token if token.lower().startswith("bearer ") else f"Bearer {token}"
            )

    def search_params(self, search_date: date) -> dict[str, str]:
        return {
            # e.g. "Sun Oct 26 2025"
            "searchDate": search_date.strftime("%a %b %d %Y"),
            "holes": "0",
            "numberOfPlayer": "0",
            "courseIds": settings.course_ids,
            "searchTimeType": "0",
            "teeOffTimeMin": "0",
            "teeOffTimeMax": "23",
            "isChangeTeeOffTime": "true",
            "teeSheetSearchView": "5",
            "classCode": settings.class_code,
            "defaultOnlineRate": "N",
            "isUseCapacityPricing": "false",
            "memberStoreId": settings.member_store_id,
            "searchType": "1",
        }

    def fetch_tee_times(self, search_date: date) -> list[TeeTimeSlot]:
        """
        Fetch every tee time listed for ``search_date``.

        Raises:
            AuthenticationExpired: HTTP 401, the bearer token needs refreshing.
            AccessForbidden: HTTP 403.
            RateLimited: HTTP 429.
            CheckerError: Network failures, other HTTP errors, malformed payloads.
        """
        url = f"{self.base_url}/TeeTimes"
        logger.info(f"Checking tee times for date: {search_date.isoformat()}")
        try:
            response = self.session.get(
                url, params=self.search_params(search_date), timeout=self.timeout
            )
        except requests.RequestException as e:
            logger.error(f"Network error - no response received: {e}")
            raise CheckerError("Network error - unable to reach JC Golf API") from e

        if response.status_code == 401:
            raise AuthenticationExpired("Authentication failed - Bearer token may be expired")
        if response.status_code == 403:
            raise AccessForbidden("Access forbidden - Check bearer token permissions")
        if response.status_code == 429:
            raise RateLimited("Too Many Requests")
        if response.status_code != 200:
            raise CheckerError(f"API returned status {response.status_code}")

        try:
            payload = response.json()
        except ValueError as e:
            raise CheckerError("API returned a non-JSON response") from e
        if not isinstance(payload, list):
            raise CheckerError(f"Unexpected response shape: {type(payload).__name__}")

        slots = [slot for slot in (self.parse_tee_time(item) for item in payload) if slot]
        logger.info(f"Found {len(slots)} total tee times for {search_date.isoformat()}")
        return slots

    @staticmethod
    def parse_tee_time(item: dict[str, Any]) -> TeeTimeSlot | None:
        """Convert one API record into a TeeTimeSlot; None if it has no usable start time."""
        raw_start = item.get("startTime")
        if not raw_start:
            return None
        try:
            start_time = datetime.fromisoformat(str(raw_start))
        except ValueError:
            logger.debug(f"Skipping tee time with unparseable startTime: {raw_start!r}")
            return None

        rate = item.get("defaultBookingRate") or {}
        return TeeTimeSlot(
            course_name=item.get("courseName") or "Unknown course",
            start_time=start_time,
            min_players=item.get("minPlayer"),
            max_players=item.get("maxPlayer"),
            rate_name=rate.get("bookingRateTypeName"),
        )
