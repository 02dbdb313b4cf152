from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import date

from golfbot.models.schemas import TeeTimeSlot


@dataclass
class SMSResult:
    success: bool
    message_sid: str | None = None
    error_message: str | None = None


class SMSProvider(ABC):
    """Abstract base class for SMS providers."""

    @abstractmethod
    async def send_sms(self, to_number: str, message: str) -> SMSResult:
        """
        Send an SMS message.

        Args:
            to_number: The recipient's phone number.
            message: The message content.

        Returns:
            SMSResult with success status and message SID or error.
        """
        pass

    async def send_early_tee_times(
        self, to_number: str, search_date: date, slots: list[TeeTimeSlot]
    ) -> SMSResult:
        """Send the list of early tee times found for one day."""
        day = search_date.strftime("%a %b %d")
        ordered = sorted(slots, key=lambda slot: slot.start_time)
        listed = "\n".join(f"- {slot.describe()}" for slot in ordered)
        message = f"Early tee times found for {day} ({len(slots)}):\n{listed}"
        return await self.send_sms(to_number, message)

    async def send_checker_error(self, to_number: str, reason: str, search_date: date) -> SMSResult:
        """Send a tee time checker failure notification SMS."""
        message = (
            f"Tee time checker failed on {search_date.isoformat()}: {reason}. "
            "Check the logs and refresh the bearer token if it has expired."
        )
        return await self.send_sms(to_number, message)
