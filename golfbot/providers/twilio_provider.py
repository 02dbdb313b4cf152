import asyncio
import logging

from twilio.base.exceptions import TwilioRestException
from twilio.rest import Client

from golfbot.config import settings
from golfbot.providers.sms_base import SMSProvider, SMSResult

logger = logging.getLogger(__name__)


class TwilioSMSProvider(SMSProvider):
    """Twilio implementation of the SMS provider interface."""

    def __init__(self) -> None:
        self._client: Client | None = None

    @property
    def client(self) -> Client:
        """Lazily initialize and return the Twilio client."""
        if self._client is None:
            self._client = Client(settings.twilio_account_sid, settings.twilio_auth_token)
        return self._client

    async def send_sms(self, to_number: str, message: str) -> SMSResult:
        """
        Send a message via Twilio.

        Without Twilio credentials the message is only logged.

        Args:
            to_number: The recipient's phone number in E.164 format.
            message: The message content to send.

        Returns:
            SMSResult with success status and message SID or error message.
        """
        if not settings.twilio_account_sid or not settings.twilio_auth_token:
            logger.info(f"[SMS Mock] To: {to_number}, Message: {message}")
            return SMSResult(success=True, message_sid="mock_sid")

        try:
            result = await asyncio.to_thread(
                self.client.messages.create,
                body=message,
                from_=settings.twilio_phone_number,
                to=to_number,
            )
            return SMSResult(success=True, message_sid=result.sid)
        except TwilioRestException as e:
            logger.error(f"Error sending SMS: {e}")
            return SMSResult(success=False, error_message=str(e))


class MockSMSProvider(SMSProvider):
    """Mock SMS provider for testing and development."""

    def __init__(self) -> None:
        self.sent_messages: list[dict] = []

    async def send_sms(self, to_number: str, message: str) -> SMSResult:
        """Record the message and return a mock success result."""
        self.sent_messages.append({"to": to_number, "message": message})
        logger.info(f"[SMS Mock] To: {to_number}, Message: {message}")
        return SMSResult(success=True, message_sid=f"mock_sid_{len(self.sent_messages)}")
