import logging
from twilio.rest import Client
from twilio.http.http_client import TwilioHttpClient
from twilio.base.exceptions import TwilioException
from ...core.config import Settings
from ...exceptions import DeliveryFailure
from ...application.ports.sms_channel import SmsChannel

logger = logging.getLogger(__name__)

class TwilioSmsChannel(SmsChannel):
    def __init__(self, client: Client, from_number: str):
        self.client = client
        self.from_number = from_number

    @classmethod
    def from_settings(cls, settings: Settings) -> "TwilioSmsChannel":
        # requests to Twilio give up after TWILIO_TIMEOUT_SECONDS
        http_client = TwilioHttpClient(timeout=settings.TWILIO_TIMEOUT_SECONDS)
        client = Client(settings.TWILIO_ACCOUNT_SID, settings.TWILIO_AUTH_TOKEN, http_client=http_client)
        return cls(client, settings.TWILIO_PHONE_NUMBER)

    def send(self, phone_number: str, message: str) -> bool:
        if not self.from_number:
            raise DeliveryFailure("Twilio sender number not configured")
        try:
            sent = self.client.messages.create(to=phone_number, from_=self.from_number, body=message)
        except TwilioException as e:
            raise DeliveryFailure(f"Twilio SMS send failed: {e}") from e
        logger.info(f"Twilio SMS queued: sid={sent.sid} status={sent.status}")
        if sent.status in ("failed", "undelivered"):
            raise DeliveryFailure(f"Twilio reported status {sent.status} for {sent.sid}")
        return True
