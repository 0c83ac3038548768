import logging

from ...application.ports.sms_channel import SmsChannel

logger = logging.getLogger(__name__)


class LoggingSmsChannel(SmsChannel):
    """Development channel: writes the message to the log instead of sending it.

    Nothing is retained after the log line; only enabled with DEBUG.
    """

    def send(self, phone_number: str, message: str) -> bool:
        logger.warning(f"SMS to {phone_number}: {message}")
        return True
