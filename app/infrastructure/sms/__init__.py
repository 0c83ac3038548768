import logging

from ...core.config import Settings
from ...application.ports.sms_channel import SmsChannel
from .logging_sms import LoggingSmsChannel

logger = logging.getLogger(__name__)


def build_sms_channel(settings: Settings) -> SmsChannel:
    if settings.SMS_BACKEND == "log":
        if not settings.DEBUG:
            raise RuntimeError("SMS_BACKEND=log writes codes to the log and requires DEBUG=true")
        logger.warning("Using logging SMS channel; codes are written to the log")
        return LoggingSmsChannel()
    if settings.SMS_BACKEND != "twilio":
        raise RuntimeError(f"Unknown SMS_BACKEND: {settings.SMS_BACKEND}")
    if not settings.twilio_configured:
        raise RuntimeError("SMS_BACKEND=twilio but Twilio credentials are not configured")
    from .twilio_sms import TwilioSmsChannel
    return TwilioSmsChannel.from_settings(settings)
